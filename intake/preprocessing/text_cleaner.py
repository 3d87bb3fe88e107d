"""Shared text preprocessing utilities (French)."""

from __future__ import annotations

import re
from functools import lru_cache

from nltk.stem.snowball import SnowballStemmer

# ── Compiled patterns (compiled once at import time) ─────────────────────────
_APOSTROPHES = re.compile(r"[’‘`´]")
_TOKEN       = re.compile(r"\w+")
_MULTI       = re.compile(r"\s+")
_SENTENCE    = re.compile(r"[.!?\n]")
_CAPS_WORD   = re.compile(r"\b[A-ZÀ-Ý]{3,}\b")

_STEMMER = SnowballStemmer("french")

# Chat shorthand → full French form, applied on word boundaries
ABBREVIATIONS: dict[str, str] = {
    "pb": "problème",
    "probleme": "problème",
    "slt": "salut",
    "slm": "salut",
    "jr": "bonjour",
    "ordi": "ordinateur",
    "appli": "application",
    "applis": "applications",
    "msg": "message",
    "rdv": "rendez-vous",
    "svp": "s'il vous plaît",
    "stp": "s'il te plaît",
    "asap": "dès que possible",
    "mdp": "mot de passe",
    "pw": "mot de passe",
    "id": "identifiant",
    "config": "configuration",
    "admin": "administrateur",
    "doc": "documentation",
    "info": "information",
    "infos": "informations",
    "dispo": "disponible",
    "indispo": "indisponible",
}
_ABBREVIATION = re.compile(
    r"\b(" + "|".join(map(re.escape, ABBREVIATIONS)) + r")\b", re.IGNORECASE
)


def normalize(text: str | None) -> str:
    """Lower-case, unify apostrophes and collapse whitespace. ``None`` → ``""``."""
    if not text:
        return ""
    t = _APOSTROPHES.sub("'", str(text))
    return _MULTI.sub(" ", t.lower()).strip()


def tokenize(text: str | None) -> list[str]:
    """Split normalised text on non-word characters."""
    return _TOKEN.findall(normalize(text))


@lru_cache(maxsize=16_384)
def stem(token: str) -> str:
    return _STEMMER.stem(token)


def stem_tokens(text: str | None) -> list[str]:
    """Tokenize then stem — the unit shared by vocabularies and features."""
    return [stem(tok) for tok in tokenize(text)]


def improve_text(text: str | None) -> str:
    """Expand chat abbreviations (``pb`` → ``problème``) and tidy spacing.

    Case of the surrounding text is preserved; only the abbreviation itself is
    replaced.
    """
    if not text:
        return ""
    t = _APOSTROPHES.sub("'", str(text))
    t = _ABBREVIATION.sub(lambda m: ABBREVIATIONS[m.group(1).lower()], t)
    return _MULTI.sub(" ", t).strip()


def suggest_title(text: str | None, max_length: int = 50) -> str:
    """First sentence of the text, cut to ``max_length`` characters with ``...``."""
    if not text:
        return ""
    first = _SENTENCE.split(str(text).strip(), maxsplit=1)[0].strip()
    if not first:
        first = str(text).strip()
    if len(first) > max_length:
        return first[: max_length - 3].rstrip() + "..."
    return first


def is_emphatic(text: str | None, min_marks: int = 3) -> bool:
    """True when the text has ``min_marks`` "!" or ``min_marks`` ALL-CAPS words."""
    if not text:
        return False
    t = str(text)
    return t.count("!") >= min_marks or len(_CAPS_WORD.findall(t)) >= min_marks
