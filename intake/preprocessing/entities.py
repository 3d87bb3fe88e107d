"""Pattern-based extraction of ticket details from a French support message."""

from __future__ import annotations

import re
from dataclasses import dataclass

# ── Compiled patterns (compiled once at import time) ─────────────────────────
_MONTHS   = "janvier|février|mars|avril|mai|juin|juillet|août|septembre|octobre|novembre|décembre"
_WEEKDAYS = "lundi|mardi|mercredi|jeudi|vendredi|samedi|dimanche"

# numeric dates must not be cut out of an IP address or a longer code
_DATE  = re.compile(
    rf"(?<![\w./-])\d{{1,2}}[/.-]\d{{1,2}}[/.-]\d{{2,4}}(?![\w/-]|\.\d)"
    rf"|\b\d{{1,2}} (?:{_MONTHS}) \d{{2,4}}\b"
    rf"|\b(?:{_WEEKDAYS})\b",
    re.IGNORECASE,
)
_EMAIL = re.compile(r"[\w.%+-]+@[\w-]+(?:\.[\w-]+)*\.[a-z]{2,}", re.IGNORECASE)
_URL   = re.compile(r"https?://[^\s<>\"]+[^\s<>\".,;:!?)]", re.IGNORECASE)
_IP    = re.compile(r"\b\d{1,3}(?:\.\d{1,3}){3}\b")
_PHONE = re.compile(r"(?<![\w.])(?:\+33\s?|0)[1-9](?:[\s.-]?\d{2}){4}\b")

# indicator word (any case) followed by a capitalised name
_PERSON = re.compile(
    r"(?<!\w)((?i:monsieur|madame|mme|m\.|docteur|dr|professeur|prof))\s+([A-ZÀ-Ý][\w-]*)"
)
_ORGANIZATION = re.compile(
    r"(?<!\w)((?i:société|entreprise|groupe|compagnie|association|département|service|équipe))"
    r"\s+([A-ZÀ-Ý][\w-]*)"
)
# indicator word followed by any identifier ("bureau 204", "salle B12")
_LOCATION = re.compile(
    r"(?<!\w)((?i:bureau|salle|étage|bâtiment|site|agence|filiale|succursale))\s+([\w-]+)"
)

_TICKET_REF = re.compile(
    r"\b(?:ticket|demande|incident|requête)\s+(?:n[°o]?\s*)?(?:#|n[°o])?\s*(\d+)",
    re.IGNORECASE,
)
FOLLOW_UP_KEYWORDS = (
    "suivi", "suite", "mise à jour", "update", "avancement", "progression",
    "statut", "état", "ticket", "numéro", "référence", "précédent",
    "déjà signalé", "toujours pas résolu", "encore",
)
_FOLLOW_UP = re.compile(
    r"(?<!\w)(" + "|".join(map(re.escape, FOLLOW_UP_KEYWORDS)) + r")(?!\w)", re.IGNORECASE
)


@dataclass(frozen=True)
class Entities:
    dates: tuple[str, ...] = ()
    emails: tuple[str, ...] = ()
    phones: tuple[str, ...] = ()
    urls: tuple[str, ...] = ()
    ips: tuple[str, ...] = ()
    people: tuple[str, ...] = ()
    organizations: tuple[str, ...] = ()
    locations: tuple[str, ...] = ()


@dataclass(frozen=True)
class FollowUp:
    is_follow_up: bool
    ticket_number: str | None
    keywords: tuple[str, ...]


def _unique(values) -> tuple[str, ...]:
    return tuple(dict.fromkeys(v.strip() for v in values))


def _pairs(pattern: re.Pattern, text: str) -> tuple[str, ...]:
    return _unique(f"{m.group(1).lower()} {m.group(2)}" for m in pattern.finditer(text))


def extract_entities(text: str | None) -> Entities:
    """Dates, contact details, addresses and named people / teams / places.

    Matches are returned in order of first appearance, without duplicates.
    """
    if not text:
        return Entities()
    t = str(text)
    return Entities(
        dates=_unique(m.group(0) for m in _DATE.finditer(t)),
        emails=_unique(_EMAIL.findall(t)),
        phones=_unique(_PHONE.findall(t)),
        urls=_unique(_URL.findall(t)),
        ips=_unique(_IP.findall(t)),
        people=_pairs(_PERSON, t),
        organizations=_pairs(_ORGANIZATION, t),
        locations=_pairs(_LOCATION, t),
    )


def detect_follow_up(text: str | None) -> FollowUp:
    """Does the message refer back to an existing ticket?

    A ticket number ("ticket n°4521", "incident #87") or any follow-up cue
    ("toujours pas résolu", "mise à jour", ...) marks it as a follow-up.
    """
    if not text:
        return FollowUp(False, None, ())
    t = str(text)
    ref = _TICKET_REF.search(t)
    keywords = _unique(m.group(1).lower() for m in _FOLLOW_UP.finditer(t))
    number = ref.group(1) if ref else None
    return FollowUp(number is not None or bool(keywords), number, keywords)
