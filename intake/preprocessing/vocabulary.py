"""Task-scoped vocabularies derived from the keyword lexicons.

Every lexicon phrase is normalised, tokenized and stemmed; each stem lands in
the ``global`` scope and, depending on the lexicon family, in one narrower
task scope.  Insertion order is preserved so that feature slots are stable
from one process to the next.
"""

from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass, field
from typing import Iterable, Mapping

from intake.data import lexicons
from intake.preprocessing.text_cleaner import stem_tokens

logger = logging.getLogger(__name__)

SCOPES = ["global", "category", "urgency", "sentiment"]

# lexicon family → scopes it seeds
SCOPE_WIRING: dict[str, tuple[str, ...]] = {
    "type": ("global",),
    "category": ("global", "category"),
    "urgency": ("global", "urgency"),
    "sentiment": ("global", "sentiment"),
    "complexity": ("global",),
}

LexiconSet = Mapping[str, Mapping[object, Iterable[str]]]


@dataclass(frozen=True)
class Vocabulary:
    """Ordered, deduplicated stems of one scope."""

    scope: str
    tokens: tuple[str, ...]
    _index: dict[str, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_index", {t: i for i, t in enumerate(self.tokens)})

    def __len__(self) -> int:
        return len(self.tokens)

    def __contains__(self, token: object) -> bool:
        return token in self._index

    def index(self, token: str) -> int | None:
        return self._index.get(token)

    @property
    def fingerprint(self) -> str:
        """SHA-256 over the ordered tokens; changes whenever a lexicon does."""
        digest = hashlib.sha256()
        for token in self.tokens:
            digest.update(token.encode("utf-8"))
            digest.update(b"\x00")
        return digest.hexdigest()


def default_lexicon_set() -> dict[str, dict]:
    return {
        "type": lexicons.TYPE_LEXICONS,
        "category": lexicons.CATEGORY_LEXICONS,
        "urgency": lexicons.URGENCY_LEXICONS,
        "sentiment": lexicons.SENTIMENT_LEXICONS,
        "complexity": lexicons.COMPLEXITY_LEXICONS,
    }


def build_vocabularies(lexicon_set: LexiconSet | None = None) -> dict[str, Vocabulary]:
    """Build every scope's vocabulary from ``lexicon_set`` (default: bundled lexicons).

    Unknown lexicon families are ignored; missing ones simply contribute
    nothing, so an empty set yields four empty vocabularies.
    """
    if lexicon_set is None:
        lexicon_set = default_lexicon_set()

    ordered: dict[str, dict[str, None]] = {scope: {} for scope in SCOPES}
    for family, scopes in SCOPE_WIRING.items():
        for phrases in lexicon_set.get(family, {}).values():
            for phrase in phrases:
                for token in stem_tokens(phrase):
                    for scope in scopes:
                        ordered[scope].setdefault(token, None)

    vocabularies = {scope: Vocabulary(scope, tuple(tokens)) for scope, tokens in ordered.items()}
    logger.info(
        "Vocabularies built: %s",
        ", ".join(f"{scope}={len(v)}" for scope, v in vocabularies.items()),
    )
    return vocabularies
