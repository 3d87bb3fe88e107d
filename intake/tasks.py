"""Per-task wiring: labels, lexicons, vocabulary scope, network shape, gate."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Sequence

from intake import config
from intake.preprocessing.vocabulary import LexiconSet, default_lexicon_set


@dataclass(frozen=True)
class TaskDef:
    name: str
    labels: Sequence
    lexicons: Mapping[object, Sequence[str]]
    scope: str                          # vocabulary scope feeding the network
    hidden: Sequence[tuple[int, float]]
    threshold: float
    default_label: object
    examples_per_label: int


# task → (lexicon family, vocabulary scope, default label)
_WIRING: dict[str, tuple[str, str, object]] = {
    "type": ("type", "global", config.DEFAULT_TYPE),
    "category": ("category", "category", config.OTHER_CATEGORY[config.DEFAULT_TYPE]),
    "urgency": ("urgency", "urgency", config.DEFAULT_URGENCY),
    "sentiment": ("sentiment", "sentiment", config.DEFAULT_SENTIMENT),
    "complexity": ("complexity", "global", config.DEFAULT_COMPLEXITY),
}


def merge_lexicon_set(lexicon_set: LexiconSet | None = None) -> dict:
    """Bundled lexicons with the families of ``lexicon_set`` swapped in."""
    merged = default_lexicon_set()
    merged.update(lexicon_set or {})
    return merged


def build_task_defs(lexicon_set: LexiconSet | None = None) -> dict[str, TaskDef]:
    """One :class:`TaskDef` per task, labels and keywords taken from ``lexicon_set``."""
    lexicon_set = merge_lexicon_set(lexicon_set)
    task_defs = {}
    for name, (family, scope, default_label) in _WIRING.items():
        family_lexicons = {label: tuple(words) for label, words in lexicon_set[family].items()}
        task_defs[name] = TaskDef(
            name=name,
            labels=list(family_lexicons),
            lexicons=family_lexicons,
            scope=scope,
            hidden=config.TOPOLOGIES[name],
            threshold=config.CONFIDENCE_THRESHOLDS[name],
            default_label=default_label,
            examples_per_label=config.EXAMPLES_PER_LABEL[name],
        )
    return task_defs


TASK_DEFS: dict[str, TaskDef] = build_task_defs()


def category_candidates(ticket_type: str, labels: Sequence[str] | None = None) -> list[str]:
    """Category labels allowed once the ticket type is decided."""
    prefix = config.CATEGORY_PREFIX.get(ticket_type, config.CATEGORY_PREFIX[config.DEFAULT_TYPE])
    if labels is None:
        labels = TASK_DEFS["category"].labels
    return [c for c in labels if c.startswith(prefix)]
