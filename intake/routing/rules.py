"""Keyword-count heuristic — the signal source that never needs training."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Mapping, Sequence

from intake.config import DEFAULT_CONFIDENCE
from intake.preprocessing.text_cleaner import normalize


@dataclass(frozen=True)
class Prediction:
    """One signal source's opinion for one task."""

    label: object
    confidence: float
    scores: Mapping[object, int] = field(default_factory=dict)


class KeywordClassifier:
    """Case-insensitive substring matching of each label's keywords.

    Every keyword found in the text adds one to its label.  The best label
    wins with confidence ``best / total``; a tie at the top or no hit at all
    returns the default label (confidence ``0.5`` when nothing matched).
    """

    def __init__(self, label_keywords: Mapping[object, Iterable[str]], default_label) -> None:
        self.label_keywords = {
            label: tuple(normalize(k) for k in keywords)
            for label, keywords in label_keywords.items()
        }
        self.default_label = default_label

    def scores(self, text: str | None, candidates: Sequence | None = None) -> dict:
        t = normalize(text)
        labels = self.label_keywords if candidates is None else [
            c for c in candidates if c in self.label_keywords
        ]
        return {
            label: sum(1 for kw in self.label_keywords[label] if kw and kw in t)
            for label in labels
        }

    def predict(self, text: str | None, candidates: Sequence | None = None, default=None) -> Prediction:
        default = self.default_label if default is None else default
        scores = self.scores(text, candidates)
        total = sum(scores.values())
        if total == 0:
            return Prediction(default, DEFAULT_CONFIDENCE, scores)

        best = max(scores.values())
        winners = [label for label, n in scores.items() if n == best]
        label = winners[0] if len(winners) == 1 else default
        return Prediction(label, best / total, scores)


# ── Sentiment scale ──────────────────────────────────────────────────────
SENTIMENT_WEIGHT = 0.3        # polarity shift per matched cue


def polarity(scores: Mapping[object, int]) -> float:
    """Signed polarity in [-1, 1] from sentiment keyword counts."""
    raw = SENTIMENT_WEIGHT * (scores.get("positive", 0) - scores.get("negative", 0))
    return max(-1.0, min(1.0, raw))


def sentiment_scale(score: float) -> str:
    if score >= 0.5:
        return "très positif"
    if score >= 0.1:
        return "positif"
    if score > -0.1:
        return "neutre"
    if score > -0.5:
        return "négatif"
    return "très négatif"
