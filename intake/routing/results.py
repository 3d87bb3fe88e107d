"""Typed results returned by the ensemble resolver — one per task."""

from __future__ import annotations

from dataclasses import asdict, dataclass

from intake.preprocessing.entities import Entities, FollowUp

# Where the winning label came from
SOURCE_MODEL = "model"
SOURCE_RULES = "rules"
SOURCE_DEFAULT = "default"


@dataclass(frozen=True)
class TypeResult:
    type: str
    type_id: int
    confidence: float
    source: str


@dataclass(frozen=True)
class CategoryResult:
    category: str
    category_id: int
    confidence: float
    source: str


@dataclass(frozen=True)
class UrgencyResult:
    urgency: int          # 1 = most urgent … 5
    confidence: float
    source: str


@dataclass(frozen=True)
class SentimentResult:
    sentiment: str        # negative / neutral / positive
    confidence: float
    source: str
    scale: str            # five-step French label from keyword polarity


@dataclass(frozen=True)
class ComplexityResult:
    complexity: str
    confidence: float
    source: str
    score: int            # 1 simple, 2 moderate, 3 complex


@dataclass(frozen=True)
class TicketAnalysis:
    """Everything needed to pre-fill a ticket from one chat message."""

    original_text: str
    improved_text: str
    title: str
    type: TypeResult
    category: CategoryResult
    category_name: str
    urgency: UrgencyResult
    sentiment: SentimentResult
    complexity: ComplexityResult
    entities: Entities
    follow_up: FollowUp
    missing_info: tuple[str, ...]     # details the requester should still give

    def to_dict(self) -> dict:
        return asdict(self)
