"""Ensemble resolver — the public surface of the intake engine.

For every task two signal sources give an opinion on the same text:

* the learned network (only when the text hits its vocabulary at all);
* the keyword rules (always).

Selection policy, per task threshold ``θ``::

    learned confidence  > θ  → learned label       (source "model")
    rule confidence    >= θ  → rule label          (source "rules")
    otherwise                → task default, 0.5   (source "default")

Mode ``"rules"`` drops the learned source entirely and never touches the
models.  Any failure after initialisation yields the task's default result.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Sequence

from intake.config import (
    CATEGORY_IDS,
    CATEGORY_NAMES,
    COMPLEXITY_SCORES,
    DEFAULT_COMPLEXITY,
    DEFAULT_CONFIDENCE,
    DEFAULT_SENTIMENT,
    DEFAULT_TYPE,
    DEFAULT_URGENCY,
    EMPHASIS_MIN_MARKS,
    MISSING_INFO_CONFIDENCE,
    OTHER_CATEGORY,
    RESOLVER_MODE,
    TITLE_MAX_LENGTH,
    TYPE_IDS,
    UNKNOWN_CATEGORY_NAME,
)
from intake.engine import IntakeEngine
from intake.preprocessing.entities import Entities, detect_follow_up, extract_entities
from intake.preprocessing.features import extract
from intake.preprocessing.text_cleaner import improve_text, is_emphatic, suggest_title
from intake.routing.results import (
    SOURCE_DEFAULT,
    SOURCE_MODEL,
    SOURCE_RULES,
    CategoryResult,
    ComplexityResult,
    SentimentResult,
    TicketAnalysis,
    TypeResult,
    UrgencyResult,
)
from intake.routing.rules import KeywordClassifier, Prediction, polarity, sentiment_scale
from intake.tasks import TASK_DEFS, category_candidates

logger = logging.getLogger(__name__)

MODES = ("ensemble", "rules")

# Follow-up questions for simple incidents, by category
_CATEGORY_DETAILS = {
    "incident_materiel": "Préciser la marque et le modèle de l'équipement",
    "incident_logiciel": "Préciser la version du logiciel concerné",
    "incident_reseau": "Préciser si d'autres utilisateurs sont affectés",
}


def category_name(label: str) -> str:
    return CATEGORY_NAMES.get(label, UNKNOWN_CATEGORY_NAME)


def missing_information(
    ticket_type: TypeResult,
    category: CategoryResult,
    complexity: ComplexityResult,
    entities: Entities,
) -> tuple[str, ...]:
    """What the requester should still tell us before the ticket is filed."""
    missing = []
    if ticket_type.confidence < MISSING_INFO_CONFIDENCE:
        missing.append("Préciser s'il s'agit d'un incident ou d'une demande")
    if category.confidence < MISSING_INFO_CONFIDENCE:
        missing.append("Plus de détails sur la catégorie du problème")
    if not entities.dates:
        missing.append("Préciser si une date est importante pour cette demande")
    if not entities.people:
        missing.append("Préciser les personnes concernées par cette demande")
    if complexity.complexity == "simple" and category.category in _CATEGORY_DETAILS:
        missing.append(_CATEGORY_DETAILS[category.category])
    return tuple(missing) or ("Des captures d'écran ou photos pourraient être utiles",)


class LearnedClassifier:
    """Adapts one engine network to the ``predict(text, candidates)`` surface."""

    def __init__(self, engine: IntakeEngine, task: str) -> None:
        self.engine = engine
        self.task = task

    def predict(self, text: str | None, candidates: Sequence | None = None) -> Prediction | None:
        vector = extract(text, self.engine.vocabulary_for(self.task))
        if not vector.any():
            return None                 # no known stem → no opinion
        label, confidence = self.engine.model(self.task).predict_one(vector, candidates)
        return Prediction(label, confidence)


class EnsembleResolver:
    def __init__(self, engine: IntakeEngine | None = None, mode: str = RESOLVER_MODE) -> None:
        if mode not in MODES:
            raise ValueError(f"Unknown resolver mode {mode!r}; expected one of {MODES}")
        self.mode = mode
        self.engine = engine if engine is not None or mode == "rules" else IntakeEngine()
        self.task_defs = self.engine.task_defs if self.engine is not None else TASK_DEFS

        self.rules = {
            name: KeywordClassifier(task_def.lexicons, task_def.default_label)
            for name, task_def in self.task_defs.items()
        }
        self.learned: dict[str, LearnedClassifier] = {}
        if mode == "ensemble":
            self.learned = {name: LearnedClassifier(self.engine, name) for name in self.task_defs}

    def ensure_ready(self) -> None:
        """Block until the models exist; raises ``EngineInitializationError``."""
        if self.learned:
            self.engine.initialize()

    # ── Selection policy ─────────────────────────────────────────────
    def _resolve(self, task: str, text, candidates=None, default=None):
        task_def = self.task_defs[task]
        default = task_def.default_label if default is None else default

        learned = self.learned[task].predict(text, candidates) if self.learned else None
        rule = self.rules[task].predict(text, candidates, default)

        if learned is not None and learned.confidence > task_def.threshold:
            return learned.label, learned.confidence, SOURCE_MODEL, rule
        if rule.confidence >= task_def.threshold:
            return rule.label, rule.confidence, SOURCE_RULES, rule
        return default, DEFAULT_CONFIDENCE, SOURCE_DEFAULT, rule

    # ── Per-task operations ──────────────────────────────────────────
    def classify_type(self, text: str) -> TypeResult:
        self.ensure_ready()
        try:
            label, confidence, source, _ = self._resolve("type", text)
            return TypeResult(label, TYPE_IDS.get(label, TYPE_IDS[DEFAULT_TYPE]), confidence, source)
        except Exception:
            logger.exception("Type classification failed — using default")
            return TypeResult(DEFAULT_TYPE, TYPE_IDS[DEFAULT_TYPE], DEFAULT_CONFIDENCE, SOURCE_DEFAULT)

    def classify_category(self, text: str, ticket_type: str) -> CategoryResult:
        self.ensure_ready()
        if ticket_type not in OTHER_CATEGORY:
            ticket_type = DEFAULT_TYPE
        other = OTHER_CATEGORY[ticket_type]
        try:
            label, confidence, source, _ = self._resolve(
                "category", text, category_candidates(ticket_type, self.task_defs["category"].labels), other,
            )
            return CategoryResult(label, CATEGORY_IDS.get(label, CATEGORY_IDS[other]), confidence, source)
        except Exception:
            logger.exception("Category classification failed — using default")
            return CategoryResult(other, CATEGORY_IDS[other], DEFAULT_CONFIDENCE, SOURCE_DEFAULT)

    def classify_urgency(self, text: str) -> UrgencyResult:
        self.ensure_ready()
        try:
            label, confidence, source, _ = self._resolve("urgency", text)
            return UrgencyResult(int(label), confidence, source)
        except Exception:
            logger.exception("Urgency classification failed — using default")
            return UrgencyResult(DEFAULT_URGENCY, DEFAULT_CONFIDENCE, SOURCE_DEFAULT)

    def classify_sentiment(self, text: str) -> SentimentResult:
        self.ensure_ready()
        try:
            label, confidence, source, rule = self._resolve("sentiment", text)
            return SentimentResult(label, confidence, source, sentiment_scale(polarity(rule.scores)))
        except Exception:
            logger.exception("Sentiment classification failed — using default")
            return SentimentResult(DEFAULT_SENTIMENT, DEFAULT_CONFIDENCE, SOURCE_DEFAULT, "neutre")

    def classify_complexity(self, text: str) -> ComplexityResult:
        self.ensure_ready()
        try:
            label, confidence, source, _ = self._resolve("complexity", text)
            return ComplexityResult(label, confidence, source, COMPLEXITY_SCORES[label])
        except Exception:
            logger.exception("Complexity classification failed — using default")
            return ComplexityResult(
                DEFAULT_COMPLEXITY, DEFAULT_CONFIDENCE, SOURCE_DEFAULT,
                COMPLEXITY_SCORES[DEFAULT_COMPLEXITY],
            )

    # ── Full analysis ────────────────────────────────────────────────
    def analyze(self, text: str) -> TicketAnalysis:
        """Expand shorthand, run every task, suggest a title.

        Heavy emphasis (several "!" or shouted words) bumps urgency one
        level towards 1.  Entities, a reference to an earlier ticket and
        the details still missing are attached for the ticket form.
        """
        original = "" if text is None else str(text)
        improved = improve_text(original)

        ticket_type = self.classify_type(improved)
        category = self.classify_category(improved, ticket_type.type)
        urgency = self.classify_urgency(improved)
        if is_emphatic(original, EMPHASIS_MIN_MARKS) and urgency.urgency > 1:
            urgency = replace(urgency, urgency=urgency.urgency - 1)
        complexity = self.classify_complexity(improved)
        entities = extract_entities(improved)

        return TicketAnalysis(
            original_text=original,
            improved_text=improved,
            title=suggest_title(improved, TITLE_MAX_LENGTH),
            type=ticket_type,
            category=category,
            category_name=category_name(category.category),
            urgency=urgency,
            sentiment=self.classify_sentiment(improved),
            complexity=complexity,
            entities=entities,
            follow_up=detect_follow_up(improved),
            missing_info=missing_information(ticket_type, category, complexity, entities),
        )

    def classify(self, task: str, text: str, ticket_type: str | None = None):
        """Dispatch by task name (``category`` needs ``ticket_type`` or infers it)."""
        if task == "type":
            return self.classify_type(text)
        if task == "category":
            if ticket_type is None:
                ticket_type = self.classify_type(text).type
            return self.classify_category(text, ticket_type)
        if task == "urgency":
            return self.classify_urgency(text)
        if task == "sentiment":
            return self.classify_sentiment(text)
        if task == "complexity":
            return self.classify_complexity(text)
        raise ValueError(f"Unknown task {task!r}")
