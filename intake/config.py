"""Centralised configuration — single source of truth for the intake engine."""

import os
from pathlib import Path

# ── Paths ────────────────────────────────────────────────────────────────
_INTAKE_DIR = Path(__file__).resolve().parent
ROOT_DIR = _INTAKE_DIR.parent
MODEL_DIR = Path(os.getenv("INTAKE_MODEL_DIR", ROOT_DIR / "saved_models"))
EVAL_DIR = ROOT_DIR / "evaluation" / "artifacts"

# ── Runtime switches ─────────────────────────────────────────────────────
#    "ensemble" = learned models + keyword rules, "rules" = keyword rules only
RESOLVER_MODE = os.getenv("INTAKE_RESOLVER_MODE", "ensemble")
EAGER_INIT = os.getenv("INTAKE_EAGER_INIT", "1") not in ("0", "false", "no")
RANDOM_STATE = int(os.getenv("INTAKE_SEED", "42"))

# ── Task names (one classifier + one artifact directory per task) ───────
TASKS = ["type", "category", "urgency", "sentiment", "complexity"]

# ── Ticket types → ITSM identifiers ──────────────────────────────────────
TYPE_INCIDENT = "incident"
TYPE_REQUEST = "request"
TYPE_IDS: dict[str, int] = {
    TYPE_INCIDENT: 1,
    TYPE_REQUEST: 2,
}
# Category labels are prefixed by the French taxonomy name of their type
CATEGORY_PREFIX: dict[str, str] = {
    TYPE_INCIDENT: "incident_",
    TYPE_REQUEST: "demande_",
}

# ── Category labels → ITSM category ids ─────────────────────────────────
CATEGORY_IDS: dict[str, int] = {
    "incident_autre": 10,
    "incident_logiciel": 8,
    "incident_materiel": 7,
    "incident_reseau": 6,
    "incident_securite": 9,
    "demande_acces": 1,
    "demande_autre": 5,
    "demande_information": 4,
    "demande_logiciel": 3,
    "demande_materiel": 2,
}
OTHER_CATEGORY: dict[str, str] = {
    TYPE_INCIDENT: "incident_autre",
    TYPE_REQUEST: "demande_autre",
}
# Display names shown to the agent filing the ticket
CATEGORY_NAMES: dict[str, str] = {
    "incident_logiciel": "Incident logiciel",
    "incident_materiel": "Incident matériel",
    "incident_reseau": "Incident réseau",
    "incident_securite": "Incident de sécurité",
    "incident_autre": "Autre incident",
    "demande_acces": "Demande d'accès",
    "demande_logiciel": "Demande de logiciel",
    "demande_materiel": "Demande de matériel",
    "demande_information": "Demande d'information",
    "demande_autre": "Autre demande",
}
UNKNOWN_CATEGORY_NAME = "Catégorie inconnue"

URGENCY_LEVELS = [1, 2, 3, 4, 5]   # 1 = most urgent
SENTIMENTS = ["negative", "neutral", "positive"]
COMPLEXITIES = ["simple", "moderate", "complex"]
COMPLEXITY_SCORES = {"simple": 1, "moderate": 2, "complex": 3}

# ── Conservative defaults (no signal, or a failed call) ─────────────────
DEFAULT_CONFIDENCE = 0.5
DEFAULT_TYPE = TYPE_INCIDENT
DEFAULT_URGENCY = 3
DEFAULT_SENTIMENT = "neutral"
DEFAULT_COMPLEXITY = "moderate"

# ── Confidence gates: learned prediction wins above these ───────────────
CONFIDENCE_THRESHOLDS: dict[str, float] = {
    "type": 0.7,
    "category": 0.6,
    "urgency": 0.7,
    "sentiment": 0.6,
    "complexity": 0.6,
}

# ── Synthetic corpus ─────────────────────────────────────────────────────
EXAMPLES_PER_LABEL: dict[str, int] = {
    "type": 1_000,
    "category": 200,
    "urgency": 250,
    "sentiment": 300,
    "complexity": 300,
}
KEYWORDS_PER_EXAMPLE = (1, 3)     # inclusive range
FILLERS_PER_EXAMPLE = (3, 15)     # inclusive range

# ── Feed-forward network hyper-parameters ───────────────────────────────
FEEDFORWARD = {
    "epochs": 50,
    "batch_size": 32,
    "learning_rate": 1e-3,
    "validation_split": 0.2,
    "log_every": 10,
}

# (hidden units, dropout) per hidden layer
TOPOLOGIES: dict[str, list[tuple[int, float]]] = {
    "type": [(128, 0.3), (64, 0.2)],
    "category": [(256, 0.3), (128, 0.3), (64, 0.2)],
    "urgency": [(128, 0.3), (64, 0.2)],
    "sentiment": [(128, 0.3), (64, 0.2)],
    "complexity": [(128, 0.3), (64, 0.2)],
}

# ── Full-analysis extras ─────────────────────────────────────────────────
TITLE_MAX_LENGTH = 50
EMPHASIS_MIN_MARKS = 3            # "!" or ALL-CAPS words needed to escalate
MISSING_INFO_CONFIDENCE = 0.7    # type / category below this → ask for details
