"""Persist / reload the per-task networks.

Layout::

    <model_dir>/<task>_model/topology.joblib   # labels, dims, fingerprint
    <model_dir>/<task>_model/weights.pt        # torch state_dict

A model is only accepted back if its topology still matches the current
vocabulary (same size, same fingerprint) and label set.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Sequence

import joblib
import torch

from intake.config import MODEL_DIR
from intake.models.feedforward import FeedForwardTicketClassifier
from intake.preprocessing.vocabulary import Vocabulary

logger = logging.getLogger(__name__)

TOPOLOGY_FILE = "topology.joblib"
WEIGHTS_FILE = "weights.pt"


class ModelLoadError(RuntimeError):
    """Persisted artifact missing, unreadable or stale for the current vocabulary."""


class ModelStore:
    def __init__(self, model_dir: str | Path = MODEL_DIR) -> None:
        self.model_dir = Path(model_dir)

    def task_dir(self, task: str) -> Path:
        return self.model_dir / f"{task}_model"

    def has_persisted(self, tasks: Iterable[str]) -> bool:
        """True when both artifact files exist for every task."""
        return all(
            (self.task_dir(t) / TOPOLOGY_FILE).is_file()
            and (self.task_dir(t) / WEIGHTS_FILE).is_file()
            for t in tasks
        )

    # ── Persistence ──────────────────────────────────────────────────
    def save(self, task: str, model: FeedForwardTicketClassifier) -> Path:
        path = self.task_dir(task)
        path.mkdir(parents=True, exist_ok=True)
        joblib.dump(model.topology(), path / TOPOLOGY_FILE)
        torch.save(model.net.state_dict(), path / WEIGHTS_FILE)
        logger.info("Model saved → %s", path)
        return path

    def load(self, task: str, vocabulary: Vocabulary, labels: Sequence) -> FeedForwardTicketClassifier:
        path = self.task_dir(task)
        try:
            topology = joblib.load(path / TOPOLOGY_FILE)
        except Exception as exc:
            raise ModelLoadError(f"{task}: cannot read topology in {path}: {exc}") from exc

        if not isinstance(topology, dict):
            raise ModelLoadError(f"{task}: malformed topology in {path}")
        if topology.get("input_dim") != len(vocabulary):
            raise ModelLoadError(
                f"{task}: input dim {topology.get('input_dim')} != vocabulary size {len(vocabulary)}"
            )
        if topology.get("fingerprint") != vocabulary.fingerprint:
            raise ModelLoadError(f"{task}: vocabulary fingerprint changed since training")
        if list(topology.get("labels", [])) != list(labels):
            raise ModelLoadError(f"{task}: label set changed since training")

        try:
            model = FeedForwardTicketClassifier.from_topology(topology)
            state = torch.load(path / WEIGHTS_FILE, map_location=model.device)
            model.net.load_state_dict(state)
        except Exception as exc:
            raise ModelLoadError(f"{task}: cannot restore weights in {path}: {exc}") from exc

        model.net.eval()
        logger.info("Model loaded ← %s", path)
        return model
