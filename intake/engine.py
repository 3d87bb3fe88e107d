"""Engine context — owns the vocabularies and the five task networks.

Models are trained-or-loaded exactly once, on first use (or eagerly via
:meth:`IntakeEngine.initialize`).  Concurrent first callers wait on the same
initialisation instead of training twice; a failed initialisation leaves the
engine empty so the next call retries.
"""

from __future__ import annotations

import logging
import threading
import time
from pathlib import Path
from typing import Mapping

from intake.config import MODEL_DIR, RANDOM_STATE
from intake.data.synthetic_generator import generate
from intake.models.feedforward import FeedForwardTicketClassifier
from intake.models.model_store import ModelLoadError, ModelStore
from intake.preprocessing.vocabulary import Vocabulary, build_vocabularies
from intake.tasks import TaskDef, build_task_defs, merge_lexicon_set

logger = logging.getLogger(__name__)


class EngineInitializationError(RuntimeError):
    """Training and loading both failed; no classification is possible yet."""


class IntakeEngine:
    def __init__(
        self,
        model_dir: str | Path = MODEL_DIR,
        *,
        lexicon_set: Mapping | None = None,
        seed: int = RANDOM_STATE,
        examples_per_label: Mapping[str, int] | None = None,
        epochs: int | None = None,
        persist: bool = True,
        verbose: bool = False,
    ) -> None:
        self.store = ModelStore(model_dir)
        self.lexicon_set = merge_lexicon_set(lexicon_set)
        self.task_defs: dict[str, TaskDef] = build_task_defs(self.lexicon_set)
        self.vocabularies: dict[str, Vocabulary] = build_vocabularies(self.lexicon_set)
        self.seed = seed
        self.examples_per_label = dict(examples_per_label or {})
        self.epochs = epochs
        self.persist = persist
        self.verbose = verbose

        self.models: dict[str, FeedForwardTicketClassifier] = {}
        self.trained_tasks: list[str] = []
        self.loaded_tasks: list[str] = []
        self._initialized = False
        self._lock = threading.Lock()

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    def vocabulary_for(self, task: str) -> Vocabulary:
        return self.vocabularies[self.task_defs[task].scope]

    def model(self, task: str) -> FeedForwardTicketClassifier:
        self.initialize()
        return self.models[task]

    # ── Initialisation ───────────────────────────────────────────────
    def initialize(self) -> "IntakeEngine":
        """Train or load every task network; no-op once done."""
        if self._initialized:
            return self
        with self._lock:
            if self._initialized:
                return self
            t0 = time.perf_counter()
            try:
                self._train_or_load()
            except Exception as exc:
                self.models = {}
                logger.exception("Engine initialisation failed")
                raise EngineInitializationError(str(exc)) from exc
            self._initialized = True
            logger.info(
                "Engine ready in %.1fs (trained=%s, loaded=%s)",
                time.perf_counter() - t0, self.trained_tasks, self.loaded_tasks,
            )
        return self

    def _train_or_load(self) -> None:
        self.trained_tasks, self.loaded_tasks = [], []
        models: dict[str, FeedForwardTicketClassifier] = {}

        if self.store.has_persisted(self.task_defs):
            for name, task_def in self.task_defs.items():
                try:
                    models[name] = self.store.load(name, self.vocabulary_for(name), task_def.labels)
                    self.loaded_tasks.append(name)
                except ModelLoadError as exc:
                    logger.warning("Retraining %s: %s", name, exc)
                    models[name] = self._train_and_save(task_def)
        else:
            logger.info("No complete model set under %s — training all tasks", self.store.model_dir)
            for task_def in self.task_defs.values():
                models[task_def.name] = self._train_and_save(task_def)

        self.models = models

    # ── Training ─────────────────────────────────────────────────────
    def train_task(self, task_def: TaskDef) -> FeedForwardTicketClassifier:
        vocabulary = self.vocabulary_for(task_def.name)
        n = self.examples_per_label.get(task_def.name, task_def.examples_per_label)
        X, Y = generate(task_def.lexicons, n, vocabulary, seed=self.seed)

        kwargs = {"epochs": self.epochs} if self.epochs else {}
        model = FeedForwardTicketClassifier(
            task_def.name, task_def.labels, len(vocabulary), task_def.hidden,
            fingerprint=vocabulary.fingerprint, seed=self.seed, **kwargs,
        )
        return model.fit(X, Y, verbose=self.verbose)

    def _train_and_save(self, task_def: TaskDef) -> FeedForwardTicketClassifier:
        model = self.train_task(task_def)
        self.trained_tasks.append(task_def.name)
        if self.persist:
            try:
                self.store.save(task_def.name, model)
            except Exception:
                logger.warning("Could not persist %s model; keeping it in memory", task_def.name, exc_info=True)
        return model
