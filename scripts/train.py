#!/usr/bin/env python
"""Train, persist and evaluate the per-task intake networks.

Usage
-----
    # every task, default model directory
    python -m scripts.train

    # only urgency and sentiment, custom directory, quicker run
    python -m scripts.train --tasks urgency sentiment --model-dir /tmp/models --epochs 10

    # skip the metrics / confusion-matrix artifacts
    python -m scripts.train --no-eval
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s  %(levelname)-8s  %(name)s — %(message)s",
)
logger = logging.getLogger("train")


# ─── Helpers ─────────────────────────────────────────────────────────────

def _timer(label: str):
    """Context manager that logs elapsed time."""
    class _T:
        def __enter__(self):
            self.t0 = time.perf_counter()
            return self
        def __exit__(self, *_):
            logger.info("%s finished in %.1f s", label, time.perf_counter() - self.t0)
    return _T()


# ─── Per-task run ────────────────────────────────────────────────────────

def train_task(engine, task: str, *, evaluate: bool, eval_dir: Path) -> dict:
    from intake.data.synthetic_generator import generate
    from intake.evaluation.evaluator import evaluate_and_save

    task_def = engine.task_defs[task]
    logger.info("═══ %s ═══", task)
    with _timer(f"{task} training"):
        model = engine.train_task(task_def)
    engine.store.save(task, model)

    if not evaluate:
        return {}

    # Held-out corpus drawn with a different seed from the training one
    vocabulary = engine.vocabulary_for(task)
    n_eval = max(20, engine.examples_per_label.get(task, task_def.examples_per_label) // 5)
    X, Y = generate(task_def.lexicons, n_eval, vocabulary, seed=engine.seed + 1)
    y_true = [task_def.labels[i] for i in Y.argmax(axis=1)]
    return evaluate_and_save(
        y_true,
        model.predict(X),
        model_name=f"{task}_model",
        labels=list(task_def.labels),
        output_dir=eval_dir / task,
        extra={"last_epoch": model.history[-1] if model.history else {}},
    )


def main(argv: list[str] | None = None) -> int:
    from intake.config import EVAL_DIR, MODEL_DIR, RANDOM_STATE, TASKS
    from intake.engine import IntakeEngine

    parser = argparse.ArgumentParser(description="Intake engine training")
    parser.add_argument("--tasks", nargs="+", choices=TASKS, default=TASKS)
    parser.add_argument("--model-dir", type=Path, default=MODEL_DIR)
    parser.add_argument("--eval-dir", type=Path, default=EVAL_DIR)
    parser.add_argument("--epochs", type=int, default=None, help="override the epoch count")
    parser.add_argument("--seed", type=int, default=RANDOM_STATE)
    parser.add_argument("--no-eval", action="store_true", help="skip evaluation artifacts")
    args = parser.parse_args(argv)

    engine = IntakeEngine(args.model_dir, seed=args.seed, epochs=args.epochs, verbose=True)

    results = {}
    with _timer("Full run"):
        for task in args.tasks:
            results[task] = train_task(engine, task, evaluate=not args.no_eval, eval_dir=args.eval_dir)

    for task, metrics in results.items():
        if metrics:
            logger.info("%-11s accuracy: %.4f", task, metrics["accuracy"])
    logger.info("Models written under %s", args.model_dir)
    return 0


if __name__ == "__main__":
    sys.exit(main())
