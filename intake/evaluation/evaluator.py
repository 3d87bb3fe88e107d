"""Evaluation & artifact generation for the per-task networks."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path

import matplotlib
matplotlib.use("Agg")  # non-interactive backend
import matplotlib.pyplot as plt
import seaborn as sns
from sklearn.metrics import (
    accuracy_score,
    classification_report,
    confusion_matrix,
    f1_score,
)

from intake.config import EVAL_DIR

logger = logging.getLogger(__name__)


def evaluate_and_save(
    y_true,
    y_pred,
    *,
    model_name: str,
    labels: list | None = None,
    output_dir: str | Path | None = None,
    extra: dict | None = None,
) -> dict:
    """Compute metrics, save JSON report + confusion-matrix PNG.

    Labels are stringified so integer urgency levels and string categories
    share one code path.  Returns the metrics dict.
    """
    out = Path(output_dir) if output_dir else EVAL_DIR / model_name
    out.mkdir(parents=True, exist_ok=True)

    y_true = [str(v) for v in y_true]
    y_pred = [str(v) for v in y_pred]
    names = [str(v) for v in labels] if labels else sorted(set(y_true) | set(y_pred))

    acc = accuracy_score(y_true, y_pred)
    macro = f1_score(y_true, y_pred, labels=names, average="macro", zero_division=0)
    report = classification_report(y_true, y_pred, labels=names, output_dict=True, zero_division=0)

    metrics = {
        "model": model_name,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "accuracy": acc,
        "macro_f1": macro,
        "classification_report": report,
    }
    if extra:
        metrics.update(extra)

    # ── JSON report ──────────────────────────────────────────────────
    report_path = out / "metrics.json"
    with open(report_path, "w", encoding="utf-8") as f:
        json.dump(metrics, f, indent=2, default=str, ensure_ascii=False)
    logger.info("Metrics saved → %s", report_path)

    # ── Confusion matrix PNG ─────────────────────────────────────────
    cm = confusion_matrix(y_true, y_pred, labels=names)
    size = max(6, len(names) * 0.9)
    fig, ax = plt.subplots(figsize=(size, size * 0.85))
    sns.heatmap(
        cm,
        annot=True,
        fmt="d",
        xticklabels=names,
        yticklabels=names,
        ax=ax,
    )
    ax.set_title(f"Confusion Matrix — {model_name}")
    ax.set_xlabel("Predicted")
    ax.set_ylabel("Actual")
    fig.tight_layout()
    cm_path = out / "confusion_matrix.png"
    fig.savefig(cm_path, dpi=150)
    plt.close(fig)
    logger.info("Confusion matrix saved → %s", cm_path)

    logger.info("%s — acc=%.4f  macro-F1=%.4f", model_name, acc, macro)
    return metrics
