"""Small feed-forward network over bag-of-stems vectors, one per task.

Topology: input sized to the task vocabulary, dense hidden layers with ReLU
and dropout, and a softmax head sized to the task's label set.  Trained with
cross-entropy on one-hot targets; a stratified hold-out split is only used
for the logged loss / accuracy monitor (no early stopping).
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Sequence

import numpy as np
import torch
from sklearn.metrics import accuracy_score, classification_report, f1_score
from sklearn.model_selection import train_test_split
from torch import nn
from torch.utils.data import DataLoader, TensorDataset
from tqdm import tqdm

from intake.config import FEEDFORWARD, RANDOM_STATE

logger = logging.getLogger(__name__)


@contextmanager
def _private_rng(seed: int, device: torch.device):
    """Seed torch inside a forked RNG so the caller's random stream is untouched."""
    devices = [device.index or 0] if device.type == "cuda" else []
    with torch.random.fork_rng(devices=devices):
        torch.manual_seed(seed)
        yield


class FeedForwardNet(nn.Module):
    """Dense → ReLU → Dropout blocks followed by a linear logit layer."""

    def __init__(self, input_dim: int, hidden: Sequence[tuple[int, float]], n_out: int) -> None:
        super().__init__()
        layers: list[nn.Module] = []
        width = input_dim
        for units, dropout in hidden:
            layers += [nn.Linear(width, units), nn.ReLU(), nn.Dropout(dropout)]
            width = units
        layers.append(nn.Linear(width, n_out))
        self.layers = nn.Sequential(*layers)

    def forward(self, x: torch.Tensor) -> torch.Tensor:
        return self.layers(x)


class FeedForwardTicketClassifier:
    """Torch MLP with the fit / predict / evaluate surface of the other models."""

    def __init__(
        self,
        task: str,
        labels: Sequence,
        input_dim: int,
        hidden: Sequence[tuple[int, float]],
        *,
        fingerprint: str = "",
        epochs: int = FEEDFORWARD["epochs"],
        batch_size: int = FEEDFORWARD["batch_size"],
        learning_rate: float = FEEDFORWARD["learning_rate"],
        validation_split: float = FEEDFORWARD["validation_split"],
        log_every: int = FEEDFORWARD["log_every"],
        seed: int = RANDOM_STATE,
    ) -> None:
        if input_dim <= 0:
            raise ValueError(f"{task}: input dimension must be positive, got {input_dim}")
        if len(labels) < 2:
            raise ValueError(f"{task}: need at least two labels, got {list(labels)}")

        self.task = task
        self.labels = list(labels)
        self.input_dim = int(input_dim)
        self.hidden = [(int(u), float(d)) for u, d in hidden]
        self.fingerprint = fingerprint
        self.epochs = epochs
        self.batch_size = batch_size
        self.learning_rate = learning_rate
        self.validation_split = validation_split
        self.log_every = log_every
        self.seed = seed

        self.device = torch.device("cuda" if torch.cuda.is_available() else "cpu")
        with _private_rng(seed, self.device):
            self.net = FeedForwardNet(self.input_dim, self.hidden, len(self.labels)).to(self.device)
        self.net.eval()
        self.history: list[dict] = []

    # ── Topology ─────────────────────────────────────────────────────
    def topology(self) -> dict:
        return {
            "task": self.task,
            "labels": list(self.labels),
            "input_dim": self.input_dim,
            "hidden": list(self.hidden),
            "fingerprint": self.fingerprint,
        }

    @classmethod
    def from_topology(cls, topology: dict) -> "FeedForwardTicketClassifier":
        return cls(
            topology["task"],
            topology["labels"],
            topology["input_dim"],
            topology["hidden"],
            fingerprint=topology.get("fingerprint", ""),
        )

    # ── Training ─────────────────────────────────────────────────────
    def _check_shapes(self, X: np.ndarray, Y: np.ndarray) -> None:
        if X.ndim != 2 or X.shape[1] != self.input_dim:
            raise ValueError(
                f"{self.task}: expected X of shape (n, {self.input_dim}), got {X.shape}"
            )
        if Y.shape != (X.shape[0], len(self.labels)):
            raise ValueError(
                f"{self.task}: expected Y of shape ({X.shape[0]}, {len(self.labels)}), got {Y.shape}"
            )
        if X.shape[0] == 0:
            raise ValueError(f"{self.task}: empty training corpus")

    def _split(self, X: np.ndarray, Y: np.ndarray):
        if not self.validation_split:
            return X, None, Y, None
        y_idx = Y.argmax(axis=1)
        counts = np.bincount(y_idx, minlength=len(self.labels))
        stratify = y_idx if counts.min() >= 2 else None
        return train_test_split(
            X, Y,
            test_size=self.validation_split,
            random_state=self.seed,
            stratify=stratify,
        )

    def fit(self, X: np.ndarray, Y: np.ndarray, verbose: bool = False) -> "FeedForwardTicketClassifier":
        X = np.asarray(X, dtype=np.float32)
        Y = np.asarray(Y, dtype=np.float32)
        self._check_shapes(X, Y)

        X_tr, X_val, Y_tr, Y_val = self._split(X, Y)
        logger.info(
            "Training %s network on %d samples (%d held out) …",
            self.task, len(X_tr), 0 if X_val is None else len(X_val),
        )

        loader = DataLoader(
            TensorDataset(torch.from_numpy(X_tr), torch.from_numpy(Y_tr)),
            batch_size=self.batch_size,
            shuffle=True,
            generator=torch.Generator().manual_seed(self.seed),
        )
        with _private_rng(self.seed, self.device):
            self._train_epochs(loader, X_val, Y_val, verbose)

        self.net.eval()
        return self

    def _train_epochs(self, loader: DataLoader, X_val, Y_val, verbose: bool) -> None:
        optimiser = torch.optim.Adam(self.net.parameters(), lr=self.learning_rate)
        loss_fn = nn.CrossEntropyLoss()

        self.history = []
        for epoch in tqdm(range(1, self.epochs + 1), desc=f"Training {self.task}", disable=not verbose):
            self.net.train()
            running, seen = 0.0, 0
            for xb, yb in loader:
                xb, yb = xb.to(self.device), yb.to(self.device)
                optimiser.zero_grad()
                loss = loss_fn(self.net(xb), yb)
                loss.backward()
                optimiser.step()
                running += loss.item() * len(xb)
                seen += len(xb)

            record = {"epoch": epoch, "loss": running / max(seen, 1)}
            if X_val is not None:
                record.update(self._monitor(X_val, Y_val, loss_fn))
            self.history.append(record)

            if epoch % self.log_every == 0 or epoch == self.epochs:
                logger.info(
                    "%s epoch %d/%d — loss=%.4f  val_loss=%s  val_acc=%s",
                    self.task, epoch, self.epochs, record["loss"],
                    f"{record['val_loss']:.4f}" if "val_loss" in record else "n/a",
                    f"{record['val_accuracy']:.4f}" if "val_accuracy" in record else "n/a",
                )

    def _monitor(self, X_val: np.ndarray, Y_val: np.ndarray, loss_fn: nn.Module) -> dict:
        self.net.eval()
        with torch.no_grad():
            logits = self.net(torch.from_numpy(X_val).to(self.device))
            targets = torch.from_numpy(Y_val).to(self.device)
            val_loss = loss_fn(logits, targets).item()
            acc = (logits.argmax(dim=1) == targets.argmax(dim=1)).float().mean().item()
        return {"val_loss": val_loss, "val_accuracy": acc}

    # ── Inference ────────────────────────────────────────────────────
    def predict_proba(self, X: np.ndarray) -> np.ndarray:
        X = np.asarray(X, dtype=np.float32)
        if X.ndim == 1:
            X = X[None, :]
        if X.shape[1] != self.input_dim:
            raise ValueError(
                f"{self.task}: expected {self.input_dim} features, got {X.shape[1]}"
            )
        with torch.no_grad():
            logits = self.net(torch.from_numpy(X).to(self.device))
            return torch.softmax(logits, dim=1).cpu().numpy()

    def predict(self, X: np.ndarray) -> list:
        return [self.labels[i] for i in self.predict_proba(X).argmax(axis=1)]

    def predict_one(self, vector: np.ndarray, candidates: Sequence | None = None) -> tuple[object, float]:
        """Best label for one vector, optionally restricted to ``candidates``."""
        probs = self.predict_proba(vector)[0]
        allowed = range(len(self.labels))
        if candidates is not None:
            wanted = set(candidates)
            allowed = [i for i, label in enumerate(self.labels) if label in wanted]
            if not allowed:
                raise ValueError(f"{self.task}: no candidate among {self.labels}")
        best = max(allowed, key=lambda i: probs[i])
        return self.labels[best], float(probs[best])

    # ── Evaluation ───────────────────────────────────────────────────
    def evaluate(self, X_test: np.ndarray, Y_test: np.ndarray) -> dict:
        y_true = [self.labels[i] for i in np.asarray(Y_test).argmax(axis=1)]
        y_pred = self.predict(X_test)
        report = classification_report(
            [str(v) for v in y_true], [str(v) for v in y_pred],
            output_dict=True, zero_division=0,
        )
        metrics = {
            "accuracy": accuracy_score(y_true, y_pred),
            "macro_f1": f1_score(y_true, y_pred, average="macro", zero_division=0),
            "report": report,
        }
        logger.info(
            "%s evaluation — acc=%.4f  macro-F1=%.4f",
            self.task, metrics["accuracy"], metrics["macro_f1"],
        )
        return metrics
