"""Synthetic labelled corpus built from the keyword lexicons.

No annotated French tickets exist, so every classifier is trained on
pseudo-sentences: a few keywords of one label dropped among neutral filler
words.  Classes are perfectly balanced and every lexicon entry gets covered.
"""

from __future__ import annotations

import random
from typing import Mapping, Sequence

import numpy as np
import pandas as pd

from intake.config import FILLERS_PER_EXAMPLE, KEYWORDS_PER_EXAMPLE, RANDOM_STATE
from intake.data.lexicons import FILLER_WORDS
from intake.preprocessing.features import extract_batch
from intake.preprocessing.vocabulary import Vocabulary


# ── Helpers ──────────────────────────────────────────────────────────────

def _pseudo_sentence(rng: random.Random, keywords: Sequence[str], fillers: Sequence[str]) -> str:
    lo, hi = KEYWORDS_PER_EXAMPLE
    k = min(rng.randint(lo, hi), len(keywords))
    parts = rng.sample(list(keywords), k) if k else []

    lo, hi = FILLERS_PER_EXAMPLE
    if fillers:
        parts += [rng.choice(fillers) for _ in range(rng.randint(lo, hi))]

    rng.shuffle(parts)
    return " ".join(parts)


# ── Public API ───────────────────────────────────────────────────────────

def generate_dataset(
    label_keywords: Mapping[object, Sequence[str]],
    examples_per_label: int,
    *,
    seed: int = RANDOM_STATE,
    fillers: Sequence[str] = FILLER_WORDS,
) -> pd.DataFrame:
    """Return a DataFrame with columns ``text`` and ``label``.

    Parameters
    ----------
    label_keywords:
        Label → keyword phrases.  Row order follows the mapping order.
    examples_per_label:
        Number of pseudo-sentences **per label**.
    seed:
        Seed of a private ``random.Random``; the global RNG is left alone.
    """
    rng = random.Random(seed)
    rows: list[tuple[str, object]] = []
    for label, keywords in label_keywords.items():
        for _ in range(examples_per_label):
            rows.append((_pseudo_sentence(rng, keywords, fillers), label))
    return pd.DataFrame(rows, columns=["text", "label"])


def generate(
    label_keywords: Mapping[object, Sequence[str]],
    examples_per_label: int,
    vocabulary: Vocabulary,
    *,
    seed: int = RANDOM_STATE,
    fillers: Sequence[str] = FILLER_WORDS,
) -> tuple[np.ndarray, np.ndarray]:
    """Feature matrix ``X`` and one-hot ``Y`` for a synthetic corpus.

    Column ``j`` of ``Y`` is the ``j``-th label of ``label_keywords``.
    """
    labels = list(label_keywords)
    df = generate_dataset(label_keywords, examples_per_label, seed=seed, fillers=fillers)

    X = extract_batch(df["text"].tolist(), vocabulary)
    Y = np.zeros((len(df), len(labels)), dtype=np.float32)
    if len(df):
        positions = {label: j for j, label in enumerate(labels)}
        Y[np.arange(len(df)), df["label"].map(positions).to_numpy()] = 1.0
    return X, Y
