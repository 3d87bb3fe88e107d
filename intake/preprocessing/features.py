"""Bag-of-stems term-count vectors against a fixed vocabulary."""

from __future__ import annotations

from typing import Iterable

import numpy as np

from intake.preprocessing.text_cleaner import stem_tokens
from intake.preprocessing.vocabulary import Vocabulary


def extract(text: str | None, vocabulary: Vocabulary) -> np.ndarray:
    """Return a float32 vector of shape ``(len(vocabulary),)``.

    Each in-vocabulary stem increments its slot; anything else is ignored.
    Empty, ``None`` or unrecognised text gives an all-zero vector.
    """
    vec = np.zeros(len(vocabulary), dtype=np.float32)
    for token in stem_tokens(text):
        idx = vocabulary.index(token)
        if idx is not None:
            vec[idx] += 1.0
    return vec


def extract_batch(texts: Iterable[str], vocabulary: Vocabulary) -> np.ndarray:
    """Stack :func:`extract` over ``texts`` → ``(n, len(vocabulary))``."""
    rows = [extract(t, vocabulary) for t in texts]
    if not rows:
        return np.zeros((0, len(vocabulary)), dtype=np.float32)
    return np.vstack(rows)
