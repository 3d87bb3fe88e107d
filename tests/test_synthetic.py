"""Synthetic corpus generation from the keyword lexicons."""

import numpy as np
import pytest

from intake.config import FILLERS_PER_EXAMPLE
from intake.data.lexicons import FILLER_WORDS, SENTIMENT_LEXICONS, URGENCY_LEXICONS
from intake.data.synthetic_generator import generate, generate_dataset
from intake.preprocessing.vocabulary import build_vocabularies


@pytest.fixture(scope="module")
def vocabs():
    return build_vocabularies()


def test_dataset_is_balanced():
    df = generate_dataset(URGENCY_LEXICONS, 40, seed=1)
    assert list(df.columns) == ["text", "label"]
    assert len(df) == 5 * 40
    assert df["label"].value_counts().to_dict() == {level: 40 for level in URGENCY_LEXICONS}


def test_same_seed_same_corpus():
    a = generate_dataset(SENTIMENT_LEXICONS, 20, seed=7)
    b = generate_dataset(SENTIMENT_LEXICONS, 20, seed=7)
    c = generate_dataset(SENTIMENT_LEXICONS, 20, seed=8)
    assert a.equals(b)
    assert not a.equals(c)


def test_sentences_mix_keywords_and_fillers():
    df = generate_dataset({"only": ("clavier",)}, 50, seed=3)
    lo, hi = FILLERS_PER_EXAMPLE
    for text in df["text"]:
        words = text.split()
        assert words.count("clavier") == 1
        fillers = [w for w in words if w != "clavier"]
        assert lo <= len(fillers) <= hi
        assert set(fillers) <= set(FILLER_WORDS)


def test_generate_one_hot_targets(vocabs):
    X, Y = generate(URGENCY_LEXICONS, 30, vocabs["urgency"], seed=2)
    assert X.shape == (150, len(vocabs["urgency"]))
    assert Y.shape == (150, 5)
    assert np.all(Y.sum(axis=1) == 1)
    # column j ↔ j-th label, rows grouped by label
    assert np.all(Y[:30, 0] == 1) and np.all(Y[-30:, 4] == 1)
    # every example carries at least one keyword the vocabulary knows
    assert np.all(X.sum(axis=1) > 0)


def test_generate_is_reproducible(vocabs):
    X1, Y1 = generate(SENTIMENT_LEXICONS, 10, vocabs["sentiment"], seed=5)
    X2, Y2 = generate(SENTIMENT_LEXICONS, 10, vocabs["sentiment"], seed=5)
    np.testing.assert_array_equal(X1, X2)
    np.testing.assert_array_equal(Y1, Y2)
