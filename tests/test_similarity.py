"""Unit tests for tripwhiz_support.vector_store.similarity."""
import numpy as np
import pytest

from tripwhiz_support.vector_store.similarity import cosine_similarity


def test_identical_vectors_score_one():
    assert cosine_similarity([0.3, -1.2, 4.0], [0.3, -1.2, 4.0]) == pytest.approx(1.0)


def test_orthogonal_and_opposite_vectors():
    assert cosine_similarity([1.0, 0.0], [0.0, 1.0]) == pytest.approx(0.0)
    assert cosine_similarity([1.0, 2.0], [-1.0, -2.0]) == pytest.approx(-1.0)


def test_scale_invariant():
    assert cosine_similarity([1.0, 1.0], [10.0, 10.0]) == pytest.approx(1.0)


@pytest.mark.parametrize(
    "a, b",
    [
        ([0.0, 0.0], [1.0, 2.0]),
        ([1.0, 2.0], [0.0, 0.0]),
        ([0.0, 0.0], [0.0, 0.0]),
    ],
)
def test_zero_vector_scores_zero(a, b):
    assert cosine_similarity(a, b) == 0.0


def test_dimension_mismatch_scores_zero():
    assert cosine_similarity([1.0, 0.0], [1.0, 0.0, 0.0]) == 0.0


def test_empty_and_non_numeric_inputs_score_zero():
    assert cosine_similarity([], []) == 0.0
    assert cosine_similarity(["x", "y"], [1.0, 2.0]) == 0.0


def test_scores_stay_within_bounds():
    rng = np.random.default_rng(7)
    for _ in range(50):
        a = rng.normal(size=16)
        b = rng.normal(size=16)
        score = cosine_similarity(a.tolist(), b.tolist())
        assert -1.0 <= score <= 1.0
