"""Unit tests for cosine similarity scoring."""

import math

import pytest

from mentor.application.services.similarity import cosine_similarity


@pytest.mark.parametrize(
    "vector",
    [[1.0, 0.0], [0.3, -2.5, 7.0], [1e-3, 1e-3, 1e-3, 1e-3], [-4.0]],
)
def test_vector_is_identical_to_itself(vector):
    assert cosine_similarity(vector, vector) == pytest.approx(1.0)


def test_orthogonal_vectors_score_zero():
    assert cosine_similarity([1.0, 0.0], [0.0, 1.0]) == pytest.approx(0.0)


def test_opposite_vectors_score_minus_one():
    assert cosine_similarity([1.0, 2.0], [-1.0, -2.0]) == pytest.approx(-1.0)


def test_known_angle():
    assert cosine_similarity([1.0, 0.0], [1.0, 1.0]) == pytest.approx(1 / math.sqrt(2))


def test_length_mismatch_scores_zero():
    assert cosine_similarity([1.0, 0.0], [1.0, 0.0, 0.0]) == 0.0


@pytest.mark.parametrize(
    "a, b",
    [([0.0, 0.0], [1.0, 2.0]), ([1.0, 2.0], [0.0, 0.0]), ([0.0], [0.0])],
)
def test_zero_magnitude_scores_zero(a, b):
    assert cosine_similarity(a, b) == 0.0


def test_empty_vectors_score_zero():
    assert cosine_similarity([], []) == 0.0


def test_symmetric():
    a = [0.2, -0.7, 1.3, 4.0]
    b = [1.1, 0.4, -0.9, 2.2]
    assert cosine_similarity(a, b) == cosine_similarity(b, a)


def test_scale_invariant():
    a = [1.0, 2.0, 3.0]
    b = [2.0, 1.0, 0.5]
    assert cosine_similarity(a, b) == pytest.approx(cosine_similarity([x * 10 for x in a], b))


def test_accepts_integers():
    assert cosine_similarity([1, 0], [1, 0]) == pytest.approx(1.0)
