"""
Test suite for cosine similarity scoring.
"""

import pytest

from retrieval.similarity import cosine_similarity
from shared.errors import DimensionMismatchError


class TestCosineSimilarity:

    @pytest.mark.parametrize(
        "vector",
        [[0.3, 0.4, 0.5], [0.1, 0.2, 0.7], [1.0, 2.0, 3.0], [-0.25, 0.9, 1e-3, 42.0], [0.7]],
    )
    def test_identical_vectors_score_exactly_one(self, vector) -> None:
        assert cosine_similarity(vector, list(vector)) == 1.0

    def test_score_should_ignore_magnitude(self) -> None:
        assert cosine_similarity([1.0, 2.0], [2.0, 4.0]) == pytest.approx(1.0)

    def test_orthogonal_and_opposite_vectors(self) -> None:
        assert cosine_similarity([1.0, 0.0], [0.0, 1.0]) == pytest.approx(0.0)
        assert cosine_similarity([1.0, 0.0], [-1.0, 0.0]) == pytest.approx(-1.0)

    def test_score_should_stay_within_bounds(self) -> None:
        score = cosine_similarity([1e-8, 3.0, 7.0], [1e-8, 3.0, 7.0])

        assert -1.0 <= score <= 1.0

    def test_zero_or_empty_vectors_score_zero(self) -> None:
        assert cosine_similarity([0.0, 0.0], [1.0, 2.0]) == 0.0
        assert cosine_similarity([], []) == 0.0

    def test_unequal_lengths_should_raise(self) -> None:
        with pytest.raises(DimensionMismatchError, match="got 2 and 3"):
            cosine_similarity([1.0, 2.0], [1.0, 2.0, 3.0])

    def test_dimension_mismatch_is_a_value_error(self) -> None:
        with pytest.raises(ValueError):
            cosine_similarity([1.0], [])

    def test_returns_python_float(self) -> None:
        assert type(cosine_similarity([1.0, 2.0], [2.0, 1.0])) is float
