"""
Test suite for vector retrieval.
"""

from unittest.mock import MagicMock

import pytest

from retrieval.vector_retriever import VectorRetriever
from shared.models import EmbeddedRecord


@pytest.fixture
def retriever(fake_embedder, store) -> VectorRetriever:
    store.upsert(
        [
            EmbeddedRecord("doc::chunk::00000", "doc", 0, "payment terms", (1.0, 0, 0, 0, 0, 0)),
            EmbeddedRecord("doc::chunk::00001", "doc", 1, "shipping info", (0, 0, 0, 1.0, 0, 0)),
        ]
    )
    return VectorRetriever(fake_embedder, store)


class TestVectorRetriever:

    def test_should_return_matching_chunks(self, retriever) -> None:
        results = retriever.retrieve("payment please", top_k=5, threshold=0.5)

        assert [r.text for r in results] == ["payment terms"]

    @pytest.mark.parametrize("query", ["", "   "])
    def test_blank_query_should_not_embed(self, retriever, fake_embedder, query) -> None:
        assert retriever.retrieve(query) == []
        assert fake_embedder.calls == []

    def test_non_positive_top_k_should_not_embed(self, retriever, fake_embedder) -> None:
        assert retriever.retrieve("payment", top_k=0) == []
        assert fake_embedder.calls == []

    def test_should_pass_limits_to_store(self, fake_embedder) -> None:
        store = MagicMock()
        store.search.return_value = []

        VectorRetriever(fake_embedder, store).retrieve("refund", top_k=3, threshold=0.1)

        store.search.assert_called_once_with(
            [0.0, 0.0, 1.0, 0.0, 0.0, 0.0], top_k=3, threshold=0.1, cancel_event=None
        )

    def test_defaults_are_five_and_point_seven_two(self, fake_embedder) -> None:
        store = MagicMock()
        store.search.return_value = []

        VectorRetriever(fake_embedder, store).retrieve("refund")

        kwargs = store.search.call_args.kwargs
        assert kwargs["top_k"] == 5
        assert kwargs["threshold"] == 0.72
