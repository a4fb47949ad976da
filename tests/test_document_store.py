"""
Unit Tests for the Document Store

Tests InMemoryDocumentStore lifecycle, validation and raw search.

PATTERNS:
---------
1. Test through the protocol interface
2. Mock embeddings where exact scores matter
3. Use the bundled embedder for end-to-end ranking checks
"""

import dataclasses
from unittest.mock import MagicMock

import numpy as np
import pytest

from context_retriever.core import DocumentStore
from context_retriever.embeddings import HashingEmbeddings
from context_retriever.retrieval.document import Document, DocumentValidationError
from context_retriever.retrieval.store import (
    DocumentStoreConfig,
    InMemoryDocumentStore,
    get_document_store,
    keyword_tokens,
)


# ---------------------------------------------------------------------------
# FIXTURES
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_embeddings():
    """Embeddings keyed on animal words in the text."""
    embeddings = MagicMock()

    def mock_embed(text):
        text = text.lower()
        if "cat" in text or "feline" in text:
            return np.array([1.0, 0.0, 0.0])
        elif "dog" in text:
            return np.array([0.0, 1.0, 0.0])
        else:
            return np.array([0.0, 0.0, 1.0])

    def mock_embed_batch(texts):
        return [mock_embed(text) for text in texts]

    embeddings.embed.side_effect = mock_embed
    embeddings.embed_batch.side_effect = mock_embed_batch
    return embeddings


@pytest.fixture
def constant_embeddings():
    """Every text gets the same vector, so every document ties."""
    embeddings = MagicMock()
    embeddings.embed.side_effect = lambda text: np.array([1.0, 0.0])
    embeddings.embed_batch.side_effect = lambda texts: [np.array([1.0, 0.0]) for _ in texts]
    return embeddings


@pytest.fixture
def pets_store():
    """Store over the bundled embedder with three short documents."""
    store = InMemoryDocumentStore()
    store.add_documents([
        {"id": "doc1", "content": "The cat sat on the mat"},
        {"id": "doc2", "content": "A dog played in the park"},
        {"id": "doc3", "content": "The feline rested on the rug"},
    ])
    return store


# ---------------------------------------------------------------------------
# ADD / GET
# ---------------------------------------------------------------------------


class TestAddAndGet:
    """Test inserting and reading documents."""

    def test_add_then_get(self):
        store = InMemoryDocumentStore()
        store.add_document({"id": "a", "content": "hello", "metadata": {"k": 1}})

        doc = store.get_document("a")
        assert doc.id == "a"
        assert doc.content == "hello"
        assert doc.metadata == {"k": 1}
        assert doc.embedding.shape == (512,)

    def test_accepts_document_instances(self):
        store = InMemoryDocumentStore()
        store.add_document(Document(id="a", content="hello"))
        assert store.get_document("a").content == "hello"

    def test_missing_metadata_defaults_to_empty(self):
        store = InMemoryDocumentStore()
        store.add_document({"id": "a", "content": "hello"})
        assert store.get_document("a").metadata == {}

    def test_get_unknown_returns_none(self):
        assert InMemoryDocumentStore().get_document("nope") is None

    def test_empty_content_is_allowed(self):
        """Empty content stores a zero vector and scores 0."""
        store = InMemoryDocumentStore()
        store.add_document({"id": "empty", "content": ""})

        results = store.search("anything", top_k=5)
        assert [r.id for r in results] == ["empty"]
        assert results[0].similarity == 0.0

    def test_add_documents_counts(self):
        store = InMemoryDocumentStore()
        added = store.add_documents([
            {"id": "a", "content": "one"},
            {"id": "b", "content": "two"},
        ])
        assert [d.id for d in added] == ["a", "b"]
        assert store.get_document_count() == 2
        assert len(store) == 2

    def test_add_documents_empty_list(self):
        store = InMemoryDocumentStore()
        assert store.add_documents([]) == []
        assert store.get_document_count() == 0

    def test_duplicate_ids_in_batch_later_wins(self):
        store = InMemoryDocumentStore()
        store.add_documents([
            {"id": "a", "content": "first"},
            {"id": "a", "content": "second"},
        ])
        assert store.get_document_count() == 1
        assert store.get_document("a").content == "second"

    def test_batch_uses_embed_batch(self, mock_embeddings):
        store = InMemoryDocumentStore(mock_embeddings)
        store.add_documents([{"id": "a", "content": "cat"}, {"id": "b", "content": "dog"}])

        mock_embeddings.embed_batch.assert_called_once_with(["cat", "dog"])

    def test_batch_vector_count_mismatch_raises(self):
        embeddings = MagicMock()
        embeddings.embed_batch.return_value = [np.array([1.0])]
        store = InMemoryDocumentStore(embeddings)

        with pytest.raises(ValueError):
            store.add_documents([{"id": "a", "content": "x"}, {"id": "b", "content": "y"}])
        assert store.get_document_count() == 0


# ---------------------------------------------------------------------------
# OVERWRITE
# ---------------------------------------------------------------------------


class TestOverwrite:
    """Re-adding an id replaces the document completely."""

    def test_overwrite_replaces_content_and_metadata(self):
        store = InMemoryDocumentStore()
        store.add_document({"id": "a", "content": "The cat sat", "metadata": {"old": True}})
        store.add_document({"id": "a", "content": "A bird flew", "metadata": {"new": True}})

        doc = store.get_document("a")
        assert doc.content == "A bird flew"
        assert doc.metadata == {"new": True}
        assert store.get_document_count() == 1

    def test_old_content_not_discoverable(self):
        store = InMemoryDocumentStore()
        store.add_document({"id": "a", "content": "The cat sat"})
        store.add_document({"id": "a", "content": "A bird flew"})

        assert store.search_keyword("cat") == []
        assert [r.id for r in store.search_keyword("bird")] == ["a"]

    def test_overwrite_keeps_insertion_slot(self):
        store = InMemoryDocumentStore()
        store.add_documents([
            {"id": "a", "content": "1"},
            {"id": "b", "content": "2"},
        ])
        store.add_document({"id": "a", "content": "3"})
        assert store.document_ids() == ["a", "b"]


# ---------------------------------------------------------------------------
# VALIDATION
# ---------------------------------------------------------------------------


class TestValidation:
    """Structurally invalid documents are rejected."""

    @pytest.mark.parametrize("raw", [
        {"content": "no id"},
        {"id": "no-content"},
        {"id": 7, "content": "numeric id"},
        {"id": "a", "content": None},
        {"id": "a", "content": 42},
        {"id": "a", "content": "x", "metadata": ["not", "a", "mapping"]},
        "just a string",
    ])
    def test_invalid_document_raises(self, raw):
        with pytest.raises(DocumentValidationError):
            InMemoryDocumentStore().add_document(raw)

    def test_validation_error_is_value_error(self):
        with pytest.raises(ValueError):
            InMemoryDocumentStore().add_document({"id": "a"})

    def test_bad_entry_leaves_batch_unwritten(self):
        store = InMemoryDocumentStore()
        with pytest.raises(DocumentValidationError):
            store.add_documents([
                {"id": "good", "content": "fine"},
                {"id": "bad"},
            ])
        assert store.get_document_count() == 0
        assert store.get_document("good") is None


# ---------------------------------------------------------------------------
# ISOLATION
# ---------------------------------------------------------------------------


class TestIsolation:
    """Callers never hold references into store state."""

    def test_returned_metadata_is_a_copy(self):
        store = InMemoryDocumentStore()
        store.add_document({"id": "a", "content": "x", "metadata": {"tags": ["one"]}})

        doc = store.get_document("a")
        doc.metadata["tags"].append("two")
        doc.metadata["extra"] = True

        assert store.get_document("a").metadata == {"tags": ["one"]}

    def test_input_metadata_is_copied(self):
        store = InMemoryDocumentStore()
        metadata = {"tags": ["one"]}
        store.add_document({"id": "a", "content": "x", "metadata": metadata})

        metadata["tags"].append("two")
        assert store.get_document("a").metadata == {"tags": ["one"]}

    def test_search_result_metadata_is_a_copy(self):
        store = InMemoryDocumentStore()
        store.add_document({"id": "a", "content": "cat", "metadata": {"k": "v"}})

        store.search("cat", top_k=1)[0].metadata["k"] = "changed"
        assert store.get_document("a").metadata == {"k": "v"}

    def test_embedding_is_read_only(self):
        store = InMemoryDocumentStore()
        store.add_document({"id": "a", "content": "x"})

        embedding = store.get_document("a").embedding
        assert not embedding.flags.writeable
        with pytest.raises(ValueError):
            embedding[0] = 1.0

    def test_document_is_frozen(self):
        store = InMemoryDocumentStore()
        doc = store.add_document({"id": "a", "content": "x"})
        with pytest.raises(dataclasses.FrozenInstanceError):
            doc.content = "y"


# ---------------------------------------------------------------------------
# UPDATE / DELETE
# ---------------------------------------------------------------------------


class TestUpdate:
    """Test in-place updates."""

    def test_update_unknown_returns_false(self):
        assert InMemoryDocumentStore().update_document("nope", content="x") is False

    def test_content_change_reembeds(self, mock_embeddings):
        store = InMemoryDocumentStore(mock_embeddings)
        store.add_document({"id": "a", "content": "cat"})
        before = store.get_document("a").embedding

        assert store.update_document("a", content="dog") is True
        after = store.get_document("a").embedding

        assert not np.array_equal(before, after)
        assert store.search("dog", top_k=1)[0].similarity == pytest.approx(1.0)

    def test_metadata_only_update_keeps_embedding(self, mock_embeddings):
        store = InMemoryDocumentStore(mock_embeddings)
        store.add_document({"id": "a", "content": "cat", "metadata": {"v": 1}})
        calls = mock_embeddings.embed.call_count

        store.update_document("a", metadata={"v": 2})

        assert mock_embeddings.embed.call_count == calls
        assert store.get_document("a").metadata == {"v": 2}
        assert store.get_document("a").content == "cat"

    def test_unchanged_content_does_not_reembed(self, mock_embeddings):
        store = InMemoryDocumentStore(mock_embeddings)
        store.add_document({"id": "a", "content": "cat"})
        calls = mock_embeddings.embed.call_count

        store.update_document("a", content="cat")
        assert mock_embeddings.embed.call_count == calls

    def test_update_bumps_updated_at(self):
        store = InMemoryDocumentStore()
        created = store.add_document({"id": "a", "content": "x"})
        store.update_document("a", metadata={"k": 1})

        doc = store.get_document("a")
        assert doc.created_at == created.created_at
        assert doc.updated_at >= created.updated_at

    def test_update_rejects_non_string_content(self):
        store = InMemoryDocumentStore()
        store.add_document({"id": "a", "content": "x"})
        with pytest.raises(DocumentValidationError):
            store.update_document("a", content=123)


class TestDelete:
    """Test removal."""

    def test_delete_removes_from_everything(self, pets_store):
        assert pets_store.delete_document("doc1") is True

        assert pets_store.get_document_count() == 2
        assert pets_store.get_document("doc1") is None
        assert "doc1" not in [r.id for r in pets_store.search("cat", top_k=10)]
        assert pets_store.search_keyword("cat") == []

    def test_delete_unknown_returns_false(self, pets_store):
        assert pets_store.delete_document("nope") is False
        assert pets_store.get_document_count() == 3

    def test_delete_keeps_relative_order(self, pets_store):
        pets_store.delete_document("doc2")
        assert pets_store.document_ids() == ["doc1", "doc3"]

    def test_clear(self, pets_store):
        pets_store.clear()
        assert pets_store.get_document_count() == 0
        assert pets_store.search("cat") == []


# ---------------------------------------------------------------------------
# SEMANTIC SEARCH
# ---------------------------------------------------------------------------


class TestSemanticSearch:
    """Test cosine similarity search."""

    def test_cat_query_ranks_cat_document_first(self, pets_store):
        results = pets_store.search("cat sitting", top_k=2)

        assert len(results) == 2
        assert results[0].id == "doc1"
        assert results[0].similarity >= results[1].similarity

    def test_returns_everything_up_to_top_k(self, pets_store):
        assert len(pets_store.search("cat", top_k=10)) == 3

    @pytest.mark.parametrize("top_k", [0, -1])
    def test_non_positive_top_k_returns_empty(self, pets_store, top_k):
        assert pets_store.search("cat", top_k=top_k) == []

    def test_empty_store_returns_empty(self):
        assert InMemoryDocumentStore().search("cat") == []

    def test_ranks_are_contiguous(self, pets_store):
        results = pets_store.search("the", top_k=3)
        assert [r.rank for r in results] == [1, 2, 3]

    def test_similarities_in_unit_interval(self, pets_store):
        for result in pets_store.search("dog cat on a rug", top_k=3):
            assert 0.0 <= result.similarity <= 1.0

    def test_exact_match_scores_one(self, mock_embeddings):
        store = InMemoryDocumentStore(mock_embeddings)
        store.add_documents([{"id": "c", "content": "cat"}, {"id": "d", "content": "dog"}])

        results = store.search("feline", top_k=2)
        assert results[0].id == "c"
        assert results[0].similarity == pytest.approx(1.0)
        assert results[1].similarity == 0.0

    def test_ties_keep_insertion_order(self, constant_embeddings):
        store = InMemoryDocumentStore(constant_embeddings)
        store.add_documents([
            {"id": "c", "content": "x"},
            {"id": "a", "content": "y"},
            {"id": "b", "content": "z"},
        ])
        store.add_document({"id": "c", "content": "overwritten"})

        assert [r.id for r in store.search("q", top_k=3)] == ["c", "a", "b"]


# ---------------------------------------------------------------------------
# KEYWORD SEARCH
# ---------------------------------------------------------------------------


class TestKeywordSearch:
    """Test term-overlap search."""

    def test_only_matching_documents(self, pets_store):
        results = pets_store.search_keyword("cat", top_k=5)
        assert [r.id for r in results] == ["doc1"]
        assert results[0].similarity == 1.0

    def test_zero_overlap_is_excluded(self, pets_store):
        assert pets_store.search_keyword("zebra", top_k=5) == []

    def test_score_is_fraction_of_query_terms(self, pets_store):
        results = pets_store.search_keyword("cat zebra", top_k=5)
        assert results[0].similarity == pytest.approx(0.5)

    def test_case_and_punctuation_insensitive(self):
        store = InMemoryDocumentStore()
        store.add_document({"id": "a", "content": "The cat sat on the mat."})

        assert [r.id for r in store.search_keyword("MAT!")] == ["a"]

    def test_partial_words_do_not_match(self, pets_store):
        assert pets_store.search_keyword("ca") == []

    def test_higher_overlap_ranks_first(self, pets_store):
        results = pets_store.search_keyword("the feline on", top_k=5)
        assert results[0].id == "doc3"
        assert [r.rank for r in results] == list(range(1, len(results) + 1))

    def test_ties_keep_insertion_order(self):
        store = InMemoryDocumentStore()
        store.add_documents([
            {"id": "b", "content": "alpha beta"},
            {"id": "a", "content": "alpha gamma"},
        ])
        assert [r.id for r in store.search_keyword("alpha")] == ["b", "a"]

    @pytest.mark.parametrize("top_k", [0, -3])
    def test_non_positive_top_k_returns_empty(self, pets_store, top_k):
        assert pets_store.search_keyword("cat", top_k=top_k) == []

    def test_blank_query_returns_empty(self, pets_store):
        assert pets_store.search_keyword("  ?! ") == []


class TestKeywordTokens:
    """Test tokenization used by keyword search."""

    def test_lowercases_and_strips_punctuation(self):
        assert keyword_tokens("The Cat sat.") == ["the", "cat", "sat"]

    def test_keeps_inner_punctuation(self):
        assert keyword_tokens("self-attention, (really)") == ["self-attention", "really"]

    def test_drops_pure_punctuation(self):
        assert keyword_tokens("-- ... !") == []


# ---------------------------------------------------------------------------
# EMBEDDER SWAP / INSPECTION
# ---------------------------------------------------------------------------


class TestEmbedderSwap:
    """Test set_embedding_provider."""

    def test_reembeds_existing_documents(self, pets_store):
        pets_store.set_embedding_provider(HashingEmbeddings(dimensions=64))

        for doc in pets_store.get_all_documents():
            assert doc.embedding.shape == (64,)
        assert len(pets_store.search("cat", top_k=10)) == 3

    def test_swap_on_empty_store(self, mock_embeddings):
        store = InMemoryDocumentStore()
        store.set_embedding_provider(mock_embeddings)
        store.add_document({"id": "a", "content": "cat"})
        assert store.search("cat", top_k=1)[0].similarity == pytest.approx(1.0)

    def test_short_vector_batch_keeps_every_document(self, pets_store):
        """A provider that loses vectors must not lose documents."""
        broken = MagicMock()
        broken.embed_batch.return_value = [np.array([1.0, 0.0])]

        with pytest.raises(ValueError):
            pets_store.set_embedding_provider(broken)

        assert pets_store.document_ids() == ["doc1", "doc2", "doc3"]
        for doc in pets_store.get_all_documents():
            assert doc.embedding.shape == (512,)

    def test_failed_swap_keeps_old_provider(self, pets_store):
        broken = MagicMock()
        broken.embed_batch.return_value = []

        with pytest.raises(ValueError):
            pets_store.set_embedding_provider(broken)

        pets_store.add_document({"id": "doc4", "content": "A cat again"})
        broken.embed.assert_not_called()
        assert pets_store.get_document("doc4").embedding.shape == (512,)

    def test_mixed_lengths_rejected(self, pets_store):
        ragged = MagicMock()
        ragged.embed_batch.return_value = [np.ones(4), np.ones(4), np.ones(5)]

        with pytest.raises(ValueError):
            pets_store.set_embedding_provider(ragged)
        assert pets_store.get_document("doc3").embedding.shape == (512,)


class TestDimensionCheck:
    """Every stored vector has the same length."""

    @pytest.fixture
    def ragged_embeddings(self):
        """Texts starting with 'short' get a 2-long vector, others 3-long."""
        embeddings = MagicMock()

        def embed(text):
            return np.ones(2) if text.startswith("short") else np.ones(3)

        embeddings.embed.side_effect = embed
        embeddings.embed_batch.side_effect = lambda texts: [embed(t) for t in texts]
        return embeddings

    def test_add_document_rejects_other_length(self, ragged_embeddings):
        store = InMemoryDocumentStore(ragged_embeddings)
        store.add_document({"id": "a", "content": "normal"})

        with pytest.raises(ValueError):
            store.add_document({"id": "b", "content": "short text"})
        assert store.document_ids() == ["a"]

    def test_add_documents_rejects_mixed_batch(self, ragged_embeddings):
        store = InMemoryDocumentStore(ragged_embeddings)

        with pytest.raises(ValueError):
            store.add_documents([
                {"id": "a", "content": "normal"},
                {"id": "b", "content": "short text"},
            ])
        assert store.get_document_count() == 0

    def test_update_rejects_other_length(self, ragged_embeddings):
        store = InMemoryDocumentStore(ragged_embeddings)
        store.add_document({"id": "a", "content": "normal"})

        with pytest.raises(ValueError):
            store.update_document("a", content="short text")
        assert store.get_document("a").content == "normal"

    def test_first_document_sets_length(self, ragged_embeddings):
        store = InMemoryDocumentStore(ragged_embeddings)
        store.add_document({"id": "a", "content": "short text"})
        assert store.get_document("a").embedding.shape == (2,)


class TestInspection:
    """Test listing helpers."""

    def test_get_all_documents_in_insertion_order(self, pets_store):
        assert [d.id for d in pets_store.get_all_documents()] == ["doc1", "doc2", "doc3"]

    def test_document_ids(self, pets_store):
        assert pets_store.document_ids() == ["doc1", "doc2", "doc3"]

    def test_document_to_dict(self, pets_store):
        data = pets_store.get_document("doc1").to_dict()
        assert data["id"] == "doc1"
        assert "embedding" not in data
        assert "created_at" in data


# ---------------------------------------------------------------------------
# FACTORY FUNCTION
# ---------------------------------------------------------------------------


class TestGetDocumentStore:
    """Test the get_document_store factory."""

    def test_returns_new_instance_each_call(self):
        first = get_document_store()
        second = get_document_store()

        assert first is not second
        first.add_document({"id": "a", "content": "x"})
        assert second.get_document_count() == 0

    def test_uses_injected_embeddings(self, mock_embeddings):
        store = get_document_store(embeddings=mock_embeddings)
        store.add_document({"id": "a", "content": "cat"})
        mock_embeddings.embed.assert_called_with("cat")

    def test_config_sizes_default_embedder(self):
        store = get_document_store(config=DocumentStoreConfig(embedding_dim=32))
        store.add_document({"id": "a", "content": "x"})
        assert store.get_document("a").embedding.shape == (32,)

    def test_config_from_env(self, monkeypatch):
        monkeypatch.setenv("RAG_EMBEDDING_DIM", "16")
        assert DocumentStoreConfig.from_env().embedding_dim == 16

    def test_implements_protocol(self):
        assert isinstance(get_document_store(), DocumentStore)
