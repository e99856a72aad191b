"""
Tests for the embedding providers used to build pattern vectors.
"""

from unittest.mock import MagicMock, patch

import numpy as np
import pytest
from nlq_patterns.vector.embeddings import (
    CachingEmbeddingProvider,
    DeterministicHashEmbedding,
    IEmbeddingProvider,
    SentenceTransformerEmbedding,
    average_embeddings,
    embed_pattern_examples,
)

def test_embedding_interface():
    """Test that the embedding provider implements the interface correctly."""
    embedder = DeterministicHashEmbedding(dimension=384)

    assert isinstance(embedder, IEmbeddingProvider)
    assert embedder.get_dimension() == 384

def test_deterministic_embedding():
    """Test that the same input always produces the same output."""
    embedder = DeterministicHashEmbedding(dimension=384)

    text = "papers about climate change"
    vector1 = embedder.embed_text(text)
    vector2 = embedder.embed_text(text)

    assert vector1 == vector2
    assert len(vector1) == 384

def test_different_inputs_produce_different_vectors():
    """Test that different inputs produce different vectors."""
    embedder = DeterministicHashEmbedding(dimension=384)

    vector1 = embedder.embed_text("how many users")
    vector2 = embedder.embed_text("count orders")

    # Should be different (though not guaranteed, very unlikely to be the same)
    assert vector1 != vector2

def test_consistent_output_across_instances():
    """Test that separate instances agree."""
    embedder1 = DeterministicHashEmbedding(dimension=384)
    embedder2 = DeterministicHashEmbedding(dimension=384)

    text = "restaurants near Central Park"
    assert embedder1.embed_text(text) == embedder2.embed_text(text)

def test_values_in_unit_range():
    """Test that hash values map into [-1, 1)."""
    vector = DeterministicHashEmbedding(dimension=384).embed_text("values")

    assert all(-1.0 <= v < 1.0 for v in vector)

def test_embedding_with_different_dimensions():
    """Test embedding with different dimension sizes."""
    small_vector = DeterministicHashEmbedding(dimension=64).embed_text("test")
    assert len(small_vector) == 64

    large_vector = DeterministicHashEmbedding(dimension=512).embed_text("test")
    assert len(large_vector) == 512

    # Shorter vectors are a prefix of longer ones
    assert large_vector[:64] == small_vector

def test_embedding_edge_cases():
    """Test embedding with edge cases."""
    embedder = DeterministicHashEmbedding(dimension=384)

    assert len(embedder.embed_text("")) == 384
    assert len(embedder.embed_text("A" * 1000)) == 384
    assert len(embedder.embed_text("Hello\n\t\rWorld!@#$%^&*()")) == 384
    assert len(embedder.embed_text("café ñandú")) == 384

def test_caching_provider_memoizes():
    """Test that repeated texts are embedded once."""
    inner = MagicMock(spec=IEmbeddingProvider)
    inner.embed_text.return_value = [0.5] * 4
    inner.get_dimension.return_value = 4

    cached = CachingEmbeddingProvider(inner)
    cached.embed_text("same")
    cached.embed_text("same")
    cached.embed_text("other")

    assert inner.embed_text.call_count == 2
    assert cached.cache_size == 2
    assert cached.get_dimension() == 4

def test_average_embeddings():
    """Test element-wise mean."""
    result = average_embeddings([[1.0, 2.0], [3.0, 4.0]])

    assert np.array_equal(result, np.array([2.0, 3.0]))
    assert average_embeddings([]).size == 0

def test_embed_pattern_examples():
    """Test that a pattern vector is the float32 mean of its examples."""
    embedder = DeterministicHashEmbedding(dimension=384)
    examples = ["how many users", "count orders"]

    vector = embed_pattern_examples(embedder, examples)

    expected = (np.array(embedder.embed_text(examples[0])) + np.array(embedder.embed_text(examples[1]))) / 2
    assert vector.dtype == np.float32
    assert vector.shape == (384,)
    np.testing.assert_allclose(vector, expected, atol=1e-6)

def test_embed_pattern_without_examples():
    """Test that no examples gives an empty vector, not a zero vector."""
    vector = embed_pattern_examples(DeterministicHashEmbedding(dimension=16), [])

    assert vector.size == 0
    assert vector.dtype == np.float32

def test_sentence_transformer_loads_lazily():
    """Test that the model is created on first use only."""
    pytest.importorskip("sentence_transformers")
    fake_model = MagicMock()
    fake_model.encode.return_value = np.array([0.1, 0.2, 0.3])
    fake_model.get_sentence_embedding_dimension.return_value = 3

    with patch("sentence_transformers.SentenceTransformer", return_value=fake_model) as mock_cls:
        embedder = SentenceTransformerEmbedding("test-model")
        assert mock_cls.call_count == 0

        assert embedder.embed_text("hello") == pytest.approx([0.1, 0.2, 0.3])
        assert embedder.get_dimension() == 3
        mock_cls.assert_called_once_with("test-model")

if __name__ == "__main__":
    pytest.main([__file__, "-v"])
