"""
Embedding providers used to compute pattern vectors.
"""

# Package initialization for vector module
from .embeddings import (
    IEmbeddingProvider,
    DeterministicHashEmbedding,
    SentenceTransformerEmbedding,
    CachingEmbeddingProvider,
    average_embeddings,
    embed_pattern_examples,
)

__all__ = [
    'IEmbeddingProvider',
    'DeterministicHashEmbedding',
    'SentenceTransformerEmbedding',
    'CachingEmbeddingProvider',
    'average_embeddings',
    'embed_pattern_examples'
]
