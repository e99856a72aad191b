"""
Embedding providers used to compute pattern vectors.
The shipped blob is precomputed; providers regenerate it or fill in at runtime.
"""

from abc import ABC, abstractmethod
import hashlib
from typing import Dict, Iterable, List, Sequence
import numpy as np

class IEmbeddingProvider(ABC):
    """Abstract interface for embedding providers."""

    @abstractmethod
    def embed_text(self, text: str) -> list[float]:
        """Generate embedding vector for given text."""
        pass

    @abstractmethod
    def get_dimension(self) -> int:
        """Get the dimension of the embedding vectors."""
        pass

class DeterministicHashEmbedding(IEmbeddingProvider):
    """Deterministic hash-based embedding provider.

    Each md5 digest of "{block}:{text}" yields four values in [-1, 1);
    blocks are hashed until the vector reaches the requested dimension.
    Reproducible without model downloads, but carries no semantics.
    """

    def __init__(self, dimension: int = 384):
        self.dimension = dimension

    def embed_text(self, text: str) -> list[float]:
        """Generate deterministic embedding vector using hash function."""
        vector = []
        block = 0
        while len(vector) < self.dimension:
            hex_dig = hashlib.md5(f"{block}:{text}".encode("utf-8")).hexdigest()

            for i in range(0, len(hex_dig), 8):
                value = int(hex_dig[i:i+8], 16)

                # Normalize to [0, 1) and then map to [-1, 1)
                vector.append((value / (2**32)) * 2 - 1)
            block += 1

        return vector[:self.dimension]

    def get_dimension(self) -> int:
        """Get the dimension of the embedding vectors."""
        return self.dimension

class SentenceTransformerEmbedding(IEmbeddingProvider):
    """Sentence transformers embedding provider using pre-trained models.

    Defaults to all-MiniLM-L6-v2, which produces 384-dimension vectors.
    """

    def __init__(self, model_name: str = "all-MiniLM-L6-v2"):
        self.model_name = model_name
        self._model = None
        self._dimension = None

    @property
    def model(self):
        if self._model is None:
            try:
                from sentence_transformers import SentenceTransformer
            except ImportError:
                raise ImportError("sentence-transformers not installed. Install the 'embeddings' extra.")
            self._model = SentenceTransformer(self.model_name)
        return self._model

    def embed_text(self, text: str) -> list[float]:
        """Generate embedding vector using sentence transformers."""
        embedding = self.model.encode(text, convert_to_tensor=False)
        return embedding.tolist()

    def get_dimension(self) -> int:
        """Get the dimension of the embedding vectors."""
        if self._dimension is None:
            self._dimension = self.model.get_sentence_embedding_dimension()
        return self._dimension


class CachingEmbeddingProvider(IEmbeddingProvider):
    """Wraps a provider and memoizes vectors per input text."""

    def __init__(self, provider: IEmbeddingProvider):
        self.provider = provider
        self._cache: Dict[str, list[float]] = {}

    def embed_text(self, text: str) -> list[float]:
        if text not in self._cache:
            self._cache[text] = self.provider.embed_text(text)
        return self._cache[text]

    def get_dimension(self) -> int:
        return self.provider.get_dimension()

    @property
    def cache_size(self) -> int:
        return len(self._cache)


def average_embeddings(vectors: Sequence[Sequence[float]]) -> np.ndarray:
    """Element-wise mean of equal-length vectors (float64); empty input gives an empty array."""
    if len(vectors) == 0:
        return np.array([], dtype=np.float64)
    return np.mean(np.array(vectors, dtype=np.float64), axis=0)


def embed_pattern_examples(provider: IEmbeddingProvider, examples: Iterable[str]) -> np.ndarray:
    """
    Embed a pattern as the mean of its example embeddings.

    Args:
        provider: Embedding provider
        examples: Example phrases of one pattern

    Returns:
        float32 vector of provider dimension, or an empty array when there
        are no examples
    """
    vectors: List[list[float]] = [provider.embed_text(example) for example in examples]
    return average_embeddings(vectors).astype(np.float32)
