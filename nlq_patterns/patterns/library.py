"""
Pattern library: the pattern table joined with its embeddings.

Matching, slot extraction and template filling belong to the query engine
that consumes this library; it only owns loading and per-pattern success
metrics.
"""

import time
from typing import Any, Dict, List, Optional, Sequence

import numpy as np

from .embeddings import CorruptEmbeddingDataError, get_pattern_embeddings
from .table import EMBEDDED_PATTERNS
from .types import PatternRecord
from ..vector.embeddings import CachingEmbeddingProvider, IEmbeddingProvider, embed_pattern_examples
from util.logging import logger

METRIC_ALPHA = 0.1
DEFAULT_METRIC = 0.5


class PatternLibrary:
    """Pattern table, vectors and success metrics for the query engine."""

    def __init__(self, patterns: Sequence[PatternRecord] = None, embedding_loader=None):
        """
        Args:
            patterns: Pattern table, defaults to the shipped table
            embedding_loader: Callable returning the precomputed id -> vector
                map, defaults to the shipped blob
        """
        self._table = tuple(patterns) if patterns is not None else EMBEDDED_PATTERNS
        self._embedding_loader = embedding_loader or get_pattern_embeddings
        self._patterns: Dict[str, PatternRecord] = {}
        self._embeddings: Dict[str, np.ndarray] = {}
        self._success_metrics: Dict[str, float] = {}
        self.embedding_source: Optional[str] = None
        self.initialized = False

    def init(self, embedding_provider: Optional[IEmbeddingProvider] = None) -> None:
        """
        Load patterns and their vectors.

        Precomputed vectors are used when available. Otherwise each pattern is
        embedded as the mean of its examples using embedding_provider; with no
        provider the library has no vectors and callers fall back to regex
        matching.
        """
        start = time.time()
        self._patterns = {p.id: p for p in self._table}
        self._success_metrics = {p.id: p.confidence for p in self._table}

        try:
            precomputed = self._embedding_loader()
        except (CorruptEmbeddingDataError, OSError, ValueError) as e:
            logger.warning(f"Precomputed pattern embeddings unavailable: {e}")
            precomputed = {}

        if precomputed:
            self._embeddings = {
                p.id: precomputed[p.id] for p in self._table if p.id in precomputed
            }
            self.embedding_source = "precomputed"
        elif embedding_provider is not None:
            logger.info("No precomputed pattern embeddings found, computing at runtime")
            self._embeddings = self._compute_embeddings(embedding_provider)
            self.embedding_source = "runtime"
        else:
            logger.warning("No pattern embeddings available, semantic matching disabled")
            self._embeddings = {}
            self.embedding_source = None

        self.initialized = True
        logger.log_library_init(
            self.embedding_source or "none",
            len(self._patterns),
            len(self._embeddings),
            (time.time() - start) * 1000,
        )

    def _compute_embeddings(self, provider: IEmbeddingProvider) -> Dict[str, np.ndarray]:
        cached = CachingEmbeddingProvider(provider)
        embeddings = {}
        for pattern in self._table:
            vector = embed_pattern_examples(cached, pattern.examples)
            if vector.size == 0:
                continue
            vector.setflags(write=False)
            embeddings[pattern.id] = vector
        return embeddings

    @property
    def patterns(self) -> List[PatternRecord]:
        return list(self._patterns.values())

    @property
    def has_embeddings(self) -> bool:
        return bool(self._embeddings)

    def get_pattern(self, pattern_id: str) -> Optional[PatternRecord]:
        return self._patterns.get(pattern_id)

    def get_embedding(self, pattern_id: str) -> Optional[np.ndarray]:
        return self._embeddings.get(pattern_id)

    def get_success_metric(self, pattern_id: str) -> float:
        return self._success_metrics.get(pattern_id, DEFAULT_METRIC)

    def update_success_metric(self, pattern_id: str, success: bool) -> float:
        """Move a pattern's metric toward 1 on success or toward 0 on failure (EMA, alpha 0.1)."""
        current = self._success_metrics.get(pattern_id, DEFAULT_METRIC)
        if success:
            updated = current + METRIC_ALPHA * (1 - current)
        else:
            updated = current - METRIC_ALPHA * current

        self._success_metrics[pattern_id] = updated
        logger.log_success_metric(pattern_id, success, current, updated)
        return updated

    def get_statistics(self) -> Dict[str, Any]:
        """Pattern counts per category, mean success metric and the top 10 patterns."""
        categories: Dict[str, int] = {}
        for pattern in self._patterns.values():
            categories[pattern.category] = categories.get(pattern.category, 0) + 1

        metrics = self._success_metrics
        average = sum(metrics.values()) / len(metrics) if metrics else 0.0

        top = sorted(metrics.items(), key=lambda x: x[1], reverse=True)[:10]

        return {
            "totalPatterns": len(self._patterns),
            "categories": categories,
            "averageConfidence": average,
            "topPatterns": [{"id": pattern_id, "success": score} for pattern_id, score in top],
            "embeddingCount": len(self._embeddings),
            "embeddingSource": self.embedding_source,
        }
