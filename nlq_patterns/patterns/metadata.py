"""
Descriptive statistics for the shipped pattern table, for logging and monitoring.
"""

import json
from collections import Counter
from typing import Any, Dict, Sequence

from ..core.config import EMBEDDING_DIMENSION
from .embeddings import expected_byte_length
from .table import EMBEDDED_PATTERNS
from .types import FREQUENCY_LABELS, PatternRecord


def build_patterns_metadata(
    patterns: Sequence[PatternRecord],
    embedding_bytes: int = None,
    dimension: int = EMBEDDING_DIMENSION,
) -> Dict[str, Any]:
    """
    Summarize a pattern table.

    Args:
        patterns: Pattern table
        embedding_bytes: Size of the decoded blob; defaults to the size the
            table implies
        dimension: Floats per embedding vector
    """
    total = len(patterns)
    categories = Counter(p.category for p in patterns)
    domains = sorted({p.domain for p in patterns if p.domain})
    frequencies = Counter(p.frequency for p in patterns if p.frequency)

    if embedding_bytes is None:
        embedding_bytes = expected_byte_length(total, dimension)

    pattern_bytes = len(json.dumps([p.to_dict() for p in patterns]).encode("utf-8"))

    coverage = {}
    for category, count in sorted(categories.items()):
        coverage[category] = round(100.0 * count / total, 1) if total else 0.0

    average_confidence = sum(p.confidence for p in patterns) / total if total else 0.0

    return {
        "totalPatterns": total,
        "categories": sorted(categories),
        "domains": domains,
        "embeddingDimensions": dimension,
        "coverage": coverage,
        "averageConfidence": round(average_confidence, 4),
        "frequencyCounts": {label: frequencies.get(label, 0) for label in FREQUENCY_LABELS},
        "sizeBytes": {
            "patterns": pattern_bytes,
            "embeddings": embedding_bytes,
            "total": pattern_bytes + embedding_bytes,
        },
    }


PATTERNS_METADATA = build_patterns_metadata(EMBEDDED_PATTERNS)
