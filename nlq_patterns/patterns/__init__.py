"""
Pattern table and its embedding store.
The table is static; the embedding blob is decoded once, on first use.
"""

# Package initialization for patterns module
from .types import PatternRecord, FREQUENCY_LABELS
from .table import EMBEDDED_PATTERNS, load_pattern_table, get_pattern
from .embeddings import (
    CorruptEmbeddingDataError,
    decode_embeddings,
    build_embedding_lookup,
    get_embedding_buffer,
    get_pattern_embeddings,
    encode_embeddings,
    reset_embedding_cache,
)
from .metadata import PATTERNS_METADATA, build_patterns_metadata
from .library import PatternLibrary

__all__ = [
    'PatternRecord',
    'FREQUENCY_LABELS',
    'EMBEDDED_PATTERNS',
    'load_pattern_table',
    'get_pattern',
    'CorruptEmbeddingDataError',
    'decode_embeddings',
    'build_embedding_lookup',
    'get_embedding_buffer',
    'get_pattern_embeddings',
    'encode_embeddings',
    'reset_embedding_cache',
    'PATTERNS_METADATA',
    'build_patterns_metadata',
    'PatternLibrary'
]
