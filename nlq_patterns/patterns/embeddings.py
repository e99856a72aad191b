"""
Precomputed pattern embeddings.

The blob is one base64 string: the concatenation of every pattern's vector
in table order, each vector 384 little-endian float32 values. No header,
no length prefix, no checksum.
"""

import base64
import binascii
import threading
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

import numpy as np

from ..core.config import BYTES_PER_FLOAT, EMBEDDING_DIMENSION, embeddings_strict, get_embeddings_path
from .table import EMBEDDED_PATTERNS
from .types import PatternRecord
from util.logging import logger

FLOAT32_LE = np.dtype("<f4")

_B64_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/"
_B64_LOOKUP = {ch: i for i, ch in enumerate(_B64_ALPHABET)}


class CorruptEmbeddingDataError(Exception):
    """Decoded embedding buffer does not match the pattern table."""

    def __init__(self, message: str, expected_bytes: int, actual_bytes: int):
        super().__init__(message)
        self.expected_bytes = expected_bytes
        self.actual_bytes = actual_bytes


def _decode_standard(encoded: str) -> bytes:
    return base64.b64decode(encoded)


def _decode_charwise(encoded: str) -> bytes:
    """Decode one character at a time into a byte array, skipping characters outside the alphabet."""
    out = bytearray()
    bits = 0
    bit_count = 0
    for ch in encoded:
        if ch == "=":
            break
        value = _B64_LOOKUP.get(ch)
        if value is None:
            continue
        bits = (bits << 6) | value
        bit_count += 6
        if bit_count >= 8:
            bit_count -= 8
            out.append((bits >> bit_count) & 0xFF)
            bits &= (1 << bit_count) - 1
    return bytes(out)


# Tried in order; an entry whose callable is None is unavailable.
DECODERS: List[Tuple[str, Optional[Callable[[str], bytes]]]] = [
    ("b64decode", _decode_standard),
    ("charwise", _decode_charwise),
]


def decode_embeddings(encoded: str) -> bytes:
    """
    Decode the base64 blob into raw bytes.

    Uses the first available decoder. If no decoder is available, or every
    available decoder rejects the input, an empty buffer is returned.
    The result is not checked against the pattern table.
    """
    for name, decoder in DECODERS:
        if decoder is None:
            continue
        try:
            buffer = decoder(encoded)
        except (binascii.Error, ValueError) as e:
            logger.warning(f"Embedding decoder {name} rejected input: {e}")
            continue
        logger.log_embedding_decode(name, len(encoded), len(buffer))
        return buffer

    logger.log_embedding_decode("none", len(encoded), 0, status="degraded")
    return b""


def load_encoded_embeddings(path: Optional[Path] = None) -> str:
    """Read the base64 blob from disk."""
    source = Path(path) if path is not None else get_embeddings_path()
    return source.read_text(encoding="ascii").strip()


class LazyEmbeddingBuffer:
    """Decode the blob on first access and keep the bytes for the process lifetime."""

    def __init__(self, loader: Callable[[], bytes]):
        self._loader = loader
        self._value: Optional[bytes] = None
        self._lock = threading.Lock()

    def get(self) -> bytes:
        if self._value is None:
            with self._lock:
                if self._value is None:
                    self._value = self._loader()
        return self._value

    @property
    def loaded(self) -> bool:
        return self._value is not None

    def reset(self) -> None:
        with self._lock:
            self._value = None


def _load_shipped_buffer() -> bytes:
    return decode_embeddings(load_encoded_embeddings())


_buffer = LazyEmbeddingBuffer(_load_shipped_buffer)


def get_embedding_buffer() -> bytes:
    """Decoded shipped blob, decoded once per process."""
    return _buffer.get()


def reset_embedding_cache() -> None:
    """Drop the cached buffer so the next access decodes again."""
    _buffer.reset()


def expected_byte_length(pattern_count: int, dimension: int = EMBEDDING_DIMENSION) -> int:
    return pattern_count * dimension * BYTES_PER_FLOAT


def build_embedding_lookup(
    patterns: Sequence[PatternRecord],
    buffer: bytes,
    dimension: int = EMBEDDING_DIMENSION,
    strict: Optional[bool] = None,
) -> Dict[str, np.ndarray]:
    """
    Slice the decoded buffer into one vector per pattern.

    Row i starts at byte offset i * dimension * 4. Vectors are read-only
    float32 arrays and the dict preserves table order.

    Args:
        patterns: Pattern table, in blob order
        buffer: Decoded embedding bytes
        dimension: Floats per vector
        strict: Raise on a length mismatch instead of skipping rows that do
            not fit; defaults to NLQ_EMBEDDINGS_STRICT

    Returns:
        Mapping of pattern id to vector

    Raises:
        CorruptEmbeddingDataError: strict mode and the buffer length differs
            from len(patterns) * dimension * 4
        ValueError: dimension is not positive
    """
    if dimension < 1:
        raise ValueError(f"Embedding dimension must be positive, got {dimension}")

    if strict is None:
        strict = embeddings_strict()

    buffer = bytes(buffer)
    row_bytes = dimension * BYTES_PER_FLOAT
    expected = expected_byte_length(len(patterns), dimension)
    actual = len(buffer)

    if actual != expected and strict:
        raise CorruptEmbeddingDataError(
            f"Embedding buffer is {actual} bytes, expected {expected} "
            f"for {len(patterns)} patterns x {dimension} floats",
            expected,
            actual,
        )

    row_count = min(len(patterns), actual // row_bytes)
    vectors: Dict[str, np.ndarray] = {}
    if row_count:
        matrix = np.frombuffer(buffer, dtype=FLOAT32_LE, count=row_count * dimension)
        matrix = matrix.reshape(row_count, dimension)
        for i in range(row_count):
            vectors[patterns[i].id] = matrix[i]

    status = "success" if actual == expected else "degraded"
    logger.log_lookup_build(len(patterns), len(vectors), expected, actual, status=status)
    return vectors


def get_pattern_embeddings() -> Dict[str, np.ndarray]:
    """Pattern id -> 384-float vector for the shipped table."""
    return build_embedding_lookup(EMBEDDED_PATTERNS, get_embedding_buffer())


def encode_embeddings(vectors: Iterable[Sequence[float]], dimension: int = EMBEDDING_DIMENSION) -> str:
    """Serialize vectors as float32 little-endian rows and base64-encode the result."""
    rows = [np.asarray(v, dtype=np.float64) for v in vectors]
    if not rows:
        return ""

    matrix = np.vstack(rows)
    if matrix.shape[1] != dimension:
        raise ValueError(f"Vector dimension {matrix.shape[1]} does not match expected dimension {dimension}")

    return base64.b64encode(matrix.astype(FLOAT32_LE).tobytes()).decode("ascii")
