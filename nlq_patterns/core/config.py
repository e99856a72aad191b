"""
Configuration for the pattern table and embedding store.
Values come from the environment (optionally a .env file).
"""

import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

PACKAGE_DIR = Path(__file__).resolve().parent.parent
DATA_DIR = PACKAGE_DIR / "patterns" / "data"

# Shipped constants
DEFAULT_PATTERNS_PATH = DATA_DIR / "patterns.json"
DEFAULT_EMBEDDINGS_PATH = DATA_DIR / "embeddings.b64"

# Embedding layout (float32 little-endian rows)
EMBEDDING_DIMENSION = 384
BYTES_PER_FLOAT = 4

# Embedding providers used to regenerate vectors
EMBED_PROVIDER = os.getenv("EMBED_PROVIDER", "hash")  # hash|sentence_transformers
EMBED_MODEL_NAME = os.getenv("EMBED_MODEL_NAME", "all-MiniLM-L6-v2")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

VALID_EMBED_PROVIDERS = ["hash", "sentence_transformers"]
VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def get_patterns_path() -> Path:
    """Path of the pattern table JSON."""
    return Path(os.getenv("NLQ_PATTERNS_PATH", str(DEFAULT_PATTERNS_PATH)))


def get_embeddings_path() -> Path:
    """Path of the base64 embedding blob."""
    return Path(os.getenv("NLQ_EMBEDDINGS_PATH", str(DEFAULT_EMBEDDINGS_PATH)))


def embeddings_strict() -> bool:
    """Check if a short or oversized embedding buffer should raise instead of degrade."""
    return os.getenv("NLQ_EMBEDDINGS_STRICT", "false").lower() == "true"


def debug_enabled():
    """Check if debug mode is enabled."""
    return os.getenv("DEBUG", "false").lower() == "true"


def get_log_level() -> str:
    """Effective log level; DEBUG=true forces DEBUG."""
    if debug_enabled():
        return "DEBUG"
    return os.getenv("LOG_LEVEL", LOG_LEVEL).upper()


def get_embed_provider_name() -> str:
    return os.getenv("EMBED_PROVIDER", EMBED_PROVIDER)


def get_embedding_provider(name: str = None):
    """Get configured embedding provider implementation."""
    provider = name or get_embed_provider_name()

    if provider == "sentence_transformers":
        from ..vector.embeddings import SentenceTransformerEmbedding
        return SentenceTransformerEmbedding(os.getenv("EMBED_MODEL_NAME", EMBED_MODEL_NAME))
    elif provider == "hash":
        from ..vector.embeddings import DeterministicHashEmbedding
        return DeterministicHashEmbedding(dimension=EMBEDDING_DIMENSION)
    else:
        raise ValueError(f"Unknown EMBED_PROVIDER: {provider}")


def validate_config():
    """Validate configuration and return any issues."""
    issues = []

    provider = get_embed_provider_name()
    if provider not in VALID_EMBED_PROVIDERS:
        issues.append(f"Invalid EMBED_PROVIDER: {provider}")

    if not get_patterns_path().exists():
        issues.append(f"Pattern table not found: {get_patterns_path()}")

    if not get_embeddings_path().exists():
        issues.append(f"Embedding blob not found: {get_embeddings_path()}")

    if get_log_level() not in VALID_LOG_LEVELS:
        issues.append(f"Invalid LOG_LEVEL: {get_log_level()}")

    strict = os.getenv("NLQ_EMBEDDINGS_STRICT", "false").lower()
    if strict not in ["true", "false"]:
        issues.append(f"Invalid NLQ_EMBEDDINGS_STRICT: {strict}")

    return issues
