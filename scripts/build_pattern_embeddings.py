#!/usr/bin/env python3
"""
Pattern Embedding Builder
Regenerates the base64 embedding blob from the pattern table, one vector per
pattern in table order (mean of the pattern's example embeddings).
"""

import argparse
import json
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from nlq_patterns.core.config import (
    EMBEDDING_DIMENSION,
    get_embed_provider_name,
    get_embedding_provider,
    get_embeddings_path,
    validate_config,
)
from nlq_patterns.patterns.embeddings import (
    CorruptEmbeddingDataError,
    build_embedding_lookup,
    decode_embeddings,
    encode_embeddings,
    load_encoded_embeddings,
)
from nlq_patterns.patterns.metadata import build_patterns_metadata
from nlq_patterns.patterns.table import load_pattern_table
from nlq_patterns.vector.embeddings import CachingEmbeddingProvider, embed_pattern_examples
from util.logging import logger


def build(patterns_path, output_path, provider_name):
    """Embed every pattern and write the blob."""
    provider_name = provider_name or get_embed_provider_name()
    patterns = load_pattern_table(patterns_path)
    provider = CachingEmbeddingProvider(get_embedding_provider(provider_name))

    if provider.get_dimension() != EMBEDDING_DIMENSION:
        print(f"ERROR: Provider dimension {provider.get_dimension()} != {EMBEDDING_DIMENSION}")
        sys.exit(1)

    print(f"Embedding {len(patterns)} patterns with provider '{provider_name}'...")

    vectors = []
    for i, pattern in enumerate(patterns, start=1):
        vector = embed_pattern_examples(provider, pattern.examples)
        if vector.size == 0:
            print(f"ERROR: Pattern {pattern.id} has no examples to embed")
            sys.exit(1)
        vectors.append(vector)
        if i % 50 == 0:
            print(f"  ... embedded {i}/{len(patterns)} patterns")

    encoded = encode_embeddings(vectors)
    Path(output_path).write_text(encoded, encoding="ascii")
    print(f"✓ Wrote {len(encoded)} base64 characters to {output_path}")


def check(patterns_path, embeddings_path):
    """Verify the blob matches the table and print metadata."""
    patterns = load_pattern_table(patterns_path)
    buffer = decode_embeddings(load_encoded_embeddings(embeddings_path))

    try:
        lookup = build_embedding_lookup(patterns, buffer, strict=True)
    except CorruptEmbeddingDataError as e:
        print(f"ERROR: {e}")
        sys.exit(1)

    print(f"✓ {len(lookup)} vectors for {len(patterns)} patterns ({len(buffer)} bytes)")
    print(json.dumps(build_patterns_metadata(patterns, len(buffer)), indent=2))


def main():
    parser = argparse.ArgumentParser(description="Build or verify pattern embeddings")
    parser.add_argument("--patterns", type=Path, default=None, help="Pattern table JSON")
    parser.add_argument("--output", type=Path, default=None, help="Embedding blob to write or check")
    parser.add_argument("--provider", default=None, help="hash|sentence_transformers (default: EMBED_PROVIDER)")
    parser.add_argument("--check", action="store_true", help="Only verify the existing blob")
    args = parser.parse_args()

    logger.log_config_issues(validate_config())

    output = args.output or get_embeddings_path()

    if args.check:
        check(args.patterns, output)
    else:
        build(args.patterns, output, args.provider)


if __name__ == "__main__":
    main()
