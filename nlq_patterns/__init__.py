"""
Natural-language query patterns with precomputed embeddings.
"""

__version__ = "1.0.0"
