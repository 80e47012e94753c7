"""Embedding records, embedding models, embeddable objects, tool schemas and vector distances."""

__all__ = ["derive", "distance", "embed", "embedding", "tool"]