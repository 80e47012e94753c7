"""Loaders that read files from disk by glob pattern or directory."""

__all__ = ["file"]