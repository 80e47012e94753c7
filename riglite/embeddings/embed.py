"""Collecting the texts of an object that need to be embedded.

Objects that know how to embed themselves implement ``Embed`` and push their
texts into a ``TextEmbedder``. Common values (strings, numbers, booleans,
JSON-like data and lists of embeddable items) are handled by ``embed_value``.
"""

from __future__ import annotations

import json
import math
from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Any


class EmbedError(Exception):
    """Raised when an object cannot be turned into texts to embed."""


class TextEmbedder:
    """Accumulates the texts that need to be embedded."""

    def __init__(self) -> None:
        self.texts: list[str] = []

    def embed(self, text: str) -> None:
        """Add ``text`` to the texts to embed."""
        self.texts.append(text)


class Embed(ABC):
    """An object that can add its embeddable texts to a ``TextEmbedder``."""

    @abstractmethod
    def embed(self, embedder: TextEmbedder) -> None:
        """Add this object's texts to ``embedder``; raise ``EmbedError`` on failure."""


def _format_float(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    if value.is_integer():
        if value == 0 and math.copysign(1.0, value) < 0:
            return "-0"
        return str(int(value))
    return format(Decimal(repr(value)), "f")


def _to_json(value: Any) -> str:
    try:
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False, allow_nan=False)
    except (TypeError, ValueError) as error:
        raise EmbedError(error) from error


def embed_value(value: Any, embedder: TextEmbedder) -> None:
    """Add the texts of ``value`` to ``embedder``.

    Objects with an ``embed`` method embed themselves; strings are added as is;
    booleans and numbers as their text form; lists and tuples item by item;
    dicts and ``None`` as compact JSON.
    """
    if isinstance(value, Embed) or (
        not isinstance(value, (str, bytes)) and callable(getattr(value, "embed", None))
    ):
        value.embed(embedder)
    elif isinstance(value, str):
        embedder.embed(value)
    elif isinstance(value, bool):
        embedder.embed("true" if value else "false")
    elif isinstance(value, int):
        embedder.embed(str(value))
    elif isinstance(value, float):
        embedder.embed(_format_float(value))
    elif isinstance(value, (list, tuple)):
        for item in value:
            try:
                embed_value(item, embedder)
            except EmbedError as error:
                raise EmbedError(error) from error
    elif value is None or isinstance(value, dict):
        embedder.embed(_to_json(value))
    else:
        raise EmbedError(f"cannot embed value of type {type(value).__name__}")


def to_texts(item: Any) -> list[str]:
    """Return the texts that need to be embedded for ``item``."""
    embedder = TextEmbedder()
    embed_value(item, embedder)
    return embedder.texts