"""Declaring embeddable dataclasses.

Mark the fields whose values should be embedded with ``embed_field()``. Mark
fields that need a custom function with ``embed_with(func)``. Then decorate the
dataclass with ``@embeddable``, which gives it an ``embed`` method and registers
it as an ``Embed``.

Tagged fields are embedded with ``embed_value``. Fields tagged with a custom
function call ``func(embedder, value)`` with a copy of the field's value.
Plain ``embed_field()`` fields come first, in field order, followed by the
``embed_with`` fields.
"""

from __future__ import annotations

import copy
import dataclasses
from typing import Any, Callable

from riglite.embeddings.embed import Embed, EmbedError, TextEmbedder, embed_value

_EMBED = "embed"
_EMBED_WITH = "embed_with"


class EmbedDefinitionError(TypeError):
    """Raised when a class or field is declared embeddable incorrectly."""


def _field_with_metadata(extra: dict[str, Any], kwargs: dict[str, Any]) -> Any:
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata.update(extra)
    return dataclasses.field(metadata=metadata, **kwargs)


def embed_field(**kwargs: Any) -> Any:
    """A dataclass field whose value is embedded; ``kwargs`` go to ``dataclasses.field``."""
    return _field_with_metadata({_EMBED: True}, kwargs)


def embed_with(func: Callable[[TextEmbedder, Any], None], **kwargs: Any) -> Any:
    """A dataclass field embedded by ``func(embedder, value)``.

    ``kwargs`` go to ``dataclasses.field``.
    """
    if not callable(func):
        raise EmbedDefinitionError(
            f"expected {_EMBED_WITH} attribute to be a callable: `{_EMBED_WITH}=...`"
        )
    return _field_with_metadata({_EMBED_WITH: func}, kwargs)


def embeddable(cls: type) -> type:
    """Give a dataclass an ``embed`` method built from its tagged fields."""
    if not isinstance(cls, type) or not dataclasses.is_dataclass(cls):
        raise EmbedDefinitionError("embeddable should only be used on dataclasses")

    fields = dataclasses.fields(cls)
    basic = [f.name for f in fields if f.metadata.get(_EMBED) is True]
    custom = [(f.name, f.metadata[_EMBED_WITH]) for f in fields if _EMBED_WITH in f.metadata]

    if not basic and not custom:
        raise EmbedDefinitionError(
            f"{cls.__name__}: add at least one field tagged with "
            f"embed_field() or embed_with(...)."
        )

    def embed(self: Any, embedder: TextEmbedder) -> None:
        for name in basic:
            embed_value(getattr(self, name), embedder)
        for name, func in custom:
            try:
                func(embedder, copy.deepcopy(getattr(self, name)))
            except EmbedError:
                raise
            except Exception as error:
                raise EmbedError(error) from error

    embed.__qualname__ = f"{cls.__qualname__}.embed"
    embed.__doc__ = "Add the texts of the tagged fields to ``embedder``."
    cls.embed = embed  # type: ignore[attr-defined]
    Embed.register(cls)
    return cls