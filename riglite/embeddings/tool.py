"""An embeddable description of a tool, used when tools are retrieved by similarity."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from riglite.embeddings.embed import Embed, EmbedError, TextEmbedder


@dataclass
class ToolSchema(Embed):
    """Name, context and embedding documents of a tool."""

    name: str = ""
    context: Any = None
    embedding_docs: list[str] = field(default_factory=list)

    def embed(self, embedder: TextEmbedder) -> None:
        """Add each embedding document to ``embedder``."""
        for doc in self.embedding_docs:
            embedder.embed(doc)

    @classmethod
    def from_tool(cls, tool: Any) -> "ToolSchema":
        """Build a schema from a tool offering ``name``, ``context()`` and ``embedding_docs()``.

        The context must be JSON-serializable; any failure raises ``EmbedError``.
        """
        name = tool.name() if callable(tool.name) else tool.name
        try:
            context = tool.context()
            json.dumps(context)
        except EmbedError:
            raise
        except Exception as error:
            raise EmbedError(error) from error
        return cls(name=name, context=context, embedding_docs=list(tool.embedding_docs()))