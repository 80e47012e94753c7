"""LLM agents: a completion model combined with a preamble, context documents and tools.

Context documents and tools are either static (always sent with a prompt) or
dynamic (retrieved from a vector store index at prompt time).

``AgentBuilder`` configures and builds an ``Agent``. An ``Agent`` implements
``Prompt``, ``Chat`` and ``Completion``.
"""

from __future__ import annotations

import copy
import json
import logging
from abc import ABC, abstractmethod
from typing import Any, ClassVar, Iterable

from riglite.completion import (
    Chat,
    Completion,
    CompletionError,
    CompletionModel,
    CompletionRequestBuilder,
    Document,
    Message,
    MessageChoice,
    Prompt,
    PromptError,
    RequestError,
    ToolCallChoice,
    ToolDefinition,
)

logger = logging.getLogger(__name__)


class ToolCallError(Exception):
    """A tool could not be found, or calling it failed."""


class Tool(ABC):
    """A tool the model may call. Subclasses set ``name`` and implement both methods."""

    name: ClassVar[str]

    @abstractmethod
    async def definition(self, prompt: str) -> ToolDefinition:
        """Describe the tool to the model; ``prompt`` is the current user prompt."""

    @abstractmethod
    async def call(self, args: Any) -> Any:
        """Run the tool with the decoded JSON ``args``; the result must be JSON-serializable."""


class VectorStoreIndex(ABC):
    """An index that retrieves the documents closest to a query."""

    @abstractmethod
    async def top_n(self, query: str, n: int) -> list[tuple[float, str, Any]]:
        """Return up to ``n`` ``(score, id, document)`` triples for ``query``."""

    @abstractmethod
    async def top_n_ids(self, query: str, n: int) -> list[tuple[float, str]]:
        """Return up to ``n`` ``(score, id)`` pairs for ``query``."""


def _pretty(doc: Any) -> str:
    try:
        return json.dumps(doc, indent=2, ensure_ascii=False)
    except (TypeError, ValueError):
        return str(doc)


class Agent(Prompt, Chat, Completion):
    """A completion model with a preamble, context documents and tools."""

    def __init__(
        self,
        model: CompletionModel,
        *,
        preamble: str = "",
        static_context: Iterable[Document] = (),
        static_tools: Iterable[str] = (),
        temperature: float | None = None,
        max_tokens: int | None = None,
        additional_params: Any = None,
        dynamic_context: Iterable[tuple[int, VectorStoreIndex]] = (),
        dynamic_tools: Iterable[tuple[int, VectorStoreIndex]] = (),
        tools: dict[str, Tool] | None = None,
    ) -> None:
        self.model = model
        self.preamble = preamble
        self.static_context = list(static_context)
        self.static_tools = list(static_tools)
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.additional_params = additional_params
        self.dynamic_context = list(dynamic_context)
        self.dynamic_tools = list(dynamic_tools)
        self.tools: dict[str, Tool] = dict(tools or {})

    async def _definition_of(self, name: str, prompt: str) -> ToolDefinition | None:
        tool = self.tools.get(name)
        if tool is None:
            logger.warning("Tool implementation not found in toolset: %s", name)
            return None
        return await tool.definition(prompt)

    async def _dynamic_documents(self, prompt: str) -> list[Document]:
        documents: list[Document] = []
        for sample, index in self.dynamic_context:
            try:
                results = await index.top_n(prompt, sample)
            except Exception as error:
                raise RequestError(error) from error
            documents.extend(
                Document(id=doc_id, text=_pretty(doc)) for _, doc_id, doc in results
            )
        return documents

    async def _dynamic_tool_definitions(self, prompt: str) -> list[ToolDefinition]:
        definitions: list[ToolDefinition] = []
        for sample, index in self.dynamic_tools:
            try:
                results = await index.top_n_ids(prompt, sample)
            except Exception as error:
                raise RequestError(error) from error
            for _, tool_id in results:
                definition = await self._definition_of(tool_id, prompt)
                if definition is not None:
                    definitions.append(definition)
        return definitions

    async def completion(
        self, prompt: str, chat_history: list[Message]
    ) -> CompletionRequestBuilder:
        """A request builder filled with the agent's configuration and retrieved context."""
        dynamic_documents = await self._dynamic_documents(prompt)
        dynamic_tools = await self._dynamic_tool_definitions(prompt)
        static_tools = [
            definition
            for name in self.static_tools
            if (definition := await self._definition_of(name, prompt)) is not None
        ]
        return (
            self.model.completion_request(prompt)
            .preamble(self.preamble)
            .messages(chat_history)
            .documents([*self.static_context, *dynamic_documents])
            .tools([*static_tools, *dynamic_tools])
            .temperature(self.temperature)
            .max_tokens(self.max_tokens)
            .replace_additional_params(copy.deepcopy(self.additional_params))
        )

    async def _call_tool(self, name: str, args: Any) -> str:
        tool = self.tools.get(name)
        if tool is None:
            raise ToolCallError(f"ToolNotFoundError: {name}")
        try:
            output = await tool.call(args)
        except ToolCallError:
            raise
        except Exception as error:
            raise ToolCallError(f"ToolCallError: {error}") from error
        try:
            return json.dumps(output)
        except (TypeError, ValueError) as error:
            raise ToolCallError(f"JsonError: {error}") from error

    async def chat(self, prompt: str, chat_history: list[Message]) -> str:
        """Send ``prompt`` with ``chat_history``; a tool call is run and its JSON result returned."""
        try:
            builder = await self.completion(prompt, list(chat_history))
            response = await builder.send()
        except CompletionError as error:
            raise PromptError(error) from error
        choice = response.choice
        if isinstance(choice, MessageChoice):
            return choice.content
        if isinstance(choice, ToolCallChoice):
            try:
                return await self._call_tool(choice.name, choice.arguments)
            except ToolCallError as error:
                raise PromptError(error) from error
        raise PromptError(CompletionError(f"unexpected model choice: {choice!r}"))

    async def prompt(self, prompt: str) -> str:
        """Send ``prompt`` without chat history."""
        return await self.chat(prompt, [])


class AgentBuilder:
    """Fluent builder for an ``Agent``."""

    def __init__(self, model: CompletionModel) -> None:
        self._model = model
        self._preamble: str | None = None
        self._static_context: list[Document] = []
        self._static_tools: list[str] = []
        self._temperature: float | None = None
        self._max_tokens: int | None = None
        self._additional_params: Any = None
        self._dynamic_context: list[tuple[int, VectorStoreIndex]] = []
        self._dynamic_tools: list[tuple[int, VectorStoreIndex]] = []
        self._tools: dict[str, Tool] = {}

    def preamble(self, preamble: str) -> "AgentBuilder":
        """Set the system prompt."""
        self._preamble = preamble
        return self

    def append_preamble(self, doc: str) -> "AgentBuilder":
        """Append a line to the system prompt."""
        self._preamble = f"{self._preamble or ''}\n{doc}"
        return self

    def context(self, doc: str) -> "AgentBuilder":
        """Add a context document sent with every prompt."""
        self._static_context.append(
            Document(id=f"static_doc_{len(self._static_context)}", text=doc)
        )
        return self

    def tool(self, tool: Tool) -> "AgentBuilder":
        """Add a tool offered with every prompt."""
        self._tools[tool.name] = tool
        self._static_tools.append(tool.name)
        return self

    def dynamic_context(self, sample: int, index: VectorStoreIndex) -> "AgentBuilder":
        """On each prompt, add the ``sample`` closest documents from ``index``."""
        self._dynamic_context.append((sample, index))
        return self

    def dynamic_tools(
        self, sample: int, index: VectorStoreIndex, tools: Iterable[Tool]
    ) -> "AgentBuilder":
        """On each prompt, offer the ``sample`` tools from ``index`` closest to the prompt."""
        self._dynamic_tools.append((sample, index))
        for tool in tools:
            self._tools[tool.name] = tool
        return self

    def temperature(self, temperature: float) -> "AgentBuilder":
        self._temperature = temperature
        return self

    def max_tokens(self, max_tokens: int) -> "AgentBuilder":
        self._max_tokens = max_tokens
        return self

    def additional_params(self, params: Any) -> "AgentBuilder":
        """Set provider-specific parameters passed to the model."""
        self._additional_params = params
        return self

    def build(self) -> Agent:
        return Agent(
            self._model,
            preamble=self._preamble or "",
            static_context=self._static_context,
            static_tools=self._static_tools,
            temperature=self._temperature,
            max_tokens=self._max_tokens,
            additional_params=self._additional_params,
            dynamic_context=self._dynamic_context,
            dynamic_tools=self._dynamic_tools,
            tools=self._tools,
        )