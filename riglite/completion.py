"""Completion models: requests, responses, builders and the prompt interfaces.

``Prompt`` and ``Chat`` are the high-level interfaces users talk to.
``Completion`` yields a request builder that can be customised before sending.
``CompletionModel`` is what a provider implements to serve completion requests.
"""

from __future__ import annotations

import unicodedata
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Generic, Iterable, TypeVar, Union

from riglite.json_utils import merge

R = TypeVar("R")


# ================================================================
# Errors
# ================================================================
class CompletionError(Exception):
    """Base class for errors raised while producing a completion."""

    label = "CompletionError"

    def __init__(self, detail: object = "") -> None:
        super().__init__(detail)
        self.detail = detail

    def __str__(self) -> str:
        return f"{self.label}: {self.detail}"


class HttpError(CompletionError):
    """Transport failure (connection error, timeout, ...)."""

    label = "HttpError"


class JsonError(CompletionError):
    """Serialization or deserialization failure."""

    label = "JsonError"


class RequestError(CompletionError):
    """Failure while building the completion request."""

    label = "RequestError"


class ResponseError(CompletionError):
    """Failure while parsing the completion response."""

    label = "ResponseError"


class ProviderError(CompletionError):
    """Error reported by the completion model provider."""

    label = "ProviderError"


class PromptError(Exception):
    """Error raised by a prompt or chat: a completion error or a failed tool call."""

    def __init__(self, cause: BaseException) -> None:
        super().__init__(cause)
        self.cause = cause

    @property
    def is_completion_error(self) -> bool:
        return isinstance(self.cause, CompletionError)

    def __str__(self) -> str:
        prefix = "CompletionError" if self.is_completion_error else "ToolCallError"
        return f"{prefix}: {self.cause}"


# ================================================================
# Request models
# ================================================================
@dataclass
class Message:
    """A chat message; ``role`` is "system", "user" or "assistant"."""

    role: str
    content: str


def _debug_quote(value: str) -> str:
    """Quote a string with escapes for quotes, backslashes and control characters."""
    escapes = {'"': '\\"', "\\": "\\\\", "\n": "\\n", "\r": "\\r", "\t": "\\t", "\0": "\\0"}
    parts = []
    for char in value:
        if char in escapes:
            parts.append(escapes[char])
        elif unicodedata.category(char) == "Cc":
            parts.append(f"\\u{{{ord(char):x}}}")
        else:
            parts.append(char)
    return '"' + "".join(parts) + '"'


@dataclass
class Document:
    """A context document attached to a completion request."""

    id: str
    text: str
    additional_props: dict[str, str] = field(default_factory=dict)

    def __str__(self) -> str:
        if self.additional_props:
            metadata = " ".join(
                f"{key}: {_debug_quote(value)}"
                for key, value in sorted(self.additional_props.items())
            )
            body = f"<metadata {metadata} />\n{self.text}"
        else:
            body = self.text
        return f"<file id: {self.id}>\n{body}\n</file>\n"


@dataclass
class ToolDefinition:
    """Name, description and JSON-schema parameters of a tool offered to the model."""

    name: str
    description: str
    parameters: Any


# ================================================================
# Responses
# ================================================================
@dataclass(frozen=True)
class MessageChoice:
    """The model answered with a plain message."""

    content: str


@dataclass(frozen=True)
class ToolCallChoice:
    """The model asked for a tool to be called with ``arguments``."""

    name: str
    id: str
    arguments: Any


ModelChoice = Union[MessageChoice, ToolCallChoice]


@dataclass
class CompletionResponse(Generic[R]):
    """The high-level choice of the model together with the provider's raw response."""

    choice: ModelChoice
    raw_response: R


# ================================================================
# Interfaces
# ================================================================
class Prompt(ABC):
    """One-shot prompt interface: prompt in, response out."""

    @abstractmethod
    async def prompt(self, prompt: str) -> str:
        """Send ``prompt`` and return the reply; raise ``PromptError`` on failure."""


class Chat(ABC):
    """Chat interface: prompt and history in, response out."""

    @abstractmethod
    async def chat(self, prompt: str, chat_history: list[Message]) -> str:
        """Send ``prompt`` with ``chat_history``; raise ``PromptError`` on failure."""


class Completion(ABC):
    """Low-level interface producing a request builder that can still be customised."""

    @abstractmethod
    async def completion(
        self, prompt: str, chat_history: list[Message]
    ) -> "CompletionRequestBuilder":
        """Return a pre-populated request builder for ``prompt`` and ``chat_history``."""


class CompletionModel(ABC):
    """A model that turns completion requests into completion responses."""

    @abstractmethod
    async def completion(self, request: "CompletionRequest") -> CompletionResponse[Any]:
        """Run ``request`` and return the response; raise ``CompletionError`` on failure."""

    def completion_request(self, prompt: str) -> "CompletionRequestBuilder":
        """Start a request builder for ``prompt`` bound to this model."""
        return CompletionRequestBuilder(self, prompt)


@dataclass
class CompletionRequest:
    """A provider-independent completion request."""

    prompt: str
    preamble: str | None = None
    chat_history: list[Message] = field(default_factory=list)
    documents: list[Document] = field(default_factory=list)
    tools: list[ToolDefinition] = field(default_factory=list)
    temperature: float | None = None
    max_tokens: int | None = None
    additional_params: Any = None

    def prompt_with_context(self) -> str:
        """The prompt preceded by the attached documents, if any."""
        if not self.documents:
            return self.prompt
        attachments = "".join(str(doc) for doc in self.documents)
        return f"<attachments>\n{attachments}</attachments>\n\n{self.prompt}"


class CompletionRequestBuilder:
    """Fluent builder for a ``CompletionRequest`` bound to a model."""

    def __init__(self, model: CompletionModel, prompt: str) -> None:
        self._model = model
        self._prompt = prompt
        self._preamble: str | None = None
        self._chat_history: list[Message] = []
        self._documents: list[Document] = []
        self._tools: list[ToolDefinition] = []
        self._temperature: float | None = None
        self._max_tokens: int | None = None
        self._additional_params: Any = None

    def preamble(self, preamble: str) -> "CompletionRequestBuilder":
        self._preamble = preamble
        return self

    def message(self, message: Message) -> "CompletionRequestBuilder":
        self._chat_history.append(message)
        return self

    def messages(self, messages: Iterable[Message]) -> "CompletionRequestBuilder":
        self._chat_history.extend(messages)
        return self

    def document(self, document: Document) -> "CompletionRequestBuilder":
        self._documents.append(document)
        return self

    def documents(self, documents: Iterable[Document]) -> "CompletionRequestBuilder":
        self._documents.extend(documents)
        return self

    def tool(self, tool: ToolDefinition) -> "CompletionRequestBuilder":
        self._tools.append(tool)
        return self

    def tools(self, tools: Iterable[ToolDefinition]) -> "CompletionRequestBuilder":
        self._tools.extend(tools)
        return self

    def additional_params(self, additional_params: Any) -> "CompletionRequestBuilder":
        """Merge provider-specific parameters into any already set."""
        if self._additional_params is None:
            self._additional_params = additional_params
        else:
            self._additional_params = merge(self._additional_params, additional_params)
        return self

    def replace_additional_params(self, additional_params: Any) -> "CompletionRequestBuilder":
        """Set provider-specific parameters outright; ``None`` clears them."""
        self._additional_params = additional_params
        return self

    def temperature(self, temperature: float | None) -> "CompletionRequestBuilder":
        self._temperature = temperature
        return self

    def max_tokens(self, max_tokens: int | None) -> "CompletionRequestBuilder":
        self._max_tokens = max_tokens
        return self

    def build(self) -> CompletionRequest:
        return CompletionRequest(
            prompt=self._prompt,
            preamble=self._preamble,
            chat_history=list(self._chat_history),
            documents=list(self._documents),
            tools=list(self._tools),
            temperature=self._temperature,
            max_tokens=self._max_tokens,
            additional_params=self._additional_params,
        )

    async def send(self) -> CompletionResponse[Any]:
        """Build the request and run it on the bound model."""
        return await self._model.completion(self.build())