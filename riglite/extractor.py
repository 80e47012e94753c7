"""Extracting structured data from text with an LLM.

The target type can be anything pydantic can validate: a ``BaseModel``, a
dataclass, a ``TypedDict``, an enum and so on. The model is given a ``submit``
tool whose parameters are the JSON schema of the target. The data it submits
is validated and returned as an instance of the target.
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from pydantic import TypeAdapter, ValidationError

from riglite.agent import Agent, AgentBuilder, Tool
from riglite.completion import CompletionModel, PromptError, ToolDefinition

T = TypeVar("T")

_EXTRACTOR_PREAMBLE = (
    "You are an AI assistant whose purpose is to extract structured data from the provided text.\n"
    "You will have access to a `submit` function that defines the structure of the data to "
    "extract from the provided text.\n"
    "Use the `submit` function to submit the structured data.\n"
    "Be sure to fill out every field and ALWAYS CALL THE `submit` function, "
    "event with default values!!!.\n"
)

_SUBMIT_DESCRIPTION = "Submit the structured data you extracted from the provided text."


class ExtractionError(Exception):
    """Base class for errors raised by an ``Extractor``."""


class NoDataError(ExtractionError):
    """The model returned nothing."""

    def __init__(self) -> None:
        super().__init__("No data extracted")


class DeserializationError(ExtractionError):
    """The model's answer does not decode into the target type."""

    def __init__(self, cause: BaseException) -> None:
        super().__init__(f"Failed to deserialize the extracted data: {cause}")
        self.cause = cause


class ExtractionPromptError(ExtractionError):
    """Prompting the model failed."""

    def __init__(self, cause: PromptError) -> None:
        super().__init__(f"PromptError: {cause}")
        self.cause = cause


class SubmitTool(Tool, Generic[T]):
    """The tool through which the model submits the extracted data."""

    name = "submit"

    def __init__(self, target: Any) -> None:
        self.target = target
        self._adapter: TypeAdapter[Any] = TypeAdapter(target)

    async def definition(self, prompt: str) -> ToolDefinition:
        """Describe the tool, with the JSON schema of the target as its parameters."""
        return ToolDefinition(
            name=self.name,
            description=_SUBMIT_DESCRIPTION,
            parameters=self._adapter.json_schema(),
        )

    async def call(self, args: Any) -> Any:
        """Validate the submitted data against the target and return it as JSON data.

        Raises pydantic's ``ValidationError`` (a ``ValueError``) when it does not fit.
        """
        value = self._adapter.validate_python(args)
        return self._adapter.dump_python(value, mode="json")


class Extractor(Generic[T]):
    """Extracts an instance of the target type from text."""

    def __init__(self, agent: Agent, target: Any) -> None:
        self.agent = agent
        self.target = target
        self._adapter: TypeAdapter[Any] = TypeAdapter(target)

    async def extract(self, text: str) -> T:
        """Prompt the model with ``text`` and decode its submission."""
        try:
            summary = await self.agent.prompt(text)
        except PromptError as error:
            raise ExtractionPromptError(error) from error
        if not summary:
            raise NoDataError()
        try:
            return self._adapter.validate_json(summary)
        except ValidationError as error:
            raise DeserializationError(error) from error


class ExtractorBuilder(Generic[T]):
    """Fluent builder for an ``Extractor``."""

    def __init__(self, model: CompletionModel, target: Any) -> None:
        self._target = target
        self._agent_builder = (
            AgentBuilder(model).preamble(_EXTRACTOR_PREAMBLE).tool(SubmitTool(target))
        )

    def preamble(self, preamble: str) -> "ExtractorBuilder[T]":
        """Add instructions after the built-in ones."""
        self._agent_builder.append_preamble(
            f"\n=============== ADDITIONAL INSTRUCTIONS ===============\n{preamble}"
        )
        return self

    def context(self, doc: str) -> "ExtractorBuilder[T]":
        """Add a context document."""
        self._agent_builder.context(doc)
        return self

    def build(self) -> Extractor[T]:
        return Extractor(self._agent_builder.build(), self._target)