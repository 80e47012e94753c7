"""A calculator agent built from two arithmetic tools: add and subtract."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from riglite.agent import Agent, AgentBuilder, Tool
from riglite.completion import CompletionModel, ToolDefinition

CALCULATOR_PREAMBLE = (
    "You are a calculator here to help the user perform arithmetic operations. "
    "Use the tools provided to answer the user's question."
)

_I32_MIN = -(2**31)
_I32_MAX = 2**31 - 1


class MathError(Exception):
    """An arithmetic operation failed."""

    def __init__(self) -> None:
        super().__init__("Math error")


@dataclass(frozen=True)
class OperationArgs:
    """The two 32-bit integer operands of an operation."""

    x: int
    y: int


def _operand(args: Mapping[str, Any], key: str) -> int:
    if key not in args:
        raise ValueError(f"missing field `{key}`")
    value = args[key]
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"field `{key}` must be an integer, got {value!r}")
    if not _I32_MIN <= value <= _I32_MAX:
        raise ValueError(f"field `{key}` is out of range: {value}")
    return value


def _parse(args: Any) -> OperationArgs:
    if isinstance(args, OperationArgs):
        return args
    if not isinstance(args, Mapping):
        raise ValueError(f"expected an object with fields x and y, got {args!r}")
    return OperationArgs(x=_operand(args, "x"), y=_operand(args, "y"))


def _checked(result: int) -> int:
    if not _I32_MIN <= result <= _I32_MAX:
        raise MathError()
    return result


def _parameters(x_description: str, y_description: str) -> dict[str, Any]:
    return {
        "type": "object",
        "properties": {
            "x": {"type": "number", "description": x_description},
            "y": {"type": "number", "description": y_description},
        },
    }


class Adder(Tool):
    """Adds x and y."""

    name = "add"

    async def definition(self, prompt: str) -> ToolDefinition:
        return ToolDefinition(
            name="add",
            description="Add x and y together",
            parameters=_parameters("The first number to add", "The second number to add"),
        )

    async def call(self, args: Any) -> int:
        """Return x + y; raise ``MathError`` when the sum leaves the 32-bit range."""
        operands = _parse(args)
        return _checked(operands.x + operands.y)


class Subtract(Tool):
    """Subtracts y from x."""

    name = "subtract"

    async def definition(self, prompt: str) -> ToolDefinition:
        return ToolDefinition(
            name="subtract",
            description="Subtract y from x (i.e.: x - y)",
            parameters=_parameters("The number to substract from", "The number to substract"),
        )

    async def call(self, args: Any) -> int:
        """Return x - y; raise ``MathError`` when the difference leaves the 32-bit range."""
        operands = _parse(args)
        return _checked(operands.x - operands.y)


def calculator_agent(model: CompletionModel) -> Agent:
    """An agent on ``model`` that answers arithmetic questions with the two tools."""
    return (
        AgentBuilder(model)
        .preamble(CALCULATOR_PREAMBLE)
        .max_tokens(1024)
        .tool(Adder())
        .tool(Subtract())
        .build()
    )