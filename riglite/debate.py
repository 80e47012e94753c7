"""Two chat agents arguing opposite positions in turn."""

from __future__ import annotations

import sys
from typing import TextIO

from riglite.completion import Chat, Message

OPENING = "Plead your case!"
_RULE = "================================================================"


class Debater:
    """Runs a debate between two chat agents, each keeping its own history."""

    def __init__(
        self,
        first: Chat,
        second: Chat,
        *,
        first_name: str = "GPT-4",
        second_name: str = "Coral",
        out: TextIO | None = None,
    ) -> None:
        self.first = first
        self.second = second
        self.first_name = first_name
        self.second_name = second_name
        self._out = out

    async def rounds(self, n: int) -> None:
        """Run ``n`` rounds, printing each reply; ``PromptError`` propagates."""
        out = self._out if self._out is not None else sys.stdout
        history_a: list[Message] = []
        history_b: list[Message] = []
        last_reply_b: str | None = None

        for _ in range(n):
            prompt_a = last_reply_b if last_reply_b is not None else OPENING

            reply_a = await self.first.chat(prompt_a, list(history_a))
            print(f"{self.first_name}:\n{reply_a}", file=out)
            history_a.append(Message(role="user", content=prompt_a))
            history_a.append(Message(role="assistant", content=reply_a))
            print(_RULE, file=out)

            reply_b = await self.second.chat(reply_a, list(history_b))
            print(f"{self.second_name}:\n{reply_b}", file=out)
            print(_RULE, file=out)
            history_b.append(Message(role="user", content=reply_a))
            history_b.append(Message(role="assistant", content=reply_b))

            last_reply_b = reply_b