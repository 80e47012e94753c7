"""A simple read-eval-print loop around anything that can chat."""

from __future__ import annotations

import logging
import sys
from typing import TextIO

from riglite.completion import Chat, Message

logger = logging.getLogger(__name__)

_RESPONSE_HEADER = "========================== Response ============================"
_RULE = "================================================================"


async def cli_chatbot(
    chatbot: Chat, stdin: TextIO | None = None, stdout: TextIO | None = None
) -> None:
    """Chat with ``chatbot`` line by line until "exit" or end of input.

    The conversation so far is sent with each prompt. ``PromptError`` from the
    chatbot propagates to the caller.
    """
    stdin = stdin if stdin is not None else sys.stdin
    stdout = stdout if stdout is not None else sys.stdout
    chat_log: list[Message] = []

    print("Welcome to the chatbot! Type 'exit' to quit.", file=stdout)
    while True:
        stdout.write("> ")
        stdout.flush()
        try:
            line = stdin.readline()
        except OSError as error:
            print(f"Error reading input: {error}", file=stdout)
            continue
        if not line:
            break
        text = line.strip()
        if text == "exit":
            break
        logger.info("Prompt:\n%s\n", text)

        response = await chatbot.chat(text, list(chat_log))
        chat_log.append(Message(role="user", content=text))
        chat_log.append(Message(role="assistant", content=response))

        print(_RESPONSE_HEADER, file=stdout)
        print(response, file=stdout)
        print(_RULE + "\n\n", file=stdout)

        logger.info("Response:\n%s\n", response)