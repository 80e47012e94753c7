from __future__ import annotations

import io

import pytest

from riglite.completion import Chat, Message, PromptError, ProviderError
from riglite.debate import Debater


class ScriptedChat(Chat):
    def __init__(self, label):
        self.label = label
        self.calls = []

    async def chat(self, prompt, chat_history):
        self.calls.append((prompt, list(chat_history)))
        return f"{self.label} reply {len(self.calls)}"


class FailingChat(Chat):
    async def chat(self, prompt, chat_history):
        raise PromptError(ProviderError("down"))


@pytest.mark.asyncio
async def test_turns_alternate_and_feed_replies():
    first, second = ScriptedChat("A"), ScriptedChat("B")
    await Debater(first, second, out=io.StringIO()).rounds(2)
    assert [prompt for prompt, _ in first.calls] == ["Plead your case!", "B reply 1"]
    assert [prompt for prompt, _ in second.calls] == ["A reply 1", "A reply 2"]


@pytest.mark.asyncio
async def test_histories_grow_per_side():
    first, second = ScriptedChat("A"), ScriptedChat("B")
    await Debater(first, second, out=io.StringIO()).rounds(2)
    assert first.calls[0][1] == []
    assert first.calls[1][1] == [
        Message(role="user", content="Plead your case!"),
        Message(role="assistant", content="A reply 1"),
    ]
    assert second.calls[1][1] == [
        Message(role="user", content="A reply 1"),
        Message(role="assistant", content="B reply 1"),
    ]


@pytest.mark.asyncio
async def test_output_names_speakers():
    out = io.StringIO()
    await Debater(ScriptedChat("A"), ScriptedChat("B"), out=out).rounds(1)
    text = out.getvalue()
    assert "GPT-4:\nA reply 1\n" in text
    assert "Coral:\nB reply 1\n" in text
    assert text.index("GPT-4:") < text.index("Coral:")


@pytest.mark.asyncio
async def test_zero_rounds_calls_nobody():
    first, second = ScriptedChat("A"), ScriptedChat("B")
    out = io.StringIO()
    await Debater(first, second, out=out).rounds(0)
    assert first.calls == [] and second.calls == []
    assert out.getvalue() == ""


@pytest.mark.asyncio
async def test_prompt_error_propagates():
    first = ScriptedChat("A")
    with pytest.raises(PromptError):
        await Debater(first, FailingChat(), out=io.StringIO()).rounds(3)
    assert len(first.calls) == 1