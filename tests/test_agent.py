import pytest

from riglite.agent import AgentBuilder, Tool, ToolCallError, VectorStoreIndex
from riglite.completion import (
    CompletionModel,
    CompletionResponse,
    Message,
    MessageChoice,
    PromptError,
    ProviderError,
    RequestError,
    ToolCallChoice,
    ToolDefinition,
)


class FakeModel(CompletionModel):
    def __init__(self, choice=None, error=None):
        self.choice = choice or MessageChoice("hello there")
        self.error = error
        self.requests = []

    async def completion(self, request):
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return CompletionResponse(choice=self.choice, raw_response=None)


class Adder(Tool):
    name = "add"

    async def definition(self, prompt):
        return ToolDefinition(
            name="add",
            description="Add x and y together",
            parameters={"type": "object"},
        )

    async def call(self, args):
        return args["x"] + args["y"]


class Broken(Tool):
    name = "broken"

    async def definition(self, prompt):
        return ToolDefinition(name="broken", description="fails", parameters={})

    async def call(self, args):
        raise RuntimeError("boom")


class FakeIndex(VectorStoreIndex):
    def __init__(self, docs=(), ids=(), fail=False):
        self.docs = list(docs)
        self.ids = list(ids)
        self.fail = fail
        self.queries = []

    async def top_n(self, query, n):
        self.queries.append((query, n))
        if self.fail:
            raise RuntimeError("index down")
        return self.docs[:n]

    async def top_n_ids(self, query, n):
        self.queries.append((query, n))
        if self.fail:
            raise RuntimeError("index down")
        return self.ids[:n]


@pytest.mark.asyncio
async def test_prompt_returns_message_and_sends_preamble_and_context():
    model = FakeModel()
    agent = (
        AgentBuilder(model)
        .preamble("Be precise.")
        .context("first doc")
        .context("second doc")
        .build()
    )
    assert await agent.prompt("Who are you?") == "hello there"
    request = model.requests[0]
    assert request.prompt == "Who are you?"
    assert request.preamble == "Be precise."
    assert [d.id for d in request.documents] == ["static_doc_0", "static_doc_1"]
    assert [d.text for d in request.documents] == ["first doc", "second doc"]
    assert request.chat_history == []


@pytest.mark.asyncio
async def test_missing_preamble_is_empty_string():
    model = FakeModel()
    await AgentBuilder(model).build().prompt("hi")
    assert model.requests[0].preamble == ""


def test_append_preamble_joins_with_newline():
    agent = AgentBuilder(FakeModel()).preamble("a").append_preamble("b").build()
    assert agent.preamble == "a\nb"
    fresh = AgentBuilder(FakeModel()).append_preamble("b").build()
    assert fresh.preamble == "\nb"


@pytest.mark.asyncio
async def test_chat_passes_history_and_parameters():
    model = FakeModel()
    history = [Message("user", "hi"), Message("assistant", "hello")]
    agent = (
        AgentBuilder(model)
        .temperature(0.5)
        .max_tokens(1024)
        .additional_params({"foo": "bar"})
        .build()
    )
    await agent.chat("again", history)
    request = model.requests[0]
    assert request.chat_history == history
    assert request.temperature == 0.5
    assert request.max_tokens == 1024
    assert request.additional_params == {"foo": "bar"}


@pytest.mark.asyncio
async def test_completion_builder_can_override_agent_settings():
    model = FakeModel()
    agent = AgentBuilder(model).temperature(0.8).build()
    builder = await agent.completion("Prompt", [])
    request = builder.temperature(0.9).build()
    assert request.temperature == 0.9
    assert agent.temperature == 0.8


@pytest.mark.asyncio
async def test_static_tool_definitions_are_sent():
    model = FakeModel()
    agent = AgentBuilder(model).tool(Adder()).build()
    await agent.prompt("Calculate")
    assert [t.name for t in model.requests[0].tools] == ["add"]
    assert "add" in agent.tools


@pytest.mark.asyncio
async def test_tool_call_result_is_returned_as_json():
    model = FakeModel(choice=ToolCallChoice("add", "call_1", {"x": 2, "y": 3}))
    agent = AgentBuilder(model).tool(Adder()).build()
    assert await agent.prompt("Calculate 2 + 3") == "5"


@pytest.mark.asyncio
async def test_unknown_tool_raises_prompt_error():
    model = FakeModel(choice=ToolCallChoice("nope", "call_1", {}))
    agent = AgentBuilder(model).build()
    with pytest.raises(PromptError) as info:
        await agent.prompt("x")
    assert isinstance(info.value.cause, ToolCallError)
    assert str(info.value).startswith("ToolCallError: ")


@pytest.mark.asyncio
async def test_failing_tool_raises_prompt_error():
    model = FakeModel(choice=ToolCallChoice("broken", "call_1", {}))
    agent = AgentBuilder(model).tool(Broken()).build()
    with pytest.raises(PromptError) as info:
        await agent.prompt("x")
    assert isinstance(info.value.cause, ToolCallError)
    assert "boom" in str(info.value)


@pytest.mark.asyncio
async def test_provider_error_is_wrapped():
    model = FakeModel(error=ProviderError("rate limited"))
    agent = AgentBuilder(model).build()
    with pytest.raises(PromptError) as info:
        await agent.prompt("x")
    assert isinstance(info.value.cause, ProviderError)
    assert info.value.is_completion_error


@pytest.mark.asyncio
async def test_dynamic_context_documents_are_pretty_printed():
    index = FakeIndex(docs=[(0.9, "doc7", {"a": 1}), (0.5, "doc8", {"b": 2})])
    model = FakeModel()
    agent = AgentBuilder(model).context("static").dynamic_context(1, index).build()
    await agent.prompt("query")
    docs = model.requests[0].documents
    assert [d.id for d in docs] == ["static_doc_0", "doc7"]
    assert docs[1].text == '{\n  "a": 1\n}'
    assert index.queries == [("query", 1)]


@pytest.mark.asyncio
async def test_dynamic_tools_skip_unknown_ids():
    index = FakeIndex(ids=[(0.9, "add"), (0.8, "missing")])
    model = FakeModel()
    agent = AgentBuilder(model).dynamic_tools(2, index, [Adder()]).build()
    await agent.prompt("sum please")
    assert [t.name for t in model.requests[0].tools] == ["add"]


@pytest.mark.asyncio
async def test_index_failure_raises_request_error():
    agent = AgentBuilder(FakeModel()).dynamic_context(2, FakeIndex(fail=True)).build()
    with pytest.raises(RequestError):
        await agent.completion("q", [])
    with pytest.raises(PromptError) as info:
        await agent.prompt("q")
    assert isinstance(info.value.cause, RequestError)