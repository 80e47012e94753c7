# riglite

riglite is a small asyncio library for applications built on large language
models. Its parts:

- **Completion requests** (`riglite.completion`): `Message`, `Document`,
  `ToolDefinition`, `CompletionRequest` and a chainable
  `CompletionRequestBuilder`. A provider is added by subclassing
  `CompletionModel`.
- **Agents** (`riglite.agent`): an `AgentBuilder` that combines a model with a
  preamble, static context documents, tools and, optionally, context and tools
  looked up in a `VectorStoreIndex` each time the agent is prompted.
- **Structured extraction** (`riglite.extractor`): an `ExtractorBuilder` that
  has the model fill a target type through a `submit` tool.
- **Embeddings** (`riglite.embeddings`): the `Embedding` record, the
  `EmbeddingModel` interface, vector distances, `ToolSchema`, and `to_texts`
  for turning objects into the strings that need embedding.
- **File loading** (`riglite.loaders.file`): `FileLoader` for reading files by
  glob pattern or directory.
- A read–eval–print chat loop, `riglite.cli_chatbot.cli_chatbot`, and a
  two-agent `riglite.debate.Debater`.

## Requirements

Python 3.10 or later; the only dependency is pydantic.

## Plugging in a model

A provider is a subclass of `riglite.completion.CompletionModel` whose async
`completion(request)` method takes a `CompletionRequest` and returns a
`CompletionResponse`. The response's `choice` is either a `MessageChoice`,
holding plain text, or a `ToolCallChoice`, naming a tool and its arguments.
`CompletionRequest.prompt_with_context()` returns the prompt with every
attached document rendered in front of it, for providers that have no separate
field for documents.

Requests can be built by hand:

```python
from riglite.completion import CompletionRequestBuilder

request = (
    CompletionRequestBuilder(model, "Who are you?")
    .preamble("You are a helpful assistant.")
    .temperature(0.5)
    .max_tokens(256)
    .build()
)
```

or sent straight away with `await builder.send()`. `additional_params(...)`
merges provider-specific parameters into those already set;
`replace_additional_params(...)` replaces them.

## Agents

```python
from riglite.agent import AgentBuilder


async def main(model):
    agent = (
        AgentBuilder(model)
        .preamble("You are a dictionary assistant.")
        .context("Definition of a *flurbo*: a green alien that lives on cold planets.")
        .context("Definition of a *glarb-glarb*: an ancient farming tool.")
        .temperature(0.5)
        .build()
    )
    print(await agent.prompt('What does "glarb-glarb" mean?'))
```

When the model answers with text, the agent returns that text. When the model
asks for a tool, the agent calls the tool and returns its result encoded as
JSON. `agent.chat(prompt, chat_history)` does the same with a list of earlier
`Message` objects, and `agent.completion(prompt, chat_history)` returns the
prepared `CompletionRequestBuilder` for changes before sending. Failures are
raised as `PromptError`.

Tools are subclasses of `riglite.agent.Tool` with a `name`, an async
`definition(prompt)` returning a `ToolDefinition` and an async `call(args)`
doing the work. `riglite.calculator` has two such tools, `Adder` and
`Subtract`, working on 32-bit integers, and `calculator_agent(model)` builds an
agent that uses them.

## Extracting structured data

```python
from pydantic import BaseModel

from riglite.extractor import ExtractorBuilder


class Person(BaseModel):
    first_name: str | None = None
    last_name: str | None = None
    job: str | None = None


async def find_person(model):
    extractor = ExtractorBuilder(model, Person).build()
    return await extractor.extract("Hello my name is John Doe! I am a software engineer.")
```

The target can be anything pydantic validates. `extract` raises
`NoDataError` when nothing comes back, `DeserializationError` when the answer
does not fit the target, and `ExtractionPromptError` when prompting fails; all
three are `ExtractionError`s.

## Embeddings

Tag the fields of a dataclass that should be embedded, then collect their
text:

```python
from dataclasses import dataclass

from riglite.embeddings.derive import embeddable, embed_field
from riglite.embeddings.embed import to_texts


@embeddable
@dataclass
class Greeting:
    message: str = embed_field()
    language: str = "en"


to_texts(Greeting("Hello, world!"))  # ["Hello, world!"]
```

`embed_with(func)` tags a field whose text is produced by
`func(embedder, value)` instead. `riglite.embeddings.distance` provides
`dot_product`, `cosine_similarity`, `angular_distance`, `euclidean_distance`,
`manhattan_distance` and `chebyshev_distance`, taking `Embedding` objects or
plain sequences of floats.

## Loading files

```python
from riglite.loaders.file import FileLoader

for path, content in FileLoader.with_glob("docs/*.txt").read_with_path().ignore_errors():
    print(path, len(content))
```

Without `ignore_errors()` each unreadable file yields a `FileLoaderError` in
place of its content. `FileLoader.with_dir(directory)` lists the regular files
directly inside a directory.

## Chat loop and debate

`cli_chatbot(chatbot, stdin, stdout)` is a coroutine that runs a prompt loop
against any object with an async `chat` method, keeping the conversation
history, until the line `exit` or the end of input.

`Debater(first, second)` pits two chat agents against each other;
`await debater.rounds(n)` prints each reply for `n` rounds.

## What is not included

riglite ships no clients for any model or embedding provider, no vector store,
no PDF loading and no command-line program. Models and indexes are supplied by
subclassing `CompletionModel`, `EmbeddingModel` and `VectorStoreIndex`.