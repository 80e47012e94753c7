"""Building blocks for LLM-powered applications: agents, completions, tools, embeddings and loaders."""

__version__ = "0.1.0"

__all__ = [
    "agent",
    "calculator",
    "cli_chatbot",
    "completion",
    "debate",
    "embeddings",
    "extractor",
    "json_utils",
    "loaders",
]