"""Terminal chat client for a locally hosted Ollama server."""

__version__ = "0.1.0"
