"""shellpal: turn conversation with a chat model into confirmed shell commands."""

__version__ = "0.1.0"
