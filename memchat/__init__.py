"""Command-line chat client with persistent important-information memory."""

__version__ = "0.1.0"
