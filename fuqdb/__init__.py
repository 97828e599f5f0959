"""An in-memory CSV table database with a small query language, prompt and script runner."""

__version__ = "0.1.0"