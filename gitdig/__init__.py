"""Download GitHub repositories or directories without cloning."""

__version__ = "1.1.0"