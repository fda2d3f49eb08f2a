"""ContentCraft Pro workspace service."""

__version__ = "0.1.0"
