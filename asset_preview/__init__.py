"""Asset Preview - resolve image references and asset tokens found in text."""

__version__ = "0.1.0"
