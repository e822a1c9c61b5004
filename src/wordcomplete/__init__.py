"""Host-driven editor plugin: capitalize on ``!`` and complete words."""

__all__ = [
    "adapters",
    "host",
    "plugin",
    "rope",
    "runtime",
    "text",
]

__version__ = "0.1.0"
