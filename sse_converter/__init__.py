"""SSE stream to replay/preset record converter."""

__version__ = "1.0.0"
