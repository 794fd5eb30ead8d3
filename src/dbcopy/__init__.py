"""Wait for out-of-band database transfer jobs published to object storage."""

__version__ = "0.1.0"
