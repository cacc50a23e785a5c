"""Property listing search: URL-synchronized filters and incremental result loading."""

__version__ = "0.1.0"
