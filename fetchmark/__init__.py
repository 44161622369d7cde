"""FetchMark - AI-assisted bookmark search."""

__version__ = "0.1.0"
