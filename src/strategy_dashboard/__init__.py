"""Strategy dashboard: performance metrics engine and its HTTP/DB plumbing."""

__version__ = "0.1.0"
