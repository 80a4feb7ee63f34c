"""WSGI gateway middleware: Redis-backed rate limiting, circuit breaking and JSON responses."""

__version__ = "0.1.0"