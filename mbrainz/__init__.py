"""MusicBrainz web service client with rate limiting, retries and caching."""

__version__ = "0.1.0"

__all__ = ["cache", "client", "config", "errors", "factory", "models", "requester"]