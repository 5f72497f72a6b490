from __future__ import annotations

class CryptoboardError(Exception):
    """Base error. ``message`` is what the client sees, ``str(exc)`` is what we log."""

    message = "Internal error"

    def __init__(self, detail: str = "", message: str | None = None):
        super().__init__(detail or self.message)
        if message is not None:
            self.message = message

class UpstreamError(CryptoboardError):
    message = "Error fetching articles from upstream provider"

class AuthError(UpstreamError):
    message = "Error authenticating with upstream provider"

class PersistenceError(CryptoboardError):
    message = "Error accessing article storage"
