"""HTTP middleware."""
from quickvote.middleware.logging import LoggingMiddleware

__all__ = ["LoggingMiddleware"]
