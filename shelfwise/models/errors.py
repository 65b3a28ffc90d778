"""
Error taxonomy surfaced to callers.

NotFoundError: no history, no viable candidates, no embeddings.
ServerError: unexpected internal failure (wraps the cause).
DeadlineExceededError: the request deadline expired or was cancelled.
Malformed parameters never raise; RecommendationConfig substitutes defaults.
"""

from typing import Optional


class RecommendationError(Exception):
    """Base class for errors a recommendation call reports to its caller."""


class NotFoundError(RecommendationError):
    pass


class ServerError(RecommendationError):
    def __init__(self, message: str = "internal error", cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class DeadlineExceededError(ServerError):
    pass
