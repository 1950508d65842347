#!/usr/bin/env python3
"""
Exception taxonomy for the screening pipeline.

Extraction and scoring errors are recovered inside a worker and turned into
error results; batch precondition errors propagate to the caller of
``BatchCoordinator.run_batch``.
"""


class ScreeningException(Exception):
    """Base exception for screening errors."""
    pass


class ExtractionError(ScreeningException):
    """Raised when a document cannot be normalized into scorer content."""
    pass


class ScoreError(ScreeningException):
    """Raised when the scorer fails in a way that is not worth retrying."""
    pass


class RateLimitedError(ScoreError):
    """Raised when the scorer reports a rate limit or exhausted quota."""
    pass


class MissingCredentialsError(ScoreError):
    """Raised when no API key is available for a scorer call."""
    pass


class BatchPreconditionError(ScreeningException):
    """Raised when a batch cannot be started as requested."""
    pass


class InvalidWorkerCountError(BatchPreconditionError):
    """Raised when the worker count is not a positive integer."""
    pass


class BatchAlreadyStartedError(BatchPreconditionError):
    """Raised when a batch is re-run or reset without going through reset first."""
    pass
