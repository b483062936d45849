"""Error taxonomy for the progression engine.

Pure components (scoring, levels, achievements, ordering) only ever raise
ValidationError. Storage and authorization errors come from the
progress coordinator alone.
"""


class ProgressionError(Exception):
    """Base class for every error raised by the engine."""

    retryable: bool = False


class ValidationError(ProgressionError, ValueError):
    """Malformed or missing input. Not retryable."""


class AuthorizationError(ProgressionError):
    """The acting identity neither owns the record nor holds an elevated role."""


class NotFoundError(ProgressionError, LookupError):
    """Unknown user or challenge."""


class StorageError(ProgressionError):
    """The database rejected an operation for a reason retrying will not fix."""


class TransientStorageError(StorageError):
    """Storage timed out or was busy; the whole operation may be retried."""

    retryable = True


class ConsistencyError(ProgressionError):
    """Completion ledger and stored XP disagree.

    Never expected when completions go through the coordinator; treat as a bug.
    """
