"""Error kinds raised by the journal core."""


class DaybookError(Exception):
    """Base class for all daybook errors."""

    pass


class ValidationError(DaybookError):
    """Raised when a required input is missing or empty."""

    pass


class ConstraintViolation(DaybookError):
    """Raised when a unique key (entry date, username) already exists."""

    pass


class StorageError(DaybookError):
    """Raised for storage engine failures not otherwise classified."""

    def __init__(self, message: str, original: Exception | None = None):
        super().__init__(message)
        self.original = original
