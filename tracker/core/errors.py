"""Exceptions raised by the domain operations."""


class TrackerError(Exception):
    pass


class StorageError(TrackerError):
    """An entity file could not be written (load failures never raise)."""


class ValidationError(TrackerError):
    pass


class DuplicateKeyError(ValidationError):
    pass


class NotFoundError(TrackerError):
    pass
