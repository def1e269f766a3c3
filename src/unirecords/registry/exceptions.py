"""Custom exceptions for the entity registry."""


class RegistryError(Exception):
    """Base exception for registry errors."""


class RecordNotFoundError(RegistryError):
    """No record with the given key exists."""


class DuplicateKeyError(RegistryError):
    """A record with the same key already exists."""


class InvalidRecordError(RegistryError, ValueError):
    """A record field holds a value the registry does not accept."""
