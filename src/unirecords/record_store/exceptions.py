"""Custom exceptions for the record store."""


class RecordStoreError(Exception):
    """Base exception for record store errors."""


class RecordIndexError(RecordStoreError, IndexError):
    """Record index is outside the stored range."""


class StorageIOError(RecordStoreError):
    """The backing file could not be read or written."""


class CorruptRecordError(RecordStoreError):
    """Stored bytes do not decode to a valid record."""


class FieldValueError(RecordStoreError, ValueError):
    """A field value cannot be represented in its fixed-width slot."""
