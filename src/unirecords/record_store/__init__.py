"""Record Store - Fixed-width binary record files with index-addressed access."""

from unirecords.record_store.exceptions import (
    CorruptRecordError,
    FieldValueError,
    RecordIndexError,
    RecordStoreError,
    StorageIOError,
)
from unirecords.record_store.layout import (
    Field,
    FieldKind,
    RecordLayout,
    clip_text,
    float32,
    int32,
    raw,
    text,
)
from unirecords.record_store.store import RecordStore

__all__ = [
    "CorruptRecordError",
    "Field",
    "FieldKind",
    "FieldValueError",
    "RecordIndexError",
    "RecordLayout",
    "RecordStore",
    "RecordStoreError",
    "StorageIOError",
    "clip_text",
    "float32",
    "int32",
    "raw",
    "text",
]
