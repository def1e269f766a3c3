"""Fixed-width binary layouts for record types.

A layout maps a dataclass onto a contiguous little-endian struct with no
padding between fields. Because every field has a fixed capacity, every
record of a layout has the same width and record ``i`` lives at byte offset
``i * width``.

Field encodings:
    text(n):   UTF-8, truncated to at most ``n - 1`` bytes without splitting a
               character, NUL-padded to ``n``. Decoding stops at the first NUL.
    int32:     signed 32-bit integer.
    float32:   IEEE single precision, read back rounded to 7 significant digits.
    raw(n):    opaque bytes, truncated or NUL-padded to ``n``.
"""

from __future__ import annotations

import dataclasses
import struct
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Generic, TypeVar

from unirecords.record_store.exceptions import CorruptRecordError, FieldValueError

R = TypeVar("R")

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1


class FieldKind(StrEnum):
    """Storage kind of a single field."""

    TEXT = "text"
    INT32 = "int32"
    FLOAT32 = "float32"
    RAW = "raw"


def clip_text(value: str, size: int) -> str:
    """Return ``value`` exactly as it reads back from a ``text(size)`` field."""
    value = value.split("\0", 1)[0]
    data = value.encode("utf-8")[: size - 1]
    # A cut through a multi-byte character leaves an invalid tail; drop it.
    return data.decode("utf-8", errors="ignore")


@dataclass(frozen=True)
class Field:
    """One fixed-capacity slot in a record layout.

    Attributes:
        name: Attribute name on the record dataclass.
        kind: Storage kind.
        size: Capacity in bytes (text and raw fields only).
        converter: Optional callable applied to decoded int32 values,
            e.g. an IntEnum class.
    """

    name: str
    kind: FieldKind
    size: int = 4
    converter: Callable[[int], Any] | None = None

    @property
    def format(self) -> str:
        if self.kind in (FieldKind.TEXT, FieldKind.RAW):
            return f"{self.size}s"
        if self.kind == FieldKind.INT32:
            return "i"
        return "f"

    def _type_error(self, expected: str, value: Any) -> FieldValueError:
        return FieldValueError(
            f"Field '{self.name}' expects {expected}, got {type(value).__name__}"
        )

    def pack_value(self, value: Any) -> Any:
        """Convert a record attribute into the value handed to ``struct``."""
        if self.kind == FieldKind.TEXT:
            if not isinstance(value, str):
                raise self._type_error("str", value)
            return clip_text(value, self.size).encode("utf-8")
        if self.kind == FieldKind.RAW:
            if not isinstance(value, bytes | bytearray):
                raise self._type_error("bytes", value)
            return bytes(value[: self.size])
        if self.kind == FieldKind.INT32:
            if isinstance(value, bool) or not isinstance(value, int):
                raise self._type_error("int", value)
            if not INT32_MIN <= value <= INT32_MAX:
                raise FieldValueError(f"Field '{self.name}' value {value} does not fit in int32")
            return int(value)
        if isinstance(value, bool) or not isinstance(value, int | float):
            raise self._type_error("float", value)
        try:
            struct.pack("<f", value)
        except (OverflowError, struct.error) as e:
            raise FieldValueError(
                f"Field '{self.name}' value {value} does not fit in float32"
            ) from e
        return float(value)

    def unpack_value(self, value: Any) -> Any:
        """Convert a raw ``struct`` value back into a record attribute."""
        if self.kind == FieldKind.TEXT:
            return value.split(b"\0", 1)[0].decode("utf-8", errors="replace")
        if self.kind == FieldKind.RAW:
            return value
        if self.kind == FieldKind.INT32:
            if self.converter is None:
                return value
            try:
                return self.converter(value)
            except ValueError as e:
                raise CorruptRecordError(f"Field '{self.name}' holds invalid value {value}") from e
        # float32 carries 7 significant digits
        return float(f"{value:.7g}")


def text(name: str, size: int) -> Field:
    """Declare a NUL-terminated text field of ``size`` bytes."""
    if size < 2:
        raise ValueError(f"Text field '{name}' needs room for at least one byte and a NUL")
    return Field(name, FieldKind.TEXT, size)


def int32(name: str, converter: Callable[[int], Any] | None = None) -> Field:
    """Declare a signed 32-bit integer field."""
    return Field(name, FieldKind.INT32, 4, converter)


def float32(name: str) -> Field:
    """Declare a single precision float field."""
    return Field(name, FieldKind.FLOAT32, 4)


def raw(name: str, size: int) -> Field:
    """Declare an opaque byte field of ``size`` bytes."""
    return Field(name, FieldKind.RAW, size)


class RecordLayout(Generic[R]):
    """Binary layout of one dataclass record type."""

    def __init__(self, record_type: type[R], fields: Sequence[Field]) -> None:
        """Bind a dataclass to an ordered list of fields.

        Args:
            record_type: Dataclass whose fields are persisted.
            fields: One Field per dataclass field, in on-disk order.

        Raises:
            ValueError: If the fields do not cover the dataclass exactly.
        """
        declared = sorted(f.name for f in dataclasses.fields(record_type))  # type: ignore[arg-type]
        laid_out = sorted(f.name for f in fields)
        if declared != laid_out:
            raise ValueError(
                f"Layout fields {laid_out} do not match {record_type.__name__} fields {declared}"
            )
        self.record_type = record_type
        self.fields = tuple(fields)
        self._by_name = {f.name: f for f in self.fields}
        self._struct = struct.Struct("<" + "".join(f.format for f in self.fields))
        self._spans: dict[str, slice] = {}
        offset = 0
        for f in self.fields:
            size = struct.calcsize("<" + f.format)
            self._spans[f.name] = slice(offset, offset + size)
            offset += size

    @property
    def width(self) -> int:
        """Size of one encoded record in bytes."""
        return self._struct.size

    def field(self, name: str) -> Field:
        return self._by_name[name]

    def encode(self, record: R) -> bytes:
        """Serialize a record to exactly ``width`` bytes.

        Raises:
            FieldValueError: If a field value does not fit its slot.
        """
        values = [f.pack_value(getattr(record, f.name)) for f in self.fields]
        return self._struct.pack(*values)

    def decode(self, data: bytes) -> R:
        """Deserialize ``width`` bytes into a record.

        Raises:
            CorruptRecordError: On a short buffer or an invalid enum value.
        """
        if len(data) != self.width:
            raise CorruptRecordError(
                f"Expected {self.width} bytes for {self.record_type.__name__}, got {len(data)}"
            )
        values = self._struct.unpack(data)
        kwargs = {f.name: f.unpack_value(v) for f, v in zip(self.fields, values, strict=True)}
        return self.record_type(**kwargs)

    def patch(self, original: bytes, record: R, names: Iterable[str]) -> bytes:
        """Encode the named fields of ``record`` over an existing encoding.

        Every other field keeps its original bytes, including bytes that a
        decode and re-encode would not reproduce (invalid UTF-8, data after
        the terminating NUL).

        Raises:
            CorruptRecordError: If ``original`` is not ``width`` bytes long.
            FieldValueError: If a field value does not fit its slot.
        """
        if len(original) != self.width:
            raise CorruptRecordError(
                f"Expected {self.width} bytes for {self.record_type.__name__}, got {len(original)}"
            )
        encoded = self.encode(record)
        data = bytearray(original)
        for name in names:
            span = self._spans[name]
            data[span] = encoded[span]
        return bytes(data)

    def clip(self, name: str, value: Any) -> Any:
        """Return ``value`` as it would read back from field ``name``."""
        field = self._by_name[name]
        if field.kind == FieldKind.TEXT and isinstance(value, str):
            return clip_text(value, field.size)
        if field.kind == FieldKind.RAW and isinstance(value, bytes | bytearray):
            return bytes(value[: field.size]).ljust(field.size, b"\0")
        return value

    def __repr__(self) -> str:
        return f"<RecordLayout({self.record_type.__name__}, width={self.width})>"
