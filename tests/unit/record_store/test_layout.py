"""Unit tests for fixed-width record layouts."""

import struct
from dataclasses import dataclass
from enum import IntEnum

import pytest

from unirecords.record_store import (
    CorruptRecordError,
    FieldValueError,
    RecordLayout,
    clip_text,
    float32,
    int32,
    raw,
    text,
)


class Color(IntEnum):
    RED = 1
    BLUE = 2


@dataclass
class Sample:
    label: str
    count: int
    weight: float
    color: Color
    blob: bytes


@pytest.fixture
def layout() -> RecordLayout[Sample]:
    return RecordLayout(
        Sample,
        [
            text("label", 8),
            int32("count"),
            float32("weight"),
            int32("color", converter=Color),
            raw("blob", 4),
        ],
    )


@pytest.mark.unit
class TestClipText:
    """Tests for clip_text."""

    def test_short_value_unchanged(self) -> None:
        assert clip_text("abc", 8) == "abc"

    def test_truncates_to_capacity_minus_one(self) -> None:
        """One byte is always reserved for the NUL terminator."""
        assert clip_text("abcdefghij", 8) == "abcdefg"

    def test_does_not_split_multibyte_character(self) -> None:
        # "é" is two bytes in UTF-8; 6 + 2 would overflow 7 usable bytes
        assert clip_text("abcdefé", 8) == "abcdef"

    def test_stops_at_embedded_nul(self) -> None:
        assert clip_text("ab\0cd", 8) == "ab"


@pytest.mark.unit
class TestRecordLayout:
    """Tests for RecordLayout encode/decode."""

    def test_width_is_sum_of_fields(self, layout: RecordLayout[Sample]) -> None:
        assert layout.width == 8 + 4 + 4 + 4 + 4

    def test_encode_produces_exact_width(self, layout: RecordLayout[Sample]) -> None:
        data = layout.encode(Sample("x", 1, 1.5, Color.RED, b"\x01"))

        assert len(data) == layout.width

    def test_encoding_is_little_endian_without_padding(
        self, layout: RecordLayout[Sample]
    ) -> None:
        data = layout.encode(Sample("hi", 258, 0.5, Color.BLUE, b"\xff\xee"))

        assert data[:8] == b"hi\0\0\0\0\0\0"
        assert data[8:12] == struct.pack("<i", 258)
        assert data[12:16] == struct.pack("<f", 0.5)
        assert data[16:20] == struct.pack("<i", 2)
        assert data[20:24] == b"\xff\xee\0\0"

    def test_decode_restores_record(self, layout: RecordLayout[Sample]) -> None:
        original = Sample("label", -7, 3.0, Color.BLUE, b"abcd")

        decoded = layout.decode(layout.encode(original))

        assert decoded == original
        assert isinstance(decoded.color, Color)

    def test_float32_reads_back_short_decimal(self, layout: RecordLayout[Sample]) -> None:
        """3.3 is not exact in single precision but reads back as 3.3."""
        decoded = layout.decode(layout.encode(Sample("a", 0, 3.3, Color.RED, b"")))

        assert decoded.weight == 3.3

    def test_long_text_is_truncated(self, layout: RecordLayout[Sample]) -> None:
        decoded = layout.decode(layout.encode(Sample("a" * 20, 0, 0.0, Color.RED, b"")))

        assert decoded.label == "a" * 7

    def test_int_out_of_range_raises(self, layout: RecordLayout[Sample]) -> None:
        with pytest.raises(FieldValueError) as exc_info:
            layout.encode(Sample("a", 2**31, 0.0, Color.RED, b""))

        assert "count" in str(exc_info.value)

    def test_float_overflow_raises(self, layout: RecordLayout[Sample]) -> None:
        with pytest.raises(FieldValueError):
            layout.encode(Sample("a", 0, 1e40, Color.RED, b""))

    def test_wrong_type_raises(self, layout: RecordLayout[Sample]) -> None:
        with pytest.raises(FieldValueError) as exc_info:
            layout.encode(Sample(123, 0, 0.0, Color.RED, b""))  # type: ignore[arg-type]

        assert "label" in str(exc_info.value)

    def test_invalid_enum_value_is_corrupt(self, layout: RecordLayout[Sample]) -> None:
        data = bytearray(layout.encode(Sample("a", 0, 0.0, Color.RED, b"")))
        data[16:20] = struct.pack("<i", 99)

        with pytest.raises(CorruptRecordError):
            layout.decode(bytes(data))

    def test_short_buffer_is_corrupt(self, layout: RecordLayout[Sample]) -> None:
        with pytest.raises(CorruptRecordError):
            layout.decode(b"\0" * (layout.width - 1))

    def test_mismatched_fields_rejected(self) -> None:
        with pytest.raises(ValueError):
            RecordLayout(Sample, [text("label", 8), int32("count")])

    def test_clip_text_field(self, layout: RecordLayout[Sample]) -> None:
        assert layout.clip("label", "abcdefghijk") == "abcdefg"

    def test_clip_raw_field_pads(self, layout: RecordLayout[Sample]) -> None:
        assert layout.clip("blob", b"a") == b"a\0\0\0"

    def test_clip_other_fields_unchanged(self, layout: RecordLayout[Sample]) -> None:
        assert layout.clip("count", 5) == 5


@pytest.mark.unit
class TestPatch:
    """Tests for re-encoding selected fields over an existing record."""

    def test_only_named_fields_change(self, layout: RecordLayout[Sample]) -> None:
        original = bytearray(layout.encode(Sample("abc", 1, 0.5, Color.RED, b"xy")))
        # undecodable label bytes and stale data after its NUL
        original[0:8] = b"ab\xff\0zzz\0"

        patched = layout.patch(
            bytes(original), Sample("ignored", 7, 9.0, Color.BLUE, b"new!"), ["count"]
        )

        assert patched[0:8] == b"ab\xff\0zzz\0"
        assert patched[8:12] == struct.pack("<i", 7)
        assert patched[12:] == bytes(original[12:])

    def test_no_names_keeps_original(self, layout: RecordLayout[Sample]) -> None:
        original = layout.encode(Sample("abc", 1, 0.5, Color.RED, b""))

        assert layout.patch(original, Sample("x", 2, 1.0, Color.BLUE, b""), []) == original

    def test_wrong_width_is_corrupt(self, layout: RecordLayout[Sample]) -> None:
        with pytest.raises(CorruptRecordError):
            layout.patch(b"\0" * 3, Sample("x", 2, 1.0, Color.BLUE, b""), ["count"])
