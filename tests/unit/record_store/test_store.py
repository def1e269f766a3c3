"""Unit tests for RecordStore."""

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

import pytest

from unirecords.record_store import (
    RecordIndexError,
    RecordLayout,
    RecordStore,
    StorageIOError,
    int32,
    text,
)


@dataclass
class Item:
    name: str
    qty: int


LAYOUT = RecordLayout(Item, [text("name", 12), int32("qty")])


@pytest.fixture
def path(tmp_path: Path) -> Path:
    return tmp_path / "items.dat"


@pytest.fixture
def store(path: Path) -> Iterator[RecordStore[Item]]:
    s = RecordStore(path, LAYOUT)
    yield s
    s.close()


@pytest.mark.unit
class TestMissingFile:
    """A store whose file does not exist behaves as empty."""

    def test_count_is_zero(self, store: RecordStore[Item], path: Path) -> None:
        assert store.count() == 0
        assert not path.exists()

    def test_iteration_is_empty(self, store: RecordStore[Item]) -> None:
        assert list(store) == []

    def test_find_first_returns_none(self, store: RecordStore[Item]) -> None:
        assert store.find_first(lambda item: True) is None

    def test_read_at_raises(self, store: RecordStore[Item]) -> None:
        with pytest.raises(RecordIndexError):
            store.read_at(0)

    def test_write_at_raises(self, store: RecordStore[Item]) -> None:
        with pytest.raises(RecordIndexError):
            store.write_at(0, Item("x", 1))

    def test_append_creates_file_and_directory(self, tmp_path: Path) -> None:
        nested = tmp_path / "a" / "b" / "items.dat"
        with RecordStore(nested, LAYOUT) as s:
            s.append(Item("x", 1))

        assert nested.stat().st_size == LAYOUT.width


@pytest.mark.unit
class TestAppendAndRead:
    """Tests for append, count and read_at."""

    def test_count_after_appends(self, store: RecordStore[Item]) -> None:
        for i in range(5):
            store.append(Item(f"item{i}", i))

        assert store.count() == 5
        assert len(store) == 5

    def test_append_returns_index(self, store: RecordStore[Item]) -> None:
        assert store.append(Item("a", 1)) == 0
        assert store.append(Item("b", 2)) == 1

    def test_read_at_returns_appended_record(self, store: RecordStore[Item]) -> None:
        items = [Item(f"item{i}", i * 10) for i in range(4)]
        for item in items:
            store.append(item)

        for i, item in enumerate(items):
            assert store.read_at(i) == item

    def test_file_size_is_count_times_width(self, store: RecordStore[Item], path: Path) -> None:
        store.append(Item("a", 1))
        store.append(Item("b", 2))

        assert path.stat().st_size == 2 * store.width

    def test_read_out_of_range_raises(self, store: RecordStore[Item]) -> None:
        store.append(Item("a", 1))

        with pytest.raises(RecordIndexError):
            store.read_at(1)
        with pytest.raises(RecordIndexError):
            store.read_at(-1)

    def test_data_visible_to_new_store_instance(self, store: RecordStore[Item], path: Path) -> None:
        store.append(Item("a", 1))
        store.close()

        with RecordStore(path, LAYOUT) as reopened:
            assert reopened.count() == 1
            assert reopened.read_at(0) == Item("a", 1)


@pytest.mark.unit
class TestWriteAt:
    """Tests for in-place overwrite."""

    def test_overwrites_only_target_record(self, store: RecordStore[Item]) -> None:
        for name in ("a", "b", "c"):
            store.append(Item(name, 0))

        store.write_at(1, Item("B", 99))

        assert list(store) == [Item("a", 0), Item("B", 99), Item("c", 0)]
        assert store.count() == 3

    def test_out_of_range_raises(self, store: RecordStore[Item]) -> None:
        store.append(Item("a", 0))

        with pytest.raises(RecordIndexError):
            store.write_at(1, Item("b", 0))


@pytest.mark.unit
class TestWriteFields:
    """Tests for rewriting selected fields in place."""

    def test_untouched_bytes_kept(self, store: RecordStore[Item], path: Path) -> None:
        store.append(Item("a", 1))
        store.close()
        data = bytearray(path.read_bytes())
        data[0:12] = b"n\xe9\0garbage\0\0"
        path.write_bytes(bytes(data))

        store.write_fields(0, Item("ignored", 5), ["qty"])

        assert path.read_bytes()[0:12] == b"n\xe9\0garbage\0\0"
        assert store.read_at(0).qty == 5

    def test_out_of_range_raises(self, store: RecordStore[Item]) -> None:
        with pytest.raises(RecordIndexError):
            store.write_fields(0, Item("a", 1), ["qty"])


@pytest.mark.unit
class TestFindFirst:
    """Tests for predicate search."""

    def test_returns_first_match_with_index(self, store: RecordStore[Item]) -> None:
        store.append(Item("a", 1))
        store.append(Item("b", 2))
        store.append(Item("b", 3))

        found = store.find_first(lambda item: item.name == "b")

        assert found == (1, Item("b", 2))

    def test_no_match_returns_none(self, store: RecordStore[Item]) -> None:
        store.append(Item("a", 1))

        assert store.find_first(lambda item: item.name == "z") is None

    def test_stops_at_first_match(self, store: RecordStore[Item]) -> None:
        for i in range(10):
            store.append(Item(str(i), i))
        seen: list[int] = []

        def predicate(item: Item) -> bool:
            seen.append(item.qty)
            return item.qty == 3

        store.find_first(predicate)

        assert seen == [0, 1, 2, 3]

    def test_scan_yields_indexes_in_file_order(self, store: RecordStore[Item]) -> None:
        store.append(Item("a", 1))
        store.append(Item("b", 2))

        assert list(store.scan()) == [(0, Item("a", 1)), (1, Item("b", 2))]


@pytest.mark.unit
class TestPartialRecord:
    """A trailing partial record is ignored with a warning."""

    def test_partial_tail_not_counted(
        self, path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        with RecordStore(path, LAYOUT) as s:
            s.append(Item("a", 1))
        with open(path, "ab") as f:
            f.write(b"\x01\x02\x03")

        with (
            caplog.at_level(logging.WARNING, logger="unirecords"),
            RecordStore(path, LAYOUT) as s,
        ):
            assert s.count() == 1
            assert list(s) == [Item("a", 1)]

        assert "partial record" in caplog.text

    def test_append_overwrites_partial_tail(self, path: Path) -> None:
        with RecordStore(path, LAYOUT) as s:
            s.append(Item("a", 1))
        with open(path, "ab") as f:
            f.write(b"\x01\x02\x03")

        with RecordStore(path, LAYOUT) as s:
            assert s.append(Item("b", 2)) == 1
            assert list(s) == [Item("a", 1), Item("b", 2)]

        assert path.stat().st_size == 2 * LAYOUT.width


@pytest.mark.unit
class TestLifecycle:
    """Tests for handle lifecycle and I/O failures."""

    def test_close_is_idempotent(self, store: RecordStore[Item]) -> None:
        store.append(Item("a", 1))
        store.close()
        store.close()

    def test_reopens_after_close(self, store: RecordStore[Item]) -> None:
        store.append(Item("a", 1))
        store.close()

        assert store.read_at(0) == Item("a", 1)

    def test_unopenable_path_raises_storage_error(self, tmp_path: Path) -> None:
        blocker = tmp_path / "not_a_dir"
        blocker.write_text("")
        s = RecordStore(blocker / "items.dat", LAYOUT)

        with pytest.raises(StorageIOError):
            s.append(Item("a", 1))

    def test_count_never_raises(self, tmp_path: Path) -> None:
        directory = tmp_path / "is_a_directory.dat"
        directory.mkdir()
        s = RecordStore(directory, LAYOUT)

        assert s.count() == 0
