"""RecordStore - random-access file of fixed-width records."""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Iterable, Iterator
from pathlib import Path
from typing import TYPE_CHECKING, BinaryIO, Generic, TypeVar

from unirecords.record_store.exceptions import RecordIndexError, StorageIOError

if TYPE_CHECKING:
    from types import TracebackType

    from unirecords.record_store.layout import RecordLayout

R = TypeVar("R")

logger = logging.getLogger(__name__)


class RecordStore(Generic[R]):
    """A headerless file holding a contiguous array of same-width records.

    Record ``i`` occupies bytes ``[i * width, (i + 1) * width)``. Records are
    only ever appended or overwritten in place; nothing is inserted or removed.

    The file handle is opened on first use and held until ``close()``. A file
    that does not exist yet behaves as an empty store and is created by the
    first ``append``. Single-process use is assumed: there is no locking.
    """

    def __init__(self, path: str | Path, layout: RecordLayout[R]) -> None:
        """Initialize a store.

        Args:
            path: Location of the backing file.
            layout: Binary layout of the record type; fixes the record width.
        """
        self.path = Path(path)
        self.layout = layout
        self._file: BinaryIO | None = None
        self._reported_tail: int | None = None

    @property
    def width(self) -> int:
        """Width of one record in bytes."""
        return self.layout.width

    def _handle(self, create: bool = False) -> BinaryIO | None:
        """Get the open file handle, opening it if the file exists.

        Args:
            create: Create the file (and its directory) when it is missing.

        Returns:
            The handle, or None when the file does not exist and create is False.
        """
        if self._file is None:
            try:
                if self.path.exists():
                    self._file = open(self.path, "r+b")  # noqa: SIM115
                elif create:
                    self.path.parent.mkdir(parents=True, exist_ok=True)
                    self._file = open(self.path, "x+b")  # noqa: SIM115
                    logger.info("Created record file %s", self.path)
            except OSError as e:
                raise StorageIOError(f"Cannot open record file '{self.path}': {e}") from e
        return self._file

    def _record_count(self, handle: BinaryIO) -> int:
        try:
            size = os.fstat(handle.fileno()).st_size
        except OSError as e:
            raise StorageIOError(f"Cannot stat record file '{self.path}': {e}") from e
        count, tail = divmod(size, self.width)
        if tail and self._reported_tail != size:
            self._reported_tail = size
            logger.warning(
                "%s ends with a partial record (%d of %d bytes); it is ignored",
                self.path,
                tail,
                self.width,
            )
        return count

    def _read_bytes(self, handle: BinaryIO, index: int) -> bytes:
        try:
            handle.seek(index * self.width)
            return handle.read(self.width)
        except OSError as e:
            raise StorageIOError(f"Cannot read record {index} of '{self.path}': {e}") from e

    def _write_bytes(self, handle: BinaryIO, index: int, data: bytes) -> None:
        try:
            handle.seek(index * self.width)
            handle.write(data)
            handle.flush()
        except OSError as e:
            raise StorageIOError(f"Cannot write record {index} of '{self.path}': {e}") from e

    def count(self) -> int:
        """Number of complete records in the file.

        Returns:
            ``file size // width``; 0 when the file is missing or unreadable.
        """
        try:
            handle = self._handle()
            if handle is None:
                return 0
            return self._record_count(handle)
        except StorageIOError as e:
            logger.warning("Counting %s as empty: %s", self.path, e)
            return 0

    def __len__(self) -> int:
        return self.count()

    def append(self, record: R) -> int:
        """Write a record after the last complete record and flush.

        Args:
            record: The record to store.

        Returns:
            Index of the new record.

        Raises:
            FieldValueError: If the record does not fit the layout.
            StorageIOError: If the file cannot be created or written.
        """
        data = self.layout.encode(record)
        handle = self._handle(create=True)
        assert handle is not None
        index = self._record_count(handle)
        self._write_bytes(handle, index, data)
        logger.debug("Appended record %d to %s", index, self.path)
        return index

    def _handle_at(self, index: int) -> BinaryIO:
        handle = self._handle()
        total = self._record_count(handle) if handle is not None else 0
        if handle is None or not 0 <= index < total:
            raise RecordIndexError(
                f"Record index {index} out of range for '{self.path}' ({total} records)"
            )
        return handle

    def read_at(self, index: int) -> R:
        """Read the record at ``index``.

        Raises:
            RecordIndexError: If index is outside ``[0, count())``.
            StorageIOError: If the file cannot be read.
        """
        handle = self._handle_at(index)
        return self.layout.decode(self._read_bytes(handle, index))

    def write_at(self, index: int, record: R) -> None:
        """Overwrite the record at ``index`` in place and flush.

        Raises:
            RecordIndexError: If index is outside ``[0, count())``.
            FieldValueError: If the record does not fit the layout.
            StorageIOError: If the file cannot be written.
        """
        data = self.layout.encode(record)
        handle = self._handle_at(index)
        self._write_bytes(handle, index, data)
        logger.debug("Rewrote record %d of %s", index, self.path)

    def write_fields(self, index: int, record: R, names: Iterable[str]) -> None:
        """Overwrite only the named fields of the record at ``index``.

        The bytes of every other field stay exactly as they are on disk.

        Raises:
            RecordIndexError: If index is outside ``[0, count())``.
            FieldValueError: If a field value does not fit its slot.
            StorageIOError: If the file cannot be read or written.
        """
        names = list(names)
        handle = self._handle_at(index)
        data = self.layout.patch(self._read_bytes(handle, index), record, names)
        self._write_bytes(handle, index, data)
        logger.debug("Rewrote %s of record %d of %s", ", ".join(names), index, self.path)

    def scan(self) -> Iterator[tuple[int, R]]:
        """Iterate over ``(index, record)`` pairs in file order.

        The record count is taken when iteration starts. Mutating the store
        while a scan is in progress gives undefined results.
        """
        handle = self._handle()
        if handle is None:
            return
        total = self._record_count(handle)
        for index in range(total):
            data = self._read_bytes(handle, index)
            if len(data) < self.width:
                logger.warning(
                    "Scan of %s stopped at record %d: file shrank during the scan",
                    self.path,
                    index,
                )
                return
            yield index, self.layout.decode(data)

    def __iter__(self) -> Iterator[R]:
        for _, record in self.scan():
            yield record

    def find_first(self, predicate: Callable[[R], bool]) -> tuple[int, R] | None:
        """Find the first record satisfying ``predicate``.

        Linear scan from index 0; stops at the first match.

        Returns:
            ``(index, record)`` of the first match, or None.
        """
        for index, record in self.scan():
            if predicate(record):
                return index, record
        return None

    def close(self) -> None:
        """Release the file handle."""
        if self._file is not None:
            self._file.close()
            self._file = None

    def __enter__(self) -> RecordStore[R]:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"<RecordStore(path={str(self.path)!r}, width={self.width})>"
