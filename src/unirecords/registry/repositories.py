"""Entity repositories - keyed access over record stores."""

from __future__ import annotations

import dataclasses
import logging
import math
from collections.abc import Iterator
from pathlib import Path
from typing import Any, ClassVar, Generic, Self, TypeVar

from unirecords.grading import normalize_grade
from unirecords.record_store import RecordLayout, RecordStore
from unirecords.registry.exceptions import (
    DuplicateKeyError,
    InvalidRecordError,
    RecordNotFoundError,
)
from unirecords.registry.models import (
    COURSE_LAYOUT,
    ENROLLMENT_LAYOUT,
    FACULTY_LAYOUT,
    STUDENT_LAYOUT,
    USER_LAYOUT,
    Course,
    Enrollment,
    Faculty,
    Student,
    User,
)

R = TypeVar("R")

logger = logging.getLogger(__name__)


class Repository(Generic[R]):
    """Key-addressed view over one RecordStore.

    Keys are unique within a store: ``insert`` rejects a record whose key is
    already present, and the existing record is kept. Lookups are linear
    scans returning the first match in file order.
    """

    entity: ClassVar[str] = "record"
    layout: ClassVar[RecordLayout[Any]]

    def __init__(self, store: RecordStore[R]) -> None:
        """Initialize the repository.

        Args:
            store: Record store holding this entity's records.
        """
        self.store = store
        record_type: Any = store.layout.record_type
        self.key_fields: tuple[str, ...] = record_type.KEY
        self._field_names = {f.name for f in dataclasses.fields(record_type)}

    @classmethod
    def open(cls, path: str | Path) -> Self:
        """Create a repository over the record file at ``path``."""
        return cls(RecordStore(path, cls.layout))

    def close(self) -> None:
        self.store.close()

    def key_of(self, record: R) -> tuple[Any, ...]:
        return tuple(getattr(record, name) for name in self.key_fields)

    def _normalize_key(self, key: tuple[Any, ...]) -> tuple[Any, ...]:
        if len(key) != len(self.key_fields):
            raise TypeError(
                f"{self.entity} key is ({', '.join(self.key_fields)}), got {len(key)} value(s)"
            )
        return tuple(
            self.store.layout.clip(name, value)
            for name, value in zip(self.key_fields, key, strict=True)
        )

    def _describe(self, key: tuple[Any, ...]) -> str:
        pairs = zip(self.key_fields, key, strict=True)
        return ", ".join(f"{name} '{value}'" for name, value in pairs)

    def _not_found(self, key: tuple[Any, ...]) -> RecordNotFoundError:
        return RecordNotFoundError(
            f"{self.entity.capitalize()} with {self._describe(key)} not found"
        )

    def _prepare(self, record: R) -> R:
        """Validate or canonicalize a record before it is written."""
        return record

    def count(self) -> int:
        return self.store.count()

    def list_all(self) -> Iterator[R]:
        """Iterate over all records in insertion order."""
        return iter(self.store)

    def locate(self, *key: Any) -> tuple[int, R] | None:
        """Find the index and record for ``key``, or None."""
        wanted = self._normalize_key(key)
        return self.store.find_first(lambda record: self.key_of(record) == wanted)

    def find(self, *key: Any) -> R | None:
        found = self.locate(*key)
        return found[1] if found is not None else None

    def exists(self, *key: Any) -> bool:
        return self.locate(*key) is not None

    def get(self, *key: Any) -> R:
        """Get the record for ``key``.

        Raises:
            RecordNotFoundError: If no record has this key.
        """
        found = self.locate(*key)
        if found is None:
            raise self._not_found(key)
        return found[1]

    def insert(self, record: R) -> R:
        """Append a record whose key is not yet present.

        Args:
            record: The new record.

        Returns:
            The record as stored (text fields clipped to their capacity).

        Raises:
            DuplicateKeyError: If a record with the same key exists.
        """
        record = self._prepare(record)
        key = self.key_of(record)
        if self.locate(*key) is not None:
            raise DuplicateKeyError(
                f"{self.entity.capitalize()} with {self._describe(key)} already exists"
            )
        index = self.store.append(record)
        logger.info("Inserted %s %s", self.entity, self._describe(key))
        return self.store.read_at(index)

    def update_by_key(self, key: Any, **patch: Any) -> R:
        """Update fields of the record with ``key``. Only supplied fields change.

        A patch value of None or an empty string means "keep the current
        value"; any other value replaces the field.

        Args:
            key: The key value, or a tuple for composite keys.
            **patch: Field names and new values.

        Returns:
            The updated record.

        Raises:
            TypeError: If the patch names an unknown field.
            ValueError: If the patch names a key field.
            RecordNotFoundError: If no record has this key.
        """
        key = key if isinstance(key, tuple) else (key,)
        for name in patch:
            if name not in self._field_names:
                raise TypeError(f"{self.entity.capitalize()} has no field '{name}'")
            if name in self.key_fields:
                raise ValueError(f"'{name}' is a key field of {self.entity} and cannot be updated")

        found = self.locate(*key)
        if found is None:
            raise self._not_found(key)
        index, current = found

        changes = {name: value for name, value in patch.items() if value not in (None, "")}
        if not changes:
            return current

        updated = self._prepare(dataclasses.replace(current, **changes))  # type: ignore[type-var]
        self.store.write_fields(index, updated, changes)
        logger.info(
            "Updated %s %s: %s", self.entity, self._describe(key), ", ".join(sorted(changes))
        )
        return self.store.read_at(index)


class StudentRepository(Repository[Student]):
    entity = "student"
    layout = STUDENT_LAYOUT


class FacultyRepository(Repository[Faculty]):
    entity = "faculty"
    layout = FACULTY_LAYOUT


class CourseRepository(Repository[Course]):
    entity = "course"
    layout = COURSE_LAYOUT

    def _prepare(self, record: Course) -> Course:
        if not math.isfinite(record.credit) or record.credit < 0:
            raise InvalidRecordError(
                f"Course '{record.code}' credit must be a non-negative number, got {record.credit}"
            )
        return record

    def taught_by(self, faculty_id: str) -> Iterator[Course]:
        """Courses whose instructor is ``faculty_id``, in file order."""
        wanted = self.store.layout.clip("instructor_id", faculty_id)
        return (course for course in self.store if course.instructor_id == wanted)


class EnrollmentRepository(Repository[Enrollment]):
    """Enrollments keyed by (student_id, course_code, term).

    Grades are canonicalized and validated before any write.
    """

    entity = "enrollment"
    layout = ENROLLMENT_LAYOUT

    def _prepare(self, record: Enrollment) -> Enrollment:
        grade = normalize_grade(record.grade)
        if grade != record.grade:
            record = dataclasses.replace(record, grade=grade)
        return record

    def for_student(self, student_id: str) -> Iterator[Enrollment]:
        wanted = self.store.layout.clip("student_id", student_id)
        return (e for e in self.store if e.student_id == wanted)

    def for_offering(self, course_code: str, term: str) -> Iterator[Enrollment]:
        """Enrollments in one course for one term, in file order."""
        code = self.store.layout.clip("course_code", course_code)
        term = self.store.layout.clip("term", term)
        return (e for e in self.store if e.course_code == code and e.term == term)

    def for_term(self, term: str) -> Iterator[Enrollment]:
        wanted = self.store.layout.clip("term", term)
        return (e for e in self.store if e.term == wanted)

    def set_grade(self, student_id: str, course_code: str, term: str, grade: str) -> Enrollment:
        """Record a grade for an existing enrollment.

        Raises:
            InvalidGradeError: If the grade is not recognised.
            RecordNotFoundError: If the enrollment does not exist.
        """
        return self.update_by_key((student_id, course_code, term), grade=normalize_grade(grade))


class UserRepository(Repository[User]):
    entity = "user"
    layout = USER_LAYOUT
