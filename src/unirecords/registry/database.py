"""Database handle owning the per-entity record files."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from unirecords.config import FilesConfig
from unirecords.registry.repositories import (
    CourseRepository,
    EnrollmentRepository,
    FacultyRepository,
    Repository,
    StudentRepository,
    UserRepository,
)

if TYPE_CHECKING:
    from types import TracebackType

logger = logging.getLogger(__name__)


class Database:
    """Handle on one data directory and its five record files.

    Repositories are created on first access and share the handle's
    lifetime: ``close()`` releases every open file. Only one process may
    use a data directory at a time.
    """

    def __init__(self, data_dir: str | Path = "data", files: FilesConfig | None = None) -> None:
        """Initialize the database handle.

        Args:
            data_dir: Directory holding the record files. Created on demand.
            files: File names per entity. Defaults to students.dat etc.
        """
        self.data_dir = Path(data_dir)
        self.files = files if files is not None else FilesConfig()
        self._students: StudentRepository | None = None
        self._faculty: FacultyRepository | None = None
        self._courses: CourseRepository | None = None
        self._enrollments: EnrollmentRepository | None = None
        self._users: UserRepository | None = None

    @property
    def students(self) -> StudentRepository:
        if self._students is None:
            self._students = StudentRepository.open(self.data_dir / self.files.students)
        return self._students

    @property
    def faculty(self) -> FacultyRepository:
        if self._faculty is None:
            self._faculty = FacultyRepository.open(self.data_dir / self.files.faculty)
        return self._faculty

    @property
    def courses(self) -> CourseRepository:
        if self._courses is None:
            self._courses = CourseRepository.open(self.data_dir / self.files.courses)
        return self._courses

    @property
    def enrollments(self) -> EnrollmentRepository:
        if self._enrollments is None:
            self._enrollments = EnrollmentRepository.open(self.data_dir / self.files.enrollments)
        return self._enrollments

    @property
    def users(self) -> UserRepository:
        if self._users is None:
            self._users = UserRepository.open(self.data_dir / self.files.users)
        return self._users

    def _open_repositories(self) -> list[Repository]:  # type: ignore[type-arg]
        candidates = [self._students, self._faculty, self._courses, self._enrollments, self._users]
        return [repo for repo in candidates if repo is not None]

    def close(self) -> None:
        """Close every open record file."""
        for repo in self._open_repositories():
            repo.close()
        self._students = None
        self._faculty = None
        self._courses = None
        self._enrollments = None
        self._users = None
        logger.debug("Closed database at %s", self.data_dir)

    def __enter__(self) -> Database:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"<Database(data_dir={str(self.data_dir)!r})>"
