"""Entity records and their on-disk layouts."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import ClassVar

from unirecords.credentials import MAX_PASS
from unirecords.grading import UNGRADED, graded_points
from unirecords.record_store import RecordLayout, float32, int32, raw, text

# Field capacities in bytes, including the terminating NUL for text fields.
MAX_ID = 16
MAX_NAME = 64
MAX_DEPT = 32
MAX_EMAIL = 64
MAX_CODE = 16
MAX_TITLE = 64
MAX_TERM = 16
MAX_GRADE = 3
MAX_USER = 32


class Role(IntEnum):
    """Login account role."""

    ADMIN = 1
    FACULTY = 2
    STUDENT = 3


@dataclass
class Student:
    """Student record, keyed by id."""

    KEY: ClassVar[tuple[str, ...]] = ("id",)

    id: str
    name: str
    department: str
    batch: int
    email: str


@dataclass
class Faculty:
    """Faculty member record, keyed by id."""

    KEY: ClassVar[tuple[str, ...]] = ("id",)

    id: str
    name: str
    department: str
    email: str


@dataclass
class Course:
    """Course record, keyed by code.

    ``instructor_id`` refers to a Faculty id but is not checked; it may be
    blank or point at a faculty record that does not exist.
    """

    KEY: ClassVar[tuple[str, ...]] = ("code",)

    code: str
    title: str
    credit: float
    department: str
    instructor_id: str = ""


@dataclass
class Enrollment:
    """A student's registration in a course for one term."""

    KEY: ClassVar[tuple[str, ...]] = ("student_id", "course_code", "term")

    student_id: str
    course_code: str
    term: str
    grade: str = UNGRADED

    @property
    def is_graded(self) -> bool:
        return graded_points(self.grade) is not None


@dataclass
class User:
    """Login account.

    ``ref_id`` is blank for admins and otherwise names a Student or Faculty
    id, unchecked. ``password`` holds the obfuscated credential.
    """

    KEY: ClassVar[tuple[str, ...]] = ("username",)

    username: str
    role: Role
    ref_id: str = ""
    password: bytes = b""

    def __repr__(self) -> str:
        return f"<User(username={self.username!r}, role={self.role.name}, ref_id={self.ref_id!r})>"


STUDENT_LAYOUT = RecordLayout(
    Student,
    [
        text("id", MAX_ID),
        text("name", MAX_NAME),
        text("department", MAX_DEPT),
        int32("batch"),
        text("email", MAX_EMAIL),
    ],
)

FACULTY_LAYOUT = RecordLayout(
    Faculty,
    [
        text("id", MAX_ID),
        text("name", MAX_NAME),
        text("department", MAX_DEPT),
        text("email", MAX_EMAIL),
    ],
)

COURSE_LAYOUT = RecordLayout(
    Course,
    [
        text("code", MAX_CODE),
        text("title", MAX_TITLE),
        float32("credit"),
        text("department", MAX_DEPT),
        text("instructor_id", MAX_ID),
    ],
)

ENROLLMENT_LAYOUT = RecordLayout(
    Enrollment,
    [
        text("student_id", MAX_ID),
        text("course_code", MAX_CODE),
        text("term", MAX_TERM),
        text("grade", MAX_GRADE),
    ],
)

USER_LAYOUT = RecordLayout(
    User,
    [
        text("username", MAX_USER),
        int32("role", converter=Role),
        text("ref_id", MAX_ID),
        raw("password", MAX_PASS),
    ],
)
