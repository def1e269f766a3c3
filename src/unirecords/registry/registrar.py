"""Registrar - commands that span more than one entity file."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from unirecords.credentials import obfuscate, verify_password
from unirecords.grading import UNGRADED
from unirecords.registry.models import Course, Enrollment, Faculty, Role, Student, User

if TYPE_CHECKING:
    from unirecords.registry.database import Database

logger = logging.getLogger(__name__)


class Registrar:
    """Administrative and faculty commands over a Database.

    Each method performs its existence checks and then a single append or
    in-place write. The check and the write are not atomic; the data
    directory must not be shared between processes.
    """

    def __init__(self, database: Database) -> None:
        """Initialize the Registrar.

        Args:
            database: Open database handle.
        """
        self.db = database

    # --- People ---

    def add_student(
        self, id: str, name: str, department: str, batch: int, email: str
    ) -> Student:
        """Register a student.

        Raises:
            DuplicateKeyError: If the id is taken.
        """
        return self.db.students.insert(
            Student(id=id, name=name, department=department, batch=batch, email=email)
        )

    def edit_student(
        self,
        id: str,
        name: str | None = None,
        department: str | None = None,
        batch: int | None = None,
        email: str | None = None,
    ) -> Student:
        """Update a student's details. Blank or omitted fields keep their value.

        Raises:
            RecordNotFoundError: If the student doesn't exist.
        """
        return self.db.students.update_by_key(
            id, name=name, department=department, batch=batch, email=email
        )

    def add_faculty(self, id: str, name: str, department: str, email: str) -> Faculty:
        """Register a faculty member.

        Raises:
            DuplicateKeyError: If the id is taken.
        """
        return self.db.faculty.insert(Faculty(id=id, name=name, department=department, email=email))

    # --- Courses ---

    def add_course(
        self,
        code: str,
        title: str,
        credit: float,
        department: str,
        instructor_id: str = "",
    ) -> Course:
        """Create a course. The instructor id is stored without checking it."""
        return self.db.courses.insert(
            Course(
                code=code,
                title=title,
                credit=credit,
                department=department,
                instructor_id=instructor_id,
            )
        )

    def assign_instructor(self, course_code: str, faculty_id: str) -> Course:
        """Make an existing faculty member the instructor of a course.

        Raises:
            RecordNotFoundError: If the course or the faculty member doesn't exist.
        """
        self.db.courses.get(course_code)
        self.db.faculty.get(faculty_id)
        return self.db.courses.update_by_key(course_code, instructor_id=faculty_id)

    def courses_for_instructor(self, faculty_id: str) -> list[Course]:
        if not faculty_id:
            return []
        return list(self.db.courses.taught_by(faculty_id))

    def is_instructor_of(self, faculty_id: str, course_code: str) -> bool:
        course = self.db.courses.find(course_code)
        return course is not None and bool(faculty_id) and course.instructor_id == faculty_id

    # --- Enrollment ---

    def enroll(self, student_id: str, course_code: str, term: str) -> Enrollment:
        """Enroll a student in a course for a term, ungraded.

        Raises:
            RecordNotFoundError: If the student or course doesn't exist.
            DuplicateKeyError: If the student is already enrolled for that term.
        """
        self.db.students.get(student_id)
        self.db.courses.get(course_code)
        return self.db.enrollments.insert(
            Enrollment(student_id=student_id, course_code=course_code, term=term, grade=UNGRADED)
        )

    def set_grade(self, student_id: str, course_code: str, term: str, grade: str) -> Enrollment:
        """Enter or change a grade.

        Raises:
            InvalidGradeError: If the grade is not a known letter or NA.
            RecordNotFoundError: If the enrollment doesn't exist.
        """
        return self.db.enrollments.set_grade(student_id, course_code, term, grade)

    # --- Accounts ---

    def add_user(self, username: str, role: Role, password: str, ref_id: str = "") -> User:
        """Create a login account. ``ref_id`` is not checked.

        Raises:
            DuplicateKeyError: If the username is taken.
        """
        return self.db.users.insert(
            User(username=username, role=role, ref_id=ref_id, password=obfuscate(password))
        )

    def authenticate(self, username: str, password: str) -> User | None:
        """Return the account for valid credentials, otherwise None."""
        user = self.db.users.find(username)
        if user is None or not verify_password(user.password, password):
            logger.info("Rejected login for %r", username)
            return None
        return user
