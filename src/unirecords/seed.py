"""Demo data written on first start."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from unirecords.registry.models import Course, Enrollment, Faculty, Role, Student
from unirecords.registry.registrar import Registrar

if TYPE_CHECKING:
    from unirecords.registry.database import Database

logger = logging.getLogger(__name__)

DEMO_TERM = "Fall-2025"

DEMO_STUDENTS = [
    Student("02124100034", "Sabbir Ahmed", "EEE", 241, "allexsabbir117@gmail.com"),
    Student("02124100001", "Afsana Mim", "CSE", 231, "mim@example.com"),
]

DEMO_FACULTY = [
    Faculty("FAC-EEE-001", "Dr. Rezwan Khan", "EEE", "rezwan.khan@uiu.ac.bd"),
    Faculty("FAC-CSE-002", "Dr. John Doe", "CSE", "john.doe@uiu.ac.bd"),
]

DEMO_COURSES = [
    Course("EEE-2101", "Circuits I", 3.0, "EEE", "FAC-EEE-001"),
    Course("CSE-1101", "Intro to Programming", 3.0, "CSE", "FAC-CSE-002"),
]

DEMO_ENROLLMENTS = [
    Enrollment("02124100034", "EEE-2101", DEMO_TERM, "A"),
    Enrollment("02124100034", "CSE-1101", DEMO_TERM, "B+"),
    Enrollment("02124100001", "CSE-1101", DEMO_TERM, "A-"),
]

# (username, role, ref_id, password)
DEMO_USERS = [
    ("admin", Role.ADMIN, "", "admin123"),
    ("rezwan", Role.FACULTY, "FAC-EEE-001", "teacher123"),
    ("john", Role.FACULTY, "FAC-CSE-002", "teacher123"),
    ("sabbir", Role.STUDENT, "02124100034", "student123"),
    ("mim", Role.STUDENT, "02124100001", "student123"),
]


def bootstrap_if_empty(database: Database) -> bool:
    """Write the demo dataset when there are no user accounts yet.

    Records that already exist are left alone.

    Args:
        database: Open database handle.

    Returns:
        True if the demo data was written.
    """
    if database.users.count() > 0:
        return False

    for student in DEMO_STUDENTS:
        if not database.students.exists(student.id):
            database.students.insert(student)
    for member in DEMO_FACULTY:
        if not database.faculty.exists(member.id):
            database.faculty.insert(member)
    for course in DEMO_COURSES:
        if not database.courses.exists(course.code):
            database.courses.insert(course)
    for enrollment in DEMO_ENROLLMENTS:
        if not database.enrollments.exists(*database.enrollments.key_of(enrollment)):
            database.enrollments.insert(enrollment)

    registrar = Registrar(database)
    for username, role, ref_id, password in DEMO_USERS:
        registrar.add_user(username, role, password, ref_id=ref_id)

    logger.info("Initialized %s with demo data", database.data_dir)
    return True
