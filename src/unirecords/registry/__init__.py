"""Registry - Entity records, repositories and the database handle."""

from unirecords.registry.database import Database
from unirecords.registry.exceptions import (
    DuplicateKeyError,
    InvalidRecordError,
    RecordNotFoundError,
    RegistryError,
)
from unirecords.registry.models import (
    Course,
    Enrollment,
    Faculty,
    Role,
    Student,
    User,
)
from unirecords.registry.registrar import Registrar
from unirecords.registry.repositories import (
    CourseRepository,
    EnrollmentRepository,
    FacultyRepository,
    Repository,
    StudentRepository,
    UserRepository,
)

__all__ = [
    "Course",
    "CourseRepository",
    "Database",
    "DuplicateKeyError",
    "Enrollment",
    "EnrollmentRepository",
    "Faculty",
    "FacultyRepository",
    "InvalidRecordError",
    "RecordNotFoundError",
    "Registrar",
    "RegistryError",
    "Repository",
    "Role",
    "Student",
    "StudentRepository",
    "User",
    "UserRepository",
]
