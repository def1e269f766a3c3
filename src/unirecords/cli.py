"""CLI entry point for unirecords.

Each command performs one registry or report operation against the record
files of a data directory and prints the result.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, NoReturn

import click

from unirecords.config import ConfigError, RegistryConfig, find_config, load_config
from unirecords.grading import InvalidGradeError
from unirecords.logging import configure_logging
from unirecords.record_store import RecordStoreError
from unirecords.registry import (
    Course,
    Database,
    DuplicateKeyError,
    Faculty,
    InvalidRecordError,
    RecordNotFoundError,
    Registrar,
    Student,
)
from unirecords.reports import ReportEngine
from unirecords.seed import bootstrap_if_empty


def format_student(s: Student) -> str:
    return (
        f"ID: {s.id} | Name: {s.name} | Dept: {s.department} | "
        f"Batch: {s.batch} | Email: {s.email}"
    )


def format_faculty(f: Faculty) -> str:
    return f"ID: {f.id} | Name: {f.name} | Dept: {f.department} | Email: {f.email}"


def format_course(c: Course) -> str:
    return (
        f"Code: {c.code} | Title: {c.title} | Credit: {c.credit:.1f} | "
        f"Dept: {c.department} | Instructor: {c.instructor_id}"
    )


def fail(message: str) -> NoReturn:
    """Print an error and exit with status 1."""
    click.echo(message, err=True)
    sys.exit(1)


class RegistryGroup(click.Group):
    """Command group that reports record file failures as an error message."""

    def invoke(self, ctx: click.Context) -> Any:
        try:
            return super().invoke(ctx)
        except RecordStoreError as e:
            fail(f"Storage error: {e}")


@click.group(cls=RegistryGroup)
@click.version_option(package_name="unirecords")
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to unirecords.yaml (auto-detected if not specified)",
)
@click.option(
    "--data-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory holding the record files (overrides the config)",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output")
@click.pass_context
def main(
    ctx: click.Context, config_path: Path | None, data_dir: Path | None, verbose: bool
) -> None:
    """unirecords - student, course and grade records."""
    try:
        if config_path is None:
            config_path = find_config()
        config = load_config(config_path) if config_path is not None else RegistryConfig()
    except ConfigError as e:
        fail(f"Configuration error: {e}")

    data_path = data_dir if data_dir is not None else config.get_data_path()
    configure_logging(config.logging, config.get_log_path(), data_path, verbose=verbose)

    database = Database(data_path, config.files)
    ctx.obj = database
    ctx.call_on_close(database.close)


@main.command()
@click.pass_obj
def init(db: Database) -> None:
    """Write demo data if no user accounts exist yet."""
    if bootstrap_if_empty(db):
        click.echo("Initialized with demo data.")
        click.echo("Default logins -> admin/admin123, rezwan/teacher123, sabbir/student123")
    else:
        click.echo("Data already present; nothing to do.")


# --- Students ---


@main.group()
def students() -> None:
    """Manage students."""


@students.command("list")
@click.pass_obj
def list_students(db: Database) -> None:
    """List all students."""
    records = list(db.students.list_all())
    if not records:
        click.echo("No students yet.")
        return
    for student in records:
        click.echo(format_student(student))


@students.command("show")
@click.argument("student_id")
@click.pass_obj
def show_student(db: Database, student_id: str) -> None:
    """Show one student's profile."""
    try:
        student = db.students.get(student_id)
    except RecordNotFoundError as e:
        fail(str(e))
    click.echo(format_student(student))


@students.command("add")
@click.argument("student_id")
@click.option("--name", required=True)
@click.option("--department", required=True, help="e.g. EEE, CSE")
@click.option("--batch", type=int, required=True, help="Cohort code, e.g. 241")
@click.option("--email", required=True)
@click.pass_obj
def add_student(
    db: Database, student_id: str, name: str, department: str, batch: int, email: str
) -> None:
    """Add a student."""
    try:
        Registrar(db).add_student(student_id, name, department, batch, email)
        click.echo("Student added.")
    except DuplicateKeyError as e:
        fail(str(e))


@students.command("edit")
@click.argument("student_id")
@click.option("--name", default=None)
@click.option("--department", default=None)
@click.option("--batch", type=int, default=None)
@click.option("--email", default=None)
@click.pass_obj
def edit_student(
    db: Database,
    student_id: str,
    name: str | None,
    department: str | None,
    batch: int | None,
    email: str | None,
) -> None:
    """Edit a student. Omitted options keep their current value."""
    try:
        student = Registrar(db).edit_student(
            student_id, name=name, department=department, batch=batch, email=email
        )
        click.echo(format_student(student))
        click.echo("Updated.")
    except RecordNotFoundError as e:
        fail(str(e))


# --- Faculty ---


@main.group()
def faculty() -> None:
    """Manage faculty members."""


@faculty.command("list")
@click.pass_obj
def list_faculty(db: Database) -> None:
    """List all faculty members."""
    records = list(db.faculty.list_all())
    if not records:
        click.echo("No faculty yet.")
        return
    for member in records:
        click.echo(format_faculty(member))


@faculty.command("add")
@click.argument("faculty_id")
@click.option("--name", required=True)
@click.option("--department", required=True)
@click.option("--email", required=True)
@click.pass_obj
def add_faculty(db: Database, faculty_id: str, name: str, department: str, email: str) -> None:
    """Add a faculty member."""
    try:
        Registrar(db).add_faculty(faculty_id, name, department, email)
        click.echo("Faculty added.")
    except DuplicateKeyError as e:
        fail(str(e))


# --- Courses ---


@main.group()
def courses() -> None:
    """Manage courses."""


@courses.command("list")
@click.pass_obj
def list_courses(db: Database) -> None:
    """List all courses."""
    records = list(db.courses.list_all())
    if not records:
        click.echo("No courses yet.")
        return
    for course in records:
        click.echo(format_course(course))


@courses.command("add")
@click.argument("code")
@click.option("--title", required=True)
@click.option("--credit", type=float, required=True, help="e.g. 3 or 1.5")
@click.option("--department", required=True)
@click.option("--instructor", "instructor_id", default="", help="Faculty ID (optional)")
@click.pass_obj
def add_course(
    db: Database, code: str, title: str, credit: float, department: str, instructor_id: str
) -> None:
    """Add a course."""
    try:
        Registrar(db).add_course(code, title, credit, department, instructor_id)
        click.echo("Course added.")
    except (DuplicateKeyError, InvalidRecordError) as e:
        fail(str(e))


@courses.command("assign")
@click.argument("code")
@click.argument("faculty_id")
@click.pass_obj
def assign_instructor(db: Database, code: str, faculty_id: str) -> None:
    """Assign a faculty member as the instructor of a course."""
    try:
        Registrar(db).assign_instructor(code, faculty_id)
        click.echo("Instructor assigned.")
    except RecordNotFoundError as e:
        fail(str(e))


@courses.command("taught-by")
@click.argument("faculty_id")
@click.pass_obj
def taught_by(db: Database, faculty_id: str) -> None:
    """List the courses a faculty member teaches."""
    assigned = Registrar(db).courses_for_instructor(faculty_id)
    if not assigned:
        click.echo("No assigned courses.")
        return
    for course in assigned:
        click.echo(format_course(course))


# --- Enrollment and grades ---


@main.command()
@click.argument("student_id")
@click.argument("course_code")
@click.argument("term")
@click.pass_obj
def enroll(db: Database, student_id: str, course_code: str, term: str) -> None:
    """Enroll a student in a course for a term (e.g. Fall-2025)."""
    try:
        Registrar(db).enroll(student_id, course_code, term)
        click.echo("Enrollment added.")
    except DuplicateKeyError:
        fail("Already enrolled.")
    except RecordNotFoundError as e:
        fail(str(e))


@main.command()
@click.argument("student_id")
@click.argument("course_code")
@click.argument("term")
@click.argument("grade")
@click.option(
    "--as-faculty",
    "faculty_id",
    default=None,
    help="Only allow the change if this faculty member teaches the course",
)
@click.pass_obj
def grade(
    db: Database,
    student_id: str,
    course_code: str,
    term: str,
    grade: str,
    faculty_id: str | None,
) -> None:
    """Set or update a grade (A, A-, B+, ..., F, or NA)."""
    registrar = Registrar(db)
    if faculty_id is not None and not registrar.is_instructor_of(faculty_id, course_code):
        fail("You are not the instructor of this course.")
    try:
        registrar.set_grade(student_id, course_code, term, grade)
        click.echo("Grade updated.")
    except InvalidGradeError as e:
        fail(str(e))
    except RecordNotFoundError as e:
        fail(str(e))


# --- Reports ---


@main.command()
@click.argument("student_id")
@click.pass_obj
def transcript(db: Database, student_id: str) -> None:
    """Show a student's transcript and CGPA."""
    report = ReportEngine(db).transcript(student_id)
    click.echo(f"-- Transcript for {student_id} --")
    for row in report.rows:
        line = (
            f"{row.course_code:<8} | {row.term:<10} | {row.credit:4.1f} cr | "
            f"Grade: {row.grade:<2}"
        )
        if row.counts_toward_gpa:
            line += f" | GP: {row.grade_points:.2f}"
        click.echo(line)
    if report.cgpa is not None:
        click.echo(f"CGPA: {report.cgpa:.2f} ({report.graded_credits:.1f} total credits)")
    else:
        click.echo("No graded credits yet.")


@main.command()
@click.argument("course_code")
@click.argument("term")
@click.option(
    "--as-faculty",
    "faculty_id",
    default=None,
    help="Only show the roster if this faculty member teaches the course",
)
@click.pass_obj
def roster(db: Database, course_code: str, term: str, faculty_id: str | None) -> None:
    """Show the students enrolled in a course for a term."""
    if faculty_id is not None and not Registrar(db).is_instructor_of(faculty_id, course_code):
        fail("You are not the instructor of this course.")
    try:
        report = ReportEngine(db).roster(course_code, term)
    except RecordNotFoundError as e:
        fail(str(e))
    click.echo(f"-- Roster {report.course.code} ({term}) --")
    if report.is_empty:
        click.echo("No students enrolled.")
        return
    for row in report.rows:
        click.echo(f"{row.student_id:<12}  {row.student_name:<24}  Grade: {row.grade:<2}")


@main.command()
@click.argument("term")
@click.pass_obj
def leaderboard(db: Database, term: str) -> None:
    """Rank students by GPA for one term."""
    report = ReportEngine(db).leaderboard(term)
    click.echo(f"-- Term GPA Leaderboard: {term} --")
    if not report.entries:
        click.echo("No graded enrollments for this term.")
        return
    for entry in report.entries:
        name = f" {entry.student_name:<24}" if entry.student_name is not None else ""
        click.echo(
            f"{entry.rank:2d}) {entry.student_id:<12}{name} "
            f"GPA: {entry.gpa:.2f} ({entry.credits:.1f} cr)"
        )


# --- Accounts ---


@main.command()
@click.argument("username")
@click.password_option(confirmation_prompt=False)
@click.pass_obj
def login(db: Database, username: str, password: str) -> None:
    """Check credentials and show the account's role."""
    user = Registrar(db).authenticate(username, password)
    if user is None:
        fail("Invalid credentials.")
    click.echo(f"Logged in as {user.username} ({user.role.name.lower()})")
    if user.ref_id:
        click.echo(f"Linked record: {user.ref_id}")


if __name__ == "__main__":
    main()
