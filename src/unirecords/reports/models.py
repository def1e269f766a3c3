"""Data models for report results."""

from __future__ import annotations

from dataclasses import dataclass, field

from unirecords.registry.models import Course, Student


@dataclass
class TranscriptRow:
    """One course line on a transcript.

    Attributes:
        course_code: Course code.
        course_title: Course title.
        term: Term label of the enrollment.
        credit: Course credit.
        grade: Stored grade, "NA" when ungraded.
        grade_points: Point value of the grade, None when it does not count.
    """

    course_code: str
    course_title: str
    term: str
    credit: float
    grade: str
    grade_points: float | None

    @property
    def counts_toward_gpa(self) -> bool:
        return self.grade_points is not None


@dataclass
class Transcript:
    """All course lines of one student with the credit-weighted CGPA.

    Attributes:
        student_id: Requested student id.
        student: The student record, None if it does not resolve.
        rows: Lines in enrollment-file order.
        graded_credits: Sum of credits over graded lines.
        grade_points_total: Sum of points * credit over graded lines.
    """

    student_id: str
    student: Student | None
    rows: list[TranscriptRow] = field(default_factory=list)
    graded_credits: float = 0.0
    grade_points_total: float = 0.0

    @property
    def has_graded_credits(self) -> bool:
        return self.graded_credits > 0

    @property
    def cgpa(self) -> float | None:
        """Cumulative GPA, or None when no graded credits exist yet."""
        if not self.has_graded_credits:
            return None
        return self.grade_points_total / self.graded_credits


@dataclass
class RosterRow:
    """A student enrolled in a course offering."""

    student_id: str
    student_name: str
    grade: str


@dataclass
class Roster:
    """Students enrolled in one course for one term."""

    course: Course
    term: str
    rows: list[RosterRow] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        """True when no (resolvable) student is enrolled."""
        return not self.rows


@dataclass
class LeaderboardEntry:
    """One ranked student on a term leaderboard.

    Attributes:
        rank: 1-based position.
        student_id: Student id as stored on the enrollments.
        student_name: Name, or None when the student record is missing.
        gpa: Term GPA.
        credits: Graded credits counted for the term.
    """

    rank: int
    student_id: str
    student_name: str | None
    gpa: float
    credits: float


@dataclass
class Leaderboard:
    """Students ranked by term GPA, best first."""

    term: str
    entries: list[LeaderboardEntry] = field(default_factory=list)
