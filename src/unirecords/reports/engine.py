"""ReportEngine - read-only transcript, roster and leaderboard queries."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from unirecords.grading import graded_points
from unirecords.reports.models import (
    Leaderboard,
    LeaderboardEntry,
    Roster,
    RosterRow,
    Transcript,
    TranscriptRow,
)

if TYPE_CHECKING:
    from unirecords.registry import Database

logger = logging.getLogger(__name__)


@dataclass
class _TermTally:
    """Running credit-weighted totals for one student."""

    points: float = 0.0
    credits: float = 0.0

    @property
    def gpa(self) -> float:
        return self.points / self.credits if self.credits else 0.0


class ReportEngine:
    """Joins enrollments with courses and students to build reports.

    Holds no state between calls: every report is a fresh scan of the
    record files. Enrollments whose course or student cannot be found are
    skipped, except on the leaderboard where a missing student keeps its
    raw id.
    """

    def __init__(self, database: Database) -> None:
        """Initialize the engine.

        Args:
            database: Open database handle to read from.
        """
        self.db = database

    def transcript(self, student_id: str) -> Transcript:
        """Build a student's transcript and CGPA.

        Args:
            student_id: The student's id.

        Returns:
            Transcript with one row per enrollment whose course resolves, in
            enrollment-file order. ``cgpa`` is None when nothing is graded.
        """
        transcript = Transcript(student_id=student_id, student=self.db.students.find(student_id))

        for enrollment in self.db.enrollments.for_student(student_id):
            course = self.db.courses.find(enrollment.course_code)
            if course is None:
                logger.debug(
                    "Transcript %s: skipping unknown course %s", student_id, enrollment.course_code
                )
                continue

            points = graded_points(enrollment.grade)
            transcript.rows.append(
                TranscriptRow(
                    course_code=course.code,
                    course_title=course.title,
                    term=enrollment.term,
                    credit=course.credit,
                    grade=enrollment.grade,
                    grade_points=points,
                )
            )
            if points is not None:
                transcript.grade_points_total += points * course.credit
                transcript.graded_credits += course.credit

        return transcript

    def roster(self, course_code: str, term: str) -> Roster:
        """List the students enrolled in a course for a term.

        Args:
            course_code: The course code.
            term: The term label, matched exactly.

        Returns:
            Roster in enrollment-file order; ``is_empty`` when nobody is enrolled.

        Raises:
            RecordNotFoundError: If the course doesn't exist.
        """
        course = self.db.courses.get(course_code)
        roster = Roster(course=course, term=term)

        for enrollment in self.db.enrollments.for_offering(course_code, term):
            student = self.db.students.find(enrollment.student_id)
            if student is None:
                logger.debug(
                    "Roster %s/%s: skipping unknown student %s",
                    course_code,
                    term,
                    enrollment.student_id,
                )
                continue
            roster.rows.append(
                RosterRow(student_id=student.id, student_name=student.name, grade=enrollment.grade)
            )

        return roster

    def leaderboard(self, term: str) -> Leaderboard:
        """Rank students by GPA over their graded enrollments in one term.

        Students are ordered by GPA, highest first; equal GPAs keep the order
        in which each student's first counted enrollment appears in the file.
        Students with nothing graded in the term are not listed.

        Args:
            term: The term label, matched exactly.

        Returns:
            Leaderboard with 1-based ranks.
        """
        tallies: dict[str, _TermTally] = {}
        for enrollment in self.db.enrollments.for_term(term):
            course = self.db.courses.find(enrollment.course_code)
            if course is None:
                continue
            points = graded_points(enrollment.grade)
            if points is None:
                continue
            tally = tallies.setdefault(enrollment.student_id, _TermTally())
            tally.points += points * course.credit
            tally.credits += course.credit

        # sorted() is stable, also with reverse=True
        ranked = sorted(tallies.items(), key=lambda item: item[1].gpa, reverse=True)

        leaderboard = Leaderboard(term=term)
        for rank, (student_id, tally) in enumerate(ranked, start=1):
            student = self.db.students.find(student_id)
            leaderboard.entries.append(
                LeaderboardEntry(
                    rank=rank,
                    student_id=student_id,
                    student_name=student.name if student is not None else None,
                    gpa=tally.gpa,
                    credits=tally.credits,
                )
            )

        logger.info("Leaderboard %s: %d students ranked", term, len(leaderboard.entries))
        return leaderboard
