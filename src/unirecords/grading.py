"""Letter grades and their grade-point values on a 4.0 scale."""

from __future__ import annotations

UNGRADED = "NA"

GRADE_POINTS: dict[str, float] = {
    "A": 4.00,
    "A-": 3.70,
    "B+": 3.30,
    "B": 3.00,
    "B-": 2.70,
    "C+": 2.30,
    "C": 2.00,
    "C-": 1.70,
    "D": 1.00,
    "F": 0.00,
}


class InvalidGradeError(ValueError):
    """Grade is neither a known letter nor the ungraded marker."""


def normalize_grade(grade: str) -> str:
    """Canonicalize a grade string.

    Args:
        grade: User-supplied grade, any case, surrounding whitespace allowed.

    Returns:
        The upper-cased letter, or ``"NA"`` for ungraded.

    Raises:
        InvalidGradeError: If the grade is not recognised.
    """
    canonical = grade.strip().upper()
    if canonical != UNGRADED and canonical not in GRADE_POINTS:
        raise InvalidGradeError(
            f"Invalid grade '{grade}'; expected one of {', '.join(GRADE_POINTS)} or {UNGRADED}"
        )
    return canonical


def letter_to_points(grade: str) -> float | None:
    """Grade-point value of a grade.

    Returns:
        The point value, or None for the ungraded marker ``"NA"``.

    Raises:
        InvalidGradeError: If the grade is not recognised.
    """
    canonical = normalize_grade(grade)
    if canonical == UNGRADED:
        return None
    return GRADE_POINTS[canonical]


def graded_points(grade: str) -> float | None:
    """Point value for aggregation; None for ungraded or unrecognised grades."""
    try:
        return letter_to_points(grade)
    except InvalidGradeError:
        return None
