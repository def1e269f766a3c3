"""Reports - Transcripts, course rosters and term GPA leaderboards."""

from unirecords.reports.engine import ReportEngine
from unirecords.reports.models import (
    Leaderboard,
    LeaderboardEntry,
    Roster,
    RosterRow,
    Transcript,
    TranscriptRow,
)

__all__ = [
    "Leaderboard",
    "LeaderboardEntry",
    "ReportEngine",
    "Roster",
    "RosterRow",
    "Transcript",
    "TranscriptRow",
]
