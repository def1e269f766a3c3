"""unirecords - Academic records in fixed-width binary files, with GPA reports."""

__version__ = "0.1.0"
