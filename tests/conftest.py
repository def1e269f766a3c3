"""Shared pytest fixtures and configuration."""

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest

from unirecords.registry import Database, Registrar


# Register custom markers
def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for test categorization."""
    config.addinivalue_line("markers", "unit: fast tests with no external dependencies")
    config.addinivalue_line("markers", "integration: component interaction tests")


# Shared fixtures


@pytest.fixture(autouse=True)
def reset_unirecords_logger() -> Iterator[None]:
    """Drop handlers installed by log setup so they do not leak between tests."""
    yield
    logger = logging.getLogger("unirecords")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    """Empty directory for record files."""
    return tmp_path / "data"


@pytest.fixture
def database(data_dir: Path) -> Iterator[Database]:
    """Database over an empty data directory, closed after the test."""
    db = Database(data_dir)
    yield db
    db.close()


@pytest.fixture
def registrar(database: Database) -> Registrar:
    return Registrar(database)
