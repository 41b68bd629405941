"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import sys
from datetime import date, datetime
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from studyplan.config import get_settings  # noqa: E402
from studyplan.delivery.state_store import MemoryStore  # noqa: E402
from studyplan.models import Flashcard, Subject  # noqa: E402


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests (component round trips)")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        # Mark based on test file location
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def now():
    """A fixed reference moment."""
    return datetime(2026, 3, 2, 10, 0)


@pytest.fixture
def start_date():
    return date(2026, 3, 2)


@pytest.fixture
def subjects():
    """Two subjects with exams ten days out."""
    return [
        Subject(id="A", name="Algebra", exam_date=date(2026, 3, 12), difficulty=5),
        Subject(id="B", name="Biology", exam_date=date(2026, 3, 12), difficulty=1),
    ]


@pytest.fixture
def flashcards():
    return [
        Flashcard(id="c1", subject_id="A", question="What is a group?", answer="A set with an operation"),
        Flashcard(id="c2", subject_id="A", question="What is a ring?", answer="A group with a second operation"),
        Flashcard(id="c3", subject_id="B", question="What is a cell?", answer="The unit of life"),
    ]


@pytest.fixture
def memory_store():
    return MemoryStore()


@pytest.fixture
def isolated_settings(tmp_path, monkeypatch):
    """Point settings at a temporary data directory."""
    monkeypatch.setenv("STUDYPLAN_DATA_DIR", str(tmp_path / "data"))
    get_settings.cache_clear()
    yield get_settings()
    get_settings.cache_clear()
