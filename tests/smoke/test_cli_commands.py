"""
Smoke Tests for CLI Commands.

These tests verify that CLI commands run without errors and produce output.
They don't validate correctness deeply - just that commands work.

Usage:
    pytest tests/smoke/test_cli_commands.py -v
    pytest tests/smoke/test_cli_commands.py -v -m smoke
"""

import json
import subprocess
import sys
from pathlib import Path

import pytest
from typer.testing import CliRunner

from studyplan.delivery.cli import app

# Mark all tests in this module as smoke tests
pytestmark = pytest.mark.smoke

# Project root
PROJECT_ROOT = Path(__file__).parent.parent.parent

runner = CliRunner()


@pytest.fixture
def subjects_file(tmp_path):
    path = tmp_path / "subjects.json"
    path.write_text(
        json.dumps(
            [
                {"id": "A", "name": "Algebra", "exam_date": "2026-03-12", "difficulty": 5},
                {"id": "B", "name": "Biology", "exam_date": "2026-03-12", "difficulty": 1},
            ]
        ),
        encoding="utf-8",
    )
    return path


@pytest.fixture
def cards_file(tmp_path):
    path = tmp_path / "cards.json"
    path.write_text(
        json.dumps(
            [
                {"id": "c1", "subject_id": "A", "question": "What is a group?", "answer": "..."},
                {"id": "c2", "subject_id": "B", "question": "What is a cell?", "answer": "..."},
            ]
        ),
        encoding="utf-8",
    )
    return path


def test_module_help():
    """Module entry point help should display without errors."""
    result = subprocess.run(
        [sys.executable, "-m", "studyplan.delivery", "--help"],
        cwd=PROJECT_ROOT,
        capture_output=True,
        text=True,
        timeout=30,
    )

    assert result.returncode == 0, f"Help failed: {result.stderr}"
    assert "plan" in result.stdout


class TestPlan:
    def test_plan_stores_schedule(self, isolated_settings, subjects_file):
        result = runner.invoke(
            app,
            ["plan", str(subjects_file), "--start", "2026-03-02", "--end", "2026-03-12", "--hours", "6"],
        )

        assert result.exit_code == 0, result.output
        assert "Study Schedule" in result.output
        stored = json.loads((isolated_settings.data_dir / "schedule.json").read_text())
        assert sum(entry["duration"] for entry in stored) == 60

    def test_invalid_window(self, isolated_settings, subjects_file):
        result = runner.invoke(
            app, ["plan", str(subjects_file), "--start", "2026-03-12", "--end", "2026-03-02"]
        )

        assert result.exit_code == 1
        assert "must be after" in result.output

    def test_invalid_subjects_file(self, isolated_settings, tmp_path):
        bad = tmp_path / "bad.json"
        bad.write_text(json.dumps([{"id": "A", "name": "A", "exam_date": "2026-03-12", "difficulty": 9}]))

        result = runner.invoke(app, ["plan", str(bad), "--end", "2026-03-12"])

        assert result.exit_code == 1

    def test_malformed_json_subjects_file(self, isolated_settings, tmp_path):
        bad = tmp_path / "subjects.json"
        bad.write_text("not json at all", encoding="utf-8")

        result = runner.invoke(app, ["plan", str(bad), "--end", "2026-03-12"])

        assert result.exit_code == 1
        assert "Invalid subjects file" in result.output


class TestReview:
    def test_review_and_due(self, isolated_settings, cards_file):
        result = runner.invoke(app, ["review", "c1", "--correct"])
        assert result.exit_code == 0, result.output
        assert "interval 6d" in result.output

        result = runner.invoke(app, ["due", str(cards_file)])
        assert result.exit_code == 0, result.output
        assert "c2" in result.output
        assert "Due Cards (1/2)" in result.output

    def test_due_similar_with_uneven_embeddings(self, isolated_settings, tmp_path):
        cards = tmp_path / "cards.json"
        cards.write_text(
            json.dumps(
                [
                    {"id": "c1", "subject_id": "A", "question": "Q1", "answer": "A1", "embedding": [1, 0]},
                    {"id": "c2", "subject_id": "A", "question": "Q2", "answer": "A2", "embedding": [1]},
                ]
            ),
            encoding="utf-8",
        )

        result = runner.invoke(app, ["due", str(cards), "--similar"])

        assert result.exit_code == 0, result.output
        assert "Due Cards (2/2)" in result.output

    def test_due_rejects_malformed_json(self, isolated_settings, tmp_path):
        bad = tmp_path / "cards.json"
        bad.write_text("[{not json", encoding="utf-8")

        result = runner.invoke(app, ["due", str(bad)])

        assert result.exit_code == 1
        assert "Invalid cards file" in result.output


class TestFeedback:
    def test_complete_and_recommend(self, isolated_settings, subjects_file):
        runner.invoke(
            app,
            ["plan", str(subjects_file), "--start", "2026-03-02", "--end", "2026-03-12", "--hours", "6"],
        )
        stored = json.loads((isolated_settings.data_dir / "schedule.json").read_text())
        entry_id = stored[0]["id"]

        result = runner.invoke(app, ["complete", entry_id, "-p", "90", "-f", "10"])
        assert result.exit_code == 0, result.output

        result = runner.invoke(app, ["complete", entry_id, "-p", "90", "-f", "10"])
        assert "already completed" in result.output

        result = runner.invoke(app, ["recommend", stored[0]["subject_id"], "-d", "3"])
        assert result.exit_code == 0, result.output
        assert "distributed" in result.output

    def test_log_rejects_out_of_range_metric(self, isolated_settings):
        result = runner.invoke(app, ["log", "A", "-h", "1", "-p", "150", "-f", "10"])

        assert result.exit_code == 1
