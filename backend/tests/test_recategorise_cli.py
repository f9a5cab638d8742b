from __future__ import annotations
from collections import Counter

import pytest
import typer
from typer.testing import CliRunner

import recategorise_jobs
from jobboard.schemas.classification import ValidationIssue
from jobboard.services.recategorise import Proposal, RecategoriseReport

runner = CliRunner()


@pytest.mark.parametrize("value,expected", [("all", 1000), ("ALL", 1000), ("0", 1000), ("25", 25)])
def test_parse_limit(value, expected):
    assert recategorise_jobs.parse_limit(value) == expected


@pytest.mark.parametrize("value", ["many", "-3"])
def test_parse_limit_rejects_garbage(value):
    with pytest.raises(typer.BadParameter):
        recategorise_jobs.parse_limit(value)


class FakeSession:
    def close(self):
        pass


def fake_report(**kwargs):
    report = RecategoriseReport(
        commit=kwargs.get("commit", False),
        limit=kwargs.get("limit", 10),
        stop_on_error=kwargs.get("stop_on_error", False),
        total=2,
        classified=1,
        with_warnings=1,
        failed=1,
        by_category=Counter({"computer-vision": 1}),
        by_confidence=Counter({"high": 1}),
        issues=[ValidationIssue("2", "Research Fellow", "Invalid category slug", "wizardry", "error")],
        proposals=[Proposal(1, "Vision Engineer", "ai", "computer-vision", "high", "Image models at the core.")],
    )
    report.stopped_early = kwargs.get("stop_on_error", False)
    return report


@pytest.fixture
def wired(monkeypatch):
    seen = {}

    def fake_run(db, classifier, **kwargs):
        seen.update(kwargs)
        return fake_report(**kwargs)

    monkeypatch.setattr(recategorise_jobs, "setup_logging", lambda: None)
    monkeypatch.setattr(recategorise_jobs, "init_db", lambda: None)
    monkeypatch.setattr(recategorise_jobs, "SessionLocal", FakeSession)
    monkeypatch.setattr(recategorise_jobs, "load_taxonomy", lambda db: None)
    monkeypatch.setattr(recategorise_jobs, "CategoryClassifier", lambda taxonomy: object())
    monkeypatch.setattr(recategorise_jobs, "run_recategorisation", fake_run)
    return seen


def test_cli_dry_run_prints_report(wired):
    result = runner.invoke(recategorise_jobs.app, ["all"])

    assert result.exit_code == 0
    assert wired == {"limit": 1000, "commit": False, "stop_on_error": False}
    assert "DRY RUN" in result.output
    assert "computer-vision" in result.output
    assert "#1 'Vision Engineer': ai -> computer-vision [high]" in result.output
    assert "[ERROR] #2 'Research Fellow': Invalid category slug (wizardry)" in result.output
    assert "--commit" in result.output


def test_cli_commit_with_stop_on_error_exits_nonzero_when_halted(wired):
    result = runner.invoke(recategorise_jobs.app, ["5", "--commit", "--stop-on-error"])

    assert wired == {"limit": 5, "commit": True, "stop_on_error": True}
    assert "COMMIT" in result.output
    assert "Stopped early" in result.output
    assert result.exit_code == 1
