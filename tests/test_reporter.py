"""Tests for report rendering."""

import json
from datetime import datetime, timedelta

import pytest

from commitgate.config import NotificationConfig, ReportFormat, ReportingConfig
from commitgate.pipeline import CheckResult, CheckStatus, Overall, Report, Reporter


def make_report(*results: CheckResult) -> Report:
    start = datetime(2024, 1, 1, 12, 0, 0)
    return Report(results=list(results), started_at=start, finished_at=start + timedelta(seconds=2.5))


@pytest.fixture
def failing_report():
    return make_report(
        CheckResult(name="compile_check", status=CheckStatus.FAIL, messages=["Main.java:3: error"],
                    suggestions=["Run javac locally"], duration=1.0),
        CheckResult(name="style_check", status=CheckStatus.PASS, warnings=["long line"], duration=0.5),
        CheckResult(name="unknown_check", status=CheckStatus.SKIPPED, messages=["No check named 'unknown_check'"]),
    )


class TestReport:
    """Test report aggregation."""

    def test_overall_failure_on_fail_or_errored(self):
        assert make_report(CheckResult("a", CheckStatus.ERRORED)).overall == Overall.FAILURE
        assert make_report(CheckResult("a", CheckStatus.FAIL)).overall == Overall.FAILURE

    def test_overall_success_on_pass_and_skipped(self):
        report = make_report(CheckResult("a", CheckStatus.PASS), CheckResult("b", CheckStatus.SKIPPED))
        assert report.overall == Overall.SUCCESS

    def test_counts_and_summary(self, failing_report):
        assert failing_report.count(CheckStatus.PASS) == 1
        assert failing_report.summary() == "1 passed, 1 failed, 0 errored, 1 skipped (3 total)"
        assert failing_report.duration == 2.5

    def test_results_are_immutable(self):
        result = CheckResult("a", CheckStatus.PASS)
        with pytest.raises(Exception):
            result.status = CheckStatus.FAIL


class TestReporter:
    """Test text and JSON rendering."""

    def test_exit_codes(self, failing_report):
        assert Reporter().render(failing_report).exit_code == 1
        assert Reporter().render(make_report(CheckResult("a", CheckStatus.PASS))).exit_code == 0

    def test_detailed_lists_every_result(self, failing_report):
        reporter = Reporter(notifications=NotificationConfig(on_failure="Commit blocked"))
        text = reporter.render(failing_report).text

        for name in ("compile_check", "style_check", "unknown_check"):
            assert name in text
        assert "FAIL" in text and "SKIP" in text
        assert "Main.java:3: error" in text
        assert "long line" in text
        assert "Run javac locally" in text
        assert "1 passed, 1 failed, 0 errored, 1 skipped (3 total) in 2.50s" in text
        assert "Commit blocked" in text
        assert "Blocking checks: compile_check" in text

    def test_hide_warnings_and_suggestions(self, failing_report):
        reporter = Reporter(ReportingConfig(show_warnings=False, show_suggestions=False))
        text = reporter.render(failing_report).text

        assert "long line" not in text
        assert "Run javac locally" not in text
        assert "Main.java:3: error" in text

    def test_summary_format_hides_passing_details(self, failing_report):
        text = Reporter(ReportingConfig(format=ReportFormat.SUMMARY)).render(failing_report).text
        assert "style_check" in text
        assert "long line" not in text
        assert "Main.java:3: error" in text

    def test_hide_duration(self, failing_report):
        reporter = Reporter(notifications=NotificationConfig(show_duration=False))
        text = reporter.render(failing_report).text
        assert "(3 total)" in text
        assert "2.50s" not in text

    def test_success_banner(self):
        reporter = Reporter(notifications=NotificationConfig(on_success="All good"))
        text = reporter.render(make_report(CheckResult("a", CheckStatus.PASS))).text
        assert "All good" in text
        assert "Blocking checks" not in text

    def test_json_format(self, failing_report):
        rendered = Reporter(ReportingConfig(format=ReportFormat.JSON)).render(failing_report)
        data = json.loads(rendered.text)

        assert data["overall"] == "failure"
        assert [r["name"] for r in data["results"]] == ["compile_check", "style_check", "unknown_check"]
        assert data["results"][0]["status"] == "fail"
        assert data["summary"].startswith("1 passed")
        assert rendered.exit_code == 1

    def test_markup_in_messages_is_escaped(self):
        report = make_report(CheckResult("a", CheckStatus.FAIL, messages=["expected [red] token"]))
        assert "expected [red] token" in Reporter().render(report).text

    def test_empty_report(self):
        text = Reporter().render(make_report()).text
        assert "No checks were run." in text
