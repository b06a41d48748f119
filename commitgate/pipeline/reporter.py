"""
Reporter

Renders a run report as a rich table, a compact summary or JSON, and
derives the process exit code.
"""

import io
import json
from dataclasses import dataclass
from typing import List, Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..config.models import NotificationConfig, ReportFormat, ReportingConfig
from .models import CheckResult, CheckStatus, Report

EXIT_SUCCESS = 0
EXIT_FAILURE = 1

STATUS_STYLES = {
    CheckStatus.PASS: "[green]PASS[/green]",
    CheckStatus.FAIL: "[red]FAIL[/red]",
    CheckStatus.ERRORED: "[bold red]ERROR[/bold red]",
    CheckStatus.SKIPPED: "[yellow]SKIP[/yellow]",
}


@dataclass(frozen=True)
class RenderedReport:
    """Formatted report text and the exit code it implies."""
    text: str
    exit_code: int


def exit_code_for(report: Report) -> int:
    return EXIT_SUCCESS if report.passed else EXIT_FAILURE


class Reporter:
    """Formats reports according to the reporting and notification config."""

    def __init__(
        self,
        reporting: Optional[ReportingConfig] = None,
        notifications: Optional[NotificationConfig] = None,
    ):
        self.reporting = reporting or ReportingConfig()
        self.notifications = notifications or NotificationConfig()

    def render(self, report: Report) -> RenderedReport:
        """Render to plain text."""
        if self.reporting.format == ReportFormat.JSON:
            return RenderedReport(self.render_json(report), exit_code_for(report))

        buffer = io.StringIO()
        console = Console(file=buffer, width=160, no_color=True, highlight=False, emoji=False)
        self.print(report, console)
        return RenderedReport(buffer.getvalue(), exit_code_for(report))

    def render_json(self, report: Report) -> str:
        data = report.to_dict()
        data["summary"] = self.summary_line(report)
        data["banner"] = self.banner(report)
        return json.dumps(data, indent=2, ensure_ascii=False)

    def print(self, report: Report, console: Console) -> int:
        """
        Write the report to a console.

        Returns:
            The exit code for the report
        """
        if self.reporting.format == ReportFormat.JSON:
            console.print_json(self.render_json(report))
            return exit_code_for(report)

        if report.results:
            console.print(self._table(report))
        else:
            console.print("No checks were run.")

        if self.notifications.show_summary and report.failures:
            console.print()
            console.print("[bold]Blocking checks:[/bold] " + ", ".join(escape(r.name) for r in report.failures))

        console.print()
        console.print(escape(self.summary_line(report)))

        banner = self.banner(report)
        if banner:
            style = "green" if report.passed else "red"
            console.print(f"[bold {style}]{escape(banner)}[/bold {style}]")

        return exit_code_for(report)

    def summary_line(self, report: Report) -> str:
        line = report.summary()
        if self.notifications.show_duration:
            line += f" in {report.duration:.2f}s"
        return line

    def banner(self, report: Report) -> str:
        return self.notifications.on_success if report.passed else self.notifications.on_failure

    def _details(self, result: CheckResult) -> List[str]:
        """Detail lines for one result, honoring the detail flags."""
        detailed = self.reporting.format == ReportFormat.DETAILED
        if not detailed and result.status == CheckStatus.PASS:
            return []

        lines = [escape(m) for m in result.messages]
        if self.reporting.show_warnings:
            lines.extend(f"[yellow]warning:[/yellow] {escape(w)}" for w in result.warnings)
        if self.reporting.show_suggestions:
            lines.extend(f"[cyan]suggestion:[/cyan] {escape(s)}" for s in result.suggestions)
        return lines

    def _table(self, report: Report) -> Table:
        table = Table(show_header=True, header_style="bold cyan")
        table.add_column("Check", no_wrap=True)
        table.add_column("Status", no_wrap=True)
        if self.notifications.show_duration:
            table.add_column("Time", justify="right", no_wrap=True)
        table.add_column("Details", overflow="fold")

        for result in report.results:
            row = [escape(result.name), STATUS_STYLES[result.status]]
            if self.notifications.show_duration:
                row.append(f"{result.duration:.2f}s")
            row.append("\n".join(self._details(result)))
            table.add_row(*row)

        return table
