"""
Command-line interface for the pre-commit pipeline.

Provides commands for running checks, validating and listing the
configuration, and writing a starter configuration.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Tuple

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Confirm
from rich.table import Table

from . import __version__
from .config import ConfigLoader, ConfigError, PipelineConfig, ReportFormat
from .config.defaults import get_default_config
from .pipeline import LocalFileSystem, Orchestrator, Reporter, SubprocessRunner
from .pipeline.registry import CheckRegistry

console = Console()
err_console = Console(stderr=True)

EXIT_CONFIG_ERROR = 2


def _configure_logging(verbose: bool) -> None:
    """Send package logs to stderr through rich."""
    logger = logging.getLogger("commitgate")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.addHandler(RichHandler(console=err_console, show_path=False, markup=False))
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    logger.propagate = False


def _load_config(config: str) -> PipelineConfig:
    """Load configuration or exit with the configuration error code."""
    try:
        return ConfigLoader(config).load().config
    except ConfigError as e:
        err_console.print(f"[red]✗ Configuration error: {escape(str(e))}[/red]")
        sys.exit(EXIT_CONFIG_ERROR)


def _report_unresolved(config: PipelineConfig, strict: bool) -> None:
    """Warn about hooks without an enabled check; fatal under --strict."""
    unresolved = config.unresolved_hooks()
    if not unresolved:
        return

    registry = CheckRegistry.from_config(config)
    color = "red" if strict else "yellow"
    for name in unresolved:
        err_console.print(f"[{color}]! {escape(registry.explain_unresolved(name))}[/{color}]")

    if strict:
        err_console.print("[red]Unresolved hooks are fatal in strict mode.[/red]")
        sys.exit(EXIT_CONFIG_ERROR)


# ============================================================
# Main CLI Group
# ============================================================

@click.group()
@click.version_option(version=__version__, prog_name="commitgate")
@click.pass_context
def cli(ctx):
    """
    commitgate pre-commit pipeline

    Runs the configured compile, style, security, test, coverage and
    asset checks and decides whether a commit may proceed.
    """
    ctx.ensure_object(dict)


# ============================================================
# RUN Command
# ============================================================

@cli.command()
@click.argument("files", nargs=-1, type=click.Path())
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True),
    default=".",
    show_default=True,
    help="Configuration file, or directory containing commitgate.yaml/.toml",
)
@click.option(
    "--root",
    "-r",
    type=click.Path(exists=True, file_okay=False),
    default=".",
    show_default=True,
    help="Source tree the checks run against",
)
@click.option("--fail-fast/--no-fail-fast", default=None, help="Override reporting.fail_fast")
@click.option("--concurrent/--sequential", default=None, help="Override reporting.concurrent")
@click.option("--dry-run", "-n", is_flag=True, help="Resolve and list hooks without running them")
@click.option(
    "--format",
    "-f",
    "report_format",
    type=click.Choice([f.value for f in ReportFormat]),
    default=None,
    help="Override reporting.format",
)
@click.option("--coverage", type=float, default=None, help="Measured coverage percentage for coverage checks")
@click.option("--strict", is_flag=True, help="Treat unknown or disabled hooks as a configuration error")
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
def run(
    files: Tuple[str, ...],
    config: str,
    root: str,
    fail_fast: Optional[bool],
    concurrent: Optional[bool],
    dry_run: bool,
    report_format: Optional[str],
    coverage: Optional[float],
    strict: bool,
    verbose: bool,
):
    """Run the pre-commit hooks against FILES (default: every file under --root)."""
    _configure_logging(verbose)
    pipeline = _load_config(config)

    reporting_updates = {}
    if fail_fast is not None:
        reporting_updates["fail_fast"] = fail_fast
    if concurrent is not None:
        reporting_updates["concurrent"] = concurrent
    if report_format is not None:
        reporting_updates["format"] = ReportFormat(report_format)
    reporting = pipeline.reporting.model_copy(update=reporting_updates)

    _report_unresolved(pipeline, strict)

    filesystem = LocalFileSystem(root)
    orchestrator = Orchestrator.from_config(
        pipeline,
        runner=SubprocessRunner(cwd=root),
        filesystem=filesystem,
        supplied_coverage=coverage,
    )
    candidates = list(files) if files else sorted(filesystem.list_files("."))

    if dry_run:
        _print_plan(pipeline, orchestrator, candidates)
        return

    report = orchestrator.run(
        pipeline.hook_list,
        candidates,
        fail_fast=reporting.fail_fast,
        concurrent=reporting.concurrent,
    )

    reporter = Reporter(reporting, pipeline.notifications)
    if reporting.format == ReportFormat.JSON:
        rendered = reporter.render(report)
        click.echo(rendered.text)
        sys.exit(rendered.exit_code)

    sys.exit(reporter.print(report, console))


def _print_plan(pipeline: PipelineConfig, orchestrator: Orchestrator, candidates) -> None:
    """Show what a run would do."""
    console.print(f"\n[bold blue]{escape(pipeline.agent.name)}[/bold blue] dry run\n")

    general = pipeline.instructions.get("general")
    if general:
        console.print(Panel.fit(escape(general.strip()), title="Instructions"))

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("#", justify="right")
    table.add_column("Hook")
    table.add_column("Kind")
    table.add_column("Files", justify="right")
    table.add_column("Plan")

    for index, name, definition in orchestrator.plan(pipeline.hook_list):
        if definition is None:
            reason = orchestrator.registry.explain_unresolved(name)
            table.add_row(str(index + 1), escape(name), "-", "-", f"[yellow]skip: {escape(reason)}[/yellow]")
            continue
        selected = orchestrator.files_for(definition, candidates)
        table.add_row(
            str(index + 1),
            escape(name),
            definition.kind.value,
            str(len(selected)),
            "[green]run[/green]",
        )

    console.print(table)
    console.print(f"\n{len(candidates)} candidate file(s); nothing was executed.")


# ============================================================
# VALIDATE Command
# ============================================================

@cli.command()
@click.option("--config", "-c", type=click.Path(exists=True), default=".", help="Configuration to validate")
@click.option("--strict", is_flag=True, help="Fail when hooks reference unknown or disabled checks")
def validate(config: str, strict: bool):
    """Validate the configuration file."""
    console.print(f"\n[bold blue]Validating configuration: {escape(config)}[/bold blue]\n")

    pipeline = _load_config(config)
    console.print("[green]✓ Configuration is valid![/green]\n")

    table = Table(title="Configuration Summary")
    table.add_column("Component", style="cyan")
    table.add_column("Details", style="white")
    table.add_row("Pipeline", f"{pipeline.agent.name} v{pipeline.agent.version}")
    table.add_row("Hooks", str(len(pipeline.hook_list)))
    table.add_row("Checks", f"{len(pipeline.checks)} defined, {sum(c.enabled for c in pipeline.checks.values())} enabled")
    table.add_row("Exclusions", f"{len(pipeline.exclusions.ignore_paths)} path, {len(pipeline.exclusions.ignore_files)} file rule(s)")
    table.add_row("Fail fast", "yes" if pipeline.reporting.fail_fast else "no")
    console.print(table)

    _report_unresolved(pipeline, strict)


# ============================================================
# LIST Command
# ============================================================

@cli.command("list")
@click.argument("resource", type=click.Choice(["hooks", "checks"]), default="hooks")
@click.option("--config", "-c", type=click.Path(exists=True), default=".", help="Configuration to read")
def list_resources(resource: str, config: str):
    """List hooks in execution order, or all check definitions."""
    pipeline = _load_config(config)

    if resource == "hooks":
        registry = CheckRegistry.from_config(pipeline)
        table = Table(title="Pre-commit Hooks")
        table.add_column("#", justify="right", style="dim")
        table.add_column("Hook", style="cyan")
        table.add_column("Kind")
        table.add_column("Status")
        for i, name in enumerate(pipeline.hook_list, start=1):
            definition = registry.lookup(name)
            if definition is None:
                table.add_row(str(i), escape(name), "-", "[red]undefined[/red]")
            elif not definition.enabled:
                table.add_row(str(i), escape(name), definition.kind.value, "[yellow]disabled[/yellow]")
            else:
                table.add_row(str(i), escape(name), definition.kind.value, "[green]enabled[/green]")
        console.print(table)
        return

    table = Table(title="Checks")
    table.add_column("Name", style="cyan")
    table.add_column("Kind")
    table.add_column("Enabled")
    table.add_column("Description")
    for definition in pipeline.checks.values():
        table.add_row(
            escape(definition.name),
            definition.kind.value,
            "✓" if definition.enabled else "○",
            escape(definition.description or ""),
        )
    console.print(table)


# ============================================================
# INIT Command
# ============================================================

@cli.command()
@click.option(
    "--output",
    "-o",
    type=click.Path(),
    default="commitgate.yaml",
    show_default=True,
    help="File to write",
)
@click.option("--force", is_flag=True, help="Overwrite an existing file without asking")
def init(output: str, force: bool):
    """Write a starter configuration."""
    output_path = Path(output)

    if output_path.exists() and not force:
        if not Confirm.ask(f"[yellow]{escape(output)} exists. Overwrite?[/yellow]"):
            console.print("[red]Aborted.[/red]")
            return

    written = ConfigLoader.from_dict(get_default_config()).save(output_path)

    console.print(Panel.fit(
        f"[green]Configuration written to[/green] [cyan]{escape(str(written))}[/cyan]\n\n"
        f"[bold]Next steps:[/bold]\n"
        f"1. Adjust the commands in [cyan]checks[/cyan] for your toolchain\n"
        f"2. Run: [yellow]commitgate run --config {escape(str(written))} --dry-run[/yellow]",
        title="Initialization Complete",
    ))


# ============================================================
# Entry Point
# ============================================================

if __name__ == "__main__":
    cli()
