"""CLI interface using Typer."""

import logging
from collections import defaultdict
from enum import Enum
from pathlib import Path

import typer
from rich.console import Console

from retention_analyzer.analyzer import RetentionAnalyzer
from retention_analyzer.config import Config, find_project_config
from retention_analyzer.modules import ModuleResolver, descriptor_module_path
from retention_analyzer.reporters.json_formats import JSONReporter
from retention_analyzer.reporters.terminal import TerminalReporter
from retention_analyzer.scanner.file_discovery import FileDiscovery

# Set up logging
logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = typer.Typer(
    name="retention-analyzer",
    help="Decide per module whether a legacy dependency can be dropped",
    add_completion=False,
)

console = Console()


class OutputFormat(str, Enum):
    """Output format options."""
    terminal = "terminal"
    json = "json"


def _load_config(
    project_path: Path,
    config_file: Path | None,
    main_roots: str | None,
    test_roots: str | None,
) -> Config:
    if config_file is None:
        config_file = find_project_config(project_path)
    elif not config_file.exists():
        console.print(f"[red]Error: Config file not found: {config_file}[/red]")
        raise typer.Exit(1)

    config = Config(config_file)
    config.override_source_roots(main_roots, test_roots)
    return config


@app.command()
def analyze(
    project_path: Path = typer.Option(
        ".",
        "--project",
        "-p",
        help="Path to project root directory",
    ),
    config_file: Path = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to TOML config (defaults to .retention.toml in the project)",
    ),
    main_roots: str = typer.Option(
        None,
        "--main-roots",
        help="Comma-separated main source roots (e.g. 'src/main/java,src/main/kotlin')",
    ),
    test_roots: str = typer.Option(
        None,
        "--test-roots",
        help="Comma-separated test source roots (e.g. 'src/test/java')",
    ),
    apply: bool = typer.Option(
        False,
        "--apply",
        help="Write updated descriptors back to disk",
    ),
    output: Path = typer.Option(
        None,
        "--output",
        "-o",
        help="Path to output file (JSON format only)",
    ),
    output_format: OutputFormat = typer.Option(
        OutputFormat.terminal,
        "--format",
        "-f",
        help="Output format (terminal, json)",
    ),
    check_only: bool = typer.Option(
        False,
        "--check-only",
        help="Exit with code 1 if any module must keep the dependency (CI mode)",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show blocking usages for each retaining module",
    ),
    no_color: bool = typer.Option(
        False,
        "--no-color",
        help="Disable colored output",
    ),
) -> None:
    """Analyze which modules can drop the legacy dependency."""

    project_path = project_path.resolve()

    if not project_path.exists():
        console.print(f"[red]Error: Project path not found: {project_path}[/red]")
        raise typer.Exit(1)

    config = _load_config(project_path, config_file, main_roots, test_roots)

    if output_format == OutputFormat.terminal:
        console.print(f"\n[bold cyan]🔍 Analyzing modules in {project_path}[/bold cyan]")
        if not apply:
            console.print("[yellow]⚠️  Dry run (descriptors are not modified, use --apply)[/yellow]")

    try:
        analyzer = RetentionAnalyzer(project_path, config=config, apply=apply)
        report = analyzer.analyze()
    except Exception as e:
        if verbose:
            logger.exception("Analysis failed")
        console.print(f"\n[red]Error during analysis: {str(e)}[/red]")
        raise typer.Exit(1)

    if not report.decisions:
        if output_format == OutputFormat.terminal:
            console.print("\n[yellow]ℹ️  No module descriptors found[/yellow]")
        raise typer.Exit(0)

    if output_format == OutputFormat.terminal:
        terminal_reporter = TerminalReporter(color=not no_color)

        console.print("\n")
        terminal_reporter.print_statistics(report)
        terminal_reporter.print_summary_table(report)

        if verbose:
            for decision in report.retained:
                terminal_reporter.print_detailed_report(decision)

    elif output_format == OutputFormat.json:
        json_output = JSONReporter().generate_report(report, output)
        if output:
            console.print(f"[green]✅ Report saved to: {output}[/green]")
        else:
            typer.echo(json_output)

    if check_only and report.retained:
        if output_format == OutputFormat.terminal:
            console.print(
                f"\n[yellow]⚠️  {len(report.retained)} module(s) still need the dependency.[/yellow]"
            )
        raise typer.Exit(1)

    if output_format == OutputFormat.terminal:
        console.print("\n[green]✅ Analysis complete![/green]")


@app.command()
def detect(
    project_path: Path = typer.Option(
        ".",
        "--project",
        "-p",
        help="Path to project directory",
    ),
    config_file: Path = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to TOML config",
    ),
) -> None:
    """List module boundaries and the source files each one owns."""

    project_path = project_path.resolve()

    if not project_path.exists():
        console.print(f"[red]Error: Path not found: {project_path}[/red]")
        raise typer.Exit(1)

    config = _load_config(project_path, config_file, None, None)
    discovery = FileDiscovery(
        project_path,
        exclude_patterns=config.exclude_patterns,
        source_extensions=config.source_extensions,
        marker_files=config.marker_files,
    )

    files = list(discovery.iter_files())
    boundaries = {
        descriptor_module_path(discovery.relative(p))
        for p in files
        if discovery.is_descriptor(p)
    }

    if not boundaries:
        console.print(f"\n[yellow]No module descriptors found in {project_path}[/yellow]")
        return

    resolver = ModuleResolver(boundaries, config.main_source_roots, config.test_source_roots)
    owned: dict[str, int] = defaultdict(int)
    for path in files:
        if discovery.is_source(path):
            owned[resolver.resolve(discovery.relative(path))] += 1

    console.print(f"\n[bold]Detected modules in {project_path}:[/bold]\n")
    for module_path in sorted(boundaries):
        console.print(f"  📄 {module_path or '(root)'} ({owned.get(module_path, 0)} source files)")

    unowned = sorted(m for m in owned if m not in boundaries)
    for module_path in unowned:
        console.print(
            f"  [yellow]⚠️  {module_path or '(root)'} has {owned[module_path]} "
            f"source files but no descriptor[/yellow]"
        )


@app.command()
def version() -> None:
    """Show version information."""

    from retention_analyzer import __version__

    console.print(f"[bold]Dependency Retention Analyzer[/bold] v{__version__}")


if __name__ == "__main__":
    app()
