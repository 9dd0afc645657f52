"""Terminal reporter using Rich library."""

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from retention_analyzer.models import ModuleDecision, RetentionReport


class TerminalReporter:
    """Generates terminal output using Rich."""

    def __init__(self, color: bool = True, console: Console | None = None) -> None:
        """Initialize terminal reporter.

        Args:
            color: If True, use colored output
            console: Optional console to print to
        """
        self.console = console or Console(color_system="auto" if color else None)

    def print_summary_table(self, report: RetentionReport) -> None:
        """Print one row per module decision.

        Args:
            report: Retention report
        """
        table = Table(
            title="📦 Dependency Retention by Module",
            show_header=True,
            header_style="bold cyan",
        )

        table.add_column("Module", style="bold")
        table.add_column("Descriptor")
        table.add_column("Decision", justify="center")
        table.add_column("Blocking", justify="right")
        table.add_column("Removed")

        for decision in sorted(report.decisions, key=lambda d: d.module_path):
            table.add_row(
                decision.display_name,
                decision.descriptor_path,
                self._decision_label(decision),
                str(len(decision.signatures)),
                ", ".join(str(c) for c in decision.removed) or "-",
            )

        self.console.print(table)

    def print_detailed_report(self, decision: ModuleDecision) -> None:
        """Print blocking usages of a retaining module.

        Args:
            decision: Module decision
        """
        if not decision.retain:
            return

        self.console.print(f"\n[bold]📦 {decision.display_name}[/bold]")

        self.console.print("[bold red]Blocking signatures:[/bold red]")
        for signature in decision.signatures:
            self.console.print(f"  • {signature}")

        self.console.print("[bold]Files:[/bold]")
        for file_path in decision.files[:20]:
            self.console.print(f"  • {file_path}", style="dim")
        if len(decision.files) > 20:
            self.console.print(f"  … and {len(decision.files) - 20} more", style="dim")

    def print_statistics(self, report: RetentionReport) -> None:
        """Print overall statistics.

        Args:
            report: Retention report
        """
        stats = Text()
        stats.append("📊 Summary: ", style="bold")
        stats.append(f"{len(report.decisions)} module(s), {report.scanned_files} source file(s) | ")

        if report.retained:
            stats.append(f"🟠 {len(report.retained)} retain ", style="bold yellow")
        if report.removable:
            stats.append(f"🟢 {len(report.removable)} remove ", style="bold green")

        self.console.print(Panel(stats, border_style="blue"))

    @staticmethod
    def _decision_label(decision: ModuleDecision) -> str:
        if decision.retain:
            return "[yellow]🟠 retain[/yellow]"
        return "[green]🟢 remove[/green]"
