"""
CLI view formatters using Rich for pretty console output.

Handles table formatting and display of engine decisions.
"""

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..core.ascii_plot import create_top_single_plot, create_wave_tonnage_chart
from ..core.config import WAVE_SETS
from ..core.loading import plate_loading, warmup_ladder
from ..core.metrics import backdown_weight, format_weight
from ..core.models import (
    GateReport,
    HeavySuggestion,
    Lift,
    SessionAdjustment,
    SessionRecord,
    SystemStatus,
    VolumeTarget,
    WaveProgress,
)
from ..core.predictor import AdvisoryTarget

console = Console()

_STATUS_STYLE = {
    "NOMINAL": "green",
    "CAUTION": "yellow",
    "PROTOCOL-LOCK": "bold red",
}


def _lb(weight: float | None) -> str:
    return format_weight(weight) if weight else "-"


def format_history_table(records: list[SessionRecord], lift: Lift) -> Table:
    """
    Create a Rich table displaying a lift's history, newest first.

    Args:
        records: Date-ordered records for one lift

    Returns:
        Rich Table object
    """
    table = Table(title=f"{lift.capitalize()} History")

    table.add_column("#", justify="right", style="dim", width=3)
    table.add_column("Date", style="cyan")
    table.add_column("Single", justify="right", style="bold")
    table.add_column("RPE", justify="right")
    table.add_column("Wave", justify="right")
    table.add_column("Vol wt", justify="right")
    table.add_column("Flags", style="magenta")

    for i, record in reversed(list(enumerate(records, 1))):
        single = _lb(record.top_single)
        if record.is_pivot:
            single = f"[red][PIVOT][/red] {single}"

        if record.volume_reps:
            mark = "[red]✗[/red]" if record.volume_failed else "[green]✓[/green]"
            wave = f"{WAVE_SETS}x{record.volume_reps} {mark}"
            if record.volume_is_pivot and not record.is_pivot:
                wave = f"{wave} [dim]pivot[/dim]"
        else:
            wave = "-"

        table.add_row(
            str(i),
            record.date,
            single,
            f"{record.top_rpe:g}" if record.top_rpe is not None else "-",
            wave,
            _lb(record.volume_weight),
            ", ".join(sorted(record.gate_flags)) or "",
        )

    return table


def print_history(records: list[SessionRecord], lift: Lift) -> None:
    """
    Print a lift's history to console.

    Args:
        records: Records to display
    """
    if not records:
        console.print("[yellow]No sessions recorded yet.[/yellow]")
        return

    console.print(format_history_table(records, lift))


def print_system_status(status: SystemStatus) -> None:
    """Print the autopilot banner."""
    style = _STATUS_STYLE[status.status]
    console.print(Panel(f"[{style}]{status.message}[/{style}]", expand=False))
    if status.force_pivot:
        console.print("[dim]Pivot forced on; manual toggle ignored.[/dim]")


def print_heavy_plan(
    suggestion: HeavySuggestion | None,
    lift: Lift,
    pivot_active: bool,
) -> None:
    """Print today's heavy single, back-offs, plate loading and warmup."""
    console.print()
    console.print("[bold]Heavy day[/bold]")

    if suggestion is None:
        console.print("  No suggestion available (no previous top single).")
        return

    target = suggestion.target
    backdown = backdown_weight(target, pivot_active)
    pct = "75% (pivot)" if pivot_active else "82%"

    console.print(f"  💡 {suggestion.rationale}")
    console.print(f"  Single:    [bold]{format_weight(target)} lb[/bold]  ({plate_loading(target)})")
    console.print(f"  Back-offs: 3x3 @ {format_weight(backdown)} lb  [{pct}]  ({plate_loading(backdown)})")
    console.print(f"  Warmup:    {', '.join(warmup_ladder(target, lift))}")


def print_volume_plan(target: VolumeTarget, progress: WaveProgress, lift: Lift) -> None:
    """Print the wave target and wave position."""
    console.print()
    console.print("[bold]Volume day[/bold]")

    tag = f"{WAVE_SETS}x{target.reps} Technical" if target.is_pause else f"{WAVE_SETS}x{target.reps}"
    console.print(f"  Target:    [bold]{format_weight(target.weight)} lb[/bold] for {tag}")
    console.print(f"  Note:      {target.note}")
    console.print(f"  Load:      {plate_loading(target.weight)}")
    console.print(f"  Warmup:    {', '.join(warmup_ladder(target.weight, lift))}")

    steps = []
    for step in (1, 2, 3):
        if step in progress.completed_steps:
            steps.append(f"[green]● {step}[/green]")
        elif step == progress.active_step:
            steps.append(f"[bold cyan]◉ {step}[/bold cyan]")
        else:
            steps.append(f"[dim]○ {step}[/dim]")
    console.print(f"  Wave:      {'  '.join(steps)}   {progress.label}")


def print_adjustment(adjustment: SessionAdjustment) -> None:
    if adjustment.variation == "standard":
        return
    console.print()
    console.print(
        f"[yellow]{adjustment.message} "
        f"(load x{adjustment.load_modifier:.2f}, {adjustment.variation})[/yellow]"
    )


def print_advisory(advisory: AdvisoryTarget) -> None:
    label = "AI Target" if advisory.source == "model" else "AI Target (Est)"
    console.print()
    console.print(f"{label}: [cyan]{format_weight(advisory.weight)} lb[/cyan]")


def print_gate_report(report: GateReport) -> None:
    """Print triggered methodology adjustments, if any."""
    messages = report.messages
    if not messages:
        return
    console.print()
    console.print("[bold]Active Methodology Adjustments:[/bold]")
    for message in messages:
        console.print(f"  [yellow]• {message}[/yellow]")


def print_top_single_plot(records: list[SessionRecord], lift: Lift) -> None:
    console.print(create_top_single_plot(records, lift_name=lift.capitalize()))


def print_tonnage_chart(records: list[SessionRecord], weeks: int = 4) -> None:
    console.print(create_wave_tonnage_chart(records, weeks))


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]{message}[/green]")


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[red]Error: {message}[/red]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]Warning: {message}[/yellow]")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]{message}[/blue]")


def confirm_action(message: str) -> bool:
    """
    Prompt user for confirmation.

    Args:
        message: Confirmation message

    Returns:
        True if confirmed, False otherwise
    """
    response = console.input(f"{message} [y/N]: ")
    return response.lower() in ("y", "yes")
