"""
ASCII plotting for top-single and wave-volume progress.

Creates terminal-friendly charts of a lift's history.
"""

from datetime import datetime, timedelta

from .config import WAVE_SETS
from .metrics import format_weight, top_single_series
from .models import SessionRecord


def create_top_single_plot(
    history: list[SessionRecord],
    width: int = 60,
    height: int = 16,
    lift_name: str = "Squat",
) -> str:
    """
    Create an ASCII plot of top singles over time.

    Pivot sessions are drawn as ○, regular sessions as ●.

    Args:
        history: Date-ordered records for one lift
        width: Plot width in characters
        height: Plot height in lines
        lift_name: Display name shown in the chart title

    Returns:
        ASCII art string
    """
    points = top_single_series(history)
    if len(points) < 2:
        return "Not enough heavy sessions to plot (need 2+)."

    pivot_dates = {
        datetime.strptime(r.date, "%Y-%m-%d") for r in history if r.is_pivot and r.top_single
    }

    min_date = points[0][0]
    max_date = points[-1][0]
    date_range = (max_date - min_date).days or 1

    values = [v for _, v in points]
    y_min = max(0.0, min(values) - 10)
    y_max = max(values) + 10
    y_range = (y_max - y_min) or 1.0

    plot_width = width - 8  # Leave room for y-axis labels
    plot_height = height - 3  # Leave room for x-axis and title

    grid = [[" " for _ in range(plot_width)] for _ in range(plot_height)]

    plot_points: list[tuple[int, int, datetime]] = []
    for date, value in points:
        x = int(((date - min_date).days / date_range) * (plot_width - 1))
        y = plot_height - 1 - int(((value - y_min) / y_range) * (plot_height - 1))
        plot_points.append((x, y, date))

    # Connecting segments between consecutive points
    for (x1, y1, _), (x2, y2, _) in zip(plot_points, plot_points[1:]):
        for x in range(x1 + 1, x2):
            t = (x - x1) / (x2 - x1)
            y = int(round(y1 + (y2 - y1) * t))
            if grid[y][x] == " ":
                grid[y][x] = "·"

    for x, y, date in plot_points:
        grid[y][x] = "○" if date in pivot_dates else "●"

    lines = [f"Top Single Progress ({lift_name})", "─" * width]

    for i, row in enumerate(grid):
        y_val = y_max - (i / (plot_height - 1)) * y_range if plot_height > 1 else y_max
        lines.append(f"{y_val:6.0f} ┤" + "".join(row))

    lines.append("─" * width)

    label_line = [" "] * plot_width
    mid_date = min_date + timedelta(days=date_range / 2)
    for x_pos, date in ((0, min_date), (plot_width // 2, mid_date), (plot_width - 7, max_date)):
        for j, c in enumerate(date.strftime("%b %d")):
            if 0 <= x_pos + j < plot_width:
                label_line[x_pos + j] = c
    lines.append(" " * 8 + "".join(label_line))

    if pivot_dates:
        lines.append("● top single   ○ pivot single")

    return "\n".join(lines)


def create_simple_bar_chart(
    labels: list[str],
    values: list[float],
    width: int = 40,
    title: str = "",
) -> str:
    """
    Create a simple horizontal bar chart.

    Args:
        labels: Labels for each bar
        values: Values for each bar
        width: Maximum bar width
        title: Chart title

    Returns:
        ASCII bar chart string
    """
    if not values:
        return "No data to display."

    max_val = max(values)
    max_label_len = max(len(label) for label in labels) if labels else 0

    lines = []

    if title:
        lines.append(title)
        lines.append("─" * (max_label_len + width + 5))

    for label, value in zip(labels, values):
        bar_len = int((value / max_val) * width) if max_val > 0 else 0
        lines.append(f"{label:>{max_label_len}} │{'█' * bar_len} {format_weight(value)}")

    return "\n".join(lines)


def create_wave_tonnage_chart(history: list[SessionRecord], weeks: int = 4) -> str:
    """
    Weekly Volume-day tonnage (sets x reps x weight).

    Args:
        history: Date-ordered records for one lift
        weeks: Number of weeks to show

    Returns:
        ASCII chart string
    """
    if not history:
        return "No training history."

    latest_date = datetime.strptime(history[-1].date, "%Y-%m-%d")
    weekly: dict[int, float] = {}

    for record in history:
        if not record.volume_weight or not record.volume_reps:
            continue
        weeks_ago = (latest_date - datetime.strptime(record.date, "%Y-%m-%d")).days // 7
        if weeks_ago < weeks:
            tonnage = record.volume_weight * record.volume_reps * WAVE_SETS
            weekly[weeks_ago] = weekly.get(weeks_ago, 0.0) + tonnage

    labels = []
    values = []
    for i in range(weeks - 1, -1, -1):
        if i == 0:
            labels.append("This week")
        elif i == 1:
            labels.append("Last week")
        else:
            labels.append(f"{i} weeks ago")
        values.append(weekly.get(i, 0.0))

    return create_simple_bar_chart(labels, values, title="Weekly Wave Tonnage (lb)")
