"""
CLI entry point using Typer.

Provides commands for the squat/bench planner:
- today: Autopilot status, heavy single and wave target
- status: Autopilot status only
- log-heavy: Log a heavy day (runs the logic gates)
- log-volume: Attach a volume day to the pending heavy session
- show-history / clear-history: Inspect or reset a lift's history
- plot: Top-single and wave tonnage charts
- export / import: JSON backups
"""

from .app import app
from .commands import backup, planning, sessions  # noqa: F401  (registers commands)

if __name__ == "__main__":
    app()
