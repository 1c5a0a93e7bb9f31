"""Console reporter with colored terminal output using Rich."""

from __future__ import annotations

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from botguard.replay import ReplayResult
from botguard.scoring.models import EnforcementAction, ReputationState


ACTION_COLORS: dict[EnforcementAction, str] = {
    EnforcementAction.ALLOW: "green",
    EnforcementAction.CHALLENGE: "yellow",
    EnforcementAction.TEMP_BLOCK: "red",
    EnforcementAction.PERMANENT_BLOCK: "bold red",
}


class ConsoleReporter:
    """Renders replay results and state snapshots to the terminal."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def render(self, result: ReplayResult) -> None:
        """Print a replay result to the console."""
        self._print_header(result)
        self._print_decisions(result)
        self._print_final_actions(result)

    def render_state(self, identity: str, state: ReputationState) -> None:
        """Print one identity's stored state."""
        table = Table(title=f"State for {identity}", show_header=False)
        table.add_column("Field", style="bold")
        table.add_column("Value")

        table.add_row("Score", f"{state.score:.1f}")
        table.add_row("Last updated", state.last_updated.isoformat())
        table.add_row("Strike", "yes" if state.has_strike else "no")
        table.add_row("Permanently blocked", "yes" if state.permanently_blocked else "no")
        table.add_row("Violations", str(state.violation_count))
        table.add_row(
            "Rate window",
            f"{state.rate_window.count} since {state.rate_window.window_start.isoformat()}",
        )
        table.add_row("Locales", ", ".join(sorted(state.locale_regions)) or "-")
        table.add_row("Paths in window", str(len(state.path_history)))

        self.console.print(table)

    def _print_header(self, result: ReplayResult) -> None:
        """Print the summary panel."""
        counts = result.action_counts
        blocked = counts[EnforcementAction.TEMP_BLOCK.value] + counts[
            EnforcementAction.PERMANENT_BLOCK.value
        ]
        color = "red" if blocked else "yellow" if counts[EnforcementAction.CHALLENGE.value] else "green"

        summary = (
            f"Signals replayed: {len(result.entries)}\n"
            f"Identities: {len(result.final_actions)}\n"
            f"[{color}]Challenged: {counts[EnforcementAction.CHALLENGE.value]} | "
            f"Blocked: {blocked}[/{color}]"
        )
        self.console.print(Panel(summary, title="botguard replay", border_style=color))
        self.console.print()

    def _print_decisions(self, result: ReplayResult) -> None:
        """Print every decision that was not a plain ALLOW."""
        flagged = [
            entry for entry in result.entries
            if entry.decision.action != EnforcementAction.ALLOW
            or any(entry.decision.violations.values())
        ]
        if not flagged:
            self.console.print("[green]No violations detected.[/green]")
            return

        table = Table(title="Flagged Requests")
        table.add_column("Time")
        table.add_column("Identity", style="bold")
        table.add_column("Path")
        table.add_column("Violations")
        table.add_column("Score", justify="right")
        table.add_column("Action")

        for entry in flagged:
            decision = entry.decision
            color = ACTION_COLORS[decision.action]
            violations = [name for name, hit in decision.violations.items() if hit]
            table.add_row(
                entry.record.timestamp.strftime("%H:%M:%S"),
                entry.record.identity,
                entry.record.path,
                ", ".join(violations) or "-",
                f"{decision.score:.1f}",
                f"[{color}]{decision.action.value}[/{color}]",
            )

        self.console.print(table)
        self.console.print()

    def _print_final_actions(self, result: ReplayResult) -> None:
        self.console.print("[bold]Final action per identity:[/bold]")
        for identity, action in sorted(result.final_actions.items()):
            color = ACTION_COLORS[action]
            self.console.print(f"  {identity}: [{color}]{action.value}[/{color}]")
        self.console.print()
