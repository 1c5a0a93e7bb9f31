"""JSON reporter for machine-readable replay output."""

from __future__ import annotations

import json
from pathlib import Path

from botguard.replay import ReplayResult


class JsonReporter:
    """Generates JSON output from a replay result.

    Keys are camelCase to match the tracker API responses.
    """

    def render(self, result: ReplayResult) -> str:
        """Render the replay result as a JSON string."""
        data = result.model_dump(mode="json", by_alias=True)
        data["actionCounts"] = dict(result.action_counts)
        return json.dumps(data, indent=2, default=str)

    def write(self, result: ReplayResult, output_path: str | Path) -> None:
        """Write the JSON output to a file."""
        content = self.render(result)
        Path(output_path).write_text(content, encoding="utf-8")
