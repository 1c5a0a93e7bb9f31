"""Quickstart example for botguard.

Replays a handful of recorded requests through an in-memory tracker and
prints the decisions. No services required.
"""

from pathlib import Path

from botguard.config import load_config
from botguard.replay import read_signals, replay
from botguard.reporters.console_reporter import ConsoleReporter

HERE = Path(__file__).parent


def main():
    # Load the example configuration
    config = load_config(HERE / "botguard.yaml")

    records = read_signals(HERE / "signals.jsonl")
    print(f"Loaded {len(records)} signals\n")

    result = replay(records, config)
    ConsoleReporter().render(result)


if __name__ == "__main__":
    main()
