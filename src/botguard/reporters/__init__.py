"""Renderers for replay results and identity state snapshots."""

from botguard.reporters.console_reporter import ConsoleReporter
from botguard.reporters.json_reporter import JsonReporter

__all__ = ["JsonReporter", "ConsoleReporter"]
