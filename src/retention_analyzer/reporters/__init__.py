"""Reporters package."""

from retention_analyzer.reporters.terminal import TerminalReporter
from retention_analyzer.reporters.json_formats import JSONReporter

__all__ = [
    "TerminalReporter",
    "JSONReporter",
]
