"""Reporter modules for outputting scan results."""

from .base import Reporter
from .console import TextReporter
from .json_reporter import JsonReporter, ReportError

__all__ = ["Reporter", "TextReporter", "JsonReporter", "ReportError"]
