"""Reporters for assessments and improvement sessions.

JSON for dashboards and CI gates, Markdown for review, and a colored
terminal summary for the CLI.
"""

from .cli_reporter import CLIReportConfig, CLIReporter, should_use_color
from .json_reporter import JSONReportConfig, JSONReporter
from .markdown import MarkdownReportConfig, MarkdownReporter

__all__ = [
    "CLIReportConfig",
    "CLIReporter",
    "JSONReportConfig",
    "JSONReporter",
    "MarkdownReportConfig",
    "MarkdownReporter",
    "should_use_color",
]
