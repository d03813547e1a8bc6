"""Reporting of out-of-date content nodes."""

from publish_checker.reporting.publish_report import (
    PublishSummary,
    build_publish_mutation,
    format_markdown_report,
    summarize,
)

__all__ = [
    "PublishSummary",
    "build_publish_mutation",
    "format_markdown_report",
    "summarize",
]
