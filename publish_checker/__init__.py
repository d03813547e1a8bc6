"""Publish checker: find draft content that diverged from its published version."""

from publish_checker.controller import FormState, PublishCheckController
from publish_checker.core.models import OutOfDateRecord, SynthesizedQuery
from publish_checker.core.query_synthesizer import explore, synthesize
from publish_checker.core.staleness_detector import detect_stale
from publish_checker.reporting.publish_report import build_publish_mutation, summarize

__version__ = "0.1.0"

__all__ = [
    "FormState",
    "OutOfDateRecord",
    "PublishCheckController",
    "SynthesizedQuery",
    "build_publish_mutation",
    "detect_stale",
    "explore",
    "summarize",
    "synthesize",
]
