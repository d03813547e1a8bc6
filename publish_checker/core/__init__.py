"""
Core components: schema loading, checker query synthesis and staleness detection.
"""

from publish_checker.core.models import (
    OutOfDateRecord,
    StageSnapshot,
    StagingRecord,
    SynthesizedQuery,
)
from publish_checker.core.query_synthesizer import QuerySynthesizer, explore, synthesize
from publish_checker.core.schema_loader import (
    find_content_types,
    introspect_schema,
    load_schema_file,
)
from publish_checker.core.staleness_detector import StalenessDetector, detect_stale

__all__ = [
    # Models
    "OutOfDateRecord",
    "StageSnapshot",
    "StagingRecord",
    "SynthesizedQuery",
    # Schema
    "find_content_types",
    "introspect_schema",
    "load_schema_file",
    # Synthesis
    "QuerySynthesizer",
    "explore",
    "synthesize",
    # Detection
    "StalenessDetector",
    "detect_stale",
]
