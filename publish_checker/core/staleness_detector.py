"""
Staleness detection over a checker query result.

Walks the fetched data tree (not the schema) and reports every content
node whose draft revision has diverged from its published revision,
together with the slash-delimited path where it was found.
"""

import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Literal

from pydantic import ValidationError

from publish_checker.core.models import (
    DRAFT_STAGE,
    PUBLISHED_STAGE,
    STAGING_RECORD_KEYS,
    OutOfDateRecord,
    StagingRecord,
    SynthesizedQuery,
)
from publish_checker.transport.base_executor import QueryExecutor

logger = logging.getLogger(__name__)

TimestampComparison = Literal["lexical", "parsed"]


class NodeKind(str, Enum):
    """Shape of a value met during the tree walk."""

    SEQUENCE = "sequence"
    STAGING_CANDIDATE = "staging_candidate"
    RECORD = "record"
    SCALAR = "scalar"


def classify(value: Any) -> NodeKind:
    """Classify a response value before walking it."""
    if isinstance(value, list):
        return NodeKind.SEQUENCE
    if isinstance(value, dict):
        if isinstance(value.get("documentInStages"), list):
            return NodeKind.STAGING_CANDIDATE
        return NodeKind.RECORD
    return NodeKind.SCALAR


def _parse_timestamp(value: str) -> datetime | None:
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    # Date-only and naive values are taken as UTC
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class StalenessDetector:
    """Finds out-of-date content nodes in a fetched result tree."""

    def __init__(self, comparison: TimestampComparison = "lexical"):
        """
        Initialize detector.

        Args:
            comparison: "lexical" compares ISO-8601 strings as-is,
                "parsed" compares them as timezone-aware datetimes
        """
        self.comparison = comparison

    def _same_instant(self, left: str | None, right: str | None) -> bool:
        if self.comparison == "parsed" and left and right:
            parsed_left, parsed_right = _parse_timestamp(left), _parse_timestamp(right)
            if parsed_left is not None and parsed_right is not None:
                return parsed_left == parsed_right
        return left == right

    def _is_before(self, left: str, right: str) -> bool:
        if self.comparison == "parsed":
            parsed_left, parsed_right = _parse_timestamp(left), _parse_timestamp(right)
            if parsed_left is not None and parsed_right is not None:
                return parsed_left < parsed_right
        return left < right

    def is_out_of_date(self, node: dict[str, Any], path: str) -> OutOfDateRecord | None:
        """
        Decide whether one content node's draft diverged from its published stage.

        Args:
            node: Staging metadata as returned by the stage fragment
            path: Location of the node in the result tree

        Returns:
            OutOfDateRecord if stale, None if up to date or not assessable
        """
        if classify(node) != NodeKind.STAGING_CANDIDATE:
            return None

        try:
            record = StagingRecord.model_validate(node)
        except ValidationError as e:
            logger.debug(f"Ignoring malformed staging data at '{path}': {e}")
            return None

        draft = record.get_stage(DRAFT_STAGE)
        if draft is None:
            return None

        published = record.get_stage(PUBLISHED_STAGE)
        stale = (
            published is None
            or not self._same_instant(draft.updated_at, published.updated_at)
            or not published.published_at
            or self._is_before(published.published_at, published.updated_at or "")
        )
        if not stale:
            return None

        return OutOfDateRecord(
            id=record.id,
            stage=record.stage,
            title=record.title or record.id,
            typename=record.typename,
            last_updated=draft.updated_at,
            last_published=published.published_at if published else None,
            path=path,
        )

    def _walk(self, path: str, value: Any, out_of_date: list[OutOfDateRecord]) -> None:
        kind = classify(value)

        if kind == NodeKind.SEQUENCE:
            for index, item in enumerate(value):
                self._walk(f"{path}/{index}", item, out_of_date)
            return

        if kind == NodeKind.SCALAR:
            return

        if kind == NodeKind.STAGING_CANDIDATE:
            result = self.is_out_of_date(value, path)
            if result:
                out_of_date.append(result)

        for key, child in value.items():
            if key not in STAGING_RECORD_KEYS and child:
                self._walk(f"{path}/{key}", child, out_of_date)

    def find_stale(self, entry: Any) -> list[OutOfDateRecord]:
        """Collect every stale node below ``entry`` in discovery order."""
        out_of_date: list[OutOfDateRecord] = []
        self._walk("", entry, out_of_date)
        return out_of_date


async def detect_stale(
    executor: QueryExecutor,
    synthesized: SynthesizedQuery,
    root_id: str,
    comparison: TimestampComparison = "lexical",
) -> list[OutOfDateRecord] | None:
    """
    Fetch the staging data of a root instance and report its stale nodes.

    Args:
        executor: Transport used to run the checker query
        synthesized: Checker query built for the root type
        root_id: Id of the root instance
        comparison: Timestamp comparison mode

    Returns:
        Out-of-date records in discovery order, or None when nothing is stale

    Raises:
        TransportError: The checker query could not be executed
    """
    logger.info(f"Examining {synthesized.type_name} {root_id}")
    try:
        result = await executor.execute(
            query=synthesized.operation_text,
            operation_name=synthesized.operation_name,
            variables={"id": root_id},
        )
    except Exception as e:
        logger.error(f"Failed to examine results: {e}")
        logger.error(f"Query for id={root_id}:\n{synthesized.operation_text}")
        raise

    entry = (result.get("data") or {}).get(synthesized.camel_field_name)
    if entry is None:
        logger.warning(f"No DRAFT {synthesized.type_name} found with id {root_id}")
        return None

    out_of_date = StalenessDetector(comparison).find_stale(entry)
    logger.info(f"Found {len(out_of_date)} out-of-date node(s)")
    return out_of_date or None
