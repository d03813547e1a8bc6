"""
Publish report for out-of-date content nodes.

Turns the detector output into the operator-facing status lines and the
batch publish mutation that brings every stale node up to date.
"""

import logging

from pydantic import BaseModel, Field

from publish_checker.core.models import OutOfDateRecord

logger = logging.getLogger(__name__)


def build_publish_mutation(records: list[OutOfDateRecord]) -> str:
    """
    Build one mutation publishing every record, in discovery order.

    The mutation field of a node is ``publish`` followed by its type name.
    """
    lines = ["mutation {"]
    for index, record in enumerate(records):
        lines.append(
            f'  p{index}: publish{record.typename}(where: {{id: "{record.id}"}} to:PUBLISHED) {{ id }}'
        )
    lines.append("}")
    return "\n".join(lines)


class PublishSummary(BaseModel):
    """What the operator sees after a check."""

    is_model_out_of_date: bool = Field(..., description="The root entity itself is stale")
    nodes_out_of_date: int = Field(..., description="Stale nodes below the root")
    mutation: str = Field(..., description="Publish mutation for every stale record")
    records: list[OutOfDateRecord] = Field(default_factory=list)

    def status_lines(self) -> list[str]:
        lines = []
        if self.is_model_out_of_date:
            lines.append("Model is out of date")
        if self.nodes_out_of_date > 0:
            plural = self.nodes_out_of_date > 1
            lines.append(
                f"There {'are' if plural else 'is'} {self.nodes_out_of_date} "
                f"node{'s' if plural else ''} out of date"
            )
        return lines


def summarize(records: list[OutOfDateRecord]) -> PublishSummary:
    """Summarize detector output; an empty list means everything is up to date."""
    is_model_out_of_date = bool(records) and records[0].is_root
    summary = PublishSummary(
        is_model_out_of_date=is_model_out_of_date,
        nodes_out_of_date=len(records) - (1 if is_model_out_of_date else 0),
        mutation=build_publish_mutation(records),
        records=records,
    )
    logger.debug(
        f"Summary: model_out_of_date={summary.is_model_out_of_date}, "
        f"nodes_out_of_date={summary.nodes_out_of_date}"
    )
    return summary


def format_markdown_report(type_name: str, entry_id: str, summary: PublishSummary) -> str:
    """Render a Markdown report listing every stale node and the mutation."""
    lines = [
        f"# Publish Check: {type_name} `{entry_id}`",
        "",
    ]
    status = summary.status_lines()
    if not status:
        lines.append("Everything is published.")
        return "\n".join(lines)

    lines.extend(f"- {line}" for line in status)
    lines.extend(
        [
            "",
            "| Path | Type | Title | Last updated | Last published |",
            "|---|---|---|---|---|",
        ]
    )
    for record in summary.records:
        lines.append(
            f"| `{record.path or '/'}` | {record.typename} | {record.title} "
            f"| {record.last_updated} | {record.last_published or 'never'} |"
        )
    lines.extend(["", "```graphql", summary.mutation, "```", ""])
    return "\n".join(lines)
