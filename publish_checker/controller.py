"""
Publish check orchestration.
Ties schema exploration, staleness detection and reporting together for
one root content type, following the lifecycle of the editing form.
"""

import json
import logging
from typing import Any

from graphql import GraphQLSchema
from pydantic import BaseModel, Field

from publish_checker.config.checker_config import CheckerConfig
from publish_checker.core.models import OutOfDateRecord, SynthesizedQuery
from publish_checker.core.query_synthesizer import explore, synthesize
from publish_checker.core.staleness_detector import detect_stale
from publish_checker.exceptions import CheckerError
from publish_checker.reporting.publish_report import PublishSummary, summarize
from publish_checker.transport.base_executor import QueryExecutor
from publish_checker.transport.executor_factory import create_executor

logger = logging.getLogger(__name__)


class FormState(BaseModel):
    """Lifecycle flags of the form editing the root entry."""

    submitting: bool = False
    submit_succeeded: bool = False
    modified_since_last_submit: bool = False

    @property
    def ready_to_show(self) -> bool:
        """Results are meaningful once saved content matches what the form shows."""
        return not self.submitting and (
            self.submit_succeeded or not self.modified_since_last_submit
        )


class CheckState(BaseModel):
    """Current state of a publish check session."""

    explored: bool = False
    synthesized: SynthesizedQuery | None = None
    results: list[OutOfDateRecord] | None = None
    ready_to_show: bool = True
    error: dict[str, Any] | None = Field(
        default=None, description="Inspectable payload of the last failure"
    )


def error_payload(error: Exception) -> dict[str, Any]:
    """Describe a failure so the operator can inspect it."""
    payload: dict[str, Any] = {
        "type": error.__class__.__name__,
        "message": str(error),
    }
    for attribute in ("status_code", "body", "errors", "type_name"):
        value = getattr(error, attribute, None)
        if value is not None:
            payload[attribute] = value
    return payload


class PublishCheckController:
    """
    Runs publish checks for entries of one content type.
    Explores the model once, then re-examines entries whenever the form is ready.
    """

    def __init__(
        self,
        executor: QueryExecutor | None,
        type_name: str,
        config: CheckerConfig | None = None,
    ):
        self.executor = executor
        self.type_name = type_name
        self.config = config or CheckerConfig()
        self.state = CheckState()

    @classmethod
    def from_config(
        cls,
        type_name: str,
        config: CheckerConfig,
        endpoint: str | None = None,
        auth_token: str | None = None,
    ) -> "PublishCheckController":
        """
        Set up a controller with an HTTP executor built from configuration.

        Raises:
            ConfigError: Endpoint or token missing
        """
        executor = create_executor(config.transport, endpoint=endpoint, auth_token=auth_token)
        return cls(executor, type_name, config)

    def _record_error(self, error: CheckerError, action: str) -> None:
        logger.error(f"[Controller] {action} failed for {self.type_name}: {error}")
        self.state.error = error_payload(error)

    async def explore(self) -> SynthesizedQuery | None:
        """Build the checker query for the model; failures end up in ``state.error``."""
        self.state.error = None
        try:
            synthesized = await explore(self.executor, self.type_name, self.config.exploration)
        except CheckerError as e:
            self._record_error(e, "Exploring model")
            return None

        self.state.explored = True
        self.state.synthesized = synthesized
        if synthesized is None:
            logger.warning(f"[Controller] No checker available for {self.type_name}")
        return synthesized

    def explore_schema(self, schema: GraphQLSchema) -> SynthesizedQuery | None:
        """Build the checker query from an already loaded schema, skipping introspection."""
        self.state.error = None
        try:
            synthesized = synthesize(schema, self.type_name, self.config.exploration)
        except CheckerError as e:
            self._record_error(e, "Exploring model")
            return None

        self.state.explored = True
        self.state.synthesized = synthesized
        return synthesized

    async def examine(self, entry_id: str) -> list[OutOfDateRecord] | None:
        """Check one entry; an empty list means everything is published."""
        if self.state.synthesized is None:
            raise RuntimeError("Model has not been explored yet")

        self.state.error = None
        try:
            results = await detect_stale(
                self.executor,
                self.state.synthesized,
                entry_id,
                comparison=self.config.detection.timestamp_comparison,
            )
        except CheckerError as e:
            self._record_error(e, "Examining entry")
            return None

        self.state.results = results or []
        return self.state.results

    def on_form_state(self, form_state: FormState) -> bool:
        """
        Track the form lifecycle.

        Returns:
            True if results can be shown for the current form content
        """
        if form_state.submitting:
            self.state.results = None
        self.state.ready_to_show = form_state.ready_to_show
        return self.state.ready_to_show

    async def refresh(self, entry_id: str | None) -> list[OutOfDateRecord] | None:
        """Examine the entry if the model is explored and the form is ready."""
        if self.state.synthesized is None or not entry_id or not self.state.ready_to_show:
            return None
        return await self.examine(entry_id)

    async def run(self, entry_id: str) -> list[OutOfDateRecord] | None:
        """Explore (once) and examine one entry."""
        if not self.state.explored:
            await self.explore()
        return await self.refresh(entry_id)

    @property
    def summary(self) -> PublishSummary | None:
        if self.state.results is None:
            return None
        return summarize(self.state.results)

    def render(self) -> str:
        """Plain-text view of the session, as shown next to the form."""
        lines: list[str] = []
        summary = self.summary

        if summary is not None and summary.records:
            lines.extend(summary.status_lines())
            lines.append(summary.mutation)
        elif summary is not None:
            lines.append("Everything is published")
        elif self.state.synthesized is not None:
            lines.append("Loading results for current model")
        elif self.state.explored:
            lines.append(f"{self.type_name} is not a content model")
        else:
            lines.append("Exploring model")

        if self.state.error is not None:
            lines.append(json.dumps(self.state.error, indent=2))

        return "\n".join(lines)
