"""
Core Pydantic data models for the publish checker.

Defines the data structures exchanged between components:
- Staging metadata returned by the API
- Out-of-date records handed to reporting
- The synthesized checker query
"""

from pydantic import BaseModel, ConfigDict, Field

DRAFT_STAGE = "DRAFT"
PUBLISHED_STAGE = "PUBLISHED"

# ============================================================================
# Staging metadata (response shape of the stage fragments)
# ============================================================================


class StageSnapshot(BaseModel):
    """One lifecycle stage of a content node."""

    model_config = ConfigDict(populate_by_name=True)

    stage: str = Field(..., description="Stage label (DRAFT, PUBLISHED)")
    published_at: str | None = Field(
        default=None, alias="publishedAt", description="When this stage was published"
    )
    updated_at: str | None = Field(
        default=None, alias="updatedAt", description="Last update recorded for this stage"
    )


class StagingRecord(BaseModel):
    """Staging metadata of a single content node instance."""

    model_config = ConfigDict(populate_by_name=True)

    id: str | None = None
    stage: str | None = Field(default=None, description="Stage the instance was fetched in")
    title: str | None = Field(default=None, alias="__title", description="Display title")
    typename: str | None = Field(default=None, alias="__typename", description="Concrete type")
    document_in_stages: list[StageSnapshot] = Field(
        default_factory=list, alias="documentInStages"
    )

    def get_stage(self, stage: str) -> StageSnapshot | None:
        """Return the first snapshot carrying the given stage label."""
        for snapshot in self.document_in_stages:
            if snapshot.stage == stage:
                return snapshot
        return None


# Keys of the staging fragment itself; everything else in a node is nested content
STAGING_RECORD_KEYS = frozenset({"id", "stage", "__title", "__typename", "documentInStages"})


# ============================================================================
# Detection output
# ============================================================================


class OutOfDateRecord(BaseModel):
    """A content node whose draft diverged from its published snapshot."""

    model_config = ConfigDict(populate_by_name=True)

    id: str | None = Field(..., description="Content node id")
    stage: str | None = Field(default=None, description="Stage label of the fetched instance")
    title: str | None = Field(default=None, alias="__title")
    typename: str | None = Field(default=None, alias="__typename")
    last_updated: str | None = Field(default=None, alias="lastUpdated")
    last_published: str | None = Field(default=None, alias="lastPublished")
    path: str = Field(default="", description="Slash-delimited location, '' for the root")

    @property
    def is_root(self) -> bool:
        """Check if this record is the root entity itself."""
        return self.path == ""


# ============================================================================
# Query synthesis output
# ============================================================================


class SynthesizedQuery(BaseModel):
    """Checker document generated for one root type."""

    type_name: str = Field(..., description="Root content type")
    operation_name: str = Field(..., description="Name of the query operation")
    operation_text: str = Field(..., description="Full GraphQL document")
    used_stages: list[str] = Field(
        default_factory=list, description="Content types whose stage fragment is included"
    )
    plural_field_name: str = Field(..., description="Query root field listing the root type")
    camel_field_name: str = Field(..., description="Query root field fetching one instance")
