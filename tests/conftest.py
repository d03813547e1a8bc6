"""
Shared fixtures for publish checker tests.
"""

from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from publish_checker.core.schema_loader import load_schema_file

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def content_schema():
    """Content model with pages, rich text, unions and self references."""
    return load_schema_file(FIXTURES / "content_model.graphql")


@pytest.fixture
def mock_executor():
    """Executor whose results are set per test."""
    executor = AsyncMock()
    executor.execute = AsyncMock()
    return executor


def staging_node(
    node_id: str,
    typename: str = "Page",
    draft_updated: str | None = "2024-01-01",
    published: tuple[str, str | None] | None = ("2024-01-01", "2024-01-01"),
    title: str | None = None,
    **children,
) -> dict:
    """
    Build a node shaped like the stage fragment response.

    Args:
        published: (updatedAt, publishedAt) of the PUBLISHED stage, or None if never published
    """
    stages = []
    if draft_updated is not None:
        stages.append({"stage": "DRAFT", "publishedAt": None, "updatedAt": draft_updated})
    if published is not None:
        updated_at, published_at = published
        stages.append({"stage": "PUBLISHED", "publishedAt": published_at, "updatedAt": updated_at})

    node = {
        "id": node_id,
        "stage": "DRAFT",
        "__title": title if title is not None else f"{typename.lower()}-{node_id}",
        "__typename": typename,
        "documentInStages": stages,
    }
    node.update(children)
    return node


@pytest.fixture
def make_node():
    """Factory for staging nodes."""
    return staging_node
