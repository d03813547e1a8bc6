"""
Unit tests for staleness detection.
"""

from unittest.mock import AsyncMock

import pytest

from publish_checker.core.models import SynthesizedQuery
from publish_checker.core.staleness_detector import (
    NodeKind,
    StalenessDetector,
    classify,
    detect_stale,
)
from publish_checker.exceptions import TransportError


@pytest.fixture
def detector():
    return StalenessDetector()


@pytest.fixture
def page_query():
    return SynthesizedQuery(
        type_name="Page",
        operation_name="CheckPage",
        operation_text="query CheckPage($id: ID) { page(where: {id: $id}) { id } }",
        used_stages=["Page"],
        plural_field_name="pages",
        camel_field_name="page",
    )


class TestStalenessPredicate:
    """Tests for the per-node staleness decision."""

    def test_up_to_date(self, detector, make_node):
        """Test equal updatedAt and publishedAt not before it is up to date."""
        node = make_node("1", draft_updated="2024-01-01", published=("2024-01-01", "2024-01-01"))

        assert detector.is_out_of_date(node, "") is None

    def test_later_draft_update_flips_to_stale(self, detector, make_node):
        """Test changing only the draft updatedAt makes the node stale."""
        node = make_node("1", draft_updated="2024-01-05", published=("2024-01-01", "2024-01-02"))

        result = detector.is_out_of_date(node, "")

        assert result is not None
        assert result.last_updated == "2024-01-05"

    @pytest.mark.parametrize("draft_updated", ["1999-01-01", "2024-01-01", "2999-12-31"])
    def test_never_published_is_stale(self, detector, make_node, draft_updated):
        """Test a draft without published stage is always stale."""
        node = make_node("1", draft_updated=draft_updated, published=None)

        result = detector.is_out_of_date(node, "")

        assert result is not None
        assert result.last_published is None
        assert result.last_updated == draft_updated

    def test_missing_published_at_is_stale(self, detector, make_node):
        """Test a published stage without publishedAt is treated as stale."""
        node = make_node("1", draft_updated="2024-01-01", published=("2024-01-01", None))

        assert detector.is_out_of_date(node, "") is not None

    def test_published_before_update_is_stale(self, detector, make_node):
        """Test publishedAt earlier than updatedAt is stale."""
        node = make_node(
            "1",
            draft_updated="2024-01-02T10:00:00.000Z",
            published=("2024-01-02T10:00:00.000Z", "2024-01-02T09:00:00.000Z"),
        )

        result = detector.is_out_of_date(node, "")

        assert result is not None
        assert result.last_published == "2024-01-02T09:00:00.000Z"

    def test_missing_draft_is_ignored(self, detector, make_node):
        """Test a node without DRAFT stage cannot be assessed."""
        node = make_node("1", draft_updated=None, published=None)

        assert detector.is_out_of_date(node, "") is None

    def test_missing_stage_list_is_ignored(self, detector):
        """Test a container without staging metadata is not a content node."""
        assert detector.is_out_of_date({"references": []}, "") is None
        assert detector.is_out_of_date({"id": "1", "documentInStages": None}, "") is None

    def test_malformed_stage_entries_are_ignored(self, detector):
        """Test unparseable staging data is tolerated silently."""
        node = {"id": "1", "documentInStages": [{"publishedAt": "2024-01-01"}]}

        assert detector.is_out_of_date(node, "") is None

    def test_record_fields(self, detector, make_node):
        """Test reported metadata comes from the node itself."""
        node = make_node("abc", typename="Article", title="Hello", published=None)

        result = detector.is_out_of_date(node, "/content/0")

        assert result.id == "abc"
        assert result.stage == "DRAFT"
        assert result.title == "Hello"
        assert result.typename == "Article"
        assert result.path == "/content/0"
        assert result.model_dump(by_alias=True) == {
            "id": "abc",
            "stage": "DRAFT",
            "__title": "Hello",
            "__typename": "Article",
            "lastUpdated": "2024-01-01",
            "lastPublished": None,
            "path": "/content/0",
        }

    def test_title_falls_back_to_id(self, detector, make_node):
        """Test a node without display title reports its id."""
        node = make_node("abc", published=None)
        del node["__title"]

        assert detector.is_out_of_date(node, "").title == "abc"

    def test_parsed_comparison_ignores_precision(self, make_node):
        """Test parsed mode treats equal instants with different precision as equal."""
        node = make_node(
            "1",
            draft_updated="2024-01-01T10:00:00Z",
            published=("2024-01-01T10:00:00.000+00:00", "2024-01-01T10:00:00.000Z"),
        )

        assert StalenessDetector("parsed").is_out_of_date(node, "") is None
        assert StalenessDetector("lexical").is_out_of_date(node, "") is not None

    def test_parsed_comparison_orders_timezones(self, make_node):
        """Test parsed mode compares instants, not strings."""
        node = make_node(
            "1",
            draft_updated="2024-01-01T12:00:00+02:00",
            published=("2024-01-01T12:00:00+02:00", "2024-01-01T10:30:00Z"),
        )

        # 10:30Z is after 10:00Z, though it sorts lexically before 12:00+02:00
        assert StalenessDetector("parsed").is_out_of_date(node, "") is None
        assert StalenessDetector("lexical").is_out_of_date(node, "") is not None

    def test_parsed_comparison_treats_naive_as_utc(self, make_node):
        node = make_node(
            "1",
            draft_updated="2024-01-01T10:00:00",
            published=("2024-01-01T10:00:00Z", "2024-01-01T09:00:00"),
        )

        result = StalenessDetector("parsed").is_out_of_date(node, "")

        assert result is not None
        assert result.last_published == "2024-01-01T09:00:00"


class TestTreeWalk:
    """Tests for walking the result tree."""

    def test_classify(self):
        assert classify([]) == NodeKind.SEQUENCE
        assert classify({"documentInStages": []}) == NodeKind.STAGING_CANDIDATE
        assert classify({"references": []}) == NodeKind.RECORD
        assert classify("text") == NodeKind.SCALAR
        assert classify(None) == NodeKind.SCALAR

    def test_stale_root(self, detector, make_node):
        """Test a stale root is reported with an empty path."""
        root = make_node(
            "p1", draft_updated="2024-01-02", published=("2024-01-01", "2024-01-01")
        )

        results = detector.find_stale(root)

        assert len(results) == 1
        assert results[0].path == ""
        assert results[0].last_updated == "2024-01-02"
        assert results[0].last_published == "2024-01-01"

    def test_nested_path(self, detector, make_node):
        """Test the path of a stale node inside a list inside an object."""
        tree = {
            "a": {
                "b": [
                    make_node("stale", published=None),
                    make_node("ok"),
                ]
            }
        }

        results = detector.find_stale(tree)

        assert [r.path for r in results] == ["/a/b/0"]
        assert results[0].id == "stale"

    def test_up_to_date_root_with_stale_content(self, detector, make_node):
        """Test only the nested stale node is reported."""
        root = make_node(
            "p1",
            content=[make_node("h1", typename="Hero", published=None)],
        )

        results = detector.find_stale(root)

        assert len(results) == 1
        assert results[0].path == "/content/0"
        assert results[0].typename == "Hero"

    def test_walk_descends_below_stale_nodes(self, detector, make_node):
        """Test nested nodes are checked even when their parent is stale."""
        root = make_node(
            "p1",
            published=None,
            body={
                "references": [
                    make_node("a1", typename="Asset"),
                    make_node("a2", typename="Asset", published=None),
                ]
            },
            parent=make_node("p0", published=None),
        )

        results = detector.find_stale(root)

        assert [(r.id, r.path) for r in results] == [
            ("p1", ""),
            ("a2", "/body/references/1"),
            ("p0", "/parent"),
        ]

    def test_empty_values_are_skipped(self, detector, make_node):
        """Test null and empty fields are not walked."""
        root = make_node("p1", parent=None, content=[], body={})

        assert detector.find_stale(root) == []

    def test_top_level_list(self, detector, make_node):
        """Test a list root is walked per index without evaluating the list."""
        results = detector.find_stale([make_node("1"), make_node("2", published=None)])

        assert [r.path for r in results] == ["/1"]


class TestDetectStale:
    """Tests for executing the checker query."""

    @pytest.mark.asyncio
    async def test_executes_checker_query(self, page_query, mock_executor, make_node):
        """Test the operation, name and variables sent to the executor."""
        mock_executor.execute.return_value = {"data": {"page": make_node("p1", published=None)}}

        results = await detect_stale(mock_executor, page_query, "p1")

        mock_executor.execute.assert_awaited_once_with(
            query=page_query.operation_text,
            operation_name="CheckPage",
            variables={"id": "p1"},
        )
        assert [r.id for r in results] == ["p1"]

    @pytest.mark.asyncio
    async def test_nothing_stale_returns_none(self, page_query, mock_executor, make_node):
        """Test an up-to-date tree yields None."""
        mock_executor.execute.return_value = {"data": {"page": make_node("p1")}}

        assert await detect_stale(mock_executor, page_query, "p1") is None

    @pytest.mark.asyncio
    async def test_missing_root_returns_none(self, page_query, mock_executor):
        """Test a root without DRAFT instance yields None."""
        mock_executor.execute.return_value = {"data": {"page": None}}

        assert await detect_stale(mock_executor, page_query, "missing") is None

    @pytest.mark.asyncio
    async def test_parsed_comparison(self, page_query, mock_executor, make_node):
        """Test the comparison mode is passed to the detector."""
        node = make_node(
            "p1",
            draft_updated="2024-01-01T10:00:00Z",
            published=("2024-01-01T10:00:00.000Z", "2024-01-01T10:00:00.000Z"),
        )
        mock_executor.execute.return_value = {"data": {"page": node}}

        assert await detect_stale(mock_executor, page_query, "p1", comparison="parsed") is None
        assert await detect_stale(mock_executor, page_query, "p1") is not None

    @pytest.mark.asyncio
    async def test_executor_failure_propagates(self, page_query, caplog):
        """Test transport failures are logged with the query and re-raised."""
        executor = AsyncMock()
        executor.execute = AsyncMock(side_effect=TransportError("Unauthorized", status_code=401))

        with pytest.raises(TransportError, match="Unauthorized"):
            await detect_stale(executor, page_query, "p1")

        assert "id=p1" in caplog.text
        assert "query CheckPage" in caplog.text
