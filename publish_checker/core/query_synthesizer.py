"""
Schema-driven checker query synthesis.

Walks the schema type graph from a root content type and builds one
GraphQL document that fetches the staging metadata of the root instance
and of every content node reachable from it through object, list and
union fields.

Each recursive call returns its own Selection (lines + referenced stage
fragments) which the caller merges, so sibling branches never observe
each other's progress. Only the set of explored types is path scoped:
it is extended on the way down and never shared between branches.
"""

import logging
from dataclasses import dataclass, field, replace

from graphql import (
    GraphQLObjectType,
    GraphQLOutputType,
    GraphQLSchema,
    is_list_type,
    is_non_null_type,
    is_object_type,
    is_union_type,
)

from publish_checker.config.checker_config import ExplorationSettings
from publish_checker.core.models import SynthesizedQuery
from publish_checker.core.schema_loader import find_content_types, introspect_schema
from publish_checker.exceptions import MissingFragmentError
from publish_checker.transport.base_executor import QueryExecutor

logger = logging.getLogger(__name__)

INDENT = "  "


def camelize(name: str) -> str:
    """Turn a type name into its single-instance query field (``BlogPost`` -> ``blogPost``)."""
    words = name.split()
    if not words:
        return ""
    first, rest = words[0], words[1:]
    return first[:1].lower() + first[1:] + "".join(word[:1].upper() + word[1:] for word in rest)


def get_title_field(type_: GraphQLObjectType, candidates: list[str]) -> str:
    """Pick the first display-title field the type defines, falling back to ``id``."""
    for candidate in candidates:
        if candidate in type_.fields:
            return candidate
    return "id"


def build_stage_fragment(type_: GraphQLObjectType, title_fields: list[str]) -> str:
    """Render the ``<Type>Stages`` fragment selecting a node's staging metadata."""
    name = type_.name
    return "\n".join(
        [
            f"fragment {name}Stages on {name} {{",
            f"{INDENT}id",
            f"{INDENT}stage",
            f"{INDENT}__title: {get_title_field(type_, title_fields)}",
            f"{INDENT}__typename",
            f"{INDENT}documentInStages(includeCurrent: true) {{",
            f"{INDENT * 2}stage",
            f"{INDENT * 2}publishedAt",
            f"{INDENT * 2}updatedAt",
            f"{INDENT}}}",
            "}",
        ]
    )


@dataclass(frozen=True)
class ExplorationState:
    """Path-scoped traversal state; derived copies are handed to child calls."""

    explored_types: frozenset[str] = frozenset()
    level: int = 0

    def indented(self) -> "ExplorationState":
        return replace(self, level=self.level + 1)

    def exploring(self, type_name: str) -> "ExplorationState":
        return replace(self, explored_types=self.explored_types | {type_name})


@dataclass
class Selection:
    """Query lines and referenced stage fragments produced by one branch."""

    lines: list[str] = field(default_factory=list)
    used_stages: list[str] = field(default_factory=list)

    def add_line(self, level: int, text: str) -> None:
        self.lines.append(f"{INDENT * level}{text}")

    def use(self, type_name: str) -> None:
        if type_name not in self.used_stages:
            self.used_stages.append(type_name)

    def merge(self, other: "Selection") -> None:
        self.lines.extend(other.lines)
        for type_name in other.used_stages:
            self.use(type_name)


class QuerySynthesizer:
    """Builds checker queries for the content types of one schema."""

    def __init__(self, schema: GraphQLSchema, settings: ExplorationSettings | None = None):
        """
        Initialize synthesizer.

        Args:
            schema: Client schema of the content API
            settings: Exploration settings (defaults match common content models)

        Raises:
            SchemaIntrospectionError: Schema lacks the content node interface
        """
        self.schema = schema
        self.settings = settings or ExplorationSettings()
        self.content_types = find_content_types(
            schema, self.settings.node_interface, self.settings.excluded_types
        )
        self._ignored_fields = frozenset(self.settings.ignored_fields)
        logger.debug(f"Found {len(self.content_types)} content types")

    def build_stage_fragments(self) -> dict[str, str]:
        """Stage fragment text for every content type, keyed by type name."""
        return {
            name: build_stage_fragment(type_, self.settings.title_fields)
            for name, type_ in self.content_types.items()
        }

    def plural_field_name(self, type_: GraphQLObjectType) -> str:
        """Find the query root field returning ``[<Type>!]!``; fall back to the type name."""
        query_type = self.schema.query_type
        if query_type is not None:
            expected = f"[{type_.name}!]!"
            for field_name, query_field in query_type.fields.items():
                if str(query_field.type) == expected:
                    return field_name
        return type_.name

    def _explorable_type(self, type_name: str) -> GraphQLObjectType | None:
        content_type = self.content_types.get(type_name)
        if content_type is not None:
            return content_type

        if type_name.endswith(self.settings.rich_text_suffix):
            detail = self.schema.get_type(type_name)
            if is_object_type(detail):
                return detail
        return None

    def _skip_field(self, field_name: str) -> bool:
        return field_name in self._ignored_fields or field_name.startswith(
            self.settings.related_field_prefix
        )

    def expand_type(self, state: ExplorationState, type_: GraphQLObjectType) -> Selection:
        """Select the explorable fields of a type, unless it is already on the current path."""
        selection = Selection()
        if type_.name in state.explored_types:
            return selection

        details = self._explorable_type(type_.name)
        if details is None:
            return selection

        child_state = state.exploring(type_.name)
        for field_name, type_field in details.fields.items():
            if self._skip_field(field_name):
                continue
            selection.merge(self.walk_type(child_state, field_name, type_field.type, True))
        return selection

    def walk_type(
        self,
        state: ExplorationState,
        name: str,
        type_: GraphQLOutputType,
        show_name: bool,
    ) -> Selection:
        """Select one field, unwrapping list and non-null wrappers."""
        if is_non_null_type(type_) or is_list_type(type_):
            return self.walk_type(state, name, type_.of_type, True)

        selection = Selection()
        inner = state.indented() if show_name else state

        if is_union_type(type_):
            members = [member for member in type_.types if member.name in self.content_types]
            if not members:
                return selection

            if show_name:
                selection.add_line(state.level, f"{name} {{")
            for member in members:
                selection.add_line(inner.level, f"... on {member.name} {{")
                selection.merge(self.walk_type(inner.indented(), name, member, False))
                selection.add_line(inner.level, "}")
            if show_name:
                selection.add_line(state.level, "}")
            return selection

        if is_object_type(type_):
            if self._explorable_type(type_.name) is None:
                logger.debug(f"Skipping field '{name}' of unsupported type {type_.name}")
                return selection

            body = Selection()
            if type_.name in self.content_types:
                body.use(type_.name)
                body.add_line(inner.level, f"...{type_.name}Stages")
            body.merge(self.expand_type(inner, type_))

            # Rich text without content references would be an empty selection set
            if not body.lines:
                return selection

            if show_name:
                selection.add_line(state.level, f"{name} {{")
            selection.merge(body)
            if show_name:
                selection.add_line(state.level, "}")

        return selection

    def synthesize(self, type_name: str) -> SynthesizedQuery | None:
        """
        Build the checker document for a root content type.

        Args:
            type_name: API identifier of the root content type

        Returns:
            SynthesizedQuery, or None if the type is not a content type

        Raises:
            MissingFragmentError: A referenced type has no stage fragment (strict mode)
        """
        root = self.content_types.get(type_name)
        if root is None:
            logger.warning(f"'{type_name}' is not a content type of this schema")
            return None

        fragments = self.build_stage_fragments()
        explored = frozenset(self.settings.default_explored_types) - {type_name}
        state = ExplorationState(explored_types=explored, level=1)

        checker = Selection()
        checker.use(type_name)
        checker.add_line(1, f"...{type_name}Stages")
        checker.merge(self.expand_type(state, root))

        camel = camelize(type_name)
        operation_name = f"Check{type_name}"
        blocks = [
            "\n".join([f"fragment {type_name}Checker on {type_name} {{", *checker.lines, "}"]),
            "\n".join(
                [
                    f"query {operation_name}($id: ID) {{",
                    f"{INDENT}{camel}(where: {{id: $id}}, stage: DRAFT) {{",
                    f"{INDENT * 2}...{type_name}Checker",
                    f"{INDENT}}}",
                    "}",
                ]
            ),
        ]

        for used in checker.used_stages:
            fragment = fragments.get(used)
            if fragment is None:
                if self.settings.strict_fragments:
                    raise MissingFragmentError(used)
                logger.warning(f"No stage fragment for {used}, dropping it")
                continue
            blocks.append(fragment)

        logger.info(
            f"Synthesized {operation_name} referencing {len(checker.used_stages)} content types"
        )

        return SynthesizedQuery(
            type_name=type_name,
            operation_name=operation_name,
            operation_text="\n\n".join(blocks),
            used_stages=checker.used_stages,
            plural_field_name=self.plural_field_name(root),
            camel_field_name=camel,
        )


def synthesize(
    schema: GraphQLSchema,
    type_name: str,
    settings: ExplorationSettings | None = None,
) -> SynthesizedQuery | None:
    """Build the checker document for ``type_name`` in ``schema``."""
    return QuerySynthesizer(schema, settings).synthesize(type_name)


async def explore(
    executor: QueryExecutor,
    type_name: str,
    settings: ExplorationSettings | None = None,
) -> SynthesizedQuery | None:
    """
    Introspect the executor's endpoint and synthesize the checker for ``type_name``.

    Returns:
        SynthesizedQuery, or None if the type is not a content type

    Raises:
        TransportError: Introspection request failed
        SchemaIntrospectionError: Schema cannot be built or lacks the content interface
    """
    logger.info(f"Exploring model {type_name}")
    schema = await introspect_schema(executor)
    return synthesize(schema, type_name, settings)
