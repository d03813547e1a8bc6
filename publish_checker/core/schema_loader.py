"""
Schema loading for the publish checker.

Builds a navigable GraphQLSchema either from a live introspection query
executed through a QueryExecutor, or from a local SDL / introspection dump.
"""

import json
import logging
from pathlib import Path
from typing import Any

from graphql import (
    GraphQLObjectType,
    GraphQLSchema,
    build_client_schema,
    build_schema,
    get_introspection_query,
    is_abstract_type,
)
from graphql.error import GraphQLError

from publish_checker.exceptions import SchemaIntrospectionError
from publish_checker.transport.base_executor import QueryExecutor

logger = logging.getLogger(__name__)

INTROSPECTION_OPERATION = "IntrospectionQuery"


def schema_from_introspection(introspection: dict[str, Any]) -> GraphQLSchema:
    """
    Convert an introspection result into a client schema.

    Accepts either the bare ``{"__schema": ...}`` payload or a full
    execution result with a ``data`` envelope.
    """
    if "data" in introspection and "__schema" not in introspection:
        introspection = introspection["data"] or {}

    if "__schema" not in introspection:
        raise SchemaIntrospectionError("Introspection result has no __schema entry")

    try:
        return build_client_schema(introspection)
    except (GraphQLError, TypeError) as e:
        raise SchemaIntrospectionError(f"Invalid introspection result: {e}") from e


async def introspect_schema(executor: QueryExecutor) -> GraphQLSchema:
    """
    Fetch the schema of the executor's endpoint.

    Raises:
        SchemaIntrospectionError: The result cannot be converted
        TransportError: The request failed
    """
    result = await executor.execute(
        query=get_introspection_query(),
        operation_name=INTROSPECTION_OPERATION,
        variables={},
    )
    schema = schema_from_introspection(result.get("data") or {})
    logger.info(f"Introspected schema with {len(schema.type_map)} types")
    return schema


def load_schema_file(schema_path: str | Path) -> GraphQLSchema:
    """
    Load a schema from an SDL file (.graphql/.gql) or a JSON introspection dump.

    Raises:
        FileNotFoundError: Schema file does not exist
        SchemaIntrospectionError: File content is not a valid schema
    """
    path = Path(schema_path)
    if not path.exists():
        raise FileNotFoundError(f"Schema file not found: {path}")

    text = path.read_text(encoding="utf-8")

    if path.suffix == ".json":
        try:
            schema = schema_from_introspection(json.loads(text))
        except json.JSONDecodeError as e:
            raise SchemaIntrospectionError(f"Invalid JSON in {path}: {e}") from e
    else:
        try:
            schema = build_schema(text)
        except GraphQLError as e:
            raise SchemaIntrospectionError(f"Invalid SDL in {path}: {e}") from e

    logger.info(f"Loaded schema from {path} with {len(schema.type_map)} types")
    return schema


def find_content_types(
    schema: GraphQLSchema,
    interface_name: str = "Node",
    excluded_types: list[str] | None = None,
) -> dict[str, GraphQLObjectType]:
    """
    Map the name of every content node type to its schema object.

    Content nodes are the object types implementing ``interface_name``,
    minus administrative types such as ``User``.
    """
    interface = schema.get_type(interface_name)
    if interface is None or not is_abstract_type(interface):
        raise SchemaIntrospectionError(f"Schema has no '{interface_name}' interface")

    excluded = set(excluded_types or [])
    return {
        possible.name: possible
        for possible in schema.get_possible_types(interface)
        if possible.name not in excluded
    }
