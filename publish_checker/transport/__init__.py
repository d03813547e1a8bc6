"""GraphQL transport for the publish checker."""

from publish_checker.transport.base_executor import QueryExecutor
from publish_checker.transport.executor_factory import create_executor
from publish_checker.transport.http_executor import HttpQueryExecutor

__all__ = [
    "QueryExecutor",
    "HttpQueryExecutor",
    "create_executor",
]
