"""
Base GraphQL executor with async interface.
"""

from abc import ABC, abstractmethod
from typing import Any


class QueryExecutor(ABC):
    """Abstract base class for GraphQL executors."""

    def __init__(self, endpoint: str, timeout: float):
        """
        Initialize executor.

        Args:
            endpoint: GraphQL endpoint URL
            timeout: Request timeout in seconds
        """
        self.endpoint = endpoint
        self.timeout = timeout

    @abstractmethod
    async def execute(
        self,
        query: str,
        operation_name: str,
        variables: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """
        Execute a GraphQL operation.

        Args:
            query: GraphQL document text
            operation_name: Name of the operation to run inside the document
            variables: Operation variables

        Returns:
            dict: Decoded execution result (``data`` and optionally ``errors``)

        Raises:
            TransportError: Request failed
        """
        pass
