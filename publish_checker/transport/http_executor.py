"""
HTTP GraphQL executor using bearer-token authorization.
"""

import logging
import time
from typing import Any

import httpx

from publish_checker.exceptions import GraphQLExecutionError, TransportError
from publish_checker.transport.base_executor import QueryExecutor

logger = logging.getLogger(__name__)


class HttpQueryExecutor(QueryExecutor):
    """Executes GraphQL operations with a JSON POST against a single endpoint."""

    def __init__(
        self,
        endpoint: str,
        auth_token: str,
        timeout: float = 30.0,
    ):
        """
        Initialize HTTP executor.

        Args:
            endpoint: GraphQL endpoint URL
            auth_token: Bearer token sent with every request
            timeout: Request timeout in seconds
        """
        super().__init__(endpoint, timeout)
        self.auth_token = auth_token

    def _headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.auth_token}",
        }

    async def execute(
        self,
        query: str,
        operation_name: str,
        variables: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """
        POST a GraphQL operation and decode the result.

        Args:
            query: GraphQL document text
            operation_name: Operation to run
            variables: Operation variables (defaults to empty)

        Returns:
            dict: Execution result

        Raises:
            TransportError: Network failure or non-success HTTP status
            GraphQLExecutionError: Result carries errors and no data
        """
        payload = {
            "query": query,
            "variables": variables or {},
            "operationName": operation_name,
        }
        start_time = time.time()

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(self.endpoint, json=payload, headers=self._headers())
        except httpx.HTTPError as e:
            raise TransportError(f"Request to {self.endpoint} failed: {e}") from e

        latency_ms = int((time.time() - start_time) * 1000)

        if not response.is_success:
            body = response.text
            logger.warning(body)
            raise TransportError(
                response.reason_phrase or f"HTTP {response.status_code}",
                status_code=response.status_code,
                body=body,
            )

        try:
            result = response.json()
        except ValueError as e:
            raise TransportError(
                f"Invalid JSON response from {self.endpoint}",
                status_code=response.status_code,
                body=response.text,
            ) from e

        if not isinstance(result, dict):
            raise TransportError(
                f"Unexpected response shape from {self.endpoint}: expected a JSON object",
                status_code=response.status_code,
                body=response.text,
            )

        errors = result.get("errors")
        if errors and not isinstance(errors, list):
            errors = [errors]
        if errors:
            if result.get("data") is None:
                first = errors[0]
                message = first.get("message") if isinstance(first, dict) else None
                raise GraphQLExecutionError(
                    f"{operation_name} failed: {message or first}",
                    errors=errors,
                )
            logger.warning(f"{operation_name} returned {len(errors)} error(s) with partial data")

        logger.debug(f"{operation_name} completed in {latency_ms}ms")
        return result
