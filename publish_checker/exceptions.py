"""
Custom exceptions for the publish checker.
"""


class CheckerError(Exception):
    """Base exception for publish checker errors."""

    pass


class ConfigError(CheckerError):
    """Exception raised when checker configuration is invalid."""

    pass


class TransportError(CheckerError):
    """Exception raised when a GraphQL request fails at the HTTP level."""

    def __init__(self, message: str, status_code: int | None = None, body: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class GraphQLExecutionError(TransportError):
    """Exception raised when the API answers with errors and no data."""

    def __init__(self, message: str, errors: list[dict] | None = None):
        super().__init__(message)
        self.errors = errors or []


class SchemaIntrospectionError(CheckerError):
    """Exception raised when the schema cannot be built or lacks the content interface."""

    pass


class MissingFragmentError(CheckerError):
    """Exception raised when a referenced content type has no stage fragment."""

    def __init__(self, type_name: str):
        super().__init__(f"Missing stage fragment for type '{type_name}'")
        self.type_name = type_name
