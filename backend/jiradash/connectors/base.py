"""Errors raised while talking to a remote Jira site.

Every failure is raised to the caller as soon as it happens; nothing here
retries or returns partial results.
"""

from typing import Any


class ConnectorError(Exception):
    """Base exception for connector errors."""

    def __init__(self, message: str, system: str | None = None, retriable: bool = False):
        super().__init__(message)
        self.system = system
        self.retriable = retriable


class NetworkError(ConnectorError):
    """The remote site could not be reached (DNS, connect, timeout...)."""

    def __init__(self, message: str, **kwargs: Any):
        kwargs.setdefault("retriable", True)
        super().__init__(message, **kwargs)


class StatusError(ConnectorError):
    """The remote site answered with a non-success status code."""

    def __init__(self, message: str, status_code: int, **kwargs: Any):
        super().__init__(message, **kwargs)
        self.status_code = status_code


class DecodeError(ConnectorError):
    """The response body is not JSON of the expected shape."""

    pass


class AuthenticationError(ConnectorError):
    """The identity check against the site failed."""

    def __init__(self, message: str, status_code: int | None = None, **kwargs: Any):
        super().__init__(message, **kwargs)
        self.status_code = status_code


class PaginationLimitError(ConnectorError):
    """A list endpoint kept returning pages past the configured limit."""

    def __init__(self, message: str, pages: int, **kwargs: Any):
        super().__init__(message, **kwargs)
        self.pages = pages
