"""Connectors for reading configuration from Jira Cloud sites."""

from jiradash.connectors.base import (
    AuthenticationError,
    ConnectorError,
    DecodeError,
    NetworkError,
    PaginationLimitError,
    StatusError,
)
from jiradash.connectors.http import ClientFactory, JiraHttpClient
from jiradash.connectors.jira import JiraConnector
from jiradash.connectors.pagination import PagedEndpoint, fetch_all

__all__ = [
    "AuthenticationError",
    "ClientFactory",
    "ConnectorError",
    "DecodeError",
    "JiraConnector",
    "JiraHttpClient",
    "NetworkError",
    "PagedEndpoint",
    "PaginationLimitError",
    "StatusError",
    "fetch_all",
]
