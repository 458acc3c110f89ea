"""Pydantic models for jiradash."""

from jiradash.models.connection import (
    Connection,
    ConnectionInfo,
    ConnectionRegistry,
    ConnectionsResponse,
    ConnectionStatusResponse,
    ConnectionTestRequest,
    ConnectionTestResponse,
)
from jiradash.models.jira import (
    FetchPage,
    Project,
    ProjectCategory,
    Status,
    Transition,
    Workflow,
    WorkflowId,
)
from jiradash.models.sync import CATEGORY_ORDER, SyncCategory, SyncDocument, SyncRequest

__all__ = [
    # Connections
    "Connection",
    "ConnectionInfo",
    "ConnectionRegistry",
    "ConnectionsResponse",
    "ConnectionStatusResponse",
    "ConnectionTestRequest",
    "ConnectionTestResponse",
    # Jira records
    "FetchPage",
    "Project",
    "ProjectCategory",
    "Status",
    "Transition",
    "Workflow",
    "WorkflowId",
    # Sync
    "CATEGORY_ORDER",
    "SyncCategory",
    "SyncDocument",
    "SyncRequest",
]
