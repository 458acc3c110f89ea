"""Models for syncing Jira configuration into per-site documents."""

from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, Field

# Top-level key -> stored value. Keys not known to this version are kept as-is.
SyncDocument = dict[str, Any]


class SyncCategory(str, Enum):
    """Categories that can be synced. Values are the document keys."""

    STATUSES = "estados"
    PROJECTS = "proyectos"
    WORKFLOWS = "workflows"


# Fetch order within one sync
CATEGORY_ORDER = (SyncCategory.STATUSES, SyncCategory.PROJECTS, SyncCategory.WORKFLOWS)


class SyncRequest(BaseModel):
    """Request payload from the dashboard.

    ``domain``/``email``/``token`` are optional. The sync always runs against
    the registry's current connection; when ``domain`` or ``email`` are sent
    they must match it.
    """

    domain: str | None = None
    email: str | None = Field(None, validation_alias=AliasChoices("email", "correo"))
    token: str | None = None
    proyectos: bool = False
    workflows: bool = False
    estados: bool = False

    def categories(self) -> set[SyncCategory]:
        """Return the categories flagged in the request."""
        selected = set()
        if self.proyectos:
            selected.add(SyncCategory.PROJECTS)
        if self.workflows:
            selected.add(SyncCategory.WORKFLOWS)
        if self.estados:
            selected.add(SyncCategory.STATUSES)
        return selected
