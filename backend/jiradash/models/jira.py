"""Pydantic models for Jira configuration records.

Field names follow Python conventions; the Jira wire names (``isLast``,
``projectCategory``, ``from``) are mapped with aliases so that records decode
straight from API responses and serialize back to the same shape.
"""

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T", bound=BaseModel)


class JiraRecord(BaseModel):
    """Base class for records read from Jira list endpoints."""

    model_config = ConfigDict(populate_by_name=True)

    def to_document(self) -> dict[str, Any]:
        """Serialize using Jira field names, dropping unset optional fields."""
        return self.model_dump(by_alias=True, exclude_none=True)


class ProjectCategory(JiraRecord):
    """Category a project is filed under."""

    name: str


class Project(JiraRecord):
    """A Jira project as returned by the project search endpoint."""

    key: str
    name: str
    category: ProjectCategory | None = Field(None, alias="projectCategory")


class Status(JiraRecord):
    """A Jira issue status."""

    id: str
    name: str
    description: str | None = None


class WorkflowId(JiraRecord):
    """Identifier block of a workflow."""

    name: str


class Transition(JiraRecord):
    """A workflow transition between statuses.

    An empty ``from_statuses`` list means the transition is global (it can be
    taken from any status).
    """

    from_statuses: list[str] = Field(default_factory=list, alias="from")
    to: str


class Workflow(JiraRecord):
    """A workflow and its transitions."""

    id: WorkflowId
    transitions: list[Transition] = Field(default_factory=list)


class FetchPage(BaseModel, Generic[T]):
    """One page of a paginated list endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    is_last: bool = Field(..., alias="isLast")
    values: list[T] = Field(default_factory=list)
