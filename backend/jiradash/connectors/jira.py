"""Jira Cloud connector for site configuration.

Knows which endpoints hold projects, workflows and statuses and how to query
them; the paging itself is delegated to ``fetch_all``.
"""

import logging
from collections.abc import Sequence
from typing import ClassVar

from jiradash.connectors.base import AuthenticationError
from jiradash.connectors.http import SYSTEM, JiraHttpClient
from jiradash.connectors.pagination import (
    DEFAULT_MAX_PAGES,
    DEFAULT_PAGE_SIZE,
    PagedEndpoint,
    fetch_all,
)
from jiradash.models.jira import Project, Status, Workflow

logger = logging.getLogger(__name__)

MYSELF_PATH = "/rest/api/3/myself"

WORKFLOW_EXPAND = ",".join(
    [
        "transitions",
        "transitions.rules",
        "transitions.properties",
        "statuses",
        "statuses.properties",
        "default",
        "schemes",
        "projects",
        "hasDraftWorkflow",
        "operations",
    ]
)

STATUSES_ENDPOINT = PagedEndpoint(
    name="statuses",
    path="/rest/api/3/statuses/search",
    record_type=Status,
)

PROJECTS_ENDPOINT = PagedEndpoint(
    name="projects",
    path="/rest/api/2/project/search",
    record_type=Project,
)


def workflows_endpoint(
    names: Sequence[str] = (),
    query: str | None = None,
    order_by: str | None = "name",
    expand: str = WORKFLOW_EXPAND,
) -> PagedEndpoint[Workflow]:
    """Build the workflow search endpoint for the given filters.

    Args:
        names: Workflow names to restrict to (sent as repeated ``workflowName``)
        query: Optional free-text ``queryString``
        order_by: Sort field, e.g. ``name``, ``created`` or ``updated``
        expand: Nested objects to include in each workflow
    """
    params: list[tuple[str, str]] = [("expand", expand)]
    params.extend(("workflowName", name) for name in names)
    if query:
        params.append(("queryString", query))
    if order_by:
        params.append(("orderBy", order_by))
    return PagedEndpoint(
        name="workflows",
        path="/rest/api/3/workflow/search",
        record_type=Workflow,
        params=tuple(params),
    )


class JiraConnector:
    """Reads configuration from one Jira site."""

    system: ClassVar[str] = SYSTEM

    def __init__(
        self,
        client: JiraHttpClient,
        page_size: int = DEFAULT_PAGE_SIZE,
        max_pages: int = DEFAULT_MAX_PAGES,
    ) -> None:
        self._client = client
        self.page_size = page_size
        self.max_pages = max_pages

    async def check_identity(self) -> None:
        """Verify the credentials by asking the site who we are.

        Raises:
            AuthenticationError: If the site does not answer 200
            NetworkError: If the site cannot be reached
        """
        status_code, _ = await self._client.get(MYSELF_PATH)
        if status_code != 200:
            raise AuthenticationError(
                f"Connection test against {self._client.domain} failed with status {status_code}",
                status_code=status_code,
                system=self.system,
            )
        logger.info(f"Connection test against {self._client.domain} succeeded")

    async def fetch_statuses(self) -> list[Status]:
        return await fetch_all(
            self._client, STATUSES_ENDPOINT, self.page_size, self.max_pages
        )

    async def fetch_projects(self) -> list[Project]:
        return await fetch_all(
            self._client, PROJECTS_ENDPOINT, self.page_size, self.max_pages
        )

    async def fetch_workflows(
        self,
        names: Sequence[str] = (),
        query: str | None = None,
        order_by: str | None = "name",
    ) -> list[Workflow]:
        """Fetch workflows with their transitions, optionally filtered."""
        endpoint = workflows_endpoint(names=names, query=query, order_by=order_by)
        return await fetch_all(self._client, endpoint, self.page_size, self.max_pages)
