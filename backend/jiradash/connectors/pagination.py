"""Offset pagination over Jira list endpoints.

Jira's search endpoints return pages shaped like ``{"isLast": bool,
"values": [...]}`` and take ``startAt``/``maxResults`` query parameters. One
loop serves every endpoint; what differs per endpoint lives in a
``PagedEndpoint``.
"""

import logging
import os
from dataclasses import dataclass
from typing import Generic, TypeVar

from pydantic import BaseModel, ValidationError

from jiradash.connectors.base import DecodeError, PaginationLimitError, StatusError
from jiradash.connectors.http import SYSTEM, JiraHttpClient, QueryParams
from jiradash.models.jira import FetchPage

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

# Configuration
DEFAULT_PAGE_SIZE = int(os.getenv("JIRA_PAGE_SIZE", "50"))
DEFAULT_MAX_PAGES = int(os.getenv("JIRA_MAX_PAGES", "1000"))


@dataclass(frozen=True)
class PagedEndpoint(Generic[T]):
    """Static description of a paginated list endpoint."""

    name: str
    path: str
    record_type: type[T]
    params: tuple[tuple[str, str], ...] = ()
    offset_param: str = "startAt"
    size_param: str = "maxResults"

    def page_params(self, offset: int, page_size: int) -> QueryParams:
        return [
            *self.params,
            (self.offset_param, str(offset)),
            (self.size_param, str(page_size)),
        ]


def decode_page(endpoint: PagedEndpoint[T], body: bytes) -> FetchPage[T]:
    """Decode one response body into a typed page.

    Raises:
        DecodeError: If the body is not JSON or not shaped like a page
    """
    try:
        return FetchPage[endpoint.record_type].model_validate_json(body)
    except ValidationError as e:
        raise DecodeError(
            f"Invalid page from {endpoint.path} ({endpoint.name}): {e}",
            system=SYSTEM,
        ) from e


async def fetch_all(
    client: JiraHttpClient,
    endpoint: PagedEndpoint[T],
    page_size: int = DEFAULT_PAGE_SIZE,
    max_pages: int = DEFAULT_MAX_PAGES,
) -> list[T]:
    """Fetch every page of an endpoint and concatenate the values in order.

    Pages are requested one after another with offsets 0, page_size,
    2 * page_size, ... until a page reports ``isLast``. Any failure aborts the
    whole call; pages already received are discarded.

    Args:
        client: Authenticated client for the site
        endpoint: Endpoint description
        page_size: Value sent as the page size parameter
        max_pages: Number of pages after which the loop gives up

    Returns:
        All records, in page order

    Raises:
        StatusError: If a page is answered with a non-200 status
        DecodeError: If a page body cannot be decoded
        NetworkError: If a request fails in transport
        PaginationLimitError: If ``max_pages`` pages arrive without ``isLast``
    """
    if page_size < 1:
        raise ValueError("page_size must be positive")
    if max_pages < 1:
        raise ValueError("max_pages must be positive")

    records: list[T] = []
    offset = 0
    for page_number in range(max_pages):
        status_code, body = await client.get(
            endpoint.path, endpoint.page_params(offset, page_size)
        )
        if status_code != 200:
            raise StatusError(
                f"Request for {endpoint.name} failed: {status_code} at {endpoint.path}",
                status_code=status_code,
                system=SYSTEM,
            )

        page = decode_page(endpoint, body)
        records.extend(page.values)
        logger.debug(
            f"Fetched {endpoint.name} page {page_number + 1} "
            f"(offset {offset}, {len(page.values)} records)"
        )
        if page.is_last:
            logger.info(f"Total {endpoint.name} fetched: {len(records)}")
            return records
        offset += page_size

    raise PaginationLimitError(
        f"Gave up on {endpoint.name} after {max_pages} pages without a last page",
        pages=max_pages,
        system=SYSTEM,
    )
