"""Authenticated HTTP access to a Jira Cloud site.

Wraps ``httpx.AsyncClient`` with Basic authentication built from the account
email and API token. Callers get the raw status code and body back and decide
what counts as success.
"""

import base64
import logging
import os
from collections.abc import Callable, Sequence
from types import TracebackType

import httpx

from jiradash.connectors.base import NetworkError

logger = logging.getLogger(__name__)

SYSTEM = "jira"

# Configuration
REQUEST_TIMEOUT_SECONDS = float(os.getenv("JIRA_TIMEOUT_SECONDS", "30"))

QueryParams = Sequence[tuple[str, str]]


def basic_auth_header(email: str, token: str) -> str:
    """Build the value of the ``Authorization`` header."""
    credentials = f"{email}:{token}".encode("utf-8")
    return "Basic " + base64.b64encode(credentials).decode("ascii")


class JiraHttpClient:
    """Performs authenticated GET requests against one Jira site.

    Use as an async context manager so the underlying connection pool is
    closed when the work is done:

        async with JiraHttpClient(domain, email, token) as client:
            status, body = await client.get("/rest/api/3/myself")
    """

    def __init__(
        self,
        domain: str,
        email: str,
        token: str,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            domain: Base URL of the site, e.g. ``https://acme.atlassian.net``
            email: Account email
            token: API token
            timeout: Per-request deadline in seconds
            transport: Optional httpx transport (used by tests)

        Raises:
            NetworkError: If the domain is not a usable URL
        """
        self.domain = domain
        try:
            self._client = httpx.AsyncClient(
                base_url=domain,
                headers={
                    "Authorization": basic_auth_header(email, token),
                    "Accept": "application/json",
                },
                timeout=timeout if timeout is not None else REQUEST_TIMEOUT_SECONDS,
                transport=transport,
            )
        except httpx.InvalidURL as e:
            raise NetworkError(
                f"Invalid site URL {domain!r}: {e}", system=SYSTEM, retriable=False
            ) from e

    async def get(self, path: str, params: QueryParams = ()) -> tuple[int, bytes]:
        """Issue one GET request.

        ``params`` is a sequence of pairs so the same name may repeat.

        Raises:
            NetworkError: If the request could not be completed
        """
        try:
            response = await self._client.get(path, params=list(params))
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise NetworkError(
                f"Request to {self.domain}{path} failed: {e}",
                system=SYSTEM,
            ) from e
        logger.debug(f"GET {path} -> {response.status_code}")
        return response.status_code, response.content

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "JiraHttpClient":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()


# Builds a client from (domain, email, token); swapped out in tests.
ClientFactory = Callable[[str, str, str], JiraHttpClient]
