"""Pydantic models for the saved-connection registry.

A connection is a set of Jira Cloud credentials (site URL, account email and
API token). The registry keeps an ordered list of them, the index of the one
used for syncing, and whether that one was last verified reachable.
"""

from pydantic import AliasChoices, BaseModel, Field, model_validator


class Connection(BaseModel):
    """Credentials for one Jira site and account."""

    domain: str = Field(..., min_length=1, description="Site URL, e.g. https://acme.atlassian.net")
    email: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("email", "correo"),
        description="Account email",
    )
    token: str = Field(..., min_length=1, description="API token")

    def matches(self, domain: str, email: str) -> bool:
        """Check whether this entry belongs to the given site and account."""
        return self.domain == domain and self.email == email

    def masked(self) -> "ConnectionInfo":
        return ConnectionInfo(
            domain=self.domain,
            email=self.email,
            token_hint=mask_token(self.token),
        )


class ConnectionRegistry(BaseModel):
    """The persisted registry document."""

    connections: list[Connection] = Field(default_factory=list)
    current: int = -1
    active: bool = False

    @model_validator(mode="after")
    def _check_current(self) -> "ConnectionRegistry":
        if self.current != -1 and not 0 <= self.current < len(self.connections):
            raise ValueError(
                f"current index {self.current} is out of range for "
                f"{len(self.connections)} connection(s)"
            )
        return self

    def find(self, domain: str, email: str) -> int:
        """Return the index of the entry for ``(domain, email)`` or -1."""
        for index, connection in enumerate(self.connections):
            if connection.matches(domain, email):
                return index
        return -1

    def current_connection(self) -> Connection | None:
        if 0 <= self.current < len(self.connections):
            return self.connections[self.current]
        return None


def mask_token(token: str) -> str:
    """Hide all but the last four characters of a token."""
    if len(token) <= 4:
        return "*" * len(token)
    return "*" * 8 + token[-4:]


# ==================== Request/Response Models ====================


class ConnectionTestRequest(BaseModel):
    """Request to verify credentials and save them."""

    domain: str = Field(..., min_length=1)
    email: str = Field(..., min_length=1, validation_alias=AliasChoices("email", "correo"))
    token: str = Field(..., min_length=1)


class ConnectionTestResponse(BaseModel):
    """Result of a successful connection test."""

    created: bool
    message: str


class ConnectionInfo(BaseModel):
    """A connection as exposed by the API (token masked)."""

    domain: str
    email: str
    token_hint: str


class ConnectionsResponse(BaseModel):
    """The registry as exposed by the API."""

    connections: list[ConnectionInfo]
    current: int
    active: bool

    @classmethod
    def from_registry(cls, registry: ConnectionRegistry) -> "ConnectionsResponse":
        return cls(
            connections=[connection.masked() for connection in registry.connections],
            current=registry.current,
            active=registry.active,
        )


class ConnectionStatusResponse(ConnectionsResponse):
    """Registry plus the connection currently selected for syncing."""

    current_connection: ConnectionInfo | None = None
