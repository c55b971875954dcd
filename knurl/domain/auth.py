"""
Authentication configuration and the headers/query/cookies/body fields it produces.

Credentials are nested under a key named after the tag, matching the desktop
client's documents:

    {"type": "bearer", "bearer": {"token": "...", "placement": {"type": "header"}}}
    {"type": "apiKey", "apiKey": {"key": "...", "value": "...", "placement": {...}}}
"""

from typing import Annotated, Literal, Union

from pydantic import Discriminator, Field

from .types import ContractModel


# =============================================================================
# Placement
# =============================================================================

class HeaderPlacement(ContractModel):
    type: Literal["header"] = "header"
    name: str = "Authorization"


class QueryPlacement(ContractModel):
    type: Literal["query"] = "query"
    name: str = ""


class CookiePlacement(ContractModel):
    type: Literal["cookie"] = "cookie"
    name: str = ""


class BodyPlacement(ContractModel):
    """Injects the credential as a form field (url-encoded or multipart only)."""
    type: Literal["body"] = "body"
    field_name: str = ""
    content_type: str = ""


AuthPlacement = Annotated[
    Union[HeaderPlacement, QueryPlacement, CookiePlacement, BodyPlacement],
    Discriminator("type"),
]


# =============================================================================
# Credentials
# =============================================================================

class BasicCredentials(ContractModel):
    username: str | None = None
    password: str | None = None


class BearerCredentials(ContractModel):
    token: str | None = None
    # Authorization scheme for header placement; blank means "Bearer"
    scheme: str | None = None
    placement: AuthPlacement | None = None


class ApiKeyCredentials(ContractModel):
    # Display label; the sent name comes from the placement
    key: str | None = None
    value: str | None = None
    placement: AuthPlacement | None = None


# =============================================================================
# Auth config variants
# =============================================================================

class NoAuth(ContractModel):
    """No authentication."""
    type: Literal["none"] = "none"


class InheritAuth(ContractModel):
    """Use the owning collection's authentication."""
    type: Literal["inherit"] = "inherit"


class BasicAuth(ContractModel):
    """HTTP basic authentication."""
    type: Literal["basic"] = "basic"

    basic: BasicCredentials = Field(default_factory=BasicCredentials)


class BearerAuth(ContractModel):
    """A token sent in a header (default), query parameter, cookie or form field."""
    type: Literal["bearer"] = "bearer"

    bearer: BearerCredentials = Field(default_factory=BearerCredentials)


class ApiKeyAuth(ContractModel):
    """An API key value placed in a header, query parameter, cookie or form field."""
    type: Literal["apiKey"] = "apiKey"

    api_key: ApiKeyCredentials = Field(default_factory=ApiKeyCredentials)


AuthConfig = Annotated[
    Union[NoAuth, InheritAuth, BasicAuth, BearerAuth, ApiKeyAuth],
    Discriminator("type"),
]


class AuthResult(ContractModel):
    """Credentials to merge into the outgoing request."""

    headers: dict[str, str] = Field(default_factory=dict)
    query: dict[str, str] = Field(default_factory=dict)
    cookies: dict[str, str] = Field(default_factory=dict)
    # Form fields, injected into url-encoded or multipart bodies
    body: dict[str, str] = Field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not (self.headers or self.query or self.cookies or self.body)
