"""
Request contract - what the user authored in the request editor.

Strings in url, param values and text body content may contain
{{variableName}} placeholders; they are resolved by the pipeline, not here.
"""

from collections.abc import Mapping
from typing import Any, Literal

from pydantic import Field, field_validator

from .auth import AuthConfig, NoAuth
from .types import CollectionId, ContractModel, RequestId

HttpMethod = Literal["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS", "TRACE"]
RequestBodyType = Literal["none", "form", "text", "binary"]
RequestBodyLanguage = Literal["json", "yaml", "xml", "html", "graphql", "javascript", "text", "css"]
FormEncoding = Literal["url", "multipart", "plain"]
RequestProtocol = Literal["http", "websocket"]
HttpVersion = Literal["auto", "http1", "http2"]


class RequestParam(ContractModel):
    """A header, query, path or cookie parameter."""

    id: str
    name: str = ""
    value: str = ""
    enabled: bool = True
    secure: bool = False


class FormField(ContractModel):
    """One entry of a form body."""

    id: str
    key: str = ""
    value: str = ""
    enabled: bool = True
    secure: bool = False
    kind: Literal["text", "file"] = "text"
    # File fields only
    file_name: str | None = None
    content_type: str | None = None
    file_path: str | None = None


class RequestBody(ContractModel):
    """Request body, tagged by type."""

    type: RequestBodyType = "none"
    content: str | None = None
    language: RequestBodyLanguage | None = None
    form_data: dict[str, FormField] = Field(default_factory=dict)
    encoding: FormEncoding | None = None
    binary_path: str | None = None
    binary_file_name: str | None = None
    binary_content_type: str | None = None


class ClientOptions(ContractModel):
    """Per-request overrides of the client settings."""

    disable_ssl: bool = False
    # PEM bundle used instead of the system roots
    ca_path: str | None = None
    # Seconds; documents may carry a number or a numeric string
    timeout_secs: float | None = None
    user_agent: str | None = None
    http_version: HttpVersion | None = None
    # 0 disables redirects
    max_redirects: int | None = Field(default=None, ge=0)

    @field_validator("timeout_secs", mode="before")
    @classmethod
    def _parse_timeout(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.strip()
            return float(value) if value else None
        return value


def _expand_param_mapping(value: Any) -> Any:
    """Accept {name: value} shorthand alongside full param records."""
    if not isinstance(value, Mapping):
        return value
    return {
        key: {"id": key, "name": key, "value": item} if isinstance(item, str) else item
        for key, item in value.items()
    }


class Request(ContractModel):
    """Immutable description of a request to execute."""

    id: RequestId
    collection_id: CollectionId
    name: str
    method: HttpMethod = "GET"
    url: str

    headers: dict[str, RequestParam] = Field(default_factory=dict)
    query_params: dict[str, RequestParam] = Field(default_factory=dict)
    path_params: dict[str, RequestParam] = Field(default_factory=dict)
    cookie_params: dict[str, RequestParam] = Field(default_factory=dict)

    body: RequestBody = Field(default_factory=RequestBody)
    authentication: AuthConfig = Field(default_factory=NoAuth)

    # Declared protocol, consulted only when the url carries no scheme
    protocol: RequestProtocol | None = None
    options: ClientOptions | None = None

    @field_validator("headers", "query_params", "path_params", "cookie_params", mode="before")
    @classmethod
    def _expand_params(cls, value: Any) -> Any:
        return _expand_param_mapping(value)

    @field_validator("method", mode="before")
    @classmethod
    def _upper_method(cls, value: Any) -> Any:
        return value.upper() if isinstance(value, str) else value

    def enabled_headers(self) -> list[RequestParam]:
        return [h for h in self.headers.values() if h.enabled and h.name]

    def enabled_query_params(self) -> list[RequestParam]:
        return [q for q in self.query_params.values() if q.enabled and q.name]
