"""
Response contract - the validated, protocol-tagged result of a request.

ResponseState.data is a discriminated union on `type`; the payload shape must
match its tag. Scalar fields are strict: a string where a number belongs is
rejected rather than coerced.
"""

from datetime import datetime, timezone
from typing import Annotated, Any, Literal, Union

from pydantic import Discriminator, Field, StrictInt, StrictStr, field_validator

from .types import ContractModel

LogLevel = Literal["debug", "info", "warning", "error"]


class Cookie(ContractModel):
    """A cookie set by the server."""

    name: str
    value: str
    domain: str | None = None
    path: str | None = None
    expires: str | None = None
    max_age: int | None = None
    secure: bool | None = None
    http_only: bool | None = None
    same_site: str | None = None


class LogEntry(ContractModel):
    """A diagnostic line captured while executing a request."""

    request_id: str
    timestamp: str
    level: LogLevel = "info"
    message: str
    info_type: str | None = None
    category: str | None = None


class HttpResponseData(ContractModel):
    """HTTP-specific response payload."""

    status: StrictInt
    status_text: StrictStr
    headers: dict[str, str] = Field(default_factory=dict)
    cookies: tuple[Cookie, ...] = ()
    body: str | None = None
    body_base64: str | None = None
    file_path: str | None = None


class WebSocketResponseData(ContractModel):
    """WebSocket payload (placeholder until real sockets exist)."""

    status: Literal["Connected"]


class HttpResponsePayload(ContractModel):
    type: Literal["http"] = "http"
    data: HttpResponseData


class WebSocketResponsePayload(ContractModel):
    type: Literal["websocket"] = "websocket"
    data: WebSocketResponseData


ResponsePayload = Annotated[
    Union[HttpResponsePayload, WebSocketResponsePayload],
    Discriminator("type"),
]


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def now_iso() -> str:
    """Current UTC time as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()


class ResponseState(ContractModel):
    """Validated result of executing one request."""

    request_id: StrictStr
    # Milliseconds
    response_time: float = Field(ge=0)
    # Bytes
    response_size: int = Field(ge=0)
    timestamp: StrictStr
    logs: tuple[LogEntry, ...] = ()
    data: ResponsePayload

    @field_validator("response_time", "response_size", mode="before")
    @classmethod
    def _require_number(cls, value: Any) -> Any:
        if not _is_number(value):
            raise ValueError(f"expected a number, got {type(value).__name__}")
        return value

    @field_validator("response_size", mode="before")
    @classmethod
    def _require_whole_bytes(cls, value: Any) -> Any:
        if isinstance(value, float) and not value.is_integer():
            raise ValueError("response size must be a whole number of bytes")
        return value

    @field_validator("timestamp")
    @classmethod
    def _require_iso_timestamp(cls, value: str) -> str:
        try:
            datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError as e:
            raise ValueError(f"timestamp is not ISO-8601: {value!r}") from e
        return value

    @property
    def protocol(self) -> str:
        """The protocol tag of the payload."""
        return self.data.type
