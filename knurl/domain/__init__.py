"""
Contract layer - shapes of Request, Environment, Variable and Response.

All models are frozen pydantic models. The parse_* functions are the
validating constructors used at trust boundaries.
"""

from .types import (
    RequestId,
    CollectionId,
    EnvironmentId,
    VariableName,
    ContractModel,
)
from .environment import Variable, Environment
from .auth import (
    HeaderPlacement,
    QueryPlacement,
    CookiePlacement,
    BodyPlacement,
    AuthPlacement,
    BasicCredentials,
    BearerCredentials,
    ApiKeyCredentials,
    NoAuth,
    InheritAuth,
    BasicAuth,
    BearerAuth,
    ApiKeyAuth,
    AuthConfig,
    AuthResult,
)
from .request import (
    HttpMethod,
    ClientOptions,
    RequestParam,
    FormField,
    RequestBody,
    Request,
)
from .response import (
    Cookie,
    LogEntry,
    HttpResponseData,
    WebSocketResponseData,
    HttpResponsePayload,
    WebSocketResponsePayload,
    ResponsePayload,
    ResponseState,
    now_iso,
)
from .contracts import (
    parse_variable,
    parse_environment,
    parse_request,
    parse_response,
)

__all__ = [
    # Types
    "RequestId",
    "CollectionId",
    "EnvironmentId",
    "VariableName",
    "ContractModel",
    # Environment
    "Variable",
    "Environment",
    # Auth
    "HeaderPlacement",
    "QueryPlacement",
    "CookiePlacement",
    "BodyPlacement",
    "AuthPlacement",
    "BasicCredentials",
    "BearerCredentials",
    "ApiKeyCredentials",
    "NoAuth",
    "InheritAuth",
    "BasicAuth",
    "BearerAuth",
    "ApiKeyAuth",
    "AuthConfig",
    "AuthResult",
    # Request
    "HttpMethod",
    "ClientOptions",
    "RequestParam",
    "FormField",
    "RequestBody",
    "Request",
    # Response
    "Cookie",
    "LogEntry",
    "HttpResponseData",
    "WebSocketResponseData",
    "HttpResponsePayload",
    "WebSocketResponsePayload",
    "ResponsePayload",
    "ResponseState",
    "now_iso",
    # Parsers
    "parse_variable",
    "parse_environment",
    "parse_request",
    "parse_response",
]
