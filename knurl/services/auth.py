"""Translate an authentication config into headers, query params, cookies and form fields."""

import base64
import logging

from knurl.domain import (
    ApiKeyAuth,
    AuthConfig,
    AuthPlacement,
    AuthResult,
    BasicAuth,
    BearerAuth,
    BodyPlacement,
    CookiePlacement,
    HeaderPlacement,
    InheritAuth,
    NoAuth,
    QueryPlacement,
)


logger = logging.getLogger(__name__)

DEFAULT_BEARER_SCHEME = "Bearer"
DEFAULT_API_KEY_HEADER = "X-API-Key"


def effective_auth(
    request_auth: AuthConfig,
    collection_auth: AuthConfig | None,
) -> AuthConfig:
    """Resolve `inherit` against the collection's auth (which may not inherit again)."""
    if isinstance(request_auth, InheritAuth):
        if collection_auth is None or isinstance(collection_auth, InheritAuth):
            return NoAuth()
        return collection_auth
    return request_auth


def _place(placement: AuthPlacement, value: str, header_value: str | None = None) -> AuthResult:
    """Put `value` where `placement` says; headers may carry a decorated value."""
    match placement:
        case HeaderPlacement():
            return AuthResult(headers={placement.name: header_value or value})
        case QueryPlacement():
            return AuthResult(query={placement.name: value})
        case CookiePlacement():
            return AuthResult(cookies={placement.name: value})
        case BodyPlacement():
            return AuthResult(body={placement.field_name: value})
    raise ValueError(f"Unsupported placement type: {type(placement).__name__}")


def _drop_unnamed(result: AuthResult) -> AuthResult | None:
    # A placement without a name has nowhere to put the credential
    cleaned = AuthResult(
        headers={k: v for k, v in result.headers.items() if k},
        query={k: v for k, v in result.query.items() if k},
        cookies={k: v for k, v in result.cookies.items() if k},
        body={k: v for k, v in result.body.items() if k},
    )
    if cleaned.is_empty:
        logger.warning("Auth placement has no name; no credentials will be sent")
        return None
    return cleaned


def build_auth_result(auth: AuthConfig) -> AuthResult | None:
    """Credentials for `auth`, or None when nothing needs to be sent."""
    match auth:
        case BasicAuth():
            raw = f"{auth.basic.username or ''}:{auth.basic.password or ''}"
            token = base64.b64encode(raw.encode("utf-8")).decode("ascii")
            return AuthResult(headers={"Authorization": f"Basic {token}"})

        case BearerAuth():
            token = auth.bearer.token or ""
            placement = auth.bearer.placement or HeaderPlacement()
            scheme = (auth.bearer.scheme or "").strip() or DEFAULT_BEARER_SCHEME
            return _drop_unnamed(_place(placement, token, header_value=f"{scheme} {token}"))

        case ApiKeyAuth():
            value = auth.api_key.value or ""
            placement = auth.api_key.placement or HeaderPlacement(name=DEFAULT_API_KEY_HEADER)
            return _drop_unnamed(_place(placement, value))

        case _:
            # none, or inherit with nothing to inherit
            return None
