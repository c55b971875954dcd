"""
HttpEngine - executes HTTP(S) requests with httpx.

Building the outgoing request:
1. URL: enabled path params are filled in, then enabled query params are
   appended; auth query params are set last (last wins).
2. Headers: enabled headers, cookie params merged into a Cookie header, auth
   headers only when the name is not already present (case-insensitive).
3. Body: text (with an inferred Content-Type), url/plain/multipart form, or
   a binary file. Auth form fields (body placement) are added to url-encoded
   and multipart forms only.
4. Client: ClientSettings, overridden by the request's own options.

Network errors, timeouts and malformed targets surface as EngineError.
The run's cancellation token is raced against the send.
"""

import asyncio
import base64
import logging
import ssl
import time
from collections.abc import Mapping
from typing import Any
from contextlib import suppress
from pathlib import Path
from urllib.parse import urlencode

import httpx

from knurl.config import ClientSettings
from knurl.domain import (
    AuthResult,
    ClientOptions,
    Cookie,
    HttpResponseData,
    HttpResponsePayload,
    LogEntry,
    Request,
    ResponseState,
    now_iso,
)
from knurl.errors import EngineError, RunCancelledError
from knurl.logging_config import log_engine
from knurl.runtime.cancellation import CancellationToken
from knurl.runtime.context import RequestContext


logger = logging.getLogger(__name__)

# Content-Type inferred from a text body's language
CONTENT_TYPES: dict[str, str] = {
    "json": "application/json",
    "yaml": "application/yaml",
    "xml": "application/xml",
    "html": "text/html",
    "javascript": "application/javascript",
    "css": "text/css",
    "graphql": "application/json",
    "text": "text/plain",
}


def _find_header(headers: Mapping[str, str], name: str) -> str | None:
    """Existing key matching `name` case-insensitively."""
    lowered = name.lower()
    for key in headers:
        if key.lower() == lowered:
            return key
    return None


def _append_cookies(headers: dict[str, str], cookies: Mapping[str, str]) -> None:
    cookie_string = "; ".join(f"{name}={value}" for name, value in cookies.items())
    if not cookie_string:
        return
    existing = _find_header(headers, "Cookie")
    if existing is None:
        headers["Cookie"] = cookie_string
    elif headers[existing]:
        headers[existing] = f"{headers[existing]}; {cookie_string}"


def build_url(request: Request, auth: AuthResult | None = None) -> httpx.URL:
    """Final url with path params filled in and query params applied."""
    url_string = request.url
    for param in request.path_params.values():
        if param.enabled and param.name and param.value:
            url_string = url_string.replace(f"{{{{{param.name}}}}}", param.value)

    url = httpx.URL(url_string)
    for param in request.enabled_query_params():
        url = url.copy_add_param(param.name, param.value)
    if auth is not None:
        for key, value in auth.query.items():
            url = url.copy_set_param(key, value)
    return url


def build_headers(request: Request, auth: AuthResult | None = None) -> dict[str, str]:
    """Final headers with cookie params and auth merged in."""
    headers = {header.name: header.value for header in request.enabled_headers()}

    # Cookie params: last enabled value per name wins
    cookie_params: dict[str, str] = {}
    for cookie in request.cookie_params.values():
        if cookie.enabled and cookie.name:
            cookie_params[cookie.name] = cookie.value
    _append_cookies(headers, cookie_params)

    if auth is not None:
        for key, value in auth.headers.items():
            if _find_header(headers, key) is None:
                headers[key] = value
        _append_cookies(headers, auth.cookies)
    return headers


def build_http_request(
    request: Request,
    auth: AuthResult | None = None,
    user_agent: str | None = None,
) -> httpx.Request:
    """
    Translate a resolved Request into an httpx.Request.

    Raises:
        ValueError: The body cannot be encoded as configured
        OSError: A file referenced by the body cannot be read
        httpx.InvalidURL: The url is malformed
    """
    url = build_url(request, auth)
    headers = build_headers(request, auth)
    if user_agent and _find_header(headers, "User-Agent") is None:
        headers["User-Agent"] = user_agent

    body = request.body
    auth_fields = dict(auth.body) if auth is not None else {}
    if auth_fields and not (body.type == "form" and (body.encoding or "url") in ("url", "multipart")):
        raise ValueError(
            "Auth placement 'body' is only supported with url-encoded or multipart form bodies"
        )

    content: bytes | None = None
    data: dict[str, list[str]] | None = None
    files: list[tuple[str, tuple]] | None = None

    if body.type == "text":
        content = (body.content or "").encode("utf-8")
        if _find_header(headers, "Content-Type") is None:
            inferred = CONTENT_TYPES.get(body.language or "text")
            if inferred:
                headers["Content-Type"] = inferred

    elif body.type == "form":
        encoding = body.encoding or "url"
        fields = [f for f in body.form_data.values() if f.enabled]

        if encoding in ("url", "plain") and any(f.kind == "file" for f in fields):
            raise ValueError(
                f"File fields are not supported with '{encoding}' form encoding. "
                "Use multipart or a binary body."
            )

        if encoding == "url":
            # Auth fields are set last and replace same-named fields
            pairs = [(f.key, f.value) for f in fields if f.key not in auth_fields]
            pairs.extend(auth_fields.items())
            content = urlencode(pairs).encode("ascii")
            if _find_header(headers, "Content-Type") is None:
                headers["Content-Type"] = "application/x-www-form-urlencoded"
        elif encoding == "plain":
            content = "\n".join(f"{f.key}={f.value}" for f in fields).encode("utf-8")
            if _find_header(headers, "Content-Type") is None:
                headers["Content-Type"] = "text/plain"
        else:
            # Multipart: httpx sets the boundary header itself
            data = {}
            files = []
            for f in fields:
                if f.kind == "file":
                    if not f.file_path:
                        logger.warning(f"Skipping file field without a path | field={f.key}")
                        continue
                    path = Path(f.file_path)
                    files.append((
                        f.key,
                        (
                            f.file_name or path.name,
                            path.read_bytes(),
                            f.content_type or "application/octet-stream",
                        ),
                    ))
                else:
                    data.setdefault(f.key, []).append(f.value)
            for key, value in auth_fields.items():
                data.setdefault(key, []).append(value)
            if not files:
                # httpx only emits multipart when files are present, so text-only
                # forms are sent as filename-less parts
                files = [(key, (None, value)) for key, values in data.items() for value in values]
                data = None

    elif body.type == "binary":
        if not body.binary_path:
            raise ValueError("Binary body selected but no file path was given")
        content = Path(body.binary_path).read_bytes()
        if body.binary_content_type and _find_header(headers, "Content-Type") is None:
            headers["Content-Type"] = body.binary_content_type

    return httpx.Request(
        request.method,
        url,
        headers=headers,
        content=content,
        data=data,
        files=files or None,
    )


def client_options(settings: ClientSettings, options: ClientOptions | None = None) -> dict[str, Any]:
    """
    httpx.AsyncClient keyword arguments for one request.

    Raises:
        OSError: `ca_path` cannot be read
        ssl.SSLError: `ca_path` is not a valid PEM bundle
    """
    kwargs: dict[str, Any] = {
        "timeout": settings.timeout_seconds,
        "follow_redirects": settings.follow_redirects,
        "max_redirects": settings.max_redirects,
        "verify": settings.verify_tls,
    }
    if options is None:
        return kwargs

    # Non-positive timeouts keep the configured one
    if options.timeout_secs is not None and options.timeout_secs > 0:
        kwargs["timeout"] = options.timeout_secs
    if options.max_redirects is not None:
        kwargs["max_redirects"] = options.max_redirects
        kwargs["follow_redirects"] = options.max_redirects > 0
    if options.disable_ssl:
        kwargs["verify"] = False
    elif options.ca_path:
        kwargs["verify"] = ssl.create_default_context(cafile=options.ca_path)
    if options.http_version == "http2":
        kwargs["http1"] = False
        kwargs["http2"] = True
    return kwargs


def _cookies_from(response: httpx.Response) -> tuple[Cookie, ...]:
    return tuple(
        Cookie(
            name=cookie.name,
            value=cookie.value or "",
            domain=cookie.domain or None,
            path=cookie.path or None,
            secure=cookie.secure,
        )
        for cookie in response.cookies.jar
    )


def _decode_body(response: httpx.Response) -> str | None:
    try:
        return response.content.decode(response.encoding or "utf-8")
    except (UnicodeDecodeError, LookupError):
        return None


async def _send_cancellable(
    client: httpx.AsyncClient,
    http_request: httpx.Request,
    token: CancellationToken,
    request_id: str,
) -> httpx.Response:
    """Send, aborting the in-flight call if `token` fires first."""
    token.raise_if_cancelled(request_id, "dispatch")

    send_task = asyncio.ensure_future(client.send(http_request))
    cancel_task = asyncio.ensure_future(token.wait())
    try:
        done, _ = await asyncio.wait(
            {send_task, cancel_task},
            return_when=asyncio.FIRST_COMPLETED,
        )
    finally:
        for task in (send_task, cancel_task):
            if not task.done():
                task.cancel()

    if send_task in done:
        return send_task.result()

    # The cancelled send must finish unwinding before the client closes
    with suppress(asyncio.CancelledError, httpx.HTTPError):
        await send_task
    raise RunCancelledError(request_id=request_id, phase_name="dispatch")


class HttpEngine:
    """HTTP engine backed by httpx.AsyncClient."""

    protocol = "http"

    def __init__(
        self,
        settings: ClientSettings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Args:
            settings: Timeout, redirect and TLS policy
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        self.settings = settings or ClientSettings()
        self._transport = transport

    def _client(self, options: ClientOptions | None = None) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            transport=self._transport,
            **client_options(self.settings, options),
        )

    def _fail(self, request_id: str, cause: BaseException) -> EngineError:
        logger.warning(f"HTTP request failed | request={request_id} | {type(cause).__name__}: {cause}")
        return EngineError(request_id=request_id, engine=self.protocol, cause=cause)

    async def execute(self, ctx: RequestContext) -> ResponseState:
        request = ctx.request
        request_id = ctx.request_id

        options = request.options
        user_agent = (options.user_agent if options else None) or self.settings.user_agent
        try:
            http_request = build_http_request(request, ctx.auth_result, user_agent)
            client = self._client(options)
        except (ValueError, OSError, httpx.InvalidURL) as e:
            raise self._fail(request_id, e) from e

        log_engine(logger, request_id, self.protocol, "send", details=f"{http_request.method} {http_request.url}")
        logs = [
            LogEntry(
                request_id=request_id,
                timestamp=now_iso(),
                level="info",
                category="request",
                message=f"{http_request.method} {http_request.url}",
            )
        ]

        start = time.perf_counter()
        try:
            async with client:
                response = await _send_cancellable(client, http_request, ctx.cancel_token, request_id)
                await response.aread()
        except httpx.HTTPError as e:
            # Includes httpx.TimeoutException
            raise self._fail(request_id, e) from e
        elapsed_ms = (time.perf_counter() - start) * 1000

        content = response.content
        log_engine(
            logger,
            request_id,
            self.protocol,
            "receive",
            details=f"status={response.status_code} | size={len(content)} | {elapsed_ms:.1f}ms",
        )
        logs.append(
            LogEntry(
                request_id=request_id,
                timestamp=now_iso(),
                level="info",
                category="response",
                message=f"{response.status_code} {response.reason_phrase} ({len(content)} bytes)",
            )
        )

        return ResponseState(
            request_id=request_id,
            response_time=elapsed_ms,
            response_size=len(content),
            timestamp=now_iso(),
            logs=tuple(logs),
            data=HttpResponsePayload(
                data=HttpResponseData(
                    status=response.status_code,
                    status_text=response.reason_phrase,
                    headers=dict(response.headers.items()),
                    cookies=_cookies_from(response),
                    body=_decode_body(response),
                    body_base64=base64.b64encode(content).decode("ascii"),
                ),
            ),
        )
