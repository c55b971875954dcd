"""
EngineRegistry - maps a resolved request to exactly one engine.

Selection rule:
1. An explicit url scheme (`scheme://`, case-insensitive) picks the engine
   registered for it.
2. A url without one falls back to the request's declared protocol; the
   dispatch phase then prefixes the protocol's default scheme
   (`with_default_scheme`) so engines always see an absolute url.
3. Anything else raises UnsupportedProtocolError.

New engines register here; the pipeline never needs to change.
"""

import logging
import re
from collections.abc import Iterable

import httpx

from knurl.config import ClientSettings
from knurl.domain import Request
from knurl.errors import UnsupportedProtocolError

from .base import RequestEngine


logger = logging.getLogger(__name__)

# Explicit scheme only: "localhost:8080/x" has no scheme, "ws://host" does
SCHEME_PATTERN = re.compile(r"^\s*([A-Za-z][A-Za-z0-9+.-]*)://")

# Scheme prefixed to scheme-less urls, per declared protocol
DEFAULT_SCHEMES: dict[str, str] = {
    "http": "http",
    "websocket": "ws",
}


def url_scheme(url: str) -> str:
    """Lower-cased explicit scheme of `url`, or "" when it has none."""
    match = SCHEME_PATTERN.match(url)
    return match.group(1).lower() if match else ""


def with_default_scheme(request: Request) -> Request:
    """
    Prefix the declared protocol's default scheme to a scheme-less url.

    Requests with an explicit scheme, or without a declared protocol, are
    returned unchanged.
    """
    if url_scheme(request.url) or request.protocol is None:
        return request
    scheme = DEFAULT_SCHEMES.get(request.protocol)
    if scheme is None:
        return request
    url = request.url.strip().removeprefix("//")
    return request.model_copy(update={"url": f"{scheme}://{url}"})


class EngineRegistry:
    """Registry of engines keyed by url scheme and protocol identifier."""

    def __init__(self) -> None:
        self._by_scheme: dict[str, RequestEngine] = {}
        self._by_protocol: dict[str, RequestEngine] = {}

    def register(self, engine: RequestEngine, schemes: Iterable[str]) -> None:
        """
        Register an engine for one or more url schemes.

        Re-registering a scheme replaces the previous engine for it.
        """
        schemes = [scheme.lower().rstrip(":") for scheme in schemes]
        if not schemes:
            raise ValueError(f"engine '{engine.protocol}' must handle at least one scheme")
        for scheme in schemes:
            previous = self._by_scheme.get(scheme)
            if previous is not None and previous is not engine:
                logger.info(f"Replacing engine for scheme '{scheme}' | {previous.protocol} -> {engine.protocol}")
            self._by_scheme[scheme] = engine
        self._by_protocol[engine.protocol] = engine

    def select(self, request: Request) -> RequestEngine:
        """Pick the engine for `request`. Deterministic for a given registry."""
        scheme = url_scheme(request.url)
        if scheme:
            engine = self._by_scheme.get(scheme)
        elif request.protocol is not None:
            engine = self._by_protocol.get(request.protocol)
        else:
            engine = None

        if engine is None:
            raise UnsupportedProtocolError(request_id=request.id, scheme=scheme)
        return engine

    def get(self, protocol: str) -> RequestEngine | None:
        """Get an engine by protocol identifier."""
        return self._by_protocol.get(protocol)

    @property
    def schemes(self) -> list[str]:
        return sorted(self._by_scheme)

    @property
    def protocols(self) -> list[str]:
        return sorted(self._by_protocol)


def default_registry(
    settings: ClientSettings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> EngineRegistry:
    """Registry with the HTTP engine for http/https and the WebSocket engine for ws/wss."""
    from .http import HttpEngine
    from .websocket import WebSocketEngine

    registry = EngineRegistry()
    registry.register(HttpEngine(settings=settings, transport=transport), ["http", "https"])
    registry.register(WebSocketEngine(), ["ws", "wss"])
    return registry
