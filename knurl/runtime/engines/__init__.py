"""
Engines - protocol-specific implementations of the execution capability.

- RequestEngine: the `execute(ctx) -> ResponseState` protocol
- EngineRegistry: selects one engine per request (by url scheme)
- HttpEngine: real HTTP(S) via httpx
- WebSocketEngine: placeholder that reports "Connected"
"""

from .base import RequestEngine
from .registry import EngineRegistry, default_registry, url_scheme, with_default_scheme
from .http import HttpEngine, build_http_request
from .websocket import WebSocketEngine

__all__ = [
    "RequestEngine",
    "EngineRegistry",
    "default_registry",
    "url_scheme",
    "with_default_scheme",
    "HttpEngine",
    "build_http_request",
    "WebSocketEngine",
]
