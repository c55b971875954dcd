"""
WebSocketEngine - placeholder for the WebSocket protocol.

No socket is opened. The engine logs the target url and returns a
synthesized "Connected" response so the response contract and the
execution capability are exercised end to end.
"""

import logging

from knurl.domain import (
    ResponseState,
    WebSocketResponseData,
    WebSocketResponsePayload,
    now_iso,
)
from knurl.logging_config import log_engine
from knurl.runtime.context import RequestContext


logger = logging.getLogger(__name__)

# Fixed timing reported by the placeholder
PLACEHOLDER_RESPONSE_TIME_MS = 15


class WebSocketEngine:
    """Placeholder engine that always reports a successful connection."""

    protocol = "websocket"

    async def execute(self, ctx: RequestContext) -> ResponseState:
        log_engine(logger, ctx.request_id, self.protocol, "connect", details=f"url={ctx.request.url}")

        return ResponseState(
            request_id=ctx.request_id,
            response_time=PLACEHOLDER_RESPONSE_TIME_MS,
            response_size=0,
            timestamp=now_iso(),
            data=WebSocketResponsePayload(
                data=WebSocketResponseData(status="Connected"),
            ),
        )
