"""
DispatchPhase - hands the resolved request to the matching engine.

A scheme-less url gets its declared protocol's default scheme first. The
registry then picks exactly one engine; the engine's response must carry that
engine's protocol tag or the run fails with a contract violation.
"""

import logging

from knurl.domain import ResponseState
from knurl.errors import SchemaViolation
from knurl.logging_config import log_engine
from knurl.runtime.context import RequestContext
from knurl.runtime.engines import EngineRegistry, with_default_scheme
from knurl.runtime.pipeline import BasePhase


logger = logging.getLogger(__name__)


class DispatchPhase(BasePhase):
    """Select an engine for the request and execute it."""

    def __init__(self, registry: EngineRegistry):
        self.registry = registry

    async def _execute(self, ctx: RequestContext) -> RequestContext:
        request = with_default_scheme(ctx.request)
        if request is not ctx.request:
            logger.debug(f"Defaulted url scheme | request={ctx.request_id} | url={request.url}")
            ctx = ctx.with_request(request)

        engine = self.registry.select(request)
        log_engine(logger, ctx.request_id, engine.protocol, "dispatch", details=ctx.request.url)

        response = await engine.execute(ctx)

        if not isinstance(response, ResponseState):
            raise SchemaViolation(
                model="ResponseState",
                errors=[{
                    "loc": (),
                    "msg": f"engine '{engine.protocol}' returned {type(response).__name__}",
                }],
            )
        if response.data.type != engine.protocol:
            raise SchemaViolation(
                model="ResponseState",
                errors=[{
                    "loc": ("data", "type"),
                    "msg": (
                        f"engine '{engine.protocol}' produced a "
                        f"'{response.data.type}' response"
                    ),
                }],
            )
        return ctx.with_response(response)
