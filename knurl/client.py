"""
RequestRunner - the entry point callers (UI, CLI) use to execute requests.

Wraps the default pipeline: validates inbound documents at the boundary,
builds a fresh context per call and returns the validated response. Runs are
independent; a single runner can serve many concurrent sends.

Usage:
    runner = RequestRunner(settings=ClientSettings.from_env())
    response = await runner.send(request, environment)
"""

import logging
from collections.abc import Mapping
from typing import Any

from knurl.config import ClientSettings
from knurl.domain import (
    AuthConfig,
    Environment,
    Request,
    ResponseState,
    parse_environment,
    parse_request,
)
from knurl.runtime import (
    CancellationToken,
    EngineRegistry,
    PipelineNotifier,
    RequestContext,
    RequestPipeline,
    default_registry,
)


logger = logging.getLogger(__name__)


class RequestRunner:
    """Runs requests through the standard resolve/authenticate/dispatch pipeline."""

    def __init__(
        self,
        settings: ClientSettings | None = None,
        registry: EngineRegistry | None = None,
        notifier: PipelineNotifier | None = None,
    ):
        """
        Args:
            settings: Engine settings (defaults to ClientSettings())
            registry: Engine registry (defaults to http/https + ws/wss)
            notifier: Optional lifecycle callbacks
        """
        self.settings = settings or ClientSettings()
        self.registry = registry or default_registry(self.settings)
        self.pipeline = RequestPipeline.default(self.registry, notifier=notifier)

    async def send(
        self,
        request: Request | Mapping[str, Any],
        environment: Environment | Mapping[str, Any] | None = None,
        *,
        collection_auth: AuthConfig | None = None,
        cancel_token: CancellationToken | None = None,
    ) -> ResponseState:
        """
        Execute one request against an environment snapshot.

        Raises:
            SchemaViolation: The request or environment document is malformed
            PhaseError: A phase failed (see `phase_name` and `original_error`)
            RunCancelledError: `cancel_token` fired before or during a phase
        """
        if not isinstance(request, Request):
            request = parse_request(request)
        if environment is not None and not isinstance(environment, Environment):
            environment = parse_environment(environment)

        ctx = RequestContext.create(
            request,
            environment,
            collection_auth=collection_auth,
            cancel_token=cancel_token,
        )
        logger.debug(
            f"Sending request | request={request.id} | correlation={ctx.correlation_id} | "
            f"environment={environment.name if environment else None}"
        )
        return await self.pipeline.run(ctx)
