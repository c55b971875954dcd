"""
Runtime layer - request execution pipeline, phases and engines.

The runtime orchestrates a request through a series of phases:

1. Context building (RequestContext.create)
2. Phase execution (RequestPipeline)
3. Response validation (parse_response)

Each phase transforms the context; the dispatch phase attaches the engine's
response, which the pipeline validates before returning it.
"""

from .cancellation import CancellationToken
from .context import RequestContext
from .pipeline import (
    RequestPipeline,
    Phase,
    BasePhase,
    FunctionPhase,
    PipelineMetrics,
    PipelineNotifier,
)
from .engines import (
    RequestEngine,
    EngineRegistry,
    default_registry,
    HttpEngine,
    WebSocketEngine,
)
from .phases import (
    ResolveVariablesPhase,
    resolve_variables,
    AuthenticatePhase,
    DispatchPhase,
)

__all__ = [
    # Context
    "CancellationToken",
    "RequestContext",
    # Pipeline
    "RequestPipeline",
    "Phase",
    "BasePhase",
    "FunctionPhase",
    "PipelineMetrics",
    "PipelineNotifier",
    # Engines
    "RequestEngine",
    "EngineRegistry",
    "default_registry",
    "HttpEngine",
    "WebSocketEngine",
    # Phases
    "ResolveVariablesPhase",
    "resolve_variables",
    "AuthenticatePhase",
    "DispatchPhase",
]
