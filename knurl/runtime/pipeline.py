"""
RequestPipeline - orchestrates phase execution for one request.

The pipeline executes a sequence of phases, each transforming the
RequestContext. Phases can be async (for I/O like network engines) or sync
(for pure transformations like variable resolution).

Design principles:
- Clear phase boundaries for debugging and testing
- Each phase receives context and returns new context
- The phase list is fixed at construction time
- Any phase failure aborts the run; nothing is retried here
"""

import inspect
import logging
import re
import time
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from typing import Protocol, Union, runtime_checkable

from knurl.domain import Request, ResponseState, parse_response
from knurl.errors import PhaseError, RunCancelledError, SchemaViolation
from knurl.logging_config import log_phase
from knurl.runtime.context import RequestContext


logger = logging.getLogger(__name__)

PhaseResult = Union[RequestContext, Awaitable[RequestContext]]
PhaseFunction = Callable[[RequestContext], PhaseResult]

# Name reported when the final response fails contract validation
VALIDATE_PHASE_NAME = "validate_response"


@runtime_checkable
class Phase(Protocol):
    """
    Protocol for request phases.

    Each phase receives a RequestContext and returns a new RequestContext
    with its transformations applied.
    """

    @property
    def name(self) -> str:
        """Human-readable phase name for logging."""
        ...

    async def execute(self, ctx: RequestContext) -> RequestContext:
        """
        Execute this phase.

        Args:
            ctx: The current request context

        Returns:
            New RequestContext with phase transformations applied
        """
        ...


class BasePhase(ABC):
    """
    Base class for phases with common functionality.

    Provides:
    - Automatic name from class name
    - Logging wrapper around execution
    - Error wrapping into PhaseError
    - Sync or async _execute
    """

    @property
    def name(self) -> str:
        """Phase name derived from class name."""
        # ResolveVariablesPhase -> resolve_variables
        class_name = self.__class__.__name__
        if class_name.endswith("Phase"):
            class_name = class_name[:-5]
        return re.sub(r"(?<!^)(?=[A-Z])", "_", class_name).lower()

    @abstractmethod
    def _execute(self, ctx: RequestContext) -> PhaseResult:
        """Override this to implement phase logic (may be a coroutine)."""
        ...

    async def execute(self, ctx: RequestContext) -> RequestContext:
        """Execute with logging and error handling."""
        log_phase(logger, ctx.request_id, self.name, "starting")
        try:
            result = self._execute(ctx)
            if inspect.isawaitable(result):
                result = await result
            log_phase(logger, ctx.request_id, self.name, "complete")
            return result
        except (PhaseError, RunCancelledError):
            raise
        except Exception as e:
            logger.error(f"Phase {self.name} failed: {e}", exc_info=True)
            raise PhaseError(
                phase_name=self.name,
                original_error=e,
                request_id=ctx.request_id,
            ) from e


class FunctionPhase(BasePhase):
    """Adapts a plain `(ctx) -> ctx` callable (sync or async) into a phase."""

    def __init__(self, func: PhaseFunction, name: str | None = None):
        self._func = func
        self._name = name or getattr(func, "__name__", "function").removesuffix("_phase")

    @property
    def name(self) -> str:
        return self._name

    def _execute(self, ctx: RequestContext) -> PhaseResult:
        return self._func(ctx)


class PipelineNotifier(Protocol):
    """Receives lifecycle callbacks for a run (e.g. to update UI state)."""

    def on_start(self, request: Request) -> None: ...

    def on_success(self, response: ResponseState) -> None: ...

    def on_error(self, error: Exception) -> None: ...


@dataclass
class PipelineMetrics:
    """Metrics collected during pipeline execution."""

    total_duration_ms: float = 0.0
    phase_durations_ms: dict[str, float] = field(default_factory=dict)
    phases_completed: int = 0
    failed_phase: str | None = None


class RequestPipeline:
    """
    Orchestrates execution of request phases.

    The pipeline:
    1. Checks the cancellation token, then executes each phase in order
    2. Collects metrics on phase durations
    3. Aborts on the first failure, tagging it with phase name and request id
    4. Validates the final response against the contract layer

    Usage:
        pipeline = RequestPipeline([
            ResolveVariablesPhase(),
            AuthenticatePhase(),
            DispatchPhase(registry),
        ])

        response = await pipeline.run(RequestContext.create(request, env))
    """

    def __init__(
        self,
        phases: Sequence[Phase | PhaseFunction],
        notifier: PipelineNotifier | None = None,
    ):
        """
        Initialize the pipeline with phases.

        Args:
            phases: Ordered phases; plain callables are wrapped in FunctionPhase
            notifier: Optional lifecycle callbacks
        """
        self.phases: tuple[Phase, ...] = tuple(
            phase if isinstance(phase, Phase) else FunctionPhase(phase)
            for phase in phases
        )
        self.notifier = notifier
        self._metrics: PipelineMetrics | None = None

    @classmethod
    def default(
        cls,
        registry=None,
        notifier: PipelineNotifier | None = None,
    ) -> "RequestPipeline":
        """Standard phase list: resolve variables, authenticate, dispatch."""
        from knurl.runtime.engines import default_registry
        from knurl.runtime.phases import (
            AuthenticatePhase,
            DispatchPhase,
            ResolveVariablesPhase,
        )

        return cls(
            [
                ResolveVariablesPhase(),
                AuthenticatePhase(),
                DispatchPhase(registry or default_registry()),
            ],
            notifier=notifier,
        )

    async def run(self, ctx: RequestContext) -> ResponseState:
        """
        Execute all phases and return the validated response.

        Args:
            ctx: Initial request context

        Returns:
            The ResponseState produced by the dispatch phase

        Raises:
            PhaseError: A phase failed, or the final response was invalid
            RunCancelledError: The cancellation token fired before or during a phase
        """
        metrics = PipelineMetrics()
        self._metrics = metrics
        start_time = time.perf_counter()
        request_id = ctx.request_id

        if self.notifier:
            self.notifier.on_start(ctx.request)

        try:
            for phase in self.phases:
                ctx.cancel_token.raise_if_cancelled(request_id, phase.name)
                phase_start = time.perf_counter()
                try:
                    ctx = await self._run_phase(phase, ctx)
                except Exception:
                    metrics.failed_phase = phase.name
                    raise
                metrics.phase_durations_ms[phase.name] = (time.perf_counter() - phase_start) * 1000
                metrics.phases_completed += 1

            response = self._validate(ctx)
        except Exception as e:
            metrics.total_duration_ms = (time.perf_counter() - start_time) * 1000
            logger.warning(f"Pipeline failed | request={request_id} | {e}")
            if self.notifier:
                self.notifier.on_error(e)
            raise

        metrics.total_duration_ms = (time.perf_counter() - start_time) * 1000
        logger.info(
            f"Pipeline complete | request={request_id} | "
            f"duration={metrics.total_duration_ms:.1f}ms | "
            f"protocol={response.protocol}"
        )

        if self.notifier:
            self.notifier.on_success(response)
        return response

    async def _run_phase(self, phase: Phase, ctx: RequestContext) -> RequestContext:
        """Run one phase, wrapping failures of phases not built on BasePhase."""
        try:
            result = phase.execute(ctx)
            if inspect.isawaitable(result):
                result = await result
        except (PhaseError, RunCancelledError):
            raise
        except Exception as e:
            raise PhaseError(
                phase_name=phase.name,
                original_error=e,
                request_id=ctx.request_id,
            ) from e
        if not isinstance(result, RequestContext):
            raise PhaseError(
                phase_name=phase.name,
                original_error=TypeError(
                    f"phase returned {type(result).__name__}, expected RequestContext"
                ),
                request_id=ctx.request_id,
            )
        return result

    def _validate(self, ctx: RequestContext) -> ResponseState:
        """Validate the populated response; a run never ends with a partial one."""
        try:
            if ctx.response is None:
                raise SchemaViolation(
                    model="ResponseState",
                    errors=[{"loc": (), "msg": "pipeline completed without a response"}],
                )
            return parse_response(ctx.response)
        except SchemaViolation as e:
            raise PhaseError(
                phase_name=VALIDATE_PHASE_NAME,
                original_error=e,
                request_id=ctx.request_id,
            ) from e

    def get_metrics(self) -> PipelineMetrics | None:
        """Get metrics from the last pipeline execution."""
        return self._metrics

    def get_phase(self, name: str) -> Phase | None:
        """Get a phase by name (for testing/debugging)."""
        for phase in self.phases:
            if phase.name == name:
                return phase
        return None
