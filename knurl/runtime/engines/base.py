"""
RequestEngine - the execution capability every protocol implements.

An engine receives the fully resolved context and returns a ResponseState
whose data tag equals its `protocol`. Failures surface as EngineError
carrying the request id and the underlying cause.
"""

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from knurl.domain import ResponseState

if TYPE_CHECKING:
    from knurl.runtime.context import RequestContext


@runtime_checkable
class RequestEngine(Protocol):
    """Protocol-specific execution module."""

    # Tag this engine writes into ResponseState.data.type
    protocol: str

    async def execute(self, ctx: "RequestContext") -> ResponseState:
        ...
