"""
CancellationToken - external cancellation signal for a pipeline run.

The pipeline checks the token between phases; engines doing long-running I/O
race their work against `wait()`. Cancelling after the run finished is a no-op.
"""

import asyncio

from knurl.errors import RunCancelledError


class CancellationToken:
    """A one-shot, idempotent cancellation flag backed by an asyncio.Event."""

    def __init__(self) -> None:
        self._event = asyncio.Event()
        self._reason: str | None = None

    def cancel(self, reason: str | None = None) -> None:
        """Signal cancellation. Repeated calls keep the first reason."""
        if self._event.is_set():
            return
        self._reason = reason
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    @property
    def reason(self) -> str | None:
        return self._reason

    async def wait(self) -> None:
        """Block until cancellation is signalled."""
        await self._event.wait()

    def raise_if_cancelled(self, request_id: str, phase_name: str) -> None:
        if self._event.is_set():
            raise RunCancelledError(request_id=request_id, phase_name=phase_name)
