"""
Error taxonomy for the request pipeline.

- SchemaViolation: a value failed contract validation (engine bug, never coerced)
- EngineError: an engine could not complete its protocol operation
- UnsupportedProtocolError: no engine is registered for the request's url
- RunCancelledError: the run's cancellation token fired
- PhaseError: raised by the pipeline for any failing phase

Missing or disabled variables are not errors.
"""

from dataclasses import dataclass, field
from typing import Any


class KnurlError(Exception):
    """Base class for all pipeline errors."""


@dataclass
class SchemaViolation(KnurlError):
    """A value did not conform to its contract."""

    model: str
    errors: list[dict[str, Any]] = field(default_factory=list)

    def __str__(self) -> str:
        details = "; ".join(
            f"{'.'.join(str(part) for part in err.get('loc', ())) or '<root>'}: {err.get('msg', '')}"
            for err in self.errors
        )
        return f"Invalid {self.model}: {details or 'validation failed'}"


@dataclass
class EngineError(KnurlError):
    """An engine failed to execute a request."""

    request_id: str
    engine: str
    cause: BaseException

    def __str__(self) -> str:
        return f"Engine '{self.engine}' failed for request '{self.request_id}': {self.cause}"


@dataclass
class UnsupportedProtocolError(KnurlError):
    """No engine is registered for the request's url scheme."""

    request_id: str
    scheme: str

    def __str__(self) -> str:
        return f"Unsupported protocol: {self.scheme or '<none>'} (request '{self.request_id}')"


@dataclass
class RunCancelledError(KnurlError):
    """The run was cancelled before or during a phase."""

    request_id: str
    phase_name: str

    def __str__(self) -> str:
        return f"Request '{self.request_id}' cancelled at phase '{self.phase_name}'"


@dataclass
class PhaseError(KnurlError):
    """Error that occurred during phase execution."""

    phase_name: str
    original_error: Exception
    request_id: str | None = None

    def __str__(self) -> str:
        request = f" (request '{self.request_id}')" if self.request_id else ""
        return f"Phase '{self.phase_name}' failed{request}: {self.original_error}"
