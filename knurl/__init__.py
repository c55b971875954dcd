"""
Knurl - request execution pipeline.

Takes a user-authored request plus an environment snapshot, resolves
{{variable}} placeholders, dispatches the resolved request to a
protocol-specific engine and returns a validated ResponseState.

Main entry points:
- RequestRunner: facade that builds the default pipeline and runs requests
- RequestPipeline: the phase orchestrator

Example usage:
    from knurl import RequestRunner

    runner = RequestRunner()
    response = await runner.send(request, environment)
"""

__version__ = "0.1.0"

from .client import RequestRunner
from .config import ClientSettings
from .errors import (
    KnurlError,
    SchemaViolation,
    EngineError,
    UnsupportedProtocolError,
    RunCancelledError,
    PhaseError,
)
from .logging_config import setup_logging

__all__ = [
    "__version__",
    "RequestRunner",
    "ClientSettings",
    "KnurlError",
    "SchemaViolation",
    "EngineError",
    "UnsupportedProtocolError",
    "RunCancelledError",
    "PhaseError",
    "setup_logging",
]
