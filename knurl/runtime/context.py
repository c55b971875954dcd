"""
RequestContext - immutable context passed through request phases.

The context carries the request, the environment snapshot and whatever the
phases have produced so far (auth credentials, the engine response). Each
phase returns a new context via the with_* methods.

Design principles:
- Treat as immutable (use with_* methods to create new instances)
- Built fresh per run; never reused across runs
- The environment is deep-copied on entry so edits made by the collection
  store during an in-flight run cannot leak into it
"""

from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from knurl.domain import (
    AuthConfig,
    AuthResult,
    Environment,
    Request,
    ResponseState,
)
from knurl.runtime.cancellation import CancellationToken


class RequestContext(BaseModel):
    """
    Immutable context passed through request phases.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    # --- Inputs ---
    request: Request
    environment: Environment | None = None
    # Auth used when the request inherits from its collection
    collection_auth: AuthConfig | None = None

    # --- Run identity ---
    correlation_id: str = Field(default_factory=lambda: uuid4().hex)
    cancel_token: CancellationToken = Field(default_factory=CancellationToken)

    # --- Accumulated during phase execution ---
    auth_result: AuthResult | None = None
    response: ResponseState | None = None

    @classmethod
    def create(
        cls,
        request: Request,
        environment: Environment | None = None,
        *,
        collection_auth: AuthConfig | None = None,
        cancel_token: CancellationToken | None = None,
        correlation_id: str | None = None,
    ) -> "RequestContext":
        """Build a fresh context, snapshotting the environment."""
        fields: dict = {
            "request": request,
            "environment": environment.model_copy(deep=True) if environment else None,
            "collection_auth": collection_auth,
        }
        if cancel_token is not None:
            fields["cancel_token"] = cancel_token
        if correlation_id is not None:
            fields["correlation_id"] = correlation_id
        return cls(**fields)

    # ==========================================================================
    # Transformation methods (return new context)
    # ==========================================================================

    def with_request(self, request: Request) -> "RequestContext":
        """Replace the request (e.g. after variable resolution)."""
        return self.model_copy(update={"request": request})

    def with_auth_result(self, auth_result: AuthResult) -> "RequestContext":
        """Attach credentials computed by the auth phase."""
        return self.model_copy(update={"auth_result": auth_result})

    def with_response(self, response: ResponseState) -> "RequestContext":
        """Attach the engine's response."""
        return self.model_copy(update={"response": response})

    @property
    def request_id(self) -> str:
        return self.request.id
