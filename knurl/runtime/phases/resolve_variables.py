"""
ResolveVariablesPhase - substitutes {{name}} placeholders from the environment.

Pure and synchronous. Missing or disabled variables are a defined no-op:
their placeholders stay in the request exactly as written.
"""

from knurl.runtime.context import RequestContext
from knurl.runtime.pipeline import BasePhase
from knurl.services.variables import resolve_request_variables


def resolve_variables(ctx: RequestContext) -> RequestContext:
    """Return a context whose request has its placeholders resolved."""
    resolved = resolve_request_variables(ctx.request, ctx.environment)
    if resolved is ctx.request:
        return ctx
    return ctx.with_request(resolved)


class ResolveVariablesPhase(BasePhase):
    """Resolve environment variables in url, params, headers and body."""

    def _execute(self, ctx: RequestContext) -> RequestContext:
        return resolve_variables(ctx)
