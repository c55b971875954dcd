"""
AuthenticatePhase - turns the request's auth config into credentials.

Runs after variable resolution. `inherit` uses the collection auth supplied
on the context; the resulting AuthResult is merged by the HTTP engine.
"""

import logging

from knurl.runtime.context import RequestContext
from knurl.runtime.pipeline import BasePhase
from knurl.services.auth import build_auth_result, effective_auth


logger = logging.getLogger(__name__)


class AuthenticatePhase(BasePhase):
    """Compute headers/query/cookies for basic, bearer and API key auth."""

    def _execute(self, ctx: RequestContext) -> RequestContext:
        auth = effective_auth(ctx.request.authentication, ctx.collection_auth)
        result = build_auth_result(auth)
        if result is None:
            return ctx

        logger.debug(f"Auth applied | request={ctx.request_id} | type={auth.type}")
        return ctx.with_auth_result(result)
