"""
Request phases - each phase transforms the RequestContext.

Default order:
1. ResolveVariablesPhase - substitute {{name}} placeholders
2. AuthenticatePhase - compute credentials from the auth config
3. DispatchPhase - run the engine selected for the request
"""

from .resolve_variables import ResolveVariablesPhase, resolve_variables
from .authenticate import AuthenticatePhase
from .dispatch import DispatchPhase

__all__ = [
    "ResolveVariablesPhase",
    "resolve_variables",
    "AuthenticatePhase",
    "DispatchPhase",
]
