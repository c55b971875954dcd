"""
Services - pure helpers used by the runtime phases.

- variables: {{placeholder}} substitution against an environment snapshot
- auth: credentials derived from a request's authentication config
"""

from .variables import (
    PLACEHOLDER_PATTERN,
    build_variable_map,
    substitute_variables,
    find_placeholders,
    resolve_request_variables,
)
from .auth import build_auth_result, effective_auth

__all__ = [
    "PLACEHOLDER_PATTERN",
    "build_variable_map",
    "substitute_variables",
    "find_placeholders",
    "resolve_request_variables",
    "build_auth_result",
    "effective_auth",
]
