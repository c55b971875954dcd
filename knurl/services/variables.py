"""
Variable substitution - replaces {{name}} placeholders with environment values.

Rules:
- Only enabled variables participate; disabled or unknown names leave the
  placeholder exactly as written.
- Substitution is single-pass: an inserted value is never re-scanned, so a
  value containing {{other}} is inserted verbatim.
- The placeholder name is opaque; no whitespace trimming inside the braces.

Everything here is pure: requests are frozen models and new ones are built
with model_copy.
"""

import logging
import re
from collections.abc import Mapping

from knurl.domain import Environment, Request, RequestBody, RequestParam


logger = logging.getLogger(__name__)

PLACEHOLDER_PATTERN = re.compile(r"\{\{([^}]+)\}\}")


def build_variable_map(environment: Environment | None) -> dict[str, str]:
    """Map variable names to values, skipping disabled variables."""
    if environment is None:
        return {}
    return environment.enabled_values()


def substitute_variables(text: str, variables: Mapping[str, str]) -> str:
    """Replace every known placeholder in `text` in one left-to-right pass."""
    if not text or not variables:
        return text

    def _replace(match: re.Match[str]) -> str:
        return variables.get(match.group(1), match.group(0))

    return PLACEHOLDER_PATTERN.sub(_replace, text)


def find_placeholders(text: str) -> list[str]:
    """Names of all placeholders in `text`, in order of appearance."""
    return PLACEHOLDER_PATTERN.findall(text or "")


def _substitute_params(
    params: Mapping[str, RequestParam],
    variables: Mapping[str, str],
) -> dict[str, RequestParam]:
    return {
        key: param.model_copy(update={"value": substitute_variables(param.value, variables)})
        for key, param in params.items()
    }


def _inject_params(url: str, params: Mapping[str, RequestParam]) -> str:
    """
    Fill {{param}} tokens in the url from resolved path/query param values.

    A param whose value still holds a placeholder is skipped so unresolved
    tokens are never copied into the url.
    """
    for key, param in params.items():
        if not param.enabled:
            continue
        name = param.name or key
        if "{{" in param.value:
            continue
        url = url.replace(f"{{{{{name}}}}}", param.value)
    return url


def _substitute_body(body: RequestBody, variables: Mapping[str, str]) -> RequestBody:
    if body.type == "text" and body.content:
        return body.model_copy(
            update={"content": substitute_variables(body.content, variables)}
        )
    if body.type == "form" and body.form_data:
        form_data = {
            key: (
                field.model_copy(update={"value": substitute_variables(field.value, variables)})
                if field.kind == "text"
                else field
            )
            for key, field in body.form_data.items()
        }
        return body.model_copy(update={"form_data": form_data})
    return body


def resolve_request_variables(
    request: Request,
    environment: Environment | None,
) -> Request:
    """
    Return a copy of `request` with placeholders resolved.

    Rewritten fields: url, header values, query/path/cookie param values,
    text body content and text form field values. Every other field passes
    through unchanged. With no enabled variables the same request object is
    returned.
    """
    variables = build_variable_map(environment)
    if not variables:
        return request

    path_params = _substitute_params(request.path_params, variables)
    query_params = _substitute_params(request.query_params, variables)

    url = substitute_variables(request.url, variables)
    url = _inject_params(url, path_params)
    url = _inject_params(url, query_params)

    resolved = request.model_copy(
        update={
            "url": url,
            "path_params": path_params,
            "query_params": query_params,
            "headers": _substitute_params(request.headers, variables),
            "cookie_params": _substitute_params(request.cookie_params, variables),
            "body": _substitute_body(request.body, variables),
        }
    )

    unresolved = find_placeholders(resolved.url)
    if unresolved:
        disabled = [name for name in unresolved if environment.get_variable(name) is not None]
        logger.debug(
            f"Unresolved placeholders left in url | request={request.id} | "
            f"names={unresolved} | disabled={disabled}"
        )
    return resolved
