"""
Validating parsers - the trust boundary for collaborator input and engine output.

Each parser accepts a mapping (or an existing model instance, which is
re-validated from its dump) and returns a validated model, or raises
SchemaViolation. There is no recovery: a violation on a response means an
engine bug, not a user error.
"""

from collections.abc import Mapping
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from knurl.errors import SchemaViolation

from .environment import Environment, Variable
from .request import Request
from .response import ResponseState

ModelT = TypeVar("ModelT", bound=BaseModel)


def _parse(model: type[ModelT], candidate: Any) -> ModelT:
    if isinstance(candidate, BaseModel):
        candidate = candidate.model_dump()
    if not isinstance(candidate, Mapping):
        raise SchemaViolation(
            model=model.__name__,
            errors=[{"loc": (), "msg": f"expected an object, got {type(candidate).__name__}"}],
        )
    try:
        return model.model_validate(candidate)
    except ValidationError as e:
        raise SchemaViolation(
            model=model.__name__,
            errors=[{"loc": err["loc"], "msg": err["msg"], "type": err["type"]} for err in e.errors()],
        ) from e


def parse_variable(candidate: Any) -> Variable:
    return _parse(Variable, candidate)


def parse_environment(candidate: Any) -> Environment:
    return _parse(Environment, candidate)


def parse_request(candidate: Any) -> Request:
    return _parse(Request, candidate)


def parse_response(candidate: Any) -> ResponseState:
    """Validate an engine's output against the response contract."""
    return _parse(ResponseState, candidate)
