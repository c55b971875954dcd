"""Shared pytest fixtures for knurl tests."""

from typing import Any, Callable

import pytest

from knurl.domain import (
    Environment,
    EnvironmentId,
    Request,
    Variable,
    parse_request,
)
from knurl.runtime.context import RequestContext


# =============================================================================
# Request Fixtures
# =============================================================================

@pytest.fixture
def make_request() -> Callable[..., Request]:
    """Factory for requests with sensible defaults; keyword args override."""

    def _make(**overrides: Any) -> Request:
        data: dict[str, Any] = {
            "id": "req-1",
            "collectionId": "col-1",
            "name": "Get users",
            "method": "GET",
            "url": "https://{{host}}/users/{{id}}",
            "headers": {},
            "queryParams": {},
            "body": {"type": "none"},
        }
        data.update(overrides)
        return parse_request(data)

    return _make


@pytest.fixture
def sample_request(make_request) -> Request:
    """The request from the host/id scenario."""
    return make_request()


# =============================================================================
# Environment Fixtures
# =============================================================================

def make_environment(**variables: tuple[str, bool]) -> Environment:
    """Build an environment from name=(value, enabled) pairs."""
    return Environment(
        id=EnvironmentId("env-1"),
        name="Test Env",
        variables={
            f"v-{name}": Variable(id=f"v-{name}", name=name, value=value, enabled=enabled)
            for name, (value, enabled) in variables.items()
        },
    )


@pytest.fixture
def environment_factory() -> Callable[..., Environment]:
    """Factory: environment_factory(host=("api.example.com", True), ...)."""
    return make_environment


@pytest.fixture
def empty_environment() -> Environment:
    """An environment with no variables."""
    return make_environment()


@pytest.fixture
def mixed_environment() -> Environment:
    """host is disabled, id is enabled."""
    return make_environment(
        host=("api.example.com", False),
        id=("123", True),
    )


@pytest.fixture
def full_environment() -> Environment:
    """Both host and id enabled."""
    return make_environment(
        host=("api.example.com", True),
        id=("123", True),
    )


# =============================================================================
# Context Fixtures
# =============================================================================

@pytest.fixture
def request_context(sample_request: Request, full_environment: Environment) -> RequestContext:
    """A fresh context for the sample request."""
    return RequestContext.create(sample_request, full_environment)


@pytest.fixture
def ws_context(make_request) -> RequestContext:
    """A context for a WebSocket request."""
    return RequestContext.create(make_request(url="wss://socket.example.com/live"))
