"""Tests for knurl.runtime.phases.resolve_variables module."""

import importlib

import pytest

from knurl.domain import Environment, Request
from knurl.errors import PhaseError
from knurl.runtime.context import RequestContext
from knurl.runtime.phases import ResolveVariablesPhase, resolve_variables


class TestResolveVariables:
    """Tests for the resolve_variables function."""

    def test_resolves_url(self, request_context: RequestContext):
        """Test the host/id scenario with both variables enabled."""
        new_ctx = resolve_variables(request_context)

        assert new_ctx.request.url == "https://api.example.com/users/123"
        assert request_context.request.url == "https://{{host}}/users/{{id}}"

    def test_disabled_variable(self, sample_request: Request, mixed_environment: Environment):
        """Test a disabled variable is left as a literal placeholder."""
        ctx = RequestContext.create(sample_request, mixed_environment)

        new_ctx = resolve_variables(ctx)

        assert new_ctx.request.url == "https://{{host}}/users/123"

    def test_no_environment_returns_same_context(self, sample_request: Request):
        """Test nothing changes without an environment."""
        ctx = RequestContext.create(sample_request)

        assert resolve_variables(ctx) is ctx

    def test_empty_environment_returns_same_context(
        self,
        sample_request: Request,
        empty_environment: Environment,
    ):
        """Test an environment with no variables is a no-op."""
        ctx = RequestContext.create(sample_request, empty_environment)

        assert resolve_variables(ctx) is ctx

    def test_other_fields_unchanged(self, request_context: RequestContext):
        """Test only placeholder-bearing fields are rewritten."""
        new_ctx = resolve_variables(request_context)

        assert new_ctx.request.id == request_context.request.id
        assert new_ctx.request.method == request_context.request.method
        assert new_ctx.request.authentication == request_context.request.authentication
        assert new_ctx.correlation_id == request_context.correlation_id


class TestResolveVariablesPhase:
    """Tests for ResolveVariablesPhase."""

    def test_name(self):
        """Test the phase name."""
        assert ResolveVariablesPhase().name == "resolve_variables"

    @pytest.mark.asyncio
    async def test_execute(self, request_context: RequestContext):
        """Test executing through the phase wrapper."""
        new_ctx = await ResolveVariablesPhase().execute(request_context)

        assert new_ctx.request.url == "https://api.example.com/users/123"

    @pytest.mark.asyncio
    async def test_errors_are_wrapped(self, request_context: RequestContext, monkeypatch):
        """Test resolver failures surface as PhaseError."""

        def broken(request, environment):
            raise RuntimeError("resolver broke")

        module = importlib.import_module("knurl.runtime.phases.resolve_variables")
        monkeypatch.setattr(module, "resolve_request_variables", broken)

        with pytest.raises(PhaseError) as exc_info:
            await ResolveVariablesPhase().execute(request_context)

        assert exc_info.value.phase_name == "resolve_variables"
        assert exc_info.value.request_id == "req-1"
