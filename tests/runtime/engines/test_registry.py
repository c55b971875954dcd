"""Tests for knurl.runtime.engines.registry module."""

import pytest

from knurl.errors import UnsupportedProtocolError
from knurl.runtime.engines import (
    EngineRegistry,
    HttpEngine,
    RequestEngine,
    WebSocketEngine,
    default_registry,
    url_scheme,
    with_default_scheme,
)


class TestEngineRegistry:
    """Tests for EngineRegistry registration and selection."""

    def test_register_and_get(self):
        """Test engines are retrievable by protocol."""
        registry = EngineRegistry()
        engine = WebSocketEngine()

        registry.register(engine, ["WS", "wss"])

        assert registry.get("websocket") is engine
        assert registry.schemes == ["ws", "wss"]
        assert registry.protocols == ["websocket"]

    def test_register_requires_scheme(self):
        """Test an engine must claim at least one scheme."""
        with pytest.raises(ValueError):
            EngineRegistry().register(WebSocketEngine(), [])

    def test_reregister_replaces(self):
        """Test a later registration wins for the same scheme."""
        registry = EngineRegistry()
        first, second = WebSocketEngine(), WebSocketEngine()

        registry.register(first, ["ws"])
        registry.register(second, ["ws"])

        assert registry.get("websocket") is second

    @pytest.mark.parametrize(
        "url,protocol",
        [
            ("http://example.com", "http"),
            ("https://example.com/a?b=c", "http"),
            ("HTTPS://EXAMPLE.COM", "http"),
            ("ws://localhost:8080/socket", "websocket"),
            ("wss://socket.example.com/live", "websocket"),
        ],
    )
    def test_select_by_scheme(self, make_request, url, protocol):
        """Test scheme-based selection."""
        registry = default_registry()

        assert registry.select(make_request(url=url)).protocol == protocol

    def test_select_is_deterministic(self, make_request):
        """Test the same request always maps to the same engine."""
        registry = default_registry()
        request = make_request(url="https://example.com")

        assert registry.select(request) is registry.select(request)

    def test_unsupported_scheme(self, make_request):
        """Test an unknown scheme is rejected."""
        registry = default_registry()

        with pytest.raises(UnsupportedProtocolError) as exc_info:
            registry.select(make_request(url="ftp://files.example.com/a.txt"))

        assert exc_info.value.scheme == "ftp"
        assert exc_info.value.request_id == "req-1"
        assert str(exc_info.value).startswith("Unsupported protocol: ftp")

    def test_schemeless_url_uses_declared_protocol(self, make_request):
        """Test the declared protocol is the fallback for scheme-less urls."""
        registry = default_registry()

        engine = registry.select(make_request(url="{{host}}/live", protocol="websocket"))

        assert engine.protocol == "websocket"

    def test_schemeless_url_without_protocol(self, make_request):
        """Test a scheme-less url with no declared protocol is rejected."""
        registry = default_registry()

        with pytest.raises(UnsupportedProtocolError) as exc_info:
            registry.select(make_request(url="/users/1"))

        assert exc_info.value.scheme == ""

    @pytest.mark.parametrize("url", ["api.example.com/users", "localhost:8080/users"])
    def test_schemeless_http_url(self, make_request, url):
        """Test host-only and host:port urls fall back to the declared http protocol."""
        registry = default_registry()

        engine = registry.select(make_request(url=url, protocol="http"))

        assert engine.protocol == "http"


class TestSchemeDefaulting:
    """Tests for url_scheme and with_default_scheme."""

    @pytest.mark.parametrize(
        "url,scheme",
        [
            ("https://example.com", "https"),
            ("WSS://example.com", "wss"),
            ("localhost:8080/users", ""),
            ("api.example.com/users", ""),
            ("/users/1", ""),
        ],
    )
    def test_url_scheme(self, url, scheme):
        """Test only an explicit `scheme://` prefix counts as a scheme."""
        assert url_scheme(url) == scheme

    @pytest.mark.parametrize(
        "url,expected",
        [
            ("api.example.com/users", "http://api.example.com/users"),
            ("localhost:8080/users", "http://localhost:8080/users"),
            ("//cdn.example.com/a", "http://cdn.example.com/a"),
        ],
    )
    def test_http_default(self, make_request, url, expected):
        """Test scheme-less http urls get http:// prefixed."""
        request = with_default_scheme(make_request(url=url, protocol="http"))

        assert request.url == expected

    def test_websocket_default(self, make_request):
        """Test scheme-less websocket urls get ws:// prefixed."""
        request = with_default_scheme(make_request(url="socket.example.com/live", protocol="websocket"))

        assert request.url == "ws://socket.example.com/live"

    def test_explicit_scheme_unchanged(self, make_request):
        """Test urls with a scheme are returned as-is."""
        request = make_request(url="https://api.example.com", protocol="websocket")

        assert with_default_scheme(request) is request

    def test_no_protocol_unchanged(self, make_request):
        """Test scheme-less urls without a declared protocol are left alone."""
        request = make_request(url="api.example.com/users")

        assert with_default_scheme(request) is request


class TestDefaultRegistry:
    """Tests for default_registry."""

    def test_contents(self):
        """Test the default registry wires http and websocket engines."""
        registry = default_registry()

        assert registry.schemes == ["http", "https", "ws", "wss"]
        assert isinstance(registry.get("http"), HttpEngine)
        assert isinstance(registry.get("websocket"), WebSocketEngine)

    def test_engines_satisfy_protocol(self):
        """Test built-in engines implement RequestEngine."""
        registry = default_registry()

        for protocol in registry.protocols:
            assert isinstance(registry.get(protocol), RequestEngine)
