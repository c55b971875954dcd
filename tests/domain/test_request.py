"""Tests for knurl.domain.request module."""

import pytest

from knurl.domain import (
    ApiKeyAuth,
    BearerAuth,
    BodyPlacement,
    ClientOptions,
    HeaderPlacement,
    NoAuth,
    QueryPlacement,
    Request,
    RequestParam,
    parse_request,
)
from knurl.errors import SchemaViolation


class TestRequestParsing:
    """Tests for parsing request documents."""

    def test_camel_case_aliases(self):
        """Test camelCase keys populate snake_case fields."""
        request = parse_request({
            "id": "r1",
            "collectionId": "c1",
            "name": "Req",
            "method": "GET",
            "url": "http://example.com",
            "queryParams": {"q": {"id": "q", "name": "q", "value": "1"}},
        })

        assert request.collection_id == "c1"
        assert request.query_params["q"].value == "1"

    def test_snake_case_names(self):
        """Test snake_case field names are accepted too."""
        request = parse_request({
            "id": "r1",
            "collection_id": "c1",
            "name": "Req",
            "url": "http://example.com",
        })

        assert request.collection_id == "c1"
        assert request.method == "GET"

    def test_plain_header_mapping_expanded(self):
        """Test {name: value} shorthand becomes full params."""
        request = parse_request({
            "id": "r1",
            "collectionId": "c1",
            "name": "Req",
            "url": "http://example.com",
            "headers": {"X-Token": "{{token}}"},
        })

        header = request.headers["X-Token"]
        assert isinstance(header, RequestParam)
        assert header.name == "X-Token"
        assert header.value == "{{token}}"
        assert header.enabled is True

    def test_method_is_uppercased(self):
        """Test lowercase methods are normalized."""
        request = parse_request({
            "id": "r1", "collectionId": "c1", "name": "Req",
            "method": "post", "url": "http://example.com",
        })

        assert request.method == "POST"

    def test_unknown_method_rejected(self):
        """Test methods outside the supported set are rejected."""
        with pytest.raises(SchemaViolation):
            parse_request({
                "id": "r1", "collectionId": "c1", "name": "Req",
                "method": "BREW", "url": "http://example.com",
            })

    def test_missing_url_rejected(self):
        """Test a request without a url is rejected."""
        with pytest.raises(SchemaViolation) as exc_info:
            parse_request({"id": "r1", "collectionId": "c1", "name": "Req"})

        assert exc_info.value.model == "Request"
        assert any(err["loc"] == ("url",) for err in exc_info.value.errors)

    def test_body_defaults_to_none(self):
        """Test the body defaults to the none variant."""
        request = parse_request({
            "id": "r1", "collectionId": "c1", "name": "Req", "url": "http://x",
        })

        assert request.body.type == "none"
        assert isinstance(request.authentication, NoAuth)


class TestAuthentication:
    """Tests for the authentication tagged variant."""

    def test_bearer_nested_document(self):
        """Test a bearer document with nested credentials keeps its token."""
        request = parse_request({
            "id": "r1", "collectionId": "c1", "name": "Req", "url": "http://x",
            "authentication": {"type": "bearer", "bearer": {"token": "SECRET"}},
        })

        assert isinstance(request.authentication, BearerAuth)
        assert request.authentication.bearer.token == "SECRET"
        assert request.authentication.bearer.placement is None

    def test_api_key_nested_document(self):
        """Test the apiKey tag with a query placement."""
        request = parse_request({
            "id": "r1", "collectionId": "c1", "name": "Req", "url": "http://x",
            "authentication": {
                "type": "apiKey",
                "apiKey": {"key": "k", "value": "v", "placement": {"type": "query", "name": "api_key"}},
            },
        })

        assert isinstance(request.authentication, ApiKeyAuth)
        assert isinstance(request.authentication.api_key.placement, QueryPlacement)
        assert request.authentication.api_key.placement.name == "api_key"

    def test_placement_defaults(self):
        """Test placement names default per type."""
        request = parse_request({
            "id": "r1", "collectionId": "c1", "name": "Req", "url": "http://x",
            "authentication": {
                "type": "bearer",
                "bearer": {"token": "t", "placement": {"type": "header"}},
            },
        })

        assert request.authentication.bearer.placement == HeaderPlacement(name="Authorization")

    def test_body_placement_field_name(self):
        """Test body placement reads fieldName."""
        request = parse_request({
            "id": "r1", "collectionId": "c1", "name": "Req", "url": "http://x",
            "authentication": {
                "type": "apiKey",
                "apiKey": {"value": "v", "placement": {"type": "body", "fieldName": "token"}},
            },
        })

        assert isinstance(request.authentication.api_key.placement, BodyPlacement)
        assert request.authentication.api_key.placement.field_name == "token"

    def test_auth_dumps_to_nested_shape(self):
        """Test the wire form nests credentials under the tag."""
        request = parse_request({
            "id": "r1", "collectionId": "c1", "name": "Req", "url": "http://x",
            "authentication": {"type": "apiKey", "apiKey": {"value": "v"}},
        })

        dumped = request.model_dump(by_alias=True, exclude_none=True)

        assert dumped["authentication"] == {"type": "apiKey", "apiKey": {"value": "v"}}

    def test_unknown_auth_type_rejected(self):
        """Test an unknown auth tag is rejected."""
        with pytest.raises(SchemaViolation):
            parse_request({
                "id": "r1", "collectionId": "c1", "name": "Req", "url": "http://x",
                "authentication": {"type": "oauth2"},
            })


class TestClientOptions:
    """Tests for per-request client options."""

    @staticmethod
    def _parse(options):
        return parse_request({
            "id": "r1", "collectionId": "c1", "name": "Req", "url": "http://x",
            "options": options,
        })

    def test_absent_by_default(self):
        """Test requests carry no options unless given."""
        request = parse_request({"id": "r1", "collectionId": "c1", "name": "Req", "url": "http://x"})

        assert request.options is None

    def test_camel_case_document(self):
        """Test option documents use camelCase keys."""
        request = self._parse({
            "timeoutSecs": 5,
            "disableSsl": True,
            "maxRedirects": 0,
            "userAgent": "custom/1.0",
            "httpVersion": "http2",
        })

        assert request.options == ClientOptions(
            timeout_secs=5,
            disable_ssl=True,
            max_redirects=0,
            user_agent="custom/1.0",
            http_version="http2",
        )

    @pytest.mark.parametrize("raw,expected", [("2.5", 2.5), (" 10 ", 10.0), ("", None), ("   ", None)])
    def test_timeout_string(self, raw, expected):
        """Test timeouts given as strings are parsed; blank means unset."""
        assert self._parse({"timeoutSecs": raw}).options.timeout_secs == expected

    def test_negative_redirects_rejected(self):
        """Test maxRedirects cannot be negative."""
        with pytest.raises(SchemaViolation):
            self._parse({"maxRedirects": -1})


class TestEnabledHelpers:
    """Tests for enabled_headers / enabled_query_params."""

    def test_disabled_and_unnamed_skipped(self):
        """Test disabled and unnamed params are filtered."""
        request = Request(
            id="r1",
            collection_id="c1",
            name="Req",
            url="http://x",
            headers={
                "a": RequestParam(id="a", name="Accept", value="*/*"),
                "b": RequestParam(id="b", name="X-Off", value="1", enabled=False),
                "c": RequestParam(id="c", name="", value="orphan"),
            },
        )

        assert [h.name for h in request.enabled_headers()] == ["Accept"]
