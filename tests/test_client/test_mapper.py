"""Tests for mapping transport responses to RestResponse."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from simplerest.client.mapper import convert_to_rest_response
from simplerest.exceptions import AuthError, ConnectionError_, NotFoundError, ServerError
from simplerest.models import ParameterType, ResponseStatus, RestRequest
from simplerest.transport.base import HttpCookie, HttpHeader, HttpResponse


def _http_response(**overrides) -> HttpResponse:
    data = dict(
        content_type="application/json",
        content_length=11,
        content_encoding="gzip",
        content='{"id": 42}',
        raw_bytes=b'{"id": 42}',
        status_code=200,
        status_description="OK",
        response_uri="https://api.example.com/users/42",
        server="nginx",
        headers=[HttpHeader("Content-Type", "application/json"), HttpHeader("X-Rate", "10")],
        cookies=[
            HttpCookie(
                name="session",
                value="abc",
                domain="api.example.com",
                path="/",
                expires=datetime(2030, 1, 1, tzinfo=timezone.utc),
                secure=True,
                http_only=True,
            )
        ],
        response_status=ResponseStatus.COMPLETED,
    )
    data.update(overrides)
    return HttpResponse(**data)


class TestConvertToRestResponse:
    def test_copies_every_field(self) -> None:
        request = RestRequest(resource="users/42")
        response = convert_to_rest_response(request, _http_response())

        assert response.request is request
        assert response.status_code == 200
        assert response.status_description == "OK"
        assert response.content == '{"id": 42}'
        assert response.raw_bytes == b'{"id": 42}'
        assert response.content_type == "application/json"
        assert response.content_length == 11
        assert response.content_encoding == "gzip"
        assert response.response_uri == "https://api.example.com/users/42"
        assert response.server == "nginx"
        assert response.response_status == ResponseStatus.COMPLETED
        assert response.is_successful

    def test_headers_become_header_parameters(self) -> None:
        response = convert_to_rest_response(RestRequest(), _http_response())
        assert [(h.name, h.value) for h in response.headers] == [
            ("Content-Type", "application/json"),
            ("X-Rate", "10"),
        ]
        assert all(h.type == ParameterType.HTTP_HEADER for h in response.headers)
        assert response.get_header("x-rate") == "10"
        assert response.get_header("missing") is None

    def test_cookie_attributes_preserved(self) -> None:
        response = convert_to_rest_response(RestRequest(), _http_response())
        cookie = response.cookies[0]
        assert cookie.name == "session"
        assert cookie.value == "abc"
        assert cookie.domain == "api.example.com"
        assert cookie.path == "/"
        assert cookie.secure is True
        assert cookie.http_only is True
        assert cookie.expires == datetime(2030, 1, 1, tzinfo=timezone.utc)

    def test_transport_failure_passes_through(self) -> None:
        exc = OSError("connection refused")
        response = convert_to_rest_response(RestRequest(), HttpResponse.from_error(exc))
        assert response.response_status == ResponseStatus.ERROR
        assert response.error_message == "connection refused"
        assert response.error_exception is exc
        assert not response.is_successful

    def test_cache_flags_copied(self) -> None:
        response = convert_to_rest_response(
            RestRequest(), _http_response(from_cache=True, cache_expired=True)
        )
        assert response.from_cache is True
        assert response.cache_expired is True


class TestRaiseForStatus:
    def test_success_returns_self(self) -> None:
        response = convert_to_rest_response(RestRequest(), _http_response())
        assert response.raise_for_status() is response

    @pytest.mark.parametrize(
        "status, exc_type",
        [(401, AuthError), (403, AuthError), (404, NotFoundError), (409, ServerError), (503, ServerError)],
    )
    def test_http_errors_map_to_exceptions(self, status: int, exc_type: type) -> None:
        response = convert_to_rest_response(
            RestRequest(), _http_response(status_code=status, content="nope")
        )
        assert response.response_status == ResponseStatus.COMPLETED
        with pytest.raises(exc_type, match=f"HTTP {status}"):
            response.raise_for_status()

    def test_transport_failure_raises_connection_error(self) -> None:
        response = convert_to_rest_response(
            RestRequest(), HttpResponse.from_error(TimeoutError("slow"), ResponseStatus.TIMED_OUT)
        )
        with pytest.raises(ConnectionError_, match="slow"):
            response.raise_for_status()
