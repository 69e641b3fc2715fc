"""Tests for the asynchronous REST client."""

from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from simplerest.auth.oauth import OAuth1Authenticator, OAuthSigner
from simplerest.client.async_client import AsyncRestClient
from simplerest.exceptions import InvalidUrlError, InvalidUsageError
from simplerest.models import ClientConfig, Parameter, ResponseStatus, RestRequest
from simplerest.transport.async_transport import AsyncHttpxTransport
from simplerest.transport.base import AsyncTransport, Http, HttpResponse


def _make_client(handler, config: ClientConfig | None = None, **kwargs) -> AsyncRestClient:
    transport = AsyncHttpxTransport(
        client=httpx.AsyncClient(transport=httpx.MockTransport(handler))
    )
    return AsyncRestClient(
        config=config or ClientConfig(base_url="https://api.example.com"),
        transport=transport,
        **kwargs,
    )


class _FailingTransport(AsyncTransport):
    async def execute(self, http: Http) -> HttpResponse:
        raise RuntimeError("exploded")


class _ClosingTransport(AsyncTransport):
    def __init__(self) -> None:
        self.closed = False

    async def execute(self, http: Http) -> HttpResponse:
        return HttpResponse(status_code=204, response_status=ResponseStatus.COMPLETED)

    async def aclose(self) -> None:
        self.closed = True


class TestAsyncExecute:
    def test_get(self) -> None:
        captured: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            captured.append(request)
            return httpx.Response(200, json={"id": 1})

        config = ClientConfig(
            base_url="https://api.example.com",
            default_parameters=[Parameter(name="format", value="json")],
        )

        async def run():
            async with _make_client(handler, config) as client:
                return await client.execute(RestRequest(resource="users/{id}").add_url_segment("id", 1))

        response = asyncio.run(run())
        assert response.response_status == ResponseStatus.COMPLETED
        assert json.loads(response.content) == {"id": 1}
        assert str(captured[0].url) == "https://api.example.com/users/1?format=json"

    def test_concurrent_requests_share_nothing(self) -> None:
        captured: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            captured.append(request)
            return httpx.Response(200, text=request.url.params["n"])

        request = RestRequest(resource="echo")

        async def run():
            client = _make_client(handler)
            calls = [
                client.execute(request.model_copy(deep=True).add_parameter("n", str(i)))
                for i in range(5)
            ]
            return await asyncio.gather(*calls)

        responses = asyncio.run(run())
        assert sorted(r.content for r in responses) == ["0", "1", "2", "3", "4"]
        assert request.parameters == []

    def test_execute_as_post(self) -> None:
        captured: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            captured.append(request)
            return httpx.Response(200)

        async def run():
            client = _make_client(handler)
            return await client.execute_as_post(
                RestRequest(resource="jobs").add_parameter("id", "7"), "PATCH"
            )

        asyncio.run(run())
        assert captured[0].method == "PATCH"
        assert captured[0].content == b"id=7"

    def test_execute_as_get(self) -> None:
        captured: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            captured.append(request)
            return httpx.Response(200)

        async def run():
            client = _make_client(handler)
            return await client.execute_as_get(
                RestRequest(resource="jobs", method="POST").add_parameter("id", "7"), "POST"
            )

        asyncio.run(run())
        assert captured[0].method == "POST"
        assert str(captured[0].url) == "https://api.example.com/jobs?id=7"

    def test_unexpected_exception_mapped(self) -> None:
        client = AsyncRestClient(base_url="https://api.example.com", transport=_FailingTransport())
        response = asyncio.run(client.execute(RestRequest(resource="x")))
        assert response.response_status == ResponseStatus.ERROR
        assert response.error_message == "exploded"

    def test_invalid_url_raised(self) -> None:
        client = AsyncRestClient(transport=_ClosingTransport())
        with pytest.raises(InvalidUrlError):
            asyncio.run(client.execute(RestRequest(resource="relative")))

    def test_unknown_verb_rejected(self) -> None:
        client = AsyncRestClient(base_url="https://api.example.com", transport=_FailingTransport())
        with pytest.raises(InvalidUsageError, match="PROPFIND"):
            asyncio.run(client.execute_as_post(RestRequest(resource="dav"), "PROPFIND"))

    def test_injected_transport_not_closed(self) -> None:
        transport = _ClosingTransport()

        async def run():
            async with AsyncRestClient(base_url="https://api.example.com", transport=transport) as client:
                return await client.execute(RestRequest(resource="x"))

        response = asyncio.run(run())
        assert response.status_code == 204
        assert transport.closed is False

    def test_oauth_photos_example(self) -> None:
        captured: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            captured.append(request)
            return httpx.Response(200)

        signer = OAuthSigner(clock=lambda: 1191242096, nonce_factory=lambda: "kllo9940pd9333jh")
        auth = OAuth1Authenticator.for_protected_resource(
            "dpf43f3p2l4k3l03",
            "kd94hf93k423kf44",
            "nnch734d00sl2jdk",
            "pfkkdhi9sl3r4s00",
            signer=signer,
        )

        async def run():
            client = _make_client(
                handler, ClientConfig(base_url="http://photos.example.net"), authenticator=auth
            )
            request = (
                RestRequest(resource="photos")
                .add_parameter("file", "vacation.jpg")
                .add_parameter("size", "original")
            )
            return await client.execute(request)

        asyncio.run(run())
        assert str(captured[0].url) == "http://photos.example.net/photos?file=vacation.jpg&size=original"
        assert 'oauth_signature="tR3%2BTy81lMeYAr%2FFid0kMTYa%2FWM%3D"' in captured[0].headers["authorization"]
