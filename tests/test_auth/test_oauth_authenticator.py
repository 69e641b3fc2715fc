"""Tests for OAuth1Authenticator: attaching signatures to requests."""

from __future__ import annotations

from typing import Optional

import pytest

from simplerest.auth.oauth import (
    OAuth1Authenticator,
    OAuthCredentials,
    OAuthParameterHandling,
    OAuthSigner,
    OAuthType,
    WebPair,
)
from simplerest.auth.oauth.authenticator import signable_parameters
from simplerest.client.builder import build_uri
from simplerest.exceptions import AuthError
from simplerest.models import ClientConfig, ParameterType, RestRequest


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class _StubClient:
    """Minimal client exposing what an authenticator may use."""

    def __init__(self, base_url: str) -> None:
        self.config = ClientConfig(base_url=base_url)
        self.calls: list[Optional[bool]] = []

    def build_uri(self, request: RestRequest, *, include_query: Optional[bool] = None) -> str:
        self.calls.append(include_query)
        return build_uri(self.config, request, include_query=include_query)


def _photos_signer() -> OAuthSigner:
    return OAuthSigner(clock=lambda: 1191242096, nonce_factory=lambda: "kllo9940pd9333jh")


def _photos_request() -> RestRequest:
    return (
        RestRequest(resource="photos")
        .add_parameter("file", "vacation.jpg")
        .add_parameter("size", "original")
    )


def _photos_auth(**kwargs) -> OAuth1Authenticator:
    return OAuth1Authenticator.for_protected_resource(
        "dpf43f3p2l4k3l03",
        "kd94hf93k423kf44",
        "nnch734d00sl2jdk",
        "pfkkdhi9sl3r4s00",
        signer=_photos_signer(),
        **kwargs,
    )


def _headers(request: RestRequest, name: str) -> list[str]:
    return [
        p.value
        for p in request.parameters
        if p.type == ParameterType.HTTP_HEADER and p.name.lower() == name.lower()
    ]


def _get_or_post(request: RestRequest) -> dict[str, str]:
    return {p.name: p.value for p in request.parameters_of(ParameterType.GET_OR_POST)}


# ---------------------------------------------------------------------------
# signable_parameters
# ---------------------------------------------------------------------------


class TestSignableParameters:
    def test_only_get_or_post_with_values(self) -> None:
        request = (
            RestRequest()
            .add_parameter("a", 1)
            .add_parameter("skip", None)
            .add_header("X-H", "h")
            .add_cookie("c", "v")
            .add_url_segment("id", "7")
        )
        assert signable_parameters(request) == [WebPair("a", "1")]

    def test_form_encoded_body_fields_decoded(self) -> None:
        request = RestRequest(method="POST").add_body(
            "b=x+y&c=%2F", "application/x-www-form-urlencoded; charset=utf-8"
        )
        assert signable_parameters(request) == [WebPair("b", "x y"), WebPair("c", "/")]

    def test_other_bodies_ignored(self) -> None:
        request = RestRequest(method="POST").add_body('{"a": 1}', "application/json")
        assert signable_parameters(request) == []


# ---------------------------------------------------------------------------
# Constructors
# ---------------------------------------------------------------------------


class TestConstructors:
    def test_for_request_token(self) -> None:
        auth = OAuth1Authenticator.for_request_token("ck", "cs", callback="oob", realm="R")
        assert auth.oauth_type == OAuthType.REQUEST_TOKEN
        assert auth.credentials == OAuthCredentials("ck", "cs", callback="oob", realm="R")
        assert auth.parameter_handling == OAuthParameterHandling.HTTP_AUTHORIZATION_HEADER

    def test_for_access_token(self) -> None:
        auth = OAuth1Authenticator.for_access_token("ck", "cs", "tok", "ts", verifier="v")
        assert auth.oauth_type == OAuthType.ACCESS_TOKEN
        assert auth.credentials.token == "tok"
        assert auth.credentials.token_secret == "ts"
        assert auth.credentials.verifier == "v"

    def test_for_protected_resource(self) -> None:
        auth = OAuth1Authenticator.for_protected_resource(
            "ck",
            "cs",
            parameter_handling=OAuthParameterHandling.URL_OR_POST_PARAMETERS,
        )
        assert auth.oauth_type == OAuthType.PROTECTED_RESOURCE
        assert auth.credentials.token is None
        assert auth.parameter_handling == OAuthParameterHandling.URL_OR_POST_PARAMETERS

    def test_for_client_authentication(self) -> None:
        auth = OAuth1Authenticator.for_client_authentication("ck", "cs", "ann", "pw")
        assert auth.oauth_type == OAuthType.CLIENT_AUTHENTICATION
        assert auth.credentials.username == "ann"
        assert auth.credentials.password == "pw"

    def test_default_signer(self) -> None:
        auth = OAuth1Authenticator(OAuthCredentials("ck", "cs"))
        assert isinstance(auth.signer, OAuthSigner)


# ---------------------------------------------------------------------------
# authenticate
# ---------------------------------------------------------------------------


class TestAuthenticate:
    def test_sign_request_uses_url_without_query(self) -> None:
        client = _StubClient("http://photos.example.net")
        signature = _photos_auth().sign_request(client, _photos_request())
        assert client.calls == [False]
        assert signature.signature == "tR3+Ty81lMeYAr/Fid0kMTYa/WM="

    def test_sign_request_does_not_modify_request(self) -> None:
        request = _photos_request()
        before = request.model_copy(deep=True)
        _photos_auth().sign_request(_StubClient("http://photos.example.net"), request)
        assert request == before

    def test_authorization_header(self) -> None:
        request = _photos_request()
        _photos_auth().authenticate(_StubClient("http://photos.example.net"), request)

        [header] = _headers(request, "Authorization")
        assert header.startswith("OAuth ")
        assert 'oauth_signature="tR3%2BTy81lMeYAr%2FFid0kMTYa%2FWM%3D"' in header
        assert _get_or_post(request) == {"file": "vacation.jpg", "size": "original"}

    def test_realm_in_header(self) -> None:
        request = _photos_request()
        _photos_auth(realm="http://photos.example.net/").authenticate(
            _StubClient("http://photos.example.net"), request
        )
        [header] = _headers(request, "Authorization")
        assert header.startswith('OAuth realm="http://photos.example.net/", oauth_consumer_key=')

    def test_reauthenticating_replaces_header(self) -> None:
        client = _StubClient("http://photos.example.net")
        request = _photos_request().add_header("authorization", "Bearer stale")
        auth = _photos_auth()
        auth.authenticate(client, request)
        auth.authenticate(client, request)
        assert len(_headers(request, "Authorization")) == 1
        assert _headers(request, "Authorization")[0].startswith("OAuth ")

    def test_url_or_post_parameters(self) -> None:
        client = _StubClient("http://photos.example.net")
        request = _photos_request()
        _photos_auth(
            parameter_handling=OAuthParameterHandling.URL_OR_POST_PARAMETERS
        ).authenticate(client, request)

        assert _headers(request, "Authorization") == []
        params = _get_or_post(request)
        assert params["oauth_signature"] == "tR3+Ty81lMeYAr/Fid0kMTYa/WM="
        assert params["oauth_consumer_key"] == "dpf43f3p2l4k3l03"
        assert params["oauth_token"] == "nnch734d00sl2jdk"
        assert params["oauth_nonce"] == "kllo9940pd9333jh"
        assert params["oauth_timestamp"] == "1191242096"

        url = build_uri(client.config, request)
        assert "oauth_signature=tR3%2BTy81lMeYAr%2FFid0kMTYa%2FWM%3D" in url

    def test_twitter_post(self) -> None:
        signer = OAuthSigner(
            clock=lambda: 1318622958,
            nonce_factory=lambda: "kYjzVBB8Y0ZFabxSWbWovY3uYSQ2pTgmZeNu2VS4cg",
        )
        auth = OAuth1Authenticator.for_protected_resource(
            "xvz1evFS4wEEPTGEFPHBog",
            "kAcSOqF21Fu85e7zjz7ZN2U4ZRhfV3WpwPAoE3Z7kBw",
            "370773112-GmHxMAgYyLbNEtIKZeRNFsMKPR9EyMZeS9weJAEb",
            "LswwdoUaIvS8ltyTt5jkRh4J50vUPVVHtR2YPi5kE",
            signer=signer,
        )
        request = (
            RestRequest(resource="statuses/update.json", method="POST")
            .add_parameter("include_entities", "true")
            .add_parameter("status", "Hello Ladies + Gentlemen, a signed OAuth request!")
        )
        auth.authenticate(_StubClient("https://api.twitter.com/1.1"), request)
        [header] = _headers(request, "Authorization")
        assert 'oauth_signature="tnnArxj06cWHq44gCs1OSKk%2FjLY%3D"' in header

    def test_xauth_parameters_added_as_get_or_post(self) -> None:
        auth = OAuth1Authenticator.for_client_authentication("ck", "cs", "ann", "pw")
        request = RestRequest(resource="oauth/access_token", method="POST")
        auth.authenticate(_StubClient("https://api.example.com"), request)

        params = _get_or_post(request)
        assert params == {
            "x_auth_username": "ann",
            "x_auth_password": "pw",
            "x_auth_mode": "client_auth",
        }
        [header] = _headers(request, "Authorization")
        assert "x_auth" not in header

    def test_missing_credentials_raise_before_changes(self) -> None:
        auth = OAuth1Authenticator.for_access_token("ck", "cs", token="")
        request = RestRequest(resource="oauth/access_token", method="POST")
        with pytest.raises(AuthError, match="token"):
            auth.authenticate(_StubClient("https://api.example.com"), request)
        assert request.parameters == []
