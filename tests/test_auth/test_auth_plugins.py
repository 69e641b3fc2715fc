"""Tests for AuthManager and the basic/static-header authenticators."""

from __future__ import annotations

import base64
from pathlib import Path

import pytest

from simplerest.auth.basic import HttpBasicAuthenticator, StaticHeaderAuthenticator
from simplerest.auth.manager import AuthManager, create_default_manager
from simplerest.auth.oauth import OAuth1Authenticator
from simplerest.exceptions import AuthError, ConfigError
from simplerest.models import (
    AuthConfig,
    ClientConfig,
    OAuthParameterHandling,
    OAuthSignatureMethod,
    OAuthType,
    ParameterType,
    Profile,
    RestRequest,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class _Client:
    config = ClientConfig(base_url="https://api.example.com")

    def build_uri(self, request, *, include_query=None) -> str:
        return "https://api.example.com/"


def _make_auth_config(**kwargs: object) -> AuthConfig:
    """Build an AuthConfig with sensible defaults overridden by kwargs."""
    defaults: dict[str, object] = {"type": "header", "header": "X-Api-Key", "source": "env:TEST_TOKEN"}
    defaults.update(kwargs)
    return AuthConfig(**defaults)  # type: ignore[arg-type]


def _headers(request: RestRequest) -> list[tuple[str, str]]:
    return [(p.name, p.value) for p in request.parameters_of(ParameterType.HTTP_HEADER)]


# ---------------------------------------------------------------------------
# HttpBasicAuthenticator
# ---------------------------------------------------------------------------


class TestHttpBasicAuthenticator:
    def test_encodes_credentials(self) -> None:
        request = RestRequest()
        HttpBasicAuthenticator("ann", "s3cret").authenticate(_Client(), request)
        expected = base64.b64encode(b"ann:s3cret").decode()
        assert _headers(request) == [("Authorization", f"Basic {expected}")]

    def test_unicode(self) -> None:
        request = RestRequest()
        HttpBasicAuthenticator("josé", "päss").authenticate(_Client(), request)
        expected = base64.b64encode("josé:päss".encode("utf-8")).decode()
        assert _headers(request) == [("Authorization", f"Basic {expected}")]

    def test_existing_authorization_left_alone(self) -> None:
        request = RestRequest().add_header("authorization", "Bearer x")
        HttpBasicAuthenticator("ann", "pw").authenticate(_Client(), request)
        assert _headers(request) == [("authorization", "Bearer x")]

    def test_username_required(self) -> None:
        with pytest.raises(AuthError, match="username"):
            HttpBasicAuthenticator("", "pw")


# ---------------------------------------------------------------------------
# StaticHeaderAuthenticator
# ---------------------------------------------------------------------------


class TestStaticHeaderAuthenticator:
    def test_adds_header(self) -> None:
        request = RestRequest()
        StaticHeaderAuthenticator("X-Api-Key", "k1").authenticate(_Client(), request)
        assert _headers(request) == [("X-Api-Key", "k1")]

    def test_replaces_existing_header(self) -> None:
        request = RestRequest().add_header("x-api-key", "old").add_header("Accept", "*/*")
        StaticHeaderAuthenticator("X-Api-Key", "new").authenticate(_Client(), request)
        assert _headers(request) == [("Accept", "*/*"), ("X-Api-Key", "new")]

    def test_name_required(self) -> None:
        with pytest.raises(AuthError, match="header name"):
            StaticHeaderAuthenticator("", "v")


# ---------------------------------------------------------------------------
# Built-in factories
# ---------------------------------------------------------------------------


class TestBuiltinFactories:
    def test_header_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TEST_TOKEN", "tok-123")
        auth = create_default_manager().create(_make_auth_config())
        assert isinstance(auth, StaticHeaderAuthenticator)

        request = RestRequest()
        auth.authenticate(_Client(), request)
        assert _headers(request) == [("X-Api-Key", "tok-123")]

    def test_header_name_required(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TEST_TOKEN", "tok-123")
        with pytest.raises(AuthError, match="'header' name"):
            create_default_manager().create(_make_auth_config(header=None))

    def test_header_from_file(self, tmp_path: Path) -> None:
        secret = tmp_path / "token.txt"
        secret.write_text("file-token\n")
        auth = create_default_manager().create(_make_auth_config(source=f"file:{secret}"))

        request = RestRequest()
        auth.authenticate(_Client(), request)
        assert _headers(request) == [("X-Api-Key", "file-token")]

    def test_basic(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TEST_BASIC", "ann:pa:ss")
        auth = create_default_manager().create(
            _make_auth_config(type="basic", header=None, source="env:TEST_BASIC")
        )
        request = RestRequest()
        auth.authenticate(_Client(), request)
        expected = base64.b64encode(b"ann:pa:ss").decode()
        assert _headers(request) == [("Authorization", f"Basic {expected}")]

    def test_basic_without_colon_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TEST_BASIC", "no-colon")
        with pytest.raises(AuthError, match="colon"):
            create_default_manager().create(
                _make_auth_config(type="basic", source="env:TEST_BASIC")
            )

    def test_missing_env_var_raises_config_error(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("TEST_TOKEN", raising=False)
        with pytest.raises(ConfigError, match="TEST_TOKEN"):
            create_default_manager().create(_make_auth_config())

    def test_oauth1(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CK", "key")
        monkeypatch.setenv("CS", "secret")
        monkeypatch.setenv("TOK", "token")
        config = AuthConfig(
            type="oauth1",
            oauth_type=OAuthType.ACCESS_TOKEN,
            parameter_handling=OAuthParameterHandling.URL_OR_POST_PARAMETERS,
            signature_method=OAuthSignatureMethod.PLAINTEXT,
            consumer_key_source="env:CK",
            consumer_secret_source="env:CS",
            token_source="env:TOK",
            callback="oob",
            realm="api",
        )
        auth = create_default_manager().create(config)

        assert isinstance(auth, OAuth1Authenticator)
        assert auth.oauth_type == OAuthType.ACCESS_TOKEN
        assert auth.parameter_handling == OAuthParameterHandling.URL_OR_POST_PARAMETERS
        assert auth.signer.signature_method == OAuthSignatureMethod.PLAINTEXT
        assert auth.credentials.consumer_key == "key"
        assert auth.credentials.consumer_secret == "secret"
        assert auth.credentials.token == "token"
        assert auth.credentials.token_secret == ""
        assert auth.credentials.verifier is None
        assert auth.credentials.callback == "oob"
        assert auth.credentials.realm == "api"

    def test_oauth1_requires_consumer_sources(self) -> None:
        with pytest.raises(AuthError, match="consumer_secret_source"):
            create_default_manager().create(
                AuthConfig(type="oauth1", consumer_key_source="env:CK")
            )


# ---------------------------------------------------------------------------
# AuthManager
# ---------------------------------------------------------------------------


class TestAuthManager:
    def test_register_and_get_factory(self) -> None:
        manager = AuthManager()

        def factory(config: AuthConfig) -> StaticHeaderAuthenticator:
            return StaticHeaderAuthenticator("X-Test", "v")

        manager.register("custom", factory)
        assert manager.get_factory("custom") is factory

    def test_register_overwrites_existing(self) -> None:
        manager = AuthManager()
        manager.register("custom", lambda c: StaticHeaderAuthenticator("A", "1"))
        second = lambda c: StaticHeaderAuthenticator("B", "2")  # noqa: E731
        manager.register("custom", second)
        assert manager.get_factory("custom") is second

    def test_unknown_type_lists_available(self) -> None:
        with pytest.raises(AuthError, match="Available types: basic, header, oauth1"):
            create_default_manager().get_factory("oauth2")

    def test_unknown_type_empty_registry(self) -> None:
        with pytest.raises(AuthError, match=r"\(none\)"):
            AuthManager().get_factory("basic")

    def test_list_types_sorted(self) -> None:
        assert create_default_manager().list_types() == ["basic", "header", "oauth1"]
        assert AuthManager().list_types() == []

    def test_create_for_profile(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TEST_TOKEN", "tok")
        profile = Profile(name="p", auth=_make_auth_config())
        auth = create_default_manager().create_for_profile(profile)
        assert isinstance(auth, StaticHeaderAuthenticator)

    def test_create_for_profile_without_auth(self) -> None:
        manager = create_default_manager()
        assert manager.create_for_profile(Profile(name="p")) is None
        assert manager.create_for_profile(None) is None

    def test_create_for_profile_unknown_type(self) -> None:
        profile = Profile(name="p", auth=AuthConfig(type="digest"))
        with pytest.raises(AuthError, match="digest"):
            create_default_manager().create_for_profile(profile)
