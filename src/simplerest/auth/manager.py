"""Auth manager -- build authenticators from profile configuration.

:class:`AuthManager` maps auth-type strings (``"oauth1"``, ``"basic"``,
``"header"``) to factories that resolve the credential sources of an
:class:`~simplerest.models.AuthConfig` and return a ready
:class:`~simplerest.auth.base.Authenticator`.

For most use cases, call :func:`create_default_manager` to get a manager
with every built-in type registered.
"""

from __future__ import annotations

from typing import Callable, Optional

from simplerest.auth.base import Authenticator
from simplerest.auth.basic import HttpBasicAuthenticator, StaticHeaderAuthenticator
from simplerest.auth.oauth.authenticator import OAuth1Authenticator
from simplerest.auth.oauth.signer import OAuthCredentials, OAuthSigner
from simplerest.config import resolve_credential, resolve_optional_credential
from simplerest.exceptions import AuthError
from simplerest.models import AuthConfig, Profile

AuthenticatorFactory = Callable[[AuthConfig], Authenticator]


class AuthManager:
    """Registry of authenticator factories keyed by auth type.

    Example::

        manager = AuthManager()
        manager.register("basic", basic_factory)
        authenticator = manager.create(profile.auth)
    """

    def __init__(self) -> None:
        self._factories: dict[str, AuthenticatorFactory] = {}

    def register(self, auth_type: str, factory: AuthenticatorFactory) -> None:
        """Register *factory* for *auth_type*, replacing an earlier registration."""
        self._factories[auth_type] = factory

    def get_factory(self, auth_type: str) -> AuthenticatorFactory:
        """Return the factory registered for *auth_type*.

        Raises:
            AuthError: If no factory is registered for *auth_type*.
        """
        factory = self._factories.get(auth_type)
        if factory is None:
            available = ", ".join(sorted(self._factories)) or "(none)"
            raise AuthError(
                f"No authenticator registered for type '{auth_type}'. "
                f"Available types: {available}"
            )
        return factory

    def create(self, auth_config: AuthConfig) -> Authenticator:
        return self.get_factory(auth_config.type)(auth_config)

    def create_for_profile(self, profile: Optional[Profile]) -> Optional[Authenticator]:
        """Return the profile's authenticator, or ``None`` without an auth section."""
        if profile is None or profile.auth is None:
            return None
        return self.create(profile.auth)

    def list_types(self) -> list[str]:
        return sorted(self._factories)


def _oauth1_factory(auth_config: AuthConfig) -> Authenticator:
    if not auth_config.consumer_key_source or not auth_config.consumer_secret_source:
        raise AuthError(
            "OAuth 1.0a auth requires 'consumer_key_source' and 'consumer_secret_source'"
        )
    credentials = OAuthCredentials(
        consumer_key=resolve_credential(auth_config.consumer_key_source),
        consumer_secret=resolve_credential(auth_config.consumer_secret_source),
        token=resolve_optional_credential(auth_config.token_source),
        token_secret=resolve_optional_credential(auth_config.token_secret_source) or "",
        verifier=resolve_optional_credential(auth_config.verifier_source),
        username=resolve_optional_credential(auth_config.username_source),
        password=resolve_optional_credential(auth_config.password_source),
        callback=auth_config.callback,
        realm=auth_config.realm,
    )
    return OAuth1Authenticator(
        credentials,
        oauth_type=auth_config.oauth_type,
        parameter_handling=auth_config.parameter_handling,
        signer=OAuthSigner(signature_method=auth_config.signature_method),
    )


def _basic_factory(auth_config: AuthConfig) -> Authenticator:
    raw = resolve_credential(auth_config.source)
    if ":" not in raw:
        raise AuthError(
            "Basic auth credential must be in 'username:password' format "
            "(colon separator is required)"
        )
    username, password = raw.split(":", 1)
    return HttpBasicAuthenticator(username, password)


def _header_factory(auth_config: AuthConfig) -> Authenticator:
    if not auth_config.header:
        raise AuthError("Header auth requires a 'header' name")
    return StaticHeaderAuthenticator(auth_config.header, resolve_credential(auth_config.source))


def create_default_manager() -> AuthManager:
    """Create an :class:`AuthManager` with the built-in types.

    - ``oauth1`` -- OAuth 1.0a signing (any :class:`~simplerest.models.OAuthType`).
    - ``basic`` -- HTTP Basic authentication from a ``user:password`` source.
    - ``header`` -- a static header (API key or pre-issued token).
    """
    manager = AuthManager()
    manager.register("oauth1", _oauth1_factory)
    manager.register("basic", _basic_factory)
    manager.register("header", _header_factory)
    return manager
