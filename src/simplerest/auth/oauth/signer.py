"""OAuth 1.0a request signing.

:class:`OAuthSigner` implements the signing algorithm of :rfc:`5849`
once; the four flows of :class:`~simplerest.models.OAuthType` differ only
in which credentials are required and which extra protocol parameters are
added, both looked up in per-flow tables.

Signing a request:

1. Check the credentials the flow requires.
2. Draw a fresh nonce and read the clock.
3. Assemble the protocol parameters plus the flow extras.
4. Canonicalize them together with the request's parameters: encode every
   name and value, sort by name then value, join as ``name=value`` with
   ``&``.
5. Build the base string ``METHOD&enc(url)&enc(params)``.
6. Sign it with the key ``enc(consumer_secret)&enc(token_secret)``.

The signer keeps no state between calls, so the same request can be
signed any number of times, concurrently included.
"""

from __future__ import annotations

import logging
import secrets
import string
import time
from dataclasses import dataclass
from typing import Callable, Iterable, Optional
from urllib.parse import parse_qsl, urlsplit

from oauthlib.oauth1.rfc5849 import signature as oauth_signature
from oauthlib.oauth1.rfc5849 import utils as oauth_utils

from simplerest.auth.oauth.pairs import WebPair, WebParameter
from simplerest.exceptions import AuthError
from simplerest.models import OAuthSignatureMethod, OAuthType

logger = logging.getLogger(__name__)

OAUTH_VERSION = "1.0"
XAUTH_MODE = "client_auth"

_NONCE_ALPHABET = string.ascii_lowercase + string.digits


def generate_nonce(length: int = 16) -> str:
    """Return a random nonce of lowercase letters and digits."""
    return "".join(secrets.choice(_NONCE_ALPHABET) for _ in range(length))


@dataclass(frozen=True)
class OAuthCredentials:
    """Everything an OAuth 1.0a flow may sign with.

    Which fields are mandatory depends on the :class:`OAuthType`; an empty
    ``token_secret`` is valid and signs with an empty key half.
    """

    consumer_key: Optional[str] = None
    consumer_secret: Optional[str] = None
    token: Optional[str] = None
    token_secret: Optional[str] = None
    callback: Optional[str] = None
    verifier: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    realm: Optional[str] = None


@dataclass(frozen=True)
class OAuthSignature:
    """Result of one signing operation.

    Attributes:
        signature: The ``oauth_signature`` value.
        base_string: The signature base string that was signed.
        parameters: Protocol parameters in sorted order, ``oauth_signature``
            included.
        realm: Optional realm for the ``Authorization`` header.
    """

    signature: str
    base_string: str
    parameters: tuple[WebParameter, ...]
    realm: Optional[str] = None

    @property
    def oauth_parameters(self) -> list[WebParameter]:
        return [p for p in self.parameters if p.is_oauth]

    @property
    def extra_parameters(self) -> list[WebParameter]:
        """Non-``oauth_`` protocol parameters (xAuth), sent as request parameters."""
        return [p for p in self.parameters if not p.is_oauth]

    def authorization_header(self) -> str:
        """Render the ``Authorization: OAuth ...`` header value."""
        parts = []
        if self.realm:
            # Realm is an RFC 2617 quoted-string, not a percent-encoded value.
            realm = self.realm.replace("\\", "\\\\").replace('"', '\\"')
            parts.append(f'realm="{realm}"')
        parts.extend(
            f'{p.name}="{oauth_utils.escape(p.value)}"' for p in self.oauth_parameters
        )
        return "OAuth " + ", ".join(parts)


# --- Per-flow tables ---

_REQUIRED_FIELDS: dict[OAuthType, tuple[str, ...]] = {
    OAuthType.REQUEST_TOKEN: ("consumer_key", "consumer_secret"),
    OAuthType.ACCESS_TOKEN: ("consumer_key", "consumer_secret", "token"),
    OAuthType.PROTECTED_RESOURCE: ("consumer_key", "consumer_secret"),
    OAuthType.CLIENT_AUTHENTICATION: (
        "consumer_key",
        "consumer_secret",
        "username",
        "password",
    ),
}


def _request_token_extras(credentials: OAuthCredentials) -> list[WebParameter]:
    if credentials.callback:
        return [WebParameter("oauth_callback", credentials.callback)]
    return []


def _access_token_extras(credentials: OAuthCredentials) -> list[WebParameter]:
    if credentials.verifier:
        return [WebParameter("oauth_verifier", credentials.verifier)]
    return []


def _protected_resource_extras(credentials: OAuthCredentials) -> list[WebParameter]:
    return []


def _client_authentication_extras(credentials: OAuthCredentials) -> list[WebParameter]:
    return [
        WebParameter("x_auth_username", credentials.username or ""),
        WebParameter("x_auth_password", credentials.password or ""),
        WebParameter("x_auth_mode", XAUTH_MODE),
    ]


_FLOW_EXTRAS: dict[OAuthType, Callable[[OAuthCredentials], list[WebParameter]]] = {
    OAuthType.REQUEST_TOKEN: _request_token_extras,
    OAuthType.ACCESS_TOKEN: _access_token_extras,
    OAuthType.PROTECTED_RESOURCE: _protected_resource_extras,
    OAuthType.CLIENT_AUTHENTICATION: _client_authentication_extras,
}


# --- Canonicalization ---

_HMAC_SIGNERS: dict[OAuthSignatureMethod, Callable[[str, str, str], str]] = {
    OAuthSignatureMethod.HMAC_SHA1: oauth_signature.sign_hmac_sha1,
    OAuthSignatureMethod.HMAC_SHA256: oauth_signature.sign_hmac_sha256,
}


def query_pairs(url: str) -> list[tuple[str, str]]:
    """Decoded ``(name, value)`` pairs of the query string embedded in *url*."""
    query = urlsplit(url).query
    if not query:
        return []
    return parse_qsl(query, keep_blank_values=True)


def normalize_parameters(pairs: Iterable[WebPair]) -> str:
    """Return the normalized parameter string (:rfc:`5849` section 3.4.1.3.2).

    Every name and value is percent-encoded, the encoded pairs are sorted by
    name then value and joined as ``name=value`` with ``&``.
    ``oauth_signature`` never takes part.
    """
    return oauth_signature.normalize_parameters(
        [(p.name, p.value) for p in pairs if p.name != "oauth_signature"]
    )


def signature_base_string(method: str, url: str, pairs: Iterable[WebPair]) -> str:
    """Build ``METHOD&enc(base_string_uri)&enc(normalized_params)``.

    Pairs found in *url*'s own query string are part of the parameter set.

    Raises:
        AuthError: If *url* has no scheme or host.
    """
    all_pairs = [*pairs, *(WebPair(name, value) for name, value in query_pairs(url))]
    try:
        base_uri = oauth_signature.base_string_uri(url)
    except ValueError as exc:
        raise AuthError(f"Cannot sign request for '{url}': {exc}") from exc
    return oauth_signature.signature_base_string(method, base_uri, normalize_parameters(all_pairs))


def compute_signature(
    signature_method: OAuthSignatureMethod,
    base_string: str,
    consumer_secret: str,
    token_secret: Optional[str],
) -> str:
    if signature_method == OAuthSignatureMethod.PLAINTEXT:
        return oauth_signature.sign_plaintext(consumer_secret, token_secret or "")
    sign = _HMAC_SIGNERS.get(signature_method)
    if sign is None:
        raise AuthError(f"Unsupported signature method: {signature_method}")
    return sign(base_string, consumer_secret, token_secret or "")


class OAuthSigner:
    """Sign requests for any :class:`~simplerest.models.OAuthType`.

    Args:
        signature_method: Value of ``oauth_signature_method``.
        clock: Returns the current Unix time in seconds.
        nonce_factory: Returns a fresh nonce for every call.

    Example::

        signer = OAuthSigner()
        result = signer.sign(
            OAuthType.PROTECTED_RESOURCE,
            OAuthCredentials("key", "secret", "token", "token-secret"),
            "GET",
            "https://api.example.com/photos",
            [WebPair("size", "original")],
        )
        headers = {"Authorization": result.authorization_header()}
    """

    def __init__(
        self,
        signature_method: OAuthSignatureMethod = OAuthSignatureMethod.HMAC_SHA1,
        clock: Optional[Callable[[], float]] = None,
        nonce_factory: Optional[Callable[[], str]] = None,
    ) -> None:
        self.signature_method = signature_method
        self._clock = clock or time.time
        self._nonce_factory = nonce_factory or generate_nonce

    def validate(self, oauth_type: OAuthType, credentials: OAuthCredentials) -> list[str]:
        """Return one message per credential the flow requires but *credentials* lacks."""
        return [
            f"OAuth {oauth_type.value} signing requires '{field_name}'"
            for field_name in _REQUIRED_FIELDS[oauth_type]
            if not getattr(credentials, field_name)
        ]

    def protocol_parameters(
        self,
        oauth_type: OAuthType,
        credentials: OAuthCredentials,
        nonce: str,
        timestamp: str,
    ) -> list[WebParameter]:
        parameters = [
            WebParameter("oauth_consumer_key", credentials.consumer_key or ""),
            WebParameter("oauth_nonce", nonce),
            WebParameter("oauth_signature_method", self.signature_method.value),
            WebParameter("oauth_timestamp", timestamp),
            WebParameter("oauth_version", OAUTH_VERSION),
        ]
        if credentials.token:
            parameters.append(WebParameter("oauth_token", credentials.token))
        parameters.extend(_FLOW_EXTRAS[oauth_type](credentials))
        return parameters

    def sign(
        self,
        oauth_type: OAuthType,
        credentials: OAuthCredentials,
        method: str,
        url: str,
        parameters: Iterable[WebPair] = (),
    ) -> OAuthSignature:
        """Sign a request.

        Args:
            oauth_type: The flow to sign for.
            credentials: Consumer and token credentials.
            method: HTTP method sent on the wire.
            url: Request URL; its query string, if any, is signed as well.
            parameters: Decoded request parameters (query or form fields).

        Returns:
            An :class:`OAuthSignature` with the signature, base string and
            protocol parameters.

        Raises:
            AuthError: If a credential required by *oauth_type* is missing.
        """
        errors = self.validate(oauth_type, credentials)
        if errors:
            raise AuthError("; ".join(errors))

        nonce = self._nonce_factory()
        timestamp = str(int(self._clock()))
        protocol = self.protocol_parameters(oauth_type, credentials, nonce, timestamp)

        base_string = signature_base_string(method, url, [*protocol, *parameters])
        signature = compute_signature(
            self.signature_method,
            base_string,
            credentials.consumer_secret or "",
            credentials.token_secret,
        )
        logger.debug(
            "Signed %s %s for %s with nonce %s", method.upper(), url, oauth_type.value, nonce
        )

        signed = sorted(
            [*protocol, WebParameter("oauth_signature", signature)],
            key=lambda p: p.name,
        )
        return OAuthSignature(
            signature=signature,
            base_string=base_string,
            parameters=tuple(signed),
            realm=credentials.realm,
        )
