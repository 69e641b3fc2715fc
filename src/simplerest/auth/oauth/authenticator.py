"""OAuth 1.0a authenticator.

:class:`OAuth1Authenticator` signs the client's working copy of each
request with an :class:`~simplerest.auth.oauth.signer.OAuthSigner` and
attaches the result according to its
:class:`~simplerest.models.OAuthParameterHandling`:

- ``HTTP_AUTHORIZATION_HEADER`` -- an ``Authorization: OAuth ...`` header.
- ``URL_OR_POST_PARAMETERS`` -- ``GET_OR_POST`` parameters, so they land
  in the query string or the form body like any other parameter.

xAuth parameters (``x_auth_*``) are always sent as ``GET_OR_POST``
parameters.
"""

from __future__ import annotations

from typing import Any, Optional
from urllib.parse import parse_qsl

from simplerest.auth.base import Authenticator, UriBuildingClient, replace_header
from simplerest.auth.oauth.pairs import WebPair
from simplerest.auth.oauth.signer import OAuthCredentials, OAuthSignature, OAuthSigner
from simplerest.models import (
    OAuthParameterHandling,
    OAuthType,
    ParameterType,
    RestRequest,
)

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


def signable_parameters(request: RestRequest) -> list[WebPair]:
    """Request parameters that travel as query or form fields, decoded.

    ``GET_OR_POST`` parameters with a value, plus the fields of a
    form-encoded ``REQUEST_BODY``.
    """
    pairs: list[WebPair] = []
    for p in request.parameters:
        if p.type == ParameterType.GET_OR_POST and p.value is not None:
            pairs.append(WebPair(p.name, p.value_as_str()))
        elif p.type == ParameterType.REQUEST_BODY and p.name.lower().startswith(
            FORM_CONTENT_TYPE
        ):
            pairs.extend(
                WebPair(name, value)
                for name, value in parse_qsl(p.value_as_str(), keep_blank_values=True)
            )
    return pairs


class OAuth1Authenticator(Authenticator):
    """Sign requests with OAuth 1.0a.

    Use the ``for_*`` constructors to pick a flow::

        auth = OAuth1Authenticator.for_request_token(
            "consumer-key", "consumer-secret", callback="https://app.example.com/cb"
        )
        client = RestClient(base_url="https://api.example.com", authenticator=auth)
        response = client.execute(RestRequest(resource="oauth/request_token", method="POST"))

    Args:
        credentials: Consumer/token credentials for the flow.
        oauth_type: The flow to sign for.
        parameter_handling: Where to attach the signed parameters.
        signer: Signer to use; a default HMAC-SHA1 signer when omitted.
    """

    def __init__(
        self,
        credentials: OAuthCredentials,
        oauth_type: OAuthType = OAuthType.PROTECTED_RESOURCE,
        parameter_handling: OAuthParameterHandling = OAuthParameterHandling.HTTP_AUTHORIZATION_HEADER,
        signer: Optional[OAuthSigner] = None,
    ) -> None:
        self.credentials = credentials
        self.oauth_type = oauth_type
        self.parameter_handling = parameter_handling
        self.signer = signer or OAuthSigner()

    @classmethod
    def for_request_token(
        cls,
        consumer_key: str,
        consumer_secret: str,
        callback: Optional[str] = None,
        **kwargs: Any,
    ) -> OAuth1Authenticator:
        return cls(
            OAuthCredentials(
                consumer_key=consumer_key,
                consumer_secret=consumer_secret,
                callback=callback,
                realm=kwargs.pop("realm", None),
            ),
            OAuthType.REQUEST_TOKEN,
            **kwargs,
        )

    @classmethod
    def for_access_token(
        cls,
        consumer_key: str,
        consumer_secret: str,
        token: str,
        token_secret: str = "",
        verifier: Optional[str] = None,
        **kwargs: Any,
    ) -> OAuth1Authenticator:
        return cls(
            OAuthCredentials(
                consumer_key=consumer_key,
                consumer_secret=consumer_secret,
                token=token,
                token_secret=token_secret,
                verifier=verifier,
                realm=kwargs.pop("realm", None),
            ),
            OAuthType.ACCESS_TOKEN,
            **kwargs,
        )

    @classmethod
    def for_protected_resource(
        cls,
        consumer_key: str,
        consumer_secret: str,
        token: Optional[str] = None,
        token_secret: str = "",
        **kwargs: Any,
    ) -> OAuth1Authenticator:
        return cls(
            OAuthCredentials(
                consumer_key=consumer_key,
                consumer_secret=consumer_secret,
                token=token,
                token_secret=token_secret,
                realm=kwargs.pop("realm", None),
            ),
            OAuthType.PROTECTED_RESOURCE,
            **kwargs,
        )

    @classmethod
    def for_client_authentication(
        cls,
        consumer_key: str,
        consumer_secret: str,
        username: str,
        password: str,
        **kwargs: Any,
    ) -> OAuth1Authenticator:
        return cls(
            OAuthCredentials(
                consumer_key=consumer_key,
                consumer_secret=consumer_secret,
                username=username,
                password=password,
                realm=kwargs.pop("realm", None),
            ),
            OAuthType.CLIENT_AUTHENTICATION,
            **kwargs,
        )

    def sign_request(self, client: UriBuildingClient, request: RestRequest) -> OAuthSignature:
        """Compute the signature for *request* without modifying it."""
        url = client.build_uri(request, include_query=False)
        return self.signer.sign(
            self.oauth_type,
            self.credentials,
            request.method.value,
            url,
            signable_parameters(request),
        )

    def authenticate(self, client: UriBuildingClient, request: RestRequest) -> None:
        signature = self.sign_request(client, request)

        for p in signature.extra_parameters:
            request.add_parameter(p.name, p.value, ParameterType.GET_OR_POST)

        if self.parameter_handling == OAuthParameterHandling.HTTP_AUTHORIZATION_HEADER:
            replace_header(request, "Authorization", signature.authorization_header())
        else:
            for p in signature.oauth_parameters:
                request.add_parameter(p.name, p.value, ParameterType.GET_OR_POST)
