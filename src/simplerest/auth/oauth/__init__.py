"""OAuth 1.0a request signing.

- :class:`OAuthSigner` -- canonicalization and signature computation shared
  by every flow.
- :class:`OAuth1Authenticator` -- attaches signatures to requests as an
  ``Authorization`` header or as request parameters.
- :class:`OAuthCredentials` / :class:`OAuthSignature` -- signer input and
  output.
"""

from simplerest.auth.oauth.authenticator import OAuth1Authenticator
from simplerest.auth.oauth.pairs import WebPair, WebParameter
from simplerest.auth.oauth.signer import (
    OAuthCredentials,
    OAuthSignature,
    OAuthSigner,
    generate_nonce,
)
from simplerest.models import OAuthParameterHandling, OAuthSignatureMethod, OAuthType

__all__ = [
    "OAuth1Authenticator",
    "OAuthCredentials",
    "OAuthParameterHandling",
    "OAuthSignature",
    "OAuthSignatureMethod",
    "OAuthSigner",
    "OAuthType",
    "WebPair",
    "WebParameter",
    "generate_nonce",
]
