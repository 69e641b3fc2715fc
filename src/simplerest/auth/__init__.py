"""Pluggable request authentication for simplerest.

The main entry points are:

- :class:`Authenticator` -- abstract base class; the client calls
  :meth:`~Authenticator.authenticate` on its working copy of every request.
- :class:`OAuth1Authenticator` -- OAuth 1.0a signing for the request-token,
  access-token, protected-resource and xAuth flows.
- :class:`HttpBasicAuthenticator` and :class:`StaticHeaderAuthenticator`.
- :class:`AuthManager` / :func:`create_default_manager` -- build an
  authenticator from a profile's :class:`~simplerest.models.AuthConfig`.

Typical usage::

    from simplerest.auth import create_default_manager

    authenticator = create_default_manager().create_for_profile(profile)
"""

from simplerest.auth.base import Authenticator
from simplerest.auth.basic import HttpBasicAuthenticator, StaticHeaderAuthenticator
from simplerest.auth.manager import AuthManager, create_default_manager
from simplerest.auth.oauth import OAuth1Authenticator, OAuthCredentials, OAuthSigner

__all__ = [
    "AuthManager",
    "Authenticator",
    "HttpBasicAuthenticator",
    "OAuth1Authenticator",
    "OAuthCredentials",
    "OAuthSigner",
    "StaticHeaderAuthenticator",
    "create_default_manager",
]
