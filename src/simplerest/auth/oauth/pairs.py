"""Immutable name/value pairs used during OAuth canonicalization."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class WebPair:
    """A name/value pair taking part in the signature base string."""

    name: str
    value: str


@dataclass(frozen=True)
class WebParameter(WebPair):
    """A protocol parameter produced by the signer (``oauth_*`` or ``x_auth_*``)."""

    @property
    def is_oauth(self) -> bool:
        return self.name.startswith("oauth_")
