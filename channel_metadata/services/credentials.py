from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar

from channel_metadata.config import normalize_optional_text
from channel_metadata.services.catalog_client import AuthParams, AuthenticationError


@dataclass(frozen=True)
class ApiKeyCredential:
    """Public API key scoped to an explicit channel id."""

    mode: ClassVar[str] = "api_key"

    key: str = field(repr=False)
    channel_id: str

    def auth_params(self) -> AuthParams:
        return AuthParams(query={"key": self.key})

    def playlist_owner_params(self) -> dict[str, str]:
        return {"channelId": self.channel_id}

    def channel_lookup_params(self) -> dict[str, str]:
        return {"id": self.channel_id}


@dataclass(frozen=True)
class OAuthTokenCredential:
    """Bearer token; requests target the authenticated user's own channel."""

    mode: ClassVar[str] = "oauth_token"

    token: str = field(repr=False)

    def auth_params(self) -> AuthParams:
        return AuthParams(headers={"Authorization": f"Bearer {self.token}"})

    def playlist_owner_params(self) -> dict[str, str]:
        return {"mine": "true"}

    def channel_lookup_params(self) -> dict[str, str]:
        return {"mine": "true"}


Credential = ApiKeyCredential | OAuthTokenCredential


def resolve_credential(
    *,
    api_key: str | None = None,
    channel_id: str | None = None,
    access_token: str | None = None,
) -> Credential:
    key = normalize_optional_text(api_key)
    channel = normalize_optional_text(channel_id)
    token = normalize_optional_text(access_token)

    if key is not None and token is not None:
        raise AuthenticationError(
            "Provide either an API key with a channel id or an access token, not both."
        )
    if token is not None:
        return OAuthTokenCredential(token=token)
    if key is not None:
        if channel is None:
            raise AuthenticationError("Channel ID is required.")
        return ApiKeyCredential(key=key, channel_id=channel)
    raise AuthenticationError("An API key or an access token is required.")
