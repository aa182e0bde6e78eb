from __future__ import annotations

import pytest

from channel_metadata.services.catalog_client import AuthenticationError
from channel_metadata.services.credentials import (
    ApiKeyCredential,
    OAuthTokenCredential,
    resolve_credential,
)


def test_api_key_credential_auth_params() -> None:
    credential = ApiKeyCredential(key="secret-key", channel_id="UC1")

    params = credential.auth_params()

    assert params.query == {"key": "secret-key"}
    assert params.headers == {}
    assert credential.playlist_owner_params() == {"channelId": "UC1"}
    assert credential.channel_lookup_params() == {"id": "UC1"}
    assert "secret-key" not in repr(credential)


def test_oauth_token_credential_auth_params() -> None:
    credential = OAuthTokenCredential(token="secret-token")

    params = credential.auth_params()

    assert params.headers == {"Authorization": "Bearer secret-token"}
    assert params.query == {}
    assert credential.playlist_owner_params() == {"mine": "true"}
    assert credential.channel_lookup_params() == {"mine": "true"}
    assert "secret-token" not in repr(credential)


def test_resolve_credential_selects_variant() -> None:
    assert resolve_credential(access_token=" tok ") == OAuthTokenCredential(token="tok")
    assert resolve_credential(api_key="k", channel_id="UC1") == ApiKeyCredential(
        key="k", channel_id="UC1"
    )


@pytest.mark.parametrize(
    "kwargs",
    [
        {},
        {"api_key": "  ", "access_token": ""},
        {"channel_id": "UC1"},
        {"api_key": "k"},
        {"api_key": "k", "channel_id": "UC1", "access_token": "tok"},
    ],
)
def test_resolve_credential_rejects_missing_or_mixed(kwargs: dict[str, str]) -> None:
    with pytest.raises(AuthenticationError):
        resolve_credential(**kwargs)
