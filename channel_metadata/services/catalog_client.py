from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, cast
from urllib.error import HTTPError, URLError
from urllib.parse import urlencode
from urllib.request import Request, urlopen

from channel_metadata.config import DEFAULT_API_BASE_URL

LOGGER = logging.getLogger("channel_metadata.catalog")

USER_AGENT = "channel-metadata/0.1"


class CatalogServiceError(Exception):
    pass


class AuthenticationError(CatalogServiceError):
    pass


class RemoteApiError(CatalogServiceError):
    def __init__(self, status: int, message: str) -> None:
        super().__init__(f"YouTube API error: {status} - {message}")
        self.status = status
        self.message = message


class CatalogTransportError(RemoteApiError):
    """The request never produced a usable HTTP response."""

    def __init__(self, message: str) -> None:
        super().__init__(0, message)


class NotFoundError(CatalogServiceError):
    pass


class InvalidFetchOptionsError(CatalogServiceError):
    pass


class NothingToExportError(CatalogServiceError):
    pass


@dataclass(frozen=True)
class AuthParams:
    headers: dict[str, str] = field(default_factory=dict)
    query: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class CatalogResponse:
    status_code: int
    payload: dict[str, Any] | None
    reason: str = ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


class CatalogClient:
    """GET-only JSON client for the YouTube Data API v3."""

    def __init__(
        self,
        base_url: str = DEFAULT_API_BASE_URL,
        *,
        timeout_seconds: float | None = None,
    ) -> None:
        self._base_url = base_url.strip().rstrip("/")
        self._timeout_seconds = timeout_seconds

    @property
    def base_url(self) -> str:
        return self._base_url

    def get(
        self,
        resource: str,
        params: Mapping[str, str],
        auth: AuthParams,
    ) -> dict[str, Any]:
        query = urlencode({**params, **auth.query})
        url = f"{self._base_url}/{resource}?{query}"
        headers = {
            "accept": "application/json",
            "user-agent": USER_AGENT,
            **auth.headers,
        }

        response = _fetch_catalog_json(
            url=url,
            headers=headers,
            timeout_seconds=self._timeout_seconds,
        )
        if not response.ok:
            message = _extract_error_message(response.payload) or response.reason or "Unknown error"
            LOGGER.warning(
                "catalog request failed resource=%s status=%s message=%s",
                resource,
                response.status_code,
                message,
            )
            raise RemoteApiError(response.status_code, message)
        if response.payload is None:
            raise CatalogTransportError(
                f"Catalog returned an undecodable response for {resource}"
            )

        LOGGER.debug(
            "catalog request ok resource=%s status=%s params=%s",
            resource,
            response.status_code,
            sorted(params.items()),
        )
        return response.payload


def _fetch_catalog_json(
    *,
    url: str,
    headers: dict[str, str],
    timeout_seconds: float | None,
) -> CatalogResponse:
    request = Request(url, headers=headers, method="GET")

    status_code = 0
    raw_body = ""
    reason = ""
    try:
        if timeout_seconds is None:
            opened = urlopen(request)
        else:
            opened = urlopen(request, timeout=timeout_seconds)
        with opened as response:
            status_code = int(response.getcode() or 0)
            raw_body = response.read().decode("utf-8", errors="replace")
            reason = str(getattr(response, "reason", "") or "")
    except HTTPError as exc:
        status_code = int(exc.code)
        raw_body = exc.read().decode("utf-8", errors="replace")
        reason = str(exc.reason or "")
    except (URLError, TimeoutError, OSError) as exc:
        raise CatalogTransportError(f"Catalog request failed: {exc}") from exc

    return CatalogResponse(
        status_code=status_code,
        payload=_parse_json_dict(raw_body),
        reason=reason,
    )


def _parse_json_dict(raw_body: str) -> dict[str, Any] | None:
    if not raw_body.strip():
        return {}
    try:
        parsed = json.loads(raw_body)
    except json.JSONDecodeError:
        return None
    if not isinstance(parsed, dict):
        return None
    return cast(dict[str, Any], parsed)


def _extract_error_message(payload: dict[str, Any] | None) -> str | None:
    if payload is None:
        return None
    error = payload.get("error")
    if isinstance(error, dict):
        message = cast(dict[str, Any], error).get("message")
        if isinstance(message, str) and message.strip():
            return message.strip()
        return None
    # OAuth endpoints answer with {"error": "...", "error_description": "..."}.
    if isinstance(error, str) and error.strip():
        description = payload.get("error_description")
        if isinstance(description, str) and description.strip():
            return description.strip()
        return error.strip()
    return None
