from __future__ import annotations

import logging

from channel_metadata.models.metadata_contracts import FetchOptions, ResultSet
from channel_metadata.services.catalog_client import AuthenticationError, NothingToExportError
from channel_metadata.services.credentials import Credential
from channel_metadata.services.metadata_service import ChannelMetadataService

LOGGER = logging.getLogger("channel_metadata.session")


class MetadataSession:
    """Caller-owned state: the active credential and the last fetched results."""

    def __init__(
        self,
        service: ChannelMetadataService,
        credential: Credential | None = None,
    ) -> None:
        self._service = service
        self._credential = credential
        self._last_results: ResultSet | None = None

    @property
    def is_signed_in(self) -> bool:
        return self._credential is not None

    @property
    def credential(self) -> Credential | None:
        return self._credential

    @property
    def last_results(self) -> ResultSet | None:
        return self._last_results

    def sign_in(self, credential: Credential) -> None:
        self._credential = credential
        LOGGER.info("session signed in auth_mode=%s", credential.mode)

    def sign_out(self) -> None:
        self._credential = None
        self._last_results = None
        LOGGER.info("session signed out")

    def fetch(self, options: FetchOptions) -> ResultSet:
        if self._credential is None:
            raise AuthenticationError("Please sign in first.")

        result_set = self._service.fetch_result_set(self._credential, options)
        self._last_results = result_set
        return result_set

    def require_last_results(self) -> ResultSet:
        if self._last_results is None:
            raise NothingToExportError("No data to download. Please fetch data first.")
        return self._last_results
