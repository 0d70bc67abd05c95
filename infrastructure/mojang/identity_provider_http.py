from __future__ import annotations

import logging
from typing import Optional
from urllib.parse import quote

import requests

from domain.errors import ProviderDecodeError, ProviderUnavailable
from domain.models import IdentityRecord
from domain.repositories import IdentityProvider

logger = logging.getLogger(__name__)

MOJANG_PROFILE_URL = "https://api.mojang.com/users/profiles/minecraft"
DEFAULT_TIMEOUT_SECONDS = 5.0

# Mojang answers 204 (older API) or 404 (current API) for unknown names,
# and 400 for names that cannot exist. 429 and 5xx are provider faults.
_UNKNOWN_PLAYER_STATUSES = (204,)
_RATE_LIMITED = 429


class MojangIdentityProvider(IdentityProvider):
    """
    `IdentityProvider` backed by Mojang's username -> profile endpoint.

    The response body `{"name": ..., "id": ...}` is decoded into an
    `IdentityRecord`; the `id` is the compact (hyphen-free) UUID.
    """

    def __init__(
        self,
        base_url: str = MOJANG_PROFILE_URL,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._session = session or requests.Session()

    def _profile_url(self, display_name: str) -> str:
        return f"{self._base_url}/{quote(display_name, safe='')}"

    @staticmethod
    def _is_client_error(status_code: int) -> bool:
        return 400 <= status_code < 500 and status_code != _RATE_LIMITED

    def fetch(self, display_name: str) -> IdentityRecord:
        url = self._profile_url(display_name)
        try:
            response = self._session.get(url, timeout=self._timeout)
        except requests.RequestException as exc:
            raise ProviderUnavailable(f"Failed to reach identity provider: {exc}") from exc

        status = response.status_code
        if status in _UNKNOWN_PLAYER_STATUSES or self._is_client_error(status):
            logger.debug("Identity provider does not know %r", display_name)
            return IdentityRecord(display_name=display_name, external_id="")

        if status != 200:
            raise ProviderUnavailable(
                f"Identity provider answered HTTP {status} for {display_name!r}"
            )

        if not response.content.strip():
            return IdentityRecord(display_name=display_name, external_id="")

        return self._decode(response)

    @staticmethod
    def _decode(response: requests.Response) -> IdentityRecord:
        try:
            payload = response.json()
        except ValueError as exc:
            raise ProviderDecodeError("Identity provider returned invalid JSON") from exc

        if not isinstance(payload, dict):
            raise ProviderDecodeError("Identity provider returned a non-object body")

        name = payload.get("name", "")
        external_id = payload.get("id", "")
        if not isinstance(name, str) or not isinstance(external_id, str):
            raise ProviderDecodeError("Identity provider returned non-string fields")

        return IdentityRecord(display_name=name, external_id=external_id)
