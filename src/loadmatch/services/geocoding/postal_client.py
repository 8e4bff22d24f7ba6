"""HTTP client for the public postal-code lookup service (Zippopotam.us)."""

from __future__ import annotations

import logging
from typing import Protocol

import httpx

from ...config import settings
from ...errors import LookupUnavailable
from ...models.domain import PostalLookupKey, PostalLookupResult

logger = logging.getLogger(__name__)


class PostalLookup(Protocol):
    def lookup(self, key: PostalLookupKey) -> PostalLookupResult | None:
        """Return the location for ``key``, None if the code does not exist.

        Raises LookupUnavailable on transient failures.
        """


class ZippopotamClient:
    """Resolve US postal codes against ``{base_url}/{country}/{code}``.

    A single request is made per call; retrying is left to the caller.
    """

    def __init__(
        self,
        base_url: str | None = None,
        country: str | None = None,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or settings.postal_lookup_base_url).rstrip("/")
        if not self.base_url:
            raise ValueError("Postal lookup base URL is not configured.")
        self.country = country or settings.postal_lookup_country
        self.timeout = timeout if timeout is not None else settings.postal_lookup_timeout_seconds
        self._transport = transport

    def _get_client(self) -> httpx.Client:
        return httpx.Client(
            timeout=httpx.Timeout(self.timeout),
            transport=self._transport,
        )

    def lookup(self, key: PostalLookupKey) -> PostalLookupResult | None:
        url = f"{self.base_url}/{self.country}/{key.value}"
        client = self._get_client()
        try:
            try:
                response = client.get(url)
            except httpx.TimeoutException as exc:
                logger.warning(f"Postal lookup for {key} timed out after {self.timeout}s")
                raise LookupUnavailable(f"Postal lookup for {key} timed out") from exc
            except httpx.HTTPError as exc:
                logger.warning(f"Postal lookup for {key} failed: {exc}")
                raise LookupUnavailable(f"Failed to reach postal lookup service at {self.base_url}: {exc}") from exc

            if response.status_code == 404:
                return None
            try:
                response.raise_for_status()
            except httpx.HTTPStatusError as exc:
                logger.warning(f"Postal lookup for {key} returned HTTP {response.status_code}")
                raise LookupUnavailable(f"Postal lookup service error: HTTP {response.status_code}") from exc

            try:
                data = response.json()
            except ValueError as exc:
                raise LookupUnavailable(f"Postal lookup returned malformed JSON for {key}") from exc
            return _parse_place(key, data)
        finally:
            client.close()


def _parse_place(key: PostalLookupKey, data: dict) -> PostalLookupResult | None:
    places = data.get("places") if isinstance(data, dict) else None
    if not places:
        return None
    place = places[0]
    try:
        return PostalLookupResult(
            latitude=float(place["latitude"]),
            longitude=float(place["longitude"]),
            city=place.get("place name"),
            state=place.get("state abbreviation"),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise LookupUnavailable(f"Postal lookup returned an unreadable place for {key}") from exc


def check_health(base_url: str | None = None) -> bool:
    """Check the lookup service by resolving a well-known postal code."""
    base = (base_url or settings.postal_lookup_base_url).rstrip("/")
    if not base:
        return False
    try:
        url = f"{base}/{settings.postal_lookup_country}/90210"
        response = httpx.get(url, timeout=settings.postal_lookup_timeout_seconds)
        response.raise_for_status()
        return bool(response.json().get("places"))
    except (httpx.HTTPError, ValueError):
        return False
