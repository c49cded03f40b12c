"""Async httpx client for the remembered-funding metadata endpoint.

Endpoint: GET {metadata_url}
Response: {"rememberedFunding": ["paypal", "venmo", ...]}
"""

from __future__ import annotations

import logging

import httpx
from pydantic import ValidationError

from checkout_funding.config import settings
from checkout_funding.schemas.funding import RememberedFundingMetadata

logger = logging.getLogger(__name__)


class MetadataFetchError(Exception):
    """Raised when the remembered-funding metadata cannot be retrieved."""


class MetadataClient:
    """Thin async wrapper around the metadata endpoint. No retries."""

    def __init__(self, url: str | None = None, timeout: float | None = None) -> None:
        self._url = (url if url is not None else settings.metadata.metadata_url).rstrip("/")
        self._timeout = httpx.Timeout(
            timeout if timeout is not None else settings.metadata.metadata_timeout,
            connect=5.0,
        )

    @property
    def _bypass_mode(self) -> bool:
        """Return True if no metadata URL is configured (dev/test bypass)."""
        return not self._url

    async def fetch_remembered_funding(self) -> RememberedFundingMetadata:
        """Fetch the authoritative remembered-funding list.

        In bypass mode returns an empty list without any HTTP request.
        """
        if self._bypass_mode:
            logger.debug("Metadata bypass mode active (no URL configured)")
            return RememberedFundingMetadata()

        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.get(self._url)
                response.raise_for_status()
                payload = response.json()

        except httpx.TimeoutException as exc:
            logger.warning("Metadata request timed out: %s", self._url)
            msg = "Remembered funding metadata request timed out"
            raise MetadataFetchError(msg) from exc

        except httpx.HTTPStatusError as exc:
            logger.warning("Metadata HTTP error %s", exc.response.status_code)
            msg = f"Remembered funding metadata returned HTTP {exc.response.status_code}"
            raise MetadataFetchError(msg) from exc

        except httpx.RequestError as exc:
            logger.warning("Metadata transport error: %s", exc)
            msg = "Remembered funding metadata request failed"
            raise MetadataFetchError(msg) from exc

        except ValueError as exc:
            logger.warning("Metadata response is not valid JSON")
            msg = "Remembered funding metadata is not valid JSON"
            raise MetadataFetchError(msg) from exc

        if not isinstance(payload, dict):
            msg = "Remembered funding metadata is not a JSON object"
            raise MetadataFetchError(msg)

        try:
            metadata = RememberedFundingMetadata.model_validate(payload)
        except ValidationError as exc:
            msg = "Remembered funding metadata has an unexpected shape"
            raise MetadataFetchError(msg) from exc
        logger.debug("Metadata returned %d remembered source(s)", len(metadata.remembered_funding))
        return metadata
