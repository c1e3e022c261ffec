"""Client for the HTTP research endpoint (POST /api/research)."""

from __future__ import annotations

import logging
from typing import Optional

import httpx
from pydantic import ValidationError

from backend.config.settings import Settings
from backend.models.research import ResearchRecord

from .base import ResearchProvider
from .errors import (
    ERROR_KIND_HEADER,
    ConfigurationError,
    InvalidIdentifierError,
    ParseError,
    UpstreamError,
)

logger = logging.getLogger(__name__)


class ResearchAPIClient(ResearchProvider):
    """Calls a running research endpoint and maps its error bodies back
    onto the research error types.

    Without an injected client a short-lived one is opened per call, so
    the provider can be driven from successive event loops.
    """

    RESEARCH_PATH = "/api/research"

    def __init__(
        self,
        settings: Optional[Settings] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self._settings = settings or Settings()
        self._client = client

    def _new_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._settings.research_api_url,
            timeout=self._settings.research_timeout_seconds,
        )

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        if self._client is not None:
            return await self._client.request(method, path, **kwargs)
        async with self._new_client() as client:
            return await client.request(method, path, **kwargs)

    async def health_check(self) -> bool:
        try:
            resp = await self._request("GET", "/health")
            return resp.status_code == 200
        except httpx.HTTPError as e:
            logger.error(f"Research API health check failed: {e}")
            return False

    async def research(self, domain: str) -> ResearchRecord:
        try:
            resp = await self._request("POST", self.RESEARCH_PATH, json={"domain": domain})
        except httpx.HTTPError as e:
            logger.error(f"Research API unreachable: {e}")
            raise UpstreamError("Research service is unreachable", detail=str(e)) from e

        try:
            body = resp.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}

        kind = resp.headers.get(ERROR_KIND_HEADER, "")
        if resp.status_code == 400:
            raise InvalidIdentifierError(body.get("error") or "Domain is required")
        if not resp.is_success:
            message = body.get("error") or "Research failed"
            if kind == ConfigurationError.kind:
                raise ConfigurationError(message)
            if kind == ParseError.kind or "raw" in body:
                raise ParseError(message, raw=body.get("raw") or "")
            raise UpstreamError(message, status=resp.status_code, detail=resp.text)

        try:
            return ResearchRecord.model_validate(body)
        except ValidationError as e:
            raise ParseError("Research service returned an invalid record", raw=resp.text) from e
