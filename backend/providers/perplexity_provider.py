"""Perplexity provider -- researches company metrics with the sonar
chat-completions API and parses the JSON answer into a ResearchRecord."""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Optional

import httpx
from pydantic import ValidationError

from backend.config.settings import Settings
from backend.models.research import ResearchRecord
from backend.prompts.research_system import RESEARCH_SYSTEM_PROMPT, build_research_message

from .base import ResearchProvider
from .errors import ConfigurationError, InvalidIdentifierError, ParseError, UpstreamError

logger = logging.getLogger(__name__)

_CODE_FENCE_RE = re.compile(r"```json|```")


class PerplexityProvider(ResearchProvider):
    """Fetches company metric estimates from Perplexity."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self._settings = settings or Settings()
        self._client = client or httpx.AsyncClient(
            timeout=self._settings.research_timeout_seconds
        )

    async def health_check(self) -> bool:
        if not self._settings.perplexity_api_key:
            return False
        try:
            resp = await self._client.get(self._settings.perplexity_api_url)
            return resp.status_code < 500
        except httpx.HTTPError as e:
            logger.error(f"Perplexity health check failed: {e}")
            return False

    async def research(self, domain: str) -> ResearchRecord:
        domain = (domain or "").strip()
        if not domain:
            raise InvalidIdentifierError("Domain is required")

        api_key = self._settings.perplexity_api_key
        if not api_key:
            raise ConfigurationError("PERPLEXITY_API_KEY not configured")

        try:
            resp = await self._client.post(
                self._settings.perplexity_api_url,
                headers={
                    "Authorization": f"Bearer {api_key}",
                    "Content-Type": "application/json",
                },
                json={
                    "model": self._settings.perplexity_model,
                    "messages": [
                        {"role": "system", "content": RESEARCH_SYSTEM_PROMPT},
                        {"role": "user", "content": build_research_message(domain)},
                    ],
                    "temperature": self._settings.research_temperature,
                },
            )
        except httpx.HTTPError as e:
            logger.error(f"Perplexity request failed for {domain}: {e}")
            raise UpstreamError("Research provider is unreachable", detail=str(e)) from e

        if not resp.is_success:
            logger.error(f"Perplexity API error {resp.status_code} for {domain}: {resp.text}")
            raise UpstreamError(
                "Research provider returned an error",
                status=resp.status_code,
                detail=resp.text,
            )

        try:
            data = resp.json()
        except ValueError as e:
            raise ParseError("Failed to parse AI response", raw=resp.text) from e

        content = _extract_content(data)
        citations = data.get("citations") if isinstance(data, dict) else None
        return parse_research_content(content, citations or [])

    async def aclose(self) -> None:
        await self._client.aclose()


def _extract_content(data: Any) -> str:
    """Pull choices[0].message.content out of a chat-completions payload."""
    if not isinstance(data, dict):
        return ""
    choices = data.get("choices") or []
    if not choices or not isinstance(choices[0], dict):
        return ""
    message = choices[0].get("message") or {}
    content = message.get("content") if isinstance(message, dict) else None
    return content if isinstance(content, str) else ""


def strip_code_fences(text: str) -> str:
    """Remove ```json / ``` markers the model sometimes adds."""
    return _CODE_FENCE_RE.sub("", text).strip()


def parse_research_content(content: str, citations: list[str]) -> ResearchRecord:
    """Parse model output into a record; provider citations replace any in the text.

    Raises ParseError carrying the raw content when the text is not a JSON
    object matching the research schema.
    """
    try:
        parsed = json.loads(strip_code_fences(content))
        if not isinstance(parsed, dict):
            raise ParseError("Failed to parse AI response", raw=content)
        return ResearchRecord.model_validate({**parsed, "citations": list(citations)})
    except (json.JSONDecodeError, ValidationError) as e:
        logger.error(f"Could not parse research response ({len(content)} chars): {e}")
        raise ParseError("Failed to parse AI response", raw=content) from e
