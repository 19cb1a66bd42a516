from __future__ import annotations

import logging
from typing import Optional, Protocol

import requests

from ..core.constants import DEFAULT_ASSISTANT_TIMEOUT
from ..core.exceptions import UpstreamError

logger = logging.getLogger(__name__)

GEMINI_URL = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"


def _candidate_text(body: object) -> str:
    """Text of the first candidate; anything off-shape yields ""."""
    candidates = body.get("candidates") if isinstance(body, dict) else None
    if not isinstance(candidates, list) or not candidates or not isinstance(candidates[0], dict):
        return ""
    content = candidates[0].get("content")
    parts = content.get("parts") if isinstance(content, dict) else None
    if not isinstance(parts, list):
        return ""
    return "".join(p["text"] for p in parts if isinstance(p, dict) and isinstance(p.get("text"), str)).strip()


class TextGenerator(Protocol):
    def generate(self, *, system_prompt: str, prompt: str) -> str:
        raise NotImplementedError


class GeminiClient(TextGenerator):
    """Minimal client for the Gemini ``generateContent`` REST endpoint."""

    def __init__(
        self,
        *,
        api_key: str,
        model: str = "gemini-2.0-flash",
        timeout: float = DEFAULT_ASSISTANT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self._api_key = api_key
        self._model = model
        self._timeout = timeout
        self._session = session or requests.Session()

    def generate(self, *, system_prompt: str, prompt: str) -> str:
        if not self._api_key:
            logger.error("GEMINI_API_KEY not configured")
            raise UpstreamError("AI assistant is not configured")

        payload = {
            "systemInstruction": {"parts": [{"text": system_prompt}]},
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
        }
        try:
            response = self._session.post(
                GEMINI_URL.format(model=self._model),
                params={"key": self._api_key},
                json=payload,
                headers={"Content-Type": "application/json"},
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            logger.error("Gemini request failed: %s", e)
            raise UpstreamError("Failed to generate response") from e

        if response.status_code != 200:
            logger.error("Gemini API error: %s - %s", response.status_code, response.text[:200])
            raise UpstreamError("Failed to generate response")

        try:
            body = response.json()
        except ValueError as e:
            raise UpstreamError("Failed to generate response") from e

        text = _candidate_text(body)
        if not text:
            logger.warning("Gemini returned no text: %.200r", body)
            raise UpstreamError("Failed to generate response")
        return text
