"""Client for the external text-generation service (Gemini generateContent).

The service is a black box: one prompt in, one block of text out.
Every failure (transport error, timeout, non-200 status, empty text) is
raised as GenerationServiceError carrying the raw upstream body. No retries.
"""
import logging
from typing import Any, Dict, Optional, Protocol

import httpx

from app.core.config import settings

logger = logging.getLogger(__name__)


class GenerationServiceError(Exception):
    def __init__(self, message: str, status_code: Optional[int] = None, raw: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.raw = raw


class TextGenerator(Protocol):
    async def generate(self, prompt: str) -> str: ...


def build_payload(prompt: str) -> Dict[str, Any]:
    return {"contents": [{"role": "user", "parts": [{"text": prompt}]}]}


def extract_text(data: Dict[str, Any]) -> str:
    """Pull candidates[0].content.parts[0].text, or "" when the shape is off."""
    try:
        return (data["candidates"][0]["content"]["parts"][0]["text"] or "").strip()
    except (KeyError, IndexError, TypeError):
        return ""


class GeminiClient:
    def __init__(
        self,
        api_key: str,
        model: str = "gemini-1.5-flash",
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    @property
    def url(self) -> str:
        return f"{self.base_url}/models/{self.model}:generateContent"

    async def generate(self, prompt: str) -> str:
        async with httpx.AsyncClient(
            timeout=self.timeout, transport=self.transport
        ) as client:
            try:
                response = await client.post(
                    self.url,
                    params={"key": self.api_key},
                    json=build_payload(prompt),
                )
            except httpx.HTTPError as error:
                logger.error(f"Generation request failed: {error!r}")
                raise GenerationServiceError(
                    "Generation service unreachable", raw=str(error)
                ) from error

        if response.status_code != 200:
            logger.error(
                f"Generation service error: Status {response.status_code}, Body: {response.text}"
            )
            raise GenerationServiceError(
                "Generation service error",
                status_code=response.status_code,
                raw=response.text,
            )

        try:
            text = extract_text(response.json())
        except ValueError:
            text = ""

        if not text:
            logger.error(f"Generation service returned no text: {response.text}")
            raise GenerationServiceError(
                "Generation service returned no text",
                status_code=response.status_code,
                raw=response.text,
            )
        return text


def get_generation_client() -> TextGenerator:
    """FastAPI dependency; tests override it with a fake generator."""
    return GeminiClient(
        api_key=settings.GEMINI_API_KEY,
        model=settings.GEMINI_MODEL,
        base_url=settings.GEMINI_BASE_URL,
        timeout=settings.GENERATION_TIMEOUT,
    )
