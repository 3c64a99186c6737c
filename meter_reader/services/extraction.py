"""Meter value extraction through a multimodal model."""

import logging
import re
from functools import lru_cache
from typing import Protocol

from google import genai
from google.genai import types

from meter_reader.core.config import settings

logger = logging.getLogger(__name__)

DIGIT_RUN = re.compile(r"[0-9]+")


class ExtractionError(Exception):
    """The extraction collaborator could not be called."""


class Extractor(Protocol):
    """Anything that turns an image and a prompt into free-form text."""

    def extract(self, image: bytes, mime_type: str, prompt: str) -> str: ...


class GeminiExtractor:
    """Extractor backed by the Google Gemini API."""

    def __init__(self, api_key: str | None, model_name: str) -> None:
        self.api_key = api_key
        self.model_name = model_name
        self._client = None

    def _get_client(self) -> genai.Client:
        if self._client is None:
            if not self.api_key:
                raise ExtractionError("GEMINI_API_KEY is not configured")
            self._client = genai.Client(api_key=self.api_key)
        return self._client

    def extract(self, image: bytes, mime_type: str, prompt: str) -> str:
        client = self._get_client()
        logger.debug("Sending %d byte %s image to %s", len(image), mime_type, self.model_name)
        response = client.models.generate_content(
            model=self.model_name,
            contents=[prompt, types.Part.from_bytes(data=image, mime_type=mime_type)],
        )
        return response.text or ""


def parse_measure_value(text: str) -> int | None:
    """Return the first run of decimal digits in ``text`` as an int, if any."""
    match = DIGIT_RUN.search(text or "")
    return int(match.group()) if match else None


@lru_cache
def get_extractor() -> Extractor:
    """Dependency providing the shared extractor."""
    return GeminiExtractor(settings.GEMINI_API_KEY, settings.GEMINI_MODEL)
