"""Generative text service clients.

``GenerativeClient`` is the seam between the pipeline and the hosted model:
it takes a rendered prompt (plus an optional document blob) and returns the
model's raw JSON text. Schema validation and timeouts live in ``flows``.
"""

import logging
from typing import Optional, Protocol

import google.generativeai as genai

from notewise.config import settings
from notewise.errors import GenerationError
from notewise.models import DocumentBlob

logger = logging.getLogger(__name__)

SAFETY_SETTINGS = {
    "HARM_CATEGORY_HATE_SPEECH": "BLOCK_ONLY_HIGH",
    "HARM_CATEGORY_DANGEROUS_CONTENT": "BLOCK_ONLY_HIGH",
    "HARM_CATEGORY_HARASSMENT": "BLOCK_MEDIUM_AND_ABOVE",
    "HARM_CATEGORY_SEXUALLY_EXPLICIT": "BLOCK_LOW_AND_ABOVE",
}


class GenerativeClient(Protocol):
    """Protocol for generative text services."""

    async def generate(
        self,
        name: str,
        prompt: str,
        *,
        media: Optional[DocumentBlob] = None,
        max_output_tokens: Optional[int] = None,
    ) -> str:
        """Run the named prompt and return the raw JSON reply."""
        ...


def _response_text(response) -> str:
    """Extract text from a Gemini response, falling back to candidate parts."""
    try:
        text = response.text
    except ValueError:
        # Raised by the SDK when the reply has no simple text part
        text = None
    if text:
        return text.strip()

    parts: list[str] = []
    for candidate in getattr(response, "candidates", None) or []:
        content = getattr(candidate, "content", None)
        if not content:
            continue
        for part in getattr(content, "parts", []) or []:
            part_text = getattr(part, "text", None)
            if part_text:
                parts.append(part_text)
    return "\n".join(parts).strip()


class GeminiClient:
    """Gemini client using google-generativeai.

    Replies are requested as JSON (``response_mime_type``) so that the
    structured outputs can be validated with pydantic.

    Example:
        >>> client = GeminiClient()
        >>> raw = await client.generate("explain", prompt)
    """

    def __init__(
        self,
        model: Optional[str] = None,
        api_key: Optional[str] = None,
        temperature: Optional[float] = None,
        max_output_tokens: Optional[int] = None,
    ):
        """Initialize Gemini client.

        Args:
            model: Gemini model name (default from settings)
            api_key: Google API key (default from settings / GOOGLE_API_KEY)
            temperature: Sampling temperature (default from settings)
            max_output_tokens: Output cap when a call sets none (default from settings)
        """
        key = (api_key or settings.google_api_key or "").strip()
        if not key:
            raise GenerationError("GOOGLE_API_KEY is required for Gemini generation.")

        self.model_name = model or settings.gemini_model
        self.temperature = settings.generation_temperature if temperature is None else temperature
        self.max_output_tokens = max_output_tokens or settings.max_output_tokens

        genai.configure(api_key=key)
        self._model = genai.GenerativeModel(self.model_name, safety_settings=SAFETY_SETTINGS)

    async def generate(
        self,
        name: str,
        prompt: str,
        *,
        media: Optional[DocumentBlob] = None,
        max_output_tokens: Optional[int] = None,
    ) -> str:
        contents: list = [prompt]
        if media is not None:
            contents.append({"mime_type": media.media_type, "data": media.decode()})

        generation_config = {
            "temperature": float(self.temperature),
            "max_output_tokens": int(max_output_tokens or self.max_output_tokens),
            "response_mime_type": "application/json",
        }

        logger.debug("Calling %s for %s", self.model_name, name)
        try:
            response = await self._model.generate_content_async(
                contents,
                generation_config=generation_config,
            )
        except Exception as e:
            raise GenerationError(f"{name} request failed: {e}") from e

        text = _response_text(response)
        if not text:
            raise GenerationError(f"{name} returned no content (the reply may have been blocked).")
        return text
