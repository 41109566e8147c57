# infrastructure/completion_services.py
import logging
from typing import Any, Dict, List, Optional, Sequence, Union

import google.generativeai as genai

from config import Settings, settings
from core.domain import BinaryPart, CompletionError, PromptPart, TextPart
from core.interfaces import ICompletionService

logger = logging.getLogger(settings.LOGGER_NAME)


class GeminiCompletionService(ICompletionService):
    """Completion service backed by Google's Gemini API."""

    def __init__(self, config: Settings, model: Optional[Any] = None):
        """
        Initializes the Gemini completion service.

        Args:
            config: Application settings (API key, model name, timeout).
            model: Pre-built model object; built from `config` when omitted.
        """
        self.model_name = config.GEMINI_MODEL_NAME
        self.timeout = config.COMPLETION_TIMEOUT_SECONDS
        self._model = model

        if self._model is None and config.GEMINI_API_KEY:
            genai.configure(api_key=config.GEMINI_API_KEY)  # type: ignore
            self._model = genai.GenerativeModel(model_name=self.model_name)  # type: ignore
            logger.info(f"Initialized Gemini completion service with model: {self.model_name}")
        elif self._model is None:
            logger.warning("GEMINI_API_KEY not configured; chat replies will fall back")

    @staticmethod
    def to_contents(parts: Sequence[PromptPart]) -> List[Union[str, Dict[str, Any]]]:
        """Map prompt parts to Gemini content parts, keeping their order."""
        contents: List[Union[str, Dict[str, Any]]] = []
        for part in parts:
            if isinstance(part, TextPart):
                contents.append(part.text)
            elif isinstance(part, BinaryPart):
                contents.append({"mime_type": part.mime_type, "data": part.data})
            else:
                raise TypeError(f"Unsupported prompt part: {type(part).__name__}")
        return contents

    async def complete(self, parts: Sequence[PromptPart]) -> str:
        if self._model is None:
            raise CompletionError("GEMINI_API_KEY not configured")

        contents = self.to_contents(parts)
        try:
            logger.info(f"Sending {len(contents)} prompt part(s) to Gemini model '{self.model_name}'...")
            response = await self._model.generate_content_async(
                contents,
                request_options={"timeout": self.timeout},
            )
            text = response.text
        except Exception as e:
            logger.error(f"Gemini request failed: {e}")
            raise CompletionError(f"Failed to generate response: {e}") from e

        if not text:
            raise CompletionError("Empty response from Gemini API")

        logger.info("Successfully received response from Gemini.")
        return text
