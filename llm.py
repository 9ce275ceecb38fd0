"""
Text-generation collaborator.

The pipelines only need "prompt in, text out"; anything implementing
``TextGenerator.generate`` can stand in (tests use a scripted fake).
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Protocol

from langchain_core.messages import HumanMessage
from langchain_google_genai import ChatGoogleGenerativeAI

from config import Settings, get_settings
from errors import TextServiceError

logger = logging.getLogger("math-tutor.llm")


class TextGenerator(Protocol):
    def generate(self, prompt: str) -> str: ...


def _content_to_text(content: Any) -> str:
    # Gemini may hand back a list of parts instead of a plain string
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, dict) and part.get("type", "text") == "text":
                parts.append(str(part.get("text", "")))
        return "".join(parts)
    return "" if content is None else str(content)


class GeminiTextGenerator:
    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.model_name = self.settings.gemini_model
        self._llm: Optional[ChatGoogleGenerativeAI] = None

    def _client(self) -> ChatGoogleGenerativeAI:
        if self._llm is None:
            if not self.settings.google_api_key:
                raise TextServiceError("GOOGLE_API_KEY is not set. Add it to your .env file.")
            self._llm = ChatGoogleGenerativeAI(
                model=self.model_name,
                google_api_key=self.settings.google_api_key,
                temperature=self.settings.gemini_temperature,
                max_retries=0,
            )
        return self._llm

    def generate(self, prompt: str) -> str:
        llm = self._client()
        try:
            message = llm.invoke([HumanMessage(content=prompt)])
        except Exception as e:
            raise TextServiceError(f"{self.model_name} call failed: {type(e).__name__}: {e}") from e
        text = _content_to_text(message.content)
        logger.debug("model %s returned %d chars", self.model_name, len(text))
        return text


# Lazy singleton
_generator: Optional[GeminiTextGenerator] = None


def get_text_generator() -> TextGenerator:
    global _generator
    if _generator is None:
        _generator = GeminiTextGenerator()
    return _generator
