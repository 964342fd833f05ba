"""
OpenAI chat-completions answerer.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from shared.errors import LanguageModelError

logger = logging.getLogger(__name__)


@dataclass
class OpenAIConfig:
    """LLM configuration for generation."""

    model: str = "gpt-4.1-mini"
    api_key: str = ""
    temperature: float = 0.0
    max_tokens: int = 2048
    timeout: float = 30.0


class OpenAIAnswerer:
    """
    Answerer using the OpenAI chat completions API.

    Temperature defaults to 0 for grounded answers.

    Usage:
        answerer = OpenAIAnswerer(OpenAIConfig(api_key="sk-..."))
        answer = answerer.ask(prompt)
    """

    def __init__(self, config: Optional[OpenAIConfig] = None, client=None):
        self.config = config or OpenAIConfig()
        self._client = client

    @property
    def client(self):
        """Lazy load OpenAI client."""
        if self._client is None:
            try:
                from openai import OpenAI

                self._client = OpenAI(
                    api_key=self.config.api_key or None,
                    timeout=self.config.timeout,
                )
            except ImportError:
                raise ImportError(
                    "openai package required. Install with: pip install openai"
                )
        return self._client

    def ask(self, prompt: str) -> str:
        if not prompt or not prompt.strip():
            return ""

        try:
            response = self.client.chat.completions.create(
                model=self.config.model,
                messages=[{"role": "user", "content": prompt}],
                temperature=self.config.temperature,
                max_tokens=self.config.max_tokens,
            )
        except Exception as e:
            logger.error(f"LLM generation failed: {e}")
            raise LanguageModelError(f"OpenAI request failed: {e}") from e

        return response.choices[0].message.content or ""
