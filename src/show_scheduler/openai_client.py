"""
OpenAI client for schedule generation and general chat replies.

The scheduler treats the model as an opaque, fallible text completion:
every API failure or timeout surfaces as ModelUnavailableError.
"""

import asyncio
import json
import logging
import os
from typing import Any, Dict, Optional

import openai
import tiktoken
from openai import AsyncOpenAI

from .exceptions import ModelUnavailableError

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4"
DEFAULT_TIMEOUT_SECONDS = 30
MAX_TIMEOUT_SECONDS = 300
SCHEDULE_MAX_TOKENS = 2000
CHAT_MAX_TOKENS = 500

CHAT_SYSTEM_PROMPT = """You are Music Matrix, an AI assistant for a radio station's music library and playlist dashboard.

Your role is to help with:
- Playlist organization and music library management
- Show planning and rotation advice
- Music data analysis and trends
- Workflow tips for the dashboard

Keep responses concise and practical. To build a show schedule, the user can ask for one directly (for example "build a 2-hour jazz show").

Current context: {context}"""


class OpenAIClient:
    """Async OpenAI wrapper used by the schedule generator."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    ):
        """
        Initialize OpenAI client.

        Args:
            api_key: OpenAI API key. If None, reads from OPENAI_API_KEY or OPENAI_KEY env var.
            model: Model name. If None, reads from OPENAI_MODEL env var (default: "gpt-4").
            timeout_seconds: Default bound for a single completion call

        Raises:
            ValueError: If API key is missing or timeout invalid
        """
        self.api_key = api_key or os.getenv("OPENAI_API_KEY") or os.getenv("OPENAI_KEY")
        if not self.api_key:
            raise ValueError("OPENAI_API_KEY or OPENAI_KEY must be provided or set in environment")

        if timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be positive")
        if timeout_seconds > MAX_TIMEOUT_SECONDS:
            raise ValueError(f"timeout_seconds cannot exceed {MAX_TIMEOUT_SECONDS}s")

        self.client = AsyncOpenAI(api_key=self.api_key)
        self.model = model or os.getenv("OPENAI_MODEL", DEFAULT_MODEL)
        self.timeout_seconds = timeout_seconds
        self._encoding = None

    @property
    def encoding(self):
        """Tokenizer for the configured model, loaded on first use."""
        if self._encoding is None:
            try:
                self._encoding = tiktoken.encoding_for_model(self.model)
            except KeyError:
                logger.warning(f"Model '{self.model}' not found in tiktoken, using o200k_base encoding")
                self._encoding = tiktoken.get_encoding("o200k_base")
        return self._encoding

    def estimate_tokens(self, *texts: str) -> int:
        """Count prompt tokens across the given texts."""
        return sum(len(self.encoding.encode(text)) for text in texts)

    def _completion_kwargs(self, max_tokens: int) -> Dict[str, Any]:
        kwargs: Dict[str, Any] = {"model": self.model}
        # gpt-5 and o1 reject max_tokens and only support the default temperature
        if "gpt-5" in self.model.lower() or "o1" in self.model.lower():
            kwargs["max_completion_tokens"] = max_tokens
        else:
            kwargs["max_tokens"] = max_tokens
            kwargs["temperature"] = 0.7
        return kwargs

    async def _create(
        self, system_prompt: str, user_prompt: str, max_tokens: int, timeout_seconds: Optional[float]
    ) -> str:
        timeout = timeout_seconds or self.timeout_seconds
        messages = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ]

        try:
            response = await asyncio.wait_for(
                self.client.chat.completions.create(
                    messages=messages, **self._completion_kwargs(max_tokens)
                ),
                timeout=timeout,
            )
        except asyncio.TimeoutError as e:
            raise ModelUnavailableError(f"Model call exceeded {timeout}s timeout") from e
        except openai.APIStatusError as e:
            raise ModelUnavailableError(f"Model API error: {e}", status_code=e.status_code) from e
        except openai.APIError as e:
            raise ModelUnavailableError(f"Model unreachable: {e}") from e

        if not response.choices:
            return ""
        return response.choices[0].message.content or ""

    async def complete(
        self, system_prompt: str, user_prompt: str, timeout_seconds: Optional[float] = None
    ) -> str:
        """
        Run one schedule completion.

        Args:
            system_prompt: Library context and output shape
            user_prompt: The user's instructions and hints
            timeout_seconds: Per-call bound (defaults to the client timeout)

        Returns:
            Model text (possibly empty)

        Raises:
            ModelUnavailableError: On API failure or timeout
        """
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                f"Schedule prompt for {self.model}: "
                f"~{self.estimate_tokens(system_prompt, user_prompt)} input tokens"
            )

        text = await self._create(system_prompt, user_prompt, SCHEDULE_MAX_TOKENS, timeout_seconds)
        logger.info(f"Model returned {len(text)} characters")
        return text

    async def chat_reply(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        library_summary: Optional[Dict[str, Any]] = None,
    ) -> str:
        """
        Answer a general (non-scheduling) chat message.

        A library summary, when given, is appended to the system prompt as
        database context.

        Raises:
            ModelUnavailableError: On API failure or timeout
        """
        context_text = json.dumps(context) if context else "General music library assistance"
        system_prompt = CHAT_SYSTEM_PROMPT.format(context=context_text)
        if library_summary is not None:
            system_prompt += f"\n\nDatabase context: {json.dumps(library_summary)}"
        text = await self._create(system_prompt, message, CHAT_MAX_TOKENS, None)
        return text or "I'm having trouble generating a response right now. Please try again!"
