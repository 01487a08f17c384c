"""
AI Provider abstraction with Anthropic primary and OpenAI fallback.

Anthropic (Claude) generates breakpoints, challenges and evaluations.
OpenAI serves as a fallback when Anthropic is unavailable or not configured.
"""
import json
import logging
import re
from typing import Optional, Dict, Any, List
from dataclasses import dataclass
from enum import Enum

import anthropic
from openai import OpenAI

from learning_app.core.config import settings

logger = logging.getLogger(__name__)


class ProviderName(str, Enum):
    ANTHROPIC = "anthropic"
    OPENAI = "openai"


@dataclass
class AIResponse:
    """Standardized AI response across providers."""
    content: str
    provider: ProviderName
    model: str
    tokens_used: int


class AIProviderError(Exception):
    """Custom exception for AI provider errors."""
    pass


class AnthropicProvider:
    """Anthropic provider using the Messages API."""

    def __init__(self, api_key: str):
        self.api_key = api_key
        self._client = None

    @property
    def client(self) -> anthropic.Anthropic:
        if self._client is None:
            self._client = anthropic.Anthropic(api_key=self.api_key, timeout=120.0)
        return self._client

    def generate(
        self,
        messages: List[Dict[str, str]],
        model: str,
        temperature: float = 0.5,
        max_tokens: int = 2000
    ) -> AIResponse:
        """Generate completion using the Anthropic Messages API."""
        # System prompts are a top-level parameter, not a message role
        system = "\n\n".join(m["content"] for m in messages if m["role"] == "system")
        chat_messages = [m for m in messages if m["role"] != "system"]

        kwargs = {
            "model": model,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "messages": chat_messages,
        }
        if system:
            kwargs["system"] = system

        try:
            response = self.client.messages.create(**kwargs)
        except anthropic.APIStatusError as e:
            raise AIProviderError(f"Anthropic API error: {e.status_code} - {e.message}")
        except anthropic.APIError as e:
            raise AIProviderError(f"Anthropic request failed: {e.message}")

        content = "".join(
            block.text for block in response.content if getattr(block, "type", None) == "text"
        )
        usage = response.usage
        tokens = (usage.input_tokens + usage.output_tokens) if usage else 0

        return AIResponse(
            content=content,
            provider=ProviderName.ANTHROPIC,
            model=model,
            tokens_used=tokens
        )


class OpenAIProvider:
    """OpenAI provider as fallback."""

    # Model mappings - map Claude model names to OpenAI equivalents
    MODEL_MAP = {
        "claude-haiku-4-5-20251001": "gpt-4o-mini",
        "claude-sonnet-4-20250514": "gpt-4o",
    }
    DEFAULT_MODEL = "gpt-4o-mini"

    def __init__(self, api_key: str):
        self.api_key = api_key
        self._client = None

    @property
    def client(self) -> OpenAI:
        if self._client is None:
            self._client = OpenAI(api_key=self.api_key)
        return self._client

    def generate(
        self,
        messages: List[Dict[str, str]],
        model: str,
        temperature: float = 0.5,
        max_tokens: int = 2000
    ) -> AIResponse:
        """Generate completion using OpenAI API."""
        openai_model = self.MODEL_MAP.get(model, self.DEFAULT_MODEL)

        try:
            response = self.client.chat.completions.create(
                model=openai_model,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens,
            )
            content = response.choices[0].message.content or ""
            tokens = response.usage.total_tokens if response.usage else 0
        except Exception as e:
            raise AIProviderError(f"OpenAI request failed: {str(e)}")

        return AIResponse(
            content=content,
            provider=ProviderName.OPENAI,
            model=openai_model,
            tokens_used=tokens
        )


class AIProvider:
    """
    Unified AI provider with automatic fallback.

    Primary: Anthropic
    Fallback: OpenAI
    """

    def __init__(
        self,
        anthropic_api_key: Optional[str] = None,
        openai_api_key: Optional[str] = None
    ):
        self.anthropic_api_key = anthropic_api_key or settings.ANTHROPIC_API_KEY
        self.openai_api_key = openai_api_key or settings.OPENAI_API_KEY

        self._anthropic = None
        self._openai = None

    @property
    def anthropic(self) -> Optional[AnthropicProvider]:
        if self._anthropic is None and self.anthropic_api_key:
            self._anthropic = AnthropicProvider(self.anthropic_api_key)
        return self._anthropic

    @property
    def openai(self) -> Optional[OpenAIProvider]:
        if self._openai is None and self.openai_api_key:
            self._openai = OpenAIProvider(self.openai_api_key)
        return self._openai

    @property
    def is_configured(self) -> bool:
        return bool(self.anthropic_api_key or self.openai_api_key)

    def generate(
        self,
        messages: List[Dict[str, str]],
        model: str,
        temperature: float = 0.5,
        max_tokens: int = 2000,
        prefer_provider: Optional[ProviderName] = None
    ) -> AIResponse:
        """
        Generate completion with automatic fallback.

        Tries Anthropic first (if configured), falls back to OpenAI on failure.
        """
        providers_to_try = []

        if prefer_provider == ProviderName.OPENAI:
            if self.openai:
                providers_to_try.append(("openai", self.openai))
            if self.anthropic:
                providers_to_try.append(("anthropic", self.anthropic))
        else:
            if self.anthropic:
                providers_to_try.append(("anthropic", self.anthropic))
            if self.openai:
                providers_to_try.append(("openai", self.openai))

        if not providers_to_try:
            raise AIProviderError("No AI providers configured. Set ANTHROPIC_API_KEY or OPENAI_API_KEY.")

        last_error = None
        for provider_name, provider in providers_to_try:
            try:
                logger.debug("Trying %s (%s)", provider_name, model)
                result = provider.generate(
                    messages=messages,
                    model=model,
                    temperature=temperature,
                    max_tokens=max_tokens
                )
                logger.info("LLM call succeeded with %s (%s, %d tokens)", provider_name, result.model, result.tokens_used)
                return result
            except AIProviderError as e:
                logger.warning("%s failed: %s", provider_name, e)
                last_error = e
                continue

        raise AIProviderError(f"All providers failed. Last error: {last_error}")


def _strip_code_fences(content: str) -> str:
    content = content.strip()
    if content.startswith("```"):
        content = content.split("```")[1]
        if content.startswith("json"):
            content = content[4:]
        content = content.strip()
    return content


def extract_json_object(content: str) -> Dict[str, Any]:
    """
    Parse the JSON object spanning the first '{' to the last '}' of an LLM reply.

    Raises:
        ValueError: If no object is present or it does not parse
    """
    content = _strip_code_fences(content)
    first_brace = content.find("{")
    last_brace = content.rfind("}")

    if first_brace == -1 or last_brace == -1 or last_brace < first_brace:
        raise ValueError("No JSON found in response")

    data = json.loads(content[first_brace:last_brace + 1])
    if not isinstance(data, dict):
        raise ValueError("Expected a JSON object")
    return data


def extract_json_array(content: str) -> List[Any]:
    """
    Parse the first JSON array (greedy '[' ... ']') of an LLM reply.

    Raises:
        ValueError: If no array is present or it does not parse
    """
    match = re.search(r"\[[\s\S]*\]", _strip_code_fences(content))
    if not match:
        raise ValueError("No JSON array found in response")
    data = json.loads(match.group(0))
    if not isinstance(data, list):
        raise ValueError("Expected a JSON array")
    return data


# Global instance for easy access
_ai_provider: Optional[AIProvider] = None


def get_ai_provider() -> AIProvider:
    """Get or create the global AI provider instance."""
    global _ai_provider
    if _ai_provider is None:
        _ai_provider = AIProvider()
    return _ai_provider
