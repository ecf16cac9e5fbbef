"""
LLM client for structured extraction.

Provides a unified interface for LLM calls using LangChain.
Supports Google Gemini (default), OpenAI and Anthropic providers.
Responses are returned as raw text: callers run them through the payload
recovery utilities because the output is untrusted.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Optional

logger = logging.getLogger(__name__)

DEFAULT_MODELS = {
    "google": "gemini-2.5-flash-lite",
    "openai": "gpt-4o-mini",
    "anthropic": "claude-3-haiku-20240307",
}


class BaseLLMClient(ABC):
    """Abstract base class for LLM clients."""

    @abstractmethod
    def invoke(self, prompt: str, **kwargs) -> str:
        """Invoke the LLM with a prompt and return raw text response."""
        pass


def _content_to_text(content: Any) -> str:
    """Flatten a LangChain message content (str or list of parts) to text."""
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
    return str(content or "")


class LangChainLLMClient(BaseLLMClient):
    """
    LLM Client using LangChain chat models.

    Supports:
    - Google (Gemini), with JSON response MIME type
    - OpenAI (GPT-4o family)
    - Anthropic (Claude)

    Every call is bounded by ``timeout_s`` and is never retried: a failed
    call is a failed extraction.
    """

    def __init__(
        self,
        provider: str = "google",
        model_name: str = "gemini-2.5-flash-lite",
        api_key: Optional[str] = None,
        temperature: float = 0.1,
        max_tokens: int = 2000,
        timeout_s: float = 60.0,
        json_mode: bool = True,
    ):
        """
        Initialize the LangChain LLM client.

        Args:
            provider: "google", "openai" or "anthropic"
            model_name: Model identifier (e.g., "gemini-2.5-flash-lite")
            api_key: API key for the provider
            temperature: Temperature for generation (0.0-1.0)
            max_tokens: Maximum tokens in response
            timeout_s: Request timeout in seconds
            json_mode: Ask the provider for a JSON response where supported
        """
        self.provider = provider
        self.model_name = model_name
        self.api_key = api_key
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout_s = timeout_s
        self.json_mode = json_mode

        self._llm = None

    def _get_llm(self):
        """Lazy initialization of LLM."""
        if self._llm is not None:
            return self._llm

        if not self.api_key:
            logger.warning(f"No API key found for {self.provider}")
            return None

        if self.provider == "google":
            from langchain_google_genai import ChatGoogleGenerativeAI

            extra = {"response_mime_type": "application/json"} if self.json_mode else {}
            self._llm = ChatGoogleGenerativeAI(
                model=self.model_name,
                google_api_key=self.api_key,
                temperature=self.temperature,
                max_output_tokens=self.max_tokens,
                timeout=self.timeout_s,
                max_retries=0,
                **extra,
            )
        elif self.provider == "openai":
            from langchain_openai import ChatOpenAI

            self._llm = ChatOpenAI(
                model=self.model_name,
                api_key=self.api_key,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
                timeout=self.timeout_s,
                max_retries=0,
            )
        elif self.provider == "anthropic":
            from langchain_anthropic import ChatAnthropic

            self._llm = ChatAnthropic(
                model=self.model_name,
                api_key=self.api_key,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
                timeout=self.timeout_s,
                max_retries=0,
            )
        else:
            raise ValueError(f"Unknown provider: {self.provider}")

        return self._llm

    @property
    def is_available(self) -> bool:
        """Check if LLM is available."""
        return bool(self.api_key)

    def invoke(self, prompt: str, **kwargs) -> str:
        """
        Invoke the LLM with a prompt and return raw text response.

        Args:
            prompt: The prompt text
            **kwargs: Additional arguments

        Returns:
            Raw text response from LLM
        """
        llm = self._get_llm()
        if not llm:
            raise RuntimeError("LLM not available - check API key and provider")

        from langchain_core.messages import HumanMessage

        response = llm.invoke([HumanMessage(content=prompt)])
        return _content_to_text(response.content)


def create_llm_client(
    provider: str = "google",
    model_name: Optional[str] = None,
    api_key: Optional[str] = None,
    temperature: float = 0.1,
    timeout_s: float = 60.0,
) -> BaseLLMClient:
    """
    Factory function to create an LLM client.

    Args:
        provider: "google", "openai" or "anthropic"
        model_name: Model to use (defaults based on provider)
        api_key: API key for the provider
        temperature: Temperature for generation
        timeout_s: Request timeout in seconds

    Returns:
        LLM client instance

    Raises:
        RuntimeError: no API key for the provider
    """
    if provider not in DEFAULT_MODELS:
        raise ValueError(f"Unknown provider: {provider}")

    client = LangChainLLMClient(
        provider=provider,
        model_name=model_name or DEFAULT_MODELS[provider],
        api_key=api_key,
        temperature=temperature,
        timeout_s=timeout_s,
    )

    if not client.is_available:
        raise RuntimeError(f"LLM client not available for provider: {provider}")
    return client
