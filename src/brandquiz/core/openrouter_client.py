"""OpenAI-compatible chat client (OpenRouter by default)."""

from typing import Optional

from openai import OpenAI

from brandquiz.core.errors import TransportFailure
from brandquiz.core.llm_base import Message, build_messages

OPENROUTER_ENDPOINT = "https://openrouter.ai/api/v1"
DEFAULT_MODEL = "anthropic/claude-sonnet-4"


class OpenRouterClient:
    """
    Client for any OpenAI-compatible chat completions endpoint.

    Implements LLMClientBase protocol.
    """

    def __init__(
        self,
        api_key: Optional[str],
        base_url: Optional[str] = None,
        model: Optional[str] = None,
        temperature: float = 0.0,
        timeout: float = 120.0,
    ):
        """
        Initialize client.

        Args:
            api_key: API key for the endpoint
            base_url: Endpoint base URL (defaults to OpenRouter)
            model: Model name
            temperature: Temperature for generation
            timeout: Per-request timeout in seconds

        Raises:
            ValueError: If no API key is configured
        """
        api_key = (api_key or "").strip().strip('"').strip("'")
        if not api_key:
            raise ValueError(
                "An API key is required for the openrouter provider. "
                "Set api_key in the config file or the BRANDQUIZ_API_KEY environment variable."
            )

        self.base_url = base_url or OPENROUTER_ENDPOINT
        self.model = model or DEFAULT_MODEL
        self.temperature = temperature
        self.timeout = timeout
        self.client = OpenAI(
            api_key=api_key,
            base_url=self.base_url,
            default_headers={"X-Title": "brandquiz"},
        )

    def generate(
        self,
        prompt: str,
        history: Optional[list[Message]] = None,
        max_tokens: int = 4096,
    ) -> str:
        """
        Generate a chat completion.

        Raises:
            TransportFailure: On any API or network error, or an empty response
        """
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=build_messages(prompt, history),
                temperature=self.temperature,
                max_tokens=max_tokens,
                timeout=self.timeout,
            )
        except Exception as e:
            error_msg = str(e)
            error_lower = error_msg.lower()
            if "401" in error_msg or "unauthorized" in error_lower or "authentication" in error_lower:
                raise TransportFailure(
                    f"Authentication failed for {self.base_url}; check the configured API key. "
                    f"Original error: {error_msg}"
                ) from e
            if "404" in error_msg or "not found" in error_lower:
                raise TransportFailure(
                    f"Model '{self.model}' not found at {self.base_url}. Original error: {error_msg}"
                ) from e
            raise TransportFailure(f"Request to {self.base_url} failed: {error_msg}") from e

        if not response.choices or not response.choices[0].message.content:
            raise TransportFailure("No text content in AI response")
        return response.choices[0].message.content
