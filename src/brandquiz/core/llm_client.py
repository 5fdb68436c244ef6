"""Ollama chat client."""

from typing import Optional

from ollama import Client

from brandquiz.core.errors import TransportFailure
from brandquiz.core.llm_base import Message, build_messages

DEFAULT_OLLAMA_URL = "http://localhost:11434"
DEFAULT_OLLAMA_MODEL = "llama3.1"


class OllamaClient:
    """
    Client for a local Ollama server.

    Implements LLMClientBase protocol.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        model: Optional[str] = None,
        temperature: float = 0.0,
    ):
        """
        Initialize Ollama client.

        Args:
            base_url: Base URL for Ollama API (defaults to http://localhost:11434)
            model: Model name to use (default: llama3.1)
            temperature: Temperature for generation
        """
        self.base_url = base_url or DEFAULT_OLLAMA_URL
        self.model = model or DEFAULT_OLLAMA_MODEL
        self.temperature = temperature
        self.client = Client(host=self.base_url)

    def generate(
        self,
        prompt: str,
        history: Optional[list[Message]] = None,
        max_tokens: int = 4096,
    ) -> str:
        """
        Generate a chat response from Ollama.

        Raises:
            TransportFailure: If the server call fails
        """
        try:
            response = self.client.chat(
                model=self.model,
                messages=build_messages(prompt, history),
                options={"temperature": self.temperature, "num_predict": max_tokens},
                stream=False,
            )
            return response["message"]["content"]
        except Exception as e:
            error_msg = str(e)
            if "not found" in error_msg.lower() or "404" in error_msg:
                raise TransportFailure(
                    f"Model '{self.model}' not found. "
                    f"Pull it with 'ollama pull {self.model}'. Original error: {error_msg}"
                ) from e
            raise TransportFailure(f"Ollama request to {self.base_url} failed: {error_msg}") from e
