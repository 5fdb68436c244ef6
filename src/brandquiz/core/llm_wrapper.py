"""LLM client wrapper that adds structured call logging."""

import time
from typing import Optional

from brandquiz.core.llm_base import LLMClientBase, Message
from brandquiz.core.logging import get_logger

logger = get_logger("brandquiz.llm_wrapper")


class LoggingLLMClientWrapper:
    """Wraps a content-generation client and logs every call (latency, sizes, previews)."""

    def __init__(self, client: LLMClientBase, provider: str, model: str):
        """
        Initialize LLM client wrapper.

        Args:
            client: The underlying client to wrap
            provider: Provider name (e.g., "openrouter", "ollama")
            model: Model name
        """
        self.client = client
        self.provider = provider
        self.model = model

    def generate(
        self,
        prompt: str,
        history: Optional[list[Message]] = None,
        max_tokens: int = 4096,
    ) -> str:
        """Delegate to the wrapped client, logging success or failure."""
        start_time = time.time()
        try:
            response = self.client.generate(prompt, history=history, max_tokens=max_tokens)
        except Exception as e:
            logger.error(
                f"LLM call failed: {self.provider}/{self.model}",
                context={
                    "provider": self.provider,
                    "model": self.model,
                    "error": str(e),
                    "error_type": type(e).__name__,
                    "latency_ms": round((time.time() - start_time) * 1000, 1),
                    "prompt_length": len(prompt),
                },
            )
            raise

        logger.log_llm_call(
            provider=self.provider,
            model=self.model,
            prompt=prompt,
            response=response,
            latency_ms=(time.time() - start_time) * 1000,
            history_turns=len(history or []),
        )
        return response


def wrap_client_with_logging(
    client: LLMClientBase,
    provider: str,
    model: str,
) -> LoggingLLMClientWrapper:
    """Wrap a client with call logging."""
    return LoggingLLMClientWrapper(client=client, provider=provider, model=model)
