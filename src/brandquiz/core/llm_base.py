"""Interface for content-generation clients."""

from typing import Optional, Protocol

# One chat turn: {"role": "user" | "assistant", "content": "..."}
Message = dict[str, str]


class LLMClientBase(Protocol):
    """
    Protocol/interface for content-generation clients.

    All provider implementations must implement this method.
    """

    def generate(
        self,
        prompt: str,
        history: Optional[list[Message]] = None,
        max_tokens: int = 4096,
    ) -> str:
        """
        Generate a response.

        Args:
            prompt: Input prompt text, sent as the first user turn
            history: Optional turns that follow the prompt (retry context)
            max_tokens: Upper bound on response length

        Returns:
            Generated text, possibly wrapping JSON in prose or markdown

        Raises:
            TransportFailure: If the provider call fails
        """
        ...


def build_messages(prompt: str, history: Optional[list[Message]] = None) -> list[Message]:
    """Chat message list: the prompt as first user turn, then any history turns."""
    messages: list[Message] = [{"role": "user", "content": prompt}]
    if history:
        messages.extend(history)
    return messages
