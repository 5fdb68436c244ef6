"""Factory for content-generation clients."""

from brandquiz.core.config import Config
from brandquiz.core.llm_base import LLMClientBase
from brandquiz.core.llm_client import OllamaClient
from brandquiz.core.llm_wrapper import wrap_client_with_logging
from brandquiz.core.openrouter_client import OpenRouterClient


def create_client(config: Config) -> LLMClientBase:
    """
    Create a logging-wrapped client for the configured provider.

    Args:
        config: Loaded configuration

    Returns:
        LLM client instance

    Raises:
        ValueError: If the provider is unknown or missing credentials
    """
    if config.provider == "openrouter":
        client = OpenRouterClient(
            api_key=config.api_key,
            base_url=config.base_url,
            model=config.model,
            temperature=config.temperature,
        )
    elif config.provider == "ollama":
        client = OllamaClient(
            base_url=config.base_url,
            model=config.model,
            temperature=config.temperature,
        )
    else:
        raise ValueError(
            f"Unknown provider: {config.provider}. Supported providers: openrouter, ollama"
        )

    return wrap_client_with_logging(client, provider=config.provider, model=client.model)
