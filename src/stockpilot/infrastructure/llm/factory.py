"""
LLM provider factory.

Creates the provider selected in configuration.
"""

from stockpilot.config import get_settings
from stockpilot.core.interfaces.llm import ILLMProvider


def get_llm_provider(provider_type: str | None = None) -> ILLMProvider:
    """
    Get an LLM provider instance.

    Args:
        provider_type: Provider name (default from settings)
    """
    provider_type = provider_type or get_settings().llm.provider

    if provider_type == "ollama":
        from stockpilot.infrastructure.llm.ollama import get_ollama_provider

        return get_ollama_provider()

    raise ValueError(f"Unknown LLM provider: {provider_type}")

