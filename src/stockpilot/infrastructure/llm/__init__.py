"""LLM infrastructure implementations."""

from stockpilot.infrastructure.llm.base import BaseLLMProvider, CircuitBreakerState
from stockpilot.infrastructure.llm.factory import get_llm_provider
from stockpilot.infrastructure.llm.ollama import (
    OllamaProvider,
    get_ollama_provider,
    reset_ollama_provider,
)

__all__ = [
    "BaseLLMProvider",
    "CircuitBreakerState",
    "OllamaProvider",
    "get_ollama_provider",
    "reset_ollama_provider",
    "get_llm_provider",
]
