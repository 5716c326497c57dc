"""Core interfaces (ports) for dependency injection."""

from stockpilot.core.interfaces.clock import IClock, IIdGenerator
from stockpilot.core.interfaces.inventory_store import IInventoryStore
from stockpilot.core.interfaces.llm import (
    HealthStatus,
    ILLMProvider,
    LLMProvider,
    LLMResponse,
)

__all__ = [
    # Storage
    "IInventoryStore",
    # Time and identity
    "IClock",
    "IIdGenerator",
    # LLM
    "ILLMProvider",
    "LLMProvider",
    "LLMResponse",
    "HealthStatus",
]
