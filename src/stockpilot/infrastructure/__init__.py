"""Infrastructure layer implementations."""

from stockpilot.infrastructure import llm, pdf, storage
from stockpilot.infrastructure.system import SystemClock, UuidGenerator

__all__ = ["storage", "llm", "pdf", "SystemClock", "UuidGenerator"]
