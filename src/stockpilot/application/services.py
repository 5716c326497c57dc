"""
Service factory functions for dependency injection.

Wires infrastructure implementations to core services. Use cases import
from here; the core layer never imports infrastructure.
"""

from typing import TYPE_CHECKING

from stockpilot.config import get_settings
from stockpilot.core.interfaces.clock import IClock, IIdGenerator
from stockpilot.core.services import ReportPrintService, StockAdvisorService

if TYPE_CHECKING:
    from stockpilot.core.interfaces import IInventoryStore, ILLMProvider
    from stockpilot.core.services import IReportRenderer


# Singleton instances
_clock: IClock | None = None
_id_generator: IIdGenerator | None = None
_stock_advisor_service: StockAdvisorService | None = None


def get_clock() -> IClock:
    """Get the shared system clock."""
    global _clock
    if _clock is None:
        from stockpilot.infrastructure.system import SystemClock

        _clock = SystemClock()
    return _clock


def get_id_generator() -> IIdGenerator:
    """Get the shared identifier generator."""
    global _id_generator
    if _id_generator is None:
        from stockpilot.infrastructure.system import UuidGenerator

        _id_generator = UuidGenerator()
    return _id_generator


def get_inventory_store() -> "IInventoryStore":
    """Get the configured inventory store."""
    from stockpilot.infrastructure.storage import get_inventory_store as _get_store

    return _get_store()


def get_report_renderer() -> "IReportRenderer":
    """Get the PDF report renderer."""
    from stockpilot.infrastructure.pdf import Fpdf2ReportRenderer

    return Fpdf2ReportRenderer(get_settings().pdf)


def get_report_print_service(
    store: "IInventoryStore | None" = None,
    renderer: "IReportRenderer | None" = None,
    clock: IClock | None = None,
    ids: IIdGenerator | None = None,
) -> ReportPrintService:
    """
    Build a ReportPrintService.

    Any collaborator left as None falls back to the configured default.
    """
    return ReportPrintService(
        renderer=renderer or get_report_renderer(),
        store=store or get_inventory_store(),
        clock=clock or get_clock(),
        ids=ids or get_id_generator(),
        timezone=get_settings().reports.timezone,
    )


def get_stock_advisor_service(
    llm_provider: "ILLMProvider | None" = None,
) -> StockAdvisorService:
    """
    Get or create StockAdvisorService instance.

    Args:
        llm_provider: Optional LLM provider override (not cached)
    """
    global _stock_advisor_service

    if llm_provider is not None:
        settings = get_settings()
        return StockAdvisorService(
            llm_provider,
            temperature=settings.llm.temperature,
            max_tokens=settings.llm.max_tokens,
        )

    if _stock_advisor_service is None:
        from stockpilot.infrastructure.llm import get_llm_provider

        settings = get_settings()
        _stock_advisor_service = StockAdvisorService(
            get_llm_provider(),
            temperature=settings.llm.temperature,
            max_tokens=settings.llm.max_tokens,
        )
    return _stock_advisor_service


def reset_services() -> None:
    """Reset all singleton services (for testing)."""
    global _clock, _id_generator, _stock_advisor_service
    _clock = None
    _id_generator = None
    _stock_advisor_service = None
