"""Suggest Stock Level Use Case."""

from stockpilot.application.dto.requests import StockSuggestionRequest
from stockpilot.application.dto.responses import StockSuggestionResponse
from stockpilot.application.use_cases.base import find_item
from stockpilot.config import get_logger
from stockpilot.core.interfaces.inventory_store import IInventoryStore
from stockpilot.core.services.report_projector import summarize_history
from stockpilot.core.services.stock_advisor import (
    StockAdvisorService,
    StockLevelSuggestion,
)

logger = get_logger(__name__)


class SuggestStockLevelUseCase:
    """
    Ask the advisor for a stock level.

    When the caller sends no historical data, the item's own ledger is
    summarized instead; the item must then exist.
    """

    def __init__(
        self,
        advisor: StockAdvisorService | None = None,
        store: IInventoryStore | None = None,
    ):
        self._advisor = advisor
        self._store = store

    def _get_advisor(self) -> StockAdvisorService:
        if self._advisor is None:
            from stockpilot.application.services import get_stock_advisor_service

            self._advisor = get_stock_advisor_service()
        return self._advisor

    def _get_store(self) -> IInventoryStore:
        if self._store is None:
            from stockpilot.application.services import get_inventory_store

            self._store = get_inventory_store()
        return self._store

    async def execute(self, request: StockSuggestionRequest) -> StockLevelSuggestion:
        historical_data = request.historical_data
        if not historical_data or not historical_data.strip():
            item = find_item(await self._get_store().load_items(), request.item_id)
            historical_data = summarize_history(item)
            logger.debug(
                "history_summarized", item_id=item.id, entries=len(item.history)
            )

        return await self._get_advisor().suggest(request.item_id, historical_data)

    def to_response(
        self, item_id: str, suggestion: StockLevelSuggestion
    ) -> StockSuggestionResponse:
        return StockSuggestionResponse(
            item_id=item_id,
            suggested_stock_level=suggestion.suggested_stock_level,
            reasoning=suggestion.reasoning,
            alert=suggestion.alert,
        )
