"""View Transactions Use Case: the filtered, flattened transaction feed."""

from dataclasses import dataclass

from stockpilot.application.dto.requests import TransactionQuery
from stockpilot.application.dto.responses import (
    TransactionFeedResponse,
    TransactionResponse,
)
from stockpilot.application.use_cases.base import InventoryUseCase
from stockpilot.config import get_logger, get_settings
from stockpilot.core.entities.report import FlattenedTransaction
from stockpilot.core.exceptions import ValidationError
from stockpilot.core.services.report_projector import (
    TransactionFeed,
    TransactionFilter,
    report_title,
)

logger = get_logger(__name__)


def build_filter(query: TransactionQuery, timezone: str | None = None) -> TransactionFilter:
    """Turn a query DTO into a TransactionFilter, rejecting inverted date ranges."""
    if query.start_date and query.end_date and query.start_date > query.end_date:
        raise ValidationError(
            "end_date", "must not be before start_date", query.end_date.isoformat()
        )
    return TransactionFilter(
        warehouse_id=query.warehouse_id,
        item_id=query.item_id,
        start_date=query.start_date,
        end_date=query.end_date,
        timezone=timezone or get_settings().reports.timezone,
    )


@dataclass
class TransactionFeedResult:
    title: str
    filters: TransactionFilter
    transactions: list[FlattenedTransaction]


class ViewTransactionsUseCase(InventoryUseCase):
    """Flatten every active item's history across active warehouses."""

    async def execute(self, query: TransactionQuery) -> TransactionFeedResult:
        filters = build_filter(query)

        store = self._get_store()
        warehouses = await store.load_warehouses()
        items = await store.load_items()

        transactions = TransactionFeed(warehouses, items, filters).to_list()
        title = report_title(filters, warehouses, items)

        logger.debug("transactions_viewed", title=title, count=len(transactions))
        return TransactionFeedResult(
            title=title, filters=filters, transactions=transactions
        )

    def to_response(self, result: TransactionFeedResult) -> TransactionFeedResponse:
        filters = result.filters
        return TransactionFeedResponse(
            title=result.title,
            transactions=[TransactionResponse.from_entity(t) for t in result.transactions],
            total=len(result.transactions),
            warehouse_id=filters.warehouse,
            item_id=filters.item,
            start_date=filters.start_date,
            end_date=filters.end_date,
        )
