"""Item and stock movement endpoints."""

from datetime import datetime

from fastapi import APIRouter, Depends, Query, status

from stockpilot.api.dependencies import (
    get_add_stock_use_case,
    get_archive_item_use_case,
    get_consume_stock_use_case,
    get_create_item_use_case,
    get_item_balance_use_case,
    get_item_use_case,
    get_list_items_use_case,
    get_restore_item_use_case,
    get_verify_item_use_case,
)
from stockpilot.application.dto.requests import CreateItemRequest, StockMovementRequest
from stockpilot.application.dto.responses import (
    BalanceResponse,
    ErrorResponse,
    ItemListResponse,
    ItemResponse,
    LedgerVerificationResponse,
    StockMovementResponse,
)
from stockpilot.application.use_cases import (
    AddStockUseCase,
    ArchiveItemUseCase,
    ConsumeStockUseCase,
    CreateItemUseCase,
    GetItemUseCase,
    ItemBalanceUseCase,
    ListItemsUseCase,
    RestoreItemUseCase,
    VerifyItemLedgerUseCase,
)

router = APIRouter(prefix="/api/items", tags=["items"])


@router.get("", response_model=ItemListResponse)
async def list_items(
    warehouse_id: str | None = Query(default=None),
    use_case: ListItemsUseCase = Depends(get_list_items_use_case),
) -> ItemListResponse:
    """Active items by name, optionally for one warehouse."""
    items = await use_case.execute(warehouse_id)
    return use_case.to_response(items)


@router.post(
    "",
    response_model=ItemResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def create_item(
    request: CreateItemRequest,
    use_case: CreateItemUseCase = Depends(get_create_item_use_case),
) -> ItemResponse:
    """Create an item; its history starts with an "Initial item creation" entry."""
    result = await use_case.execute(request)
    return use_case.to_response(result)


@router.get(
    "/{item_id}",
    response_model=ItemResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_item(
    item_id: str,
    use_case: GetItemUseCase = Depends(get_item_use_case),
) -> ItemResponse:
    """An item with its history, most recent first."""
    item = await use_case.execute(item_id)
    return use_case.to_response(item)


@router.post(
    "/{item_id}/add",
    response_model=StockMovementResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def add_stock(
    item_id: str,
    request: StockMovementRequest,
    use_case: AddStockUseCase = Depends(get_add_stock_use_case),
) -> StockMovementResponse:
    result = await use_case.execute(item_id, request)
    return use_case.to_response(result)


@router.post(
    "/{item_id}/consume",
    response_model=StockMovementResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse, "description": "Insufficient stock"},
    },
)
async def consume_stock(
    item_id: str,
    request: StockMovementRequest,
    use_case: ConsumeStockUseCase = Depends(get_consume_stock_use_case),
) -> StockMovementResponse:
    result = await use_case.execute(item_id, request)
    return use_case.to_response(result)


@router.get(
    "/{item_id}/balance",
    response_model=BalanceResponse,
    responses={404: {"model": ErrorResponse}},
)
async def item_balance(
    item_id: str,
    at: datetime | None = Query(default=None, description="Instant to replay up to"),
    use_case: ItemBalanceUseCase = Depends(get_item_balance_use_case),
) -> BalanceResponse:
    """Quantity the item held at the given instant (now when omitted)."""
    return await use_case.execute(item_id, at)


@router.get(
    "/{item_id}/verify",
    response_model=LedgerVerificationResponse,
    responses={404: {"model": ErrorResponse}},
)
async def verify_item(
    item_id: str,
    use_case: VerifyItemLedgerUseCase = Depends(get_verify_item_use_case),
) -> LedgerVerificationResponse:
    """Replay the item's history against its stored quantity."""
    return await use_case.execute(item_id)


@router.post(
    "/{item_id}/archive",
    response_model=ItemResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def archive_item(
    item_id: str,
    use_case: ArchiveItemUseCase = Depends(get_archive_item_use_case),
) -> ItemResponse:
    result = await use_case.execute(item_id)
    return use_case.to_response(result)


@router.post(
    "/{item_id}/restore",
    response_model=ItemResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def restore_item(
    item_id: str,
    use_case: RestoreItemUseCase = Depends(get_restore_item_use_case),
) -> ItemResponse:
    result = await use_case.execute(item_id)
    return use_case.to_response(result)
