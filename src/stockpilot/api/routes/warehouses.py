"""Warehouse endpoints."""

from typing import Literal

from fastapi import APIRouter, Depends, Query, status

from stockpilot.api.dependencies import (
    get_archive_warehouse_use_case,
    get_create_warehouse_use_case,
    get_list_warehouses_use_case,
    get_restore_warehouse_use_case,
    get_warehouse_use_case,
)
from stockpilot.application.dto.requests import CreateWarehouseRequest
from stockpilot.application.dto.responses import (
    ArchiveWarehouseResponse,
    ErrorResponse,
    WarehouseDetailResponse,
    WarehouseListResponse,
    WarehouseResponse,
)
from stockpilot.application.use_cases import (
    ArchiveWarehouseUseCase,
    CreateWarehouseUseCase,
    GetWarehouseUseCase,
    ListWarehousesUseCase,
    RestoreWarehouseUseCase,
)

router = APIRouter(prefix="/api/warehouses", tags=["warehouses"])


@router.get("", response_model=WarehouseListResponse)
async def list_warehouses(
    search: str | None = Query(default=None, description="Case-insensitive name filter"),
    use_case: ListWarehousesUseCase = Depends(get_list_warehouses_use_case),
) -> WarehouseListResponse:
    """Active warehouses, most recently updated first."""
    result = await use_case.execute(search)
    return use_case.to_response(result)


@router.post(
    "",
    response_model=WarehouseResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
)
async def create_warehouse(
    request: CreateWarehouseRequest,
    use_case: CreateWarehouseUseCase = Depends(get_create_warehouse_use_case),
) -> WarehouseResponse:
    warehouse = await use_case.execute(request)
    return use_case.to_response(warehouse)


@router.get(
    "/{warehouse_id}",
    response_model=WarehouseDetailResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_warehouse(
    warehouse_id: str,
    order: Literal["name", "recent"] = "name",
    use_case: GetWarehouseUseCase = Depends(get_warehouse_use_case),
) -> WarehouseDetailResponse:
    """A warehouse with its active items."""
    result = await use_case.execute(warehouse_id, order)
    return use_case.to_response(result)


@router.post(
    "/{warehouse_id}/archive",
    response_model=ArchiveWarehouseResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse, "description": "Partial cascade"},
    },
)
async def archive_warehouse(
    warehouse_id: str,
    use_case: ArchiveWarehouseUseCase = Depends(get_archive_warehouse_use_case),
) -> ArchiveWarehouseResponse:
    """Archive a warehouse and every active item in it."""
    plan = await use_case.execute(warehouse_id)
    return use_case.to_response(plan)


@router.post(
    "/{warehouse_id}/restore",
    response_model=WarehouseResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def restore_warehouse(
    warehouse_id: str,
    use_case: RestoreWarehouseUseCase = Depends(get_restore_warehouse_use_case),
) -> WarehouseResponse:
    """Restore a warehouse. Items archived with it stay archived."""
    warehouse = await use_case.execute(warehouse_id)
    return use_case.to_response(warehouse)
