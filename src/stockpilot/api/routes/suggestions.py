"""Advisory stock level endpoint."""

from fastapi import APIRouter, Depends

from stockpilot.api.dependencies import get_suggest_stock_level_use_case
from stockpilot.application.dto.requests import StockSuggestionRequest
from stockpilot.application.dto.responses import ErrorResponse, StockSuggestionResponse
from stockpilot.application.use_cases import SuggestStockLevelUseCase

router = APIRouter(prefix="/api/suggestions", tags=["suggestions"])


@router.post(
    "",
    response_model=StockSuggestionResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        503: {"model": ErrorResponse, "description": "LLM unavailable or unusable answer"},
    },
)
async def suggest_stock_level(
    request: StockSuggestionRequest,
    use_case: SuggestStockLevelUseCase = Depends(get_suggest_stock_level_use_case),
) -> StockSuggestionResponse:
    """Ask the model for a stock level. Advisory only; nothing is changed."""
    suggestion = await use_case.execute(request)
    return use_case.to_response(request.item_id, suggestion)
