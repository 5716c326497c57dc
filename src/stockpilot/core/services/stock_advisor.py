"""
Stock level advisor.

Asks the LLM for an optimal stock level given an item's historical data.
The call is advisory only: it never touches the ledger, and provider
failures reach the caller unchanged.
"""

import json
import re

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from stockpilot.config import get_logger
from stockpilot.core.exceptions import LLMResponseError, ValidationError
from stockpilot.core.interfaces.llm import ILLMProvider

logger = get_logger(__name__)

STOCK_LEVEL_PROMPT = """You are an expert inventory manager. Analyze the historical data for the item and suggest an optimal stock level.

Item ID: {item_id}
Historical Data: {historical_data}

Consider past demand, supply chain disruptions, and sales trends.

Provide the suggested stock level, the reasoning behind it, and an alert message if there is a potential shortage or overstock.

Output should be in JSON format with the keys "suggested_stock_level" (number), "reasoning" (string) and "alert" (string, optional).
"""


class StockLevelSuggestion(BaseModel):
    """Parsed advisor answer."""

    model_config = ConfigDict(populate_by_name=True)

    suggested_stock_level: float = Field(alias="suggestedStockLevel")
    reasoning: str
    alert: str | None = None


def _extract_json_string(text: str) -> str | None:
    text = text.strip()
    if text.startswith("{"):
        return text

    match = re.search(r"```(?:json)?\s*([\s\S]*?)```", text)
    if match:
        return match.group(1).strip()

    match = re.search(r"\{[\s\S]*\}", text)
    if match:
        return match.group(0)
    return None


def parse_suggestion(text: str) -> StockLevelSuggestion:
    """
    Parse the model output into a StockLevelSuggestion.

    Accepts bare JSON, fenced code blocks, or a JSON object embedded in
    prose. Both snake_case and camelCase keys are understood.

    Raises:
        LLMResponseError: If no valid suggestion can be read
    """
    json_str = _extract_json_string(text or "")
    if not json_str:
        raise LLMResponseError("no JSON object found", response=text)

    try:
        data = json.loads(json_str)
    except json.JSONDecodeError as e:
        raise LLMResponseError(f"invalid JSON: {e}", response=text) from e

    if not isinstance(data, dict):
        raise LLMResponseError("expected a JSON object", response=text)

    if isinstance(data.get("alert"), str) and not data["alert"].strip():
        data["alert"] = None

    try:
        return StockLevelSuggestion.model_validate(data)
    except PydanticValidationError as e:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
        raise LLMResponseError(f"missing or invalid fields: {fields}", response=text) from e


class StockAdvisorService:
    """Builds the fixed stock-level prompt and interprets the answer."""

    def __init__(self, llm: ILLMProvider, temperature: float = 0.2, max_tokens: int = 1024):
        self._llm = llm
        self._temperature = temperature
        self._max_tokens = max_tokens

    async def suggest(self, item_id: str, historical_data: str) -> StockLevelSuggestion:
        """
        Suggest a stock level for an item.

        Args:
            item_id: Identifier of the item being analyzed
            historical_data: Free-text summary of past movements

        Returns:
            StockLevelSuggestion with level, reasoning and optional alert

        Raises:
            ValidationError: If item_id or historical_data is empty
            LLMResponseError: If the model output cannot be parsed
            LLMError: Provider failures, propagated unchanged
        """
        if not item_id or not item_id.strip():
            raise ValidationError("item_id", "must not be empty", item_id)
        if not historical_data or not historical_data.strip():
            raise ValidationError("historical_data", "must not be empty", historical_data)

        prompt = STOCK_LEVEL_PROMPT.format(
            item_id=item_id.strip(), historical_data=historical_data.strip()
        )

        logger.info("stock_suggestion_requested", item_id=item_id)
        response = await self._llm.generate(
            prompt,
            temperature=self._temperature,
            max_tokens=self._max_tokens,
            json_mode=True,
        )

        suggestion = parse_suggestion(response.text)
        logger.info(
            "stock_suggestion_complete",
            item_id=item_id,
            suggested_stock_level=suggestion.suggested_stock_level,
            has_alert=suggestion.alert is not None,
        )
        return suggestion
