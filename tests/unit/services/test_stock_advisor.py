"""Tests for the stock level advisor."""

from unittest.mock import AsyncMock

import pytest

from stockpilot.core.exceptions import (
    LLMResponseError,
    LLMUnavailableError,
    ValidationError,
)
from stockpilot.core.interfaces.llm import LLMResponse
from stockpilot.core.services.stock_advisor import StockAdvisorService, parse_suggestion


@pytest.fixture
def mock_llm():
    llm = AsyncMock()
    llm.generate.return_value = LLMResponse(
        text='{"suggested_stock_level": 120, "reasoning": "steady demand", "alert": ""}',
        model="llama3",
    )
    return llm


@pytest.fixture
def advisor(mock_llm):
    return StockAdvisorService(mock_llm, temperature=0.1, max_tokens=256)


class TestParseSuggestion:
    def test_bare_json(self):
        s = parse_suggestion('{"suggested_stock_level": 40, "reasoning": "ok"}')
        assert s.suggested_stock_level == 40
        assert s.alert is None

    def test_fenced_block_with_camel_case(self):
        text = (
            "Here you go:\n```json\n"
            '{"suggestedStockLevel": 12.5, "reasoning": "r", "alert": "shortage"}\n```'
        )
        s = parse_suggestion(text)
        assert s.suggested_stock_level == 12.5
        assert s.alert == "shortage"

    def test_embedded_in_prose(self):
        s = parse_suggestion('Answer: {"suggested_stock_level": 3, "reasoning": "x"} done')
        assert s.suggested_stock_level == 3

    @pytest.mark.parametrize(
        "text",
        [
            "",
            "no json here",
            "{not json}",
            '["a list"]',
            '{"reasoning": "missing level"}',
        ],
    )
    def test_unparseable(self, text):
        with pytest.raises(LLMResponseError):
            parse_suggestion(text)


class TestStockAdvisorService:
    async def test_suggest(self, advisor, mock_llm):
        suggestion = await advisor.suggest("it-1", "sold 10 per week")

        assert suggestion.suggested_stock_level == 120
        assert suggestion.reasoning == "steady demand"
        assert suggestion.alert is None

        prompt = mock_llm.generate.call_args[0][0]
        assert "Item ID: it-1" in prompt
        assert "Historical Data: sold 10 per week" in prompt
        kwargs = mock_llm.generate.call_args.kwargs
        assert kwargs["json_mode"] is True
        assert kwargs["temperature"] == 0.1
        assert kwargs["max_tokens"] == 256

    @pytest.mark.parametrize("item_id,data", [("", "x"), ("it-1", "  "), ("it-1", None)])
    async def test_rejects_empty_input(self, advisor, mock_llm, item_id, data):
        with pytest.raises(ValidationError):
            await advisor.suggest(item_id, data)
        mock_llm.generate.assert_not_called()

    async def test_provider_errors_propagate(self, advisor, mock_llm):
        mock_llm.generate.side_effect = LLMUnavailableError("ollama", "connection refused")
        with pytest.raises(LLMUnavailableError):
            await advisor.suggest("it-1", "data")
