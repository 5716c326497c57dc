"""Unit tests for core interfaces (ports) and their dataclasses."""

import pytest

from stockpilot.core.interfaces import (
    HealthStatus,
    IClock,
    IIdGenerator,
    IInventoryStore,
    ILLMProvider,
    LLMProvider,
    LLMResponse,
)


class TestLLMDataclasses:
    def test_provider_value(self):
        assert LLMProvider.OLLAMA.value == "ollama"

    def test_response_defaults(self):
        response = LLMResponse(text="Test", model="test-model")
        assert response.done is True
        assert response.done_reason is None
        assert response.total_tokens == 0
        assert response.error is None

    def test_health_status_defaults(self):
        status = HealthStatus(available=False, provider="ollama")
        assert status.model is None
        assert status.response_time_ms is None


class TestAbstractPorts:
    @pytest.mark.parametrize("port", [IInventoryStore, ILLMProvider, IClock, IIdGenerator])
    def test_is_abstract(self, port):
        with pytest.raises(TypeError, match="Can't instantiate abstract class"):
            port()

    def test_inventory_store_operations(self):
        expected = {
            "initialize",
            "load_warehouses",
            "save_warehouses",
            "load_items",
            "save_items",
            "load_archived_reports",
            "save_archived_reports",
        }
        assert expected <= IInventoryStore.__abstractmethods__
