"""Tests for the Ollama provider over a mocked HTTP transport."""

import json

import httpx
import pytest

from stockpilot.config.settings import LLMSettings
from stockpilot.core.exceptions import (
    CircuitBreakerOpenError,
    LLMResponseError,
    LLMUnavailableError,
    ModelNotFoundError,
)
from stockpilot.infrastructure.llm import OllamaProvider, get_llm_provider


@pytest.fixture
def llm_settings() -> LLMSettings:
    return LLMSettings(
        model_name="llama3.1:8b",
        host="http://ollama.test/",
        max_retries=2,
        retry_delay=0.01,
        retry_multiplier=1.0,
        failure_threshold=2,
        cooldown_seconds=60,
    )


def _provider(settings: LLMSettings, handler) -> OllamaProvider:
    return OllamaProvider(settings, transport=httpx.MockTransport(handler))


class TestGenerate:
    async def test_generate(self, llm_settings):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["payload"] = json.loads(request.content)
            return httpx.Response(
                200,
                json={
                    "response": '{"suggested_stock_level": 5, "reasoning": "r"}',
                    "done": True,
                    "done_reason": "stop",
                    "prompt_eval_count": 12,
                    "eval_count": 8,
                },
            )

        provider = _provider(llm_settings, handler)
        result = await provider.generate("prompt", temperature=0.2, max_tokens=64, json_mode=True)

        assert seen["url"] == "http://ollama.test/api/generate"
        assert seen["payload"]["model"] == "llama3.1:8b"
        assert seen["payload"]["format"] == "json"
        assert seen["payload"]["stream"] is False
        assert seen["payload"]["options"] == {"temperature": 0.2, "num_predict": 64}
        assert result.total_tokens == 20
        assert result.done_reason == "stop"
        assert "suggested_stock_level" in result.text

    async def test_empty_response(self, llm_settings):
        provider = _provider(llm_settings, lambda r: httpx.Response(200, json={"response": " "}))
        with pytest.raises(LLMResponseError):
            await provider.generate("prompt")

    async def test_model_not_found(self, llm_settings):
        provider = _provider(llm_settings, lambda r: httpx.Response(404, text="no model"))
        with pytest.raises(ModelNotFoundError):
            await provider.generate("prompt")

    async def test_server_error(self, llm_settings):
        provider = _provider(llm_settings, lambda r: httpx.Response(500, text="boom"))
        with pytest.raises(LLMUnavailableError):
            await provider.generate("prompt")

    async def test_connection_errors_retry_then_open_circuit(self, llm_settings):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            raise httpx.ConnectError("refused", request=request)

        provider = _provider(llm_settings, handler)

        with pytest.raises(LLMUnavailableError):
            await provider.generate("prompt")
        assert len(calls) == 2

        with pytest.raises(LLMUnavailableError):
            await provider.generate("prompt")
        assert provider.circuit_breaker.is_open
        assert not provider.is_available()

        with pytest.raises(CircuitBreakerOpenError):
            await provider.generate("prompt")
        assert len(calls) == 4


class TestCheckHealth:
    async def test_model_installed(self, llm_settings):
        provider = _provider(
            llm_settings,
            lambda r: httpx.Response(200, json={"models": [{"name": "llama3.1:8b"}]}),
        )
        status = await provider.check_health()
        assert status.available
        assert status.model == "llama3.1:8b"

    async def test_model_missing(self, llm_settings):
        provider = _provider(
            llm_settings, lambda r: httpx.Response(200, json={"models": [{"name": "phi3"}]})
        )
        status = await provider.check_health()
        assert not status.available
        assert "ollama pull" in status.error

    async def test_unreachable(self, llm_settings):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        status = await _provider(llm_settings, handler).check_health()

        assert not status.available
        assert "Cannot connect" in status.error


def test_unknown_provider():
    with pytest.raises(ValueError):
        get_llm_provider("openai")
