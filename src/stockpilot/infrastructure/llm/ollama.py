"""
Ollama LLM provider implementation.

Talks to the Ollama HTTP API for plain text generation.
"""

import time

import httpx

from stockpilot.config import get_logger
from stockpilot.config.settings import LLMSettings
from stockpilot.core.exceptions import (
    LLMResponseError,
    LLMUnavailableError,
    ModelNotFoundError,
)
from stockpilot.core.interfaces.llm import HealthStatus, LLMResponse
from stockpilot.infrastructure.llm.base import BaseLLMProvider

logger = get_logger(__name__)


class OllamaProvider(BaseLLMProvider):
    """Ollama HTTP API provider."""

    provider_name = "ollama"

    def __init__(
        self,
        llm_settings: LLMSettings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(llm_settings)
        cfg = self.llm_settings
        self.host = cfg.host.rstrip("/")
        self.model = cfg.model_name
        self.timeout = cfg.timeout
        self.max_tokens = cfg.max_tokens
        self.temperature = cfg.temperature
        self._transport = transport

    def _client(self, timeout: float) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=timeout, transport=self._transport)

    async def _make_request(self, endpoint: str, payload: dict) -> dict:
        """
        POST to the Ollama API.

        httpx transport errors are mapped to the builtin TimeoutError and
        ConnectionError so the retry policy can recognize them.
        """
        url = f"{self.host}/{endpoint}"
        try:
            async with self._client(self.timeout + 5) as client:
                response = await client.post(url, json=payload, timeout=self.timeout)
        except httpx.TimeoutException as e:
            raise TimeoutError(f"Ollama request timed out: {e}") from e
        except httpx.TransportError as e:
            raise ConnectionError(f"Cannot reach Ollama at {self.host}: {e}") from e

        if response.status_code == 404:
            raise ModelNotFoundError(payload.get("model", "unknown"), "ollama")
        if response.status_code != 200:
            raise LLMUnavailableError(
                "ollama", f"HTTP {response.status_code}: {response.text[:200]}"
            )
        try:
            return response.json()
        except ValueError as e:
            raise LLMResponseError("response body is not JSON", response.text) from e

    async def generate(
        self,
        prompt: str,
        system_prompt: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
        stop: list[str] | None = None,
        json_mode: bool = False,
    ) -> LLMResponse:
        """Generate text completion."""
        payload: dict = {
            "model": self.model,
            "prompt": prompt,
            "stream": False,
            "options": {
                "temperature": temperature if temperature is not None else self.temperature,
                "num_predict": max_tokens or self.max_tokens,
            },
        }
        if system_prompt:
            payload["system"] = system_prompt
        if stop:
            payload["options"]["stop"] = stop
        if json_mode:
            payload["format"] = "json"

        async def _do_generate() -> LLMResponse:
            start_time = time.monotonic()
            result = await self._make_request("api/generate", payload)
            elapsed = time.monotonic() - start_time

            response_text = result.get("response", "")
            if not response_text.strip():
                raise LLMResponseError(
                    f"Empty response (done_reason={result.get('done_reason')})",
                    response_text,
                )

            logger.info(
                "ollama_generate",
                model=self.model,
                prompt_len=len(prompt),
                response_len=len(response_text),
                elapsed_ms=int(elapsed * 1000),
            )
            prompt_tokens = result.get("prompt_eval_count", 0)
            completion_tokens = result.get("eval_count", 0)
            return LLMResponse(
                text=response_text,
                model=self.model,
                done=result.get("done", True),
                done_reason=result.get("done_reason"),
                prompt_tokens=prompt_tokens,
                completion_tokens=completion_tokens,
                total_tokens=prompt_tokens + completion_tokens,
            )

        return await self._with_resilience(_do_generate)

    async def check_health(self) -> HealthStatus:
        """Check that Ollama is running and the model is pulled."""
        start_time = time.monotonic()
        try:
            async with self._client(10) as client:
                response = await client.get(f"{self.host}/api/tags")
        except httpx.ConnectError:
            status = HealthStatus(
                available=False,
                provider="ollama",
                error=f"Cannot connect to Ollama at {self.host}. Is 'ollama serve' running?",
            )
            self._update_health_cache(status)
            return status
        except httpx.HTTPError as e:
            status = HealthStatus(available=False, provider="ollama", error=str(e))
            self._update_health_cache(status)
            return status

        if response.status_code != 200:
            status = HealthStatus(
                available=False, provider="ollama", error=f"HTTP {response.status_code}"
            )
        else:
            try:
                models = [m.get("name", "") for m in response.json().get("models", [])]
            except (ValueError, AttributeError) as e:
                status = HealthStatus(
                    available=False, provider="ollama", error=f"Bad tags response: {e}"
                )
                self._update_health_cache(status)
                return status
            if self.model not in models and not any(self.model in m for m in models):
                status = HealthStatus(
                    available=False,
                    provider="ollama",
                    model=self.model,
                    error=f"Model '{self.model}' not installed. Run: ollama pull {self.model}",
                )
            else:
                status = HealthStatus(
                    available=True,
                    provider="ollama",
                    model=self.model,
                    response_time_ms=(time.monotonic() - start_time) * 1000,
                )
        self._update_health_cache(status)
        return status


# Singleton
_ollama_provider: OllamaProvider | None = None


def get_ollama_provider() -> OllamaProvider:
    """Get or create the Ollama provider singleton."""
    global _ollama_provider
    if _ollama_provider is None:
        _ollama_provider = OllamaProvider()
    return _ollama_provider


def reset_ollama_provider() -> None:
    global _ollama_provider
    _ollama_provider = None
