"""
LLM clients (Ollama and Azure OpenAI) behind a single-shot invoke() contract
"""
import asyncio
import logging
import time
from typing import Optional, Protocol

import httpx

from autoprofiler.core.config import Settings, settings as default_settings
from autoprofiler.core.errors import ModelInvocationError

logger = logging.getLogger(__name__)

# Rate limiting is the only client error worth retrying
RETRYABLE_CLIENT_STATUS = {429}


class GenerativeModel(Protocol):
    """Anything that turns a rendered prompt into raw text"""

    async def invoke(self, prompt: str) -> str:
        ...


class HttpModel:
    """
    Base class for HTTP-backed models

    Subclasses build the request and extract the text from the JSON body;
    this class owns retry with exponential backoff and error wrapping.
    """

    def __init__(
        self,
        temperature: float = 0.0,
        timeout: float = 120.0,
        max_retries: int = 3,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.temperature = temperature
        self.timeout = timeout
        self.max_retries = max_retries
        self._transport = transport

    def _url(self) -> str:
        raise NotImplementedError

    def _headers(self) -> dict:
        return {"Content-Type": "application/json"}

    def _payload(self, prompt: str) -> dict:
        raise NotImplementedError

    def _extract_text(self, data: dict) -> str:
        raise NotImplementedError

    async def invoke(self, prompt: str) -> str:
        """Send one prompt, return the raw response text"""
        last_error: Optional[Exception] = None

        for attempt in range(self.max_retries):
            try:
                start = time.time()
                async with httpx.AsyncClient(
                    timeout=httpx.Timeout(self.timeout, connect=10.0),
                    transport=self._transport
                ) as client:
                    response = await client.post(
                        self._url(),
                        headers=self._headers(),
                        json=self._payload(prompt)
                    )
                    response.raise_for_status()
                    data = response.json()
                latency = (time.time() - start) * 1000
                logger.info(f"{self.__class__.__name__} responded in {latency:.0f}ms")
                return self._extract_text(data)

            except httpx.HTTPStatusError as e:
                status = e.response.status_code
                if 400 <= status < 500 and status not in RETRYABLE_CLIENT_STATUS:
                    logger.error(f"Non-retryable model error: {status}")
                    raise ModelInvocationError(f"Model request rejected ({status}): {e}") from e
                last_error = e

            except (httpx.TransportError, ValueError) as e:
                # ValueError covers undecodable JSON bodies
                last_error = e

            if attempt < self.max_retries - 1:
                wait = 2 ** attempt
                logger.warning(
                    f"Model attempt {attempt + 1}/{self.max_retries} failed: {last_error}. "
                    f"Retrying in {wait}s..."
                )
                await asyncio.sleep(wait)

        logger.error(f"Model call failed after {self.max_retries} attempts: {last_error}")
        raise ModelInvocationError(
            f"Model call failed after {self.max_retries} attempts: {last_error}"
        ) from last_error


class OllamaModel(HttpModel):
    """Local Ollama server, /api/generate without streaming"""

    def __init__(
        self,
        base_url: str = "http://localhost:11434",
        model: str = "deepseek-r1:1.5b",
        **kwargs
    ):
        super().__init__(**kwargs)
        self.base_url = base_url.rstrip("/")
        self.model = model

    def _url(self) -> str:
        return f"{self.base_url}/api/generate"

    def _payload(self, prompt: str) -> dict:
        return {
            "model": self.model,
            "prompt": prompt,
            "stream": False,
            "options": {"temperature": self.temperature}
        }

    def _extract_text(self, data: dict) -> str:
        try:
            return data["response"]
        except (KeyError, TypeError) as e:
            raise ModelInvocationError(f"Unexpected Ollama payload: {data}") from e


class AzureOpenAIModel(HttpModel):
    """Azure OpenAI chat completions deployment, prompt sent as one user message"""

    def __init__(
        self,
        endpoint: str,
        api_key: str,
        deployment: str,
        api_version: str = "2025-01-01-preview",
        max_tokens: int = 2000,
        **kwargs
    ):
        super().__init__(**kwargs)
        self.endpoint = endpoint.rstrip("/")
        self.api_key = api_key
        self.deployment = deployment
        self.api_version = api_version
        self.max_tokens = max_tokens

    def _url(self) -> str:
        return (
            f"{self.endpoint}/openai/deployments/"
            f"{self.deployment}/chat/completions?"
            f"api-version={self.api_version}"
        )

    def _headers(self) -> dict:
        return {
            "Content-Type": "application/json",
            "api-key": self.api_key
        }

    def _payload(self, prompt: str) -> dict:
        return {
            "messages": [{"role": "user", "content": prompt}],
            "temperature": self.temperature,
            "max_tokens": self.max_tokens
        }

    def _extract_text(self, data: dict) -> str:
        try:
            return data["choices"][0]["message"]["content"] or ""
        except (KeyError, IndexError, TypeError) as e:
            raise ModelInvocationError(f"Unexpected Azure OpenAI payload: {data}") from e


def create_model(settings: Settings = default_settings) -> GenerativeModel:
    """Build the configured model client"""
    common = {
        "temperature": settings.LLM_TEMPERATURE,
        "timeout": settings.LLM_TIMEOUT_SECONDS,
        "max_retries": settings.LLM_MAX_RETRIES,
    }
    if settings.LLM_PROVIDER == "azure":
        return AzureOpenAIModel(
            endpoint=settings.AZURE_OPENAI_ENDPOINT,
            api_key=settings.AZURE_OPENAI_API_KEY,
            deployment=settings.AZURE_OPENAI_DEPLOYMENT,
            api_version=settings.AZURE_OPENAI_API_VERSION,
            **common
        )
    return OllamaModel(
        base_url=settings.OLLAMA_BASE_URL,
        model=settings.OLLAMA_MODEL,
        **common
    )
