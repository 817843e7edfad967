import json

import httpx
import pytest

from autoprofiler.core.config import Settings
from autoprofiler.core.errors import ModelInvocationError
from autoprofiler.pipeline.llm import client as client_module
from autoprofiler.pipeline.llm.client import AzureOpenAIModel, OllamaModel, create_model


@pytest.fixture(autouse=True)
def no_backoff(monkeypatch):
    """Record backoff delays instead of sleeping"""
    delays = []

    async def fake_sleep(seconds):
        delays.append(seconds)

    monkeypatch.setattr(client_module.asyncio, "sleep", fake_sleep)
    return delays


def recording_transport(responses):
    """MockTransport replying with the queued (status, body) pairs"""
    requests = []
    queue = list(responses)

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        status, body = queue.pop(0)
        return httpx.Response(status, json=body)

    return httpx.MockTransport(handler), requests


@pytest.mark.asyncio
async def test_ollama_sends_single_non_streaming_generate():
    transport, requests = recording_transport([(200, {"response": "<think>x</think>{}"})])
    model = OllamaModel(
        base_url="http://ollama:11434/",
        model="deepseek-r1:1.5b",
        temperature=0.0,
        transport=transport,
    )

    text = await model.invoke("hello")

    assert text == "<think>x</think>{}"
    assert len(requests) == 1
    request = requests[0]
    assert str(request.url) == "http://ollama:11434/api/generate"
    body = json.loads(request.content)
    assert body == {
        "model": "deepseek-r1:1.5b",
        "prompt": "hello",
        "stream": False,
        "options": {"temperature": 0.0},
    }


@pytest.mark.asyncio
async def test_server_error_is_retried_with_backoff(no_backoff):
    transport, requests = recording_transport([
        (500, {"error": "busy"}),
        (200, {"response": "ok"}),
    ])
    model = OllamaModel(transport=transport)

    assert await model.invoke("hello") == "ok"
    assert len(requests) == 2
    assert no_backoff == [1]


@pytest.mark.asyncio
async def test_unauthorized_is_not_retried():
    transport, requests = recording_transport([(401, {"error": "unauthorized"})])
    model = OllamaModel(transport=transport)

    with pytest.raises(ModelInvocationError, match="401"):
        await model.invoke("hello")

    assert len(requests) == 1


@pytest.mark.asyncio
async def test_rate_limit_is_retried():
    transport, requests = recording_transport([
        (429, {"error": "slow down"}),
        (200, {"response": "ok"}),
    ])
    model = OllamaModel(transport=transport)

    assert await model.invoke("hello") == "ok"
    assert len(requests) == 2


@pytest.mark.asyncio
async def test_gives_up_after_max_retries(no_backoff):
    transport, requests = recording_transport([(500, {})] * 3)
    model = OllamaModel(max_retries=3, transport=transport)

    with pytest.raises(ModelInvocationError, match="3 attempts"):
        await model.invoke("hello")

    assert len(requests) == 3
    assert no_backoff == [1, 2]


@pytest.mark.asyncio
async def test_transport_failure_becomes_model_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    model = OllamaModel(max_retries=2, transport=httpx.MockTransport(handler))

    with pytest.raises(ModelInvocationError, match="connection refused"):
        await model.invoke("hello")


@pytest.mark.asyncio
async def test_unexpected_payload_is_rejected():
    transport, _ = recording_transport([(200, {"done": True})])
    model = OllamaModel(transport=transport)

    with pytest.raises(ModelInvocationError, match="Unexpected Ollama payload"):
        await model.invoke("hello")


@pytest.mark.asyncio
async def test_azure_chat_completion_request():
    transport, requests = recording_transport([
        (200, {"choices": [{"message": {"role": "assistant", "content": "SELECT 1;"}}]}),
    ])
    model = AzureOpenAIModel(
        endpoint="https://example.openai.azure.com/",
        api_key="secret",
        deployment="gpt-4o",
        api_version="2025-01-01-preview",
        temperature=0.2,
        transport=transport,
    )

    assert await model.invoke("fix this") == "SELECT 1;"

    request = requests[0]
    assert request.url.path == "/openai/deployments/gpt-4o/chat/completions"
    assert request.url.params["api-version"] == "2025-01-01-preview"
    assert request.headers["api-key"] == "secret"
    body = json.loads(request.content)
    assert body["messages"] == [{"role": "user", "content": "fix this"}]
    assert body["temperature"] == 0.2


def test_create_model_defaults_to_ollama():
    config = Settings()
    config.LLM_PROVIDER = "ollama"
    config.OLLAMA_MODEL = "llama3"

    model = create_model(config)

    assert isinstance(model, OllamaModel)
    assert model.model == "llama3"


def test_create_model_builds_azure_client():
    config = Settings()
    config.LLM_PROVIDER = "azure"
    config.AZURE_OPENAI_ENDPOINT = "https://example.openai.azure.com"
    config.AZURE_OPENAI_API_KEY = "secret"
    config.AZURE_OPENAI_DEPLOYMENT = "gpt-4o"
    config.LLM_MAX_RETRIES = 5

    model = create_model(config)

    assert isinstance(model, AzureOpenAIModel)
    assert model.deployment == "gpt-4o"
    assert model.max_retries == 5
