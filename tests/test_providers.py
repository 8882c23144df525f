"""Tests for the provider clients, using fake transports instead of the network."""

import json
from types import SimpleNamespace

import httpx
import pytest

from creatorlens.core import (
    GenerationIntent,
    HealthStatus,
    OpenAIConfig,
    ProviderCallFailedError,
    ProviderId,
    ProviderTimeoutError,
    Task,
    TaskType,
)
from creatorlens.llm import (
    CONTENT_END,
    CONTENT_START,
    GeminiClientSettings,
    GeminiProvider,
    MockProvider,
    OpenAIChatProvider,
)


def _openai_provider(handler):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    config = OpenAIConfig(api_key="sk-test", base_url="https://llm.test/v1", cost_per_token=0.00003)
    return OpenAIChatProvider.from_config(config, client=client)


class TestOpenAIChatProvider:

    @pytest.mark.asyncio
    async def test_generate_sends_messages_and_prices_usage(self):
        seen = {}

        def handler(request):
            seen["url"] = str(request.url)
            seen["auth"] = request.headers["Authorization"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(
                200,
                json={
                    "model": "gpt-4o",
                    "choices": [{"message": {"role": "assistant", "content": "Rewritten script"}}],
                    "usage": {"prompt_tokens": 100, "completion_tokens": 50},
                },
            )

        provider = _openai_provider(handler)
        task = Task(prompt="Rewrite this", system_instruction="Be brief", max_output_tokens=200, temperature=0.2)

        result = await provider.generate(task)

        assert seen["url"] == "https://llm.test/v1/chat/completions"
        assert seen["auth"] == "Bearer sk-test"
        assert seen["body"]["messages"][0] == {"role": "system", "content": "Be brief"}
        assert seen["body"]["max_tokens"] == 200
        assert result.text == "Rewritten script"
        assert result.provider == ProviderId.OPENAI
        assert result.actual_cost == pytest.approx(150 * 0.00003)

    @pytest.mark.asyncio
    async def test_error_status_mapped(self):
        def handler(request):
            return httpx.Response(429, json={"error": {"message": "Rate limit reached"}})

        provider = _openai_provider(handler)

        with pytest.raises(ProviderCallFailedError) as exc_info:
            await provider.generate(Task(prompt="hello"))
        assert exc_info.value.status_code == 429
        assert exc_info.value.message == "Rate limit reached"

    @pytest.mark.asyncio
    async def test_empty_content_is_a_failure(self):
        def handler(request):
            return httpx.Response(200, json={"choices": [{"message": {"content": "   "}}]})

        with pytest.raises(ProviderCallFailedError):
            await _openai_provider(handler).generate(Task(prompt="hello"))

    @pytest.mark.asyncio
    async def test_missing_usage_leaves_cost_unknown(self):
        def handler(request):
            return httpx.Response(200, json={"choices": [{"message": {"content": "ok"}}]})

        result = await _openai_provider(handler).generate(Task(prompt="hello"))
        assert result.actual_cost is None

    @pytest.mark.asyncio
    async def test_connection_error_mapped(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(ProviderCallFailedError):
            await _openai_provider(handler).generate(Task(prompt="hello"))

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body",
        [
            {"choices": ["unexpected"]},
            {"choices": [{"message": {"content": [{"type": "text", "text": "parts"}]}}]},
            {"choices": {"message": "not a list"}},
        ],
    )
    async def test_malformed_choice_is_a_failure(self, body):
        def handler(request):
            return httpx.Response(200, json=body)

        with pytest.raises(ProviderCallFailedError) as exc_info:
            await _openai_provider(handler).generate(Task(prompt="hello"))
        assert exc_info.value.response_data == body

    @pytest.mark.asyncio
    async def test_malformed_usage_ignored(self):
        def handler(request):
            return httpx.Response(200, json={"model": 4, "choices": [{"message": {"content": "ok"}}], "usage": []})

        result = await _openai_provider(handler).generate(Task(prompt="hello"))
        assert result.model == "gpt-4o"
        assert result.actual_cost is None

    @pytest.mark.asyncio
    async def test_transport_timeout_mapped(self):
        def handler(request):
            raise httpx.ReadTimeout("slow", request=request)

        with pytest.raises(ProviderTimeoutError) as exc_info:
            await _openai_provider(handler).generate(Task(prompt="hello"))
        assert exc_info.value.provider == "openai"
        assert exc_info.value.timeout_seconds == 60.0

    @pytest.mark.asyncio
    async def test_health_probe(self):
        calls = []

        def handler(request):
            calls.append(request.url.path)
            return httpx.Response(200, json={"data": []})

        health = await _openai_provider(handler).check_health()

        assert health.status == HealthStatus.ONLINE
        assert calls == ["/v1/models"]


class TestGeminiProvider:

    @pytest.fixture
    def settings(self):
        return GeminiClientSettings(api_key="gm-test", model="gemini-2.0-flash", cost_per_token=0.000001)

    @pytest.mark.asyncio
    async def test_generate_passes_system_instruction(self, settings, mocker):
        response = SimpleNamespace(
            text="A better script",
            usage_metadata=SimpleNamespace(prompt_token_count=40, candidates_token_count=60),
        )
        model = mocker.Mock()
        model.generate_content_async = mocker.AsyncMock(return_value=response)
        factory = mocker.Mock(return_value=model)
        provider = GeminiProvider(settings, model_factory=factory)

        result = await provider.generate(Task(prompt="Rewrite", system_instruction="Editor", max_output_tokens=300))

        factory.assert_called_once_with(model_name="gemini-2.0-flash", system_instruction="Editor")
        config = model.generate_content_async.call_args.kwargs["generation_config"]
        assert config["max_output_tokens"] == 300
        assert result.text == "A better script"
        assert result.actual_cost == pytest.approx(100 * 0.000001)

    @pytest.mark.asyncio
    async def test_upstream_error_wrapped(self, settings, mocker):
        model = mocker.Mock()
        model.generate_content_async = mocker.AsyncMock(side_effect=RuntimeError("quota exceeded"))
        provider = GeminiProvider(settings, model_factory=mocker.Mock(return_value=model))

        with pytest.raises(ProviderCallFailedError) as exc_info:
            await provider.generate(Task(prompt="Rewrite"))
        assert exc_info.value.provider == "gemini"
        assert "quota exceeded" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_empty_text_is_a_failure(self, settings, mocker):
        model = mocker.Mock()
        model.generate_content_async = mocker.AsyncMock(return_value=SimpleNamespace(text="", usage_metadata=None))
        provider = GeminiProvider(settings, model_factory=mocker.Mock(return_value=model))

        with pytest.raises(ProviderCallFailedError):
            await provider.generate(Task(prompt="Rewrite"))


    @pytest.mark.asyncio
    async def test_model_construction_error_wrapped(self, settings, mocker):
        factory = mocker.Mock(side_effect=TypeError("unexpected keyword argument 'system_instruction'"))
        provider = GeminiProvider(settings, model_factory=factory)

        with pytest.raises(ProviderCallFailedError) as exc_info:
            await provider.generate(Task(prompt="Rewrite", system_instruction="Editor"))
        assert exc_info.value.provider == "gemini"

    @pytest.mark.asyncio
    async def test_non_string_text_is_a_failure(self, settings, mocker):
        model = mocker.Mock()
        model.generate_content_async = mocker.AsyncMock(return_value=SimpleNamespace(text=None, usage_metadata=None))
        provider = GeminiProvider(settings, model_factory=mocker.Mock(return_value=model))

        with pytest.raises(ProviderCallFailedError):
            await provider.generate(Task(prompt="Rewrite"))

class TestMockProvider:

    @pytest.mark.asyncio
    async def test_output_is_deterministic(self):
        provider = MockProvider()
        task = Task(prompt="Write a script", task_type=TaskType.VIDEO_SCRIPT, topic="cold brew")

        first = await provider.generate(task)
        second = await provider.generate(task)

        assert first.text == second.text
        assert "cold brew" in first.text
        assert provider.calls == 2

    @pytest.mark.asyncio
    async def test_rewrite_wraps_marked_content(self):
        prompt = f"Rewrite this\n{CONTENT_START}\nOriginal words.\n{CONTENT_END}"
        task = Task(prompt=prompt, intent=GenerationIntent.REWRITE, topic="coffee")

        result = await MockProvider().generate(task)

        assert result.text == "What if everything you knew about coffee was wrong? Original words."

    @pytest.mark.asyncio
    async def test_zero_rate_means_zero_cost(self):
        result = await MockProvider().generate(Task(prompt="anything"))
        assert result.actual_cost == 0.0

    @pytest.mark.asyncio
    async def test_forced_failure(self):
        provider = MockProvider(provider_id=ProviderId.GEMINI, fail=True)

        with pytest.raises(ProviderCallFailedError) as exc_info:
            await provider.generate(Task(prompt="anything"))
        assert exc_info.value.provider == "gemini"

        health = await provider.check_health()
        assert health.status == HealthStatus.OFFLINE

    @pytest.mark.asyncio
    async def test_retry_success_is_degraded(self, mocker):
        provider = MockProvider()
        mocker.patch.object(provider, "_probe", side_effect=[ProviderCallFailedError("flaky"), None])

        health = await provider.check_health()
        assert health.status == HealthStatus.DEGRADED
