"""
Unit Tests for Gemini Provider

The google-generativeai client is replaced with in-memory fakes; no
network calls are made.
"""

from types import SimpleNamespace
from typing import Any

import pytest

from zentia.config.settings import GeminiSettings
from zentia.domain.enums.status import ProviderStatus
from zentia.domain.errors import ExternalServiceError, ServiceUnavailableError
from zentia.infrastructure.llm import gemini_provider
from zentia.infrastructure.llm.gemini_provider import GeminiProvider
from zentia.services.prompt.prompt_builder import BuiltPrompt


class FakeModel:
    """Stands in for genai.GenerativeModel."""

    def __init__(self, result: Any = None, error: Exception = None, **kwargs: Any) -> None:
        self.init_kwargs = kwargs
        self.result = result
        self.error = error
        self.calls: list[tuple[str, Any]] = []

    async def generate_content_async(self, text: str, generation_config: Any = None) -> Any:
        self.calls.append((text, generation_config))
        if self.error is not None:
            raise self.error
        return self.result


class BlockedResult:
    """Response whose .text raises, as when a candidate is safety-stopped."""

    prompt_feedback = None
    usage_metadata = None

    @property
    def text(self) -> str:
        raise ValueError("The response.text quick accessor requires a valid Part")


def _result(text: str, **extra: Any) -> SimpleNamespace:
    return SimpleNamespace(
        text=text,
        prompt_feedback=extra.get("prompt_feedback"),
        usage_metadata=extra.get("usage_metadata"),
    )


@pytest.fixture
def settings() -> GeminiSettings:
    return GeminiSettings(api_key="test-key", model="gemini-test", max_output_tokens=1024)


@pytest.fixture
def install_model(monkeypatch: pytest.MonkeyPatch):
    """Patch genai so GeminiProvider builds the given FakeModel."""
    configured: dict[str, Any] = {}

    def install(model: FakeModel) -> dict[str, Any]:
        def build(**kwargs: Any) -> FakeModel:
            model.init_kwargs = kwargs
            return model

        monkeypatch.setattr(
            gemini_provider.genai, "configure", lambda **kwargs: configured.update(kwargs)
        )
        monkeypatch.setattr(gemini_provider.genai, "GenerativeModel", build)
        return configured

    return install


@pytest.fixture
def prompt() -> BuiltPrompt:
    return BuiltPrompt(full_prompt="Say hello", max_tokens=4096)


class TestUnconfiguredProvider:
    """Test provider without a usable key."""

    @pytest.mark.parametrize("key", ["", "your_gemini_api_key_here", "CHANGE_ME", "  "])
    def test_placeholder_key_is_unavailable(self, key: str) -> None:
        provider = GeminiProvider(GeminiSettings(api_key=key))
        assert provider.status is ProviderStatus.UNAVAILABLE
        assert not provider.is_configured()

    @pytest.mark.asyncio
    async def test_generate_raises_unavailable(self, prompt: BuiltPrompt) -> None:
        provider = GeminiProvider(GeminiSettings(api_key=""))
        with pytest.raises(ServiceUnavailableError):
            await provider.generate(prompt)

    @pytest.mark.asyncio
    async def test_health_check_false(self) -> None:
        provider = GeminiProvider(GeminiSettings(api_key=""))
        assert await provider.health_check() is False

    def test_init_failure_is_unavailable(
        self, monkeypatch: pytest.MonkeyPatch, settings: GeminiSettings
    ) -> None:
        def broken(**kwargs: Any) -> None:
            raise RuntimeError("invalid model")

        monkeypatch.setattr(gemini_provider.genai, "configure", lambda **kwargs: None)
        monkeypatch.setattr(gemini_provider.genai, "GenerativeModel", broken)

        provider = GeminiProvider(settings)
        assert provider.status is ProviderStatus.UNAVAILABLE


class TestConfiguredProvider:
    """Test generation through a configured provider."""

    def test_configures_client(self, install_model, settings: GeminiSettings) -> None:
        model = FakeModel()
        configured = install_model(model)

        provider = GeminiProvider(settings)

        assert provider.status is ProviderStatus.AVAILABLE
        assert provider.default_model == "gemini-test"
        assert configured == {"api_key": "test-key"}
        assert model.init_kwargs["model_name"] == "gemini-test"
        assert model.init_kwargs["safety_settings"] == GeminiProvider.SAFETY_SETTINGS

    @pytest.mark.asyncio
    async def test_generate_returns_text(
        self, install_model, settings: GeminiSettings, prompt: BuiltPrompt
    ) -> None:
        usage = SimpleNamespace(
            prompt_token_count=10, candidates_token_count=5, total_token_count=15
        )
        model = FakeModel(result=_result('{"content": "hi"}', usage_metadata=usage))
        install_model(model)

        response = await GeminiProvider(settings).generate(prompt)

        assert response.content == '{"content": "hi"}'
        assert response.provider == "gemini"
        assert response.model == "gemini-test"
        assert response.total_tokens == 15
        assert model.calls[0][0] == "Say hello"

    @pytest.mark.asyncio
    async def test_max_tokens_capped_by_settings(
        self, install_model, settings: GeminiSettings, prompt: BuiltPrompt
    ) -> None:
        model = FakeModel(result=_result("hello"))
        install_model(model)

        await GeminiProvider(settings).generate(prompt)

        config = model.calls[0][1]
        assert config.max_output_tokens == 1024
        assert config.temperature == prompt.temperature

    @pytest.mark.asyncio
    async def test_api_error_mapped(
        self, install_model, settings: GeminiSettings, prompt: BuiltPrompt
    ) -> None:
        install_model(FakeModel(error=RuntimeError("quota exceeded")))

        with pytest.raises(ExternalServiceError) as exc_info:
            await GeminiProvider(settings).generate(prompt)

        assert exc_info.value.reason == "error"
        assert isinstance(exc_info.value.original_error, RuntimeError)

    @pytest.mark.asyncio
    async def test_safety_error_is_blocked(
        self, install_model, settings: GeminiSettings, prompt: BuiltPrompt
    ) -> None:
        install_model(FakeModel(error=RuntimeError("Response blocked due to SAFETY")))

        with pytest.raises(ExternalServiceError) as exc_info:
            await GeminiProvider(settings).generate(prompt)

        assert exc_info.value.reason == "blocked"

    @pytest.mark.asyncio
    async def test_prompt_feedback_block(
        self, install_model, settings: GeminiSettings, prompt: BuiltPrompt
    ) -> None:
        feedback = SimpleNamespace(block_reason="SAFETY")
        install_model(FakeModel(result=_result("", prompt_feedback=feedback)))

        with pytest.raises(ExternalServiceError) as exc_info:
            await GeminiProvider(settings).generate(prompt)

        assert exc_info.value.reason == "blocked"

    @pytest.mark.asyncio
    async def test_text_accessor_error_is_blocked(
        self, install_model, settings: GeminiSettings, prompt: BuiltPrompt
    ) -> None:
        install_model(FakeModel(result=BlockedResult()))

        with pytest.raises(ExternalServiceError) as exc_info:
            await GeminiProvider(settings).generate(prompt)

        assert exc_info.value.reason == "blocked"

    @pytest.mark.asyncio
    async def test_empty_output(
        self, install_model, settings: GeminiSettings, prompt: BuiltPrompt
    ) -> None:
        install_model(FakeModel(result=_result("   ")))

        with pytest.raises(ExternalServiceError) as exc_info:
            await GeminiProvider(settings).generate(prompt)

        assert exc_info.value.reason == "empty"

    @pytest.mark.asyncio
    async def test_health_check(
        self,
        monkeypatch: pytest.MonkeyPatch,
        install_model,
        settings: GeminiSettings,
    ) -> None:
        install_model(FakeModel())
        provider = GeminiProvider(settings)

        monkeypatch.setattr(gemini_provider.genai, "list_models", lambda: iter(["models/x"]))
        assert await provider.health_check() is True

        def failing():
            raise ConnectionError("offline")

        monkeypatch.setattr(gemini_provider.genai, "list_models", failing)
        assert await provider.health_check() is False
