"""Tests configuration and fixtures."""

from collections import defaultdict
from datetime import datetime, timezone
from typing import Optional, Sequence, Union

import pytest
from tenacity import wait_none

from zentia.config import Settings
from zentia.config.settings import GeminiSettings, RetrySettings
from zentia.domain.enums.status import ProviderStatus
from zentia.domain.errors import ServiceUnavailableError
from zentia.domain.models.client_context import ClientContext, ProgressData, TherapyNote
from zentia.infrastructure.llm.provider import LLMProvider, LLMResponse
from zentia.services.ai.therapy_ai_service import TherapyAIService
from zentia.services.prompt.prompt_builder import BuiltPrompt


class FakeProvider(LLMProvider):
    """
    Scripted LLM provider.

    Each generate call consumes the next scripted item: a string is
    returned as model output, an exception is raised.
    """

    def __init__(
        self,
        responses: Optional[Sequence[Union[str, BaseException]]] = None,
        status: ProviderStatus = ProviderStatus.AVAILABLE,
    ) -> None:
        self.responses = list(responses or [])
        self._status = status
        self.prompts: list[BuiltPrompt] = []

    @property
    def provider_name(self) -> str:
        return "fake"

    @property
    def default_model(self) -> str:
        return "fake-model"

    @property
    def status(self) -> ProviderStatus:
        return self._status

    async def generate(self, prompt: BuiltPrompt) -> LLMResponse:
        self.prompts.append(prompt)
        if self._status is ProviderStatus.UNAVAILABLE:
            raise ServiceUnavailableError(self.provider_name)

        item = self.responses.pop(0) if self.responses else ""
        if isinstance(item, BaseException):
            raise item
        return LLMResponse(content=item, model=self.default_model, provider=self.provider_name)

    async def health_check(self) -> bool:
        return self._status is ProviderStatus.AVAILABLE


class FakeRepository:
    """
    In-memory TherapyRepository.

    `failures` maps a method name to exceptions raised by its next calls,
    one per call, before it starts succeeding.
    """

    def __init__(
        self,
        client: Optional[ClientContext] = None,
        notes: Optional[Sequence[TherapyNote]] = None,
        progress: Optional[ProgressData] = None,
        failures: Optional[dict[str, Sequence[BaseException]]] = None,
        healthy: bool = True,
    ) -> None:
        self.client = client
        self.notes = list(notes or [])
        self.progress = progress or ProgressData()
        self.failures = {name: list(errors) for name, errors in (failures or {}).items()}
        self.healthy = healthy
        self.calls: dict[str, int] = defaultdict(int)
        self.list_notes_args: list[tuple] = []
        self.progress_since: Optional[datetime] = None

    def _record(self, name: str) -> None:
        self.calls[name] += 1
        pending = self.failures.get(name)
        if pending:
            raise pending.pop(0)

    async def get_client_context(self, client_id: str) -> Optional[ClientContext]:
        self._record("get_client_context")
        return self.client

    async def list_notes(
        self,
        client_id: str,
        note_ids: Optional[Sequence[str]] = None,
        limit: Optional[int] = 10,
    ) -> list[TherapyNote]:
        self._record("list_notes")
        self.list_notes_args.append((client_id, note_ids, limit))
        return self.notes[:limit] if limit is not None else list(self.notes)

    async def fetch_progress_data(self, client_id: str, since: datetime) -> ProgressData:
        self._record("fetch_progress_data")
        self.progress_since = since
        return self.progress

    async def health_check(self) -> bool:
        return self.healthy


@pytest.fixture
def test_settings() -> Settings:
    """Create test settings with an unusable Gemini key."""
    return Settings(
        env="development",
        debug=True,
        gemini=GeminiSettings(api_key="your_gemini_api_key_here"),
    )


@pytest.fixture
def sample_notes() -> list[TherapyNote]:
    """Two therapy notes, newest first."""
    return [
        TherapyNote(
            content="Client reports improvement with breathing exercises. Work stress remains.",
            title="Session 4",
            created_at=datetime(2024, 5, 9, 15, 0, tzinfo=timezone.utc),
        ),
        TherapyNote(
            content="Discussed family relationship and anxiety.",
            title="Session 3",
            created_at=datetime(2024, 5, 2, 15, 0, tzinfo=timezone.utc),
        ),
    ]


@pytest.fixture
def make_service():
    """Factory for a TherapyAIService wired to fakes, with no retry waits."""

    def factory(
        provider: Optional[LLMProvider] = None,
        repository: Optional[FakeRepository] = None,
    ) -> TherapyAIService:
        return TherapyAIService(
            provider=provider or FakeProvider(status=ProviderStatus.UNAVAILABLE),
            repository=repository or FakeRepository(),
            retry_settings=RetrySettings(max_attempts=3),
            retry_wait=wait_none(),
        )

    return factory
