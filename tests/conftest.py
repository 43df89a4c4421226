"""Shared fixtures and fakes for the test suite."""

from __future__ import annotations

import os
from types import SimpleNamespace

import pytest

from transintel.cache import TranslationCache
from transintel.config import Settings
from transintel.retry import UpstreamInvoker

TEST_API_KEY = "test-key-123"


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class SleepRecorder:
    """Records requested delays instead of sleeping."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


class FakeGeminiClient:
    """
    In-memory stand-in for GeminiClient.

    ``responses`` is consumed one item per generate call; an Exception item
    is raised instead of returned. ``file_states`` gives the state reported
    by the upload and by each following get_file call.
    """

    def __init__(
        self,
        responses: list | None = None,
        file_states: list[str] | None = None,
        upload_error: Exception | None = None,
        delete_error: Exception | None = None,
    ) -> None:
        self.responses = list(responses or [])
        self.file_states = list(file_states or ["ACTIVE"])
        self.upload_error = upload_error
        self.delete_error = delete_error
        self.generate_calls: list[tuple[str, object]] = []
        self.upload_calls: list[dict] = []
        self.get_calls: list[str] = []
        self.delete_calls: list[str] = []

    def generate(self, prompt: str, file=None) -> str:
        self.generate_calls.append((prompt, file))
        item = self.responses.pop(0) if self.responses else ""
        if isinstance(item, Exception):
            raise item
        return item

    def upload_file(self, path: str, mime_type: str, display_name: str | None = None):
        self.upload_calls.append({
            "path": path,
            "mime_type": mime_type,
            "display_name": display_name,
            "existed": os.path.exists(path),
        })
        if self.upload_error is not None:
            raise self.upload_error
        return self._file(mime_type)

    def get_file(self, name: str):
        self.get_calls.append(name)
        return self._file(self.upload_calls[-1]["mime_type"])

    def delete_file(self, name: str) -> None:
        self.delete_calls.append(name)
        if self.delete_error is not None:
            raise self.delete_error

    def _file(self, mime_type: str) -> SimpleNamespace:
        state = self.file_states.pop(0) if len(self.file_states) > 1 else self.file_states[0]
        return SimpleNamespace(
            name="files/fake-123",
            uri="https://generativelanguage.googleapis.com/v1beta/files/fake-123",
            mime_type=mime_type,
            state=state,
        )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def sleep() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture
def settings() -> Settings:
    return Settings(api_key=TEST_API_KEY)


@pytest.fixture
def cache(clock: FakeClock) -> TranslationCache:
    return TranslationCache(max_size=3, ttl_seconds=60, clock=clock)


@pytest.fixture
def fake_client() -> FakeGeminiClient:
    return FakeGeminiClient()


@pytest.fixture
def invoker(fake_client: FakeGeminiClient, sleep: SleepRecorder) -> UpstreamInvoker:
    return UpstreamInvoker(fake_client, sleep=sleep)
