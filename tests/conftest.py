"""Pytest configuration and fixtures."""

import json
from typing import Any, Callable, List, Optional

import httpx
import pytest
from fastapi.testclient import TestClient

from cookdobby.api.dependencies import get_recipe_generator
from cookdobby.config import Settings
from cookdobby.main import app
from cookdobby.middleware.rate_limit import limiter
from cookdobby.services.recipe_generator import RecipeGenerator
from cookdobby.services.transport import RetryingTransport

TEST_MODEL = "accounts/fireworks/models/test-model"


def completion(content: str) -> dict:
    """A chat-completion envelope wrapping ``content``."""
    return {
        "id": "cmpl-test",
        "object": "chat.completion",
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": content},
                "finish_reason": "stop",
            }
        ],
    }


def completion_response(payload: Any, status_code: int = 200) -> httpx.Response:
    """Provider response whose completion text is ``payload`` serialized as JSON."""
    content = payload if isinstance(payload, str) else json.dumps(payload)
    return httpx.Response(status_code, json=completion(content))


class ProviderStub:
    """
    Scripted provider: each request consumes the next item, the last one repeats.
    Items are responses or exceptions to raise.
    """

    def __init__(self, *outcomes: Any) -> None:
        self.outcomes: List[Any] = list(outcomes)
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, Exception):
            raise outcome
        # Fresh copy so a repeated outcome is never a response httpx already consumed.
        return httpx.Response(outcome.status_code, headers=outcome.headers, content=outcome.content)

    @property
    def calls(self) -> int:
        return len(self.requests)

    def sent_json(self, index: int = -1) -> dict:
        return json.loads(self.requests[index].content)


class RecordingSleep:
    """Stand-in for asyncio.sleep that records delays instead of waiting."""

    def __init__(self) -> None:
        self.delays: List[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        _env_file=None,
        fireworks_api_key="test-fireworks-key",
        fireworks_model=TEST_MODEL,
        fireworks_base_url="https://provider.test/inference/v1",
    )


@pytest.fixture
def sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def make_transport(sleep: RecordingSleep) -> Callable[..., RetryingTransport]:
    def _make(stub: ProviderStub, **kwargs: Any) -> RetryingTransport:
        kwargs.setdefault("sleep", sleep)
        return RetryingTransport(transport=httpx.MockTransport(stub), **kwargs)

    return _make


@pytest.fixture
def make_generator(
    test_settings: Settings,
    make_transport: Callable[..., RetryingTransport],
) -> Callable[..., RecipeGenerator]:
    def _make(stub: ProviderStub, settings: Optional[Settings] = None) -> RecipeGenerator:
        return RecipeGenerator(settings=settings or test_settings, transport=make_transport(stub))

    return _make


@pytest.fixture
def client():
    """Create test client; route dependencies are restored afterwards."""
    limiter.reset()
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def use_provider(make_generator: Callable[..., RecipeGenerator]):
    """Route /api/recipe through a generator backed by the given stub."""

    def _use(stub: ProviderStub, settings: Optional[Settings] = None) -> RecipeGenerator:
        generator = make_generator(stub, settings)
        app.dependency_overrides[get_recipe_generator] = lambda: generator
        return generator

    return _use
