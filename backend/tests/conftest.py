"""Shared test configuration, pytest markers and a scripted LLM client."""

import asyncio

import pytest


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: talks to a real LLM provider (slow, needs credentials)"
    )


class FakeLLMClient:
    """Returns canned responses keyed by requested schema.

    A response may be a model instance, an exception to raise, or a list of
    those consumed one per call. ``delays`` maps schema -> seconds to sleep
    before answering.
    """

    provider = "fake"
    model = "fake-model"

    def __init__(self, responses=None, delays=None):
        self.responses = dict(responses or {})
        self.delays = dict(delays or {})
        self.calls = []
        self.cancelled = []

    async def generate_structured(self, *, schema, system_prompt, prompt, temperature):
        self.calls.append({
            "schema": schema,
            "system_prompt": system_prompt,
            "prompt": prompt,
            "temperature": temperature,
        })
        delay = self.delays.get(schema, 0)
        if delay:
            try:
                await asyncio.sleep(delay)
            except asyncio.CancelledError:
                self.cancelled.append(schema)
                raise

        response = self.responses[schema]
        if isinstance(response, list):
            response = response.pop(0)
        if isinstance(response, BaseException):
            raise response
        return response

    def schemas_called(self):
        return [c["schema"] for c in self.calls]


@pytest.fixture
def fake_llm():
    """Factory for scripted LLM clients."""
    return FakeLLMClient
