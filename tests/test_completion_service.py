"""Tests for the Gemini completion adapter (no network: the model is faked)."""

import pytest

from core.domain import BinaryPart, CompletionError, TextPart
from infrastructure.completion_services import GeminiCompletionService


class FakeResponse:
    def __init__(self, text):
        self._text = text

    @property
    def text(self):
        if isinstance(self._text, Exception):
            raise self._text
        return self._text


class FakeModel:
    def __init__(self, text="Generated reply", error=None):
        self.text = text
        self.error = error
        self.calls = []

    async def generate_content_async(self, contents, request_options=None):
        self.calls.append((contents, request_options))
        if self.error is not None:
            raise self.error
        return FakeResponse(self.text)


def test_parts_keep_order_and_shape():
    contents = GeminiCompletionService.to_contents(
        [TextPart("context"), TextPart("User Query: hi"), BinaryPart("image/png", b"img")]
    )
    assert contents == ["context", "User Query: hi", {"mime_type": "image/png", "data": b"img"}]


async def test_missing_api_key_raises_completion_error(test_settings):
    service = GeminiCompletionService(test_settings)
    with pytest.raises(CompletionError):
        await service.complete([TextPart("hello")])


async def test_reply_text_is_returned(test_settings):
    model = FakeModel()
    service = GeminiCompletionService(test_settings, model=model)

    reply = await service.complete([TextPart("hello")])

    assert reply == "Generated reply"
    contents, options = model.calls[0]
    assert contents == ["hello"]
    assert options == {"timeout": test_settings.COMPLETION_TIMEOUT_SECONDS}


async def test_transport_error_becomes_completion_error(test_settings):
    service = GeminiCompletionService(test_settings, model=FakeModel(error=TimeoutError("timed out")))
    with pytest.raises(CompletionError):
        await service.complete([TextPart("hello")])


async def test_blocked_response_becomes_completion_error(test_settings):
    model = FakeModel(text=ValueError("response was blocked"))
    service = GeminiCompletionService(test_settings, model=model)
    with pytest.raises(CompletionError):
        await service.complete([TextPart("hello")])


async def test_empty_reply_becomes_completion_error(test_settings):
    service = GeminiCompletionService(test_settings, model=FakeModel(text=""))
    with pytest.raises(CompletionError):
        await service.complete([TextPart("hello")])
