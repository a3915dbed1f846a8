"""Tests for the Claude client helpers."""

import base64
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from chatpilot.llm.client import ImagePart, complete_prompt, complete_text


def _response(*blocks) -> SimpleNamespace:
    return SimpleNamespace(content=list(blocks))


def _text(text: str) -> SimpleNamespace:
    return SimpleNamespace(type="text", text=text)


@pytest.fixture
def mock_client():
    client = MagicMock()
    client.messages.create = AsyncMock(return_value=_response(_text("hello")))
    with patch("chatpilot.llm.client._get_client", return_value=client):
        yield client


async def test_complete_text_joins_text_blocks(mock_client) -> None:
    mock_client.messages.create.return_value = _response(
        _text("Hello, "), SimpleNamespace(type="thinking", thinking="..."), _text("world")
    )

    result = await complete_text([{"role": "user", "content": "hi"}])

    assert result == "Hello, world"


async def test_complete_text_defaults_from_settings(mock_client) -> None:
    await complete_text([{"role": "user", "content": "hi"}])

    kwargs = mock_client.messages.create.call_args.kwargs
    assert kwargs["model"] == "claude-sonnet-4-5-20250929"
    assert kwargs["max_tokens"] == 4096
    assert "system" not in kwargs


async def test_complete_text_overrides(mock_client) -> None:
    await complete_text(
        [{"role": "user", "content": "hi"}], system="be brief", model="m", max_tokens=10
    )

    kwargs = mock_client.messages.create.call_args.kwargs
    assert kwargs["system"] == "be brief"
    assert kwargs["model"] == "m"
    assert kwargs["max_tokens"] == 10


async def test_complete_text_propagates_errors(mock_client) -> None:
    mock_client.messages.create.side_effect = RuntimeError("overloaded")
    with pytest.raises(RuntimeError, match="overloaded"):
        await complete_text([{"role": "user", "content": "hi"}])


async def test_complete_prompt_text_only(mock_client) -> None:
    assert await complete_prompt("what's up?") == "hello"

    messages = mock_client.messages.create.call_args.kwargs["messages"]
    assert messages == [{"role": "user", "content": "what's up?"}]


async def test_complete_prompt_with_images(mock_client) -> None:
    image = ImagePart(data=b"\xff\xd8jpeg", media_type="image/jpeg")

    await complete_prompt("describe", images=[image])

    content = mock_client.messages.create.call_args.kwargs["messages"][0]["content"]
    assert content[0] == {"type": "text", "text": "describe"}
    assert content[1]["type"] == "image"
    assert content[1]["source"]["media_type"] == "image/jpeg"
    assert base64.b64decode(content[1]["source"]["data"]) == b"\xff\xd8jpeg"
