"""Tests for reminder intent extraction."""

import json
from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock, patch
from zoneinfo import ZoneInfo

from chatpilot.reminders.parser import (
    parse_model_reply,
    parse_reminder,
    parse_reminder_fallback,
    strip_code_fences,
)

NOW = datetime(2030, 1, 5, 9, 30, tzinfo=UTC)


def _reply(**fields) -> str:
    return json.dumps(fields)


# -- strip_code_fences / parse_model_reply --------------------------------------


def test_strip_json_fence() -> None:
    raw = '```json\n{"isReminder": false}\n```'
    assert strip_code_fences(raw) == '{"isReminder": false}'


def test_strip_bare_fence() -> None:
    assert strip_code_fences('```\n{"a": 1}\n```') == '{"a": 1}'


def test_parse_model_reply_reminder() -> None:
    parsed = parse_model_reply(
        _reply(isReminder=True, task="call mom", datetime="2030-01-05T15:00:00")
    )
    assert parsed is not None
    assert parsed.task == "call mom"
    assert parsed.remind_at == datetime(2030, 1, 5, 15, 0, tzinfo=UTC)


def test_parse_model_reply_not_reminder() -> None:
    assert parse_model_reply(_reply(isReminder=False, task="", datetime="")) is None


def test_parse_model_reply_keeps_explicit_offset() -> None:
    parsed = parse_model_reply(
        _reply(isReminder=True, task="x", datetime="2030-01-05T15:00:00-06:00")
    )
    assert parsed is not None
    assert parsed.remind_at == datetime(2030, 1, 5, 21, 0, tzinfo=UTC)


def test_parse_model_reply_naive_uses_configured_timezone(monkeypatch) -> None:
    monkeypatch.setattr("chatpilot.config.settings.timezone", "America/Chicago")
    parsed = parse_model_reply(_reply(isReminder=True, task="x", datetime="2030-01-05T15:00:00"))
    assert parsed is not None
    assert parsed.remind_at.tzinfo == ZoneInfo("America/Chicago")


# -- parse_reminder (model path) -----------------------------------------------


async def test_model_reminder_detected() -> None:
    raw = _reply(isReminder=True, task="buy groceries", datetime="2030-01-06T17:00:00")
    with patch(
        "chatpilot.reminders.parser.complete_text", new_callable=AsyncMock, return_value=raw
    ) as mock_complete:
        parsed = await parse_reminder("don't forget to buy groceries tomorrow 5pm", now=NOW)

    assert parsed is not None
    assert parsed.task == "buy groceries"
    assert parsed.remind_at == datetime(2030, 1, 6, 17, 0, tzinfo=UTC)

    messages = mock_complete.call_args.args[0]
    prompt = messages[0]["content"]
    assert "don't forget to buy groceries tomorrow 5pm" in prompt
    assert "2030-01-05 09:30:00" in prompt


async def test_model_reply_in_code_fence() -> None:
    raw = "```json\n" + _reply(isReminder=True, task="stretch", datetime="2030-01-05T10:00:00") + "\n```"
    with patch("chatpilot.reminders.parser.complete_text", new_callable=AsyncMock, return_value=raw):
        parsed = await parse_reminder("remind me to stretch at 10am", now=NOW)

    assert parsed is not None
    assert parsed.task == "stretch"


async def test_model_says_not_reminder_skips_fallback() -> None:
    raw = _reply(isReminder=False, task="", datetime="")
    with patch("chatpilot.reminders.parser.complete_text", new_callable=AsyncMock, return_value=raw):
        parsed = await parse_reminder("remind me to call mom at 2030-01-05 15:00", now=NOW)

    assert parsed is None


# -- parse_reminder (fallback path) --------------------------------------------


async def test_model_failure_uses_fallback() -> None:
    with patch(
        "chatpilot.reminders.parser.complete_text",
        new_callable=AsyncMock,
        side_effect=RuntimeError("network down"),
    ):
        parsed = await parse_reminder("Remind me to call mom on 2030-01-05 15:00", now=NOW)

    assert parsed is not None
    assert parsed.task == "call mom"
    assert parsed.remind_at == datetime(2030, 1, 5, 15, 0, tzinfo=UTC)


async def test_invalid_json_uses_fallback() -> None:
    with patch(
        "chatpilot.reminders.parser.complete_text",
        new_callable=AsyncMock,
        return_value="Sure! Here's your reminder.",
    ):
        parsed = await parse_reminder("remind me to water plants at 6pm", now=NOW)

    assert parsed is not None
    assert parsed.task == "water plants"
    assert parsed.remind_at == datetime(2030, 1, 5, 18, 0, tzinfo=UTC)


async def test_invalid_model_datetime_uses_fallback() -> None:
    raw = _reply(isReminder=True, task="pay rent", datetime="next-ish week")
    with patch("chatpilot.reminders.parser.complete_text", new_callable=AsyncMock, return_value=raw):
        parsed = await parse_reminder("remind me to pay rent on 2030-02-01 09:00", now=NOW)

    assert parsed is not None
    assert parsed.task == "pay rent"
    assert parsed.remind_at == datetime(2030, 2, 1, 9, 0, tzinfo=UTC)


async def test_failure_and_no_fallback_match_is_not_reminder() -> None:
    with patch(
        "chatpilot.reminders.parser.complete_text",
        new_callable=AsyncMock,
        side_effect=RuntimeError("boom"),
    ):
        assert await parse_reminder("what's the weather like?", now=NOW) is None


async def test_failure_and_unparseable_date_is_not_reminder() -> None:
    with patch(
        "chatpilot.reminders.parser.complete_text",
        new_callable=AsyncMock,
        side_effect=RuntimeError("boom"),
    ):
        assert await parse_reminder("remind me to stretch at teatime", now=NOW) is None


# -- parse_reminder_fallback ---------------------------------------------------


def test_fallback_time_only_uses_today() -> None:
    parsed = parse_reminder_fallback("remind me to call mom at 5pm", now=NOW)
    assert parsed is not None
    assert parsed.remind_at == datetime(2030, 1, 5, 17, 0, tzinfo=UTC)


def test_fallback_passed_time_rolls_to_tomorrow() -> None:
    parsed = parse_reminder_fallback("remind me to call mom at 8am", now=NOW)
    assert parsed is not None
    assert parsed.remind_at == datetime(2030, 1, 6, 8, 0, tzinfo=UTC)


def test_fallback_passed_weekday_moves_to_next_week() -> None:
    # NOW is a Saturday morning
    parsed = parse_reminder_fallback("remind me to call mom on saturday 8am", now=NOW)
    assert parsed is not None
    assert parsed.remind_at == datetime(2030, 1, 12, 8, 0, tzinfo=UTC)


def test_fallback_explicit_past_date_kept() -> None:
    parsed = parse_reminder_fallback("remind me to pay rent on 2030-01-01 08:00", now=NOW)
    assert parsed is not None
    assert parsed.remind_at == datetime(2030, 1, 1, 8, 0, tzinfo=UTC)


def test_fallback_relative_offset() -> None:
    parsed = parse_reminder_fallback("remind me to take medicine in 2 hours", now=NOW)
    assert parsed is not None
    assert parsed.task == "take medicine"
    assert parsed.remind_at == NOW + timedelta(hours=2)


def test_fallback_relative_minutes_with_punctuation() -> None:
    parsed = parse_reminder_fallback("Remind me to check the oven in 15 minutes!", now=NOW)
    assert parsed is not None
    assert parsed.remind_at == NOW + timedelta(minutes=15)


def test_fallback_no_match() -> None:
    assert parse_reminder_fallback("call mom at 5pm", now=NOW) is None
