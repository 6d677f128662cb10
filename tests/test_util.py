import json
import logging
import sys
import threading
import time

import httpx
import pytest
import respx

from suiarb.util import (
    current_time_ms,
    redact_args,
    send_panic_to_telegram,
    set_panic_hook,
    start_heartbeat,
)

SEND_URL = r".*/sendMessage$"


def test_redact_args_replaces_long_arguments():
    long_arg = "k" * 33
    assert redact_args(["prog", long_arg, "x" * 32]) == ["prog", "[REDACTED]", "x" * 32]


def test_current_time_ms_is_within_bounds():
    before = time.time_ns() // 1_000_000
    now = current_time_ms()
    after = time.time_ns() // 1_000_000
    assert before <= now <= after


def test_send_panic_to_telegram_posts_escaped_message():
    with respx.mock() as mock:
        route = mock.post(url__regex=SEND_URL).mock(return_value=httpx.Response(200, json={"ok": True}))
        assert send_panic_to_telegram("prog", "bad.thing") is True
    payload = json.loads(route.calls.last.request.content)
    assert payload["text"] == 'cmd: "prog"\nerror: "bad\\.thing"'
    assert payload["disable_notification"] is True
    assert payload["disable_web_page_preview"] is True


def test_send_panic_to_telegram_reports_failure_without_raising():
    with respx.mock() as mock:
        mock.post(url__regex=SEND_URL).mock(side_effect=httpx.ConnectError("down"))
        assert send_panic_to_telegram("prog", "boom") is False


def test_set_panic_hook_reports_uncaught_exception(monkeypatch):
    monkeypatch.setattr(sys, "excepthook", sys.excepthook)
    monkeypatch.setattr(threading, "excepthook", threading.excepthook)
    monkeypatch.setattr(sys, "argv", ["prog", "s" * 40])
    assert redact_args(sys.argv) == ["prog", "[REDACTED]"]
    set_panic_hook()
    try:
        raise RuntimeError("kaboom")
    except RuntimeError as exc:
        error = exc
    with respx.mock() as mock:
        route = mock.post(url__regex=SEND_URL).mock(return_value=httpx.Response(200, json={"ok": True}))
        sys.excepthook(RuntimeError, error, error.__traceback__)
    text = json.loads(route.calls.last.request.content)["text"]
    assert "panicked at 'kaboom'" in text
    assert "REDACTED" in text
    assert "s" * 40 not in text


@pytest.mark.asyncio
async def test_start_heartbeat_runs_worker(caplog):
    caplog.set_level(logging.INFO, logger="suiarb.util")
    task = start_heartbeat("relay", 1.5)
    await task
    assert task.done() is True
    assert "Heartbeat worker started for relay" in caplog.text