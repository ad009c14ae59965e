"""
Webhook alert tests. httpx.AsyncClient is mocked; no network traffic.
"""

from __future__ import annotations

import asyncio
import json
import threading
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from servicelog import Logger
from servicelog.alerts import build_alert_payload, dispatch, send_alert
from servicelog.config import TransportOptions


@pytest.fixture
def http_client():
    """Yield the client object returned by ``async with httpx.AsyncClient()``."""
    with patch("servicelog.alerts.httpx.AsyncClient") as client_cls:
        client = client_cls.return_value.__aenter__.return_value
        client.post = AsyncMock(return_value=MagicMock(spec=httpx.Response))
        yield client


def _raised(exc: BaseException) -> BaseException:
    try:
        raise exc
    except BaseException as caught:
        return caught


# ================================
# Payload
# ================================


class TestBuildAlertPayload:
    def test_wire_format(self):
        err = _raised(ValueError("bad input"))
        body = build_alert_payload(err, "join failed", "join_room", {"room": 1}, environment="production")

        (attachment,) = body["attachments"]
        assert attachment["fallback"] == attachment["pretext"] == "join_room: join failed ValueError: bad input"
        assert attachment["color"] == "#b52626"

        details, payload, stack = attachment["fields"]
        assert details == {
            "title": "Details",
            "short": False,
            "value": "Environment: production\nError: bad input",
        }
        assert payload["short"] is False
        assert payload["value"] == '```{\n  "room": 1\n}```'
        assert stack["title"] == "Stack Trace"
        assert "ValueError: bad input" in stack["value"]

    def test_no_stack_field_without_traceback(self):
        body = build_alert_payload(ValueError("x"), None, None, None, environment="staging", color="#000000")
        attachment = body["attachments"][0]
        assert [f["title"] for f in attachment["fields"]] == ["Details", "Payload"]
        assert attachment["color"] == "#000000"
        assert attachment["fields"][1]["value"] == "```{}```"

    def test_string_error(self):
        body = build_alert_payload("quota exceeded", "billing", None, {}, environment="production")
        attachment = body["attachments"][0]
        assert attachment["pretext"] == "billing quota exceeded"
        assert attachment["fields"][0]["value"].endswith("Error: quota exceeded")
        assert len(attachment["fields"]) == 2


# ================================
# Sending
# ================================


class TestSendAlert:
    async def test_posts_json(self, http_client):
        await send_alert("https://hooks.example/x", {"attachments": []})

        http_client.post.assert_awaited_once()
        args, kwargs = http_client.post.call_args
        assert args == ("https://hooks.example/x",)
        assert kwargs["headers"] == {"Content-Type": "application/json"}
        assert json.loads(kwargs["content"]) == {"attachments": []}

    async def test_network_failure_swallowed(self, http_client):
        http_client.post.side_effect = httpx.ConnectError("refused")
        await send_alert("https://hooks.example/x", {"attachments": []})

    async def test_http_error_swallowed(self, http_client):
        response = http_client.post.return_value
        response.raise_for_status.side_effect = httpx.HTTPStatusError(
            "500", request=MagicMock(), response=MagicMock()
        )
        await send_alert("https://hooks.example/x", {"attachments": []})


class TestPostWebhookAlert:
    async def test_no_url_makes_no_call(self, http_client):
        instance = Logger()
        instance.initialize_transports("debug", "lounge")

        await instance.post_webhook_alert(ValueError("x"), "m")

        http_client.post.assert_not_called()

    async def test_works_before_initialization(self, http_client):
        await Logger().post_webhook_alert(ValueError("x"), "m")
        http_client.post.assert_not_called()

    async def test_uses_instance_url(self, http_client):
        instance = Logger()
        instance.initialize_transports("debug", "lounge", TransportOptions(webhook_url="https://hooks.example/default"))

        await instance.post_webhook_alert(ValueError("x"), "m", "evt", {"a": 1})

        assert http_client.post.call_args.args[0] == "https://hooks.example/default"
        body = json.loads(http_client.post.call_args.kwargs["content"])
        assert body["attachments"][0]["fields"][0]["value"] == "Environment: localhost\nError: x"

    async def test_override_url_wins(self, http_client):
        instance = Logger()
        instance.initialize_transports("debug", "lounge", TransportOptions(webhook_url="https://hooks.example/default"))

        await instance.post_webhook_alert("x", override_url="https://hooks.example/override")

        assert http_client.post.call_args.args[0] == "https://hooks.example/override"

    async def test_failure_never_raises(self, http_client):
        http_client.post.side_effect = RuntimeError("boom")
        instance = Logger()
        instance.initialize_transports("debug", "lounge", TransportOptions(webhook_url="https://hooks.example/x"))

        await instance.post_webhook_alert(ValueError("x"))

    async def test_payload_build_failure_never_raises(self, http_client):
        instance = Logger()
        with patch("servicelog.logger.alerts.build_alert_payload", side_effect=TypeError("bad payload")):
            await instance.post_webhook_alert(ValueError("x"), override_url="https://hooks.example/x")
        http_client.post.assert_not_called()


# ================================
# Fire-and-forget dispatch
# ================================


class TestDispatch:
    async def test_schedules_task_in_running_loop(self):
        done = asyncio.Event()

        async def alert():
            done.set()

        dispatch(alert())
        await asyncio.wait_for(done.wait(), timeout=1)

    def test_runs_on_thread_without_loop(self):
        done = threading.Event()

        async def alert():
            done.set()

        dispatch(alert())
        assert done.wait(timeout=5)
