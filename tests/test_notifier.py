from __future__ import annotations

import datetime as dt

import requests

from diaria.services.notifier import API_KEY_HEADER, Notifier
from diaria.services.run_context import RunContext
from tests.fakes import FakeHttp, FakeResponse

NOTIFY_URL = "http://notify.example/api/lottery/notify-results"
TODAY = dt.date(2025, 1, 5)


def test_posts_payload_with_internal_key():
    http = FakeHttp({NOTIFY_URL: FakeResponse(json_body={"sent": 3})})
    notifier = Notifier(NOTIFY_URL, "secret", http, timeout_seconds=5)

    assert notifier.notify(TODAY, "3pm", 7, run=RunContext(today=TODAY))

    method, url, kwargs = http.calls[0]
    assert (method, url) == ("POST", NOTIFY_URL)
    assert kwargs["json"] == {"draw_date": "2025-01-05", "draw_time": "3pm", "result_number": 7}
    assert kwargs["headers"] == {API_KEY_HEADER: "secret"}
    assert kwargs["timeout"] == 5.0


def test_without_api_key_nothing_is_sent(caplog):
    http = FakeHttp({NOTIFY_URL: FakeResponse()})
    notifier = Notifier(NOTIFY_URL, None, http)

    assert not notifier.enabled
    assert not notifier.notify(TODAY, "3pm", 7, run=RunContext(today=TODAY))
    assert http.calls == []
    assert "INTERNAL_API_KEY" in caplog.text


def test_each_slot_is_notified_once_per_run():
    http = FakeHttp({NOTIFY_URL: FakeResponse(json_body={})})
    notifier = Notifier(NOTIFY_URL, "secret", http)
    run = RunContext(today=TODAY)

    assert notifier.notify(TODAY, "11am", 1, run=run)
    assert not notifier.notify(TODAY, "11am", 1, run=run)
    assert notifier.notify(TODAY, "3pm", 2, run=run)
    assert notifier.notify(TODAY, "11am", 1, run=RunContext(today=TODAY))

    assert len(http.calls) == 3


def test_network_failure_is_swallowed():
    http = FakeHttp({NOTIFY_URL: requests.ConnectionError("refused")})

    assert not Notifier(NOTIFY_URL, "secret", http).notify(TODAY, "9pm", 3, run=RunContext(today=TODAY))


def test_rejected_call_is_reported_as_not_sent():
    http = FakeHttp({NOTIFY_URL: FakeResponse(status_code=401, text="unauthorized")})

    assert not Notifier(NOTIFY_URL, "wrong", http).notify(TODAY, "9pm", 3, run=RunContext(today=TODAY))


def test_non_json_response_still_counts_as_sent():
    http = FakeHttp({NOTIFY_URL: FakeResponse(text="OK")})

    assert Notifier(NOTIFY_URL, "secret", http).notify(TODAY, "9pm", 3, run=RunContext(today=TODAY))
