from __future__ import annotations

import pytest
import requests

from diaria.errors import FetchTimeout, RedirectLoopError, TransientNetworkError, UpstreamStatusError
from diaria.services.fetcher import Fetcher, build_http_session
from tests.fakes import FakeHttp, FakeResponse, redirect

BASE = "https://results.example"


def _chain(hops: int) -> dict[str, FakeResponse]:
    routes = {f"{BASE}/{i}": redirect(f"{BASE}/{i + 1}") for i in range(hops)}
    routes[f"{BASE}/{hops}"] = FakeResponse(text="final page")
    return routes


def test_fetch_returns_body():
    http = FakeHttp({f"{BASE}/page": FakeResponse(text="<html>ok</html>")})

    assert Fetcher(http).fetch(f"{BASE}/page") == "<html>ok</html>"

    method, url, kwargs = http.calls[0]
    assert (method, url) == ("GET", f"{BASE}/page")
    assert kwargs["allow_redirects"] is False
    assert kwargs["timeout"] == 15.0


def test_three_redirects_fit_the_default_budget():
    http = FakeHttp(_chain(3))

    assert Fetcher(http).fetch(f"{BASE}/0") == "final page"
    assert len(http.calls) == 4


def test_fourth_redirect_exhausts_the_budget():
    http = FakeHttp(_chain(4))

    with pytest.raises(RedirectLoopError) as excinfo:
        Fetcher(http).fetch(f"{BASE}/0")

    assert excinfo.value.url == f"{BASE}/0"
    assert len(http.calls) == 4


def test_per_call_budget_overrides_the_default():
    http = FakeHttp(_chain(1))

    with pytest.raises(RedirectLoopError):
        Fetcher(http).fetch(f"{BASE}/0", max_redirects=0)


def test_relative_location_is_resolved_against_the_current_url():
    http = FakeHttp(
        {
            f"{BASE}/la-diaria/": redirect("/la-diaria/hoy", status_code=302),
            f"{BASE}/la-diaria/hoy": FakeResponse(text="today"),
        }
    )

    assert Fetcher(http).fetch(f"{BASE}/la-diaria/") == "today"
    assert http.calls[1][1] == f"{BASE}/la-diaria/hoy"


def test_redirect_responses_are_closed():
    routes = _chain(2)
    http = FakeHttp(routes)

    Fetcher(http).fetch(f"{BASE}/0")

    assert routes[f"{BASE}/0"].closed
    assert routes[f"{BASE}/1"].closed


def test_timeout_is_reported_as_fetch_timeout():
    http = FakeHttp({f"{BASE}/slow": requests.Timeout("read timed out")})

    with pytest.raises(FetchTimeout) as excinfo:
        Fetcher(http, timeout_seconds=2).fetch(f"{BASE}/slow")

    assert isinstance(excinfo.value, TransientNetworkError)
    assert excinfo.value.url == f"{BASE}/slow"


def test_connection_failure_is_transient():
    http = FakeHttp({f"{BASE}/down": requests.ConnectionError("refused")})

    with pytest.raises(TransientNetworkError) as excinfo:
        Fetcher(http).fetch(f"{BASE}/down")

    assert not isinstance(excinfo.value, FetchTimeout)


def test_non_success_status_raises():
    http = FakeHttp({f"{BASE}/broken": FakeResponse(status_code=503, text="unavailable")})

    with pytest.raises(UpstreamStatusError) as excinfo:
        Fetcher(http).fetch(f"{BASE}/broken")

    assert excinfo.value.status_code == 503


def test_redirect_without_location_is_a_status_error():
    http = FakeHttp({f"{BASE}/odd": FakeResponse(status_code=302, text="")})

    with pytest.raises(UpstreamStatusError):
        Fetcher(http).fetch(f"{BASE}/odd")


def test_fetch_json_decodes_the_body():
    http = FakeHttp({f"{BASE}/api": FakeResponse(json_body={"game": {"sessions": []}})})

    assert Fetcher(http).fetch_json(f"{BASE}/api") == {"game": {"sessions": []}}


def test_fetch_json_rejects_invalid_documents():
    http = FakeHttp({f"{BASE}/api": FakeResponse(text="<html>not json</html>")})

    with pytest.raises(ValueError):
        Fetcher(http).fetch_json(f"{BASE}/api")


def test_http_session_sends_browser_headers():
    session = build_http_session()

    assert "Mozilla" in session.headers["User-Agent"]
    assert session.get_adapter("https://results.example").max_retries.total == 0
