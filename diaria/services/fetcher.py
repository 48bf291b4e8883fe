"""Shared requests session construction and redirect-aware fetching."""

from __future__ import annotations

import json
import logging
from typing import Any
from urllib.parse import urljoin

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from diaria.errors import FetchTimeout, RedirectLoopError, TransientNetworkError, UpstreamStatusError

logger = logging.getLogger(__name__)

REDIRECT_STATUSES = frozenset({301, 302, 303, 307, 308})

BROWSER_HEADERS = {
    "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/124.0 Safari/537.36",
    "Accept": "text/html,application/xhtml+xml,application/json;q=0.9,*/*;q=0.8",
    "Accept-Language": "es-HN,es;q=0.9",
}


def build_http_session(retries: int = 0, backoff_factor: float = 0.3) -> requests.Session:
    """Create a requests session with browser-like headers.

    ``retries`` configures transport-level retries in urllib3; the default of
    zero leaves retrying to the caller.
    """

    retry = Retry(
        total=retries,
        connect=retries,
        read=retries,
        status=retries,
        redirect=0,
        backoff_factor=backoff_factor,
        status_forcelist=(429, 500, 502, 503, 504),
        allowed_methods=("GET",),
        raise_on_status=False,
        raise_on_redirect=False,
    )
    adapter = HTTPAdapter(max_retries=retry, pool_connections=10, pool_maxsize=10)

    session = requests.Session()
    session.headers.update(BROWSER_HEADERS)
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


class Fetcher:
    """GET with manual, bounded redirect following."""

    def __init__(
        self,
        http: requests.Session | None = None,
        *,
        timeout_seconds: float = 15.0,
        max_redirects: int = 3,
    ) -> None:
        self._http = http or build_http_session()
        self._timeout = float(timeout_seconds)
        self._max_redirects = int(max_redirects)

    def fetch(self, url: str, max_redirects: int | None = None) -> str:
        """Return the body of ``url`` after following at most ``max_redirects`` hops.

        Raises:
            FetchTimeout: the timeout elapsed.
            TransientNetworkError: the connection failed.
            RedirectLoopError: more redirects than the budget allows.
            UpstreamStatusError: the final response was not 2xx.
        """

        budget = self._max_redirects if max_redirects is None else int(max_redirects)
        current = url

        while True:
            try:
                resp = self._http.get(current, timeout=self._timeout, allow_redirects=False)
            except requests.Timeout as exc:
                raise FetchTimeout(f"Request timeout after {self._timeout}s", url=current) from exc
            except requests.ConnectionError as exc:
                raise TransientNetworkError(f"Connection failed: {exc}", url=current) from exc

            location = resp.headers.get("Location")
            if resp.status_code in REDIRECT_STATUSES and location:
                # Drain the redirect body so the pooled connection is released.
                _ = resp.content
                resp.close()
                if budget <= 0:
                    raise RedirectLoopError(f"Too many redirects (budget {self._max_redirects})", url=url)
                budget -= 1
                next_url = urljoin(current, location)
                logger.debug("Redirect %s -> %s", current, next_url)
                current = next_url
                continue

            if not 200 <= resp.status_code < 300:
                resp.close()
                raise UpstreamStatusError(
                    f"Upstream returned HTTP {resp.status_code}",
                    url=current,
                    status_code=resp.status_code,
                )

            return resp.text

    def fetch_json(self, url: str) -> Any:
        """Fetch and decode a JSON document. Decoding errors raise ``ValueError``."""

        return json.loads(self.fetch(url))
