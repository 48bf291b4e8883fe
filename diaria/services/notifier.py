"""Fire-and-forget notification of new results to the user-notification service."""

from __future__ import annotations

import datetime as dt
import logging

import requests

from diaria.services.run_context import RunContext

logger = logging.getLogger(__name__)

API_KEY_HEADER = "x-internal-api-key"


class Notifier:
    """POST each new draw at most once per run. Never raises."""

    def __init__(
        self,
        url: str,
        api_key: str | None,
        http: requests.Session | None = None,
        *,
        timeout_seconds: float = 10.0,
    ) -> None:
        self._url = url
        self._api_key = api_key
        self._http = http or requests.Session()
        self._timeout = float(timeout_seconds)

    @property
    def enabled(self) -> bool:
        return bool(self._api_key)

    def notify(self, draw_date: dt.date, draw_time: str, result_number: int, *, run: RunContext) -> bool:
        """Return True when the notification service accepted the call."""

        if not self.enabled:
            logger.warning("INTERNAL_API_KEY not set; skipping notification for %s %s", draw_date, draw_time)
            return False

        if not run.claim_notification(draw_date, draw_time):
            return False

        payload = {
            "draw_date": draw_date.isoformat(),
            "draw_time": draw_time,
            "result_number": int(result_number),
        }
        try:
            resp = self._http.post(
                self._url,
                json=payload,
                headers={API_KEY_HEADER: str(self._api_key)},
                timeout=self._timeout,
            )
        except requests.RequestException as exc:
            logger.error("Notify error for %s %s: %s", draw_date, draw_time, exc)
            return False

        if not resp.ok:
            logger.error("Notify rejected for %s %s: HTTP %s", draw_date, draw_time, resp.status_code)
            return False

        try:
            body = resp.json()
        except ValueError:
            body = None
        logger.info("Notified %s %s -> %02d (%s)", draw_date, draw_time, int(result_number), body)
        return True
