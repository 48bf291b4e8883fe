from __future__ import annotations

import datetime as dt
import random

from diaria.config import SiteGame
from diaria.repositories.draw_repository import DrawRepository
from diaria.repositories.stat_repository import StatRepository
from diaria.services.api_scraper import ApiScraper
from diaria.services.fetcher import Fetcher
from diaria.services.html_scraper import HtmlScraper
from diaria.services.notifier import Notifier
from diaria.services.pipeline import Pipeline
from diaria.services.run_context import RunContext
from tests.fakes import FakeHttp, FakeResponse

TODAY = dt.date(2025, 1, 5)
PAGE_URL = "https://results.example/la-diaria/"
API_BASE = "https://api.example/honduras"
NOTIFY_URL = "http://notify.example/notify"

PAGE = """
<html><body>
  <div class="rrm-date">Domingo, 5 Enero 2025</div>
  <span nm>12</span><span ne>3</span>
  <span nm>45</span><span ne>1</span>
  <div class="rrm-date">Sábado, 4 Enero 2025</div>
  <span nm>20</span><span ne>0</span>
  <span nm>21</span><span ne>1</span>
  <span nm>22</span><span ne>2</span>
</body></html>
"""

GAME_11AM = {
    "game": {
        "score_layout": [
            [{"options": [{"id": "m34", "text": "34 Música"}]}],
            [{"options": [{"id": "x", "text": ""}]}],
            [{"options": [{"id": "c2", "text": "2 Perro"}]}],
        ],
        "sessions": [{"date": "2025-01-05", "score": [["m34", "x", "c2"]]}],
    }
}


def _pipeline(session_factory, http):
    fetcher = Fetcher(http)
    return Pipeline(
        session_factory,
        html_scraper=HtmlScraper(fetcher, PAGE_URL, today=lambda: TODAY),
        api_scraper=ApiScraper(fetcher, API_BASE, (SiteGame("11am", "g11"), SiteGame("9pm", "g9"))),
        notifier=Notifier(NOTIFY_URL, "secret", http),
        periods=(30,),
    )


def test_scrape_persists_notifies_and_recomputes(session_factory):
    http = FakeHttp(
        {
            PAGE_URL: FakeResponse(text=PAGE),
            f"{API_BASE}/site-games/g11": FakeResponse(json_body=GAME_11AM),
            NOTIFY_URL: FakeResponse(json_body={"ok": True}),
        }
    )

    report = _pipeline(session_factory, http).scrape(RunContext(today=TODAY))

    assert (report.html_records, report.api_records, report.stored) == (5, 1, 6)
    assert report.recompute.stat_rows > 0
    assert report.recompute.combined_edges > 0

    with session_factory() as session:
        draws = DrawRepository()
        assert draws.count(session) == 5
        eleven = [d for d in draws.latest(session, limit=10) if d.draw_date == TODAY and d.draw_time == "11am"]
        assert (eleven[0].main_number, eleven[0].companion_number, eleven[0].animal_name) == (34, 2, "Música")
        assert StatRepository().list_scope(session, 30)

    notified = sorted((c[2]["json"]["draw_time"], c[2]["json"]["result_number"]) for c in http.calls if c[0] == "POST")
    assert notified == [("11am", 34), ("3pm", 45)]
    assert report.notified == 2


def test_scrape_with_every_source_down_still_recomputes(session_factory):
    http = FakeHttp({})

    report = _pipeline(session_factory, http).scrape(RunContext(today=TODAY))

    assert (report.html_records, report.api_records, report.stored, report.notified) == (0, 0, 0, 0)
    assert report.recompute.stat_rows == 0


def test_sample_fills_history_without_overwriting(session_factory):
    pipeline = _pipeline(session_factory, FakeHttp({}))

    inserted, report = pipeline.sample(RunContext(today=TODAY), 10, rng=random.Random(7))
    again, _ = pipeline.sample(RunContext(today=TODAY), 10, rng=random.Random(8))

    assert inserted == 30
    assert again == 0
    assert report.stat_rows > 0
    assert report.slot_edges > 0


def test_unreadable_api_document_does_not_lose_html_results(session_factory):
    http = FakeHttp(
        {
            PAGE_URL: FakeResponse(text=PAGE),
            f"{API_BASE}/site-games/g11": FakeResponse(json_body={"game": ["unexpected"]}),
            NOTIFY_URL: FakeResponse(json_body={}),
        }
    )

    report = _pipeline(session_factory, http).scrape(RunContext(today=TODAY))

    assert (report.html_records, report.api_records, report.stored) == (5, 0, 5)
    with session_factory() as session:
        assert DrawRepository().count(session) == 5
