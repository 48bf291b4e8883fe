from __future__ import annotations

import datetime as dt

import pytest

from diaria import create_app
from diaria.repositories.draw_repository import DrawRecord, DrawRepository
from diaria.services.markov_service import MarkovService
from diaria.services.statistics_service import StatisticsService
from diaria.utils.clock import local_today


@pytest.fixture
def app():
    app = create_app({"DATABASE_URL": "sqlite://", "TESTING": True})
    today = local_today(app.config["TIMEZONE"])

    with app.extensions["session_factory"]() as session:
        DrawRepository().upsert(
            session,
            [
                DrawRecord(today - dt.timedelta(days=1), "11am", 7, 1, animal_name="Navaja"),
                DrawRecord(today - dt.timedelta(days=1), "3pm", 12, 2),
                DrawRecord(today, "11am", 7, 3, animal_name="Navaja"),
            ],
        )
        StatisticsService().recompute(session, (30,), today=today)
        MarkovService().recompute(session)

    return app


@pytest.fixture
def client(app):
    return app.test_client()


def test_health(client):
    resp = client.get("/health")

    assert resp.status_code == 200
    assert resp.get_json() == {"success": True, "data": {"status": "ok"}, "error": None}


def test_results_newest_first(client):
    resp = client.get("/api/lottery/results?limit=2")

    body = resp.get_json()
    assert body["success"] is True
    results = body["data"]["results"]
    assert [(r["time"], r["main_number"]) for r in results] == [("11am", "07"), ("3pm", "12")]
    assert results[0]["animal"] == "Navaja"


@pytest.mark.parametrize("limit", ["0", "101", "many"])
def test_results_rejects_bad_limit(client, limit):
    resp = client.get(f"/api/lottery/results?limit={limit}")

    assert resp.status_code == 400
    assert resp.get_json()["error"]["code"] == "validation_error"


def test_stats_combined_scope(client):
    body = client.get("/api/lottery/stats?period=30").get_json()["data"]

    assert body["draw_time"] is None
    assert [s["number"] for s in body["stats"]] == [7, 12]
    assert body["stats"][0]["frequency"] == 2


def test_stats_rejects_unknown_slot(client):
    assert client.get("/api/lottery/stats?draw_time=noon").status_code == 400


def test_markov_transitions(client):
    body = client.get("/api/lottery/markov/7").get_json()["data"]

    assert body["sign"] == "Navaja"
    assert [(t["to_number"], t["probability"]) for t in body["transitions"]] == [(12, 1.0)]


def test_markov_for_one_slot(client):
    body = client.get("/api/lottery/markov/7?draw_time=11am").get_json()["data"]

    assert [(t["to_number"], t["transitions"]) for t in body["transitions"]] == [(7, 1)]


def test_markov_rejects_out_of_range_number(client):
    resp = client.get("/api/lottery/markov/150")

    assert resp.status_code == 400


def test_unknown_route_is_json_404(client):
    resp = client.get("/api/lottery/nope")

    assert resp.status_code == 404
    assert resp.get_json()["error"]["code"] == "not_found"
