import random
from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from stocktw.config import AppSettings
from stocktw.dashboard import DashboardController
from stocktw.data.errors import InsufficientDataError
from stocktw.data.schemas import LiveQuoteResult
from stocktw.ui import create_app, format_number


def _client(*results) -> tuple[TestClient, DashboardController]:
    queue = list(results)

    async def quotes() -> LiveQuoteResult:
        result = queue.pop(0)
        if isinstance(result, Exception):
            raise result
        return result

    controller = DashboardController(
        settings=AppSettings(),
        fetch_quotes=quotes,
        rng=random.Random(5),
        clock=lambda: datetime(2024, 12, 17, 9, 30),
    )
    return TestClient(create_app(controller, run_background=False)), controller


def test_index_page_renders_latest_values():
    client, _ = _client()

    response = client.get("/")

    assert response.status_code == 200
    assert "27,536.66" in response.text
    assert "12/16" in response.text


def test_series_endpoint_lists_seed_rows():
    client, _ = _client()

    payload = client.get("/api/series").json()

    assert len(payload["series"]) == 12
    assert payload["series"][0]["date"] == "12/01"
    assert payload["latest"]["diffs"]["vix"] == pytest.approx(0.3)
    assert payload["simulating"] is False


def test_refresh_endpoint_commits_live_row():
    client, controller = _client(LiveQuoteResult(27600.0, 27650.0, 16.8))

    response = client.post("/api/refresh")

    assert response.status_code == 200
    payload = response.json()
    assert payload["outcome"]["result"] == "success"
    assert payload["outcome"]["observation"]["date"] == "12/17"
    assert payload["status"]["series_length"] == 13
    assert controller.latest.futures_price == pytest.approx(27650.0)


def test_refresh_endpoint_falls_back_to_simulation():
    client, _ = _client(InsufficientDataError(LiveQuoteResult()))

    response = client.post("/api/refresh")

    assert response.status_code == 200
    payload = response.json()
    assert payload["outcome"]["result"] == "simulated"
    assert payload["status"]["simulating"] is True
    assert payload["status"]["state"] == "simulating"
    assert client.get("/api/series").json()["simulating"] is True


def test_auto_refresh_toggle():
    client, controller = _client()

    response = client.post("/api/auto-refresh", json={"enabled": False})

    assert response.json() == {"auto_refresh": False}
    assert controller.auto_refresh is False
    assert client.get("/api/status").json()["auto_refresh"] is False


def test_auto_refresh_toggle_validates_body():
    client, _ = _client()

    response = client.post("/api/auto-refresh", json={})

    assert response.status_code == 422


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (27536.66, "27,536.66"),
        (16.5, "16.50"),
        (None, "-"),
        (float("nan"), "-"),
        ("abc", "-"),
    ],
)
def test_format_number(value, expected):
    assert format_number(value) == expected


def test_app_mounts_no_static_route():
    client, _ = _client()

    assert client.get("/static/app.css").status_code == 404
