from datetime import date

import pytest

from ai_backend.app import create_app
from mayon_alert.config import Settings
from mayon_alert.models import ExtractedSignal
from mayon_alert.preprocess.normalizer import fallback_reading, normalize


class StubIngestor:
    def __init__(self, reading=None, error=None):
        self.reading = reading
        self.error = error
        self.calls = 0

    def get_reading(self):
        self.calls += 1
        if self.error:
            raise self.error
        return self.reading


@pytest.fixture
def reading():
    return normalize(ExtractedSignal(level=2, date="14 March 2025"), "PHIVOLCS", False, date(2025, 3, 20))


def client_for(ingestor):
    app = create_app(ingestor=ingestor, settings=Settings())
    app.config["TESTING"] = True
    return app.test_client()


def test_get_alert(reading):
    resp = client_for(StubIngestor(reading)).get("/api/alert")
    assert resp.status_code == 200
    assert resp.get_json() == reading.to_dict()
    assert resp.headers["Access-Control-Allow-Origin"] == "*"
    assert resp.headers["Access-Control-Allow-Methods"] == "GET"
    assert resp.headers["Cache-Control"] == "s-maxage=900, stale-while-revalidate"


def test_fallback_reading_is_still_200():
    resp = client_for(StubIngestor(fallback_reading())).get("/api/alert")
    assert resp.status_code == 200
    assert resp.get_json()["source"] == "fallback"


def test_ingestor_error_serves_error_fallback():
    resp = client_for(StubIngestor(error=RuntimeError("boom"))).get("/api/alert")
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["source"] == "error-fallback"
    assert body["alertLevel"] == 3


@pytest.mark.parametrize("method", ["post", "put", "delete", "head"])
def test_other_methods_not_allowed(reading, method):
    ingestor = StubIngestor(reading)
    resp = getattr(client_for(ingestor), method)("/api/alert")
    assert resp.status_code == 405
    if method != "head":
        assert resp.get_json() == {"error": "Method not allowed"}
    assert ingestor.calls == 0


def test_preflight(reading):
    resp = client_for(StubIngestor(reading)).options(
        "/api/alert",
        headers={"Origin": "https://map.test", "Access-Control-Request-Method": "GET"},
    )
    assert resp.status_code == 200
    assert resp.headers["Access-Control-Allow-Origin"] == "*"


def test_levels_table(reading):
    body = client_for(StubIngestor(reading)).get("/api/alert/levels").get_json()
    assert sorted(body) == ["0", "1", "2", "3", "4", "5"]
    assert body["4"]["short"] == "Hazardous Eruption Imminent"


def test_health(reading):
    assert client_for(StubIngestor(reading)).get("/").status_code == 200
