import json
from datetime import datetime, timedelta, timezone

import pytest
import requests

from mayon_alert.db.cache_store import ReadingCache
from mayon_alert.ingest import AlertIngestor
from mayon_alert.models import Source
from mayon_alert.preprocess.alert_parser import AlertExtractor
from mayon_alert.scraper.base_scraper import BulletinFetcher
from mayon_alert.scraper.sources import SourceRegistry

PROXY_URL = "https://proxy.test/get"


class FakeResponse:
    encoding = "utf-8"

    def __init__(self, status_code=200, text=""):
        self.status_code = status_code
        self.text = text
        self.closed = False

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error", response=self)

    def iter_content(self, chunk_size=1):
        body = self.text.encode(self.encoding)
        for i in range(0, len(body), chunk_size):
            yield body[i:i + chunk_size]

    def close(self):
        self.closed = True


def page(html, status=200):
    return FakeResponse(status, html)


def envelope(contents, status=200):
    return FakeResponse(status, json.dumps({"contents": contents}))


class FakeSession:
    """Routes direct GETs by URL and proxy GETs by their ``url`` param."""

    def __init__(self, routes=None, proxy_routes=None):
        self.routes = routes or {}
        self.proxy_routes = proxy_routes or {}
        self.calls = []

    def get(self, url, headers=None, timeout=None, params=None, stream=False):
        self.calls.append({"url": url, "headers": headers, "timeout": timeout, "params": params})
        if params and "url" in params:
            outcome = self.proxy_routes.get(params["url"])
        else:
            outcome = self.routes.get(url)
        if outcome is None:
            raise requests.ConnectionError(f"no route to {url}")
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    def requested(self, url):
        return [c for c in self.calls if c["url"] == url or (c["params"] or {}).get("url") == url]


class FakeClock:
    def __init__(self, start=None):
        self.now = start or datetime(2025, 3, 20, 8, 0, tzinfo=timezone.utc)

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def make_ingestor(clock):
    def build(sources, session, proxy_url=PROXY_URL):
        fetcher = BulletinFetcher(session=session, proxy_url=proxy_url)
        return AlertIngestor(
            sources=SourceRegistry(sources),
            fetcher=fetcher,
            extractor=AlertExtractor(volcano="Mayon"),
            cache=ReadingCache(clock=clock),
            clock=clock,
        )
    return build


@pytest.fixture
def three_sources():
    return [
        Source(url="https://one.test/bulletin", label="One"),
        Source(url="https://two.test/bulletin", label="Two"),
        Source(url="https://three.test/bulletin", label="Three"),
    ]
