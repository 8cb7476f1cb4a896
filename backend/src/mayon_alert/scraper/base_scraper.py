# scraper/base_scraper.py
import json
import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout

import requests

from ..models import FetchResult

logger = logging.getLogger(__name__)

# Some bulletin hosts reject anything that does not look like a browser.
HEADERS = {
    "User-Agent": "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
                  "AppleWebKit/537.36 (KHTML, like Gecko) "
                  "Chrome/120.0.0.0 Safari/537.36",
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,"
              "image/avif,image/webp,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
}

CHUNK_SIZE = 8192


class BulletinFetcher:
    """Fetch a bulletin page directly, retrying once through the proxy.

    The proxy wraps the target body in a JSON envelope:
    ``{"contents": "<html>..."}``. Direct and proxy attempts share one
    overall time ceiling.
    """

    def __init__(self, session=None, timeout=10.0, proxy_url=None,
                 proxy_timeout=10.0, total_timeout=20.0, timer=time.monotonic):
        self.session = session or requests.Session()
        self.timeout = timeout
        self.proxy_url = proxy_url
        self.proxy_timeout = proxy_timeout
        self.total_timeout = total_timeout
        self.timer = timer
        self._pool = ThreadPoolExecutor(max_workers=4, thread_name_prefix="bulletin-fetch")

    def fetch(self, source):
        started = self.timer()
        result = self.fetch_direct(source.url)
        if result.ok or not self.proxy_url:
            return result

        logger.info("direct fetch of %s failed (%s), trying proxy", source.url, result.error)
        remaining = self.total_timeout - (self.timer() - started)
        budget = min(self.proxy_timeout, remaining)
        if budget <= 0:
            return FetchResult.failure(f"{result.error}; no time left for proxy", via_proxy=True)
        return self.fetch_via_proxy(source.url, budget)

    def fetch_direct(self, url):
        try:
            return FetchResult.success(self.download(url, self.timeout, headers=HEADERS))
        except requests.RequestException as e:
            return FetchResult.failure(f"direct: {e}")

    def fetch_via_proxy(self, url, timeout):
        try:
            payload = json.loads(self.download(self.proxy_url, timeout, params={"url": url}))
        except (requests.RequestException, ValueError) as e:
            return FetchResult.failure(f"proxy: {e}", via_proxy=True)

        contents = payload.get("contents") if isinstance(payload, dict) else None
        if not contents or not isinstance(contents, str):
            return FetchResult.failure("proxy: envelope has no contents", via_proxy=True)
        return FetchResult.success(contents, via_proxy=True)

    def download(self, url, budget, **kwargs):
        """Whole response body, or ``requests.Timeout`` once ``budget`` seconds pass.

        ``requests`` timeouts only bound each socket read, so a server that
        trickles bytes could hold a plain ``get`` indefinitely. The read runs on
        a worker and the caller stops waiting at the deadline; the abandoned
        read closes its response at the next chunk and its body is discarded.
        """
        abandoned = threading.Event()
        future = self._pool.submit(self._read_body, url, budget, abandoned, kwargs)
        try:
            return future.result(timeout=budget)
        except FutureTimeout:
            abandoned.set()
            raise requests.Timeout(f"{url}: no complete response within {budget:.1f}s") from None

    def _read_body(self, url, budget, abandoned, kwargs):
        resp = self.session.get(url, timeout=budget, stream=True, **kwargs)
        try:
            resp.raise_for_status()
            chunks = []
            for chunk in resp.iter_content(chunk_size=CHUNK_SIZE):
                if abandoned.is_set():
                    raise requests.Timeout(f"{url}: read abandoned")
                chunks.append(chunk)
            return b"".join(chunks).decode(resp.encoding or "utf-8", errors="replace")
        finally:
            resp.close()
