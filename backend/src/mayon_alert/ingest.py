# ingest.py
import logging
import threading
from datetime import timedelta

from .db.cache_store import ReadingCache, utcnow
from .preprocess.alert_parser import AlertExtractor
from .preprocess.normalizer import fallback_reading, normalize
from .scraper.base_scraper import BulletinFetcher
from .scraper.sources import SourceRegistry

logger = logging.getLogger(__name__)


class _Flight:
    """One ingestion cycle that other callers can wait on."""

    def __init__(self, default):
        self.done = threading.Event()
        self.reading = default


class AlertIngestor:
    """Walks the source registry in order and serves the first usable reading.

    Readings are cached for the cache window. ``get_reading`` never raises:
    when no source yields a level the fixed fallback reading is returned.
    Concurrent callers share one in-flight cycle; while it runs they get the
    previous (stale) reading if there is one, otherwise they wait for it.
    """

    def __init__(self, sources, fetcher, extractor, cache, clock=utcnow, volcano="Mayon"):
        self.sources = sources
        self.fetcher = fetcher
        self.extractor = extractor
        self.cache = cache
        self.clock = clock
        self.volcano = volcano
        self._flight_lock = threading.Lock()
        self._flight = None

    @classmethod
    def from_settings(cls, settings, session=None, clock=utcnow):
        fetcher = BulletinFetcher(
            session=session,
            timeout=settings.fetch_timeout,
            proxy_url=settings.proxy_url,
            proxy_timeout=settings.proxy_timeout,
            total_timeout=settings.total_timeout,
        )
        cache = ReadingCache(window=timedelta(seconds=settings.cache_seconds), clock=clock)
        return cls(
            sources=SourceRegistry(settings.sources),
            fetcher=fetcher,
            extractor=AlertExtractor(volcano=settings.volcano),
            cache=cache,
            clock=clock,
            volcano=settings.volcano,
        )

    def get_reading(self):
        entry = self.cache.get()
        if self.cache.is_fresh(entry):
            logger.debug("serving cached reading from %s", entry.computed_at.isoformat())
            return entry.reading.with_cached(True)

        with self._flight_lock:
            flight = self._flight
            leader = flight is None
            if leader:
                flight = self._flight = _Flight(fallback_reading(self.volcano))

        if not leader:
            if entry is not None:
                return entry.reading.with_cached(True)
            flight.done.wait()
            return flight.reading

        try:
            reading = self.run_cycle()
            self.cache.put(reading)
            flight.reading = reading
            return reading
        finally:
            with self._flight_lock:
                self._flight = None
            flight.done.set()

    def run_cycle(self):
        """One uncached pass over the registry."""
        for source in self.sources:
            reading = self.try_source(source)
            if reading is not None:
                logger.info("alert level %d from %s", reading.alert_level, reading.source)
                return reading

        logger.warning("no source yielded an alert level, serving fallback reading")
        return fallback_reading(self.volcano)

    def try_source(self, source):
        try:
            result = self.fetcher.fetch(source)
            if not result.ok:
                logger.warning("fetch failed for %s: %s", source.label, result.error)
                return None

            signal = self.extractor.extract(result.content, source.section_heading)
            if signal.level is None:
                logger.info("no alert level found in %s", source.label)
                return None

            return normalize(signal, source.label, result.via_proxy,
                             self.clock().date(), volcano=self.volcano)
        except Exception:
            # upstream markup is untrusted; one bad page must not stop the walk
            logger.exception("unexpected error while reading %s", source.label)
            return None
