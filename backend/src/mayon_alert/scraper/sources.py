# scraper/sources.py
from ..config import DEFAULT_SOURCES
from ..models import Source


class SourceRegistry:
    """Ordered, read-only list of bulletin sources (first = most authoritative)."""

    def __init__(self, sources=DEFAULT_SOURCES):
        self._sources = tuple(sources)
        if not self._sources:
            raise ValueError("at least one bulletin source is required")

    @classmethod
    def from_urls(cls, urls):
        return cls(Source(url=u, label=u) for u in urls)

    def __iter__(self):
        return iter(self._sources)

    def __len__(self):
        return len(self._sources)

    @property
    def labels(self):
        return [s.label for s in self._sources]
