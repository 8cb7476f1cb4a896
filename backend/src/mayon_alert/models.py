# models.py
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Source:
    """One bulletin location. Registry order is preference order."""
    url: str
    label: str
    section_heading: Optional[str] = None


@dataclass(frozen=True)
class FetchResult:
    """Either raw page content or the reason the fetch failed."""
    content: Optional[str] = None
    error: Optional[str] = None
    via_proxy: bool = False

    @property
    def ok(self) -> bool:
        return self.content is not None

    @classmethod
    def success(cls, content: str, via_proxy: bool = False) -> "FetchResult":
        return cls(content=content, via_proxy=via_proxy)

    @classmethod
    def failure(cls, error: str, via_proxy: bool = False) -> "FetchResult":
        return cls(error=error, via_proxy=via_proxy)


@dataclass(frozen=True)
class ExtractedSignal:
    level: Optional[int] = None
    date: Optional[str] = None


@dataclass(frozen=True)
class AlertReading:
    volcano: str
    alert_level: int
    description: str
    updated_at: str
    source: str
    cached: bool = False

    def __post_init__(self):
        if not 0 <= self.alert_level <= 5:
            raise ValueError(f"alert level out of range: {self.alert_level}")
        if not self.description:
            raise ValueError("description must not be empty")

    def with_cached(self, cached: bool) -> "AlertReading":
        return replace(self, cached=cached)

    def to_dict(self) -> dict:
        """JSON shape served to the map clients."""
        return {
            "volcano": self.volcano,
            "alertLevel": self.alert_level,
            "description": self.description,
            "updatedAt": self.updated_at,
            "source": self.source,
            "cached": self.cached,
        }


@dataclass(frozen=True)
class CacheEntry:
    reading: AlertReading
    computed_at: datetime
