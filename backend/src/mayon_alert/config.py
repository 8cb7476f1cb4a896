# config.py
import json
import os
from dataclasses import dataclass
from typing import Tuple

from dotenv import load_dotenv

from .models import Source

load_dotenv()

DEFAULT_SOURCES = (
    Source(
        url="https://wovodat.phivolcs.dost.gov.ph/bulletin/list-of-bulletin",
        label="PHIVOLCS Menu",
    ),
)

PROXY_URL = "https://api.allorigins.win/get"


def parse_sources(raw):
    """Build the source registry from a JSON list of {url, label} objects."""
    try:
        items = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ValueError(f"MAYON_SOURCES is not valid JSON: {e}") from e
    if not isinstance(items, list) or not items:
        raise ValueError("MAYON_SOURCES must be a non-empty JSON list")

    sources = []
    for item in items:
        if not isinstance(item, dict) or not item.get("url"):
            raise ValueError(f"MAYON_SOURCES entry needs a 'url': {item!r}")
        sources.append(Source(
            url=item["url"],
            label=item.get("label") or item["url"],
            section_heading=item.get("section_heading"),
        ))
    return tuple(sources)


@dataclass(frozen=True)
class Settings:
    volcano: str = "Mayon"
    sources: Tuple[Source, ...] = DEFAULT_SOURCES
    fetch_timeout: float = 10.0
    proxy_timeout: float = 10.0
    total_timeout: float = 20.0
    proxy_url: str = PROXY_URL
    cache_seconds: int = 900
    log_level: str = "INFO"
    port: int = 7860

    @classmethod
    def from_env(cls, env=None):
        env = os.environ if env is None else env
        raw_sources = env.get("MAYON_SOURCES")
        return cls(
            volcano=env.get("MAYON_VOLCANO", "Mayon"),
            sources=parse_sources(raw_sources) if raw_sources else DEFAULT_SOURCES,
            fetch_timeout=float(env.get("MAYON_FETCH_TIMEOUT", 10)),
            proxy_timeout=float(env.get("MAYON_PROXY_TIMEOUT", 10)),
            total_timeout=float(env.get("MAYON_TOTAL_TIMEOUT", 20)),
            proxy_url=env.get("MAYON_PROXY_URL", PROXY_URL),
            cache_seconds=int(env.get("MAYON_CACHE_SECONDS", 900)),
            log_level=env.get("LOG_LEVEL", "INFO").upper(),
            port=int(env.get("PORT", 7860)),
        )
