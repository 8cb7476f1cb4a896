import argparse
import json
import logging
from dataclasses import replace

from .config import Settings
from .ingest import AlertIngestor
from .scraper.sources import SourceRegistry


def build_parser():
    parser = argparse.ArgumentParser(description="Run one alert ingestion cycle and print the reading.")
    parser.add_argument("--source", action="append", metavar="URL",
                        help="bulletin URL to try (repeatable, overrides MAYON_SOURCES)")
    parser.add_argument("--no-proxy", action="store_true", help="skip the proxy fallback")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    settings = Settings.from_env()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.source:
        settings = replace(settings, sources=tuple(SourceRegistry.from_urls(args.source)))
    if args.no_proxy:
        settings = replace(settings, proxy_url=None)

    labels = SourceRegistry(settings.sources).labels
    print(f"Checking {len(labels)} source(s) for {settings.volcano}: {', '.join(labels)}")
    reading = AlertIngestor.from_settings(settings).get_reading()
    print(json.dumps(reading.to_dict(), indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
