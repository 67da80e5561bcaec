"""
Fetch the three CSV sources the dashboard is built from.

Each source is either a local file written by the warehouse export job or
an http(s) URL serving the same file. The three fetches run concurrently and
the load fails as a whole if any one of them fails; there is no retry and
no partial result.
"""

import logging
import os
import sys
from concurrent.futures import ThreadPoolExecutor

import requests

from config import Settings, load_settings
from models import SourceTexts

logger = logging.getLogger(__name__)


class SourceLoadError(Exception):
    """One or more dashboard sources could not be fetched."""


def is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def fetch_text(source: str, timeout: int = 30) -> str:
    """Return the text of a local file or URL."""
    if is_url(source):
        logger.debug(f"GET {source}")
        resp = requests.get(source, timeout=timeout)
        resp.raise_for_status()
        return resp.text
    # Undecodable bytes are replaced, as for HTTP sources
    with open(source, encoding="utf-8", errors="replace") as f:
        return f.read()


def load_sources(settings: Settings) -> SourceTexts:
    """Fetch time series, outflow and inflow sources together."""
    sources = {
        "time_series": settings.time_series_source,
        "outflow": settings.outflow_source,
        "inflow": settings.inflow_source,
    }

    with ThreadPoolExecutor(max_workers=len(sources)) as pool:
        futures = {
            name: pool.submit(fetch_text, source, settings.request_timeout)
            for name, source in sources.items()
        }
        texts = {}
        for name, future in futures.items():
            try:
                texts[name] = future.result()
            except (requests.RequestException, OSError) as exc:
                logger.error(f"Failed to load {name} from {sources[name]}: {exc}")
                raise SourceLoadError("Failed to load data.") from exc

    return SourceTexts(origins=sources, **texts)


def main():
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, LOG_LEVEL, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    settings = load_settings()
    try:
        texts = load_sources(settings)
    except SourceLoadError as exc:
        logger.error(str(exc))
        sys.exit(1)

    for name in ("time_series", "outflow", "inflow"):
        text = getattr(texts, name)
        lines = [line for line in text.strip().split("\n") if line.strip()]
        logger.info(f"  {name}: {max(len(lines) - 1, 0)} rows from {texts.origins[name]}")


if __name__ == "__main__":
    main()
