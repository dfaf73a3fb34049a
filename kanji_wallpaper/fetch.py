"""Fetch the learner's kanji progress from the WaniKani v1 API.

Every failure mode (network error, HTTP error status, malformed JSON, an
``"error"`` object in the payload) is reported the same way: a
:class:`FetchOutcome` whose ``snapshot`` is ``None`` and whose ``error`` says
what went wrong. Nothing raises out of :func:`fetch_snapshot`.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Mapping, Optional

import requests

from kanji_wallpaper.snapshot import make_snapshot
from kanji_wallpaper.types import StateSnapshot

logger = logging.getLogger(__name__)

DEFAULT_API_BASE_URL = "https://www.wanikani.com/api/v1"
MAX_LEVEL = 60
_USER_AGENT = "kanji-wallpaper"


@dataclass(frozen=True)
class FetchOutcome:
    """Result of one fetch attempt."""

    snapshot: Optional[StateSnapshot]
    checked_at: float
    error: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.snapshot is None


def kanji_url(
    api_key: str,
    current_levels_only: bool = True,
    base_url: str = DEFAULT_API_BASE_URL,
) -> str:
    """Build the kanji endpoint URL; all levels are listed explicitly when requested."""
    url = f"{base_url.rstrip('/')}/user/{api_key}/kanji"
    if not current_levels_only:
        url += "/" + ",".join(str(level) for level in range(1, MAX_LEVEL + 1))
    return url


def parse_payload(payload: Any) -> StateSnapshot:
    """Extract ``character -> srs`` pairs from a decoded API response.

    Raises:
        ValueError: If the payload reports an error or has an unexpected shape.
    """
    if not isinstance(payload, Mapping):
        raise ValueError("Response is not a JSON object")
    if "error" in payload:
        error = payload["error"]
        message = error.get("message") if isinstance(error, Mapping) else error
        raise ValueError(f"Service reported an error: {message}")
    items = payload.get("requested_information")
    if not isinstance(items, list):
        raise ValueError("Response has no requested_information list")

    pairs = []
    for item in items:
        if not isinstance(item, Mapping) or not item.get("character"):
            continue
        stats = item.get("stats")
        srs = stats.get("srs") if isinstance(stats, Mapping) else None
        pairs.append((str(item["character"]), srs))
    return make_snapshot(pairs)


def fetch_snapshot(
    api_key: str,
    current_levels_only: bool = True,
    base_url: str = DEFAULT_API_BASE_URL,
    session: Optional[requests.Session] = None,
    timeout: float = 10.0,
) -> FetchOutcome:
    """Fetch the current snapshot.

    Args:
        api_key (str): The learner's v1 API key.
        current_levels_only (bool): Ask only for the current level's kanji.
        base_url (str): API root, overridable for tests and mirrors.
        session (requests.Session | None): Session to reuse; a short-lived one is
            created (and closed) when omitted.
        timeout (float): Request timeout in seconds.

    Returns:
        FetchOutcome: ``snapshot`` on success, ``error`` otherwise.
    """
    checked_at = time.time()
    if not api_key:
        return FetchOutcome(None, checked_at, "No API key configured")

    url = kanji_url(api_key, current_levels_only, base_url)
    owns_session = session is None
    http = session or requests.Session()
    http.headers["User-Agent"] = _USER_AGENT
    try:
        response = http.get(url, timeout=timeout)
        response.raise_for_status()
        snapshot = parse_payload(response.json())
    except requests.RequestException as exc:
        # Error messages embed the URL, which embeds the key.
        message = str(exc).replace(api_key, "***")
        logger.warning("Kanji request failed: %s", message)
        return FetchOutcome(None, checked_at, f"Request failed: {message}")
    except ValueError as exc:
        logger.warning("Unusable kanji response: %s", exc)
        return FetchOutcome(None, checked_at, f"Invalid response: {exc}")
    finally:
        if owns_session:
            http.close()

    logger.debug("Fetched %d kanji", len(snapshot))
    return FetchOutcome(snapshot, checked_at)
