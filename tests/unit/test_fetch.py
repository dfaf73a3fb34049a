# tests/unit/test_fetch.py

from typing import Any, Dict, List, Optional

import pytest
import requests

from kanji_wallpaper.fetch import (
    DEFAULT_API_BASE_URL,
    fetch_snapshot,
    kanji_url,
    parse_payload,
)
from kanji_wallpaper.types import ProficiencyState


class FakeResponse:
    def __init__(self, payload: Any = None, status: int = 200, raw: Optional[str] = None):
        self.payload = payload
        self.status = status
        self.raw = raw

    def raise_for_status(self) -> None:
        if self.status >= 400:
            raise requests.HTTPError(f"{self.status} Error")

    def json(self) -> Any:
        if self.raw is not None:
            raise ValueError(f"Expecting value: {self.raw!r}")
        return self.payload


class FakeSession:
    def __init__(self, response: Optional[FakeResponse] = None, exc: Optional[Exception] = None):
        self.response = response
        self.exc = exc
        self.headers: Dict[str, str] = {}
        self.urls: List[str] = []
        self.closed = False

    def get(self, url: str, timeout: float) -> FakeResponse:
        self.urls.append(url)
        if self.exc is not None:
            raise self.exc
        assert self.response is not None
        return self.response

    def close(self) -> None:
        self.closed = True


def kanji_item(character: str, srs: Optional[str]) -> Dict[str, Any]:
    return {
        "character": character,
        "level": 1,
        "stats": None if srs is None else {"srs": srs, "burned": srs == "burned"},
    }


PAYLOAD = {
    "user_information": {"username": "learner", "level": 3},
    "requested_information": [
        kanji_item("一", "apprentice"),
        kanji_item("二", "burned"),
        kanji_item("三", None),
        kanji_item("四", "enlighten"),
    ],
}


def test_url_for_current_levels() -> None:
    assert kanji_url("abc") == f"{DEFAULT_API_BASE_URL}/user/abc/kanji"


def test_url_for_all_levels_lists_every_level() -> None:
    url = kanji_url("abc", current_levels_only=False, base_url="http://localhost/api/")
    assert url.startswith("http://localhost/api/user/abc/kanji/1,2,3,")
    assert url.endswith(",59,60")


def test_parse_payload_maps_states() -> None:
    snapshot = parse_payload(PAYLOAD)
    assert dict(snapshot) == {
        "一": ProficiencyState.APPRENTICE,
        "二": ProficiencyState.BURNED,
        "三": ProficiencyState.UNKNOWN,
        "四": ProficiencyState.ENLIGHTENED,
    }


def test_parse_payload_folds_unknown_srs() -> None:
    snapshot = parse_payload({"requested_information": [kanji_item("五", "legendary")]})
    assert snapshot["五"] == ProficiencyState.UNKNOWN


def test_parse_payload_skips_items_without_character() -> None:
    payload = {"requested_information": [{"stats": {"srs": "guru"}}, "junk", kanji_item("六", "guru")]}
    assert dict(parse_payload(payload)) == {"六": ProficiencyState.GURU}


@pytest.mark.parametrize(
    "payload",
    [
        [],
        {"error": {"code": "user_not_found", "message": "User does not exist."}},
        {"user_information": {}},
        {"requested_information": {"general": []}},
    ],
)
def test_parse_payload_rejects_bad_shapes(payload: Any) -> None:
    with pytest.raises(ValueError):
        parse_payload(payload)


def test_fetch_success() -> None:
    session = FakeSession(FakeResponse(PAYLOAD))
    outcome = fetch_snapshot("key", session=session)  # type: ignore[arg-type]
    assert not outcome.failed
    assert outcome.error is None
    assert outcome.snapshot is not None and len(outcome.snapshot) == 4
    assert session.urls == [f"{DEFAULT_API_BASE_URL}/user/key/kanji"]
    assert session.headers["User-Agent"] == "kanji-wallpaper"
    # a caller-supplied session stays open
    assert not session.closed


def test_fetch_overrides_default_user_agent() -> None:
    session = FakeSession(FakeResponse(PAYLOAD))
    session.headers["User-Agent"] = "python-requests/2.32.0"
    fetch_snapshot("key", session=session)  # type: ignore[arg-type]
    assert session.headers["User-Agent"] == "kanji-wallpaper"


def test_fetch_reports_service_error() -> None:
    session = FakeSession(FakeResponse({"error": {"message": "User does not exist."}}))
    outcome = fetch_snapshot("key", session=session)  # type: ignore[arg-type]
    assert outcome.failed
    assert outcome.error is not None and "User does not exist." in outcome.error


def test_fetch_reports_http_status() -> None:
    session = FakeSession(FakeResponse(status=503))
    outcome = fetch_snapshot("key", session=session)  # type: ignore[arg-type]
    assert outcome.failed
    assert outcome.error is not None and "503" in outcome.error


def test_fetch_reports_invalid_json() -> None:
    session = FakeSession(FakeResponse(raw="<html>"))
    outcome = fetch_snapshot("key", session=session)  # type: ignore[arg-type]
    assert outcome.failed
    assert outcome.error is not None and outcome.error.startswith("Invalid response")


def test_connection_error_hides_api_key() -> None:
    exc = requests.ConnectionError(
        f"Max retries exceeded with url: {DEFAULT_API_BASE_URL}/user/sekrit/kanji"
    )
    outcome = fetch_snapshot("sekrit", session=FakeSession(exc=exc))  # type: ignore[arg-type]
    assert outcome.failed
    assert outcome.error is not None
    assert "sekrit" not in outcome.error
    assert "/user/***/kanji" in outcome.error


def test_missing_key_fails_without_request() -> None:
    session = FakeSession(FakeResponse(PAYLOAD))
    outcome = fetch_snapshot("", session=session)  # type: ignore[arg-type]
    assert outcome.failed
    assert outcome.error == "No API key configured"
    assert session.urls == []
