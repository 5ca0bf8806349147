# newsroom/tests/test_feeds.py
from datetime import datetime, timezone

import requests

from newsroom.feeds import NewsApiFeed, sample_feed


class ExplodingSession:
    """Falha o teste se alguém tentar ir para a rede."""
    def get(self, *a, **k):
        raise AssertionError("network call not expected")


class FakeResponse:
    def __init__(self, payload, status=200):
        self._payload = payload
        self.status_code = status

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class FakeSession:
    def __init__(self, response=None, exc=None):
        self.response = response
        self.exc = exc
        self.calls = []

    def get(self, url, params=None, timeout=None):
        self.calls.append((url, params, timeout))
        if self.exc:
            raise self.exc
        return self.response


def test_no_key_returns_sample_without_network():
    result = NewsApiFeed(api_key=None, session=ExplodingSession()).fetch("general", 1)
    assert result.fallback is True
    assert result.status == "ok"
    assert result.totalResults == 4
    assert [a.url for a in result.articles] == [f"https://example.com/article{i}" for i in range(1, 5)]


def test_from_env_without_key(monkeypatch):
    monkeypatch.delenv("NEWS_API_KEY", raising=False)
    feed = NewsApiFeed.from_env(session=ExplodingSession())
    assert feed.api_key is None
    assert feed.fetch().fallback is True


def test_sample_is_deterministic_for_fixed_now():
    now = datetime(2024, 1, 1, 12, tzinfo=timezone.utc)
    a, b = sample_feed(now), sample_feed(now)
    assert a.model_dump() == b.model_dump()
    assert a.articles[1].publishedAt == "2024-01-01T11:00:00+00:00"
    assert "fallback" not in a.model_dump()


def test_transport_error_falls_back():
    session = FakeSession(exc=requests.ConnectionError("down"))
    result = NewsApiFeed(api_key="k", session=session).fetch("business", 2)
    assert result.fallback is True
    assert len(session.calls) == 1  # sem retry


def test_http_error_falls_back():
    session = FakeSession(FakeResponse({"status": "error"}, status=500))
    assert NewsApiFeed(api_key="k", session=session).fetch().fallback is True


def test_non_ok_payload_falls_back():
    session = FakeSession(FakeResponse({"status": "error", "message": "apiKeyInvalid"}))
    assert NewsApiFeed(api_key="k", session=session).fetch().fallback is True


def test_bad_json_falls_back():
    session = FakeSession(FakeResponse(ValueError("not json")))
    assert NewsApiFeed(api_key="k", session=session).fetch().fallback is True


def test_success_passes_params_and_drops_incomplete_items():
    payload = {
        "status": "ok",
        "totalResults": 37,
        "articles": [
            {"source": {"id": None, "name": "Reuters"}, "title": "Markets rally", "url": "https://r.com/1",
             "publishedAt": "2024-05-01T10:00:00Z", "content": "Stocks rose."},
            {"source": {"id": None, "name": None}, "title": "No source name", "url": "https://r.com/2"},
            {"source": {"name": "X"}, "title": None, "url": "https://r.com/3"},
            {"source": {"name": "X"}, "title": "No url", "url": ""},
        ],
    }
    session = FakeSession(FakeResponse(payload))
    result = NewsApiFeed(api_key="secret", country="gb", page_size=5, session=session).fetch("technology", 3)

    assert result.fallback is False
    assert result.totalResults == 37
    assert [a.url for a in result.articles] == ["https://r.com/1", "https://r.com/2"]
    assert result.articles[1].source.name == "Unknown"

    url, params, timeout = session.calls[0]
    assert url == NewsApiFeed.BASE_URL
    assert params == {"apiKey": "secret", "country": "gb", "category": "technology", "page": 3, "pageSize": 5}
    assert timeout == NewsApiFeed.TIMEOUT


def test_null_source_maps_to_unknown():
    payload = {
        "status": "ok",
        "totalResults": 1,
        "articles": [{"source": None, "title": "Orphan", "url": "https://r.com/9"}],
    }
    result = NewsApiFeed(api_key="k", session=FakeSession(FakeResponse(payload))).fetch()

    assert result.fallback is False
    assert [a.url for a in result.articles] == ["https://r.com/9"]
    assert result.articles[0].source.name == "Unknown"
