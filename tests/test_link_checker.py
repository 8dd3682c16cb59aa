import requests

from catalog import Catalog
from catalog.link_checker import check_catalog_links, check_url, check_urls


class FakeResponse:
    def __init__(self, status_code: int):
        self.status_code = status_code
        self.closed = False

    def close(self):
        self.closed = True


class FakeSession:
    """Answers HEAD/GET from fixed status tables and records calls."""

    def __init__(self, head=None, get=None, fail=False):
        self.head_codes = head or {}
        self.get_codes = get or {}
        self.fail = fail
        self.calls = []
        self.closed = False

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.closed = True

    def head(self, url, **kwargs):
        self.calls.append(("HEAD", url))
        if self.fail:
            raise requests.ConnectionError("connection refused")
        return FakeResponse(self.head_codes.get(url, 200))

    def get(self, url, **kwargs):
        self.calls.append(("GET", url))
        return FakeResponse(self.get_codes.get(url, 200))


def test_check_url_ok():
    session = FakeSession()
    status = check_url("https://example.com", session=session)
    assert status.ok
    assert status.status_code == 200
    assert session.calls == [("HEAD", "https://example.com")]


def test_check_url_falls_back_to_get():
    session = FakeSession(head={"https://example.com": 405})
    status = check_url("https://example.com", session=session)
    assert status.ok
    assert session.calls == [("HEAD", "https://example.com"), ("GET", "https://example.com")]


def test_check_url_dead_link():
    url = "https://example.com/gone"
    session = FakeSession(head={url: 404}, get={url: 404})
    status = check_url(url, session=session)
    assert not status.ok
    assert status.status_code == 404


def test_check_url_network_error_is_reported_after_retries():
    session = FakeSession(fail=True)
    status = check_url("https://example.com", session=session, retries=3, backoff=0)
    assert not status.ok
    assert "connection refused" in status.error
    assert len(session.calls) == 3


def test_check_url_rejects_non_http():
    status = check_url("ftp://example.com/file", session=FakeSession())
    assert not status.ok
    assert status.error == "Not an http(s) URL"


def test_check_urls_deduplicates():
    session = FakeSession()
    statuses = check_urls(["https://a.example", "https://b.example", "https://a.example"], session=session)
    assert [s.url for s in statuses] == ["https://a.example", "https://b.example"]


def test_check_catalog_links(sample_markdown):
    session = FakeSession()
    statuses = check_catalog_links(Catalog.from_markdown(sample_markdown), session=session)
    assert len(statuses) == 2
    assert all(s.ok for s in statuses)
    assert statuses[0].to_dict()["status_code"] == 200


def test_check_url_closes_the_session_it_opens(monkeypatch):
    opened = []

    def make_session():
        opened.append(FakeSession())
        return opened[-1]

    monkeypatch.setattr(requests, "Session", make_session)
    assert check_url("https://example.com").ok
    assert check_urls(["https://a.example", "https://b.example"])[1].ok
    assert len(opened) == 2
    assert all(session.closed for session in opened)
