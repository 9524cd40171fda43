from datetime import datetime, timezone

import pytest

from mailwire.pagination import (
    PageIterator,
    Paging,
    Tag,
    can_fetch_page,
    tag_list_params,
    with_params,
)

BASE = "https://api.example.com/v3/things"
P1, P2, P3, END = BASE + "?page=1", BASE + "?page=2", BASE + "?page=3", BASE + "?page=4"

PAGES = {
    P1: (["a", "b"], Paging(first=P1, next=P2, previous="", last=P3)),
    P2: (["c", "d"], Paging(first=P1, next=P3, previous=P1, last=P3)),
    P3: (["e"], Paging(first=P1, next=END, previous=P2, last=P3)),
    END: ([], Paging(first=P1, next=END, previous=P3, last=P3)),
}


class FakeApi:
    def __init__(self, pages):
        self.pages = pages
        self.calls = []

    def __call__(self, url):
        self.calls.append(url)
        return self.pages[url]


def test_iteration_follows_next_links_until_empty():
    api = FakeApi(PAGES)
    pages = list(PageIterator(api, P1))
    assert pages == [["a", "b"], ["c", "d"], ["e"]]
    assert api.calls == [P1, P2, P3, END]


def test_first_resets_to_first_page():
    api = FakeApi(PAGES)
    it = PageIterator(api, P1)
    it.next()
    it.next()
    assert it.first() == ["a", "b"]
    assert it.next() == ["c", "d"]


def test_previous_without_link_does_not_fetch():
    api = FakeApi(PAGES)
    it = PageIterator(api, P1)
    assert it.previous() is None
    assert api.calls == []


def test_previous_goes_back():
    api = FakeApi(PAGES)
    it = PageIterator(api, P1)
    first = it.next()
    it.next()
    assert it.previous() == first


def test_last_requires_a_known_link():
    api = FakeApi(PAGES)
    it = PageIterator(api, P1)
    with pytest.raises(ValueError):
        it.last()
    it.next()
    assert it.last() == ["e"]


def test_paging_missing_keeps_current_links():
    api = FakeApi({P1: (["x"], None)})
    it = PageIterator(api, P1)
    assert it.next() == ["x"]
    assert it.paging == Paging(first=P1, next=P1)


def test_cursor_check_stops_on_tag_link():
    tag_link = BASE + "?tag="
    api = FakeApi({P1: (["t"], Paging(first=P1, next=tag_link, previous=tag_link, last=P1))})
    it = PageIterator(api, P1, check_cursor=True)
    assert it.next() == ["t"]
    assert it.next() is None
    assert it.previous() is None
    assert api.calls == [P1]


def test_can_fetch_page():
    assert can_fetch_page(BASE + "?limit=1") is True
    assert can_fetch_page(BASE + "?tag=") is False
    assert can_fetch_page(BASE + "?tag=news") is False
    assert can_fetch_page("http://[::1") is False


def test_with_params_sorts_keys():
    url = with_params(BASE, [("prefix", "x"), ("limit", "1")])
    assert url == BASE + "?limit=1&prefix=x"


def test_with_params_keeps_existing_query_and_no_params():
    assert with_params(BASE, {}) == BASE
    assert with_params(BASE + "?b=2", {"a": 1}) == BASE + "?a=1&b=2"


def test_tag_list_params():
    assert tag_list_params(1, "news") == [("limit", "1"), ("prefix", "news")]
    assert tag_list_params(0, "") == []


def test_paging_from_json_fills_missing():
    paging = Paging.from_json({"next": P2, "first": P1})
    assert paging == Paging(first=P1, next=P2)
    assert Paging.from_json(None) == Paging()


def test_tag_from_json():
    tag = Tag.from_json(
        {"tag": "homer", "description": "d", "first-seen": "2018-08-10T17:35:16Z"}
    )
    assert tag.value == "homer"
    assert tag.description == "d"
    assert tag.first_seen == datetime(2018, 8, 10, 17, 35, 16, tzinfo=timezone.utc)
    assert tag.last_seen is None


def test_tag_from_json_rejects_bad_time():
    with pytest.raises(ValueError):
        Tag.from_json({"tag": "x", "last-seen": "yesterday"})