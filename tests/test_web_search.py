"""Tests for the web search collaborator."""

import threading
from unittest.mock import MagicMock

import pytest
import requests

from config.settings import Config
from src.assistant.errors import CollaboratorFailure
from src.search.web_search import WebSearchClient, WebSearchResult

HITS = [
    {"title": "One", "snippet": "s1", "link": "https://one.example"},
    {"title": "Two", "snippet": "s2", "link": "https://two.example"},
    {"title": "Three", "snippet": "s3", "link": "https://three.example"},
]


def _response(json_data=None, text=""):
    response = MagicMock()
    response.raise_for_status.return_value = None
    response.json.return_value = json_data
    response.text = text
    return response


@pytest.fixture
def session():
    return MagicMock(spec=requests.Session)


def test_failed_fetch_blanks_only_that_result(session):
    def fake_get(url, params=None, timeout=None):
        if url == Config.WEB_SEARCH_URL:
            return _response(HITS)
        if params["url"] == "https://two.example":
            raise requests.ConnectionError("worker down")
        return _response(text=f"page at {params['url']}")

    session.get.side_effect = fake_get

    results = WebSearchClient(session).search_web("numbers")

    assert [result.title for result in results] == ["One", "Two", "Three"]
    assert [result.content for result in results] == [
        "page at https://one.example", "", "page at https://three.example"]
    assert results[1].combined_text == "Snippet: s2\nCrawled Content: "


def test_slow_pages_are_left_blank_after_crawl_deadline(session):
    release = threading.Event()

    def fake_get(url, params=None, timeout=None):
        if url == Config.WEB_SEARCH_URL:
            return _response(HITS)
        if params["url"] != "https://one.example":
            release.wait(5)
        return _response(text=f"page at {params['url']}")

    session.get.side_effect = fake_get
    client = WebSearchClient(session)
    client.config.CRAWL_TIMEOUT = 0.3
    try:
        results = client.search_web("numbers")
    finally:
        release.set()

    assert [result.title for result in results] == ["One", "Two", "Three"]
    assert [result.content for result in results] == ["page at https://one.example", "", ""]


def test_failed_search_gives_no_results(session):
    session.get.side_effect = requests.Timeout("slow")

    assert WebSearchClient(session).search_web("anything") == []


def test_search_raises_collaborator_failure(session):
    session.get.return_value = _response({"error": "quota"})

    with pytest.raises(CollaboratorFailure):
        WebSearchClient(session).search("anything")


def test_query_is_sent_as_parameter(session):
    session.get.return_value = _response([])

    WebSearchClient(session).search("CEO of Google")

    session.get.assert_called_once_with(Config.WEB_SEARCH_URL, params={"query": "CEO of Google"},
                                        timeout=Config.WEB_SEARCH_TIMEOUT)


def test_fetched_text_is_truncated(session):
    session.get.return_value = _response(text="x" * (Config.MAX_PAGE_CHARS + 50))

    assert len(WebSearchClient(session).fetch("https://long.example")) == Config.MAX_PAGE_CHARS


def test_result_to_dict():
    result = WebSearchResult("T", "https://t.example", "snip", "body")

    assert result.to_dict() == {"title": "T", "url": "https://t.example",
                                "combinedText": "Snippet: snip\nCrawled Content: body"}


def test_search_and_crawl_finish_within_task_timeout():
    assert Config.WEB_SEARCH_TIMEOUT + Config.CRAWL_TIMEOUT < Config.TASK_TIMEOUT
