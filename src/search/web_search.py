"""
Web search through the search and page-fetch worker proxies
"""
import logging
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeout, as_completed
from typing import Any, Dict, List

import requests

from config.settings import Config
from src.assistant.errors import CollaboratorFailure

logger = logging.getLogger(__name__)

class WebSearchResult:
    """One search hit with the crawled text of its page"""

    def __init__(self, title: str, url: str, snippet: str = "", content: str = ""):
        self.title = title
        self.url = url
        self.snippet = snippet
        self.content = content

    @property
    def combined_text(self) -> str:
        return f"Snippet: {self.snippet}\nCrawled Content: {self.content}"

    def to_dict(self) -> Dict[str, str]:
        return {"title": self.title, "url": self.url, "combinedText": self.combined_text}

class WebSearchClient:
    """Search + crawl collaborator"""

    def __init__(self, session: requests.Session = None):
        self.config = Config()
        self.session = session or requests.Session()

    def search(self, query: str) -> List[Dict[str, Any]]:
        """Raw search hits: ``[{title, snippet, link}, ...]``"""
        try:
            response = self.session.get(
                self.config.WEB_SEARCH_URL,
                params={"query": query},
                timeout=self.config.WEB_SEARCH_TIMEOUT
            )
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as e:
            logger.error(f"Web search failed for {query!r}: {e}")
            raise CollaboratorFailure("search", str(e)) from e

        if not isinstance(data, list):
            raise CollaboratorFailure("search", "unexpected search response shape")
        return data

    def fetch(self, url: str) -> str:
        """Plain text of a page, as cleaned by the fetch worker"""
        try:
            response = self.session.get(
                self.config.PAGE_FETCH_URL,
                params={"url": url},
                timeout=self.config.WEB_SEARCH_TIMEOUT
            )
            response.raise_for_status()
        except requests.RequestException as e:
            raise CollaboratorFailure("fetch", str(e)) from e
        return response.text[:self.config.MAX_PAGE_CHARS]

    def search_web(self, query: str) -> List[WebSearchResult]:
        """
        Search, then crawl every hit in parallel.

        A failed search yields no results. A failed crawl, or one still running
        when ``CRAWL_TIMEOUT`` runs out, only blanks the content of that one
        result.
        """
        try:
            hits = self.search(query)
        except CollaboratorFailure:
            return []

        hits = [hit for hit in hits if isinstance(hit, dict)]
        contents = {}
        if hits:
            executor = ThreadPoolExecutor(max_workers=min(len(hits), self.config.CRAWL_WORKERS),
                                          thread_name_prefix="crawl")
            future_to_position = {
                executor.submit(self.fetch, hit.get("link", "")): position
                for position, hit in enumerate(hits)
            }
            try:
                for future in as_completed(future_to_position, timeout=self.config.CRAWL_TIMEOUT):
                    position = future_to_position[future]
                    try:
                        contents[position] = future.result()
                    except CollaboratorFailure as e:
                        logger.warning(f"Could not crawl {hits[position].get('link', '')!r}: {e}")
            except FutureTimeout:
                logger.warning(f"⏱️  Crawl for {query!r} exceeded {self.config.CRAWL_TIMEOUT:g}s, "
                               f"{len(hits) - len(contents)} pages left blank")
            finally:
                executor.shutdown(wait=False, cancel_futures=True)

        results = [
            WebSearchResult(
                title=hit.get("title", ""),
                url=hit.get("link", ""),
                snippet=hit.get("snippet", ""),
                content=contents.get(position, "")
            )
            for position, hit in enumerate(hits)
        ]

        logger.info(f"🔍 Web search for {query!r} returned {len(results)} results")
        return results
