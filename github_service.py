# github_service.py
import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple
from urllib.parse import parse_qs, urlparse

import requests

from config import GITHUB_API_URL, PAGE_SIZE, REQUEST_TIMEOUT_SECONDS

logger = logging.getLogger(__name__)

# A page fetcher takes a 1-based page number and returns the page's items
# together with the number of the next page (None on the last page).
PageFetcher = Callable[[int], Tuple[List[Dict[str, Any]], Optional[int]]]


def parse_github_timestamp(value: str) -> datetime:
    """Parse a GitHub ISO-8601 timestamp such as '2024-01-15T10:30:00Z' into an aware UTC datetime."""
    return datetime.strptime(value, "%Y-%m-%dT%H:%M:%SZ").replace(tzinfo=timezone.utc)


def fetch_all_pages(
    fetch_page: PageFetcher,
    stop: Optional[Callable[[], bool]] = None,
) -> Iterator[Dict[str, Any]]:
    """Yield items from successive pages until the last page is reached.

    ``stop`` is checked after each fully consumed page; when it returns True
    no further pages are requested. Callers that need to stop mid-page just
    stop iterating.
    """
    page = 1
    while True:
        items, next_page = fetch_page(page)
        yield from items
        if stop is not None and stop():
            break
        if not next_page:
            break
        page = next_page


def _next_page_number(response: requests.Response) -> Optional[int]:
    next_link = response.links.get('next')
    if not next_link:
        return None
    page = parse_qs(urlparse(next_link["url"]).query).get("page")
    if not page or not page[0].isdigit():
        return None
    return int(page[0])


class GitHubClient:
    """Minimal GitHub REST client covering the listings the digest needs."""

    def __init__(self, token: str, base_url: str = GITHUB_API_URL, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip('/')
        self.session = session or requests.Session()
        self.session.headers.update({
            "Authorization": f"Bearer {token}",
            "Accept": "application/vnd.github+json",
            "User-Agent": "github-activity-digest",
        })

    def _get_page(self, path: str, params: Dict[str, Any], page: int) -> Tuple[Any, Optional[int]]:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.get(
                url,
                params={**params, "per_page": PAGE_SIZE, "page": page},
                timeout=REQUEST_TIMEOUT_SECONDS,
            )
            response.raise_for_status()
        except requests.RequestException as e:
            logger.error(f"GitHub request to {path} (page {page}) failed: {e}")
            raise
        return response.json(), _next_page_number(response)

    def list_user_events(self, username: str, stop: Optional[Callable[[], bool]] = None) -> Iterator[Dict[str, Any]]:
        """Events performed by ``username``, newest first."""
        def fetch(page):
            return self._get_page(f"/users/{username}/events", {}, page)

        return fetch_all_pages(fetch, stop)

    def list_assigned_issues(self) -> Iterator[Dict[str, Any]]:
        """Open issues assigned to the authenticated user, least recently updated first."""
        params = {"filter": "assigned", "state": "open", "sort": "updated", "direction": "asc"}

        def fetch(page):
            return self._get_page("/issues", params, page)

        return fetch_all_pages(fetch)

    def search_issues(self, query: str, sort: str = "updated", order: str = "asc") -> Iterator[Dict[str, Any]]:
        """Issues and pull requests matching a search query."""
        params = {"q": query, "sort": sort, "order": order}

        def fetch(page):
            body, next_page = self._get_page("/search/issues", params, page)
            return body.get("items", []), next_page

        return fetch_all_pages(fetch)
