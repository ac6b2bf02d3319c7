"""Canned GitHub data and a paging fake for digest tests."""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List

from github_service import fetch_all_pages

NOW = datetime(2024, 3, 20, 12, 0, 0, tzinfo=timezone.utc)


def ts(delta: timedelta) -> str:
    """GitHub-formatted timestamp for NOW minus ``delta``."""
    return (NOW - delta).strftime("%Y-%m-%dT%H:%M:%SZ")


def event(event_type: str, age: timedelta) -> Dict[str, Any]:
    return {"type": event_type, "created_at": ts(age)}


def issue(url: str, created_age: timedelta, updated_age: timedelta) -> Dict[str, Any]:
    return {"html_url": url, "created_at": ts(created_age), "updated_at": ts(updated_age)}


class FakeGitHub:
    """Stands in for GitHubClient, paging through canned responses with the real helper."""

    def __init__(self, events=None, issues=None, reviews=None):
        self.pages = {
            "events": events or [[]],
            "issues": issues or [[]],
            "reviews": reviews or [[]],
        }
        self.requested: Dict[str, List[int]] = {"events": [], "issues": [], "reviews": []}
        self.search_queries: List[str] = []

    def _fetcher(self, name):
        pages = self.pages[name]

        def fetch(page):
            self.requested[name].append(page)
            next_page = page + 1 if page < len(pages) else None
            return pages[page - 1], next_page

        return fetch

    def list_user_events(self, username, stop=None):
        return fetch_all_pages(self._fetcher("events"), stop)

    def list_assigned_issues(self):
        return fetch_all_pages(self._fetcher("issues"))

    def search_issues(self, query, sort="updated", order="asc"):
        self.search_queries.append(query)
        return fetch_all_pages(self._fetcher("reviews"))
