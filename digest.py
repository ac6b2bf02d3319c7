# digest.py
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional

import humanize

from config import ACTIVITY_WINDOW, ISSUE_STALE_AFTER, REVIEW_STALE_AFTER
from github_service import GitHubClient, parse_github_timestamp

logger = logging.getLogger(__name__)

ASSIGNED_ACTION = "assigned to you"
REVIEW_ACTION = "awaiting your review"
ATTENTION_PREAMBLE = " Also, the following issues and PRs need your attention:\n"

ISSUE_COMMENT_EVENTS = {"IssueCommentEvent"}
PR_COMMENT_EVENTS = {"PullRequestReviewEvent", "PullRequestReviewCommentEvent"}
COMMIT_EVENTS = {"PushEvent"}


@dataclass
class ActivitySummary:
    has_commit: bool = False
    has_issue_comment: bool = False
    has_pr_comment: bool = False

    def is_complete(self) -> bool:
        return self.has_commit and self.has_issue_comment and self.has_pr_comment

    def record(self, event_type: str) -> None:
        if event_type in ISSUE_COMMENT_EVENTS:
            self.has_issue_comment = True
        elif event_type in PR_COMMENT_EVENTS:
            self.has_pr_comment = True
        elif event_type in COMMIT_EVENTS:
            self.has_commit = True


@dataclass
class AwaitingItem:
    created: datetime
    last_updated: datetime
    actions: List[str] = field(default_factory=list)


def missing_activity_sentence(summary: ActivitySummary) -> str:
    """Describe which kinds of activity did not happen, or '' if none are missing."""
    missing = []
    if not summary.has_commit:
        missing.append("commits pushed")
    if not summary.has_pr_comment:
        missing.append("PRs reviewed")
    if not summary.has_issue_comment:
        missing.append("issues commented on")

    if not missing:
        return ""
    if len(missing) == 1:
        return f"No {missing[0]} in the last day!"
    if len(missing) == 2:
        return f"No {missing[0]} or {missing[1]} in the last day!"
    return f"No {', '.join(missing[:-1])}, or {missing[-1]} in the last day!"


def format_message(
    summary: ActivitySummary,
    awaiting_items: Dict[str, AwaitingItem],
    now: Optional[datetime] = None,
) -> str:
    """Build the Slack message text.

    Awaiting items are only listed underneath a missing-activity sentence;
    when nothing is missing the result is empty even if items are waiting.
    """
    now = now or datetime.now(timezone.utc)
    message = missing_activity_sentence(summary)
    if not message:
        if awaiting_items:
            logger.warning(f"All activity present, not reporting {len(awaiting_items)} awaiting item(s)")
        return ""

    if awaiting_items:
        message += ATTENTION_PREAMBLE
    for url, item in awaiting_items.items():
        message += (
            f"• {url} has been open since {humanize.naturaltime(now - item.created)}"
            f" and hasn't been updated since {humanize.naturaltime(now - item.last_updated)}"
            f" and is {' and '.join(item.actions)}\n"
        )
    return message


class ActivityDigestBuilder:
    """Collects one user's recent GitHub activity and pending work into a digest."""

    def __init__(self, github: GitHubClient):
        self.github = github
        self.awaiting_items: Dict[str, AwaitingItem] = {}

    def compute_activity_flags(self, actor_handle: str, now: datetime) -> ActivitySummary:
        summary = ActivitySummary()
        cutoff = now - ACTIVITY_WINDOW
        scanned = 0
        for event in self.github.list_user_events(actor_handle, stop=summary.is_complete):
            if parse_github_timestamp(event["created_at"]) < cutoff:
                break
            scanned += 1
            summary.record(event.get("type", ""))
        logger.info(
            f"Scanned {scanned} recent event(s) for {actor_handle}: "
            f"commit={summary.has_commit} pr_comment={summary.has_pr_comment} "
            f"issue_comment={summary.has_issue_comment}"
        )
        return summary

    def _upsert(self, item: dict, action: str) -> None:
        url = item["html_url"]
        created = parse_github_timestamp(item["created_at"])
        last_updated = parse_github_timestamp(item["updated_at"])
        awaiting = self.awaiting_items.get(url)
        if awaiting is None:
            awaiting = self.awaiting_items[url] = AwaitingItem(created=created, last_updated=last_updated)
        awaiting.actions.append(action)
        awaiting.created = created
        awaiting.last_updated = last_updated

    def collect_awaiting_assigned_issues(self, actor_handle: str, now: datetime) -> None:
        cutoff = now - ISSUE_STALE_AFTER
        found = 0
        # The issues endpoint lists issues assigned to the token's owner.
        for issue in self.github.list_assigned_issues():
            if parse_github_timestamp(issue["updated_at"]) < cutoff:
                self._upsert(issue, ASSIGNED_ACTION)
                found += 1
        logger.info(f"Found {found} stale issue(s) assigned to {actor_handle}")

    def collect_awaiting_reviews(self, actor_handle: str, now: datetime) -> None:
        cutoff = now - REVIEW_STALE_AFTER
        found = 0
        query = f"type:pr is:open review-requested:{actor_handle}"
        for pr in self.github.search_issues(query, sort="updated", order="asc"):
            # Review requests age from creation, not from last update.
            if parse_github_timestamp(pr["created_at"]) < cutoff:
                self._upsert(pr, REVIEW_ACTION)
                found += 1
        logger.info(f"Found {found} PR(s) awaiting review from {actor_handle}")

    def build(self, actor_handle: str, now: datetime) -> str:
        """Run every query and return the digest text ('' when there is nothing to send)."""
        summary = self.compute_activity_flags(actor_handle, now)
        self.collect_awaiting_assigned_issues(actor_handle, now)
        self.collect_awaiting_reviews(actor_handle, now)
        return format_message(summary, self.awaiting_items, now)
