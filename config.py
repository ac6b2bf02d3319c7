# config.py
import logging
import os
from dataclasses import dataclass
from datetime import timedelta
from typing import Mapping, Optional

logger = logging.getLogger(__name__)

# GitHub user whose activity is inspected, and the Slack channel or user
# the digest is posted to. Both can be overridden from the environment.
DEFAULT_GITHUB_USERNAME = "paddycarver"
DEFAULT_SLACK_RECIPIENT = "@paddy"

# GitHub API settings
GITHUB_API_URL = "https://api.github.com"
PAGE_SIZE = 50
REQUEST_TIMEOUT_SECONDS = 30

# Lookback windows
ACTIVITY_WINDOW = timedelta(hours=24)
ISSUE_STALE_AFTER = timedelta(days=7)  # assigned issues not updated for this long
REVIEW_STALE_AFTER = timedelta(days=3)  # review requests opened this long ago

REQUIRED_ENV_VARS = ['GH_ACCESS_TOKEN', 'SLACK_ACCESS_TOKEN']


class ConfigError(Exception):
    """Raised when the environment does not hold a usable configuration."""


@dataclass(frozen=True)
class DigestConfig:
    github_token: str
    slack_token: str
    github_username: str = DEFAULT_GITHUB_USERNAME
    slack_recipient: str = DEFAULT_SLACK_RECIPIENT
    schedule_hour: Optional[int] = None


def load_config(environ: Mapping[str, str] = os.environ) -> DigestConfig:
    """Build the run configuration from environment variables.

    This is the only place the environment is read; everything downstream
    receives the returned DigestConfig.
    """
    missing_vars = [var for var in REQUIRED_ENV_VARS if not environ.get(var)]
    if missing_vars:
        raise ConfigError(f"Missing required environment variables: {', '.join(missing_vars)}")

    schedule_hour = None
    raw_hour = environ.get('DIGEST_SCHEDULE_HOUR')
    if raw_hour:
        try:
            schedule_hour = int(raw_hour)
        except ValueError:
            raise ConfigError(f"DIGEST_SCHEDULE_HOUR must be an integer, got {raw_hour!r}")
        if not 0 <= schedule_hour <= 23:
            raise ConfigError(f"DIGEST_SCHEDULE_HOUR must be between 0 and 23, got {schedule_hour}")

    username = environ.get('GITHUB_USERNAME') or DEFAULT_GITHUB_USERNAME
    recipient = environ.get('SLACK_RECIPIENT') or DEFAULT_SLACK_RECIPIENT
    if not environ.get('GITHUB_USERNAME'):
        logger.info(f"GITHUB_USERNAME not set, using default '{DEFAULT_GITHUB_USERNAME}'")

    return DigestConfig(
        github_token=environ['GH_ACCESS_TOKEN'],
        slack_token=environ['SLACK_ACCESS_TOKEN'],
        github_username=username,
        slack_recipient=recipient,
        schedule_hour=schedule_hour,
    )
