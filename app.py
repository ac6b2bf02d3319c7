# app.py
import logging
import sys
from datetime import datetime, timezone

from apscheduler.schedulers.blocking import BlockingScheduler
from dotenv import load_dotenv
from slack_sdk import WebClient
from slack_sdk.errors import SlackApiError

from config import ConfigError, DigestConfig, load_config
from digest import ActivityDigestBuilder
from github_service import GitHubClient

# --- Initialization ---
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


# --- Slack Messaging ---
def send_slack_message(slack_client: WebClient, recipient: str, text: str) -> None:
    """Posts the digest text to a Slack user or channel."""
    try:
        slack_client.chat_postMessage(channel=recipient, text=text)
        logger.info(f"Sent digest to Slack recipient {recipient}")
    except SlackApiError as e:
        logger.error(f"Error sending Slack message to {recipient}: {e.response['error']}")
        raise


# --- Digest ---
def run_digest(config: DigestConfig, github: GitHubClient, slack_client: WebClient) -> str:
    """Builds one digest and sends it if there is anything to say."""
    now = datetime.now(timezone.utc)
    builder = ActivityDigestBuilder(github)
    message = builder.build(config.github_username, now)
    if not message:
        logger.warning(f"Nothing to report for {config.github_username}")
        return message
    send_slack_message(slack_client, config.slack_recipient, message)
    return message


def schedule_daily_digest(config: DigestConfig, github: GitHubClient, slack_client: WebClient) -> BlockingScheduler:
    """Creates a scheduler that runs the digest once a day at the configured hour."""
    scheduler = BlockingScheduler(timezone=timezone.utc)
    scheduler.add_job(
        run_digest,
        'cron',
        hour=config.schedule_hour,
        args=[config, github, slack_client],
        id="daily_digest",
        replace_existing=True
    )
    logger.info(f"Scheduled daily digest for {config.github_username} at {config.schedule_hour:02d}:00 UTC")
    return scheduler


def main() -> None:
    load_dotenv()

    try:
        config = load_config()
    except ConfigError as e:
        logger.error(str(e))
        sys.exit(1)

    github = GitHubClient(config.github_token)
    slack_client = WebClient(token=config.slack_token)

    if config.schedule_hour is None:
        run_digest(config, github, slack_client)
        return

    scheduler = schedule_daily_digest(config, github, slack_client)
    try:
        scheduler.start()
    except (KeyboardInterrupt, SystemExit):
        logger.info("Scheduler stopped")


if __name__ == '__main__':
    logger.info("Starting GitHub activity digest...")
    main()
