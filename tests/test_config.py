import pytest

from config import DEFAULT_GITHUB_USERNAME, DEFAULT_SLACK_RECIPIENT, ConfigError, DigestConfig, load_config

TOKENS = {"GH_ACCESS_TOKEN": "gh-token", "SLACK_ACCESS_TOKEN": "slack-token"}


def test_load_config_with_tokens_uses_defaults():
    assert load_config(TOKENS) == DigestConfig(
        github_token="gh-token",
        slack_token="slack-token",
        github_username=DEFAULT_GITHUB_USERNAME,
        slack_recipient=DEFAULT_SLACK_RECIPIENT,
        schedule_hour=None,
    )


def test_load_config_overrides():
    config = load_config({
        **TOKENS,
        "GITHUB_USERNAME": "octocat",
        "SLACK_RECIPIENT": "U024BE7LH",
        "DIGEST_SCHEDULE_HOUR": "9",
    })

    assert config.github_username == "octocat"
    assert config.slack_recipient == "U024BE7LH"
    assert config.schedule_hour == 9


@pytest.mark.parametrize("missing", ["GH_ACCESS_TOKEN", "SLACK_ACCESS_TOKEN"])
def test_missing_token_is_reported(missing):
    environ = {k: v for k, v in TOKENS.items() if k != missing}

    with pytest.raises(ConfigError, match=missing):
        load_config(environ)


def test_empty_token_counts_as_missing():
    with pytest.raises(ConfigError, match="GH_ACCESS_TOKEN"):
        load_config({**TOKENS, "GH_ACCESS_TOKEN": ""})


@pytest.mark.parametrize("hour", ["noon", "24", "-1"])
def test_invalid_schedule_hour(hour):
    with pytest.raises(ConfigError, match="DIGEST_SCHEDULE_HOUR"):
        load_config({**TOKENS, "DIGEST_SCHEDULE_HOUR": hour})
