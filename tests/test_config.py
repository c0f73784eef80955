"""
Tests for client configuration.
"""

import logging

import pytest

from ticketdesk_client.config import ClientConfig, resolve_endpoint


def test_defaults():
    config = ClientConfig()

    assert config.base_url == "http://127.0.0.1:8080/api"
    assert config.poll_interval == 1.0
    assert config.retry_options().max_attempts == 4


def test_resolve_endpoint_strips_trailing_slash():
    assert resolve_endpoint("LOCAL") == "http://127.0.0.1:8080/api"
    assert resolve_endpoint("https://bot.example.com/api//") == "https://bot.example.com/api"


def test_from_env():
    config = ClientConfig.from_env({
        "TICKETDESK_API_URL": "https://bot.example.com/api/",
        "TICKETDESK_TIMEOUT": "5",
        "TICKETDESK_POLL_INTERVAL": "0.5",
        "TICKETDESK_DEBUG": "no",
    })

    assert config.base_url == "https://bot.example.com/api"
    assert config.timeout == 5.0
    assert config.poll_interval == 0.5
    assert config.debug is False


def test_overrides_win_over_env():
    config = ClientConfig.from_env({"TICKETDESK_POLL_INTERVAL": "3"}, poll_interval=7.0)

    assert config.poll_interval == 7.0


def test_debug_sets_package_logger():
    logger = logging.getLogger("ticketdesk_client")
    previous = logger.level
    try:
        ClientConfig(debug=True)
        assert logger.level == logging.DEBUG
    finally:
        logger.setLevel(previous)


def test_rejects_non_positive_poll_interval():
    with pytest.raises(ValueError):
        ClientConfig(poll_interval=0)


def test_retry_options_from_config():
    options = ClientConfig(retry_max_attempts=2, retry_base_delay=0.25, retry_backoff_factor=2.0).retry_options()

    assert (options.max_attempts, options.base_delay, options.backoff_factor) == (2, 0.25, 2.0)
