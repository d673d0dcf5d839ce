"""
Tests for settings validation and logging setup.
"""

import logging

import pytest
from pydantic import ValidationError

from ticket_sales.core.config import Settings
from ticket_sales.core.logging import log_level, service_context


def test_default_currency_is_normalised():
    assert Settings(DEFAULT_CURRENCY=" eur ").DEFAULT_CURRENCY == "EUR"


def test_invalid_default_currency():
    with pytest.raises(ValidationError):
        Settings(DEFAULT_CURRENCY="EURO")


def test_invalid_lock_strategy():
    with pytest.raises(ValidationError):
        Settings(RESERVATION_LOCK="zookeeper")


def test_log_level():
    assert log_level(Settings(LOG_LEVEL="warning")) == logging.WARNING
    assert log_level(Settings(LOG_LEVEL="nonsense")) == logging.INFO
    assert log_level(Settings(LOG_LEVEL="ERROR", DEBUG=True)) == logging.DEBUG


def test_service_context_does_not_override_event_fields():
    add = service_context(Settings(APP_NAME="Box Office", RESERVATION_LOCK="local"))

    event = add(None, "info", {"event": "reservation_created", "reservation_lock": "redis"})

    assert event["service"] == "Box Office"
    assert event["reservation_lock"] == "redis"
