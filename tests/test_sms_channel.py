"""Tests for the SMS delivery channel."""

import logging

import pytest

from notifyhub.application.channels import SmsChannel
from notifyhub.application.channels.sms import MAX_SMS_LENGTH, compose_sms_body
from notifyhub.domain.entities import Notification
from notifyhub.domain.exceptions import SmsGatewayError

from support import FakeSmsGateway, add_user


def _notification(**overrides) -> Notification:
    values = {"id": "n-1", "title": "Alert", "message": "Disk almost full"}
    values.update(overrides)
    return Notification(**values)


def test_body_combines_title_and_message():
    assert compose_sms_body(_notification()) == "Alert: Disk almost full"


def test_long_body_is_truncated_with_marker():
    notification = _notification(title="T", message="x" * 1700)
    full_body = f"T: {'x' * 1700}"

    body = compose_sms_body(notification)

    assert len(body) == MAX_SMS_LENGTH
    assert body == full_body[:1597] + "..."


def test_sends_to_normalized_profile_number(router, session):
    add_user(session, "user-1", phone_number="0300 1234567")
    gateway = FakeSmsGateway()

    assert SmsChannel(router, gateway).send("user-1", _notification()) is True
    assert gateway.sent == [{"to": "+923001234567", "body": "Alert: Disk almost full"}]


@pytest.mark.parametrize("phone_number", [None, "123"])
def test_missing_or_invalid_number_is_skipped(router, session, phone_number):
    add_user(session, "user-1", phone_number=phone_number)
    gateway = FakeSmsGateway()

    assert SmsChannel(router, gateway).send("user-1", _notification()) is False
    assert gateway.sent == []


def test_rate_limit_error_is_logged_as_warning(router, session, caplog):
    add_user(session, "user-1", phone_number="+15551234567")
    gateway = FakeSmsGateway(error=SmsGatewayError("Daily limit reached", code=63038))
    caplog.set_level(logging.WARNING)

    assert SmsChannel(router, gateway).send("user-1", _notification()) is False

    records = [record for record in caplog.records if "63038" in record.getMessage()]
    assert records and all(record.levelno == logging.WARNING for record in records)


def test_other_gateway_errors_are_logged_as_errors(router, session, caplog):
    add_user(session, "user-1", phone_number="+15551234567")
    gateway = FakeSmsGateway(error=SmsGatewayError("Invalid 'To' number", code=21211))
    caplog.set_level(logging.WARNING)

    assert SmsChannel(router, gateway).send("user-1", _notification()) is False

    records = [record for record in caplog.records if "21211" in record.getMessage()]
    assert records and all(record.levelno == logging.ERROR for record in records)


def test_inactive_channel_returns_false(router):
    assert SmsChannel(router, None).send("user-1", _notification()) is False
