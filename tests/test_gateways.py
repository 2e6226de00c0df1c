"""Tests for the SendGrid, Twilio and Web Push gateway adapters."""

from __future__ import annotations

import json
import logging
import types

import pytest
from pywebpush import WebPushException
from twilio.base.exceptions import TwilioRestException

from notifyhub.config import Settings
from notifyhub.domain.entities import PushSubscription, PushSubscriptionKeys
from notifyhub.domain.exceptions import (
    EmailDeliveryError,
    PushDeliveryError,
    PushEndpointGoneError,
    SmsGatewayError,
)
from notifyhub.infrastructure import email as email_module
from notifyhub.infrastructure import push as push_module
from notifyhub.infrastructure.email import SendGridEmailGateway
from notifyhub.infrastructure.push import WebPushGateway
from notifyhub.infrastructure.sms import TwilioSmsGateway


def _settings(**values) -> Settings:
    return Settings(_env_file=None, secret_key="secret", **values)


class _StubSendGridClient:
    response = types.SimpleNamespace(status_code=202, body=None)
    sent: list = []

    def __init__(self, api_key: str) -> None:
        self.api_key = api_key
        self.client = types.SimpleNamespace(timeout=None)

    def send(self, message):
        type(self).sent.append(message)
        return type(self).response


@pytest.fixture
def sendgrid_client(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(_StubSendGridClient, "sent", [])
    monkeypatch.setattr(email_module, "SendGridAPIClient", _StubSendGridClient)
    return _StubSendGridClient


def test_email_gateway_requires_configuration():
    assert SendGridEmailGateway.from_settings(_settings()) is None


def test_email_gateway_sends_message(sendgrid_client):
    gateway = SendGridEmailGateway.from_settings(
        _settings(sendgrid_api_key="SG.key", sendgrid_sender="noreply@example.com")
    )

    gateway.send(to="ada@example.com", subject="Hi", html="<p>Hi</p>", text="Hi")

    assert len(sendgrid_client.sent) == 1


def test_email_gateway_reports_sendgrid_error_details(sendgrid_client, monkeypatch, caplog):
    monkeypatch.setattr(
        sendgrid_client,
        "response",
        types.SimpleNamespace(
            status_code=400,
            body=json.dumps(
                {"errors": [{"message": "Invalid email", "field": "personalizations.0.to"}]}
            ).encode("utf-8"),
        ),
    )
    gateway = SendGridEmailGateway("SG.key", "noreply@example.com")
    caplog.set_level(logging.ERROR)

    with pytest.raises(EmailDeliveryError) as excinfo:
        gateway.send(to="bad", subject="Hi", html="<p>Hi</p>", text="Hi")

    assert excinfo.value.status_code == 400
    assert "Invalid email (field: personalizations.0.to)" in str(excinfo.value)
    assert "SendGrid API request failed with status 400" in caplog.text


def test_email_gateway_wraps_client_exceptions(monkeypatch):
    class _FailingClient(_StubSendGridClient):
        def send(self, message):
            error = RuntimeError("Unauthorized")
            error.status_code = 401
            error.body = b'{"errors": [{"message": "The provided authorization grant is invalid"}]}'
            raise error

    monkeypatch.setattr(email_module, "SendGridAPIClient", _FailingClient)

    with pytest.raises(EmailDeliveryError, match="authorization grant is invalid"):
        SendGridEmailGateway("SG.key", "noreply@example.com").send(
            to="ada@example.com", subject="Hi", html="<p>Hi</p>", text="Hi"
        )


class _FakeMessages:
    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.created: list[dict] = []

    def create(self, **kwargs):
        if self.error is not None:
            raise self.error
        self.created.append(kwargs)
        return types.SimpleNamespace(sid="SM123")


def test_sms_gateway_requires_credentials_and_sender():
    assert TwilioSmsGateway.from_settings(_settings()) is None
    assert (
        TwilioSmsGateway.from_settings(
            _settings(twilio_account_sid="AC123", twilio_auth_token="token")
        )
        is None
    )


def test_sms_gateway_sends_from_configured_number():
    messages = _FakeMessages()
    gateway = TwilioSmsGateway(types.SimpleNamespace(messages=messages), "+15550000000")

    assert gateway.send(to="+15551234567", body="Alert: hi") == "SM123"
    assert messages.created == [{"body": "Alert: hi", "from_": "+15550000000", "to": "+15551234567"}]


def test_sms_gateway_exposes_twilio_error_code():
    error = TwilioRestException(429, "/Messages.json", msg="Daily limit reached", code=63038)
    gateway = TwilioSmsGateway(
        types.SimpleNamespace(messages=_FakeMessages(error)), "+15550000000"
    )

    with pytest.raises(SmsGatewayError) as excinfo:
        gateway.send(to="+15551234567", body="hi")

    assert excinfo.value.code == 63038


SUBSCRIPTION = PushSubscription(
    id="s-1",
    user_id="user-1",
    endpoint="https://push.example.com/abc",
    keys=PushSubscriptionKeys("p256dh", "auth"),
)


def test_push_gateway_requires_vapid_keys():
    assert WebPushGateway.from_settings(_settings()) is None
    gateway = WebPushGateway.from_settings(
        _settings(vapid_public_key="public", vapid_private_key="private")
    )
    assert gateway.public_key == "public"


def test_push_gateway_signs_with_vapid_claims(monkeypatch):
    calls = []
    monkeypatch.setattr(push_module, "webpush", lambda **kwargs: calls.append(kwargs))
    gateway = WebPushGateway(
        public_key="public", private_key="private", contact="mailto:ops@example.com", timeout=5
    )

    gateway.send(SUBSCRIPTION, {"title": "Hi"})
    gateway.send(SUBSCRIPTION, {"title": "Again"})

    assert calls[0]["subscription_info"] == SUBSCRIPTION.as_subscription_info()
    assert json.loads(calls[0]["data"]) == {"title": "Hi"}
    assert calls[0]["vapid_private_key"] == "private"
    assert calls[0]["vapid_claims"] == {"sub": "mailto:ops@example.com"}
    assert calls[0]["timeout"] == 5
    assert calls[0]["vapid_claims"] is not calls[1]["vapid_claims"]


@pytest.mark.parametrize(
    ("status_code", "expected"),
    [(410, PushEndpointGoneError), (404, PushDeliveryError), (500, PushDeliveryError)],
)
def test_push_gateway_classifies_failures(monkeypatch, status_code, expected):
    def _fail(**kwargs):
        raise WebPushException(
            "Push failed", response=types.SimpleNamespace(status_code=status_code)
        )

    monkeypatch.setattr(push_module, "webpush", _fail)
    gateway = WebPushGateway(public_key="public", private_key="private", contact="mailto:a@b.c")

    with pytest.raises(expected) as excinfo:
        gateway.send(SUBSCRIPTION, {})

    assert excinfo.value.status_code == status_code
    if status_code != 410:
        assert not isinstance(excinfo.value, PushEndpointGoneError)
