"""Tests for the push subscription registry."""

import pytest

from notifyhub.application.use_cases.push_subscriptions import (
    get_user_subscriptions,
    remove_all_subscriptions,
    remove_subscription,
    save_subscription,
)
from notifyhub.domain.entities import PushSubscriptionKeys

ENDPOINT = "https://fcm.googleapis.com/fcm/send/abc123"


def test_saving_same_endpoint_twice_updates_in_place(session):
    first = save_subscription(
        session, "user-1", endpoint=ENDPOINT, keys=PushSubscriptionKeys("p-one", "a-one")
    )
    second = save_subscription(
        session,
        "user-1",
        endpoint=ENDPOINT,
        keys=PushSubscriptionKeys("p-two", "a-two"),
        user_agent="Firefox",
        device_id="laptop",
    )

    subscriptions = get_user_subscriptions(session, "user-1")
    assert len(subscriptions) == 1
    assert second.id == first.id
    assert subscriptions[0].keys == PushSubscriptionKeys("p-two", "a-two")
    assert subscriptions[0].user_agent == "Firefox"
    assert subscriptions[0].device_id == "laptop"


def test_same_endpoint_for_different_users_is_kept_apart(session):
    keys = PushSubscriptionKeys("p", "a")
    save_subscription(session, "user-1", endpoint=ENDPOINT, keys=keys)
    save_subscription(session, "user-2", endpoint=ENDPOINT, keys=keys)

    assert len(get_user_subscriptions(session, "user-1")) == 1
    assert len(get_user_subscriptions(session, "user-2")) == 1


def test_saved_subscription_is_listed_with_its_fields(session):
    saved = save_subscription(
        session,
        "user-1",
        endpoint=ENDPOINT,
        keys=PushSubscriptionKeys("p256dh-value", "auth-value"),
        user_agent="Chrome",
    )

    [listed] = get_user_subscriptions(session, "user-1")
    assert listed.id == saved.id
    assert listed.endpoint == ENDPOINT
    assert listed.as_subscription_info() == {
        "endpoint": ENDPOINT,
        "keys": {"p256dh": "p256dh-value", "auth": "auth-value"},
    }
    assert listed.created_at is not None


def test_remove_subscription_reports_whether_it_existed(session):
    save_subscription(session, "user-1", endpoint=ENDPOINT, keys=PushSubscriptionKeys("p", "a"))

    assert remove_subscription(session, "user-1", ENDPOINT) is True
    assert remove_subscription(session, "user-1", ENDPOINT) is False
    assert get_user_subscriptions(session, "user-1") == []


def test_remove_all_subscriptions_counts_rows(session):
    keys = PushSubscriptionKeys("p", "a")
    for index in range(3):
        save_subscription(session, "user-1", endpoint=f"{ENDPOINT}/{index}", keys=keys)
    save_subscription(session, "user-2", endpoint=ENDPOINT, keys=keys)

    assert remove_all_subscriptions(session, "user-1") == 3
    assert len(get_user_subscriptions(session, "user-2")) == 1


def test_endpoint_and_keys_are_required(session):
    with pytest.raises(ValueError):
        save_subscription(session, "user-1", endpoint="", keys=PushSubscriptionKeys("p", "a"))
    with pytest.raises(ValueError):
        PushSubscriptionKeys(p256dh="", auth="a")
