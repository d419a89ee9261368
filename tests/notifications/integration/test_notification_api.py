"""Integration tests for the Notifications API endpoints via TestClient."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from notifications.api import router
from notifications.notification.helpers import notify
from notifications.notification.notification import NotificationType
from protean.integrations.fastapi import register_exception_handlers
from shared.access import register_access_handlers

SELLER = {"X-User-Id": "seller-nt-001", "X-User-Role": "seller"}
OTHER = {"X-User-Id": "seller-nt-002", "X-User-Role": "seller"}


@pytest.fixture()
def client():
    app = FastAPI()
    app.include_router(router)
    register_exception_handlers(app)
    register_access_handlers(app)
    return TestClient(app)


def _new_order(order_id="ord-001", recipient_id="seller-nt-001"):
    return notify(recipient_id, NotificationType.NEW_ORDER.value, {"order_id": order_id, "item_count": 2})


class TestNotificationAPI:
    def test_feed_is_per_caller(self, client):
        _new_order()
        _new_order(recipient_id="seller-nt-002")

        feed = client.get("/notifications", headers=SELLER).json()["notifications"]
        assert len(feed) == 1
        assert feed[0]["notification_type"] == "NEW_ORDER"
        assert feed[0]["data"] == {"order_id": "ord-001", "item_count": 2}
        assert feed[0]["is_read"] is False

    def test_requires_identity(self, client):
        assert client.get("/notifications").status_code == 401

    def test_unread_count(self, client):
        _new_order("ord-001")
        _new_order("ord-002")
        assert client.get("/notifications/unread-count", headers=SELLER).json()["count"] == 2
        response = client.get(
            "/notifications/unread-count", params={"notification_type": "TRADE_UPDATE"}, headers=SELLER
        )
        assert response.json()["count"] == 0

    def test_mark_one_read(self, client):
        notification_id = _new_order()
        assert client.put(f"/notifications/{notification_id}/read", headers=SELLER).status_code == 200
        assert client.get("/notifications/unread-count", headers=SELLER).json()["count"] == 0

    def test_cannot_mark_someone_elses(self, client):
        notification_id = _new_order()
        assert client.put(f"/notifications/{notification_id}/read", headers=OTHER).status_code == 404

    def test_read_all(self, client):
        _new_order("ord-001")
        _new_order("ord-002")
        response = client.put("/notifications/read-all", headers=SELLER)
        assert response.json() == {"marked": 2}

    def test_mark_matching_for_order(self, client):
        _new_order("ord-001")
        _new_order("ord-002")
        response = client.put(
            "/notifications/read",
            json={"notification_types": ["NEW_ORDER"], "order_id": "ord-002"},
            headers=SELLER,
        )
        assert response.json() == {"marked": 1}
        assert client.get("/notifications/unread-count", headers=SELLER).json()["count"] == 1

    def test_mark_matching_needs_types(self, client):
        response = client.put("/notifications/read", json={"notification_types": []}, headers=SELLER)
        assert response.status_code == 422
