"""Tests for the finance backend client."""

import json

import httpx
import pytest

from financeflow.clients.backend import CONNECTION_ERROR, BackendClient

URL = "https://backend.test/exec"


def make_client(handler) -> BackendClient:
    return BackendClient(URL, transport=httpx.MockTransport(handler))


class TestRequestEnvelope:
    """Tests for the action envelope sent and received."""

    def test_posts_action_and_fields(self):
        """Every call POSTs {"action": ..., ...fields} to the script URL."""
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["method"] = request.method
            seen["url"] = str(request.url)
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"success": True, "user": {"id": "U1"}})

        with make_client(handler) as client:
            response = client.login("asha", "secret")

        assert seen["method"] == "POST"
        assert seen["url"] == URL
        assert seen["body"] == {
            "action": "login",
            "usernameOrEmail": "asha",
            "password": "secret",
        }
        assert response.success
        assert response.get("user") == {"id": "U1"}

    def test_none_fields_are_dropped(self):
        """Optional fields left as None are not sent."""
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"success": True})

        with make_client(handler) as client:
            client.update_profile("U1", {"theme": "rose"})

        assert seen["body"] == {
            "action": "updateProfile",
            "userId": "U1",
            "updates": {"theme": "rose"},
        }

    def test_handle_action_sends_notification_action(self):
        """The notification action is what goes out in the "action" field."""
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"success": True})

        with make_client(handler) as client:
            client.handle_action("U1", "N1", "already_paid", "T1", amount=40.5)

        assert seen["body"] == {
            "action": "already_paid",
            "userId": "U1",
            "notificationId": "N1",
            "transactionId": "T1",
            "amount": 40.5,
        }

    def test_backend_rejection_passed_through(self):
        """success=false comes back with the backend's error text."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"success": False, "error": "Invalid password"})

        with make_client(handler) as client:
            response = client.login("asha", "wrong")

        assert not response.success
        assert response.error == "Invalid password"

    def test_missing_payload_key_defaults(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"success": True})

        with make_client(handler) as client:
            response = client.fetch_friends("U1")

        assert response.get("friends", []) == []


class TestConnectionFailures:
    """Transport problems become an unsuccessful response."""

    @pytest.mark.parametrize(
        "handler",
        [
            lambda request: httpx.Response(500, text="Internal error"),
            lambda request: httpx.Response(200, text="<html>not json</html>"),
        ],
        ids=["server-error", "not-json"],
    )
    def test_bad_responses(self, handler):
        with make_client(handler) as client:
            response = client.fetch_dashboard("U1")

        assert not response.success
        assert response.error == CONNECTION_ERROR

    def test_network_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("no route to host", request=request)

        with make_client(handler) as client:
            response = client.fetch_transaction_history("U1")

        assert not response.success
        assert response.error == CONNECTION_ERROR

    def test_follows_redirect(self):
        """The web app answers through a redirect."""

        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.host == "backend.test":
                return httpx.Response(302, headers={"Location": "https://content.test/echo"})
            return httpx.Response(200, json={"success": True, "users": [{"username": "ravi"}]})

        with make_client(handler) as client:
            response = client.search_users("ravi")

        assert response.success
        assert response.get("users") == [{"username": "ravi"}]
