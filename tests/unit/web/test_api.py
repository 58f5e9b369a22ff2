"""HTTP-level tests for the relay: pages, auth routes and power routes."""

import json

import httpx
import pytest
from fastapi.testclient import TestClient

from powerdash.app import App
from powerdash.web.deps import AUTH_COOKIE_NAME
from powerdash.web.server import create_fastapi_app

ADMIN = {"username": "admin", "password": "secret1"}


class FakeController:
    """Minimal Redfish endpoint. Power transitions never complete within a test."""

    def __init__(self) -> None:
        self.power_state = "Off"
        self.reset_types: list[str] = []
        self.failure: httpx.Response | Exception | None = None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        if isinstance(self.failure, Exception):
            raise self.failure
        if self.failure is not None:
            return self.failure
        if request.method == "GET" and request.url.path.endswith("/System.Embedded.1"):
            return httpx.Response(200, json={"Id": "System.Embedded.1", "PowerState": self.power_state})
        if request.method == "POST" and request.url.path.endswith("/Actions/ComputerSystem.Reset"):
            self.reset_types.append(json.loads(request.content)["ResetType"])
            return httpx.Response(204)
        return httpx.Response(404)


@pytest.fixture
def controller():
    return FakeController()


@pytest.fixture
def client(config, controller):
    app = App(config, controller_transport=httpx.MockTransport(controller))
    with TestClient(create_fastapi_app(app)) as test_client:
        yield test_client


@pytest.fixture
def registered(client):
    assert client.post("/api/register", json=ADMIN).status_code == 200


@pytest.fixture
def logged_in(client, registered):
    response = client.post("/api/login", json=ADMIN)
    assert response.status_code == 200
    return response.cookies[AUTH_COOKIE_NAME]


def test_end_to_end_scenario(client, controller):
    response = client.post("/api/register", json={"user": "admin", "pass": "secret1"})
    assert response.status_code == 200
    assert response.json()["username"] == "admin"

    response = client.post("/api/register", json={"user": "bob", "pass": "x"})
    assert response.status_code == 403
    assert response.json()["type"] == "already_initialized"

    response = client.post("/api/login", json={"user": "admin", "pass": "secret1"})
    assert response.status_code == 200
    token = response.cookies[AUTH_COOKIE_NAME]
    assert token

    response = client.get("/api/power/status")
    assert response.status_code == 200
    assert response.json() == {"state": "Off"}

    response = client.post("/api/logout")
    assert response.status_code == 200

    client.cookies.set(AUTH_COOKIE_NAME, token)
    response = client.get("/api/power/status")
    assert response.status_code == 401
    assert response.json()["type"] == "authentication_error"


class TestRegister:
    def test_returns_new_identity_without_logging_in(self, client):
        response = client.post("/api/register", json=ADMIN)
        assert response.status_code == 200
        body = response.json()
        assert body["id"] >= 1
        assert body["username"] == "admin"
        assert "created_at" in body
        assert AUTH_COOKIE_NAME not in response.cookies
        assert client.get("/api/power/status").status_code == 401

    @pytest.mark.parametrize(
        "payload",
        [
            {},
            {"username": "admin"},
            {"username": "", "password": "secret1"},
            {"username": "admin", "password": ""},
            {"username": "admin", "password": "secret1", "confirm_password": "other"},
        ],
    )
    def test_invalid_input_is_400(self, client, payload):
        response = client.post("/api/register", json=payload)
        assert response.status_code == 400
        assert response.json()["type"] == "validation_error"

    def test_not_json_is_400(self, client):
        response = client.post("/api/register", content="username=admin", headers={"Content-Type": "text/plain"})
        assert response.status_code == 400


class TestLogin:
    def test_sets_http_only_session_cookie(self, client, registered):
        response = client.post("/api/login", json=ADMIN)
        assert response.status_code == 200
        assert response.json()["username"] == "admin"
        set_cookie = response.headers["set-cookie"]
        assert set_cookie.startswith(f"{AUTH_COOKIE_NAME}=")
        assert "HttpOnly" in set_cookie
        assert "Max-Age=86400" in set_cookie

    def test_wrong_password_and_unknown_user_look_the_same(self, client, registered):
        wrong_password = client.post("/api/login", json={"username": "admin", "password": "nope"})
        unknown_user = client.post("/api/login", json={"username": "nobody", "password": "secret1"})
        assert wrong_password.status_code == unknown_user.status_code == 401
        assert wrong_password.json() == unknown_user.json()
        assert AUTH_COOKIE_NAME not in wrong_password.cookies

    def test_login_before_registration_is_401(self, client):
        assert client.post("/api/login", json=ADMIN).status_code == 401

    def test_missing_fields_is_400(self, client, registered):
        assert client.post("/api/login", json={"username": "admin"}).status_code == 400


class TestLogout:
    def test_without_session_still_succeeds(self, client):
        response = client.post("/api/logout")
        assert response.status_code == 200

    def test_twice_succeeds(self, client, logged_in):
        assert client.post("/api/logout").status_code == 200
        assert client.post("/api/logout").status_code == 200

    def test_clears_cookie(self, client, logged_in):
        response = client.post("/api/logout")
        assert f'{AUTH_COOKIE_NAME}=""' in response.headers["set-cookie"]
        assert client.get("/api/power/status").status_code == 401


class TestPowerRoutes:
    @pytest.mark.parametrize(
        ("method", "path"),
        [
            ("GET", "/api/power/status"),
            ("POST", "/api/power/on"),
            ("POST", "/api/power/off"),
            ("POST", "/api/power/shutdown"),
        ],
    )
    def test_require_session(self, client, controller, registered, method, path):
        response = client.request(method, path)
        assert response.status_code == 401
        client.cookies.set(AUTH_COOKIE_NAME, "forged-token")
        assert client.request(method, path).status_code == 401
        assert controller.reset_types == []

    @pytest.mark.parametrize(
        ("path", "reset_type"),
        [
            ("/api/power/on", "On"),
            ("/api/power/off", "ForceOff"),
            ("/api/power/shutdown", "GracefulShutdown"),
        ],
    )
    def test_actions_are_relayed(self, client, controller, logged_in, path, reset_type):
        response = client.post(path)
        assert response.status_code == 200
        assert response.json()["action"] == reset_type
        assert controller.reset_types == [reset_type]

    def test_status_is_read_fresh(self, client, controller, logged_in):
        assert client.get("/api/power/status").json() == {"state": "Off"}
        controller.power_state = "On"
        assert client.get("/api/power/status").json() == {"state": "On"}
        controller.power_state = "PoweringOff"
        assert client.get("/api/power/status").json() == {"state": "Unknown"}

    def test_power_on_does_not_imply_state_change(self, client, controller, logged_in):
        assert client.post("/api/power/on").status_code == 200
        assert client.get("/api/power/status").json() == {"state": "Off"}

    @pytest.mark.parametrize(
        ("failure", "status_code", "error_type"),
        [
            (httpx.ConnectTimeout("timed out"), 502, "controller_unreachable"),
            (httpx.ConnectError("refused"), 502, "controller_unreachable"),
            (httpx.Response(401), 500, "controller_auth_failed"),
            (httpx.Response(200, json={"unexpected": True}), 502, "controller_protocol_error"),
        ],
    )
    def test_controller_failures_are_mapped(self, client, controller, logged_in, failure, status_code, error_type):
        controller.failure = failure
        response = client.get("/api/power/status")
        assert response.status_code == status_code
        assert response.json() == {"message": "Could not reach server controller", "type": error_type}

    def test_controller_failure_on_action(self, client, controller, logged_in):
        controller.failure = httpx.Response(500, text="Internal Error")
        response = client.post("/api/power/shutdown")
        assert response.status_code == 502
        assert response.json()["message"] == "Could not reach server controller"


class TestPages:
    def test_index_redirects_to_register_on_first_run(self, client):
        response = client.get("/", follow_redirects=False)
        assert response.status_code == 307
        assert response.headers["location"] == "/register"

    def test_index_redirects_to_login_once_registered(self, client, registered):
        response = client.get("/", follow_redirects=False)
        assert response.headers["location"] == "/login"

    def test_index_redirects_to_dashboard_with_session(self, client, logged_in):
        response = client.get("/", follow_redirects=False)
        assert response.headers["location"] == "/dashboard"

    def test_dashboard_requires_session(self, client, registered):
        response = client.get("/dashboard", follow_redirects=False)
        assert response.status_code == 307
        assert response.headers["location"] == "/"

    def test_dashboard_page(self, client, logged_in):
        response = client.get("/dashboard")
        assert response.status_code == 200
        assert "text/html" in response.headers["content-type"]
        assert "/api/power/status" in response.text

    def test_register_page_closes_after_first_user(self, client, registered):
        response = client.get("/register", follow_redirects=False)
        assert response.status_code == 307

    def test_login_page(self, client, registered):
        response = client.get("/login")
        assert response.status_code == 200
        assert "/api/login" in response.text


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}
