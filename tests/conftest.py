from __future__ import annotations

import hashlib
import hmac
import ssl
from collections import Counter
from json import dumps as json_dumps
from typing import Any

import aiohttp
import pytest
from yarl import URL

from fbxclient import ClientConfig

MOCK_HOST = "mafreebox.freebox.fr"
MOCK_APP_TOKEN = "dyNYgfK0Ya6FWGqq83sBHa7TwzWo+pg4fDFUJHShcjVYzTfaRrZzm93p7OTAfH/0"  # noqa: S105
MOCK_TRACK_ID = 42
MOCK_SALT = "PJp5gOBSkRg5UrOX2q1hB8pyt1YNS2F9"
MOCK_CHALLENGE = "Bj6xMqoe+DCHD44KqBljJ579seOXNWr2"
MOCK_SESSION_TOKEN = "35JYdQSvkcBYK84IFMU7H86clfhS75OzwlQrKlQN1gBch/Dd62RGzDpgC7YB9jB2"  # noqa: S105
MOCK_BASE_URL = f"https://{MOCK_HOST}/api/v8/"

MOCK_LAN_HOSTS = [
    {
        "id": "ether-00:24:d4:7e:00:4c",
        "primary_name": "Freebox Player",
        "host_type": "smartphone",
        "active": True,
        "reachable": True,
        "vendor_name": "Freebox SAS",
        "l2ident": {"id": "00:24:d4:7e:00:4c", "type": "mac_address"},
    },
    {
        "id": "ether-00:24:d4:7e:00:4d",
        "primary_name": "Laptop",
        "host_type": "workstation",
        "active": False,
        "reachable": False,
    },
    {
        "id": "ether-00:24:d4:7e:00:4e",
        "primary_name": "Phone",
        "active": True,
        "reachable": True,
    },
]

MOCK_PLAYERS = [
    {
        "id": 1,
        "device_name": "Freebox Player POP",
        "device_model": "fbx8am",
        "api_version": "6.0",
        "api_available": True,
        "reachable": True,
        "mac": "00:24:d4:7e:00:4c",
    }
]

MOCK_PLAYER_STATUS = {
    "power_state": "running",
    "foreground_app": {"package": "fr.freebox.tv", "context": {}},
}


def mock_password(app_token: str, challenge: str) -> str:
    return hmac.new(app_token.encode(), challenge.encode(), hashlib.sha1).hexdigest()


class MockFreebox:
    """Scripted appliance answering the http requests of the client."""

    class _mock_response:
        def __init__(self, status, body: Any):
            self.status = status
            self._body = body

        async def __aenter__(self):
            return self

        async def __aexit__(self, exc_t, exc_v, exc_tb):
            pass

        async def read(self):
            if isinstance(self._body, bytes):
                return self._body
            return json_dumps(self._body).encode()

    def __init__(
        self,
        *,
        api_base_url="/api/",
        api_version="8.1",
        statuses=("pending", "granted"),
        app_token=MOCK_APP_TOKEN,
        authorize_success=True,
        check_success=True,
        challenge_success=True,
        login_error_code=None,
        lan_hosts=None,
        players=None,
        discovery_body=None,
        responses=None,
    ):
        self.api_base_url = api_base_url
        self.api_version = api_version
        self.statuses = list(statuses)
        self.app_token = app_token
        self.authorize_success = authorize_success
        self.check_success = check_success
        self.challenge_success = challenge_success
        self.login_error_code = login_error_code
        self.lan_hosts = MOCK_LAN_HOSTS if lan_hosts is None else lan_hosts
        self.players = MOCK_PLAYERS if players is None else players
        self.discovery_body = discovery_body
        # "METHOD path" -> (status, body) replacing the scripted answer
        self.responses = responses or {}
        self.session_tokens: list[str] = []
        self.requests: list[tuple[str, str, dict | None, dict | None]] = []
        self.calls: Counter[str] = Counter()
        self._poll_index = 0

    @property
    def base_path(self) -> str:
        return f"{self.api_base_url}v{self.api_version.split('.')[0]}/"

    @staticmethod
    def _error(error_code, msg, status=403):
        return status, {"success": False, "error_code": error_code, "msg": msg}

    @staticmethod
    def _success(result=None):
        resp: dict[str, Any] = {"success": True}
        if result is not None:
            resp["result"] = result
        return 200, resp

    async def request(self, method, url, *_, json=None, headers=None, **__):
        url = URL(str(url))
        if url.path == "/api_version":
            self.calls["api_version"] += 1
            self.requests.append((method, "api_version", json, headers))
            body = self.discovery_body
            if body is None:
                body = {
                    "api_base_url": self.api_base_url,
                    "api_version": self.api_version,
                    "device_name": "Freebox Server",
                    "https_available": True,
                }
            return self._mock_response(200, body)

        assert url.scheme == "https"
        assert url.path.startswith(self.base_path)
        path = url.path[len(self.base_path) :]
        self.calls[f"{method} {path}"] += 1
        self.requests.append((method, path, json, headers))
        if f"{method} {path}" in self.responses:
            status, body = self.responses[f"{method} {path}"]
        else:
            status, body = await self._route(method, path, json, headers or {})
        return self._mock_response(status, body)

    async def _route(self, method, path, json, headers):
        if (method, path) == ("POST", "login/authorize"):
            return self._authorize(json)
        if method == "GET" and path.startswith("login/authorize/"):
            return self._check(path)
        if (method, path) == ("GET", "login"):
            if not self.challenge_success:
                return self._error("internal_error", "Internal error", 500)
            return self._success({"logged_in": False, "challenge": MOCK_CHALLENGE})
        if (method, path) == ("POST", "login/session"):
            return self._open_session(json)

        token = headers.get("X-Fbx-App-Auth")
        if token is None or token not in self.session_tokens:
            return self._error("auth_required", "Invalid session token")
        if token != self.session_tokens[-1]:
            return self._error("invalid_session", "Session expired")

        if (method, path) == ("GET", "lan/browser/pub/"):
            return self._success(self.lan_hosts)
        if (method, path) == ("GET", "player"):
            return self._success(self.players)
        if (method, path) == ("GET", "player/1/api/v6/status/"):
            return self._success(MOCK_PLAYER_STATUS)
        if (method, path) == ("POST", "player/1/api/v6/control/open"):
            return self._success()
        return self._error("invalid_request", "Invalid request", 404)

    def _authorize(self, json):
        if not self.authorize_success:
            return self._error("new_apps_denied", "New application requests denied")
        assert set(json) == {"app_id", "app_name", "app_version", "device_name"}
        return self._success({"app_token": self.app_token, "track_id": MOCK_TRACK_ID})

    def rewind(self):
        """Restart the scripted statuses from the first one."""
        self._poll_index = 0

    def _check(self, path):
        assert path == f"login/authorize/{MOCK_TRACK_ID}"
        if not self.check_success:
            return self._error("invalid_request", "Unknown track id", 400)
        status = self.statuses[min(self._poll_index, len(self.statuses) - 1)]
        self._poll_index += 1
        result = {"status": status, "challenge": MOCK_CHALLENGE}
        if status == "granted":
            result["password_salt"] = MOCK_SALT
        return self._success(result)

    def _open_session(self, json):
        if self.login_error_code:
            return self._error(self.login_error_code, "Login refused")
        if json["password"] != mock_password(self.app_token, MOCK_CHALLENGE):
            return self._error("invalid_token", "Invalid password")
        session_token = f"{MOCK_SESSION_TOKEN}{len(self.session_tokens)}"
        self.session_tokens.append(session_token)
        return self._success(
            {
                "session_token": session_token,
                "challenge": MOCK_CHALLENGE,
                "permissions": {"settings": False, "player": True, "explorer": True},
            }
        )


@pytest.fixture
def mock_freebox(mocker):
    """Return a function patching the http session with a mock appliance."""

    def _patch(device: MockFreebox | None = None) -> MockFreebox:
        device = device or MockFreebox()
        mocker.patch.object(
            aiohttp.ClientSession, "request", side_effect=device.request
        )
        return device

    return _patch


@pytest.fixture
def config(tmp_path, mocker):
    """Return a client config using temporary files and no real certificate."""
    mocker.patch(
        "fbxclient.transport.create_ssl_context",
        return_value=ssl.create_default_context(),
    )
    return ClientConfig(
        auth_file=str(tmp_path / "auth.json"),
        ca_file=str(tmp_path / "freebox.pem"),
        poll_interval=0,
    )
