# save_client/api.py

from urllib.parse import quote

import requests


# Base URL of the save server
DEFAULT_BASE_URL = "http://localhost:3000"


class ClientError(Exception):
    """
    Non-2xx reply from the save server, carrying its `error` message.
    """

    def __init__(self, status_code: int, message: str):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message


class SaveClient:
    """
    Thin wrapper over the save server's HTTP API.
    `login` keeps the bearer token for the profile calls that follow.
    """

    def __init__(self, base_url: str = DEFAULT_BASE_URL, session: requests.Session | None = None, timeout: float = 10):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout
        self.token = None

    # -------------------------------
    # Authentication-related methods
    # -------------------------------

    def status(self):
        return self._request("GET", "/")

    def register(self, username, password):
        """
        Creates an account. Raises ClientError(400) if the username is taken.
        """
        return self._request("POST", "/auth/register", json={"username": username, "password": password})

    def login(self, username, password):
        """
        Logs in and stores the returned token on the client.
        """
        data = self._request("POST", "/auth/login", json={"username": username, "password": password})
        self.token = data["token"]
        return self.token

    def logout(self):
        self.token = None

    # -------------------------
    # Profile Management
    # -------------------------

    def save_player(self, name, money, level):
        return self._request("POST", self._player_path(name), json={"money": money, "level": level}, auth=True)

    def load_player(self, name):
        return self._request("GET", self._player_path(name), auth=True)

    def list_players(self):
        data = self._request("GET", "/players", auth=True)
        if isinstance(data, list):
            return data
        else:
            return []

    def delete_player(self, name):
        return self._request("DELETE", self._player_path(name), auth=True)

    # -------------------------
    # Helpers
    # -------------------------

    @staticmethod
    def _player_path(name) -> str:
        return f"/player/{quote(name, safe='')}"

    def _request(self, method, path, json=None, auth=False):
        headers = {}
        if auth:
            if not self.token:
                raise ClientError(401, "Not logged in")
            headers["Authorization"] = f"Bearer {self.token}"

        res = self.session.request(
            method,
            f"{self.base_url}{path}",
            json=json,
            headers=headers,
            timeout=self.timeout,
        )

        if res.status_code >= 400:
            try:
                body = res.json()
            except ValueError:
                body = None
            message = body.get("error", res.text) if isinstance(body, dict) else res.text
            raise ClientError(res.status_code, message)

        return res.json()
