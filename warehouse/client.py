"""Small synchronous client for the warehouse REST API.

The access token survives between runs in a JSON file so scripts behave like
the browser console: sign in once, then keep calling the API until the token
expires. Any 401 from the server forgets the stored token.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import httpx

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:3000"
DEFAULT_TOKEN_PATH = Path.home() / ".warehouse" / "token.json"


class WarehouseClient:
    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        *,
        token_path: Path | str | None = None,
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.token_path = Path(token_path) if token_path else DEFAULT_TOKEN_PATH
        self.user: dict[str, Any] | None = None
        self._http = httpx.Client(base_url=base_url, timeout=httpx.Timeout(timeout), transport=transport)

    def __enter__(self) -> "WarehouseClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._http.close()

    # -- token storage -------------------------------------------------

    @property
    def token(self) -> str | None:
        try:
            data = json.loads(self.token_path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            return None
        token = data.get("token") if isinstance(data, dict) else None
        return token or None

    def _store_token(self, token: str, refresh_token: str | None = None) -> None:
        self.token_path.parent.mkdir(parents=True, exist_ok=True)
        payload = {"token": token, "refresh_token": refresh_token}
        self.token_path.write_text(json.dumps(payload), encoding="utf-8")

    def _clear_token(self) -> None:
        self.user = None
        self.token_path.unlink(missing_ok=True)

    @property
    def is_authenticated(self) -> bool:
        return self.token is not None

    # -- requests ------------------------------------------------------

    def _headers(self) -> dict[str, str]:
        token = self.token
        return {"Authorization": f"Bearer {token}"} if token else {}

    def request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """Send an authenticated request; raises ``httpx.HTTPStatusError`` on 4xx/5xx."""

        headers = {**self._headers(), **kwargs.pop("headers", {})}
        response = self._http.request(method, path, headers=headers, **kwargs)
        if response.status_code == 401:
            logger.info("client.token_cleared", extra={"extra_data": {"path": path}})
            self._clear_token()
        response.raise_for_status()
        return response

    def get(self, path: str, **params: Any) -> Any:
        return self.request("GET", path, params=params or None).json()

    def post(self, path: str, payload: dict[str, Any]) -> Any:
        return self.request("POST", path, json=payload).json()

    def put(self, path: str, payload: dict[str, Any]) -> Any:
        return self.request("PUT", path, json=payload).json()

    def patch(self, path: str, payload: dict[str, Any]) -> Any:
        return self.request("PATCH", path, json=payload).json()

    def delete(self, path: str) -> Any:
        return self.request("DELETE", path).json()

    # -- session -------------------------------------------------------

    @staticmethod
    def _error_message(response: httpx.Response, fallback: str) -> str:
        try:
            body = response.json()
        except ValueError:
            return fallback
        if isinstance(body, dict):
            return str(body.get("message") or body.get("detail") or fallback)
        return fallback

    def _authenticate(self, path: str, payload: dict[str, Any], fallback: str) -> dict[str, Any]:
        response = self._http.post(path, json=payload)
        if response.is_error:
            return {"success": False, "message": self._error_message(response, fallback)}
        body = response.json()
        self._store_token(body["token"], body.get("refresh_token"))
        self.user = body.get("user")
        return {"success": True, "user": self.user}

    def login(self, username: str, password: str) -> dict[str, Any]:
        """Sign in; returns ``{"success": False, "message": ...}`` instead of raising."""

        return self._authenticate("/api/auth/login", {"username": username, "password": password}, "Login failed")

    def register(self, payload: dict[str, Any]) -> dict[str, Any]:
        return self._authenticate("/api/auth/register", payload, "Registration failed")

    def logout(self) -> None:
        self._clear_token()

    def fetch_profile(self) -> dict[str, Any] | None:
        """Refresh ``user`` from ``/api/auth/me``; ``None`` when signed out or expired."""

        if not self.is_authenticated:
            return None
        try:
            self.user = self.get("/api/auth/me")
        except httpx.HTTPStatusError:
            return None
        return self.user
