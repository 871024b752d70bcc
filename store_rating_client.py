"""Store Rating API client.

This module defines a client wrapper around the Store Rating REST API
(``/api/v1``).  The client uses the ``requests`` library internally and
returns ``(data, error)`` tuples instead of raising, so callers can show
the error message to the user directly.

The client also owns the persisted session.  After a successful login or
signup the sanitized session user (every field except the password) and
its bearer token are written to a small JSON file under the fixed key
``currentUser``.  A new client reads that file on start‑up, so a session
survives restarts; logout removes it.

Example::

    api = StoreRatingAPI(base_url="http://localhost:8000")
    user, error = api.login("john@example.com", "User123!")
    stores, error = api.list_stores(search="electronics")
    result, error = api.rate_store(stores[0]["id"], 4)
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import requests


logger = logging.getLogger(__name__)

SESSION_KEY = "currentUser"
DEFAULT_SESSION_FILE = ".store_rating_session.json"

Error = Dict[str, Any]


class SessionStorage:
    """JSON file holding the persisted session under ``SESSION_KEY``.

    Other keys in the file are preserved, so the file can be shared with
    other client‑side settings.
    """

    def __init__(self, path: Optional[str] = None) -> None:
        self.path = Path(path or os.getenv("SESSION_FILE", DEFAULT_SESSION_FILE))

    def _read_all(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Ignoring unreadable session file %s: %s", self.path, e)
            return {}
        return data if isinstance(data, dict) else {}

    def _write_all(self, data: Dict[str, Any]) -> None:
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)

    def load(self) -> Optional[Dict[str, Any]]:
        """Return the stored session (``{"user": ..., "access_token": ...}``) or ``None``."""
        session = self._read_all().get(SESSION_KEY)
        if not isinstance(session, dict) or "user" not in session:
            return None
        return session

    def save(self, user: Dict[str, Any], access_token: str) -> None:
        data = self._read_all()
        sanitized = {key: value for key, value in user.items() if key != "password"}
        data[SESSION_KEY] = {"user": sanitized, "access_token": access_token}
        self._write_all(data)

    def clear(self) -> None:
        data = self._read_all()
        if SESSION_KEY in data:
            del data[SESSION_KEY]
            self._write_all(data)


class StoreRatingAPI:
    """Client for interacting with the Store Rating API."""

    API_PREFIX = "/api/v1"

    def __init__(
        self,
        *,
        base_url: str,
        storage: Optional[SessionStorage] = None,
        session: Optional[requests.Session] = None,
        timeout: int = 15,
    ) -> None:
        """Initialise the API client.

        Args:
            base_url: Base URL of the server, e.g. ``http://localhost:8000``.
            storage: Where the session is persisted.  Defaults to a
                :class:`SessionStorage` on ``SESSION_FILE``.
            session: Optional requests session.  If not supplied a
                session will be created automatically.
            timeout: Request timeout in seconds.
        """
        self.base_url = base_url.rstrip("/")
        self.storage = storage or SessionStorage()
        self.session = session or requests.Session()
        self.timeout = timeout
        self.current_user: Optional[Dict[str, Any]] = None
        self.access_token: Optional[str] = None
        stored = self.storage.load()
        if stored:
            self.current_user = stored["user"]
            self.access_token = stored.get("access_token")
            logger.debug("Restored session for %s", self.current_user.get("email"))

    @property
    def is_authenticated(self) -> bool:
        return self.current_user is not None and bool(self.access_token)

    # ------------------------------------------------------------------
    # Low level HTTP helpers
    # ------------------------------------------------------------------
    def _request(
        self, method: str, path: str, *, params: Dict[str, Any] | None = None,
        json_body: Any | None = None
    ) -> Tuple[Optional[Any], Optional[Error]]:
        """Perform an HTTP request to the API.

        Args:
            method: HTTP method (``GET``, ``POST``, ``PUT``, ``DELETE``).
            path: Path below ``/api/v1`` (e.g. ``/stores/``).
            params: Query parameters; ``None`` values are dropped.
            json_body: JSON body to send with the request.
        Returns:
            A tuple ``(data, error)``. ``data`` contains the parsed JSON
            response on success and ``error`` is ``None``. On failure,
            ``data`` is ``None`` and ``error`` is a dictionary with keys
            ``status_code``, ``message`` and, for validation failures,
            ``errors`` (field name to reason).
        """
        url = f"{self.base_url}{self.API_PREFIX}{path}"
        headers: Dict[str, str] = {}
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        if params:
            params = {key: value for key, value in params.items() if value is not None}
        try:
            logger.debug("Sending %s request to %s", method, url)
            response = self.session.request(
                method=method,
                url=url,
                params=params,
                json=json_body,
                headers=headers,
                timeout=self.timeout,
            )
            response.raise_for_status()
            if response.content:
                return response.json(), None
            return None, None
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            message = ""
            errors: Dict[str, str] = {}
            if exc.response is not None:
                try:
                    err_json = exc.response.json()
                    detail = err_json.get("detail") if isinstance(err_json, dict) else None
                    if isinstance(detail, dict):
                        message = detail.get("message") or ""
                        errors = detail.get("errors") or {}
                    elif isinstance(detail, str):
                        message = detail
                    else:
                        message = str(err_json)
                except ValueError:
                    message = exc.response.text
            if not message:
                message = str(exc)
            logger.error("API request failed (%s): %s", status, message)
            error: Error = {"status_code": status, "message": message}
            if errors:
                error["errors"] = errors
            return None, error
        except requests.RequestException as exc:
            logger.error("API request failed: %s", exc)
            return None, {"status_code": None, "message": str(exc)}

    # ------------------------------------------------------------------
    # Session operations
    # ------------------------------------------------------------------
    def _start_session(self, data: Dict[str, Any]) -> Dict[str, Any]:
        self.current_user = data["user"]
        self.access_token = data["access_token"]
        self.storage.save(self.current_user, self.access_token)
        return self.current_user

    def _end_session(self) -> None:
        self.current_user = None
        self.access_token = None
        self.storage.clear()

    def login(self, email: str, password: str) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        """Log in and persist the session.

        Returns:
            A tuple ``(user, error)`` where ``user`` is the session user.
        """
        data, error = self._request("POST", "/auth/login", json_body={"email": email, "password": password})
        if error:
            return None, error
        return self._start_session(data), None

    def signup(self, fields: Dict[str, Any]) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        """Register a regular user (name, email, address, password) and persist the session."""
        data, error = self._request("POST", "/auth/signup", json_body=fields)
        if error:
            return None, error
        return self._start_session(data), None

    def logout(self) -> Tuple[bool, Optional[Error]]:
        """Discard the session.

        The local session is cleared even if the server cannot be
        reached or rejects the (possibly expired) token.
        """
        if not self.access_token:
            self._end_session()
            return True, None
        _, error = self._request("POST", "/auth/logout")
        self._end_session()
        if error and error.get("status_code") != 401:
            return True, error
        return True, None

    def refresh_session(self) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        """Re‑read the session user from the server and store it.

        A 401 response means the token is no longer valid (expired, or
        the user was deleted) and ends the session.
        """
        data, error = self._request("GET", "/auth/me")
        if error:
            if error.get("status_code") == 401:
                self._end_session()
            return None, error
        self.current_user = data
        self.storage.save(data, self.access_token)
        return data, None

    def change_password(
        self, new_password: str, confirm_password: Optional[str] = None
    ) -> Tuple[bool, Optional[Error]]:
        body = {"new_password": new_password}
        if confirm_password is not None:
            body["confirm_password"] = confirm_password
        _, error = self._request("PUT", "/auth/password", json_body=body)
        return error is None, error

    # ------------------------------------------------------------------
    # Users (administrators)
    # ------------------------------------------------------------------
    def list_users(
        self,
        search: Optional[str] = None,
        role: Optional[str] = None,
        sort_by: str = "name",
        order: str = "asc",
    ) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        data, error = self._request(
            "GET", "/users/", params={"search": search, "role": role, "sort_by": sort_by, "order": order}
        )
        return (data or [], error)

    def create_user(self, fields: Dict[str, Any]) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._request("POST", "/users/", json_body=fields)

    def get_user(self, user_id: str) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._request("GET", f"/users/{user_id}")

    def update_user(self, user_id: str, patch: Dict[str, Any]) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._request("PUT", f"/users/{user_id}", json_body=patch)

    def delete_user(self, user_id: str) -> Tuple[bool, Optional[Error]]:
        _, error = self._request("DELETE", f"/users/{user_id}")
        return error is None, error

    # ------------------------------------------------------------------
    # Stores
    # ------------------------------------------------------------------
    def list_stores(
        self,
        search: Optional[str] = None,
        sort_by: str = "name",
        order: str = "asc",
    ) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        data, error = self._request(
            "GET", "/stores/", params={"search": search, "sort_by": sort_by, "order": order}
        )
        return (data or [], error)

    def create_store(self, fields: Dict[str, Any]) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._request("POST", "/stores/", json_body=fields)

    def get_store(self, store_id: str) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._request("GET", f"/stores/{store_id}")

    def update_store(self, store_id: str, patch: Dict[str, Any]) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._request("PUT", f"/stores/{store_id}", json_body=patch)

    def delete_store(self, store_id: str) -> Tuple[bool, Optional[Error]]:
        _, error = self._request("DELETE", f"/stores/{store_id}")
        return error is None, error

    # ------------------------------------------------------------------
    # Ratings
    # ------------------------------------------------------------------
    def rate_store(self, store_id: str, rating: int) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        """Submit or update the current user's rating of a store."""
        return self._request("POST", f"/stores/{store_id}/ratings", json_body={"rating": rating})

    def my_rating(self, store_id: str) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._request("GET", f"/stores/{store_id}/ratings/me")

    def list_ratings(
        self, store_id: Optional[str] = None, user_id: Optional[str] = None
    ) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        data, error = self._request("GET", "/ratings/", params={"store_id": store_id, "user_id": user_id})
        return (data or [], error)

    def rating_summary(self) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._request("GET", "/ratings/summary")

    def delete_rating(self, rating_id: str) -> Tuple[bool, Optional[Error]]:
        _, error = self._request("DELETE", f"/ratings/{rating_id}")
        return error is None, error

    # ------------------------------------------------------------------
    # Dashboards
    # ------------------------------------------------------------------
    def admin_overview(self) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._request("GET", "/statistics/overview")

    def owner_dashboard(self) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._request("GET", "/statistics/owner")
