"""Apparel API client.

A thin wrapper around the Apparel HTTP API built on ``requests``.  It
follows the same flow as the browser login page: ``register`` or
``login`` posts the credentials, the server answers with the ``login``
session cookie, and the underlying ``requests.Session`` replays that
cookie on every later call.

Every method returns a tuple ``(data, error)``.  ``data`` holds the
parsed JSON response on success and ``error`` is ``None``; on failure
``data`` is ``None`` (or an empty list for listings) and ``error`` is a
dictionary with ``status_code``, ``code`` and ``message`` keys.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import quote

import requests


logger = logging.getLogger(__name__)

Result = Tuple[Optional[Any], Optional[Dict[str, Any]]]


class ApparelClient:
    """Client for a user's wardrobe on an Apparel API server."""

    def __init__(
        self,
        *,
        base_url: str,
        session: Optional[requests.Session] = None,
        timeout: float = 15,
    ) -> None:
        """Initialise the API client.

        Args:
            base_url: Base URL for the API, e.g. ``http://localhost:5000``.
            session: Optional requests session.  If not supplied a
                session will be created automatically.
            timeout: Seconds to wait for each response.
        """
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout
        self.username: Optional[str] = None

    # ------------------------------------------------------------------
    # Low level HTTP helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _error_from_response(response: requests.Response) -> Dict[str, Any]:
        code = None
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and isinstance(body.get("error"), dict):
            code = body["error"].get("code")
            message = body["error"].get("message")
        elif isinstance(body, dict) and "detail" in body:
            message = body["detail"] if isinstance(body["detail"], str) else json.dumps(body["detail"])
        else:
            message = response.text or response.reason
        return {"status_code": response.status_code, "code": code, "message": message}

    def _request(
        self,
        method: str,
        path: str,
        *,
        json_body: Any | None = None,
        data: Dict[str, Any] | None = None,
        files: Dict[str, Any] | None = None,
    ) -> Result:
        """Perform an HTTP request to the API.

        Args:
            method: HTTP method (``GET``, ``POST``).
            path: Path relative to :attr:`base_url` (e.g. ``/login``).
            json_body: JSON body to send with the request.
            data: Form fields for multipart requests.
            files: Files for multipart requests.
        Returns:
            A tuple ``(data, error)``.
        """
        url = f"{self.base_url}{path}"
        try:
            logger.debug("Sending %s request to %s", method, url)
            response = self.session.request(
                method=method,
                url=url,
                json=json_body,
                data=data,
                files=files,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.error("API request failed: %s", exc)
            return None, {"status_code": None, "code": None, "message": str(exc)}
        if not response.ok:
            error = self._error_from_response(response)
            logger.error("API request failed (%s): %s", error["status_code"], error["message"])
            return None, error
        if response.content:
            return response.json(), None
        return None, None

    def _require_login(self) -> Optional[Dict[str, Any]]:
        if self.username is None:
            return {"status_code": None, "code": "session_expired", "message": "Not logged in"}
        return None

    # ------------------------------------------------------------------
    # Authentication
    # ------------------------------------------------------------------
    def register(self, username: str, password: str) -> Result:
        data, error = self._request("POST", "/register", json_body={"username": username, "password": password})
        if not error:
            self.username = username
        return data, error

    def login(self, username: str, password: str) -> Result:
        data, error = self._request("POST", "/login", json_body={"username": username, "password": password})
        if not error:
            self.username = username
        return data, error

    def logout(self) -> Result:
        data, error = self._request("POST", "/logout")
        self.username = None
        return data, error

    # ------------------------------------------------------------------
    # Wardrobe
    # ------------------------------------------------------------------
    def _post_record(self, kind: str, record: Dict[str, Any], image_path: Optional[str]) -> Result:
        error = self._require_login()
        if error:
            return None, error
        form = {"data": json.dumps(record)}
        path = f"/post/{kind}/{quote(self.username, safe='')}"
        if image_path is None:
            return self._request("POST", path, data=form)
        with open(image_path, "rb") as fh:
            return self._request("POST", path, data=form, files={"image": fh})

    def add_item(self, item: Dict[str, Any], image_path: Optional[str] = None) -> Result:
        """Upload an item, optionally with a picture."""
        return self._post_record("item", item, image_path)

    def add_outfit(self, outfit: Dict[str, Any], image_path: Optional[str] = None) -> Result:
        return self._post_record("outfit", outfit, image_path)

    def _list(self, path: str) -> Tuple[List[Dict[str, Any]], Optional[Dict[str, Any]]]:
        error = self._require_login()
        if error:
            return [], error
        data, error = self._request("GET", path)
        if error:
            return [], error
        return data if isinstance(data, list) else [], None

    def items(self) -> Tuple[List[Dict[str, Any]], Optional[Dict[str, Any]]]:
        return self._list(f"/get/items/{quote(self.username or '', safe='')}")

    def outfits(self) -> Tuple[List[Dict[str, Any]], Optional[Dict[str, Any]]]:
        return self._list(f"/get/outfits/{quote(self.username or '', safe='')}")

    def item(self, item_id: int) -> Result:
        return self._request("GET", f"/get/oneitem/{int(item_id)}")

    def search(self, keyword: str) -> Tuple[List[Dict[str, Any]], Optional[Dict[str, Any]]]:
        """Broad keyword search over the logged-in user's items."""
        user = quote(self.username or "", safe="")
        return self._list(f"/search/all/{user}/{quote(keyword, safe='')}")

    def filter(self, field: str, keyword: str) -> Tuple[List[Dict[str, Any]], Optional[Dict[str, Any]]]:
        """Filter the logged-in user's items on one field."""
        error = self._require_login()
        if error:
            return [], error
        data, error = self._request(
            "POST",
            "/search/field",
            json_body={"username": self.username, "field": field, "keyword": keyword},
        )
        if error:
            return [], error
        return data or [], None

    def set_gender(self, gender: str) -> Result:
        error = self._require_login()
        if error:
            return None, error
        return self._request("POST", "/user/gender", json_body={"username": self.username, "gender": gender})

    def filenames(self, directory: str) -> Tuple[List[str], Optional[Dict[str, Any]]]:
        data, error = self._request("GET", f"/filenames/{quote(directory, safe='/')}")
        if error:
            return [], error
        return data or [], None
