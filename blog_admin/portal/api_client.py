"""HTTP client for the admin endpoints, used by the pending-change ledger."""
import logging
from typing import Optional
from urllib.parse import quote

import requests

logger = logging.getLogger(__name__)


class AdminApiError(Exception):
    """An admin endpoint could not be reached or did not report success."""

    def __init__(self, message, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class AdminApiClient:
    def __init__(self, base_url: str, *, session: Optional[requests.Session] = None, timeout=None):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def _request(self, method, path, payload=None) -> dict:
        url = f"{self.base_url}/api/admin/{path}"
        try:
            resp = self.session.request(method, url, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            raise AdminApiError(f"{method} {url} failed: {e}") from e
        try:
            data = resp.json()
        except ValueError:
            data = {}
        if not resp.ok:
            message = data.get("message") if isinstance(data, dict) else None
            raise AdminApiError(message or f"{method} {url} returned {resp.status_code}", resp.status_code)
        if isinstance(data, dict) and data.get("success") is False:
            raise AdminApiError(data.get("message") or f"{method} {url} reported failure", resp.status_code)
        if isinstance(data, dict) and data.get("warning"):
            logger.warning("%s %s: %s", method, path, data["warning"])
        return data

    def get_homepage_config(self) -> dict:
        return self._request("GET", "homepage/config")["config"]

    def save_homepage_config(self, config: dict) -> dict:
        return self._request("POST", "homepage/config", {"config": config})

    def get_settings(self) -> dict:
        return self._request("GET", "settings")["settings"]

    def save_settings(self, settings: dict) -> dict:
        return self._request("POST", "settings", {"settings": settings})

    def deploy_batch(self, changes: list) -> dict:
        return self._request("POST", "deploy/batch", {"changes": changes})

    def commit(self, message: Optional[str] = None) -> dict:
        return self._request("POST", "deployment/commit", {"message": message} if message else {})

    def get_post_content(self, slug: str) -> str:
        return self._request("GET", f"posts/{quote(slug, safe='')}/content")["content"]
