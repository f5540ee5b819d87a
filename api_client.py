import logging

import requests

from settings import load_settings

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Raised for transport failures, non-2xx responses and malformed payloads.

    status is None when no response was received at all; detail is the
    server's own message, when it sent one.
    """

    def __init__(self, message: str, status: int | None = None, detail: str | None = None):
        super().__init__(message)
        self.message = message
        self.status = status
        self.detail = detail


def unwrap_list(payload):
    # Public endpoints return either a bare array or a paginated {"results": [...]}
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict) and isinstance(payload.get("results"), list):
        return payload["results"]
    raise ApiError("Malformed response: expected a list")


def _server_detail(r):
    try:
        body = r.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        for key in ("message", "detail", "error"):
            if body.get(key):
                return str(body[key])
    return None


class ApiClient:
    def __init__(self, origin: str, timeout: float = 30, token: str | None = None):
        self.origin = origin.rstrip("/")
        self.timeout = timeout
        self.token = token

    def with_token(self, token):
        return ApiClient(self.origin, self.timeout, token)

    def _headers(self, json_body=True):
        h = {"Accept": "application/json"}
        if json_body:
            h["Content-Type"] = "application/json"
        if self.token:
            h["Authorization"] = f"Bearer {self.token}"
        return h

    def _request(self, method, path, json=None, data=None, files=None):
        url = f"{self.origin}{path}"
        multipart = files is not None or data is not None
        logger.debug("%s %s", method, url)
        try:
            r = requests.request(
                method,
                url,
                headers=self._headers(json_body=not multipart),
                json=json,
                data=data,
                files=files,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.warning("%s %s failed: %s", method, url, e)
            raise ApiError(f"Network error: {e}") from e

        if not r.ok:
            detail = _server_detail(r)
            logger.warning("%s %s -> %s (%s)", method, url, r.status_code, detail)
            raise ApiError(detail or f"HTTP {r.status_code}", status=r.status_code, detail=detail)

        if r.status_code == 204 or not r.content:
            return None
        try:
            return r.json()
        except ValueError as e:
            raise ApiError("Malformed response", status=r.status_code) from e

    def get(self, path):
        return self._request("GET", path)

    def post(self, path, json=None, data=None, files=None):
        return self._request("POST", path, json=json, data=data, files=files)

    def put(self, path, json=None, data=None, files=None):
        return self._request("PUT", path, json=json, data=data, files=files)

    def delete(self, path):
        return self._request("DELETE", path)


def get_api():
    cfg = load_settings()
    return ApiClient(cfg.api_origin, cfg.api_timeout)
