from __future__ import annotations

import logging
import time
from typing import Any, Dict, Iterator, Optional

import requests

_logger = logging.getLogger(__name__)

RETRY_STATUSES = (429, 500, 502, 503, 504)


# ----------------------------------------------------------------------
# Connection
# ----------------------------------------------------------------------
class Connection:
    """Salesforce REST connection built from an instance URL and a session id.

    Creating one does no network I/O; the session is used as-is and is not
    refreshed when it expires.
    """

    def __init__(
        self,
        server_url: str,
        session_id: str,
        *,
        api_version: Optional[str] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        if not server_url or not session_id:
            raise ValueError("Connection needs both a server_url and a session_id.")
        self.server_url = server_url.rstrip("/")
        self.session_id = session_id
        self.api_version = api_version
        self.session = session or requests.Session()
        self.session.headers.update({"Authorization": f"Bearer {self.session_id}"})

    def __repr__(self) -> str:
        return f"Connection(server_url={self.server_url!r}, api_version={self.api_version!r})"

    @property
    def instance_url(self) -> str:
        return self.server_url

    @property
    def version(self) -> str:
        """API version in use, discovered on first access if not pinned."""
        if not self.api_version:
            self.api_version = self._discover_latest_api_version()
        return self.api_version

    # --------------------------- Public methods -----------------------

    def identity(self) -> Dict[str, Any]:
        """Return identity information for the session's user."""
        return self._get(f"{self.server_url}/services/oauth2/userinfo").json()

    def limits(self) -> Dict[str, Any]:
        """Return API usage limits."""
        return self._get(self._data_url("limits")).json()

    def query(self, soql: str) -> Dict[str, Any]:
        """Run a SOQL query (first page only)."""
        return self._get(self._data_url("query"), params={"q": soql}).json()

    def query_all_iter(self, soql: str) -> Iterator[Dict[str, Any]]:
        """Yield records across pages via nextRecordsUrl."""
        res = self.query(soql)
        for r in res.get("records", []):
            yield r
        next_url = res.get("nextRecordsUrl")
        while next_url:
            res = self._get(f"{self.server_url}{next_url}").json()
            for r in res.get("records", []):
                yield r
            next_url = res.get("nextRecordsUrl")

    def describe_global(self) -> Dict[str, Any]:
        """Return /sobjects (global describe)."""
        return self._get(self._data_url("sobjects")).json()

    def describe_object(self, name: str) -> Dict[str, Any]:
        """Return /sobjects/{name}/describe."""
        return self._get(self._data_url(f"sobjects/{name}/describe")).json()

    def request(self, method: str, path: str, **kwargs: Any) -> requests.Response:
        """Call any REST path; relative paths are taken from the instance root."""
        url = path if path.startswith("http") else f"{self.server_url}/{path.lstrip('/')}"
        return self._request(method, url, **kwargs)

    # --------------------------- Internal helpers --------------------

    def _data_url(self, suffix: str) -> str:
        return f"{self.server_url}/services/data/{self.version}/{suffix}"

    def _discover_latest_api_version(self) -> str:
        """Find the latest available API version."""
        r = self._get(f"{self.server_url}/services/data/")
        versions = r.json()
        if not versions:
            raise RuntimeError(f"No API versions advertised by {self.server_url}")
        best = sorted(versions, key=lambda v: float(v.get("version", "0")), reverse=True)[0]
        version_str = best.get("url", "").rstrip("/").split("/")[-1]
        _logger.debug("Latest API version discovered: %s", version_str)
        return version_str

    def _get(self, url: str, *, params: Optional[Dict[str, Any]] = None) -> requests.Response:
        return self._request("GET", url, params=params)

    def _request(
        self,
        method: str,
        url: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        data: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
        retries: int = 3,
        backoff: float = 0.8,
        timeout: float = 30.0,
    ) -> requests.Response:
        """Generic request with retry and logging."""
        for attempt in range(1, retries + 1):
            try:
                r = self.session.request(
                    method,
                    url,
                    params=params,
                    data=data,
                    json=json,
                    timeout=timeout,
                )
            except requests.RequestException as e:
                _logger.warning("Request error (attempt %d/%d): %s", attempt, retries, e)
                if attempt == retries:
                    raise
                time.sleep(backoff * attempt)
                continue

            if r.status_code < 400:
                return r

            if r.status_code in RETRY_STATUSES and attempt < retries:
                _logger.warning("HTTP %s -> retrying %d/%d", r.status_code, attempt, retries)
                time.sleep(backoff * attempt)
                continue

            try:
                detail = r.json()
            except ValueError:
                detail = r.text
            _logger.error("HTTP %s error for %s: %s", r.status_code, url, detail)
            r.raise_for_status()
        raise RuntimeError("Exceeded maximum retries.")
