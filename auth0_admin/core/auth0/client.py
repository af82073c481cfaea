"""Low-level HTTP client for the Auth0 Management API.

Handles token acquisition, HTTP operations, error decoding and paging.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, List, Optional

import requests

from .exceptions import Auth0APIError, MalformedResponseError, TokenRequestError

REQUEST_TIMEOUT = 30
DEFAULT_PAGE_SIZE = 100
API_PATH = "/api/v2/"

logger = logging.getLogger(__name__)


@dataclass
class Page:
    """One page of a Management API collection.

    ``start``/``limit``/``length``/``total`` mirror the paging fields Auth0
    returns when ``include_totals`` is set; they stay ``None`` when the
    endpoint answered with a bare list.
    """
    items: List[Dict[str, Any]] = field(default_factory=list)
    start: Optional[int] = None
    limit: Optional[int] = None
    length: Optional[int] = None
    total: Optional[int] = None

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self):
        return iter(self.items)

    def to_dict(self, key: str) -> Dict[str, Any]:
        return {
            key: self.items,
            "start": self.start,
            "limit": self.limit,
            "length": self.length,
            "total": self.total,
        }


def base_url_for_domain(domain: str) -> str:
    """Return ``https://{domain}/`` for a bare tenant domain.

    Values that already carry a scheme are kept and given a trailing slash.
    """
    domain = domain.strip()
    if domain.startswith(("http://", "https://")):
        return domain.rstrip("/") + "/"
    return f"https://{domain.strip('/')}/"


def audience_for(base_url: str) -> str:
    """Management API audience for a tenant base URL, without a doubled slash."""
    api_path = API_PATH
    if base_url.endswith("/"):
        api_path = api_path[1:]
    return base_url + api_path


def get_access_token(base_url: str, client_id: str, client_secret: str) -> str:
    """Fetch a Management API token using the client credentials flow.

    Args:
        base_url: Tenant base URL (e.g. https://tenant.eu.auth0.com/)
        client_id: Machine-to-machine client ID
        client_secret: Machine-to-machine client secret

    Returns:
        Bearer access token

    Raises:
        TokenRequestError: Token endpoint answered with a non-success status
        MalformedResponseError: Response body is not JSON or lacks access_token
    """
    url = f"{base_url.rstrip('/')}/oauth/token"
    payload = {
        "client_id": client_id,
        "client_secret": client_secret,
        "audience": audience_for(base_url),
        "grant_type": "client_credentials",
    }
    logger.debug("[token] Requesting Management API token from %s", url)
    resp = requests.post(url, json=payload, timeout=REQUEST_TIMEOUT)
    if not 200 <= resp.status_code < 300:
        raise TokenRequestError(resp.status_code, resp.text)

    try:
        data = resp.json()
    except ValueError as exc:
        raise MalformedResponseError(f"Token response from {url} is not JSON") from exc

    token = data.get("access_token") if isinstance(data, dict) else None
    if not isinstance(token, str):
        raise MalformedResponseError(f"Token response from {url} did not include an access_token")
    return token


class ManagementClient:
    """HTTP client for the Auth0 Management API.

    Usage:
        token = get_access_token("https://tenant.auth0.com/", client_id, client_secret)
        client = ManagementClient("https://tenant.auth0.com/", token)
        resp = client.get("/organizations", params={"page": 0})
    """

    def __init__(self, base_url: str, token: str):
        """Initialize Management API client.

        Args:
            base_url: Tenant base URL, with or without trailing slash
            token: Bearer token for the Management API audience
        """
        self.base_url = base_url.rstrip("/")
        self._token = token

    def _url(self, path: str) -> str:
        return f"{self.base_url}/api/v2/{path.lstrip('/')}"

    def _headers(self, extra: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        headers = {"Authorization": f"Bearer {self._token}"}
        if extra:
            headers.update(extra)
        return headers

    def get(self, path: str, params: Optional[Dict] = None, **kwargs) -> requests.Response:
        """Execute GET request.

        Raises:
            Auth0APIError: On HTTP error
        """
        resp = requests.get(
            self._url(path),
            params=params,
            headers=self._headers(kwargs.pop("headers", None)),
            timeout=REQUEST_TIMEOUT,
            **kwargs,
        )
        self._handle_error(resp)
        return resp

    def post(self, path: str, json: Optional[Any] = None, **kwargs) -> requests.Response:
        """Execute POST request with a JSON payload.

        Raises:
            Auth0APIError: On HTTP error
        """
        resp = requests.post(
            self._url(path),
            json=json,
            headers=self._headers(kwargs.pop("headers", None)),
            timeout=REQUEST_TIMEOUT,
            **kwargs,
        )
        self._handle_error(resp)
        return resp

    def patch(self, path: str, json: Optional[Any] = None, **kwargs) -> requests.Response:
        """Execute PATCH request with a JSON payload.

        Raises:
            Auth0APIError: On HTTP error
        """
        resp = requests.patch(
            self._url(path),
            json=json,
            headers=self._headers(kwargs.pop("headers", None)),
            timeout=REQUEST_TIMEOUT,
            **kwargs,
        )
        self._handle_error(resp)
        return resp

    def get_json(self, path: str, params: Optional[Dict] = None) -> Any:
        resp = self.get(path, params=params)
        return _json_or_none(resp)

    def post_json(self, path: str, json: Optional[Any] = None) -> Any:
        resp = self.post(path, json=json)
        return _json_or_none(resp)

    def list_page(
        self,
        path: str,
        key: str,
        page: int = 0,
        per_page: int = DEFAULT_PAGE_SIZE,
        include_totals: bool = True,
        params: Optional[Dict[str, Any]] = None,
    ) -> Page:
        """Fetch one page of a collection endpoint.

        Args:
            path: Collection path (e.g. "/roles")
            key: Name of the collection inside the totals envelope (e.g. "roles")
            page: Zero-based page index
            per_page: Requested page size
            include_totals: Ask Auth0 for the paging envelope
            params: Extra query parameters (filters)

        Returns:
            Page with the items and whatever paging fields the endpoint returned
        """
        query: Dict[str, Any] = {
            "page": page,
            "per_page": per_page,
            "include_totals": "true" if include_totals else "false",
        }
        for name, value in (params or {}).items():
            if value is None:
                continue
            query[name] = str(value).lower() if isinstance(value, bool) else value

        data = self.get_json(path, params=query)
        return _page_from_payload(data, key, path)

    def _handle_error(self, resp: requests.Response) -> None:
        """Centralized error handling for HTTP responses.

        Raises:
            Auth0APIError: If response status indicates error
        """
        if resp.status_code < 400:
            return

        message = resp.text
        error_code = None
        try:
            body = resp.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            message = body.get("message") or body.get("error") or message
            error_code = body.get("errorCode")
        raise Auth0APIError(resp.status_code, message, resp.url, error_code)


def _json_or_none(resp: requests.Response) -> Any:
    if resp.status_code == 204 or not resp.text:
        return None
    try:
        return resp.json()
    except ValueError as exc:
        raise MalformedResponseError(f"Response from {resp.url} is not JSON") from exc


def _page_from_payload(data: Any, key: str, path: str) -> Page:
    if isinstance(data, list):
        return Page(items=data, length=len(data))
    if not isinstance(data, dict) or not isinstance(data.get(key, []), list):
        raise MalformedResponseError(f"Unexpected page shape from {path}: missing '{key}' list")

    items = data.get(key, [])
    # Actions endpoints report page/per_page instead of start/limit
    limit = data.get("limit", data.get("per_page"))
    start = data.get("start")
    if start is None and data.get("page") is not None and limit is not None:
        start = data["page"] * limit
    return Page(
        items=items,
        start=start,
        limit=limit,
        length=data.get("length", len(items)),
        total=data.get("total"),
    )


def iter_pages(fetch_page: Callable[[int], Page], per_page: int = DEFAULT_PAGE_SIZE) -> Iterator[Page]:
    """Walk a paged collection from page 0 upwards.

    A page holding fewer than ``per_page`` items is the last one; the loop
    stops right after yielding it.
    """
    page = 0
    while True:
        result = fetch_page(page)
        yield result
        if len(result) < per_page:
            return
        page += 1
