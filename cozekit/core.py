"""HTTP plumbing shared by every API resource: requests, errors, paging."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, BinaryIO, Callable, Generic, Iterator, Mapping, TypeVar

import httpx

from .auth import Auth

COM_BASE_URL = "https://api.coze.com"
CN_BASE_URL = "https://api.coze.cn"

HTTP_LOG_ID_KEY = "X-Tt-Logid"
AUTHORIZE_HEADER = "Authorization"
DEFAULT_TIMEOUT = 5.0

T = TypeVar("T")

log = logging.getLogger(__name__)


@dataclass
class HTTPResponse:
    """Status, headers and body of a finished HTTP exchange."""

    status: int
    headers: httpx.Headers = field(default_factory=httpx.Headers)
    content_length: int | None = None
    payload: Any = None
    content: bytes = b""

    def log_id(self) -> str:
        """The server-side log id of the request, or an empty string."""
        return self.headers.get(HTTP_LOG_ID_KEY, "")


class CozeAPIError(Exception):
    """The API answered with an HTTP error or a non-zero business code."""

    def __init__(
        self,
        message: str,
        *,
        code: int = 0,
        status: int | None = None,
        log_id: str = "",
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.status = status
        self.log_id = log_id

    def __str__(self) -> str:
        parts = [f"code={self.code}", f"msg={self.message}"]
        if self.status is not None:
            parts.append(f"status={self.status}")
        if self.log_id:
            parts.append(f"logid={self.log_id}")
        return ", ".join(parts)


class ApiModel:
    """Base for results that remember the HTTP response they came from."""

    http_response: HTTPResponse | None = None

    def log_id(self) -> str:
        if self.http_response is None:
            return ""
        return self.http_response.log_id()


PageFetcher = Callable[[int, int], "tuple[list[T], bool, int, str]"]


class Page(Generic[T]):
    """One page of a numbered listing; iterating walks every following page.

    The fetcher takes ``(page_num, page_size)`` and returns
    ``(items, has_more, total, log_id)``. The first page is fetched at once,
    so errors surface when the page is created.
    """

    def __init__(
        self,
        fetcher: Callable[[int, int], tuple[list[T], bool, int, str]],
        page_num: int = 1,
        page_size: int = 20,
    ) -> None:
        self._fetcher = fetcher
        self.page_num = page_num
        self.page_size = page_size
        items, has_more, total, log_id = fetcher(page_num, page_size)
        self.items: list[T] = list(items)
        self.has_more = has_more
        self.total = total
        self.log_id = log_id

    def __iter__(self) -> Iterator[T]:
        page: Page[T] = self
        while True:
            yield from page.items
            if not page.has_more or not page.items:
                return
            page = Page(self._fetcher, page.page_num + 1, page.page_size)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(page_num={self.page_num}, "
            f"page_size={self.page_size}, items={len(self.items)}, "
            f"has_more={self.has_more})"
        )


def _wrap(response: httpx.Response, payload: Any = None) -> HTTPResponse:
    length = response.headers.get("content-length")
    return HTTPResponse(
        status=response.status_code,
        headers=response.headers,
        content_length=int(length) if length and length.isdigit() else None,
        payload=payload,
        content=response.content,
    )


def _check(response: httpx.Response) -> HTTPResponse:
    """Decode a read response, raising CozeAPIError on any failure."""
    log_id = response.headers.get(HTTP_LOG_ID_KEY, "")
    try:
        payload = response.json()
    except ValueError:
        payload = None
    code = 0
    msg = ""
    if isinstance(payload, dict):
        code = int(payload.get("code") or 0)
        msg = str(payload.get("msg") or "")
    if not response.is_success or code != 0:
        raise CozeAPIError(
            msg or f"HTTP {response.status_code}",
            code=code,
            status=response.status_code,
            log_id=log_id,
        )
    return _wrap(response, payload)


class Core:
    """Sends requests to the API and turns failures into exceptions."""

    def __init__(
        self,
        base_url: str = COM_BASE_URL,
        client: httpx.Client | None = None,
        auth: Auth | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.auth = auth
        self._owns_client = client is None
        self.client = client if client is not None else httpx.Client(timeout=DEFAULT_TIMEOUT)

    def __enter__(self) -> Core:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying HTTP client if this object created it."""
        if self._owns_client:
            self.client.close()

    def _headers(self) -> dict[str, str]:
        if self.auth is None:
            return {}
        return {AUTHORIZE_HEADER: f"Bearer {self.auth.token()}"}

    def _build(
        self,
        method: str,
        path: str,
        *,
        body: Any = None,
        params: Mapping[str, Any] | None = None,
        files: Any = None,
        data: Mapping[str, str] | None = None,
    ) -> httpx.Request:
        query = {k: v for k, v in (params or {}).items() if v is not None}
        return self.client.build_request(
            method,
            self.base_url + path,
            json=body,
            params=query or None,
            headers=self._headers(),
            files=files,
            data=data,
        )

    def _send(self, request: httpx.Request) -> HTTPResponse:
        log.debug("%s %s", request.method, request.url)
        response = self.client.send(request)
        return _check(response)

    def request(
        self,
        method: str,
        path: str,
        body: Any = None,
        params: Mapping[str, Any] | None = None,
    ) -> HTTPResponse:
        """Send a JSON request and return the decoded JSON response."""
        return self._send(self._build(method, path, body=body, params=params))

    def raw_request(self, method: str, path: str, body: Any = None) -> HTTPResponse:
        """Send a JSON request and return the raw response body in ``content``."""
        request = self._build(method, path, body=body)
        response = self.client.send(request)
        if not response.is_success:
            _check(response)
        return _wrap(response)

    def stream_request(
        self,
        method: str,
        path: str,
        body: Any = None,
        params: Mapping[str, Any] | None = None,
    ) -> httpx.Response:
        """Send a request and return the still-open streaming response.

        The caller owns the returned response and must close it.
        """
        request = self._build(method, path, body=body, params=params)
        response = self.client.send(request, stream=True)
        content_type = response.headers.get("content-type", "")
        if not response.is_success or content_type.startswith("application/json"):
            try:
                response.read()
                _check(response)
            except BaseException:
                response.close()
                raise
        return response

    def upload_file(
        self,
        path: str,
        file: BinaryIO | bytes,
        filename: str,
        fields: Mapping[str, str] | None = None,
    ) -> HTTPResponse:
        """Upload ``file`` as multipart form data together with ``fields``."""
        request = self._build(
            "POST",
            path,
            files={"file": (filename, file)},
            data=dict(fields) if fields else None,
        )
        return self._send(request)