"""HTTP client with explicit timeouts and status-to-error mapping.

No retries happen here: every request is attempted once and a failed run is
recovered by re-running the whole pipeline.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import TracebackType
from typing import Any

import requests

from pactometro.common.constants import USER_AGENT
from pactometro.common.errors import PipelineError

_MAX_LOGGED_BODY = 500


@dataclass(frozen=True)
class TimeoutConfig:
    connect: float = 20.0
    read: float = 120.0


class HttpRequestError(PipelineError):
    error_code = "HTTP_ERROR"

    def __init__(self, message: str, *, url: str, status: int | None = None, body: str = "") -> None:
        super().__init__(message)
        self.url = url
        self.status = status
        self.body = body


class HttpClient:
    def __init__(
        self,
        *,
        timeout: TimeoutConfig | None = None,
        auth: tuple[str, str] | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        self.timeout = timeout or TimeoutConfig()
        self.session = requests.Session()
        if auth is not None:
            self.session.auth = auth
        self.default_headers = dict(headers or {})

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "HttpClient":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def _headers(self, headers: dict[str, str] | None, accept: str) -> dict[str, str]:
        out = {"User-Agent": USER_AGENT, "Accept": accept}
        out.update(self.default_headers)
        if headers:
            out.update(headers)
        return out

    def _raise_for_status(self, response: requests.Response, url: str) -> None:
        status = response.status_code
        if 200 <= status < 300:
            return
        body = response.text or ""
        raise HttpRequestError(
            f"HTTP {status} from {url}: {body[:_MAX_LOGGED_BODY]}",
            url=url,
            status=status,
            body=body,
        )

    def request(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        json_body: Any = None,
        headers: dict[str, str] | None = None,
        accept: str = "*/*",
        timeout: TimeoutConfig | None = None,
    ) -> requests.Response:
        req_timeout = timeout or self.timeout
        try:
            response = self.session.request(
                method=method,
                url=url,
                params=params,
                json=json_body,
                headers=self._headers(headers, accept),
                timeout=(req_timeout.connect, req_timeout.read),
            )
        except requests.RequestException as exc:
            raise HttpRequestError(f"Request to {url} failed: {exc}", url=url) from exc
        self._raise_for_status(response, url)
        return response

    def get_text(
        self,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        timeout: TimeoutConfig | None = None,
        encoding: str | None = "utf-8",
    ) -> str:
        response = self.request("GET", url, params=params, headers=headers, accept="text/plain, */*", timeout=timeout)
        if encoding is not None:
            # The feed omits a charset; requests would otherwise assume latin-1.
            response.encoding = encoding
        return response.text

    def get_json(
        self,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        timeout: TimeoutConfig | None = None,
    ) -> Any:
        response = self.request("GET", url, params=params, headers=headers, accept="application/json", timeout=timeout)
        try:
            return response.json()
        except ValueError as exc:
            raise HttpRequestError(f"Invalid JSON payload from {url}", url=url, status=response.status_code) from exc

    def post_json(
        self,
        url: str,
        payload: Any,
        *,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        timeout: TimeoutConfig | None = None,
    ) -> requests.Response:
        merged = {"Content-Type": "application/json"}
        if headers:
            merged.update(headers)
        return self.request(
            "POST",
            url,
            params=params,
            json_body=payload,
            headers=merged,
            accept="application/json",
            timeout=timeout,
        )
