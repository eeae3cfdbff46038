"""HTTP transport with timeouts and optional connection-level retries."""

from __future__ import annotations

from dataclasses import dataclass
from types import TracebackType
from typing import Any, Mapping

import requests
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential_jitter

from geonames.common.constants import USER_AGENT

RETRYABLE_EXCEPTIONS = (requests.ConnectionError, requests.Timeout)


@dataclass(frozen=True)
class TimeoutConfig:
    connect: float = 20.0
    read: float = 120.0

    @classmethod
    def total(cls, seconds: float) -> "TimeoutConfig":
        return cls(connect=seconds, read=seconds)


@dataclass(frozen=True)
class RetryConfig:
    max_attempts: int = 1
    multiplier: float = 1.0
    max_wait: float = 30.0


class HttpClient:
    """Thin wrapper over a ``requests.Session``.

    Only connection failures and timeouts are retried, and only when
    ``RetryConfig.max_attempts`` is raised above one. Status codes are
    left to the caller.
    """

    def __init__(
        self,
        *,
        timeout: TimeoutConfig | None = None,
        retry: RetryConfig | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self.timeout = timeout or TimeoutConfig()
        self.retry = retry or RetryConfig()
        self.session = session or requests.Session()

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

    def _headers(self, headers: Mapping[str, str] | None) -> dict[str, str]:
        out = {"User-Agent": USER_AGENT}
        if headers:
            out.update(headers)
        return out

    def _request(
        self,
        method: str,
        url: str,
        *,
        params: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
        stream: bool = False,
        timeout: TimeoutConfig | None = None,
    ) -> requests.Response:
        req_timeout = timeout or self.timeout
        return self.session.request(
            method=method,
            url=url,
            params=params,
            headers=self._headers(headers),
            timeout=(req_timeout.connect, req_timeout.read),
            stream=stream,
        )

    def get(
        self,
        url: str,
        *,
        params: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
        stream: bool = False,
        timeout: TimeoutConfig | None = None,
    ) -> requests.Response:
        @retry(
            stop=stop_after_attempt(self.retry.max_attempts),
            wait=wait_exponential_jitter(
                initial=self.retry.multiplier,
                max=self.retry.max_wait,
                jitter=1.0,
            ),
            retry=retry_if_exception_type(RETRYABLE_EXCEPTIONS),
            reraise=True,
        )
        def _wrapped() -> requests.Response:
            return self._request(
                "GET",
                url,
                params=params,
                headers=headers,
                stream=stream,
                timeout=timeout,
            )

        return _wrapped()


def normalize_base_url(base_url: str) -> str:
    base_url = base_url.strip()
    idx = base_url.find("?")
    if idx != -1:
        base_url = base_url[:idx]
    return base_url.rstrip("/")
