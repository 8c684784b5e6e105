"""Deadline-bounded HTTP GET."""

from __future__ import annotations

import asyncio
from typing import Mapping, Optional

import requests

from ..errors import FetchTimeoutError, NetworkError

DEFAULT_TIMEOUT_SECONDS = 8.0
DEFAULT_BROWSER_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/120.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,application/json;q=0.8,*/*;q=0.7",
    "Accept-Language": "zh-TW,zh;q=0.9,en-US;q=0.8,en;q=0.7",
    "Cache-Control": "no-cache",
}


async def fetch_with_deadline(
        url: str,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        *,
        session: Optional[requests.Session] = None,
        headers: Optional[Mapping[str, str]] = None,
) -> requests.Response:
    """GET ``url`` and give up once ``timeout`` seconds have elapsed.

    The blocking request runs on a worker thread. ``asyncio.wait_for`` cancels
    the wait at the deadline and the same value is passed to ``requests`` so
    the worker does not outlive it by more than one socket timeout. A request
    past its deadline is abandoned, not aborted: the worker thread finishes on
    its own and its response is discarded. No retries happen here.

    Without ``session`` every call goes through ``requests.get`` and its own
    connection pool, which keeps concurrent calls off a shared ``Session``.

    Raises
    ------
    FetchTimeoutError
        When the deadline fires first.
    NetworkError
        For any other transport failure.
    """

    if timeout <= 0:
        raise ValueError("timeout must be positive.")
    getter = session.get if session is not None else requests.get
    request_headers = dict(headers if headers is not None else DEFAULT_BROWSER_HEADERS)

    def _send() -> requests.Response:
        return getter(url, headers=request_headers, timeout=timeout)

    try:
        return await asyncio.wait_for(asyncio.to_thread(_send), timeout=timeout)
    except (asyncio.TimeoutError, requests.Timeout) as exc:
        raise FetchTimeoutError(url, timeout) from exc
    except requests.RequestException as exc:
        raise NetworkError(f"Request to {url} failed: {exc}", url=url) from exc
