"""Fetch third-party pages through an ordered rotation of CORS proxies."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Optional, Sequence

import requests

from ..errors import AllProxiesFailedError, NetworkError, ProxyHTTPError, ProxyShapeError
from .base import ProxyDescriptor, ResponseShape
from .http import DEFAULT_TIMEOUT_SECONDS, fetch_with_deadline

logger = logging.getLogger(__name__)

DEFAULT_PROXIES: tuple[ProxyDescriptor, ...] = (
    ProxyDescriptor(
        name="allorigins",
        url_template="https://api.allorigins.win/get?url={target}",
        response_shape=ResponseShape.JSON_WRAPPED,
    ),
    ProxyDescriptor(
        name="corsproxy",
        url_template="https://corsproxy.io/?{target}",
        response_shape=ResponseShape.RAW_TEXT,
    ),
)
DEFAULT_BACKOFF_SECONDS = 0.5

SleepFn = Callable[[float], Awaitable[None]]


class ProxyRotationFetcher:
    """Try each proxy in list order until one returns the target page.

    Proxies are never reordered or skipped based on earlier results. After a
    failed attempt the fetcher waits ``backoff`` seconds before moving on to
    the next proxy; there is no wait after the last one.
    """

    def __init__(
            self,
            proxies: Sequence[ProxyDescriptor] = DEFAULT_PROXIES,
            *,
            session: Optional[requests.Session] = None,
            timeout: float = DEFAULT_TIMEOUT_SECONDS,
            backoff: float = DEFAULT_BACKOFF_SECONDS,
            sleep: SleepFn = asyncio.sleep,
    ) -> None:
        if backoff < 0:
            raise ValueError("backoff must be non-negative.")
        self.proxies = tuple(proxies)
        self.session = session
        self.timeout = timeout
        self.backoff = backoff
        self._sleep = sleep

    def close(self) -> None:
        if self.session is not None:
            self.session.close()

    async def fetch_html(self, target_url: str) -> str:
        """Return the HTML of ``target_url`` from the first proxy that delivers it.

        Raises :class:`AllProxiesFailedError` chained to the last proxy error.
        """

        last_error: NetworkError | None = None
        for position, proxy in enumerate(self.proxies):
            if position > 0 and self.backoff > 0:
                await self._sleep(self.backoff)
            try:
                return await self._fetch_once(proxy, target_url)
            except NetworkError as exc:
                exc.proxy = exc.proxy or proxy.name
                logger.warning(
                    "Proxy attempt failed for %s using %s: %s", target_url, proxy.name, exc)
                last_error = exc

        raise AllProxiesFailedError(target_url, last_error) from last_error

    async def _fetch_once(self, proxy: ProxyDescriptor, target_url: str) -> str:
        proxied_url = proxy.build_url(target_url)
        response = await fetch_with_deadline(
            proxied_url, self.timeout, session=self.session)

        status = int(response.status_code)
        if not 200 <= status < 300:
            raise ProxyHTTPError(status, url=proxied_url, proxy=proxy.name)

        if proxy.response_shape is ResponseShape.JSON_WRAPPED:
            try:
                payload = response.json()
            except ValueError as exc:
                raise ProxyShapeError(
                    "Proxy returned invalid JSON", url=proxied_url, proxy=proxy.name) from exc
            contents = payload.get("contents") if isinstance(payload, dict) else None
            if not contents or not isinstance(contents, str):
                raise ProxyShapeError(
                    "Empty contents from JSON proxy", url=proxied_url, proxy=proxy.name)
            return contents

        return response.text


async def fetch_html_via_proxy(
        target_url: str,
        proxies: Sequence[ProxyDescriptor] = DEFAULT_PROXIES,
        **kwargs,
) -> str:
    """Fetch ``target_url`` with a one-off :class:`ProxyRotationFetcher`."""

    fetcher = ProxyRotationFetcher(proxies, **kwargs)
    return await fetcher.fetch_html(target_url)
