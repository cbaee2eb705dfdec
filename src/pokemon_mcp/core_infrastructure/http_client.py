"""
Lightweight shared HTTP client.

Goals:
- Centralize timeouts, the (opt-in) retry policy, and error logging.
- Keep dependencies limited to `requests` (and its bundled urllib3).
- Provide a small, testable surface area for the PokéAPI connector and the
  cry downloader.

This module intentionally avoids any MCP coupling.
"""

from __future__ import annotations

import logging
import os
import time
from dataclasses import dataclass, field
from typing import Any, Mapping

import requests
from requests import Response
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from pokemon_config.settings import http_retries, http_timeout


logger = logging.getLogger(__name__)

# Only meaningful when POKEMON_MCP_HTTP_RETRIES > 0; the default is no retries.
DEFAULT_RETRY_STATUS = (429, 500, 502, 503, 504)
DEFAULT_BACKOFF = 0.4


@dataclass(frozen=True)
class HttpClientConfig:
    timeout: tuple[float, float] = field(default_factory=http_timeout)
    retries: int = field(default_factory=http_retries)
    backoff: float = DEFAULT_BACKOFF
    retry_statuses: tuple[int, ...] = DEFAULT_RETRY_STATUS
    user_agent: str = field(default_factory=lambda: os.getenv("POKEMON_MCP_HTTP_USER_AGENT", "pokemon-mcp/1.0"))


class HttpClient:
    """A small wrapper around `requests.Session` with sane defaults."""

    def __init__(self, *, config: HttpClientConfig | None = None, session: requests.Session | None = None) -> None:
        self.config = config or HttpClientConfig()
        self.session = session or requests.Session()
        self._configure_session(self.session, self.config)

    @staticmethod
    def _configure_session(session: requests.Session, config: HttpClientConfig) -> None:
        # Always set a UA; allow callers to override per-request.
        session.headers.setdefault("User-Agent", config.user_agent)

        if config.retries <= 0:
            return

        retry = Retry(
            total=config.retries,
            connect=config.retries,
            read=config.retries,
            status=config.retries,
            backoff_factor=config.backoff,
            status_forcelist=config.retry_statuses,
            allowed_methods=frozenset(["HEAD", "GET", "OPTIONS"]),
            respect_retry_after_header=True,
            raise_on_status=False,
        )
        adapter = HTTPAdapter(max_retries=retry, pool_connections=10, pool_maxsize=10)
        session.mount("https://", adapter)
        session.mount("http://", adapter)

    def request(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        params: Mapping[str, Any] | None = None,
        timeout: tuple[float, float] | float | None = None,
        allow_redirects: bool = True,
        raise_for_status: bool = True,
        **kwargs: Any,
    ) -> Response:
        """Perform an HTTP request; by default raise for non-2xx responses."""
        t0 = time.perf_counter()
        try:
            resp = self.session.request(
                method=method,
                url=url,
                headers=dict(headers) if headers else None,
                params=dict(params) if params else None,
                timeout=timeout or self.config.timeout,
                allow_redirects=allow_redirects,
                **kwargs,
            )
            if raise_for_status:
                resp.raise_for_status()
            return resp
        except requests.RequestException as e:
            ms = int((time.perf_counter() - t0) * 1000)
            status = getattr(getattr(e, "response", None), "status_code", None)
            logger.warning(
                "HTTP %s %s failed (status=%s, ms=%s): %s",
                method.upper(),
                url,
                status,
                ms,
                str(e),
            )
            raise

    def get(self, url: str, **kwargs: Any) -> Response:
        return self.request("GET", url, **kwargs)

    def head(self, url: str, **kwargs: Any) -> Response:
        return self.request("HEAD", url, **kwargs)

    def get_json(self, url: str, **kwargs: Any) -> Any:
        resp = self.get(url, **kwargs)
        return resp.json()


_default_client: HttpClient | None = None


def default_http_client() -> HttpClient:
    """Process-wide client, created on first use so env/dotenv are honoured."""
    global _default_client
    if _default_client is None:
        _default_client = HttpClient()
    return _default_client
