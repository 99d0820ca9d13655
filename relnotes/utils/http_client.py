from __future__ import annotations

from typing import Any, Optional
import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry
from loguru import logger

from relnotes._version import __version__
from relnotes.config import HTTP_TIMEOUT, MAX_CONCURRENCY

_SESSION: Optional[requests.Session] = None


def _build_session() -> requests.Session:
    s = requests.Session()

    # Conservative retry policy for transient network hiccups. Only idempotent
    # methods are retried so a release is never created twice.
    retry = Retry(
        total=3,
        connect=3,
        read=3,
        backoff_factor=0.5,
        status_forcelist=(429, 500, 502, 503, 504),
        allowed_methods=("GET", "HEAD", "OPTIONS"),
        respect_retry_after_header=True,
        raise_on_status=False,
    )
    # Pool sized for the fan-out executor so parallel calls do not block on connections.
    adapter = HTTPAdapter(
        max_retries=retry,
        pool_connections=10,
        pool_maxsize=max(10, MAX_CONCURRENCY),
    )
    s.mount("http://", adapter)
    s.mount("https://", adapter)
    s.headers.update({"User-Agent": f"relnotes/{__version__}"})
    logger.debug("HTTP client session created")
    return s


def get_session() -> requests.Session:
    global _SESSION
    if _SESSION is None:
        _SESSION = _build_session()
    return _SESSION


def request(
    method: str, url: str, *, timeout: float | int = HTTP_TIMEOUT, **kwargs: Any
) -> requests.Response:
    s = get_session()
    return s.request(method, url, timeout=timeout, **kwargs)

