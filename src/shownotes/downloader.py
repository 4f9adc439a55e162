"""HTTP session management for shownotes.

One ``requests.Session`` per thread, shared by the RSS fetch and the cloud
transcription backends. Requests are not retried; callers translate
``requests`` exceptions into item-scoped errors.
"""

from __future__ import annotations

import atexit
import logging
import threading
from typing import Any, cast, Dict, List, Mapping, Optional

import requests
from requests.adapters import HTTPAdapter
from requests.utils import requote_uri
from urllib3.util.retry import Retry

logger = logging.getLogger(__name__)

_local = threading.local()
_sessions: List[requests.Session] = []
_sessions_lock = threading.Lock()


def normalize_url(url: str) -> str:
    """Normalize URLs while preserving already-encoded segments."""
    normalized = requote_uri(url)
    if normalized != url:
        logger.debug("Normalized URL %s -> %s", url, normalized)
    return cast(str, normalized)


def _configure_http_session(session: requests.Session) -> None:
    """Mount adapters that never retry and leave status handling to the caller."""
    retry = Retry(total=0, read=False, redirect=None, raise_on_status=False)
    adapter = HTTPAdapter(max_retries=retry)
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    logger.debug("Configured HTTP session %s without retries", hex(id(session)))


def get_session() -> requests.Session:
    """Return this thread's HTTP session, creating it on first use."""
    session = getattr(_local, "session", None)
    if session is None:
        session = requests.Session()
        _configure_http_session(session)
        setattr(_local, "session", session)
        with _sessions_lock:
            _sessions.append(session)
        logger.debug("Created new thread-local HTTP session %s", hex(id(session)))
    return session


def _close_sessions() -> None:
    with _sessions_lock:
        while _sessions:
            session = _sessions.pop()
            try:
                session.close()
            except Exception as exc:  # pragma: no cover
                logger.debug("Ignoring error while closing HTTP session: %s", exc)


atexit.register(_close_sessions)


def send_request(
    method: str,
    url: str,
    *,
    headers: Optional[Mapping[str, str]] = None,
    timeout: Optional[float] = None,
    params: Optional[Dict[str, Any]] = None,
    data: Any = None,
    json: Any = None,
) -> requests.Response:
    """Send one HTTP request on the thread session and fail on non-2xx.

    Raises:
        requests.Timeout: When ``timeout`` elapses
        requests.HTTPError: On a non-2xx status
        requests.RequestException: On any other transport failure
    """
    normalized_url = normalize_url(url)
    session = get_session()
    logger.debug("%s %s (timeout=%s)", method, normalized_url, timeout)
    resp = session.request(
        method,
        normalized_url,
        headers=dict(headers or {}),
        timeout=timeout,
        params=params,
        data=data,
        json=json,
    )
    resp.raise_for_status()
    logger.debug(
        "%s %s succeeded with status %s (Content-Length=%s)",
        method,
        normalized_url,
        resp.status_code,
        resp.headers.get("Content-Length"),
    )
    return resp


def http_get(
    url: str,
    user_agent: str,
    timeout: float,
    headers: Optional[Mapping[str, str]] = None,
) -> requests.Response:
    """GET ``url`` with the configured User-Agent."""
    merged = {"User-Agent": user_agent}
    merged.update(headers or {})
    return send_request("GET", url, headers=merged, timeout=timeout)


__all__ = ["get_session", "http_get", "normalize_url", "send_request"]
