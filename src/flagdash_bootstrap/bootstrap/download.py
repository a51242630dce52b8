"""HTTP retrieval for release metadata and artifacts.

Redirects are followed by hand so the hop count is bounded and every hop
is checked by ``secure_urlopen``. Bodies are always returned as raw bytes.
"""

from __future__ import annotations

import http.client
import ssl
import urllib.error
import urllib.request
from typing import Dict, List, Optional
from urllib.parse import urljoin, urlparse

from flagdash_bootstrap import __version__
from flagdash_bootstrap.core.errors import HttpError, NetworkError, TransportError
from flagdash_bootstrap.core.logging import get_logger

LOGGER = get_logger(__name__)

DEFAULT_TIMEOUT = 30.0
DEFAULT_MAX_REDIRECTS = 10
DEFAULT_USER_AGENT = f"flagdash-bootstrap/{__version__}"

REDIRECT_CODES = {301, 302, 303, 307, 308}

# Plain http is only accepted for local test servers
LOOPBACK_HOSTS = {"localhost", "127.0.0.1", "::1"}

_CHUNK_SIZE = 64 * 1024


class _NoRedirectHandler(urllib.request.HTTPRedirectHandler):
    """Surface 3xx responses as HTTPError instead of following them."""

    def redirect_request(self, req, fp, code, msg, headers, newurl):  # type: ignore[override]
        return None


_OPENER = urllib.request.build_opener(
    _NoRedirectHandler,
    urllib.request.HTTPSHandler(context=ssl.create_default_context()),
)


def secure_urlopen(
    url: str,
    timeout: float = DEFAULT_TIMEOUT,
    headers: Optional[Dict[str, str]] = None,
) -> http.client.HTTPResponse:
    """Open a URL after validating its scheme.

    Only https URLs are allowed, plus http to loopback addresses.
    Redirects are not followed.

    Args:
        url: URL to open.
        timeout: Connect/read timeout in seconds.
        headers: Extra request headers.

    Returns:
        The open response; use it as a context manager.

    Raises:
        ValueError: If the URL scheme or host is not allowed.
        urllib.error.HTTPError: For 3xx, 4xx and 5xx responses.
        urllib.error.URLError: For connection failures.
    """
    parsed = urlparse(url)
    if parsed.scheme == "http":
        if parsed.hostname not in LOOPBACK_HOSTS:
            raise ValueError(f"Refusing insecure URL: {url}")
    elif parsed.scheme != "https":
        raise ValueError(f"Invalid download URL: {url}")

    request = urllib.request.Request(url, headers=headers or {})
    return _OPENER.open(request, timeout=timeout)  # nosec B310


class Fetcher:
    """Retrieves a URL into memory, following a bounded number of redirects."""

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        max_redirects: int = DEFAULT_MAX_REDIRECTS,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        """Initialize Fetcher.

        Args:
            timeout: Connect/read timeout per request in seconds.
            max_redirects: Maximum redirect hops before giving up.
            user_agent: User-Agent header sent with every request.
        """
        self._timeout = timeout
        self._max_redirects = max_redirects
        self._user_agent = user_agent

    @property
    def timeout(self) -> float:
        return self._timeout

    @property
    def max_redirects(self) -> int:
        return self._max_redirects

    def get(self, url: str, accept: Optional[str] = None) -> bytes:
        """Fetch a URL and return the full response body.

        Args:
            url: URL to fetch.
            accept: Optional Accept header value.

        Returns:
            Response body bytes of the final (post-redirect) response.

        Raises:
            HttpError: If the final response is not 2xx.
            TransportError: On DNS, TLS, timeout or connection failures.
            NetworkError: On redirect loops, bad redirects or refused URLs.
        """
        headers = {"User-Agent": self._user_agent}
        if accept:
            headers["Accept"] = accept

        current = url
        for hop in range(self._max_redirects + 1):
            LOGGER.debug(f"GET {current} (hop {hop})")
            try:
                with secure_urlopen(current, timeout=self._timeout, headers=headers) as response:
                    status = response.status
                    body = self._read_body(response)
            except urllib.error.HTTPError as e:
                try:
                    if e.code not in REDIRECT_CODES:
                        raise HttpError(current, e.code) from None
                    location = e.headers.get("Location")
                finally:
                    e.close()
                if not location:
                    raise NetworkError(current, f"HTTP {e.code} redirect without Location header")
                current = urljoin(current, location)
                LOGGER.debug(f"Redirected ({e.code}) to {current}")
                continue
            except ValueError as e:
                raise NetworkError(current, str(e)) from e
            except urllib.error.URLError as e:
                raise TransportError(current, str(e.reason)) from e
            except (OSError, http.client.HTTPException) as e:
                raise TransportError(current, str(e) or type(e).__name__) from e

            if not 200 <= status < 300:
                raise HttpError(current, status)

            LOGGER.debug(f"Fetched {len(body)} bytes from {current}")
            return body

        raise NetworkError(url, f"too many redirects (limit {self._max_redirects})")

    def _read_body(self, response: http.client.HTTPResponse) -> bytes:
        """Read the whole body in chunks."""
        chunks: List[bytes] = []
        while True:
            chunk = response.read(_CHUNK_SIZE)
            if not chunk:
                break
            chunks.append(chunk)
        return b"".join(chunks)
