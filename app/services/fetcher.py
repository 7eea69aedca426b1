"""Single-page HTTP fetcher used by the site crawler.

One GET per call, no retries: retry policy belongs to the caller.
"""

import asyncio
import ipaddress
import socket
import ssl
import time
from typing import NamedTuple, Optional
from urllib.parse import urljoin, urlparse

import httpx

from app.models.crawl_config import CrawlConfig

MAX_CONTENT_SIZE = 10 * 1024 * 1024  # 10 MB
MAX_REDIRECTS = 10
ALLOWED_SCHEMES = {"http", "https"}
ACCEPT_HEADER = "text/html,application/xhtml+xml"


class FetchError(RuntimeError):
    """A page could not be fetched.

    ``kind`` is one of ``http``, ``timeout``, ``dns``, ``tls``, ``network``,
    ``blocked`` or ``too_large``.  ``status_code`` is set for ``http`` only.
    """

    def __init__(self, message: str, kind: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.kind = kind
        self.status_code = status_code


class FetchResult(NamedTuple):
    html: str
    load_time_ms: int
    final_url: str
    content_type: str


def _is_private_address(hostname: str) -> bool:
    """Return True if *hostname* resolves to a private, loopback, or link-local address."""
    try:
        infos = socket.getaddrinfo(hostname, None)
    except socket.gaierror:
        return False

    for info in infos:
        # Strip IPv6 zone IDs (e.g. "::1%eth0" → "::1")
        raw_ip = info[4][0].split("%")[0]
        try:
            addr = ipaddress.ip_address(raw_ip)
        except ValueError:
            continue
        if addr.is_private or addr.is_loopback or addr.is_link_local or addr.is_reserved:
            return True
    return False


def validate_url(url: str) -> None:
    """Raise ValueError if *url* fails SSRF / scheme validation."""
    parsed = urlparse(url)

    if parsed.scheme not in ALLOWED_SCHEMES:
        raise ValueError(f"Scheme '{parsed.scheme}' is not allowed. Use http or https.")

    hostname = parsed.hostname
    if not hostname:
        raise ValueError("URL must have a valid hostname.")

    if _is_private_address(hostname):
        raise ValueError("Requests to private/internal addresses are not allowed.")


def _classify_transport_error(exc: httpx.TransportError) -> FetchError:
    """Map an httpx transport failure onto a :class:`FetchError` kind."""
    if isinstance(exc, httpx.TimeoutException):
        return FetchError("Request timed out", kind="timeout")

    cause = exc.__cause__ or exc.__context__
    message = str(exc) or exc.__class__.__name__
    if isinstance(cause, socket.gaierror) or "name or service not known" in message.lower() \
            or "nodename nor servname" in message.lower() or "getaddrinfo" in message.lower():
        return FetchError(f"DNS lookup failed: {message}", kind="dns")
    if isinstance(cause, ssl.SSLError) or "certificate" in message.lower() or "ssl" in message.lower():
        return FetchError(f"TLS error: {message}", kind="tls")
    return FetchError(f"Network error: {message}", kind="network")


async def _fetch(url: str, config: CrawlConfig, client: httpx.AsyncClient) -> Optional[FetchResult]:
    headers = {"User-Agent": config.user_agent, "Accept": ACCEPT_HEADER}
    started = time.monotonic()
    current_url = url

    for _ in range(MAX_REDIRECTS + 1):
        async with client.stream("GET", current_url, headers=headers) as response:
            if response.is_redirect:
                location = response.headers.get("location", "")
                next_url = urljoin(current_url, location)
                try:
                    validate_url(next_url)
                except ValueError as exc:
                    raise FetchError(str(exc), kind="blocked") from exc
                current_url = next_url
                continue

            if not response.is_success:
                raise FetchError(
                    f"HTTP {response.status_code}",
                    kind="http",
                    status_code=response.status_code,
                )

            content_type = response.headers.get("content-type", "")
            if "text/html" not in content_type.lower():
                return None

            content_length = response.headers.get("content-length")
            if content_length and content_length.isdigit() and int(content_length) > MAX_CONTENT_SIZE:
                raise FetchError("Response body exceeds the maximum allowed size.", kind="too_large")

            chunks = []
            total = 0
            async for chunk in response.aiter_bytes():
                total += len(chunk)
                if total > MAX_CONTENT_SIZE:
                    raise FetchError("Response body exceeds the maximum allowed size.", kind="too_large")
                chunks.append(chunk)

            load_time_ms = int((time.monotonic() - started) * 1000)
            return FetchResult(
                html=b"".join(chunks).decode(response.encoding or "utf-8", errors="replace"),
                load_time_ms=load_time_ms,
                final_url=current_url,
                content_type=content_type,
            )

    raise FetchError("Too many redirects.", kind="network")


async def fetch_page(
    url: str,
    config: Optional[CrawlConfig] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> Optional[FetchResult]:
    """Fetch one page and return its HTML, or ``None`` for non-HTML content.

    Redirects are followed manually so that every redirect destination is
    validated against the SSRF rules before the next request is made.  The
    whole request, redirects included, is bounded by ``config.timeout_ms``.

    Raises:
        FetchError: on blocked URLs, non-2xx responses, timeouts, DNS/TLS or
            other transport failures, and oversized bodies.
    """
    config = config or CrawlConfig()
    try:
        validate_url(url)
    except ValueError as exc:
        raise FetchError(str(exc), kind="blocked") from exc

    timeout_s = config.timeout_ms / 1000
    try:
        if client is not None:
            return await asyncio.wait_for(_fetch(url, config, client), timeout=timeout_s)
        async with httpx.AsyncClient(follow_redirects=False, timeout=timeout_s) as own_client:
            return await asyncio.wait_for(_fetch(url, config, own_client), timeout=timeout_s)
    except asyncio.TimeoutError as exc:
        raise FetchError(f"Timed out after {config.timeout_ms} ms", kind="timeout") from exc
    except httpx.TransportError as exc:
        raise _classify_transport_error(exc) from exc
    except httpx.HTTPError as exc:
        raise FetchError(str(exc) or "HTTP error", kind="network") from exc
