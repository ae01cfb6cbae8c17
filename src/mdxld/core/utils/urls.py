"""URL resolution and same-host checks for extracted link targets"""

import re
from urllib.parse import urljoin, urlsplit

from loguru import logger


ABSOLUTE_URL_RE = re.compile(r'^[a-zA-Z][a-zA-Z0-9+.-]*://')


def is_absolute_url(url: str) -> bool:
    """True for scheme://... URLs (http, https, ftp, ...)."""
    return bool(ABSOLUTE_URL_RE.match(url))


def is_relative_path(url: str) -> bool:
    return url.startswith('./') or url.startswith('../')


def resolve_url(url: str, base_url: str | None = None) -> str:
    """Resolve url against base_url; return url unchanged when it cannot be resolved."""
    if not base_url:
        return url
    if url.startswith(('http://', 'https://', '//')):
        return url
    if not urlsplit(base_url).scheme:
        logger.debug("Cannot resolve {!r}: base {!r} has no scheme", url, base_url)
        return url
    try:
        return urljoin(base_url, url)
    except ValueError as e:
        logger.debug("Cannot resolve {!r} against {!r}: {}", url, base_url, e)
        return url


DEFAULT_PORTS = {'http': 80, 'https': 443, 'ws': 80, 'wss': 443, 'ftp': 21}


def _host(url: str) -> tuple[str | None, int | None]:
    """(hostname, port) with the scheme's default port reported as None."""
    parts = urlsplit(url)
    port = parts.port
    if port is not None and DEFAULT_PORTS.get(parts.scheme.lower()) == port:
        port = None
    return parts.hostname, port


def is_internal_url(url: str, base_url: str | None) -> bool:
    """True when url points at base_url's host. Targets without a host count as internal."""
    if not base_url:
        return False
    try:
        base_host = _host(base_url)
        if base_host[0] is None:
            return True
        target = _host(urljoin(base_url, url))
    except ValueError:
        return True
    if target[0] is None and not urlsplit(url).scheme:
        return True
    return target == base_host
