"""sitemap_scout.utils: URL resolution helpers shared by the extractors and the driver."""

from __future__ import annotations

import re
from typing import Any, Optional, Sequence
from urllib.parse import urljoin, urlsplit, urlunsplit

from sitemap_scout.logger import get_logger

__all__: Sequence[str] = (
    "resolve_url",
    "is_absolute_url",
)

log = get_logger("utils")

_HIERARCHICAL_SCHEMES = frozenset({"http", "https", "ftp", "ws", "wss"})
_STRIP_CHARS_RE = re.compile(r"[\t\r\n]")


def _normalize(url: str) -> Optional[str]:
    parts = urlsplit(url)
    scheme = parts.scheme.lower()
    if not scheme:
        return None
    if scheme not in _HIERARCHICAL_SCHEMES:
        return urlunsplit((scheme, parts.netloc, parts.path, parts.query, parts.fragment))

    host = parts.hostname
    if not host:
        return None
    port = parts.port  # raises ValueError on a malformed port
    netloc = host if ":" not in host else f"[{host}]"
    if port is not None:
        netloc = f"{netloc}:{port}"
    if parts.username is not None:
        userinfo = parts.username
        if parts.password is not None:
            userinfo = f"{userinfo}:{parts.password}"
        netloc = f"{userinfo}@{netloc}"
    return urlunsplit((scheme, netloc, parts.path or "/", parts.query, parts.fragment))


def resolve_url(ref: Any, base: str) -> Optional[str]:
    """Resolve *ref* against *base* and return an absolute URL, or ``None``.

    ``None`` is the resolution-failure result: the candidate is dropped by the
    caller and its siblings are unaffected. Scheme and host are lower-cased and
    an empty HTTP path becomes ``/`` so equal URLs compare equal.
    """
    if ref is None:
        return None
    text = _STRIP_CHARS_RE.sub("", str(ref)).strip()
    if not text:
        return None
    try:
        return _normalize(urljoin(base, text))
    except ValueError as exc:
        log.debug("Cannot resolve %r against %s: %s", text, base, exc)
        return None


def is_absolute_url(url: str) -> bool:
    """Return ``True`` when *url* carries a scheme (and a host for web schemes)."""
    try:
        return _normalize(url) is not None
    except ValueError:
        return False
