"""
Body decoding: gzip detection and charset-aware text decoding.

Neither step ever raises; a failure falls back to the next best rendering.
"""
from __future__ import annotations

import codecs
import gzip
import re
import zlib
from typing import Final

from sitemap_scout.logger import get_logger

__all__ = ("GZIP_MAGIC", "maybe_gunzip", "charset_of", "decode_body")

log = get_logger("decoding")

GZIP_MAGIC: Final[bytes] = b"\x1f\x8b"
DEFAULT_CHARSET: Final[str] = "utf-8"

_CHARSET_RE: Final[re.Pattern[str]] = re.compile(r"charset=\"?([\w-]+)", re.IGNORECASE)


def maybe_gunzip(body: bytes, content_encoding: str = "", content_type: str = "") -> bytes:
    """Gunzip *body* if the headers say so or it starts with the gzip magic.

    Corrupt gzip data is not an error: the raw bytes are returned as-is.
    """
    encoding = (content_encoding or "").lower()
    ctype = (content_type or "").lower()
    if "gzip" not in encoding and "gzip" not in ctype and not body.startswith(GZIP_MAGIC):
        return body
    try:
        return gzip.decompress(body)
    except (OSError, EOFError, zlib.error) as exc:
        log.debug("gunzip failed, using raw body: %s", exc)
        return body


def charset_of(content_type: str) -> str:
    match = _CHARSET_RE.search(content_type or "")
    return match.group(1).lower() if match else DEFAULT_CHARSET


def decode_body(body: bytes, content_type: str = "", charset: str = "") -> str:
    """Decode *body* with the declared charset, falling back to UTF-8 then Latin-1.

    *charset* is the one the transport already parsed; without it the
    Content-Type header is inspected.
    """
    charset = charset or charset_of(content_type)
    try:
        codecs.lookup(charset)
        text = body.decode(charset)
    except (LookupError, UnicodeDecodeError) as exc:
        log.debug("decoding as %s failed (%s), falling back", charset, exc)
        try:
            text = body.decode(DEFAULT_CHARSET)
        except UnicodeDecodeError:
            text = body.decode("latin-1")
    if text.startswith("\ufeff"):
        text = text[1:]
    return text
