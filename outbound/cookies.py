"""
Cookie helpers - option normalization, Set-Cookie serialization and parsing.

Multiple cookies share one ``Set-Cookie`` header entry, joined by newlines;
the transport splits them back into separate header lines.
"""

from __future__ import annotations

import logging
from datetime import datetime
from email.utils import formatdate
from typing import Any, Dict, Iterable, List, Mapping, Optional
from urllib.parse import quote_plus, unquote_plus


logger = logging.getLogger("outbound.cookies")

COOKIE_OPTIONS = ("value", "domain", "path", "expires", "max_age", "secure", "httponly", "samesite")


def normalize_cookie_options(
    options: Mapping[str, Any],
    log: Optional[logging.Logger] = None,
) -> Dict[str, Any]:
    """
    Normalize cookie options before serialization.

    The ``http_only`` key was renamed to ``httponly``; it is remapped with a
    warning. An explicit ``httponly`` wins over the deprecated key.

    Args:
        options: Raw cookie options
        log: Logger receiving the deprecation notice

    Returns:
        New options dict
    """
    normalized = dict(options)
    if "http_only" in normalized:
        (log or logger).warning(
            "The 'http_only' cookie option has been renamed. Please use 'httponly' instead."
        )
        legacy = normalized.pop("http_only")
        if not normalized.get("httponly"):
            normalized["httponly"] = legacy

    unknown = set(normalized) - set(COOKIE_OPTIONS)
    if unknown:
        raise TypeError(f"Unknown cookie option(s): {', '.join(sorted(unknown))}")

    return normalized


def serialize_cookie(name: str, options: Mapping[str, Any]) -> str:
    """
    Build one Set-Cookie directive.

    ``value`` may be a string or a list of strings (joined with "&");
    name and value are percent-encoded.
    """
    value = options.get("value")
    if value is None:
        values: List[str] = []
    elif isinstance(value, str):
        values = [value]
    else:
        values = [str(v) for v in value]

    parts = [f"{quote_plus(name)}={'&'.join(quote_plus(v) for v in values)}"]

    if options.get("domain"):
        parts.append(f"Domain={options['domain']}")

    if options.get("path"):
        parts.append(f"Path={options['path']}")

    expires = options.get("expires")
    if expires is not None:
        if isinstance(expires, datetime):
            expires = formatdate(expires.timestamp(), usegmt=True)
        parts.append(f"Expires={expires}")

    if options.get("max_age") is not None:
        parts.append(f"Max-Age={int(options['max_age'])}")

    if options.get("secure"):
        parts.append("Secure")

    if options.get("httponly"):
        parts.append("HttpOnly")

    if options.get("samesite"):
        parts.append(f"SameSite={options['samesite']}")

    return "; ".join(parts)


def split_set_cookie(header: Optional[str]) -> List[str]:
    """Split a newline-joined Set-Cookie value into directives."""
    if not header:
        return []
    return [line for line in header.split("\n") if line]


def parse_set_cookie(header: Optional[str]) -> Dict[str, str]:
    """
    Parse Set-Cookie directives into a name -> value mapping.

    Only the leading ``name=value`` pair of each directive is kept; entries
    without "=" are skipped.
    """
    cookies: Dict[str, str] = {}
    for directive in split_set_cookie(header):
        pair = directive.split(";", 1)[0]
        key, sep, value = pair.partition("=")
        if not sep:
            continue
        cookies[unquote_plus(key.strip())] = unquote_plus(value.strip())
    return cookies


def without_cookie(directives: Iterable[str], name: str) -> List[str]:
    """Drop directives that set the named cookie."""
    prefix = f"{quote_plus(name)}="
    return [d for d in directives if not d.startswith(prefix)]
