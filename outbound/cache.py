"""
Cache helpers - cache-control intent, cache-key expansion, ETag digests.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional


def is_blank(value: Any) -> bool:
    """
    True for None, False, empty containers and whitespace-only strings.
    """
    if value is None or value is False:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (bytes, bytearray)):
        return not bytes(value).strip()
    if hasattr(value, "__len__"):
        return len(value) == 0
    return False


def expand_cache_key(key: Any, namespace: Optional[str] = None) -> str:
    """
    Collapse arbitrary cache-key material into one canonical string.

    - objects exposing ``cache_key`` (attribute or method) use it
    - lists and tuples expand each element and join with "/"
    - mappings render sorted ``k=v`` pairs joined with "&"
    - anything else goes through ``str()``

    Args:
        key: Cache-key material
        namespace: Optional prefix, joined with "/"

    Returns:
        Expanded key
    """
    expanded = _expand(key)
    if namespace:
        return f"{namespace}/{expanded}"
    return expanded


def _expand(key: Any) -> str:
    cache_key = getattr(key, "cache_key", None)
    if cache_key is not None:
        return str(cache_key() if callable(cache_key) else cache_key)

    if isinstance(key, (list, tuple)):
        return "/".join(_expand(element) for element in key)

    if isinstance(key, Mapping):
        return "&".join(
            f"{_expand(k)}={_expand(v)}"
            for k, v in sorted(key.items(), key=lambda item: str(item[0]))
        )

    if isinstance(key, (bytes, bytearray)):
        return bytes(key).decode("utf-8", errors="surrogateescape")

    return str(key)


def md5_etag(key: Any, namespace: Optional[str] = None) -> str:
    """Quoted hex MD5 digest of the expanded cache key."""
    data = expand_cache_key(key, namespace).encode("utf-8", errors="surrogatepass")
    digest = hashlib.md5(data).hexdigest()
    return f'"{digest}"'


@dataclass
class CacheControl:
    """
    Explicit caching intent.

    Every field starts as ``None``; the record is empty until either the
    application sets something or finalization fills in the defaults.

    Example:
        response.cache_control.update(public=True, max_age=60)
        response.cache_control.extras = ["no-transform"]
    """

    public: Optional[bool] = None
    max_age: Optional[int] = None
    must_revalidate: Optional[bool] = None
    extras: Optional[List[str]] = field(default=None)

    @property
    def is_empty(self) -> bool:
        return (
            self.public is None
            and self.max_age is None
            and self.must_revalidate is None
            and self.extras is None
        )

    def __bool__(self) -> bool:
        return not self.is_empty

    def update(self, **directives: Any) -> "CacheControl":
        """Set several directives at once (unknown names raise TypeError)."""
        for name, value in directives.items():
            if name not in ("public", "max_age", "must_revalidate", "extras"):
                raise TypeError(f"Unknown cache-control directive: {name!r}")
            if name == "extras" and value is not None:
                value = list(value)
            setattr(self, name, value)
        return self

    def clear(self) -> None:
        self.public = None
        self.max_age = None
        self.must_revalidate = None
        self.extras = None

    def apply_defaults(self) -> None:
        """Fill the record with the private, revalidate-always defaults."""
        self.public = False
        self.max_age = 0
        self.must_revalidate = True

    def render(self) -> str:
        """
        Render the Cache-Control header value.

        Order: max-age, public/private, must-revalidate, extras.
        """
        options = []
        if self.max_age is not None:
            options.append(f"max-age={self.max_age}")
        options.append("public" if self.public else "private")
        if self.must_revalidate:
            options.append("must-revalidate")
        if self.extras:
            options.extend(self.extras)
        return ", ".join(options)
