"""
Core data structures for outbound responses.

Provides:
- HeaderMap: Ordered, case-insensitive header storage
"""

from __future__ import annotations

from typing import (
    Dict, Iterable, Iterator, List, Mapping, MutableMapping,
    Optional, Tuple, Union
)


HeaderSource = Union[Mapping[str, str], Iterable[Tuple[str, str]]]


# ============================================================================
# HeaderMap
# ============================================================================

class HeaderMap(MutableMapping[str, str]):
    """
    Ordered string-to-string mapping with case-insensitive keys.

    The casing used on first write is preserved for output; later writes
    with a different casing replace the value in place without moving
    the entry.
    """

    def __init__(self, items: Optional[HeaderSource] = None):
        # lowercased name -> (original name, value)
        self._data: Dict[str, Tuple[str, str]] = {}

        if items:
            pairs = items.items() if isinstance(items, Mapping) else items
            for name, value in pairs:
                self[name] = value

    def __getitem__(self, name: str) -> str:
        """Get header value (raises KeyError if not found)."""
        return self._data[name.lower()][1]

    def __setitem__(self, name: str, value: str) -> None:
        """Set header value, keeping the first-seen casing of the name."""
        key = name.lower()
        existing = self._data.get(key)
        original = existing[0] if existing else name
        self._data[key] = (original, str(value))

    def __delitem__(self, name: str) -> None:
        del self._data[name.lower()]

    def __contains__(self, name: object) -> bool:
        """Check if header exists (case-insensitive)."""
        return isinstance(name, str) and name.lower() in self._data

    def __iter__(self) -> Iterator[str]:
        """Iterate over header names in insertion order."""
        for original, _ in self._data.values():
            yield original

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"HeaderMap({list(self.items())})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, HeaderMap):
            return {k: v for k, (_, v) in self._data.items()} == {
                k: v for k, (_, v) in other._data.items()
            }
        if isinstance(other, Mapping):
            return self == HeaderMap(other)
        return NotImplemented

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Get header value (case-insensitive)."""
        entry = self._data.get(name.lower())
        return entry[1] if entry else default

    def has(self, name: str) -> bool:
        """Check if header exists."""
        return name in self

    def get_all(self, name: str, separator: str = "\n") -> List[str]:
        """
        Get every value folded into one header.

        Multi-value headers such as Set-Cookie are stored as a single
        newline-joined string.
        """
        value = self.get(name)
        if not value:
            return []
        return value.split(separator)

    def add(self, name: str, value: str, separator: str = "\n") -> None:
        """Append a value to a header, joining with separator."""
        existing = self.get(name)
        if existing:
            self[name] = f"{existing}{separator}{value}"
        else:
            self[name] = value

    def copy(self) -> "HeaderMap":
        return HeaderMap(list(self.items()))

    def raw(self, encoding: str = "latin-1") -> List[Tuple[bytes, bytes]]:
        """Encode headers as a list of byte pairs (ASGI format)."""
        return [
            (name.lower().encode(encoding), value.encode(encoding))
            for name, value in self.items()
        ]
