"""
Response body variants.

A body is exactly one of:
- Fixed: pre-rendered text
- Chunks: an ordered sequence (or lazy iterable) of string chunks
- Streamed: a producer invoked at iteration time as ``producer(response, sink)``
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, List, Sequence, Union


@dataclass(frozen=True)
class Fixed:
    """Pre-rendered body text."""
    text: str

    @property
    def parts(self) -> List[str]:
        return [self.text]


@dataclass
class Chunks:
    """Ordered chunks; ``parts`` may be a list or any lazy iterable."""
    parts: Iterable[Any] = field(default_factory=list)

    @property
    def is_materialized(self) -> bool:
        return isinstance(self.parts, (list, tuple))


@dataclass(frozen=True)
class Streamed:
    """Deferred body, produced by calling back into the response's ``write``."""
    producer: Callable[[Any, Any], Any]


Body = Union[Fixed, Chunks, Streamed]


def coerce_body(value: Any) -> Body:
    """
    Wrap a raw body value in its variant.

    str -> Fixed, callable -> Streamed, None -> empty Chunks,
    any other iterable -> Chunks. Variants pass through unchanged.
    Bytes are decoded as UTF-8 with ``surrogateescape`` so binary
    payloads survive the round trip to the wire.
    """
    if isinstance(value, (Fixed, Chunks, Streamed)):
        return value
    if value is None:
        return Chunks([])
    if isinstance(value, str):
        return Fixed(value)
    if isinstance(value, (bytes, bytearray)):
        return Fixed(bytes(value).decode("utf-8", errors="surrogateescape"))
    if callable(value):
        return Streamed(value)
    if isinstance(value, Iterable):
        return Chunks(value)
    raise TypeError(f"Unsupported response body type: {type(value).__name__}")


def is_string_body(body: Body) -> bool:
    """
    True when the body is a materialized, non-empty sequence of str chunks.

    Lazy iterables are never inspected, so they are never consumed here.
    """
    if isinstance(body, Streamed):
        return False
    if isinstance(body, Fixed):
        return True
    if not body.is_materialized:
        return False
    parts: Sequence[Any] = body.parts
    return len(parts) > 0 and all(isinstance(part, str) for part in parts)
