"""
Outbound Testing - Capture sink for the write/each protocol.
"""

from __future__ import annotations

from typing import Any, List, Optional

from ..response import Response


class CaptureSink:
    """
    Callable sink recording every chunk passed to it.

    Usage::

        sink = CaptureSink()
        response.each(sink)
        assert sink.text == "Hello"
    """

    def __init__(self):
        self.chunks: List[str] = []
        self.completed = 0

    def __call__(self, chunk: str) -> None:
        self.chunks.append(chunk)

    def complete(self, response: Any) -> None:
        """Usable as a Response ``on_complete`` hook."""
        self.completed += 1

    @property
    def text(self) -> str:
        return "".join(self.chunks)

    def clear(self) -> None:
        self.chunks.clear()
        self.completed = 0

    def __len__(self) -> int:
        return len(self.chunks)

    def __repr__(self) -> str:
        return f"CaptureSink(chunks={len(self.chunks)})"


def render(response: Response, sink: Optional[CaptureSink] = None) -> CaptureSink:
    """Finalize a response (unless already done) and stream it into a sink."""
    if sink is None:
        sink = CaptureSink()
    if not response.finalized:
        response.finalize()
    response.each(sink)
    return sink
