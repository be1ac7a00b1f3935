"""
Outbound faults - Domain-specific fault types.

Provides concrete fault classes raised at the typed boundaries of the
response object:
- RESPONSE faults (status, streaming)
- SECURITY faults (header injection)
"""

from typing import Any, Optional
from .core import Fault, FaultDomain, Severity


# ============================================================================
# RESPONSE Faults
# ============================================================================

class ResponseFault(Fault):
    """Base class for response faults."""

    def __init__(
        self,
        code: str,
        message: str,
        *,
        severity: Severity = Severity.ERROR,
        metadata: Optional[dict[str, Any]] = None,
    ):
        super().__init__(
            code=code,
            message=message,
            domain=FaultDomain.RESPONSE,
            severity=severity,
            retryable=False,
            public=False,
            metadata=metadata,
        )


class InvalidStatusFault(ResponseFault):
    """Status value is not a non-negative integer."""

    def __init__(self, value: Any, **kwargs):
        super().__init__(
            code="INVALID_STATUS",
            message=f"Invalid HTTP status {value!r}: expected a non-negative integer",
            metadata={"value": repr(value), **kwargs.get("metadata", {})},
        )


class ResponseStreamFault(ResponseFault):
    """Direct write into a body that cannot buffer it."""

    def __init__(self, reason: str, **kwargs):
        super().__init__(
            code="RESPONSE_STREAM_ERROR",
            message=f"Response stream error: {reason}",
            metadata={"reason": reason, **kwargs.get("metadata", {})},
        )


# ============================================================================
# SECURITY Faults
# ============================================================================

class InvalidHeaderFault(Fault):
    """Header name or value carries control characters (injection attempt)."""

    def __init__(self, name: str, value: Optional[str] = None, **kwargs):
        if value is None:
            message = f"Invalid header name: {name!r}"
        else:
            message = f"Invalid header value for {name!r}: {value!r}"
        super().__init__(
            code="INVALID_HEADER",
            message=message,
            domain=FaultDomain.SECURITY,
            severity=Severity.WARN,
            retryable=False,
            public=False,
            metadata={"header_name": name, "header_value": value, **kwargs.get("metadata", {})},
        )
