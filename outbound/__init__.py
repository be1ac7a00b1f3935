"""
Outbound - HTTP response object with conditional-GET finalization

Integration of:
- Response: status, headers, cookies and body accumulated by handlers
- Finalization: Content-Type defaults, automatic ETag, 304 downgrade,
  Cache-Control derivation
- Streaming: the write/each protocol consumed by transports
- ASGI: adapter sending finalized responses
- Faults: Structured errors for typed boundaries
"""

__version__ = "0.1.0"

# ============================================================================
# Core
# ============================================================================

from .response import Response
from .config import ResponseConfig, ConfigLoader, ConfigError, load_response_config
from ._datastructures import HeaderMap
from .body import Fixed, Chunks, Streamed, coerce_body
from .cache import CacheControl, expand_cache_key, md5_etag
from .request import ConditionalRequest, ETagMatcher
from .status import STATUS_CODES, parse_status, status_message

# ============================================================================
# Transport
# ============================================================================

from .asgi import ResponseApp, send_asgi

# ============================================================================
# Faults
# ============================================================================

from .faults import (
    Fault,
    FaultDomain,
    Severity,
    InvalidStatusFault,
    InvalidHeaderFault,
    ResponseStreamFault,
)

__all__ = [
    "__version__",
    "Response",
    "ResponseConfig",
    "ConfigLoader",
    "ConfigError",
    "load_response_config",
    "HeaderMap",
    "Fixed",
    "Chunks",
    "Streamed",
    "coerce_body",
    "CacheControl",
    "expand_cache_key",
    "md5_etag",
    "ConditionalRequest",
    "ETagMatcher",
    "STATUS_CODES",
    "parse_status",
    "status_message",
    "ResponseApp",
    "send_asgi",
    "Fault",
    "FaultDomain",
    "Severity",
    "InvalidStatusFault",
    "InvalidHeaderFault",
    "ResponseStreamFault",
]
