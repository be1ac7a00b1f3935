"""
Outbound faults - typed fault signals raised at the response's boundaries.

Finalization itself never raises; faults are reserved for input that
enters through a typed boundary (status parsing, header validation,
direct writes).

Core exports:
- Fault: Base fault class
- FaultDomain: Domain taxonomy
- Severity: Severity levels
- InvalidStatusFault, InvalidHeaderFault, ResponseStreamFault
"""

from .core import (
    Fault,
    FaultDomain,
    Severity,
)

from .domains import (
    ResponseFault,
    InvalidStatusFault,
    InvalidHeaderFault,
    ResponseStreamFault,
)

__all__ = [
    "Fault",
    "FaultDomain",
    "Severity",
    "ResponseFault",
    "InvalidStatusFault",
    "InvalidHeaderFault",
    "ResponseStreamFault",
]
