"""Business logic services."""

from neobarber.services.admission import (
    Admitted,
    AppointmentAdmission,
    NativeId,
    NotFound,
    NumericId,
    Rejected,
    Rejection,
    RejectionKind,
    parse_identifier,
)
from neobarber.services.conflict_guard import ConflictDimension, ConflictGuard, SlotConflict
from neobarber.services.sequence import SequenceAllocator
from neobarber.services.store import (
    AppointmentStore,
    DuplicateKeyError,
    StorageUnavailableError,
)

__all__ = [
    "AppointmentAdmission",
    "Admitted",
    "Rejected",
    "NotFound",
    "Rejection",
    "RejectionKind",
    "NumericId",
    "NativeId",
    "parse_identifier",
    "ConflictGuard",
    "ConflictDimension",
    "SlotConflict",
    "SequenceAllocator",
    "AppointmentStore",
    "DuplicateKeyError",
    "StorageUnavailableError",
]
