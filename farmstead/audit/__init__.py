"""Field-level change auditing for priced entities.

Contains the change detector, the audit record models, the recorder
that applies audited mutations, and the per-field history lookup.
"""

from farmstead.audit.diff import diff, snapshot, values_equal
from farmstead.audit.history import AuditHistory
from farmstead.audit.models import (
    Actor,
    AuditableEntity,
    AuditAction,
    AuditOutcome,
    AuditRecord,
    AuditStrategy,
    FieldChange,
)
from farmstead.audit.recorder import AuditRecorder

__all__ = [
    "Actor",
    "AuditableEntity",
    "AuditAction",
    "AuditHistory",
    "AuditOutcome",
    "AuditRecord",
    "AuditRecorder",
    "AuditStrategy",
    "FieldChange",
    "diff",
    "snapshot",
    "values_equal",
]
