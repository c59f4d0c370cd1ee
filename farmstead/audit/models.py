"""Audit domain models."""

from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, model_validator


def utc_now() -> datetime:
    """Return current UTC time."""
    return datetime.now(UTC)


class AuditAction(str, Enum):
    """Kind of mutation an audit record describes."""

    CREATE = "CREATE"
    UPDATE = "UPDATE"


class AuditStrategy(str, Enum):
    """How an audit record gets persisted for one mutation.

    TRIGGER_ASSISTED writes the audit row atomically with the update on
    the server side. MANUAL_FALLBACK writes it from the client after the
    update and can leave an applied update unaudited if the second write
    never happens.
    """

    TRIGGER_ASSISTED = "trigger_assisted"
    MANUAL_FALLBACK = "manual_fallback"


class Actor(BaseModel):
    """The user performing a mutation."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="User identifier")
    name: str = Field(..., description="Username shown in audit history")


class AuditableEntity(BaseModel):
    """Base for records whose changes are audited.

    Subclasses set table_name and the static audited_fields set.
    """

    table_name: ClassVar[str]
    audited_fields: ClassVar[frozenset[str]]

    id: str = Field(..., description="Stable identifier")

    def audited_state(self) -> dict[str, Any]:
        """Current values of the audited fields."""
        return {field: getattr(self, field) for field in sorted(self.audited_fields)}


class AuditRecord(BaseModel):
    """Immutable record of one mutation that changed audited fields.

    old_values and new_values always hold every audited field, not only
    the changed ones, so the full context survives in the log.
    """

    model_config = ConfigDict(frozen=True)

    entity_id: str = Field(..., description="Audited entity")
    action: AuditAction = Field(..., description="CREATE or UPDATE")
    actor_id: str = Field(..., description="Acting user ID")
    actor_name: str = Field(..., description="Acting username")
    changed_fields: frozenset[str] = Field(..., description="Fields that changed")
    old_values: dict[str, Any] = Field(..., description="Audited fields before")
    new_values: dict[str, Any] = Field(..., description="Audited fields after")
    recorded_at: datetime = Field(default_factory=utc_now, description="Record time")

    @model_validator(mode="after")
    def _check_fields(self) -> "AuditRecord":
        if not self.changed_fields:
            raise ValueError("changed_fields must not be empty")
        if set(self.old_values) != set(self.new_values):
            raise ValueError("old_values and new_values must cover the same fields")
        unknown = self.changed_fields - set(self.new_values)
        if unknown:
            raise ValueError(f"changed fields missing from snapshot: {sorted(unknown)}")
        return self

    def to_row(self, entity_column: str = "product_id") -> dict[str, Any]:
        """Serialize to one row of the audit table."""
        row: dict[str, Any] = {
            entity_column: self.entity_id,
            "action": self.action.value,
            "changed_by_user_id": self.actor_id,
            "changed_by_username": self.actor_name,
            "changed_columns": sorted(self.changed_fields),
            "modified_at": self.recorded_at.isoformat(),
        }
        for field, value in self.old_values.items():
            row[f"old_{field}"] = value
        for field, value in self.new_values.items():
            row[f"new_{field}"] = value
        return row


@dataclass(frozen=True)
class AuditOutcome:
    """Result of an audited mutation.

    Attributes:
        strategy: Path chosen from the session-context announcement
        changed_fields: Audited fields that differed between the states
        record: Row written by the manual fallback, if one was written
        entity: Row returned by the remote update or insert
    """

    strategy: AuditStrategy
    changed_fields: frozenset[str]
    record: AuditRecord | None = None
    entity: dict[str, Any] | None = None


class FieldChange(BaseModel):
    """Most recent recorded change of one audited field."""

    model_config = ConfigDict(frozen=True)

    username: str
    changed_at: datetime | None = None
