"""Lookup of the latest recorded change per audited field."""

from collections.abc import Iterable
from datetime import datetime

from farmstead.audit.models import FieldChange
from farmstead.observability.logging import get_logger
from farmstead.remote.service import RemoteService

logger = get_logger(__name__)

UNKNOWN_USER = "Unknown"


class AuditHistory:
    """Reads the audit table to show who last changed each field."""

    def __init__(
        self,
        remote: RemoteService,
        *,
        audit_table: str = "products_audit",
        entity_column: str = "product_id",
    ) -> None:
        self._remote = remote
        self._audit_table = audit_table
        self._entity_column = entity_column

    async def latest_changes(
        self,
        entity_id: str,
        fields: Iterable[str],
    ) -> dict[str, FieldChange | None]:
        """Return the newest change of each field, or None if never changed.

        A failed query only blanks the field it was issued for.
        """
        changes: dict[str, FieldChange | None] = {}
        for field in sorted(fields):
            changes[field] = await self._latest(entity_id, field)
        return changes

    async def _latest(self, entity_id: str, field: str) -> FieldChange | None:
        try:
            response = await self._remote.select(
                self._audit_table,
                filters={self._entity_column: entity_id},
                contains={"changed_columns": [field]},
                order_by="modified_at",
                descending=True,
                limit=1,
            )
        except Exception as e:
            logger.warning(
                "audit_history_query_failed",
                entity_id=entity_id,
                field=field,
                error=str(e),
            )
            return None

        if response.error is not None:
            logger.warning(
                "audit_history_query_failed",
                entity_id=entity_id,
                field=field,
                error=response.error.message,
            )
            return None

        if not response.data:
            return None

        row = response.data[0]
        changed_at = row.get("modified_at")
        try:
            parsed = datetime.fromisoformat(changed_at) if changed_at else None
        except (TypeError, ValueError):
            logger.warning(
                "audit_history_row_invalid",
                entity_id=entity_id,
                field=field,
                modified_at=changed_at,
            )
            return None

        return FieldChange(
            username=row.get("changed_by_username") or UNKNOWN_USER,
            changed_at=parsed,
        )
