"""Audited mutations of priced entities.

Every mutation goes through one of two strategies, chosen once per call
from the outcome of announcing the acting user to the backend session:

- TRIGGER_ASSISTED: the announcement succeeded, so the backend trigger
  writes the audit row in the same transaction as the update.
- MANUAL_FALLBACK: the announcement failed, so the recorder applies the
  update and then writes the audit row itself. The two writes are not
  atomic; a crash in between leaves an unaudited update behind.

Both strategies leave an audit row iff at least one audited field changed.
"""

from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from farmstead.audit.diff import diff, snapshot
from farmstead.audit.models import (
    Actor,
    AuditableEntity,
    AuditAction,
    AuditOutcome,
    AuditRecord,
    AuditStrategy,
)
from farmstead.exceptions import EntityUpdateError
from farmstead.observability.logging import get_logger
from farmstead.observability.metrics import AUDIT_OUTCOMES
from farmstead.remote.models import RemoteResponse
from farmstead.remote.service import RemoteService

logger = get_logger(__name__)


class AuditRecorder:
    """Applies entity mutations and guarantees their audit trail.

    Callers must not interleave announce/update pairs for different
    actors concurrently on one connection: the last announcement before
    an update is the one the trigger sees.
    """

    def __init__(
        self,
        remote: RemoteService,
        *,
        audit_table: str = "products_audit",
        announce_rpc: str = "set_current_user_info",
        entity_column: str = "product_id",
    ) -> None:
        """Initialize the recorder.

        Args:
            remote: Backend receiving updates, announcements and audit rows
            audit_table: Table for manually written audit rows
            announce_rpc: RPC storing the acting user in the session context
            entity_column: Audit table column referencing the entity
        """
        self._remote = remote
        self._audit_table = audit_table
        self._announce_rpc = announce_rpc
        self._entity_column = entity_column

    async def record_change(
        self,
        entity: AuditableEntity,
        old_state: Mapping[str, Any],
        new_state: Mapping[str, Any],
        actor: Actor,
    ) -> AuditOutcome:
        """Update entity to new_state and audit the change.

        Args:
            entity: Entity being updated (supplies id, table and audited fields)
            old_state: Field values before the update
            new_state: Field values written by the update
            actor: User performing the update

        Returns:
            AuditOutcome describing the strategy and the audited diff

        Raises:
            EntityUpdateError: If the update itself fails; nothing is audited
        """
        strategy = await self._resolve_strategy(actor)
        changed = diff(old_state, new_state, entity.audited_fields)

        response = await self._call(
            lambda: self._remote.update(entity.table_name, entity.id, dict(new_state))
        )
        if response.error is not None:
            AUDIT_OUTCOMES.labels(strategy=strategy.value, result="update_failed").inc()
            logger.error(
                "entity_update_failed",
                table=entity.table_name,
                entity_id=entity.id,
                strategy=strategy.value,
                error=response.error.message,
            )
            raise EntityUpdateError(
                f"Failed to update {entity.table_name} {entity.id}: {response.error.message}",
                table=entity.table_name,
                entity_id=entity.id,
            )

        return await self._finish(
            strategy,
            AuditAction.UPDATE,
            entity.id,
            entity.audited_fields,
            old_state,
            new_state,
            changed,
            actor,
            response.data,
        )

    async def record_create(
        self,
        entity_type: type[AuditableEntity],
        new_state: Mapping[str, Any],
        actor: Actor,
    ) -> AuditOutcome:
        """Insert a new entity and audit its initial audited values.

        Old values are all None, so every audited field set on the new
        row counts as changed.

        Raises:
            EntityUpdateError: If the insert fails; nothing is audited
        """
        strategy = await self._resolve_strategy(actor)
        fields = entity_type.audited_fields
        old_state = dict.fromkeys(fields)
        changed = diff(old_state, new_state, fields)

        response = await self._call(
            lambda: self._remote.insert(entity_type.table_name, dict(new_state))
        )
        if response.error is not None or not isinstance(response.data, dict):
            message = response.error.message if response.error else "no row returned"
            AUDIT_OUTCOMES.labels(strategy=strategy.value, result="update_failed").inc()
            logger.error(
                "entity_insert_failed",
                table=entity_type.table_name,
                strategy=strategy.value,
                error=message,
            )
            raise EntityUpdateError(
                f"Failed to insert into {entity_type.table_name}: {message}",
                table=entity_type.table_name,
            )

        return await self._finish(
            strategy,
            AuditAction.CREATE,
            str(response.data.get("id")),
            fields,
            old_state,
            new_state,
            changed,
            actor,
            response.data,
        )

    async def _resolve_strategy(self, actor: Actor) -> AuditStrategy:
        """Announce the actor; the outcome picks the strategy for this call."""
        response = await self._call(
            lambda: self._remote.rpc(
                self._announce_rpc, {"user_id": actor.id, "username": actor.name}
            )
        )
        if response.error is not None:
            logger.warning(
                "session_context_announce_failed",
                actor_id=actor.id,
                error=response.error.message,
            )
            return AuditStrategy.MANUAL_FALLBACK
        return AuditStrategy.TRIGGER_ASSISTED

    async def _finish(
        self,
        strategy: AuditStrategy,
        action: AuditAction,
        entity_id: str,
        fields: frozenset[str],
        old_state: Mapping[str, Any],
        new_state: Mapping[str, Any],
        changed: frozenset[str],
        actor: Actor,
        entity_row: Any,
    ) -> AuditOutcome:
        entity = entity_row if isinstance(entity_row, dict) else None

        if not changed:
            AUDIT_OUTCOMES.labels(strategy=strategy.value, result="no_changes").inc()
            logger.info(
                "audit_skipped_no_changes",
                entity_id=entity_id,
                action=action.value,
                strategy=strategy.value,
            )
            return AuditOutcome(strategy=strategy, changed_fields=changed, entity=entity)

        if strategy is AuditStrategy.TRIGGER_ASSISTED:
            AUDIT_OUTCOMES.labels(strategy=strategy.value, result="delegated").inc()
            logger.info(
                "audit_delegated_to_trigger",
                entity_id=entity_id,
                action=action.value,
                changed_fields=sorted(changed),
            )
            return AuditOutcome(strategy=strategy, changed_fields=changed, entity=entity)

        record = AuditRecord(
            entity_id=entity_id,
            action=action,
            actor_id=actor.id,
            actor_name=actor.name,
            changed_fields=changed,
            old_values=snapshot(old_state, sorted(fields)),
            new_values=snapshot(new_state, sorted(fields)),
        )
        written = await self._write(record)
        return AuditOutcome(
            strategy=strategy,
            changed_fields=changed,
            record=record if written else None,
            entity=entity,
        )

    async def _write(self, record: AuditRecord) -> bool:
        """Insert the audit row; failure is logged and never raised.

        The business mutation is already applied at this point and is
        not rolled back.
        """
        response = await self._call(
            lambda: self._remote.insert(
                self._audit_table, record.to_row(self._entity_column)
            )
        )
        if response.error is not None:
            AUDIT_OUTCOMES.labels(
                strategy=AuditStrategy.MANUAL_FALLBACK.value, result="write_failed"
            ).inc()
            logger.error(
                "audit_write_failed",
                entity_id=record.entity_id,
                changed_fields=sorted(record.changed_fields),
                actor_id=record.actor_id,
                error=response.error.message,
            )
            return False

        AUDIT_OUTCOMES.labels(
            strategy=AuditStrategy.MANUAL_FALLBACK.value, result="written"
        ).inc()
        logger.info(
            "audit_record_written",
            entity_id=record.entity_id,
            action=record.action.value,
            changed_fields=sorted(record.changed_fields),
        )
        return True

    @staticmethod
    async def _call(
        operation: Callable[[], Awaitable[RemoteResponse]],
    ) -> RemoteResponse:
        """Run a remote call, folding transport exceptions into the envelope."""
        try:
            return await operation()
        except Exception as e:
            return RemoteResponse.failure(str(e) or type(e).__name__, code="transport")
