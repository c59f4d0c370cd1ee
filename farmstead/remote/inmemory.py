"""In-memory implementation of RemoteService."""

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

from farmstead.audit.diff import diff, snapshot
from farmstead.remote.models import RemoteResponse
from farmstead.remote.service import RemoteService

RpcHandler = Callable[[Mapping[str, Any]], Any]


@dataclass(frozen=True)
class AuditTrigger:
    """Server-side audit trigger attached to a table.

    Attributes:
        audit_table: Table receiving the synthesized audit rows
        audited_fields: Columns compared between the old and new row
        entity_column: Audit column holding the audited row's id
    """

    audit_table: str
    audited_fields: frozenset[str]
    entity_column: str = "product_id"


class InMemoryRemoteService(RemoteService):
    """In-memory implementation of RemoteService for testing and development.

    Tables are dicts of rows keyed by id, scanned linearly for queries.
    Emulates two server features the console relies on: the audit
    trigger that reads the announced session user, and the
    generate_product_id allocator. Like a connection-level setting, the
    announced session context persists until the next announcement
    attempt, which clears it even when it fails. The trigger stays
    silent while no user is announced. Failures can be injected per
    operation and target. Not suitable for production use.
    """

    def __init__(
        self,
        *,
        triggers: Mapping[str, AuditTrigger] | None = None,
        announce_rpc: str = "set_current_user_info",
        allocator_rpc: str = "generate_product_id",
    ) -> None:
        self._tables: dict[str, dict[str, dict[str, Any]]] = {}
        self._triggers: dict[str, AuditTrigger] = dict(triggers or {})
        self._announce_rpc = announce_rpc
        self._rpcs: dict[str, RpcHandler] = {
            announce_rpc: self._announce,
            allocator_rpc: self._generate_product_id,
        }
        self._failures: dict[tuple[str, str], Exception | None] = {}
        self._sequences: dict[str, int] = {}
        self.session_context: dict[str, Any] | None = None
        self.calls: list[tuple[str, str]] = []

    # Test helpers
    def rows(self, table: str) -> list[dict[str, Any]]:
        """All rows of table in insertion order."""
        return [dict(row) for row in self._tables.get(table, {}).values()]

    def seed(self, table: str, rows: Sequence[Mapping[str, Any]]) -> None:
        """Load rows without firing triggers."""
        for row in rows:
            self._store(table, dict(row))

    def register_rpc(self, name: str, handler: RpcHandler) -> None:
        self._rpcs[name] = handler

    def fail(
        self,
        operation: str,
        target: str = "*",
        *,
        exception: Exception | None = None,
    ) -> None:
        """Make operation on target fail until recover() is called.

        Without exception the call returns an error response; with one,
        the exception is raised, as a broken transport would.
        """
        self._failures[(operation, target)] = exception

    def recover(self, operation: str, target: str = "*") -> None:
        self._failures.pop((operation, target), None)

    def _check_failure(self, operation: str, target: str) -> RemoteResponse | None:
        self.calls.append((operation, target))
        for key in ((operation, target), (operation, "*")):
            if key in self._failures:
                exception = self._failures[key]
                if exception is not None:
                    raise exception
                return RemoteResponse.failure(f"{operation} {target} failed", code="injected")
        return None

    def _store(self, table: str, row: dict[str, Any]) -> dict[str, Any]:
        row.setdefault("id", str(uuid4()))
        self._tables.setdefault(table, {})[str(row["id"])] = row
        return row

    # RemoteService
    async def select(
        self,
        table: str,
        *,
        filters: Mapping[str, Any] | None = None,
        contains: Mapping[str, Sequence[Any]] | None = None,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> RemoteResponse:
        failure = self._check_failure("select", table)
        if failure is not None:
            return failure

        results = []
        for row in self._tables.get(table, {}).values():
            if any(row.get(col) != value for col, value in (filters or {}).items()):
                continue
            if any(
                not set(values) <= set(row.get(col) or [])
                for col, values in (contains or {}).items()
            ):
                continue
            results.append(dict(row))

        if order_by:
            results.sort(
                key=lambda r: (r.get(order_by) is None, r.get(order_by)),
                reverse=descending,
            )
        if limit is not None:
            results = results[:limit]
        return RemoteResponse(data=results)

    async def insert(self, table: str, row: Mapping[str, Any]) -> RemoteResponse:
        failure = self._check_failure("insert", table)
        if failure is not None:
            return failure

        created = self._store(table, dict(row))
        trigger = self._triggers.get(table)
        if trigger is not None:
            self._fire(trigger, "CREATE", {}, created)
        return RemoteResponse(data=dict(created))

    async def update(
        self,
        table: str,
        entity_id: Any,
        values: Mapping[str, Any],
        *,
        id_column: str = "id",
    ) -> RemoteResponse:
        failure = self._check_failure("update", table)
        if failure is not None:
            return failure

        match = next(
            (
                row
                for row in self._tables.get(table, {}).values()
                if row.get(id_column) == entity_id
            ),
            None,
        )
        if match is None:
            return RemoteResponse.failure(
                f"No {table} row with {id_column}={entity_id}", code="not_found"
            )

        old = dict(match)
        match.update(values)
        trigger = self._triggers.get(table)
        if trigger is not None:
            self._fire(trigger, "UPDATE", old, match)
        return RemoteResponse(data=dict(match))

    async def rpc(self, name: str, params: Mapping[str, Any]) -> RemoteResponse:
        if name == self._announce_rpc:
            # A failed announcement leaves the session without a user.
            self.session_context = None
        failure = self._check_failure("rpc", name)
        if failure is not None:
            return failure

        handler = self._rpcs.get(name)
        if handler is None:
            return RemoteResponse.failure(f"Function {name} not found", code="PGRST202")
        return RemoteResponse(data=handler(params))

    # Emulated server-side logic
    def _announce(self, params: Mapping[str, Any]) -> None:
        self.session_context = {
            "user_id": params.get("user_id"),
            "username": params.get("username"),
        }

    def _generate_product_id(self, params: Mapping[str, Any]) -> str:
        """Mint <code>-<NNNNN>-<year>, sequential per category and year."""
        code = params["category_code_param"]
        year = datetime.now(UTC).year
        sequence_key = f"{code}-{year}"
        self._sequences[sequence_key] = self._sequences.get(sequence_key, 0) + 1
        return f"{code}-{self._sequences[sequence_key]:05d}-{year}"

    def _fire(
        self,
        trigger: AuditTrigger,
        action: str,
        old: Mapping[str, Any],
        new: Mapping[str, Any],
    ) -> None:
        if self.session_context is None:
            return
        changed = diff(old, new, trigger.audited_fields)
        if not changed:
            return
        context = self.session_context
        row: dict[str, Any] = {
            trigger.entity_column: new.get("id"),
            "action": action,
            "changed_by_user_id": context.get("user_id"),
            "changed_by_username": context.get("username"),
            "changed_columns": sorted(changed),
            "modified_at": datetime.now(UTC).isoformat(),
        }
        for field, value in snapshot(old, trigger.audited_fields).items():
            row[f"old_{field}"] = value
        for field, value in snapshot(new, trigger.audited_fields).items():
            row[f"new_{field}"] = value
        self._store(trigger.audit_table, row)
