# =============================================================================
# madrasa_core/offline/sync_queue.py
# Durable FIFO of writes made while offline
# =============================================================================
"""
SyncQueue - ordered queue of mutations not yet confirmed by the remote store.

Read in insertion order, the pending rows are exactly the writes still to
apply. Replay removes them one at a time so that partial progress survives
a failure or a restart.

Mutations are a tagged union:
    InsertMutation  - full row
    UpdateMutation  - record id + changed fields
    DeleteMutation  - record id only
"""

from __future__ import annotations
import json
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, ClassVar, Dict, List, Optional, Union

from madrasa_core.errors.exceptions import ValidationError
from madrasa_core.logging import get_logger
from madrasa_core.offline.local_database import LocalDatabase, clean_record, dumps_record

logger = get_logger(__name__)

TEMP_ID_PREFIX = "temp-"


class Operation(str, Enum):
    """Remote operation carried by a queued mutation."""
    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"


class QueueStatus(str, Enum):
    PENDING = "pending"
    DEAD = "dead"  # Exceeded max attempts, no longer replayed


def is_temp_id(value: Any) -> bool:
    """True for client-side ids of the form temp-<number>."""
    return isinstance(value, str) and value.startswith(TEMP_ID_PREFIX)


def replace_value(payload: Dict[str, Any], old: Any, new: Any) -> Dict[str, Any]:
    """Copy of payload with every top-level value equal to old set to new."""
    return {key: (new if value == old else value) for key, value in payload.items()}


@dataclass(frozen=True)
class InsertMutation:
    """Create a new row."""
    operation: ClassVar[Operation] = Operation.INSERT

    id: int
    table: str
    row: Dict[str, Any]
    timestamp: datetime
    attempts: int = 0
    last_error: Optional[str] = None

    @property
    def record_id(self) -> Optional[str]:
        return self.row.get("id")

    @property
    def payload(self) -> Dict[str, Any]:
        return dict(self.row)


@dataclass(frozen=True)
class UpdateMutation:
    """Apply changed fields to the row identified by record_id."""
    operation: ClassVar[Operation] = Operation.UPDATE

    id: int
    table: str
    record_id: str
    changes: Dict[str, Any]
    timestamp: datetime
    attempts: int = 0
    last_error: Optional[str] = None

    @property
    def payload(self) -> Dict[str, Any]:
        return {**self.changes, "id": self.record_id}


@dataclass(frozen=True)
class DeleteMutation:
    """Remove the row identified by record_id."""
    operation: ClassVar[Operation] = Operation.DELETE

    id: int
    table: str
    record_id: str
    timestamp: datetime
    attempts: int = 0
    last_error: Optional[str] = None

    @property
    def payload(self) -> Dict[str, Any]:
        return {"id": self.record_id}


Mutation = Union[InsertMutation, UpdateMutation, DeleteMutation]


def build_mutation(
    mutation_id: int,
    table: str,
    operation: Union[Operation, str],
    payload: Dict[str, Any],
    timestamp: Optional[datetime] = None,
    attempts: int = 0,
    last_error: Optional[str] = None,
) -> Mutation:
    """
    Build the matching mutation variant from a raw (operation, payload) pair.

    Raises:
        ValidationError: unknown operation, or update/delete without payload id
    """
    try:
        operation = Operation(operation)
    except ValueError:
        raise ValidationError(f"Unknown operation '{operation}'", field="operation", value=operation)

    timestamp = timestamp or datetime.now()
    payload = dict(payload or {})

    if operation is Operation.INSERT:
        return InsertMutation(mutation_id, table, payload, timestamp, attempts, last_error)

    record_id = payload.pop("id", None)
    if record_id is None or record_id == "":
        raise ValidationError(
            f"{operation.value} on '{table}' requires an 'id' in the payload",
            field="id",
        )
    record_id = str(record_id)

    if operation is Operation.UPDATE:
        return UpdateMutation(mutation_id, table, record_id, payload, timestamp, attempts, last_error)
    return DeleteMutation(mutation_id, table, record_id, timestamp, attempts, last_error)


class SyncQueue:
    """
    Durable FIFO of pending mutations stored in the sync_queue table.

    Usage:
        queue = SyncQueue(database)
        queue.enqueue("students", "update", {"id": "A", "name": "New"})
        for mutation in queue.list_all():
            ...
            queue.remove_one(mutation.id)
    """

    def __init__(self, database: LocalDatabase):
        self._db = database

    def enqueue(
        self,
        table: str,
        operation: Union[Operation, str],
        payload: Dict[str, Any],
    ) -> Mutation:
        """
        Append a mutation with a fresh id and the current timestamp.

        Returns:
            The stored mutation
        """
        if not table:
            raise ValidationError("Queued mutation needs a table", field="table")

        # Validates operation and payload before anything is written
        draft = build_mutation(0, table, operation, clean_record(payload or {}))
        timestamp = datetime.now()

        with self._db.transaction() as conn:
            cursor = conn.execute(
                """
                INSERT INTO sync_queue (table_name, operation, payload_json, created_at)
                VALUES (?, ?, ?, ?)
                """,
                [table, draft.operation.value, dumps_record(draft.payload), timestamp.isoformat()],
            )
            mutation_id = cursor.lastrowid

        logger.info(f"Queued {draft.operation.value} on {table} (#{mutation_id})")
        return build_mutation(mutation_id, table, draft.operation, draft.payload, timestamp)

    def _load(self, status: QueueStatus) -> List[Mutation]:
        rows = self._db.query(
            """
            SELECT id, table_name, operation, payload_json, created_at, attempts, error_message
            FROM sync_queue
            WHERE status = ?
            ORDER BY id ASC
            """,
            [status.value],
        )
        mutations = []
        for row in rows:
            mutations.append(build_mutation(
                row["id"],
                row["table_name"],
                row["operation"],
                json.loads(row["payload_json"]),
                datetime.fromisoformat(row["created_at"]),
                row["attempts"],
                row["error_message"],
            ))
        return mutations

    def list_all(self) -> List[Mutation]:
        """Return every pending mutation in insertion order."""
        return self._load(QueueStatus.PENDING)

    def remove_one(self, mutation_id: int) -> None:
        """Remove exactly one mutation; an unknown id is a no-op."""
        self._db.execute("DELETE FROM sync_queue WHERE id = ?", [mutation_id])

    def clear_all(self) -> None:
        """Remove every queued mutation, dead letters included."""
        removed = self._db.execute("DELETE FROM sync_queue")
        logger.warning(f"Sync queue cleared ({removed} mutations discarded)")

    def count(self) -> int:
        """Number of pending mutations."""
        rows = self._db.query(
            "SELECT COUNT(*) AS count FROM sync_queue WHERE status = ?",
            [QueueStatus.PENDING.value],
        )
        return rows[0]["count"] if rows else 0

    def count_dead(self) -> int:
        """Number of dead letters."""
        rows = self._db.query(
            "SELECT COUNT(*) AS count FROM sync_queue WHERE status = ?",
            [QueueStatus.DEAD.value],
        )
        return rows[0]["count"] if rows else 0

    # =========================================================================
    # RETRY BOOKKEEPING
    # =========================================================================

    def record_failure(
        self,
        mutation_id: int,
        error: str,
        max_attempts: Optional[int] = None,
    ) -> bool:
        """
        Count a failed replay attempt.

        Args:
            mutation_id: Mutation that failed
            error: Error text kept for diagnostics
            max_attempts: Attempts after which the mutation becomes a dead letter
                (None keeps retrying forever)

        Returns:
            True if the mutation was moved to the dead-letter status
        """
        with self._db.transaction() as conn:
            conn.execute(
                """
                UPDATE sync_queue
                SET attempts = attempts + 1, last_attempt = ?, error_message = ?
                WHERE id = ?
                """,
                [datetime.now().isoformat(), error, mutation_id],
            )
            if max_attempts is None:
                return False
            cursor = conn.execute(
                """
                UPDATE sync_queue SET status = ?
                WHERE id = ? AND attempts >= ? AND status = ?
                """,
                [QueueStatus.DEAD.value, mutation_id, max_attempts, QueueStatus.PENDING.value],
            )
            dead = cursor.rowcount > 0

        if dead:
            logger.warning(f"Mutation #{mutation_id} moved to dead letters after {max_attempts} attempts")
        return dead

    def list_dead_letters(self) -> List[Mutation]:
        """Mutations that exhausted their attempts."""
        return self._load(QueueStatus.DEAD)

    def requeue_dead_letters(self) -> int:
        """Give dead letters a fresh set of attempts. Returns how many were requeued."""
        return self._db.execute(
            "UPDATE sync_queue SET status = ?, attempts = 0 WHERE status = ?",
            [QueueStatus.PENDING.value, QueueStatus.DEAD.value],
        )

    def remap_temp_id(self, temp_id: str, server_id: str) -> int:
        """
        Replace temp_id by server_id in every queued payload that holds it.

        Covers the record id of later updates/deletes as well as references
        from other tables (a fee's student_id, an attendance row's class_id).
        Dead letters are rewritten too so a requeue sends the real id.

        Returns:
            Number of mutations rewritten
        """
        rewritten = 0
        with self._db.transaction() as conn:
            rows = conn.execute(
                "SELECT id, payload_json FROM sync_queue WHERE payload_json LIKE ?",
                [f'%"{temp_id}"%'],
            ).fetchall()
            for row in rows:
                payload = json.loads(row["payload_json"])
                remapped = replace_value(payload, temp_id, server_id)
                if remapped == payload:
                    continue
                conn.execute(
                    "UPDATE sync_queue SET payload_json = ? WHERE id = ?",
                    [dumps_record(remapped), row["id"]],
                )
                rewritten += 1

        if rewritten:
            logger.info(f"Remapped {temp_id} to {server_id} in {rewritten} queued mutations")
        return rewritten
