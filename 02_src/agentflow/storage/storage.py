"""SQLite storage implementation."""

import json
import uuid
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Protocol

import aiosqlite

from ..config import resolve_db_path
from ..models import (
    Category,
    ChatMessage,
    MaintenanceLog,
    ProductionRecord,
    Session,
    TraceEvent,
)


class IStorage(Protocol):
    """Persistent storage for sessions, messages and sample data (SQLite)."""

    async def init(self) -> None:
        """Initialize database and create tables."""
        ...

    async def close(self) -> None:
        """Close database connection."""
        ...

    # Sessions
    async def create_session(self, session_id: str) -> Session:
        """Create a session; an existing session is returned unchanged."""
        ...

    async def get_session(self, session_id: str) -> Session | None:
        """Get a session by ID."""
        ...

    # Messages
    async def save_chat_message(self, message: ChatMessage) -> ChatMessage:
        """Save a chat message and assign its ID."""
        ...

    async def get_chat_messages(self, session_id: str) -> list[ChatMessage]:
        """Get messages for a session in insertion order."""
        ...

    # Production data
    async def save_production_record(self, record: ProductionRecord) -> ProductionRecord:
        """Save a production record."""
        ...

    async def get_production_data(
        self, start: date | None = None, end: date | None = None
    ) -> list[ProductionRecord]:
        """Get production records, optionally within an inclusive date window."""
        ...

    async def get_lowest_production_days(
        self, limit: int = 5, below: int | None = None
    ) -> list[ProductionRecord]:
        """Get the records with the lowest production volume."""
        ...

    async def get_latest_production_date(self) -> date | None:
        """Get the most recent production date on record."""
        ...

    # Maintenance logs
    async def save_maintenance_log(self, log: MaintenanceLog) -> MaintenanceLog:
        """Save a maintenance log."""
        ...

    async def get_maintenance_logs(self, machine_id: str | None = None) -> list[MaintenanceLog]:
        """Get maintenance logs, optionally for one machine."""
        ...

    # TraceEvents
    async def save_trace_event(self, event: TraceEvent) -> None:
        """Save a trace event."""
        ...

    async def get_trace_events(
        self,
        after: datetime | None = None,
        event_types: list[str] | None = None,
        actor: str | None = None,
        limit: int = 100,
    ) -> list[TraceEvent]:
        """Get trace events with optional filters (newest first)."""
        ...

    # Lifecycle
    async def clear(self) -> None:
        """Clear all data."""
        ...


def _to_utc(value: str) -> datetime:
    ts = datetime.fromisoformat(value)
    return ts if ts.tzinfo else ts.replace(tzinfo=timezone.utc)


def _production_from_row(row: aiosqlite.Row) -> ProductionRecord:
    return ProductionRecord(
        id=row["id"],
        date=date.fromisoformat(row["date"]),
        production_volume=row["production_volume"],
        machine_id=row["machine_id"],
        downtime_minutes=row["downtime_minutes"],
        failure_type=row["failure_type"],
        operator_id=row["operator_id"],
        operator_skill=row["operator_skill"],
        raw_material_status=row["raw_material_status"],
        delay_minutes=row["delay_minutes"],
        defective_bottles=row["defective_bottles"],
        rejection_reason=row["rejection_reason"],
        temperature=row["temperature"],
        humidity=row["humidity"],
    )


_PRODUCTION_COLUMNS = """
    id, date, production_volume, machine_id, downtime_minutes, failure_type,
    operator_id, operator_skill, raw_material_status, delay_minutes,
    defective_bottles, rejection_reason, temperature, humidity
"""


class Storage:
    """SQLite storage implementation."""

    def __init__(self, db_path: str | Path | None = None):
        if db_path is None:
            self._db_path = resolve_db_path()
        else:
            self._db_path = resolve_db_path(db_path)
        self._conn: aiosqlite.Connection | None = None

    async def init(self) -> None:
        """Initialize database and create tables."""
        if str(self._db_path) != ":memory:":
            Path(self._db_path).parent.mkdir(parents=True, exist_ok=True)

        self._conn = await aiosqlite.connect(self._db_path)
        self._conn.row_factory = aiosqlite.Row

        schema_path = Path(__file__).parent / "schema.sql"
        with open(schema_path, "r", encoding="utf-8") as f:
            schema_sql = f.read()
        await self._conn.executescript(schema_sql)
        await self._conn.commit()

    async def close(self) -> None:
        """Close database connection."""
        if self._conn:
            await self._conn.close()
            self._conn = None

    def _connection(self) -> aiosqlite.Connection:
        if not self._conn:
            raise RuntimeError("Storage not initialized")
        return self._conn

    # Sessions
    async def create_session(self, session_id: str) -> Session:
        """Create a session; an existing session is returned unchanged."""
        conn = self._connection()

        # INSERT OR IGNORE keeps concurrent first queries for one session safe
        await conn.execute(
            """
            INSERT OR IGNORE INTO chat_sessions (session_id, created_at, is_active)
            VALUES (?, ?, 1)
            """,
            (session_id, datetime.now(timezone.utc).isoformat()),
        )
        await conn.commit()

        session = await self.get_session(session_id)
        if session is None:
            raise RuntimeError(f"Session {session_id} could not be created")
        return session

    async def get_session(self, session_id: str) -> Session | None:
        """Get a session by ID."""
        conn = self._connection()

        cursor = await conn.execute(
            """
            SELECT session_id, created_at, is_active
            FROM chat_sessions
            WHERE session_id = ?
            """,
            (session_id,),
        )
        row = await cursor.fetchone()

        if not row:
            return None

        return Session(
            session_id=row["session_id"],
            created_at=_to_utc(row["created_at"]),
            is_active=bool(row["is_active"]),
        )

    # Messages
    async def save_chat_message(self, message: ChatMessage) -> ChatMessage:
        """Save a chat message and assign its ID."""
        conn = self._connection()

        cursor = await conn.execute(
            """
            INSERT INTO chat_messages
            (session_id, message, is_user, timestamp, agent_type, sql_query, chart_data)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (
                message.session_id,
                message.message,
                int(message.is_user),
                message.timestamp.isoformat(),
                message.agent_type.value if message.agent_type else None,
                message.sql_query,
                json.dumps(message.chart_data) if message.chart_data is not None else None,
            ),
        )
        await conn.commit()

        message.id = cursor.lastrowid
        return message

    async def get_chat_messages(self, session_id: str) -> list[ChatMessage]:
        """Get messages for a session in insertion order."""
        conn = self._connection()

        cursor = await conn.execute(
            """
            SELECT id, session_id, message, is_user, timestamp,
                   agent_type, sql_query, chart_data
            FROM chat_messages
            WHERE session_id = ?
            ORDER BY id ASC
            """,
            (session_id,),
        )
        rows = await cursor.fetchall()

        return [
            ChatMessage(
                id=row["id"],
                session_id=row["session_id"],
                message=row["message"],
                is_user=bool(row["is_user"]),
                timestamp=_to_utc(row["timestamp"]),
                agent_type=Category(row["agent_type"]) if row["agent_type"] else None,
                sql_query=row["sql_query"],
                chart_data=json.loads(row["chart_data"]) if row["chart_data"] else None,
            )
            for row in rows
        ]

    # Production data
    async def save_production_record(self, record: ProductionRecord) -> ProductionRecord:
        """Save a production record."""
        conn = self._connection()

        cursor = await conn.execute(
            """
            INSERT INTO production_data
            (date, production_volume, machine_id, downtime_minutes, failure_type,
             operator_id, operator_skill, raw_material_status, delay_minutes,
             defective_bottles, rejection_reason, temperature, humidity)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                record.date.isoformat(),
                record.production_volume,
                record.machine_id,
                record.downtime_minutes,
                record.failure_type,
                record.operator_id,
                record.operator_skill,
                record.raw_material_status,
                record.delay_minutes,
                record.defective_bottles,
                record.rejection_reason,
                record.temperature,
                record.humidity,
            ),
        )
        await conn.commit()

        record.id = cursor.lastrowid
        return record

    async def get_production_data(
        self, start: date | None = None, end: date | None = None
    ) -> list[ProductionRecord]:
        """Get production records, optionally within an inclusive date window."""
        conn = self._connection()

        conditions = []
        params: list[str] = []
        if start:
            conditions.append("date >= ?")
            params.append(start.isoformat())
        if end:
            conditions.append("date <= ?")
            params.append(end.isoformat())

        where_clause = f"WHERE {' AND '.join(conditions)}" if conditions else ""

        cursor = await conn.execute(
            f"""
            SELECT {_PRODUCTION_COLUMNS}
            FROM production_data
            {where_clause}
            ORDER BY date ASC, id ASC
            """,
            params,
        )
        rows = await cursor.fetchall()
        return [_production_from_row(row) for row in rows]

    async def get_lowest_production_days(
        self, limit: int = 5, below: int | None = None
    ) -> list[ProductionRecord]:
        """Get the records with the lowest production volume."""
        conn = self._connection()

        where_clause = "WHERE production_volume < ?" if below is not None else ""
        params: list[int] = [below] if below is not None else []
        params.append(limit)

        cursor = await conn.execute(
            f"""
            SELECT {_PRODUCTION_COLUMNS}
            FROM production_data
            {where_clause}
            ORDER BY production_volume ASC, date ASC
            LIMIT ?
            """,
            params,
        )
        rows = await cursor.fetchall()
        return [_production_from_row(row) for row in rows]

    async def get_latest_production_date(self) -> date | None:
        """Get the most recent production date on record."""
        conn = self._connection()

        cursor = await conn.execute("SELECT MAX(date) FROM production_data")
        row = await cursor.fetchone()

        if not row or row[0] is None:
            return None
        return date.fromisoformat(row[0])

    # Maintenance logs
    async def save_maintenance_log(self, log: MaintenanceLog) -> MaintenanceLog:
        """Save a maintenance log."""
        conn = self._connection()

        cursor = await conn.execute(
            """
            INSERT INTO maintenance_logs
            (machine_id, log_date, downtime_minutes, maintenance_type, description)
            VALUES (?, ?, ?, ?, ?)
            """,
            (
                log.machine_id,
                log.log_date.isoformat(),
                log.downtime_minutes,
                log.maintenance_type,
                log.description,
            ),
        )
        await conn.commit()

        log.id = cursor.lastrowid
        return log

    async def get_maintenance_logs(self, machine_id: str | None = None) -> list[MaintenanceLog]:
        """Get maintenance logs, optionally for one machine."""
        conn = self._connection()

        if machine_id:
            cursor = await conn.execute(
                """
                SELECT id, machine_id, log_date, downtime_minutes, maintenance_type, description
                FROM maintenance_logs
                WHERE machine_id = ?
                ORDER BY log_date ASC, id ASC
                """,
                (machine_id,),
            )
        else:
            cursor = await conn.execute(
                """
                SELECT id, machine_id, log_date, downtime_minutes, maintenance_type, description
                FROM maintenance_logs
                ORDER BY log_date ASC, id ASC
                """
            )

        rows = await cursor.fetchall()

        return [
            MaintenanceLog(
                id=row["id"],
                machine_id=row["machine_id"],
                log_date=date.fromisoformat(row["log_date"]),
                downtime_minutes=row["downtime_minutes"],
                maintenance_type=row["maintenance_type"],
                description=row["description"],
            )
            for row in rows
        ]

    # TraceEvents
    async def save_trace_event(self, event: TraceEvent) -> None:
        """Save a trace event."""
        conn = self._connection()

        await conn.execute(
            """
            INSERT INTO trace_events (id, event_type, actor, data, timestamp)
            VALUES (?, ?, ?, ?, ?)
            """,
            (
                event.id or str(uuid.uuid4()),
                event.event_type,
                event.actor,
                json.dumps(event.data, default=str),
                event.timestamp.isoformat(),
            ),
        )
        await conn.commit()

    async def get_trace_events(
        self,
        after: datetime | None = None,
        event_types: list[str] | None = None,
        actor: str | None = None,
        limit: int = 100,
    ) -> list[TraceEvent]:
        """Get trace events with optional filters (newest first)."""
        conn = self._connection()

        conditions = []
        params: list[str | int] = []

        if after:
            if after.tzinfo is None:
                after = after.replace(tzinfo=timezone.utc)
            conditions.append("timestamp > ?")
            params.append(after.astimezone(timezone.utc).isoformat())
        if event_types:
            placeholders = ",".join("?" * len(event_types))
            conditions.append(f"event_type IN ({placeholders})")
            params.extend(event_types)
        if actor:
            conditions.append("actor = ?")
            params.append(actor)

        where_clause = f"WHERE {' AND '.join(conditions)}" if conditions else ""

        query = f"""
            SELECT id, event_type, actor, data, timestamp
            FROM trace_events
            {where_clause}
            ORDER BY timestamp DESC, rowid DESC
            LIMIT ?
        """
        params.append(limit)

        cursor = await conn.execute(query, params)
        rows = await cursor.fetchall()

        return [
            TraceEvent(
                id=row["id"],
                event_type=row["event_type"],
                actor=row["actor"],
                data=json.loads(row["data"]),
                timestamp=_to_utc(row["timestamp"]),
            )
            for row in rows
        ]

    # Lifecycle
    async def clear(self) -> None:
        """Clear all data."""
        conn = self._connection()

        tables = [
            "chat_messages",
            "chat_sessions",
            "production_data",
            "maintenance_logs",
            "trace_events",
        ]

        for table in tables:
            await conn.execute(f"DELETE FROM {table}")

        await conn.commit()
