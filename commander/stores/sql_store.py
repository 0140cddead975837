# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Store: relational data access for professionals, drill state and resource requests.

Schema (see ``schema.sql``) including the ``professional_task_summary`` view is
expected to exist already; this store never creates tables.
"""
import json
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine

from commander.core.logging import get_logger
from commander.stores.base import (
    PROFESSIONAL_FIELDS, UPDATABLE_FIELDS, ProfessionalStore, normalize_email,
)

logger = get_logger(__name__)

PROFESSIONAL_COLS = ", ".join(PROFESSIONAL_FIELDS)


def _plain(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    return value


def _row_to_dict(row) -> Dict[str, Any]:
    return {key: _plain(value) for key, value in row._mapping.items()}


def build_engine(database_url: str, pool_size: int = 10, max_overflow: int = 5,
                 pool_recycle: int = 300) -> Engine:
    return create_engine(
        database_url,
        pool_pre_ping=True,
        pool_size=pool_size,
        max_overflow=max_overflow,
        pool_recycle=pool_recycle,
    )


class SqlProfessionalStore(ProfessionalStore):
    backend = "sql"

    def __init__(self, engine: Engine):
        self._engine = engine

    # ── Professionals ──────────────────────────────────────────────────

    def find_professional_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        with self._engine.connect() as conn:
            row = conn.execute(
                text(f"SELECT {PROFESSIONAL_COLS}, password_hash FROM professionals "
                     "WHERE LOWER(email) = :email"),
                {"email": normalize_email(email)},
            ).fetchone()
        return _row_to_dict(row) if row else None

    def find_professional_by_id(self, professional_id: str) -> Optional[Dict[str, Any]]:
        with self._engine.connect() as conn:
            row = conn.execute(
                text(f"SELECT {PROFESSIONAL_COLS} FROM professionals WHERE professional_id = :id"),
                {"id": professional_id},
            ).fetchone()
        return _row_to_dict(row) if row else None

    def list_professionals(self) -> List[Dict[str, Any]]:
        with self._engine.connect() as conn:
            rows = conn.execute(
                text(f"SELECT {PROFESSIONAL_COLS} FROM professionals ORDER BY name")
            ).fetchall()
        return [_row_to_dict(r) for r in rows]

    def update_professional(self, professional_id: str,
                            updates: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        assignments = ", ".join(f"{col} = COALESCE(:{col}, {col})" for col in UPDATABLE_FIELDS)
        params = {col: updates.get(col) for col in UPDATABLE_FIELDS}
        params["id"] = professional_id
        with self._engine.begin() as conn:
            result = conn.execute(
                text(f"UPDATE professionals SET {assignments}, updated_at = CURRENT_TIMESTAMP "
                     "WHERE professional_id = :id"),
                params,
            )
            if result.rowcount == 0:
                return None
            row = conn.execute(
                text(f"SELECT {PROFESSIONAL_COLS} FROM professionals WHERE professional_id = :id"),
                {"id": professional_id},
            ).fetchone()
        return _row_to_dict(row) if row else None

    def get_task_summary(self, professional_id: str) -> Optional[Dict[str, Any]]:
        with self._engine.connect() as conn:
            row = conn.execute(
                text("SELECT * FROM professional_task_summary WHERE professional_id = :id"),
                {"id": professional_id},
            ).fetchone()
        return _row_to_dict(row) if row else None

    # ── Drill / resources ──────────────────────────────────────────────

    def get_active_drill(self) -> Optional[Dict[str, Any]]:
        with self._engine.connect() as conn:
            row = conn.execute(
                text("SELECT data FROM active_drill WHERE id = 'active'")
            ).fetchone()
        if not row or row[0] is None:
            return None
        return row[0] if isinstance(row[0], dict) else json.loads(row[0])

    def set_active_drill(self, drill: Dict[str, Any]) -> Dict[str, Any]:
        with self._engine.begin() as conn:
            conn.execute(
                text("""
                    INSERT INTO active_drill (id, data, updated_at)
                    VALUES ('active', :data, CURRENT_TIMESTAMP)
                    ON CONFLICT (id) DO UPDATE
                        SET data = excluded.data, updated_at = excluded.updated_at
                """),
                {"data": json.dumps(drill)},
            )
        return drill

    def get_resource_requests(self) -> List[Dict[str, Any]]:
        with self._engine.connect() as conn:
            rows = conn.execute(
                text("SELECT * FROM resource_requests ORDER BY created_at DESC")
            ).fetchall()
        return [_row_to_dict(r) for r in rows]

    # ── Ops ────────────────────────────────────────────────────────────

    def verify_connection(self) -> None:
        with self._engine.connect() as conn:
            conn.execute(text("SELECT 1"))

    def close(self) -> None:
        self._engine.dispose()
