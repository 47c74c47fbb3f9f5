"""
Data store backends.
Key-based row storage per table: a JSON file backend for local use and tests,
and a Supabase backend for the hosted database.
"""

import json
import logging
import os
import threading
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Optional

import httpx
from postgrest.exceptions import APIError
from supabase import Client, create_client

from errors import NotFound, StoreUnavailable

logger = logging.getLogger("data_store")

SUBJECTS = "subjects"
PROFILES = "profiles"
LEARNING_SESSIONS = "learning_sessions"
SESSION_ATTEMPTS = "session_attempts"

TABLES = (SUBJECTS, PROFILES, LEARNING_SESSIONS, SESSION_ATTEMPTS)

# PostgreSQL invalid_text_representation, e.g. a non-uuid id
INVALID_TEXT_REPRESENTATION = "22P02"

Row = dict[str, Any]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DataStore:
    """Read/write contract the lifecycle manager and dashboard rely on."""

    def get(self, table: str, record_id: str) -> Optional[Row]:
        raise NotImplementedError

    def insert(self, table: str, payload: Row) -> Row:
        raise NotImplementedError

    def update(self, table: str, record_id: str, changes: Row) -> Row:
        raise NotImplementedError

    def select(
        self,
        table: str,
        filters: Optional[Row] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> list[Row]:
        raise NotImplementedError


# ---------------------------------------------------------------------------
# JSON files
# ---------------------------------------------------------------------------

class JsonFileStore(DataStore):
    """One ``<table>.json`` file per table holding rows keyed by id."""

    def __init__(self, data_dir: Path, clock: Optional[Callable[[], datetime]] = None):
        self.data_dir = Path(data_dir)
        self.clock = clock or utcnow
        # handlers run in a thread pool; each read-modify-write holds the lock
        self._lock = threading.RLock()

    def _table_path(self, table: str) -> Path:
        return self.data_dir / f"{table}.json"

    def _load(self, table: str) -> dict[str, Row]:
        path = self._table_path(table)
        if not path.exists():
            return {}
        try:
            return json.loads(path.read_text())
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Could not read {path}: {e}")
            raise StoreUnavailable(f"Could not read table '{table}'") from e

    def _save(self, table: str, rows: dict[str, Row]) -> None:
        path = self._table_path(table)
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            tmp = path.with_suffix(".json.tmp")
            tmp.write_text(json.dumps(rows, indent=2))
            os.replace(tmp, path)
        except OSError as e:
            logger.error(f"Could not write {path}: {e}")
            raise StoreUnavailable(f"Could not write table '{table}'") from e

    def get(self, table: str, record_id: str) -> Optional[Row]:
        with self._lock:
            row = self._load(table).get(record_id)
        return dict(row) if row is not None else None

    def insert(self, table: str, payload: Row) -> Row:
        row = dict(payload)
        row.setdefault("id", str(uuid.uuid4()))
        row.setdefault("created_at", self.clock().isoformat())
        with self._lock:
            rows = self._load(table)
            rows[row["id"]] = row
            self._save(table, rows)
        logger.debug(f"insert {table} id={row['id']}")
        return dict(row)

    def update(self, table: str, record_id: str, changes: Row) -> Row:
        with self._lock:
            rows = self._load(table)
            if record_id not in rows:
                raise NotFound(table, record_id)
            rows[record_id].update(changes)
            self._save(table, rows)
        logger.debug(f"update {table} id={record_id} fields={sorted(changes)}")
        return dict(rows[record_id])

    def select(
        self,
        table: str,
        filters: Optional[Row] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> list[Row]:
        with self._lock:
            rows = [dict(r) for r in self._load(table).values()]
        for key, value in (filters or {}).items():
            rows = [r for r in rows if r.get(key) == value]
        if order_by:
            rows.sort(
                key=lambda r: (r.get(order_by) is None, r.get(order_by)),
                reverse=descending,
            )
        if limit is not None:
            rows = rows[:limit]
        return rows


# ---------------------------------------------------------------------------
# Supabase
# ---------------------------------------------------------------------------

class SupabaseStore(DataStore):
    """Rows live in Supabase tables; row-level policies do the authorization."""

    def __init__(self, client: Client):
        self.client = client

    def _execute(self, table: str, op: str, query, record_id: Optional[str] = None):
        try:
            return query.execute()
        except APIError as e:
            if record_id is not None and e.code == INVALID_TEXT_REPRESENTATION:
                raise NotFound(table, record_id) from e
            logger.error(f"Supabase {op} on {table} failed: {e}")
            raise StoreUnavailable(f"Supabase {op} on '{table}' failed") from e
        except httpx.HTTPError as e:
            logger.error(f"Supabase {op} on {table} failed: {e}")
            raise StoreUnavailable(f"Supabase {op} on '{table}' failed") from e

    def get(self, table: str, record_id: str) -> Optional[Row]:
        query = self.client.table(table).select("*").eq("id", record_id).limit(1)
        try:
            resp = self._execute(table, "select", query, record_id)
        except NotFound:
            return None
        return resp.data[0] if resp.data else None

    def insert(self, table: str, payload: Row) -> Row:
        resp = self._execute(table, "insert", self.client.table(table).insert(payload))
        if not resp.data:
            raise StoreUnavailable(f"Supabase insert on '{table}' returned no row")
        logger.debug(f"insert {table} id={resp.data[0].get('id')}")
        return resp.data[0]

    def update(self, table: str, record_id: str, changes: Row) -> Row:
        query = self.client.table(table).update(changes).eq("id", record_id)
        resp = self._execute(table, "update", query, record_id)
        if not resp.data:
            raise NotFound(table, record_id)
        logger.debug(f"update {table} id={record_id} fields={sorted(changes)}")
        return resp.data[0]

    def select(
        self,
        table: str,
        filters: Optional[Row] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> list[Row]:
        query = self.client.table(table).select("*")
        for key, value in (filters or {}).items():
            query = query.eq(key, value)
        if order_by:
            query = query.order(order_by, desc=descending)
        if limit is not None:
            query = query.limit(limit)
        resp = self._execute(table, "select", query)
        return resp.data or []


def build_store(
    supabase_url: Optional[str] = None,
    supabase_key: Optional[str] = None,
    data_dir: Optional[Path] = None,
) -> DataStore:
    """Supabase when both credentials are given, JSON files under data_dir otherwise."""
    if supabase_url and supabase_key:
        logger.info(f"Using Supabase store at {supabase_url}")
        return SupabaseStore(create_client(supabase_url, supabase_key))
    if data_dir is None:
        raise ValueError("data_dir is required when Supabase is not configured")
    logger.info(f"Using JSON file store in {data_dir}")
    return JsonFileStore(data_dir)
