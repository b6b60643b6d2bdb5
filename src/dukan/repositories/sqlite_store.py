from __future__ import annotations

import json
import shutil
import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Any, Mapping, Protocol


class KeyValueStore(Protocol):
    def load(self, key: str, default: Any = None) -> Any: ...
    def save(self, key: str, value: Any) -> None: ...
    def save_many(self, records: Mapping[str, Any]) -> None: ...


class SqliteKeyValueStore:
    """JSON documents keyed by name, one row per key.

    ``save_many`` writes every record inside a single transaction, so readers
    either see all of the new values or none of them.
    """

    def __init__(self, db_path: Path | str):
        self.db_path = str(db_path)

    def _conn(self) -> sqlite3.Connection:
        return sqlite3.connect(self.db_path)

    def init_db(self) -> None:
        self.run_migrations()

    def run_migrations(self) -> None:
        conn = self._conn()
        backup_path = self._create_pre_migration_backup()
        try:
            cur = conn.cursor()
            cur.execute("BEGIN")
            cur.execute("CREATE TABLE IF NOT EXISTS schema_migrations (version INTEGER PRIMARY KEY, applied_at TEXT NOT NULL)")
            cur.execute("SELECT COALESCE(MAX(version), 0) FROM schema_migrations")
            current_version = int(cur.fetchone()[0])

            migrations = [
                (1, self._migration_v1_base),
            ]

            for version, migration in migrations:
                if version <= current_version:
                    continue
                migration(cur)
                cur.execute(
                    "INSERT INTO schema_migrations (version, applied_at) VALUES (?, datetime('now'))",
                    (version,),
                )
            conn.commit()
        except Exception as exc:
            conn.rollback()
            self._restore_pre_migration_backup(backup_path)
            raise RuntimeError(
                "Database migration failed. Original database restored from automatic backup."
            ) from exc
        finally:
            conn.close()

    def _create_pre_migration_backup(self) -> Path | None:
        db_file = Path(self.db_path)
        if not db_file.exists() or db_file.stat().st_size == 0:
            return None
        backup_file = db_file.with_name(f"{db_file.stem}.pre_migration_{datetime.now().strftime('%Y%m%d%H%M%S')}.bak")
        shutil.copy2(db_file, backup_file)
        return backup_file

    def _restore_pre_migration_backup(self, backup_path: Path | None) -> None:
        if backup_path is None or not backup_path.exists():
            return
        shutil.copy2(backup_path, self.db_path)

    def _migration_v1_base(self, cur: sqlite3.Cursor) -> None:
        cur.execute(
            """
        CREATE TABLE IF NOT EXISTS kv_records (
            key TEXT PRIMARY KEY,
            value TEXT NOT NULL,
            updated_at TEXT NOT NULL
        )
        """
        )

    def schema_version(self) -> int:
        conn = self._conn()
        cur = conn.cursor()
        cur.execute("SELECT COALESCE(MAX(version), 0) FROM schema_migrations")
        row = cur.fetchone()
        conn.close()
        return int(row[0]) if row else 0

    def integrity_check(self) -> str:
        conn = self._conn()
        cur = conn.cursor()
        cur.execute("PRAGMA integrity_check")
        row = cur.fetchone()
        conn.close()
        return str(row[0]) if row else "unknown"

    # ---------- Records ----------
    def load(self, key: str, default: Any = None) -> Any:
        conn = self._conn()
        cur = conn.cursor()
        cur.execute("SELECT value FROM kv_records WHERE key = ?", (key,))
        row = cur.fetchone()
        conn.close()
        if not row:
            return default
        return json.loads(row[0])

    def save(self, key: str, value: Any) -> None:
        self.save_many({key: value})

    def save_many(self, records: Mapping[str, Any]) -> None:
        if not records:
            return
        dt_iso = datetime.now().replace(microsecond=0).isoformat(sep=" ")
        conn = self._conn()
        cur = conn.cursor()
        try:
            for key, value in records.items():
                self._write_record(cur, key, json.dumps(value, ensure_ascii=False), dt_iso)
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _write_record(self, cur: sqlite3.Cursor, key: str, payload: str, dt_iso: str) -> None:
        cur.execute(
            """
            INSERT INTO kv_records (key, value, updated_at) VALUES (?, ?, ?)
            ON CONFLICT(key) DO UPDATE SET value=excluded.value, updated_at=excluded.updated_at
        """,
            (key, payload, dt_iso),
        )

    def delete(self, key: str) -> bool:
        conn = self._conn()
        cur = conn.cursor()
        cur.execute("DELETE FROM kv_records WHERE key = ?", (key,))
        changed = cur.rowcount > 0
        conn.commit()
        conn.close()
        return bool(changed)

    def keys(self) -> list[str]:
        conn = self._conn()
        cur = conn.cursor()
        cur.execute("SELECT key FROM kv_records ORDER BY key")
        rows = cur.fetchall()
        conn.close()
        return [str(r[0]) for r in rows]
