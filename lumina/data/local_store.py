from __future__ import annotations

import json
import logging

from sqlalchemy import create_engine, text as sql_text
from sqlalchemy.exc import SQLAlchemyError

from lumina.constants import SETTINGS_TABLE

logger = logging.getLogger(__name__)


class LocalStore:
    """Key/value JSON store on a local database.

    Holds the degraded-mode caches for tasks and vision items and the small
    UI preference flags.
    """

    def __init__(self, database_url=None, engine=None):
        if engine is None:
            engine = create_engine(database_url or "sqlite:///lumina_local.db", future=True)
        self._engine = engine
        self._ready = False

    def _ensure_table(self):
        if self._ready:
            return
        with self._engine.begin() as conn:
            conn.execute(
                sql_text(
                    f"""
                    CREATE TABLE IF NOT EXISTS {SETTINGS_TABLE} (
                        key TEXT PRIMARY KEY,
                        value TEXT
                    )
                    """
                )
            )
        self._ready = True

    def get_raw(self, key):
        self._ensure_table()
        with self._engine.connect() as conn:
            row = conn.execute(
                sql_text(f"SELECT value FROM {SETTINGS_TABLE} WHERE key = :key"),
                {"key": key},
            ).fetchone()
        return row[0] if row else None

    def set_raw(self, key, value):
        self._ensure_table()
        with self._engine.begin() as conn:
            conn.execute(
                sql_text(
                    f"INSERT INTO {SETTINGS_TABLE} (key, value) VALUES (:key, :value) "
                    "ON CONFLICT(key) DO UPDATE SET value=EXCLUDED.value"
                ),
                {"key": key, "value": value},
            )

    def delete(self, key):
        self._ensure_table()
        with self._engine.begin() as conn:
            conn.execute(sql_text(f"DELETE FROM {SETTINGS_TABLE} WHERE key = :key"), {"key": key})

    def get_json(self, key, default=None):
        try:
            raw = self.get_raw(key)
        except SQLAlchemyError:
            logger.exception("Local store read failed for %s", key)
            return default
        if raw is None:
            return default
        try:
            return json.loads(raw)
        except ValueError:
            logger.warning("Discarding unreadable local value for %s", key)
            return default

    def set_json(self, key, value):
        try:
            self.set_raw(key, json.dumps(value, ensure_ascii=False))
        except SQLAlchemyError:
            logger.exception("Local store write failed for %s", key)
            return False
        return True

    def get_flag(self, key, default=False):
        return bool(self.get_json(key, default))

    def set_flag(self, key, value):
        return self.set_json(key, bool(value))
