"""Schema and seed helpers used by ``scripts/`` and by ``create_app`` when
``AUTO_INIT_DB`` / ``AUTO_SEED_DB`` are enabled."""

from __future__ import annotations

import logging
import re
import uuid
from contextlib import closing
from pathlib import Path
from typing import Iterator, Optional, Union

import mysql.connector
from werkzeug.security import generate_password_hash

from .connection import DBConfig

logger = logging.getLogger(__name__)

# schema.sql carries its own CREATE DATABASE / USE lines for manual runs;
# the configured database name always wins here.
_SKIPPED_STATEMENT = re.compile(r"^(CREATE\s+DATABASE|USE)\b", re.IGNORECASE)
_LINE_COMMENT = re.compile(r"^\s*--.*$", re.MULTILINE)


def _open(config: DBConfig, *, with_database: bool = True):
    return closing(mysql.connector.connect(**config.connect_kwargs(with_database=with_database)))


def iter_sql_statements(sql: str) -> Iterator[str]:
    """Split a script on ``;`` outside quoted literals. ``--`` line comments are dropped."""

    sql = _LINE_COMMENT.sub("", sql)
    start = 0
    quote: Optional[str] = None
    i = 0
    while i < len(sql):
        ch = sql[i]
        if quote:
            if ch == "\\":
                i += 1
            elif ch == quote:
                quote = None
        elif ch in ("'", '"', "`"):
            quote = ch
        elif ch == ";":
            stmt = sql[start:i].strip()
            if stmt:
                yield stmt
            start = i + 1
        i += 1

    tail = sql[start:].strip()
    if tail:
        yield tail


def ensure_database_exists(db_config: dict) -> None:
    config = DBConfig.from_settings(db_config)
    with _open(config, with_database=False) as conn:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{config.database}` "
            "CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()


def apply_schema(db_config: dict, *, schema_path: Union[str, Path]) -> None:
    ensure_database_exists(db_config)
    script = Path(schema_path).read_text(encoding="utf-8")
    statements = [s for s in iter_sql_statements(script) if not _SKIPPED_STATEMENT.match(s)]

    with _open(DBConfig.from_settings(db_config)) as conn:
        cur = conn.cursor()
        for stmt in statements:
            cur.execute(stmt)
        conn.commit()
    logger.info("Applied %d statements from %s", len(statements), schema_path)


def ensure_demo_user(
    db_config: dict,
    *,
    email: str = "admin@example.com",
    name: str = "Admin Demo",
    password: str = "admin123",
) -> str:
    """Create the demo login, or reset its name and password; returns the user id."""

    password_hash = generate_password_hash(password)
    with _open(DBConfig.from_settings(db_config)) as conn:
        cur = conn.cursor(dictionary=True)
        cur.execute("SELECT id FROM users WHERE email=%s", (email,))
        row = cur.fetchone()
        if row:
            user_id = str(row["id"])
            cur.execute(
                "UPDATE users SET name=%s, password_hash=%s, is_active=1 WHERE id=%s",
                (name, password_hash, user_id),
            )
        else:
            user_id = uuid.uuid4().hex
            cur.execute(
                "INSERT INTO users (id, email, name, password_hash, is_active) VALUES (%s, %s, %s, %s, 1)",
                (user_id, email, name, password_hash),
            )
        conn.commit()
    logger.info("Demo user ready: %s", email)
    return user_id


def list_tables(db_config: dict) -> list[str]:
    with _open(DBConfig.from_settings(db_config)) as conn:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return sorted(row[0] for row in cur.fetchall())
