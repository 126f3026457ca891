from __future__ import annotations

from sqlalchemy import (
    Column,
    DateTime,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    func,
    text,
)

DEFAULT_STATUS = "ACTIVE"

metadata = MetaData()

module_cards = Table(
    "module_cards",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("title", String(255), nullable=False),
    Column("module_name", String(255), nullable=False),
    Column("module_code", String(64), nullable=False),
    Column("description", Text, nullable=True),
    Column("status", String(32), nullable=False, server_default=text(f"'{DEFAULT_STATUS}'")),
    Column("created_at", DateTime, nullable=False, server_default=func.current_timestamp()),
)
