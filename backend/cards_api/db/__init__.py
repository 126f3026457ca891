from __future__ import annotations

from .mysql import connection, create_tables, dispose_engine, get_engine
from .schema import DEFAULT_STATUS, metadata, module_cards

__all__ = [
    "DEFAULT_STATUS",
    "connection",
    "create_tables",
    "dispose_engine",
    "get_engine",
    "metadata",
    "module_cards",
]
