from __future__ import annotations

from typing import Any

from sqlalchemy import delete, insert, select, update

from ..db import mysql
from ..db.schema import module_cards
from ..domain.cards import card_to_api, parse_card_fields
from ..errors import NotFoundError

CARD_NOT_FOUND = "Card not found"


def _card_id(card_id: Any, *, operation: str) -> int:
    # Ids arrive as path strings; anything that is not a positive integer
    # cannot match a row.
    try:
        n = int(str(card_id).strip())
    except (TypeError, ValueError):
        raise NotFoundError(message=CARD_NOT_FOUND, operation=operation, card_id=card_id) from None
    if n <= 0:
        raise NotFoundError(message=CARD_NOT_FOUND, operation=operation, card_id=card_id)
    return n


def list_cards() -> list[dict[str, Any]]:
    stmt = select(module_cards).order_by(module_cards.c.created_at.desc(), module_cards.c.id.desc())
    with mysql.connection("list_cards", message="Server error: cards cannot be fetched") as conn:
        rows = conn.execute(stmt).mappings().all()
    return [card_to_api(r) for r in rows]


def get_card(card_id: Any) -> dict[str, Any]:
    cid = _card_id(card_id, operation="get_card")
    stmt = select(module_cards).where(module_cards.c.id == cid)
    with mysql.connection("get_card", message="Server error: cannot fetch card") as conn:
        row = conn.execute(stmt).mappings().first()
    if row is None:
        raise NotFoundError(message=CARD_NOT_FOUND, operation="get_card", card_id=cid)
    return card_to_api(row)


def create_card(body: Any) -> int:
    """Insert a card and return its generated id."""
    fields = parse_card_fields(body)
    stmt = insert(module_cards).values(**fields.to_row())
    with mysql.connection("create_card", message="Server error: cannot create card") as conn:
        result = conn.execute(stmt)
        pk = result.inserted_primary_key
    return int(pk[0])


def update_card(card_id: Any, body: Any) -> None:
    """Replace all editable fields of a card."""
    fields = parse_card_fields(body)
    cid = _card_id(card_id, operation="update_card")
    stmt = update(module_cards).where(module_cards.c.id == cid).values(**fields.to_row())
    with mysql.connection("update_card", message="Server error: cannot update card") as conn:
        matched = conn.execute(stmt).rowcount
    if not matched:
        raise NotFoundError(message=CARD_NOT_FOUND, operation="update_card", card_id=cid)


def delete_card(card_id: Any) -> None:
    cid = _card_id(card_id, operation="delete_card")
    stmt = delete(module_cards).where(module_cards.c.id == cid)
    with mysql.connection("delete_card", message="Server error: cannot delete card") as conn:
        deleted = conn.execute(stmt).rowcount
    if not deleted:
        raise NotFoundError(message=CARD_NOT_FOUND, operation="delete_card", card_id=cid)
