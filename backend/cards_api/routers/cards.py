from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body

from ..repositories import cards_repo

router = APIRouter(tags=["cards"])


@router.get("/allcards")
def list_cards():
    return cards_repo.list_cards()


@router.get("/cards/{card_id}")
def get_card(card_id: str):
    return cards_repo.get_card(card_id)


@router.post("/cards", status_code=201)
def create_card(body: Any = Body(default=None)):
    card_id = cards_repo.create_card(body)
    return {"message": "Card created successfully", "id": card_id}


@router.put("/cards/{card_id}")
def update_card(card_id: str, body: Any = Body(default=None)):
    cards_repo.update_card(card_id, body)
    return {"message": "Card updated successfully"}


@router.delete("/cards/{card_id}")
def delete_card(card_id: str):
    cards_repo.delete_card(card_id)
    return {"message": "Card deleted successfully"}
