from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(slots=True)
class CardsError(Exception):
    """Base error for card operations.

    These are intended to be caught by a FastAPI exception handler and rendered
    into problem-details responses; see ``cards_api.main``.
    """

    message: str
    operation: str | None = None
    card_id: object | None = None
    cause: Exception | None = None

    def __str__(self) -> str:
        return self.message


@dataclass(slots=True)
class ValidationError(CardsError):
    missing_fields: list[str] = field(default_factory=list)


@dataclass(slots=True)
class NotFoundError(CardsError):
    pass


@dataclass(slots=True)
class StorageError(CardsError):
    pass
