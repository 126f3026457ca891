from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any, Mapping

from ..db.schema import DEFAULT_STATUS
from ..errors import ValidationError

REQUIRED_FIELDS = ("title", "module_name", "module_code")

MISSING_FIELDS_MESSAGE = "Missing required fields: " + ", ".join(REQUIRED_FIELDS)


@dataclass(frozen=True, slots=True)
class CardFields:
    """The editable part of a Card, after defaults are applied."""

    title: str
    module_name: str
    module_code: str
    description: str | None = None
    status: str = DEFAULT_STATUS

    def to_row(self) -> dict[str, Any]:
        return asdict(self)


def _text(v: Any) -> str | None:
    # Falsy values (null, "", false, 0) and nested objects count as absent.
    if isinstance(v, (dict, list)) or not v:
        return None
    return v if isinstance(v, str) else str(v)


def _optional_text(v: Any) -> str | None:
    # Only a missing key or JSON null falls back to the default.
    if v is None:
        return None
    return v if isinstance(v, str) else str(v)


def parse_card_fields(body: Any) -> CardFields:
    """
    Validate a create/update body and apply defaults.

    Raises ValidationError when the body is not an object or when any of
    title, module_name, module_code is absent.
    """
    if body is None:
        body = {}
    if not isinstance(body, Mapping):
        raise ValidationError(message="Request body must be a JSON object")

    values = {k: _text(body.get(k)) for k in REQUIRED_FIELDS}
    missing = [k for k in REQUIRED_FIELDS if not values[k]]
    if missing:
        raise ValidationError(message=MISSING_FIELDS_MESSAGE, missing_fields=missing)

    description = _optional_text(body.get("description"))
    status = _optional_text(body.get("status"))
    return CardFields(
        title=str(values["title"]),
        module_name=str(values["module_name"]),
        module_code=str(values["module_code"]),
        description=description,
        status=DEFAULT_STATUS if status is None else status,
    )


def card_to_api(row: Mapping[str, Any]) -> dict[str, Any]:
    out = dict(row)
    created = out.get("created_at")
    if isinstance(created, datetime):
        out["created_at"] = created.isoformat()
    return out
