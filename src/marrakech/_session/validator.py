# Area: Session
"""
marrakech._session.validator — Incoming action payload validation
=================================================================

Action payloads arrive from a transport as loose mappings. They are
parsed into typed models before any game state is read or touched.
"""

from typing import Any, Mapping, Union

from pydantic import BaseModel, ConfigDict, StrictInt, ValidationError

from .._engine.enums import Orientation, Turn
from ..errors import InvalidMoveError


class RugPlacement(BaseModel):
    """Base cell and orientation of a rug to lay."""

    model_config = ConfigDict(frozen=True)

    x: StrictInt
    y: StrictInt
    orientation: Orientation


def _describe(error: ValidationError) -> str:
    parts = []
    for item in error.errors():
        field = ".".join(str(loc) for loc in item["loc"]) or "payload"
        parts.append(f"{field}: {item['msg']}")
    return "; ".join(parts)


def parse_placement(payload: Union[RugPlacement, Mapping[str, Any]]) -> RugPlacement:
    """
    Raises:
        InvalidMoveError: If the payload is not a well-formed placement
    """
    if isinstance(payload, RugPlacement):
        return payload
    if not isinstance(payload, Mapping):
        raise InvalidMoveError(f"Placement must be a mapping, got {type(payload).__name__}")
    try:
        return RugPlacement.model_validate(dict(payload))
    except ValidationError as e:
        raise InvalidMoveError(f"Malformed placement: {_describe(e)}") from None


def parse_turn(value: Union[Turn, str]) -> Turn:
    try:
        return Turn(value)
    except ValueError:
        raise InvalidMoveError(f"Unknown rotation: {value!r}") from None
