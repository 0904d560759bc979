# dme_orders/validation/validators.py
import json
from typing import Any

from pydantic import BaseModel, ValidationError, field_validator

from dme_orders.commons.errors import InvalidInputError


class NoteInput(BaseModel):
    text: str

    @field_validator("text")
    @classmethod
    def _not_blank(cls, v: str):
        if not v or not v.strip():
            raise ValueError("El texto de la nota está vacío")
        return v


class NoteEnvelope(BaseModel):
    """Sobre JSON del cargador: {"data": "<texto de la nota>"}."""

    data: str


def validate_note_or_raise(note_text: Any) -> str:
    """Devuelve el texto si es usable; si es None, vacío o solo espacios, InvalidInputError."""
    if note_text is None:
        raise InvalidInputError("Note text is required")
    try:
        return NoteInput(text=note_text).text
    except ValidationError as ve:
        raise InvalidInputError(f"Invalid note text: {ve.errors()[0]['msg']}") from ve


def note_from_envelope(raw: str) -> str:
    try:
        envelope = NoteEnvelope.model_validate(json.loads(raw))
    except (json.JSONDecodeError, ValidationError) as ex:
        raise InvalidInputError(f"Invalid note envelope: {ex}") from ex
    return validate_note_or_raise(envelope.data)
