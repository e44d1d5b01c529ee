"""Explicit input validation for ledger operations.

Each validator returns either ``Valid(value)`` carrying the typed input or
``Invalid(errors)`` carrying pydantic error entries whose ``loc`` is prefixed
with where the input came from (``path`` or ``body``).
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar, Union

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from .schemas import TransactionCreate

T = TypeVar("T")

_uuid_adapter: TypeAdapter[uuid.UUID] = TypeAdapter(uuid.UUID)


@dataclass(frozen=True)
class Valid(Generic[T]):
    value: T


@dataclass(frozen=True)
class Invalid:
    errors: list[dict[str, Any]] = field(default_factory=list)


ValidationResult = Union[Valid[T], Invalid]


def _invalid(exc: PydanticValidationError, *prefix: str) -> Invalid:
    errors = exc.errors(include_url=False, include_context=False, include_input=False)
    return Invalid(
        [{**error, "loc": [*prefix, *error["loc"]]} for error in errors],
    )


def validate_transaction_id(raw: object) -> ValidationResult[str]:
    """Parse a transaction id, returned in canonical lower-case hyphenated form."""

    try:
        parsed = _uuid_adapter.validate_python(raw)
    except PydanticValidationError as exc:
        return _invalid(exc, "path", "id")
    return Valid(str(parsed))


def validate_transaction_create(payload: object) -> ValidationResult[TransactionCreate]:
    """Validate a create-transaction body given as raw JSON or an already decoded object.

    Unknown keys are ignored.
    """

    try:
        if isinstance(payload, (bytes, bytearray, str)):
            value = TransactionCreate.model_validate_json(payload)
        else:
            value = TransactionCreate.model_validate(payload)
    except PydanticValidationError as exc:
        return _invalid(exc, "body")
    return Valid(value)


__all__ = [
    "Invalid",
    "Valid",
    "ValidationResult",
    "validate_transaction_create",
    "validate_transaction_id",
]
