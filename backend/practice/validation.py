"""Validation of untrusted JSON bodies.

Each validator returns a ValidationResult. On failure every violated field is
reported, in declaration order; on success ``data`` holds a frozen request
record with normalized values. Nothing here touches the database.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date, datetime
from typing import Any

from schemas import (
    CreatePieceRequest,
    CreateExerciseRequest,
    CreateTrainingSessionRequest,
    FieldError,
    ValidationResult,
)

PIECE_STATUSES = ("TRAINING", "REPERTOIRE")

# Largest value a signed 64-bit INTEGER column can hold.
MAX_DB_INT = 2**63 - 1

_NOT_AN_OBJECT = FieldError("body", "Request body must be a JSON object")


def _non_empty_string(value: Any) -> bool:
    return isinstance(value, str) and len(value.strip()) > 0

def _optional_string(value: Any) -> bool:
    return value is None or isinstance(value, str)

def _trimmed_or_none(value: str | None) -> str | None:
    if value is None:
        return None
    return value.strip() or None

def _as_positive_int(value: Any) -> int | None:
    # bool is an int subclass; JSON true/false is never an id or a duration
    if isinstance(value, bool):
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, int) and 0 < value <= MAX_DB_INT:
        return value
    return None

def _parse_date(value: str) -> date | None:
    s = value.strip()
    try:
        return date.fromisoformat(s)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(s.replace("Z", "+00:00")).date()
    except ValueError:
        return None

def _id_list(value: Any) -> list[int] | None:
    """Return the ids as ints, or None if any entry is not a positive integer."""
    out: list[int] = []
    for item in value:
        n = _as_positive_int(item)
        if n is None:
            return None
        out.append(n)
    return out


def validate_create_piece(data: Any) -> ValidationResult[CreatePieceRequest]:
    if not isinstance(data, Mapping):
        return ValidationResult(is_valid=False, errors=[_NOT_AN_OBJECT])

    errors: list[FieldError] = []

    if not _non_empty_string(data.get("name")):
        errors.append(FieldError("name", "Name is required and must be a non-empty string"))

    if not _non_empty_string(data.get("composer")):
        errors.append(FieldError("composer", "Composer is required and must be a non-empty string"))

    if not _optional_string(data.get("work")):
        errors.append(FieldError("work", "Work must be a string if provided"))

    if not _optional_string(data.get("source")):
        errors.append(FieldError("source", "Source must be a string if provided"))

    # an explicit null status is rejected, only a missing key gets the default
    if "status" in data and data["status"] not in PIECE_STATUSES:
        errors.append(FieldError("status", "Status must be either TRAINING or REPERTOIRE"))

    if errors:
        return ValidationResult(is_valid=False, errors=errors)

    return ValidationResult(
        is_valid=True,
        data=CreatePieceRequest(
            name=data["name"].strip(),
            composer=data["composer"].strip(),
            work=_trimmed_or_none(data.get("work")),
            source=_trimmed_or_none(data.get("source")),
            status=data.get("status", "TRAINING"),
        ),
    )


def validate_create_exercise(data: Any) -> ValidationResult[CreateExerciseRequest]:
    if not isinstance(data, Mapping):
        return ValidationResult(is_valid=False, errors=[_NOT_AN_OBJECT])

    if not _non_empty_string(data.get("name")):
        return ValidationResult(
            is_valid=False,
            errors=[FieldError("name", "Name is required and must be a non-empty string")],
        )

    return ValidationResult(is_valid=True, data=CreateExerciseRequest(name=data["name"].strip()))


def validate_create_training_session(data: Any) -> ValidationResult[CreateTrainingSessionRequest]:
    if not isinstance(data, Mapping):
        return ValidationResult(is_valid=False, errors=[_NOT_AN_OBJECT])

    errors: list[FieldError] = []

    session_date: date | None = None
    raw_date = data.get("date")
    if not raw_date or not isinstance(raw_date, str):
        errors.append(FieldError("date", "Date is required and must be a valid ISO date string"))
    else:
        session_date = _parse_date(raw_date)
        if session_date is None:
            errors.append(FieldError("date", "Date must be a valid ISO date string"))

    duration = _as_positive_int(data.get("duration"))
    if duration is None:
        errors.append(FieldError("duration", "Duration is required and must be a positive integer (minutes)"))

    id_lists: dict[str, list[int]] = {}
    for key, not_a_list, bad_id in (
        ("exercises", "Exercises must be an array of exercise IDs", "All exercise IDs must be positive integers"),
        ("newPieces", "NewPieces must be an array of piece IDs", "All new piece IDs must be positive integers"),
        ("repertoire", "Repertoire must be an array of piece IDs", "All repertoire piece IDs must be positive integers"),
    ):
        raw = data.get(key)
        if not isinstance(raw, list):
            errors.append(FieldError(key, not_a_list))
            continue
        ids = _id_list(raw)
        if ids is None:
            errors.append(FieldError(key, bad_id))
            continue
        id_lists[key] = ids

    if errors:
        return ValidationResult(is_valid=False, errors=errors)

    # ids are kept as given: no dedup, no cross-list overlap check
    return ValidationResult(
        is_valid=True,
        data=CreateTrainingSessionRequest(
            date=session_date,
            duration=duration,
            exercises=id_lists["exercises"],
            new_pieces=id_lists["newPieces"],
            repertoire=id_lists["repertoire"],
        ),
    )
