from __future__ import annotations
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Literal, Any, Generic, TypeVar

from models import Piece, Exercise, TrainingSession, Instrument

PieceStatusName = Literal["TRAINING", "REPERTOIRE"]

@dataclass(frozen=True)
class CreatePieceRequest:
    name: str
    composer: str
    work: str | None = None
    source: str | None = None
    status: PieceStatusName = "TRAINING"

@dataclass(frozen=True)
class CreateExerciseRequest:
    name: str

@dataclass(frozen=True)
class CreateTrainingSessionRequest:
    date: date
    duration: int  # minutes
    exercises: list[int] = field(default_factory=list)
    new_pieces: list[int] = field(default_factory=list)
    repertoire: list[int] = field(default_factory=list)

@dataclass(frozen=True)
class FieldError:
    field: str
    message: str

    def __str__(self) -> str:
        return f"{self.field}: {self.message}"

T = TypeVar("T")

@dataclass
class ValidationResult(Generic[T]):
    is_valid: bool
    errors: list[FieldError] = field(default_factory=list)
    data: T | None = None

    def details(self) -> str:
        return ", ".join(str(e) for e in self.errors)


# ----------------------------
# Response serializers (camelCase keys, matching the web client)
# ----------------------------

def _iso(value: date | datetime | None) -> str | None:
    return value.isoformat() if value is not None else None

def piece_to_dict(p: Piece) -> dict[str, Any]:
    return {
        "id": p.id,
        "name": p.name,
        "composer": p.composer,
        "work": p.work,
        "source": p.source,
        "status": p.status.value,
        "playCount": int(p.play_count or 0),
        "dateAdded": _iso(p.date_added),
        "lastPlayed": _iso(p.last_played),
    }

def exercise_to_dict(e: Exercise) -> dict[str, Any]:
    return {
        "id": e.id,
        "name": e.name,
        "lastPracticed": _iso(e.last_practiced),
    }

def training_session_to_dict(s: TrainingSession) -> dict[str, Any]:
    return {
        "id": s.id,
        "date": _iso(s.date),
        "duration": s.duration,
        "status": s.status.value,
        "createdAt": _iso(s.created_at),
        "exercises": [
            {
                "exerciseId": row.exercise_id,
                "trainingSessionId": row.training_session_id,
                "exercise": exercise_to_dict(row.exercise),
            }
            for row in s.exercises
        ],
        "newPieces": [
            {
                "pieceId": row.piece_id,
                "trainingSessionId": row.training_session_id,
                "piece": piece_to_dict(row.piece),
            }
            for row in s.new_pieces
        ],
        "repertoirePieces": [
            {
                "pieceId": row.piece_id,
                "trainingSessionId": row.training_session_id,
                "piece": piece_to_dict(row.piece),
            }
            for row in s.repertoire_pieces
        ],
    }

def instrument_to_dict(i: Instrument) -> dict[str, Any]:
    return {
        "id": i.id,
        "name": i.name,
        "type": i.type,
        "brand": i.brand,
        "model": i.model,
        "acquired_date": _iso(i.acquired_date),
        "notes": i.notes,
        "created_at": _iso(i.created_at),
    }
