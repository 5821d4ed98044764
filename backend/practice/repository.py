from __future__ import annotations

import logging
from collections.abc import Sequence
from contextlib import contextmanager
from datetime import date
from typing import Any, Iterator

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session, selectinload

from models import (
    Piece,
    PieceStatus,
    Exercise,
    Instrument,
    TrainingSession,
    TrainingSessionExercise,
    TrainingSessionNewPiece,
    TrainingSessionRepertoirePiece,
)

logger = logging.getLogger(__name__)

# Eager-load all three relation sets together with the linked exercise/piece rows.
_SESSION_RELATIONS = (
    selectinload(TrainingSession.exercises).selectinload(TrainingSessionExercise.exercise),
    selectinload(TrainingSession.new_pieces).selectinload(TrainingSessionNewPiece.piece),
    selectinload(TrainingSession.repertoire_pieces).selectinload(TrainingSessionRepertoirePiece.piece),
)


class PracticeStore:
    """Data access for pieces, exercises, sessions and instruments.

    Wraps a single SQLAlchemy session; create one per request.
    """

    def __init__(self, session: Session):
        self.session = session

    @contextmanager
    def transaction(self) -> Iterator[Session]:
        """Commit on success, roll back on any exception.

        Nests as a savepoint when the session is already inside a transaction.
        """
        if self.session.in_transaction():
            with self.session.begin_nested():
                yield self.session
        else:
            with self.session.begin():
                yield self.session

    # ----------------------------
    # Pieces
    # ----------------------------

    def create_piece(
        self,
        name: str,
        composer: str,
        work: str | None = None,
        source: str | None = None,
        status: str = "TRAINING",
    ) -> Piece:
        piece = Piece(
            name=name,
            composer=composer,
            work=work,
            source=source,
            status=PieceStatus(status),
            play_count=0,
        )
        self.session.add(piece)
        self.session.flush()
        return piece

    def list_pieces(self) -> list[Piece]:
        stmt = select(Piece).order_by(Piece.date_added.desc(), Piece.id.desc())
        return list(self.session.scalars(stmt))

    # ----------------------------
    # Exercises
    # ----------------------------

    def create_exercise(self, name: str) -> Exercise:
        exercise = Exercise(name=name)
        self.session.add(exercise)
        self.session.flush()
        return exercise

    def list_exercises(self) -> list[Exercise]:
        stmt = select(Exercise).order_by(Exercise.name.asc(), Exercise.id.asc())
        return list(self.session.scalars(stmt))

    # ----------------------------
    # Training sessions
    # ----------------------------

    def count_existing_ids(self, model: type[Piece] | type[Exercise], ids: Sequence[int]) -> int:
        """Number of distinct rows of ``model`` whose id is in ``ids``."""
        if not ids:
            return 0
        stmt = select(func.count()).select_from(model).where(model.id.in_(set(ids)))
        return int(self.session.scalar(stmt) or 0)

    def create_training_session_with_joins(
        self,
        session_date: date,
        duration: int,
        exercise_ids: Sequence[int],
        new_piece_ids: Sequence[int],
        repertoire_ids: Sequence[int],
    ) -> TrainingSession:
        ts = TrainingSession(date=session_date, duration=duration)
        ts.exercises = [TrainingSessionExercise(exercise_id=i) for i in exercise_ids]
        ts.new_pieces = [TrainingSessionNewPiece(piece_id=i) for i in new_piece_ids]
        ts.repertoire_pieces = [TrainingSessionRepertoirePiece(piece_id=i) for i in repertoire_ids]
        self.session.add(ts)
        self.session.flush()
        return ts

    def update_many_by_id(self, model: type[Piece] | type[Exercise], ids: Sequence[int], **values: Any) -> int:
        if not ids:
            return 0
        stmt = (
            update(model)
            .where(model.id.in_(set(ids)))
            .values(**values)
            .execution_options(synchronize_session="fetch")
        )
        return self.session.execute(stmt).rowcount

    def increment_by_id(self, model: type[Piece] | type[Exercise], ids: Sequence[int], field_name: str) -> int:
        if not ids:
            return 0
        column = getattr(model, field_name)
        stmt = (
            update(model)
            .where(model.id.in_(set(ids)))
            .values({column: column + 1})
            .execution_options(synchronize_session="fetch")
        )
        return self.session.execute(stmt).rowcount

    def get_training_session(self, session_id: int) -> TrainingSession | None:
        stmt = (
            select(TrainingSession)
            .where(TrainingSession.id == session_id)
            .options(*_SESSION_RELATIONS)
            .execution_options(populate_existing=True)
        )
        return self.session.scalars(stmt).first()

    def list_training_sessions(self) -> list[TrainingSession]:
        stmt = (
            select(TrainingSession)
            .options(*_SESSION_RELATIONS)
            .order_by(TrainingSession.date.desc(), TrainingSession.id.desc())
        )
        return list(self.session.scalars(stmt))

    # ----------------------------
    # Instruments
    # ----------------------------

    def list_instruments(self) -> list[Instrument]:
        stmt = select(Instrument).order_by(Instrument.name.asc(), Instrument.id.asc())
        return list(self.session.scalars(stmt))
