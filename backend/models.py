from __future__ import annotations
import enum
from sqlalchemy import String, DateTime, Date, Text, Integer, ForeignKey, Enum
from sqlalchemy.orm import Mapped, mapped_column, relationship
import datetime as dt
from db import Base

class PieceStatus(str, enum.Enum):
    TRAINING = "TRAINING"
    REPERTOIRE = "REPERTOIRE"

class SessionStatus(str, enum.Enum):
    PLANNED = "PLANNED"
    COMPLETED = "COMPLETED"

def utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)

def start_of_day(d: dt.date) -> dt.datetime:
    """Timestamp used for last_played / last_practiced when a session is logged."""
    return dt.datetime.combine(d, dt.time.min, tzinfo=dt.timezone.utc)


class Piece(Base):
    __tablename__ = "pieces"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    composer: Mapped[str] = mapped_column(String(200), nullable=False)
    work: Mapped[str | None] = mapped_column(String(200), nullable=True)  # opus / catalogue number
    source: Mapped[str | None] = mapped_column(Text, nullable=True)  # book, edition, url
    status: Mapped[PieceStatus] = mapped_column(
        Enum(PieceStatus, name="piece_status", native_enum=False, length=20),
        nullable=False,
        default=PieceStatus.TRAINING,
    )
    play_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    date_added: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    last_played: Mapped[dt.datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)


class Exercise(Base):
    __tablename__ = "exercises"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    last_practiced: Mapped[dt.datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)


class TrainingSession(Base):
    __tablename__ = "training_sessions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
    duration: Mapped[int] = mapped_column(Integer, nullable=False)  # minutes
    status: Mapped[SessionStatus] = mapped_column(
        Enum(SessionStatus, name="session_status", native_enum=False, length=20),
        nullable=False,
        default=SessionStatus.COMPLETED,
    )
    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)

    exercises: Mapped[list[TrainingSessionExercise]] = relationship(
        back_populates="training_session", cascade="all, delete-orphan"
    )
    new_pieces: Mapped[list[TrainingSessionNewPiece]] = relationship(
        back_populates="training_session", cascade="all, delete-orphan"
    )
    repertoire_pieces: Mapped[list[TrainingSessionRepertoirePiece]] = relationship(
        back_populates="training_session", cascade="all, delete-orphan"
    )


# Join rows: the (session, target) pair is the primary key.

class TrainingSessionExercise(Base):
    __tablename__ = "training_session_exercises"

    training_session_id: Mapped[int] = mapped_column(
        ForeignKey("training_sessions.id", ondelete="CASCADE"), primary_key=True
    )
    exercise_id: Mapped[int] = mapped_column(ForeignKey("exercises.id"), primary_key=True)

    training_session: Mapped[TrainingSession] = relationship(back_populates="exercises")
    exercise: Mapped[Exercise] = relationship()


class TrainingSessionNewPiece(Base):
    __tablename__ = "training_session_new_pieces"

    training_session_id: Mapped[int] = mapped_column(
        ForeignKey("training_sessions.id", ondelete="CASCADE"), primary_key=True
    )
    piece_id: Mapped[int] = mapped_column(ForeignKey("pieces.id"), primary_key=True)

    training_session: Mapped[TrainingSession] = relationship(back_populates="new_pieces")
    piece: Mapped[Piece] = relationship()


class TrainingSessionRepertoirePiece(Base):
    __tablename__ = "training_session_repertoire_pieces"

    training_session_id: Mapped[int] = mapped_column(
        ForeignKey("training_sessions.id", ondelete="CASCADE"), primary_key=True
    )
    piece_id: Mapped[int] = mapped_column(ForeignKey("pieces.id"), primary_key=True)

    training_session: Mapped[TrainingSession] = relationship(back_populates="repertoire_pieces")
    piece: Mapped[Piece] = relationship()


class Instrument(Base):
    __tablename__ = "instruments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    type: Mapped[str | None] = mapped_column(String(100), nullable=True)
    brand: Mapped[str | None] = mapped_column(String(100), nullable=True)
    model: Mapped[str | None] = mapped_column(String(100), nullable=True)
    acquired_date: Mapped[dt.date | None] = mapped_column(Date, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
