from __future__ import annotations

import logging

from models import Exercise, Piece, TrainingSession, start_of_day
from practice.errors import MissingReferenceError
from practice.repository import PracticeStore
from schemas import CreateTrainingSessionRequest

logger = logging.getLogger(__name__)


def create_training_session(store: PracticeStore, req: CreateTrainingSessionRequest) -> TrainingSession:
    """Log a practice session and apply its side effects to exercises and pieces.

    Runs as one transaction:
      1. every referenced exercise / piece id must exist, otherwise
         MissingReferenceError is raised before anything is written
      2. insert the session plus one join row per id in each list
      3. exercises: last_practiced = session date
      4. new + repertoire pieces: last_played = session date
      5. repertoire pieces: play_count += 1

    Returns the session reloaded with its relations (post-update values).
    """
    all_piece_ids = [*req.new_pieces, *req.repertoire]
    played_at = start_of_day(req.date)

    with store.transaction():
        # A repeated id matches one row but counts twice in the list, so
        # duplicates and new/repertoire overlaps are rejected here as well.
        if store.count_existing_ids(Exercise, req.exercises) != len(req.exercises):
            logger.warning("Rejected session: unknown exercise id in %s", req.exercises)
            raise MissingReferenceError("Some referenced exercises do not exist", "exercise")
        if store.count_existing_ids(Piece, all_piece_ids) != len(all_piece_ids):
            logger.warning("Rejected session: unknown piece id in %s", all_piece_ids)
            raise MissingReferenceError("Some referenced pieces do not exist", "piece")

        ts = store.create_training_session_with_joins(
            session_date=req.date,
            duration=req.duration,
            exercise_ids=req.exercises,
            new_piece_ids=req.new_pieces,
            repertoire_ids=req.repertoire,
        )
        session_id = ts.id

        if req.exercises:
            store.update_many_by_id(Exercise, req.exercises, last_practiced=played_at)
        if all_piece_ids:
            store.update_many_by_id(Piece, all_piece_ids, last_played=played_at)
        if req.repertoire:
            store.increment_by_id(Piece, req.repertoire, "play_count")

    logger.info(
        "Created training session %s (%s, %d min, %d exercises, %d new, %d repertoire)",
        session_id, req.date.isoformat(), req.duration,
        len(req.exercises), len(req.new_pieces), len(req.repertoire),
    )
    return store.get_training_session(session_id)
