from __future__ import annotations

import logging
import os
import weakref
from flask import Flask, request, jsonify
from flask_cors import CORS
from dotenv import load_dotenv

from config import Config, ensure_dirs
from db import Database
from migrations import ensure_practice_schema
from schemas import (
    piece_to_dict,
    exercise_to_dict,
    training_session_to_dict,
    instrument_to_dict,
)
from practice.errors import PracticeError
from practice.repository import PracticeStore
from practice.sessions import create_training_session
from practice.validation import (
    validate_create_piece,
    validate_create_exercise,
    validate_create_training_session,
)

load_dotenv()

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

def configure_logging(level: str) -> None:
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=level, format=LOG_FORMAT)
    else:
        root.setLevel(level)

def _invalid(validation):
    return jsonify({"error": "Invalid input data", "details": validation.details()}), 400

def _failure(message: str):
    return jsonify({"error": message}), 500

def create_app(cfg: Config | None = None) -> Flask:
    cfg = cfg or Config()
    configure_logging(cfg.LOG_LEVEL)

    app = Flask(__name__)
    CORS(app, resources={rf"{cfg.API_PREFIX}/*": {"origins": cfg.cors_origins()}})

    ensure_dirs(cfg)
    app.config["MAX_CONTENT_LENGTH"] = cfg.MAX_CONTENT_LENGTH_BYTES

    database = Database(cfg.DATABASE_URL, echo=cfg.SQL_ECHO)
    database.create_all()
    # If the user already has an older SQLite DB, add newly required columns.
    ensure_practice_schema(database.engine)
    app.extensions["practice_db"] = database
    # Released when the app is garbage collected, or at interpreter exit at the latest.
    weakref.finalize(app, database.dispose)

    api = cfg.API_PREFIX

    def read_json():
        # Invalid JSON is reported like any other bad body rather than Flask's HTML 400.
        return request.get_json(force=True, silent=True)

    @app.get(f"{api}/health")
    def health():
        return {"ok": True}

    # ----------------------------
    # Pieces
    # ----------------------------

    @app.get(f"{api}/pieces")
    def api_list_pieces():
        try:
            with database.session() as db:
                return jsonify([piece_to_dict(p) for p in PracticeStore(db).list_pieces()])
        except Exception:
            logger.exception("Failed to fetch pieces")
            return _failure("Failed to fetch pieces")

    @app.post(f"{api}/pieces")
    def api_create_piece():
        validation = validate_create_piece(read_json())
        if not validation.is_valid:
            return _invalid(validation)
        req = validation.data

        try:
            with database.session() as db:
                store = PracticeStore(db)
                with store.transaction():
                    piece = store.create_piece(
                        name=req.name,
                        composer=req.composer,
                        work=req.work,
                        source=req.source,
                        status=req.status,
                    )
                logger.info("Created piece %s (%s - %s)", piece.id, piece.composer, piece.name)
                return jsonify(piece_to_dict(piece)), 201
        except Exception:
            logger.exception("Failed to create piece")
            return _failure("Failed to create piece")

    # ----------------------------
    # Exercises
    # ----------------------------

    @app.get(f"{api}/exercises")
    def api_list_exercises():
        try:
            with database.session() as db:
                return jsonify([exercise_to_dict(e) for e in PracticeStore(db).list_exercises()])
        except Exception:
            logger.exception("Failed to fetch exercises")
            return _failure("Failed to fetch exercises")

    @app.post(f"{api}/exercises")
    def api_create_exercise():
        validation = validate_create_exercise(read_json())
        if not validation.is_valid:
            return _invalid(validation)

        try:
            with database.session() as db:
                store = PracticeStore(db)
                with store.transaction():
                    exercise = store.create_exercise(name=validation.data.name)
                logger.info("Created exercise %s (%s)", exercise.id, exercise.name)
                return jsonify(exercise_to_dict(exercise)), 201
        except Exception:
            logger.exception("Failed to create exercise")
            return _failure("Failed to create exercise")

    # ----------------------------
    # Training sessions
    # ----------------------------

    @app.get(f"{api}/training-sessions")
    def api_list_training_sessions():
        try:
            with database.session() as db:
                sessions = PracticeStore(db).list_training_sessions()
                return jsonify([training_session_to_dict(s) for s in sessions])
        except Exception:
            logger.exception("Failed to fetch sessions")
            return _failure("Failed to fetch sessions")

    @app.post(f"{api}/training-sessions")
    def api_create_training_session():
        validation = validate_create_training_session(read_json())
        if not validation.is_valid:
            return _invalid(validation)

        try:
            with database.session() as db:
                created = create_training_session(PracticeStore(db), validation.data)
                return jsonify(training_session_to_dict(created)), 201
        except PracticeError as e:
            return jsonify({"error": str(e)}), e.status_code
        except Exception:
            logger.exception("Failed to create session")
            return _failure("Failed to create session")

    # ----------------------------
    # Instruments
    # ----------------------------

    @app.get(f"{api}/instruments")
    def api_list_instruments():
        try:
            with database.session() as db:
                return jsonify([instrument_to_dict(i) for i in PracticeStore(db).list_instruments()])
        except Exception:
            logger.exception("Failed to fetch instruments")
            return _failure("Failed to fetch instruments")

    return app

if __name__ == "__main__":
    app = create_app()
    app.run(host="0.0.0.0", port=int(os.getenv("PORT", "5000")), debug=True)
