from __future__ import annotations


class PracticeError(Exception):
    """Base class for errors the API reports back as a 4xx."""

    status_code = 400


class MissingReferenceError(PracticeError):
    """A training session referenced an exercise or piece id that does not exist."""

    def __init__(self, message: str, missing_kind: str):
        super().__init__(message)
        self.missing_kind = missing_kind
