"""Tests for request validation."""
from datetime import date

import pytest

from practice.validation import (
    validate_create_piece,
    validate_create_exercise,
    validate_create_training_session,
)


def _fields(result):
    return [e.field for e in result.errors]


class TestCreatePiece:
    def test_valid_piece_is_trimmed_and_defaulted(self):
        result = validate_create_piece({"name": "  Clair de Lune ", "composer": " Debussy"})

        assert result.is_valid
        assert result.errors == []
        assert result.data.name == "Clair de Lune"
        assert result.data.composer == "Debussy"
        assert result.data.status == "TRAINING"
        assert result.data.work is None
        assert result.data.source is None

    def test_optional_fields_trimmed_and_blank_becomes_none(self):
        result = validate_create_piece({
            "name": "Nocturne",
            "composer": "Chopin",
            "work": " Op. 9 No. 2 ",
            "source": "   ",
            "status": "REPERTOIRE",
        })

        assert result.is_valid
        assert result.data.work == "Op. 9 No. 2"
        assert result.data.source is None
        assert result.data.status == "REPERTOIRE"

    def test_null_optional_fields_are_accepted(self):
        result = validate_create_piece({"name": "a", "composer": "b", "work": None, "source": None})
        assert result.is_valid

    def test_missing_name_and_composer_reported_together(self):
        result = validate_create_piece({})

        assert not result.is_valid
        assert _fields(result) == ["name", "composer"]
        assert result.data is None

    @pytest.mark.parametrize("name", ["", "   ", None, 42])
    def test_bad_name(self, name):
        result = validate_create_piece({"name": name, "composer": "Bach"})
        assert _fields(result) == ["name"]

    def test_all_errors_in_declaration_order(self):
        result = validate_create_piece({"work": 1, "source": [], "status": "DONE"})

        assert _fields(result) == ["name", "composer", "work", "source", "status"]
        assert result.errors[4].message == "Status must be either TRAINING or REPERTOIRE"

    def test_explicit_null_status_is_rejected(self):
        result = validate_create_piece({"name": "a", "composer": "b", "status": None})
        assert _fields(result) == ["status"]

    def test_non_object_body(self):
        result = validate_create_piece(["name", "composer"])
        assert _fields(result) == ["body"]

    def test_details_joins_field_messages(self):
        result = validate_create_piece({"composer": "Bach"})
        assert result.details() == "name: Name is required and must be a non-empty string"


class TestCreateExercise:
    def test_valid(self):
        result = validate_create_exercise({"name": " Scales in thirds "})
        assert result.is_valid
        assert result.data.name == "Scales in thirds"

    @pytest.mark.parametrize("body", [{}, {"name": ""}, {"name": "  "}, {"name": 3}, None])
    def test_invalid(self, body):
        result = validate_create_exercise(body)
        assert not result.is_valid
        assert len(result.errors) == 1


class TestCreateTrainingSession:
    def _body(self, **overrides):
        body = {"date": "2024-01-01", "duration": 45, "exercises": [1], "newPieces": [2], "repertoire": [3]}
        body.update(overrides)
        return body

    def test_valid(self):
        result = validate_create_training_session(self._body())

        assert result.is_valid
        assert result.data.date == date(2024, 1, 1)
        assert result.data.duration == 45
        assert result.data.exercises == [1]
        assert result.data.new_pieces == [2]
        assert result.data.repertoire == [3]

    def test_iso_datetime_uses_date_part(self):
        result = validate_create_training_session(self._body(date="2024-03-05T18:30:00Z"))
        assert result.data.date == date(2024, 3, 5)

    def test_duplicates_and_overlaps_are_kept(self):
        result = validate_create_training_session(self._body(exercises=[1, 1], newPieces=[2], repertoire=[2]))

        assert result.is_valid
        assert result.data.exercises == [1, 1]
        assert result.data.new_pieces == [2]
        assert result.data.repertoire == [2]

    def test_empty_lists_are_valid(self):
        result = validate_create_training_session(self._body(exercises=[], newPieces=[], repertoire=[]))
        assert result.is_valid

    def test_integral_float_duration_is_coerced(self):
        result = validate_create_training_session(self._body(duration=30.0))
        assert result.data.duration == 30
        assert isinstance(result.data.duration, int)

    @pytest.mark.parametrize("duration", [0, -5, 2.5, "30", True, None, 10**20, 1e20])
    def test_bad_duration(self, duration):
        result = validate_create_training_session(self._body(duration=duration))
        assert _fields(result) == ["duration"]

    def test_missing_date(self):
        result = validate_create_training_session(self._body(date=None))
        assert _fields(result) == ["date"]
        assert result.errors[0].message == "Date is required and must be a valid ISO date string"

    def test_unparseable_date(self):
        result = validate_create_training_session(self._body(date="yesterday"))
        assert result.errors[0].message == "Date must be a valid ISO date string"

    def test_bad_id_lists(self):
        result = validate_create_training_session(
            self._body(exercises="1", newPieces=[0], repertoire=[1, "2"])
        )

        assert _fields(result) == ["exercises", "newPieces", "repertoire"]
        assert result.errors[0].message == "Exercises must be an array of exercise IDs"
        assert result.errors[1].message == "All new piece IDs must be positive integers"
        assert result.errors[2].message == "All repertoire piece IDs must be positive integers"

    def test_everything_wrong_reports_every_field_in_order(self):
        result = validate_create_training_session({})
        assert _fields(result) == ["date", "duration", "exercises", "newPieces", "repertoire"]

    def test_ids_beyond_integer_column_range_are_rejected(self):
        result = validate_create_training_session(
            self._body(exercises=[2**63], newPieces=[10**20], repertoire=[2**63 - 1])
        )

        assert _fields(result) == ["exercises", "newPieces"]
        assert result.errors[1].message == "All new piece IDs must be positive integers"


def test_module_is_documented():
    import practice.validation

    assert practice.validation.__doc__.startswith("Validation of untrusted JSON bodies")
