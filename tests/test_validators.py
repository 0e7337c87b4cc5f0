"""Tests for date/time normalisation and request validation."""

import pytest

from utils.validators import DataSanitizer, DateTimeNormalizer, RequestValidator


class TestNormalizeDate:
    @pytest.mark.parametrize("value,expected", [
        ("2025-03-30", "2025-03-30"),
        ("2025/3/5", "2025-03-05"),
        ("2025-03-30T17:00:00-07:00", "2025-03-30"),
    ])
    def test_accepted(self, value, expected):
        assert DateTimeNormalizer.normalize_date(value) == expected

    @pytest.mark.parametrize("value", ["tomorrow", "30/03/2025", "2025-13-01"])
    def test_rejected(self, value):
        with pytest.raises(ValueError):
            DateTimeNormalizer.normalize_date(value)


class TestNormalizeTime:
    @pytest.mark.parametrize("value,expected", [
        ("14:00", "14:00"),
        ("9:05", "09:05"),
        ("14:00:00", "14:00"),
        ("2 pm", "14:00"),
        ("2:30pm", "14:30"),
        ("12 am", "00:00"),
        ("12pm", "12:00"),
        ("noon", "12:00"),
        ("Midnight", "00:00"),
        ("2025-03-30T17:45:00Z", "17:45"),
    ])
    def test_accepted(self, value, expected):
        assert DateTimeNormalizer.normalize_time(value) == expected

    @pytest.mark.parametrize("value", ["25:00", "13 pm", "evening", "10:75"])
    def test_rejected(self, value):
        with pytest.raises(ValueError):
            DateTimeNormalizer.normalize_time(value)


class TestSplitStart:
    def test_timed(self):
        assert DateTimeNormalizer.split_start({"dateTime": "2025-03-30T17:00:00-07:00"}) == ("2025-03-30", "17:00")

    def test_all_day(self):
        assert DateTimeNormalizer.split_start({"date": "2025-04-01"}) == ("2025-04-01", None)

    def test_empty(self):
        assert DateTimeNormalizer.split_start({}) is None


class TestRequestValidator:
    def test_valid(self):
        assert RequestValidator.validate_chat_request({"message": "hi", "session_id": "abc"}) == []

    def test_missing_message(self):
        assert RequestValidator.validate_chat_request({"session_id": "abc"})

    def test_not_an_object(self):
        assert RequestValidator.validate_chat_request(["hi"]) == ["Request body must be a JSON object"]

    def test_blank_session_id(self):
        errors = RequestValidator.validate_chat_request({"message": "hi", "session_id": " "})
        assert any("session_id" in error for error in errors)


def test_sanitize_text_collapses_whitespace():
    assert DataSanitizer.sanitize_text("  cancel \n the\tgym  ") == "cancel the gym"
