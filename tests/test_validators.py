from datetime import date, datetime

import pytest

from utils.productivity.validators import ProductivityValidator, validate_record_input


@pytest.mark.parametrize("value, expected", [
    (5, 5),
    ("12", 12),
    (" 7 ", 7),
    (3.0, 3),
    ("+4", 4),
])
def test_parse_updates_count_accepts_positive_integers(value, expected):
    assert ProductivityValidator.parse_updates_count(value) == expected


@pytest.mark.parametrize("value", [0, -1, "0", "-3", "abc", "2.5", 2.5, True, None, "", "++5", "²", "5-"])
def test_parse_updates_count_rejects_invalid(value):
    assert ProductivityValidator.parse_updates_count(value) is None


def test_parse_record_date():
    assert ProductivityValidator.parse_record_date("2024-01-05") == date(2024, 1, 5)
    assert ProductivityValidator.parse_record_date(datetime(2024, 1, 5, 13)) == date(2024, 1, 5)
    assert ProductivityValidator.parse_record_date(date(2024, 1, 5)) == date(2024, 1, 5)
    assert ProductivityValidator.parse_record_date("05/01/2024") is None
    assert ProductivityValidator.parse_record_date("2024-02-30") is None


def test_valid_record_is_cleaned():
    ok, error, cleaned = validate_record_input(" a1 ", "r1", "10", "2024-01-05")

    assert ok is True
    assert error is None
    assert cleaned == {
        'agent_id': 'a1',
        'leadership_role_id': 'r1',
        'updates_count': 10,
        'date': date(2024, 1, 5),
    }


@pytest.mark.parametrize("agent_id, role_id, count", [
    (None, "r1", 3),
    ("a1", "", 3),
    ("a1", "r1", None),
    ("a1", "r1", "  "),
])
def test_missing_fields_are_required(agent_id, role_id, count):
    ok, error, cleaned = validate_record_input(agent_id, role_id, count, date(2024, 1, 5))

    assert ok is False
    assert error == ProductivityValidator.MSG_REQUIRED
    assert cleaned == {}


def test_invalid_count_message():
    ok, error, _ = validate_record_input("a1", "r1", 0, date(2024, 1, 5))

    assert ok is False
    assert error == ProductivityValidator.MSG_INVALID_COUNT


def test_invalid_date_message():
    ok, error, _ = validate_record_input("a1", "r1", 2, "ontem")

    assert ok is False
    assert error == ProductivityValidator.MSG_INVALID_DATE


@pytest.mark.parametrize("count", ["++5", "²", "١٢"])
def test_digit_lookalikes_are_invalid_counts(count):
    ok, error, cleaned = validate_record_input("a1", "r1", count, "2024-01-05")

    assert ok is False
    assert error == ProductivityValidator.MSG_INVALID_COUNT
    assert cleaned == {}
