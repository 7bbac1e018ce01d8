"""
Tests for validation utilities
"""

import pytest
from flight_ledger.utils.validators import (
    validate_passenger_id,
    validate_trip_id,
    validate_seat_row,
    validate_seat_column,
    validate_seat_class,
    normalize_seat_column,
    parse_int
)


CLASSES = ("Economy", "Business", "First")


class TestPassengerIdValidation:
    """Test passenger ID validation"""

    def test_valid_passenger_id(self):
        assert validate_passenger_id(1)
        assert validate_passenger_id(999999)
        assert validate_passenger_id(10_000_000)  # No upper bound

    def test_invalid_passenger_id(self):
        assert not validate_passenger_id(0)
        assert not validate_passenger_id(-5)
        assert not validate_passenger_id(None)
        assert not validate_passenger_id(True)


class TestTripIdValidation:
    """Test trip number validation"""

    def test_valid_trip_id(self):
        assert validate_trip_id(1)
        assert validate_trip_id(250)

    def test_invalid_trip_id(self):
        assert not validate_trip_id(0)
        assert not validate_trip_id(-1)
        assert not validate_trip_id(None)


class TestSeatValidation:
    """Test seat row and column validation"""

    def test_seat_row_bounds(self):
        assert validate_seat_row(0, 40)
        assert validate_seat_row(39, 40)
        assert not validate_seat_row(40, 40)
        assert not validate_seat_row(-1, 40)
        assert not validate_seat_row(None, 40)

    def test_valid_seat_column(self):
        assert validate_seat_column("A", "ABCDEF")
        assert validate_seat_column("f", "ABCDEF")  # Should work with lowercase
        assert validate_seat_column(" c ", "ABCDEF")

    def test_invalid_seat_column(self):
        assert not validate_seat_column("", "ABCDEF")
        assert not validate_seat_column("G", "ABCDEF")
        assert not validate_seat_column("AB", "ABCDEF")
        assert not validate_seat_column("1", "ABCDEF")
        assert not validate_seat_column(None, "ABCDEF")
        assert not validate_seat_column("C", "AB")

    def test_normalize_seat_column(self):
        assert normalize_seat_column(" b ") == "B"


class TestSeatClassValidation:
    """Test seat class validation"""

    def test_valid_seat_class(self):
        for seat_class in CLASSES:
            assert validate_seat_class(seat_class, CLASSES)

    def test_seat_class_is_case_sensitive(self):
        assert not validate_seat_class("economy", CLASSES)
        assert not validate_seat_class("FIRST", CLASSES)
        assert not validate_seat_class("", CLASSES)
        assert not validate_seat_class(None, CLASSES)


class TestParseInt:
    """Test integer field parsing"""

    def test_parse_int(self):
        assert parse_int("42") == 42
        assert parse_int(" 7 ") == 7
        assert parse_int("-3") == -3

    def test_parse_int_rejects_non_integers(self):
        assert parse_int("") is None
        assert parse_int("abc") is None
        assert parse_int("1.5") is None
        assert parse_int(None) is None
