"""
Validation utilities
"""

from typing import Iterable, Optional


def validate_passenger_id(passenger_id: int) -> bool:
    """
    Validate passenger ID
    Passenger IDs must be positive integers
    """
    if passenger_id is None or isinstance(passenger_id, bool):
        return False
    return passenger_id > 0


def validate_trip_id(trip_id: int) -> bool:
    """
    Validate trip number
    Trips are numbered from 1
    """
    if trip_id is None or isinstance(trip_id, bool):
        return False
    return trip_id >= 1


def validate_seat_row(row: int, rows: int) -> bool:
    """
    Validate a zero-based seat row against the cabin row count
    """
    if row is None:
        return False
    return 0 <= row < rows


def normalize_seat_column(column: str) -> str:
    """Strip and uppercase a seat column letter"""
    return column.strip().upper()


def validate_seat_column(column: str, columns: str) -> bool:
    """
    Validate seat column letter
    Must be a single letter from the cabin's column set, any case
    """
    if not column:
        return False

    normalized = normalize_seat_column(column)
    if len(normalized) != 1:
        return False

    return normalized in columns.upper()


def validate_seat_class(seat_class: str, allowed: Iterable[str]) -> bool:
    """
    Validate seat class
    Exact, case-sensitive match against the allowed class names
    """
    if not isinstance(seat_class, str):
        return False
    return seat_class in set(allowed)


def parse_int(value: str) -> Optional[int]:
    """
    Parse an integer field, returning None when it is not a whole number
    """
    if value is None:
        return None

    try:
        return int(value.strip())
    except ValueError:
        return None
