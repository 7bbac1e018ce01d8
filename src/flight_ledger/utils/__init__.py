"""
Utility modules for the reservation ledger
"""

from .logger import setup_logging
from .validators import (
    validate_passenger_id,
    validate_trip_id,
    validate_seat_row,
    validate_seat_column,
    validate_seat_class,
    normalize_seat_column,
    parse_int,
)

__all__ = [
    "setup_logging",
    "validate_passenger_id",
    "validate_trip_id",
    "validate_seat_row",
    "validate_seat_column",
    "validate_seat_class",
    "normalize_seat_column",
    "parse_int",
]
