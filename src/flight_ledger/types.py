"""
Core data types for the reservation ledger
"""

from enum import Enum
from typing import Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .config import CabinConfig
from .utils.validators import (
    normalize_seat_column,
    validate_seat_column,
    validate_seat_row,
)


SeatKey = Tuple[int, int, str]


class SeatClass(str, Enum):
    """Cabin classes a passenger can be booked into"""
    ECONOMY = "Economy"
    BUSINESS = "Business"
    FIRST = "First"


class CabinGeometry(BaseModel):
    """Seat layout shared by every trip"""
    rows: int = Field(..., ge=1, description="Number of seat rows")
    columns: str = Field(..., min_length=1, description="Column letters, in cabin order")

    model_config = ConfigDict(frozen=True)

    @field_validator("columns")
    @classmethod
    def normalize_columns(cls, columns: str) -> str:
        """Column letters are uppercase and distinct"""
        columns = columns.strip().upper()
        if not columns.isalpha():
            raise ValueError("columns must be letters")
        if len(set(columns)) != len(columns):
            raise ValueError(f"duplicate column letters in '{columns}'")
        return columns

    @classmethod
    def from_config(cls, cabin: CabinConfig) -> "CabinGeometry":
        return cls(rows=cabin.rows, columns=cabin.columns)

    @property
    def column_count(self) -> int:
        return len(self.columns)

    @property
    def seats_per_trip(self) -> int:
        return self.rows * self.column_count

    def is_valid_row(self, row: int) -> bool:
        """Check a zero-based row index"""
        return validate_seat_row(row, self.rows)

    def is_valid_column(self, column: str) -> bool:
        return validate_seat_column(column, self.columns)

    def column_index(self, column: str) -> int:
        return self.columns.index(normalize_seat_column(column))


# Record Models
class PassengerRecord(BaseModel):
    """One stored reservation. Rows are zero-based."""
    passenger_id: int = Field(..., gt=0)
    trip_id: int = Field(..., ge=1)
    name: str = Field(default="")
    seat_row: int = Field(..., ge=0)
    seat_column: str = Field(..., min_length=1, max_length=1)
    seat_class: SeatClass

    model_config = ConfigDict(frozen=True)

    @property
    def seat_key(self) -> SeatKey:
        return (self.trip_id, self.seat_row, self.seat_column)

    @property
    def seat_label(self) -> str:
        """Human seat label such as 12A"""
        return f"{self.seat_row + 1}{self.seat_column}"


class ReservationRequest(BaseModel):
    """Manual booking request. Rows are 1-based, as a passenger reads them."""
    passenger_id: int
    trip_id: int
    name: str = ""
    seat_row: int
    seat_column: str
    seat_class: str


class RawCandidate(BaseModel):
    """One dataset line after parsing, before any store checks"""
    ordinal: int = Field(..., ge=1, description="1-based position among data lines")
    passenger_id: Optional[int] = None
    name: Optional[str] = None
    seat_row: Optional[int] = Field(None, description="1-based seat row")
    seat_column: Optional[str] = None
    seat_class: Optional[str] = None
    error: Optional[str] = Field(None, description="Parse failure reason")

    @property
    def parsed(self) -> bool:
        return self.error is None


class LoadReport(BaseModel):
    """Outcome of a bulk load pass"""
    inserted: int = 0
    displaced: int = 0
    skipped: int = 0
    elapsed_ms: float = 0.0
    source: Optional[str] = None
    source_readable: bool = True

    @property
    def elapsed_seconds(self) -> float:
        return self.elapsed_ms / 1000.0


class ErrorCode:
    """Error codes for reservation failures"""

    INVALID_PASSENGER_ID = "INVALID_PASSENGER_ID"
    DUPLICATE_PASSENGER = "DUPLICATE_PASSENGER"
    INVALID_TRIP = "INVALID_TRIP"
    INVALID_SEAT_ROW = "INVALID_SEAT_ROW"
    INVALID_SEAT_COLUMN = "INVALID_SEAT_COLUMN"
    SEAT_TAKEN = "SEAT_TAKEN"
    INVALID_CLASS = "INVALID_CLASS"
    PASSENGER_NOT_FOUND = "PASSENGER_NOT_FOUND"
    SOURCE_UNREADABLE = "SOURCE_UNREADABLE"


# Custom Exceptions
class ReservationError(Exception):
    """Base exception for the reservation ledger"""
    error_code: str = "RESERVATION_ERROR"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class InsertError(ReservationError):
    """A reservation request was rejected"""
    error_code = "INSERT_ERROR"


class InvalidPassengerIdError(InsertError):
    error_code = ErrorCode.INVALID_PASSENGER_ID

    def __init__(self, passenger_id: int):
        self.passenger_id = passenger_id
        super().__init__("Passenger ID must be positive.")


class DuplicatePassengerError(InsertError):
    error_code = ErrorCode.DUPLICATE_PASSENGER

    def __init__(self, passenger_id: int):
        self.passenger_id = passenger_id
        super().__init__(f"Passenger ID {passenger_id} already exists.")


class InvalidTripError(InsertError):
    error_code = ErrorCode.INVALID_TRIP

    def __init__(self, trip_id: int):
        self.trip_id = trip_id
        super().__init__("Trip number must be 1 or above.")


class InvalidSeatRowError(InsertError):
    error_code = ErrorCode.INVALID_SEAT_ROW

    def __init__(self, seat_row: int, rows: int):
        self.seat_row = seat_row
        super().__init__(f"Seat row must be between 1 and {rows}.")


class InvalidSeatColumnError(InsertError):
    error_code = ErrorCode.INVALID_SEAT_COLUMN

    def __init__(self, seat_column: str, columns: str):
        self.seat_column = seat_column
        super().__init__(f"Seat column must be between {columns[0]} and {columns[-1]}.")


class SeatTakenError(InsertError):
    error_code = ErrorCode.SEAT_TAKEN

    def __init__(self, trip_id: int, seat_label: str):
        self.trip_id = trip_id
        self.seat_label = seat_label
        super().__init__(f"Seat {seat_label} is already taken for trip {trip_id}.")


class InvalidClassError(InsertError):
    error_code = ErrorCode.INVALID_CLASS

    def __init__(self, seat_class: str):
        self.seat_class = seat_class
        choices = ", ".join(c.value for c in SeatClass)
        super().__init__(f"Invalid class '{seat_class}'. Please enter one of: {choices}.")


class CancelError(ReservationError):
    """A cancellation could not be applied"""
    error_code = "CANCEL_ERROR"


class PassengerNotFoundError(CancelError):
    error_code = ErrorCode.PASSENGER_NOT_FOUND

    def __init__(self, passenger_id: int):
        self.passenger_id = passenger_id
        super().__init__(f"Passenger {passenger_id} not found.")


class LoadError(ReservationError):
    """Dataset-level load failure"""
    error_code = "LOAD_ERROR"


class SourceUnreadableError(LoadError):
    error_code = ErrorCode.SOURCE_UNREADABLE

    def __init__(self, source: str, reason: Optional[str] = None):
        self.source = source
        self.reason = reason
        detail = f": {reason}" if reason else ""
        super().__init__(f"Dataset file '{source}' could not be read{detail}")
