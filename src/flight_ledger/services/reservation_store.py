"""
Reservation store for the flight ledger.

Owns every passenger record, keeps them in insertion order and enforces
passenger-ID uniqueness and per-trip seat exclusivity.
"""

import structlog
from typing import Dict, Iterator, List, Optional, Set, Tuple, Union

from ..config import config
from ..types import (
    CabinGeometry,
    DuplicatePassengerError,
    InvalidClassError,
    InvalidPassengerIdError,
    InvalidSeatColumnError,
    InvalidSeatRowError,
    InvalidTripError,
    PassengerNotFoundError,
    PassengerRecord,
    ReservationRequest,
    SeatClass,
    SeatKey,
    SeatTakenError,
)
from ..utils.validators import (
    normalize_seat_column,
    validate_passenger_id,
    validate_seat_class,
    validate_trip_id,
)


SeatingChart = List[List[Optional[PassengerRecord]]]


class ReservationStore:
    """
    In-memory, insertion-ordered collection of passenger records.

    Records live in a list so manifests come out in the order passengers
    were added. Two side indexes (by passenger ID and by seat key) answer
    point queries without a scan; they always mirror the list exactly.
    """

    def __init__(
        self,
        geometry: Optional[CabinGeometry] = None,
        name_max_length: Optional[int] = None
    ):
        self.geometry = geometry or CabinGeometry.from_config(config.cabin)
        self.name_max_length = name_max_length or config.cabin.name_max_length
        self.logger = structlog.get_logger("reservation_store")

        self._records: List[PassengerRecord] = []
        self._by_id: Dict[int, PassengerRecord] = {}
        self._occupied: Set[SeatKey] = set()

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[PassengerRecord]:
        return iter(list(self._records))

    def __contains__(self, passenger_id: object) -> bool:
        return passenger_id in self._by_id

    # --- Lookups ---

    def records(self) -> List[PassengerRecord]:
        """Snapshot of all records in insertion order"""
        return list(self._records)

    def find_by_passenger_id(self, passenger_id: int) -> Optional[PassengerRecord]:
        return self._by_id.get(passenger_id)

    def is_seat_taken(self, trip_id: int, row: int, column: str) -> bool:
        """Check a seat on a trip. Row is zero-based; column is case-insensitive."""
        if not column:
            return False
        return (trip_id, row, normalize_seat_column(column)) in self._occupied

    def list_by_trip(self, trip_id: int) -> List[PassengerRecord]:
        return [r for r in self._records if r.trip_id == trip_id]

    def list_by_trip_and_class(
        self,
        trip_id: int,
        seat_class: Union[SeatClass, str]
    ) -> List[PassengerRecord]:
        """
        Records on a trip booked in the given class.

        A plain string must match a class name exactly, so "economy" matches
        nothing.
        """
        return [
            r for r in self._records
            if r.trip_id == trip_id and r.seat_class == seat_class
        ]

    def seating_chart(self, trip_id: int) -> SeatingChart:
        """
        Full occupancy grid for a trip, indexed [row][column_index].

        Every occupied seat is reported, including several in the same row.
        """
        chart: SeatingChart = [
            [None] * self.geometry.column_count
            for _ in range(self.geometry.rows)
        ]
        for record in self._records:
            if record.trip_id != trip_id:
                continue
            column_index = self.geometry.column_index(record.seat_column)
            chart[record.seat_row][column_index] = record
        return chart

    def available_seats(self, trip_id: int) -> List[Tuple[int, str]]:
        """Free (row, column) pairs on a trip, front to back"""
        return [
            (row, column)
            for row in range(self.geometry.rows)
            for column in self.geometry.columns
            if (trip_id, row, column) not in self._occupied
        ]

    def occupancy(self, trip_id: int) -> int:
        return sum(1 for r in self._records if r.trip_id == trip_id)

    def trip_ids(self) -> List[int]:
        return sorted({r.trip_id for r in self._records})

    # --- Mutations ---

    def insert(self, request: ReservationRequest) -> PassengerRecord:
        """
        Validate a manual booking and append it to the store.

        Checks run in a fixed order and the first failure is raised; nothing
        is changed until every check has passed.

        Raises:
            InvalidPassengerIdError, DuplicatePassengerError, InvalidTripError,
            InvalidSeatRowError, InvalidSeatColumnError, SeatTakenError,
            InvalidClassError
        """
        if not validate_passenger_id(request.passenger_id):
            raise InvalidPassengerIdError(request.passenger_id)

        if request.passenger_id in self._by_id:
            raise DuplicatePassengerError(request.passenger_id)

        if not validate_trip_id(request.trip_id):
            raise InvalidTripError(request.trip_id)

        seat_row = request.seat_row - 1
        if not self.geometry.is_valid_row(seat_row):
            raise InvalidSeatRowError(request.seat_row, self.geometry.rows)

        if not self.geometry.is_valid_column(request.seat_column):
            raise InvalidSeatColumnError(request.seat_column, self.geometry.columns)

        seat_column = normalize_seat_column(request.seat_column)
        if self.is_seat_taken(request.trip_id, seat_row, seat_column):
            raise SeatTakenError(request.trip_id, f"{request.seat_row}{seat_column}")

        if not validate_seat_class(request.seat_class, (c.value for c in SeatClass)):
            raise InvalidClassError(request.seat_class)

        record = PassengerRecord(
            passenger_id=request.passenger_id,
            trip_id=request.trip_id,
            name=request.name[:self.name_max_length],
            seat_row=seat_row,
            seat_column=seat_column,
            seat_class=SeatClass(request.seat_class),
        )
        self._commit(record)
        return record

    def add_record(self, record: PassengerRecord) -> PassengerRecord:
        """
        Append an already-built record, e.g. one placed by the bulk loader.

        Uniqueness, cabin bounds and seat exclusivity are still enforced.
        """
        if record.passenger_id in self._by_id:
            raise DuplicatePassengerError(record.passenger_id)
        if not self.geometry.is_valid_row(record.seat_row):
            raise InvalidSeatRowError(record.seat_row + 1, self.geometry.rows)
        if not self.geometry.is_valid_column(record.seat_column):
            raise InvalidSeatColumnError(record.seat_column, self.geometry.columns)
        if record.seat_key in self._occupied:
            raise SeatTakenError(record.trip_id, record.seat_label)

        self._commit(record)
        return record

    def cancel(self, passenger_id: int) -> PassengerRecord:
        """
        Remove a passenger's reservation.

        Raises:
            PassengerNotFoundError: No record holds this passenger ID
        """
        record = self._by_id.get(passenger_id)
        if record is None:
            raise PassengerNotFoundError(passenger_id)

        for index, candidate in enumerate(self._records):
            if candidate.passenger_id == passenger_id:
                del self._records[index]
                break

        del self._by_id[passenger_id]
        self._occupied.discard(record.seat_key)

        self.logger.debug(
            "Passenger cancelled",
            passenger_id=passenger_id,
            trip_id=record.trip_id,
            seat=record.seat_label
        )
        return record

    def clear(self) -> None:
        self._records.clear()
        self._by_id.clear()
        self._occupied.clear()

    def _commit(self, record: PassengerRecord) -> None:
        self._records.append(record)
        self._by_id[record.passenger_id] = record
        self._occupied.add(record.seat_key)

        self.logger.debug(
            "Passenger inserted",
            passenger_id=record.passenger_id,
            trip_id=record.trip_id,
            seat=record.seat_label,
            seat_class=record.seat_class.value
        )
