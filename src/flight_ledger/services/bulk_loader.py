"""
Bulk loader for passenger manifests.

Assigns every accepted dataset line to a trip by its position in the file
and moves passengers forward to later trips when their seat is already
taken, so the store never ends up with a double-booked seat.
"""

import time
import structlog
from pathlib import Path
from typing import Iterable, Optional, Set, Union

from ..types import (
    LoadReport,
    PassengerRecord,
    RawCandidate,
    SeatClass,
    SourceUnreadableError,
)
from ..utils.validators import (
    normalize_seat_column,
    validate_passenger_id,
    validate_seat_class,
)
from .audit_logger import audit_logger
from .dataset_reader import DatasetReader
from .performance_monitor import MetricType, PerformanceMonitor, performance_monitor
from .reservation_store import ReservationStore


class BulkLoader:
    """
    Populates a ReservationStore from raw dataset candidates.

    Trip numbering: the first seats_per_trip data lines belong to trip 1,
    the next block to trip 2, and so on. Skipped lines still count toward
    the block they sit in. A candidate whose seat is taken on its base trip
    is pushed to the next trip with that seat free; there is no upper bound
    on how far it can move.
    """

    def __init__(
        self,
        store: ReservationStore,
        reader: Optional[DatasetReader] = None,
        monitor: Optional[PerformanceMonitor] = None
    ):
        self.store = store
        self.reader = reader or DatasetReader(geometry=store.geometry)
        self.monitor = monitor or performance_monitor
        self.logger = structlog.get_logger("bulk_loader")

    def base_trip(self, ordinal: int) -> int:
        """Trip number implied by a 1-based line position"""
        return (ordinal - 1) // self.store.geometry.seats_per_trip + 1

    def resolve_trip(self, base_trip: int, seat_row: int, seat_column: str) -> int:
        """First trip at or after base_trip where the seat is free"""
        trip_id = base_trip
        while self.store.is_seat_taken(trip_id, seat_row, seat_column):
            trip_id += 1
        return trip_id

    def bulk_load(
        self,
        candidates: Iterable[RawCandidate],
        source: Optional[str] = None
    ) -> LoadReport:
        """
        Load candidates in order, skipping any that cannot be placed.

        Bad lines never abort the load; they only show up in the skipped
        count of the returned report.
        """
        start_time = time.perf_counter()
        seen_ids: Set[int] = set()
        report = LoadReport(source=source)

        with self.monitor.measure_latency(
            MetricType.DATASET_LOAD_LATENCY,
            context={"source": source}
        ):
            for candidate in candidates:
                if not self._is_loadable(candidate, seen_ids):
                    report.skipped += 1
                    continue

                seat_row = candidate.seat_row - 1
                if not self.store.geometry.is_valid_row(seat_row):
                    report.skipped += 1
                    continue

                seat_column = normalize_seat_column(candidate.seat_column)
                base_trip = self.base_trip(candidate.ordinal)
                trip_id = self.resolve_trip(base_trip, seat_row, seat_column)

                if trip_id != base_trip:
                    report.displaced += 1
                    self.logger.debug(
                        "Passenger moved to a later trip",
                        passenger_id=candidate.passenger_id,
                        base_trip=base_trip,
                        trip_id=trip_id
                    )

                self.store.add_record(PassengerRecord(
                    passenger_id=candidate.passenger_id,
                    trip_id=trip_id,
                    name=(candidate.name or "")[:self.store.name_max_length],
                    seat_row=seat_row,
                    seat_column=seat_column,
                    seat_class=SeatClass(candidate.seat_class),
                ))
                seen_ids.add(candidate.passenger_id)
                report.inserted += 1

        report.elapsed_ms = (time.perf_counter() - start_time) * 1000

        self.logger.info(
            "Bulk load completed",
            source=source,
            inserted=report.inserted,
            displaced=report.displaced,
            skipped=report.skipped,
            elapsed_ms=round(report.elapsed_ms, 3)
        )
        return report

    def load_file(self, path: Union[str, Path]) -> LoadReport:
        """
        Read a manifest file and bulk-load it.

        An unreadable file is reported rather than raised: the store is left
        untouched and the report has source_readable set to False.
        """
        start_time = time.perf_counter()

        try:
            candidates = self.reader.read(path)
        except SourceUnreadableError as e:
            self.logger.warning("Dataset unreadable", source=str(path), reason=e.reason)
            audit_logger.log_dataset_unreadable(str(path), e.reason)
            return LoadReport(
                source=str(path),
                source_readable=False,
                elapsed_ms=(time.perf_counter() - start_time) * 1000
            )

        report = self.bulk_load(candidates, source=str(path))
        report.elapsed_ms = (time.perf_counter() - start_time) * 1000

        audit_logger.log_dataset_loaded(report)
        return report

    def _is_loadable(self, candidate: RawCandidate, seen_ids: Set[int]) -> bool:
        if not candidate.parsed or candidate.seat_row is None:
            return False
        if not validate_passenger_id(candidate.passenger_id):
            return False
        if candidate.passenger_id in seen_ids or candidate.passenger_id in self.store:
            return False
        if not candidate.seat_column or not self.store.geometry.is_valid_column(candidate.seat_column):
            return False
        return validate_seat_class(candidate.seat_class, (c.value for c in SeatClass))
