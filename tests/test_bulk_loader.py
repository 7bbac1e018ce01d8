"""
Tests for the bulk loader
"""

import pytest
from unittest.mock import patch

from flight_ledger.services.bulk_loader import BulkLoader
from flight_ledger.services.dataset_reader import DatasetReader
from flight_ledger.services.performance_monitor import PerformanceMonitor, MetricType
from flight_ledger.services.reservation_store import ReservationStore
from flight_ledger.types import CabinGeometry, PassengerRecord, RawCandidate, SeatClass


def candidate(ordinal, passenger_id=None, row=1, column="A", seat_class="Economy", name="P"):
    return RawCandidate(
        ordinal=ordinal,
        passenger_id=ordinal if passenger_id is None else passenger_id,
        name=name,
        seat_row=row,
        seat_column=column,
        seat_class=seat_class,
    )


class TestBulkLoader:
    """Test trip assignment and collision resolution"""

    @pytest.fixture
    def store(self):
        """2 rows x A-B cabin: four seats per trip"""
        return ReservationStore(geometry=CabinGeometry(rows=2, columns="AB"))

    @pytest.fixture
    def loader(self, store):
        return BulkLoader(store, monitor=PerformanceMonitor())

    def test_base_trip_by_position(self, loader):
        assert loader.base_trip(1) == 1
        assert loader.base_trip(4) == 1
        assert loader.base_trip(5) == 2
        assert loader.base_trip(9) == 3

    def test_resolve_trip_skips_taken_trips(self, store, loader):
        for trip_id in (1, 2):
            store.add_record(PassengerRecord(
                passenger_id=trip_id, trip_id=trip_id, name="Seat Holder",
                seat_row=0, seat_column="A", seat_class=SeatClass.ECONOMY
            ))

        assert loader.resolve_trip(1, 0, "A") == 3
        assert loader.resolve_trip(1, 0, "B") == 1
        assert loader.resolve_trip(3, 0, "A") == 3

    def test_distinct_seats_fill_one_trip(self, store, loader):
        seats = [(1, "A"), (1, "B"), (2, "A"), (2, "B"), (1, "A")]
        candidates = [candidate(i + 1, row=r, column=c) for i, (r, c) in enumerate(seats)]

        report = loader.bulk_load(candidates)

        assert report.inserted == 5
        assert report.displaced == 0
        assert [r.trip_id for r in store.records()] == [1, 1, 1, 1, 2]

    def test_contested_seat_moves_forward(self, store, loader):
        """Six passengers all asking for 1A"""
        report = loader.bulk_load([candidate(i) for i in range(1, 7)])

        assert report.inserted == 6
        assert report.displaced >= 2
        assert report.displaced == 5

        trips = {r.passenger_id: r.trip_id for r in store.records()}
        assert trips[1] == 1
        assert trips[2] == 2
        assert trips[3] == 3
        assert trips[4] == 4
        # Base trip 2 is taken, so these continue past the earlier ones
        assert trips[5] == 5
        assert trips[6] == 6
        assert all(r.seat_row == 0 and r.seat_column == "A" for r in store.records())

    def test_skipped_lines_still_count_toward_trips(self, store, loader):
        candidates = [
            RawCandidate(ordinal=1, error="missing fields"),
            RawCandidate(ordinal=2, error="invalid passenger id"),
            RawCandidate(ordinal=3, error="invalid seat row"),
            RawCandidate(ordinal=4, error="invalid seat column"),
            candidate(5, passenger_id=50),
        ]

        report = loader.bulk_load(candidates)

        assert report.inserted == 1
        assert report.skipped == 4
        assert store.find_by_passenger_id(50).trip_id == 2

    def test_rejected_candidates(self, store, loader):
        candidates = [
            candidate(1, passenger_id=10),
            candidate(2, passenger_id=10, row=2),  # Duplicate in this load
            candidate(3, passenger_id=0, row=2),  # Non-positive ID
            candidate(4, passenger_id=-4, row=2),
            candidate(5, passenger_id=11, row=0),  # Row below range
            candidate(6, passenger_id=12, row=3),  # Row above range
            candidate(7, passenger_id=13, column="C"),
            candidate(8, passenger_id=14, seat_class="economy"),
        ]

        report = loader.bulk_load(candidates)

        assert report.inserted == 1
        assert report.skipped == 7
        assert [r.passenger_id for r in store.records()] == [10]

    def test_lowercase_column_is_normalized(self, store, loader):
        loader.bulk_load([candidate(1, column="b")])
        assert store.is_seat_taken(1, 0, "B")

    def test_long_names_are_truncated(self, store, loader):
        loader.bulk_load([candidate(1, name="x" * 500), candidate(2, row=2, name=None)])

        first, second = store.records()
        assert first.name == "x" * store.name_max_length
        assert second.name == ""

    def test_existing_store_ids_are_skipped(self, store, loader):
        loader.bulk_load([candidate(1)])
        report = loader.bulk_load([candidate(1, row=2)])

        assert report.inserted == 0
        assert report.skipped == 1
        assert len(store) == 1

    def test_load_respects_existing_occupancy(self, store, loader):
        loader.bulk_load([candidate(1, passenger_id=1)])
        report = loader.bulk_load([candidate(1, passenger_id=2)])

        assert report.displaced == 1
        assert store.find_by_passenger_id(2).trip_id == 2

    def test_load_is_deterministic(self):
        candidates = [candidate(i, row=(i % 2) + 1, column="AB"[i % 3 % 2]) for i in range(1, 30)]

        results = []
        for _ in range(2):
            store = ReservationStore(geometry=CabinGeometry(rows=2, columns="AB"))
            BulkLoader(store, monitor=PerformanceMonitor()).bulk_load(candidates)
            results.append([(r.passenger_id, r.trip_id, r.seat_row, r.seat_column) for r in store])

        assert results[0] == results[1]

    def test_no_double_booking_after_load(self, store, loader):
        candidates = [candidate(i, row=(i % 2) + 1, column="AB"[(i // 2) % 2]) for i in range(1, 40)]
        loader.bulk_load(candidates)

        seats = [r.seat_key for r in store.records()]
        assert len(seats) == len(set(seats))

    def test_report_timing_and_metric(self, store):
        monitor = PerformanceMonitor()
        loader = BulkLoader(store, monitor=monitor)

        report = loader.bulk_load([candidate(1)], source="inline")

        assert report.elapsed_ms >= 0
        assert report.source == "inline"
        assert len(monitor._metrics[MetricType.DATASET_LOAD_LATENCY]) == 1


class TestBulkLoaderFiles:
    """Test loading from manifest files"""

    @pytest.fixture
    def store(self):
        return ReservationStore(geometry=CabinGeometry(rows=2, columns="AB"))

    @pytest.fixture
    def loader(self, store):
        reader = DatasetReader(geometry=store.geometry, delimiter=",", has_header=True)
        return BulkLoader(store, reader=reader, monitor=PerformanceMonitor())

    def test_load_file(self, tmp_path, store, loader):
        dataset = tmp_path / "passengers.csv"
        dataset.write_text(
            "passengerId,name,seatRow,seatColumn,seatClass\n"
            "1,Ada,1,A,Economy\n"
            "2,Grace,1,a,First\n"
            "not-a-number,Bad,1,A,Economy\n"
            "3,Linus,2,B,Business\n"
            "4,Ken,5,A,Economy\n",
            encoding="utf-8"
        )

        with patch("flight_ledger.services.bulk_loader.audit_logger") as mock_audit:
            report = loader.load_file(dataset)

        assert report.source_readable
        assert report.inserted == 3
        assert report.displaced == 1
        assert report.skipped == 2
        assert store.find_by_passenger_id(2).trip_id == 2
        mock_audit.log_dataset_loaded.assert_called_once_with(report)

    def test_missing_file_is_not_fatal(self, tmp_path, store, loader):
        with patch("flight_ledger.services.bulk_loader.audit_logger") as mock_audit:
            report = loader.load_file(tmp_path / "missing.csv")

        assert not report.source_readable
        assert report.inserted == 0
        assert len(store) == 0
        mock_audit.log_dataset_unreadable.assert_called_once()
