"""
Main application entry point: interactive reservation console
"""

import sys
import structlog
from typing import Callable, Dict, List, Optional

from .config import config
from .types import ReservationError, ReservationRequest
from .services import (
    BulkLoader, ManifestFormatter, MetricType, PerformanceMonitor,
    ReservationStore, audit_logger, performance_monitor
)
from .utils.logger import setup_logging
from .utils.validators import parse_int

logger = structlog.get_logger()


MENU = "\n".join([
    "",
    "===== MAIN MENU =====",
    "1. Add Passenger",
    "2. Delete Passenger",
    "3. Display Manifest By Trip",
    "4. Display Seating Chart (By Trip)",
    "5. Search Passenger By ID",
    "6. Display Manifest By Trip And Class",
    "7. Show Memory Usage",
    "0. Exit",
])


class ReservationConsole:
    """
    Text menu over a ReservationStore.

    Input and output go through injectable callables so the console can be
    driven by a script.
    """

    def __init__(
        self,
        store: ReservationStore,
        loader: Optional[BulkLoader] = None,
        formatter: Optional[ManifestFormatter] = None,
        monitor: Optional[PerformanceMonitor] = None,
        input_func: Optional[Callable[[str], str]] = None,
        output_func: Optional[Callable[[str], None]] = None
    ):
        self.store = store
        self.monitor = monitor or performance_monitor
        self.loader = loader or BulkLoader(store, monitor=self.monitor)
        self.formatter = formatter or ManifestFormatter()
        self._input = input_func or input
        self._output = output_func or print

        self.handlers: Dict[int, Callable[[], None]] = {
            1: self.add_passenger,
            2: self.cancel_passenger,
            3: self.show_manifest,
            4: self.show_seating_chart,
            5: self.search_passenger,
            6: self.show_class_manifest,
            7: self.show_memory_usage,
        }

    def run(self, dataset_path: Optional[str] = None) -> int:
        self._output("===== FLIGHT RESERVATION SYSTEM =====")
        self._output("\nLoading passenger data...")
        self.load_dataset(dataset_path or config.dataset.path)

        while True:
            self._output(MENU)
            try:
                choice = self._read_int("Choice: ")
            except EOFError:
                self._output("Goodbye!")
                return 0

            if choice is None:
                self._output("Invalid input.")
                continue
            if choice == 0:
                self._output("Goodbye!")
                return 0

            handler = self.handlers.get(choice)
            if handler is None:
                self._output("Invalid choice.")
                continue

            try:
                with self.monitor.measure_latency(
                    MetricType.OPERATION_LATENCY,
                    context={"choice": choice}
                ) as timing:
                    handler()
            except EOFError:
                self._output("Goodbye!")
                return 0

            self._output(self.formatter.format_timing("Operation Time", timing.elapsed_ms))

    def load_dataset(self, path: str) -> None:
        report = self.loader.load_file(path)
        self._output("")
        self._output(self.formatter.format_load_report(report))

    # --- Menu actions ---

    def add_passenger(self) -> None:
        passenger_id = self._read_int("\nEnter Passenger ID: ")
        if passenger_id is None:
            self._output("Invalid input.")
            return

        trip_id = self._read_int("Enter Trip Number (>=1): ")
        if trip_id is None:
            self._output("Invalid input.")
            return

        name = self._input("Enter Name: ").strip()

        seat_row = self._read_int(f"Enter Seat Row (1-{self.store.geometry.rows}): ")
        if seat_row is None:
            self._output("Invalid input.")
            return

        columns = self.store.geometry.columns
        seat_column = self._input(f"Enter Seat Column ({columns[0]}-{columns[-1]}): ").strip()
        seat_class = self._input("Enter Class (Economy/Business/First): ").strip()

        request = ReservationRequest(
            passenger_id=passenger_id,
            trip_id=trip_id,
            name=name,
            seat_row=seat_row,
            seat_column=seat_column,
            seat_class=seat_class,
        )

        try:
            with self.monitor.measure_latency(MetricType.MUTATION_LATENCY, context={"operation": "insert"}):
                record = self.store.insert(request)
        except ReservationError as e:
            audit_logger.log_insert_rejected(request, e)
            self._output(self.formatter.format_error(e))
            return

        audit_logger.log_passenger_inserted(record)
        self._output(f"Passenger added successfully to trip {record.trip_id}, seat {record.seat_label}.")

    def cancel_passenger(self) -> None:
        passenger_id = self._read_int("\nEnter Passenger ID to delete: ")
        if passenger_id is None:
            self._output("Invalid input.")
            return

        try:
            with self.monitor.measure_latency(MetricType.MUTATION_LATENCY, context={"operation": "cancel"}):
                record = self.store.cancel(passenger_id)
        except ReservationError as e:
            audit_logger.log_cancel_rejected(passenger_id, e)
            self._output(self.formatter.format_error(e))
            return

        audit_logger.log_passenger_cancelled(record)
        self._output("Passenger removed successfully.")

    def show_manifest(self) -> None:
        trip_id = self._read_int("Enter Trip Number: ")
        if trip_id is None:
            self._output("Invalid input.")
            return

        with self.monitor.measure_latency(MetricType.LOOKUP_LATENCY, context={"operation": "manifest"}):
            records = self.store.list_by_trip(trip_id)
        self._output("")
        self._output(self.formatter.format_manifest(trip_id, records))

    def show_class_manifest(self) -> None:
        trip_id = self._read_int("Enter Trip Number: ")
        if trip_id is None:
            self._output("Invalid input.")
            return
        seat_class = self._input("Enter Class (Economy/Business/First): ").strip()

        with self.monitor.measure_latency(MetricType.LOOKUP_LATENCY, context={"operation": "class_manifest"}):
            records = self.store.list_by_trip_and_class(trip_id, seat_class)
        self._output("")
        self._output(self.formatter.format_manifest(trip_id, records, seat_class=seat_class))

    def show_seating_chart(self) -> None:
        trip_id = self._read_int("Enter Trip Number: ")
        if trip_id is None:
            self._output("Invalid input.")
            return

        with self.monitor.measure_latency(MetricType.LOOKUP_LATENCY, context={"operation": "seating_chart"}):
            chart = self.store.seating_chart(trip_id)
        self._output("")
        self._output(self.formatter.format_seating_chart(trip_id, chart, self.store.geometry.columns))

    def search_passenger(self) -> None:
        passenger_id = self._read_int("\nEnter Passenger ID to search: ")
        if passenger_id is None:
            self._output("Invalid input.")
            return

        with self.monitor.measure_latency(MetricType.LOOKUP_LATENCY, context={"operation": "search"}) as timing:
            record = self.store.find_by_passenger_id(passenger_id)

        if record:
            self._output("\nPassenger Found!")
            self._output(self.formatter.format_passenger(record))
        else:
            self._output("\nPassenger not found.")
        self._output(self.formatter.format_timing("Search Time", timing.elapsed_ms))

    def show_memory_usage(self) -> None:
        report = self.monitor.measure_memory(self.store)
        self._output("")
        self._output(self.formatter.format_memory_report(report))

    def _read_int(self, prompt: str) -> Optional[int]:
        return parse_int(self._input(prompt))


def run(argv: Optional[List[str]] = None) -> int:
    """Console-script entry point. An optional argument overrides the dataset path."""
    argv = sys.argv[1:] if argv is None else argv
    setup_logging()

    store = ReservationStore()
    console = ReservationConsole(store)

    if config.logging.enable_metrics:
        console.monitor.start_memory_tracing()

    logger.info("Starting reservation console", version="1.0.0")
    try:
        return console.run(argv[0] if argv else None)
    finally:
        console.monitor.stop_memory_tracing()


if __name__ == "__main__":
    raise SystemExit(run())
