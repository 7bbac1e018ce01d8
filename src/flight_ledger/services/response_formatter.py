"""
Response formatting service for the reservation ledger.

Renders store query results (passenger details, manifests, seating charts)
and load, timing and memory reports as console text.
"""

from typing import List, Optional, Sequence, Union

from ..types import LoadReport, PassengerRecord, ReservationError, SeatClass
from .performance_monitor import MemoryReport


SEAT_OCCUPIED = "X"
SEAT_FREE = "O"


class ManifestFormatter:
    """
    Builds the text shown by the interactive console.
    """

    def format_passenger(self, record: PassengerRecord) -> str:
        return "\n".join([
            f"Trip: {record.trip_id}",
            f"ID: {record.passenger_id}",
            f"Name: {record.name}",
            f"Seat: {record.seat_label}",
            f"Class: {record.seat_class.value}",
        ])

    def format_manifest_line(self, record: PassengerRecord) -> str:
        return (
            f"ID: {record.passenger_id}"
            f" | Name: {record.name}"
            f" | Seat: {record.seat_label}"
            f" | Class: {record.seat_class.value}"
        )

    def format_manifest(
        self,
        trip_id: int,
        records: Sequence[PassengerRecord],
        seat_class: Optional[Union[SeatClass, str]] = None
    ) -> str:
        """
        Render a trip manifest, optionally labelled with a seat class.

        Args:
            trip_id: Trip the records belong to
            records: Records in manifest order
            seat_class: Class filter that produced the records, if any
        """
        title = f"Passenger Manifest for Trip {trip_id}"
        if seat_class is not None:
            class_name = seat_class.value if isinstance(seat_class, SeatClass) else seat_class
            title += f" ({class_name})"

        lines = [title, "-" * 37]
        if not records:
            lines.append("No passengers found for this trip.")
        else:
            lines.extend(self.format_manifest_line(r) for r in records)
            lines.append(f"Total passengers: {len(records)}")
        return "\n".join(lines)

    def format_seating_chart(
        self,
        trip_id: int,
        chart: List[List[Optional[PassengerRecord]]],
        columns: str
    ) -> str:
        """
        Render a seating grid: X for an occupied seat, O for a free one.
        """
        lines = [f"Seating Chart for Trip {trip_id}", ""]
        lines.append("   " + " ".join(columns))

        for row_index, row in enumerate(chart):
            cells = " ".join(SEAT_OCCUPIED if seat else SEAT_FREE for seat in row)
            lines.append(f"{row_index + 1:>2} {cells}")

        occupied = sum(1 for row in chart for seat in row if seat)
        total = sum(len(row) for row in chart)
        lines.append("")
        lines.append(f"Occupied: {occupied}/{total}")
        lines.append(f"Legend: {SEAT_OCCUPIED}=OCCUPIED, {SEAT_FREE}=AVAILABLE")
        return "\n".join(lines)

    def format_load_report(self, report: LoadReport) -> str:
        if not report.source_readable:
            return f"CSV file not found or unreadable: {report.source}. Please check the path."

        return "\n".join([
            "CSV loaded successfully.",
            f"Passengers inserted: {report.inserted}",
            f"Passengers moved to different trips: {report.displaced}",
            f"Lines skipped: {report.skipped}",
            self.format_timing("Time taken", report.elapsed_ms),
        ])

    def format_memory_report(self, report: MemoryReport) -> str:
        lines = [
            f"Records in memory: {report.record_count}",
            f"Estimated store size: {report.estimated_bytes / 1024:.2f} KB",
        ]
        if report.traced_current_bytes is not None:
            lines.append(f"Process memory (traced): {report.traced_current_bytes / 1024:.2f} KB")
            lines.append(f"Peak memory (traced): {report.traced_peak_bytes / 1024:.2f} KB")
        return "\n".join(lines)

    def format_timing(self, label: str, elapsed_ms: float) -> str:
        return f"{label}: {elapsed_ms:.3f} ms ({elapsed_ms / 1000:.6f} seconds)"

    def format_error(self, error: ReservationError) -> str:
        return f"Error [{error.error_code}]: {error.message}"
