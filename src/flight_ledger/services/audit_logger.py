"""
Audit logging service for the reservation ledger.

Records every booking, cancellation and dataset load as a structured event.
Passenger names are masked before they reach the log.
"""

import structlog
from typing import Any, Dict, Optional
from datetime import datetime
from enum import Enum

from ..types import LoadReport, PassengerRecord, ReservationError, ReservationRequest
from ..config import config


class AuditEventType(str, Enum):
    """Types of audit events"""
    DATASET_LOADED = "dataset_loaded"
    DATASET_UNREADABLE = "dataset_unreadable"
    PASSENGER_INSERTED = "passenger_inserted"
    INSERT_REJECTED = "insert_rejected"
    PASSENGER_CANCELLED = "passenger_cancelled"
    CANCEL_REJECTED = "cancel_rejected"
    PERFORMANCE_THRESHOLD_EXCEEDED = "performance_threshold_exceeded"


class AuditLogger:
    """
    Service for audit logging with PII protection and structured logging.
    """

    def __init__(self):
        """Initialize the audit logger."""
        self.logger = structlog.get_logger("audit")
        self.enabled = config.logging.enable_audit

        # PII fields that should be masked
        self.pii_fields = {'name', 'passenger_name'}

    def log_dataset_loaded(self, report: LoadReport) -> None:
        """
        Log a completed bulk load.

        Args:
            report: Load report returned by the bulk loader
        """
        if not self.enabled:
            return

        self.logger.info(
            "Dataset loaded",
            event_type=AuditEventType.DATASET_LOADED,
            source=report.source,
            inserted=report.inserted,
            displaced=report.displaced,
            skipped=report.skipped,
            elapsed_ms=round(report.elapsed_ms, 3),
            timestamp=datetime.now().isoformat()
        )

    def log_dataset_unreadable(self, source: str, reason: Optional[str] = None) -> None:
        if not self.enabled:
            return

        self.logger.warning(
            "Dataset unreadable",
            event_type=AuditEventType.DATASET_UNREADABLE,
            source=source,
            reason=reason,
            timestamp=datetime.now().isoformat()
        )

    def log_passenger_inserted(self, record: PassengerRecord) -> None:
        """
        Log a successful booking.

        Args:
            record: The stored passenger record
        """
        if not self.enabled:
            return

        self.logger.info(
            "Passenger inserted",
            event_type=AuditEventType.PASSENGER_INSERTED,
            **self._sanitize_data(self._record_fields(record)),
            timestamp=datetime.now().isoformat()
        )

    def log_insert_rejected(self, request: ReservationRequest, error: ReservationError) -> None:
        if not self.enabled:
            return

        self.logger.info(
            "Insert rejected",
            event_type=AuditEventType.INSERT_REJECTED,
            passenger_id=request.passenger_id,
            trip_id=request.trip_id,
            error_code=error.error_code,
            error_message=error.message,
            timestamp=datetime.now().isoformat()
        )

    def log_passenger_cancelled(self, record: PassengerRecord) -> None:
        if not self.enabled:
            return

        self.logger.info(
            "Passenger cancelled",
            event_type=AuditEventType.PASSENGER_CANCELLED,
            **self._sanitize_data(self._record_fields(record)),
            timestamp=datetime.now().isoformat()
        )

    def log_cancel_rejected(self, passenger_id: int, error: ReservationError) -> None:
        if not self.enabled:
            return

        self.logger.info(
            "Cancel rejected",
            event_type=AuditEventType.CANCEL_REJECTED,
            passenger_id=passenger_id,
            error_code=error.error_code,
            timestamp=datetime.now().isoformat()
        )

    def log_performance_threshold_exceeded(
        self,
        metric_name: str,
        actual_value: float,
        threshold_value: float,
        context: Optional[Dict[str, Any]] = None
    ) -> None:
        """
        Log performance threshold violations.

        Args:
            metric_name: Name of the metric that exceeded threshold
            actual_value: Actual measured value
            threshold_value: Configured threshold value
            context: Additional context information
        """
        if not self.enabled:
            return

        self.logger.warning(
            "Performance threshold exceeded",
            event_type=AuditEventType.PERFORMANCE_THRESHOLD_EXCEEDED,
            metric_name=metric_name,
            actual_value=actual_value,
            threshold_value=threshold_value,
            threshold_exceeded_by=actual_value - threshold_value,
            context=self._sanitize_data(context) if context else None,
            timestamp=datetime.now().isoformat()
        )

    def _record_fields(self, record: PassengerRecord) -> Dict[str, Any]:
        return {
            "passenger_id": record.passenger_id,
            "trip_id": record.trip_id,
            "name": record.name,
            "seat": record.seat_label,
            "seat_class": record.seat_class.value,
        }

    def _mask_name(self, name: str) -> str:
        """Keep the first letter of each word: 'Jane Doe' -> 'J*** D***'"""
        return " ".join(f"{part[0]}***" for part in name.split())

    def _sanitize_data(self, data: Any) -> Any:
        """
        Recursively sanitize data to mask PII.

        Args:
            data: Data to sanitize

        Returns:
            Sanitized data with passenger names masked
        """
        if isinstance(data, dict):
            sanitized = {}
            for key, value in data.items():
                if key.lower() in self.pii_fields:
                    sanitized[key] = self._mask_name(value) if isinstance(value, str) and value else "[MASKED]"
                else:
                    sanitized[key] = self._sanitize_data(value)
            return sanitized

        elif isinstance(data, list):
            return [self._sanitize_data(item) for item in data]

        else:
            return data


# Global audit logger instance
audit_logger = AuditLogger()
