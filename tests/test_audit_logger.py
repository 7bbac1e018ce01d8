"""
Tests for audit logging service
"""

import pytest
from unittest.mock import MagicMock

from flight_ledger.services.audit_logger import AuditLogger, AuditEventType
from flight_ledger.types import (
    LoadReport, PassengerRecord, ReservationRequest, SeatClass,
    SeatTakenError, PassengerNotFoundError
)


class TestAuditLogger:
    """Test audit logger functionality"""

    @pytest.fixture
    def audit_logger(self):
        """Create audit logger instance with a mocked structlog logger"""
        logger = AuditLogger()
        logger.enabled = True
        logger.logger = MagicMock()
        return logger

    @pytest.fixture
    def sample_record(self):
        return PassengerRecord(
            passenger_id=7,
            trip_id=2,
            name="Jane Doe",
            seat_row=0,
            seat_column="A",
            seat_class=SeatClass.FIRST
        )

    def test_log_passenger_inserted_masks_name(self, audit_logger, sample_record):
        audit_logger.log_passenger_inserted(sample_record)

        audit_logger.logger.info.assert_called_once()
        args, kwargs = audit_logger.logger.info.call_args
        assert args[0] == "Passenger inserted"
        assert kwargs["event_type"] == AuditEventType.PASSENGER_INSERTED
        assert kwargs["passenger_id"] == 7
        assert kwargs["seat"] == "1A"
        assert kwargs["name"] == "J*** D***"

    def test_log_passenger_cancelled(self, audit_logger, sample_record):
        audit_logger.log_passenger_cancelled(sample_record)

        _, kwargs = audit_logger.logger.info.call_args
        assert kwargs["event_type"] == AuditEventType.PASSENGER_CANCELLED
        assert "Jane" not in kwargs["name"]

    def test_log_insert_rejected(self, audit_logger):
        request = ReservationRequest(
            passenger_id=3, trip_id=1, name="Ann", seat_row=1, seat_column="A", seat_class="Economy"
        )
        audit_logger.log_insert_rejected(request, SeatTakenError(1, "1A"))

        _, kwargs = audit_logger.logger.info.call_args
        assert kwargs["event_type"] == AuditEventType.INSERT_REJECTED
        assert kwargs["error_code"] == "SEAT_TAKEN"
        assert "name" not in kwargs

    def test_log_cancel_rejected(self, audit_logger):
        audit_logger.log_cancel_rejected(999, PassengerNotFoundError(999))

        _, kwargs = audit_logger.logger.info.call_args
        assert kwargs["passenger_id"] == 999
        assert kwargs["error_code"] == "PASSENGER_NOT_FOUND"

    def test_log_dataset_loaded(self, audit_logger):
        audit_logger.log_dataset_loaded(LoadReport(inserted=5, displaced=1, skipped=2, source="a.csv"))

        _, kwargs = audit_logger.logger.info.call_args
        assert kwargs["event_type"] == AuditEventType.DATASET_LOADED
        assert kwargs["inserted"] == 5
        assert kwargs["displaced"] == 1

    def test_log_dataset_unreadable(self, audit_logger):
        audit_logger.log_dataset_unreadable("missing.csv", "No such file")

        audit_logger.logger.warning.assert_called_once()
        _, kwargs = audit_logger.logger.warning.call_args
        assert kwargs["source"] == "missing.csv"

    def test_log_performance_threshold_exceeded(self, audit_logger):
        audit_logger.log_performance_threshold_exceeded(
            metric_name="lookup_latency",
            actual_value=150.0,
            threshold_value=100.0,
            context={"name": "Jane Doe", "operation": "search"}
        )

        _, kwargs = audit_logger.logger.warning.call_args
        assert kwargs["threshold_exceeded_by"] == 50.0
        assert kwargs["context"] == {"name": "J*** D***", "operation": "search"}

    def test_disabled_logger_is_silent(self, audit_logger, sample_record):
        audit_logger.enabled = False

        audit_logger.log_passenger_inserted(sample_record)
        audit_logger.log_dataset_unreadable("missing.csv")

        audit_logger.logger.info.assert_not_called()
        audit_logger.logger.warning.assert_not_called()

    def test_sanitize_nested_data(self, audit_logger):
        data = {"passengers": [{"name": "Ada Lovelace", "id": 1}, {"name": "", "id": 2}]}

        sanitized = audit_logger._sanitize_data(data)

        assert sanitized["passengers"][0] == {"name": "A*** L***", "id": 1}
        assert sanitized["passengers"][1]["name"] == "[MASKED]"
