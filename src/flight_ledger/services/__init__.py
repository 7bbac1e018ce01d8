"""
Services module initialization
"""

from .reservation_store import ReservationStore
from .dataset_reader import DatasetReader
from .bulk_loader import BulkLoader
from .response_formatter import ManifestFormatter
from .audit_logger import AuditLogger, audit_logger, AuditEventType
from .performance_monitor import (
    PerformanceMonitor, performance_monitor, MetricType, MemoryReport
)

__all__ = [
    'ReservationStore',
    'DatasetReader',
    'BulkLoader',
    'ManifestFormatter',
    'AuditLogger',
    'audit_logger',
    'AuditEventType',
    'PerformanceMonitor',
    'performance_monitor',
    'MetricType',
    'MemoryReport',
]
