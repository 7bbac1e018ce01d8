"""
Performance monitoring service for the reservation ledger.

Times store operations, keeps recent measurements for summaries and reports
how much memory the store occupies. It only observes the store through its
public operations and never changes it.
"""

import sys
import time
import tracemalloc
import structlog
from typing import Callable, Dict, List, Optional, Any
from datetime import datetime, timedelta
from collections import defaultdict, deque
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum

from ..config import config
from .audit_logger import audit_logger


class MetricType(str, Enum):
    """Types of performance metrics"""
    DATASET_LOAD_LATENCY = "dataset_load_latency"
    LOOKUP_LATENCY = "lookup_latency"
    MUTATION_LATENCY = "mutation_latency"
    OPERATION_LATENCY = "operation_latency"
    MEMORY_FOOTPRINT = "memory_footprint"


@dataclass
class PerformanceMetric:
    """Individual performance metric data point"""
    metric_type: MetricType
    value: float
    timestamp: datetime
    context: Dict[str, Any] = field(default_factory=dict)


@dataclass
class MetricSummary:
    """Summary statistics for a metric"""
    metric_type: MetricType
    count: int
    min_value: float
    max_value: float
    avg_value: float
    p95_value: float
    p99_value: float
    threshold_violations: int


@dataclass
class PerformanceThresholds:
    """Latency thresholds in milliseconds"""
    dataset_load_latency_ms: int = 5000
    lookup_latency_ms: int = 100
    mutation_latency_ms: int = 100
    operation_latency_ms: int = 2000


@dataclass
class LatencyMeasurement:
    """Filled in when a measure_latency block exits"""
    elapsed_ms: float = 0.0

    @property
    def elapsed_seconds(self) -> float:
        return self.elapsed_ms / 1000.0


@dataclass
class MemoryReport:
    """Memory used by the store and, when tracing, by the process"""
    record_count: int
    estimated_bytes: int
    traced_current_bytes: Optional[int] = None
    traced_peak_bytes: Optional[int] = None


class PerformanceMonitor:
    """
    Service for timing operations and tracking metrics.
    """

    def __init__(self, thresholds: Optional[PerformanceThresholds] = None):
        """Initialize the performance monitor."""
        self.logger = structlog.get_logger("performance")
        self.enabled = config.logging.enable_metrics

        self.thresholds = thresholds or PerformanceThresholds(
            dataset_load_latency_ms=config.performance.max_load_latency,
            lookup_latency_ms=config.performance.max_lookup_latency,
            mutation_latency_ms=config.performance.max_mutation_latency,
            operation_latency_ms=config.performance.max_operation_latency
        )

        self._metrics: Dict[MetricType, deque] = defaultdict(lambda: deque(maxlen=10000))

        # Alert callbacks
        self._alert_callbacks: List[Callable[[MetricType, float, float], None]] = []

    def record_metric(
        self,
        metric_type: MetricType,
        value: float,
        context: Optional[Dict[str, Any]] = None
    ) -> None:
        """
        Record a performance metric.

        Args:
            metric_type: Type of metric being recorded
            value: Metric value
            context: Additional context information
        """
        if not self.enabled:
            return

        metric = PerformanceMetric(
            metric_type=metric_type,
            value=value,
            timestamp=datetime.now(),
            context=context or {}
        )
        self._metrics[metric_type].append(metric)

        self._check_threshold(metric)

        self.logger.debug(
            "Performance metric recorded",
            metric_type=metric_type.value,
            value=value,
            context=context
        )

    @contextmanager
    def measure_latency(
        self,
        metric_type: MetricType,
        context: Optional[Dict[str, Any]] = None
    ):
        """
        Context manager for measuring operation latency.

        Usage:
            with monitor.measure_latency(MetricType.LOOKUP_LATENCY) as timing:
                store.find_by_passenger_id(42)
            print(timing.elapsed_ms)
        """
        measurement = LatencyMeasurement()
        start_time = time.perf_counter()
        try:
            yield measurement
        finally:
            measurement.elapsed_ms = (time.perf_counter() - start_time) * 1000
            self.record_metric(metric_type, measurement.elapsed_ms, context)

    def get_metric_summary(
        self,
        metric_type: MetricType,
        time_window: Optional[timedelta] = None
    ) -> Optional[MetricSummary]:
        """
        Get summary statistics for a metric.

        Args:
            metric_type: Type of metric to summarize
            time_window: Only consider recent metrics; all retained metrics when None

        Returns:
            Metric summary or None if no data available
        """
        metrics = list(self._metrics[metric_type])
        if time_window is not None:
            cutoff_time = datetime.now() - time_window
            metrics = [m for m in metrics if m.timestamp >= cutoff_time]

        if not metrics:
            return None

        values = sorted(m.value for m in metrics)
        count = len(values)

        p95_value = values[min(int(0.95 * count), count - 1)]
        p99_value = values[min(int(0.99 * count), count - 1)]

        threshold = self._get_threshold(metric_type)
        threshold_violations = sum(1 for v in values if v > threshold) if threshold else 0

        return MetricSummary(
            metric_type=metric_type,
            count=count,
            min_value=values[0],
            max_value=values[-1],
            avg_value=sum(values) / count,
            p95_value=p95_value,
            p99_value=p99_value,
            threshold_violations=threshold_violations
        )

    def get_all_metrics_summary(
        self,
        time_window: Optional[timedelta] = None
    ) -> Dict[MetricType, MetricSummary]:
        summaries = {}
        for metric_type in MetricType:
            summary = self.get_metric_summary(metric_type, time_window)
            if summary:
                summaries[metric_type] = summary
        return summaries

    def add_alert_callback(self, callback: Callable[[MetricType, float, float], None]) -> None:
        """
        Add a callback function to be called when thresholds are exceeded.

        Args:
            callback: Function to call with (metric_type, actual_value, threshold_value)
        """
        self._alert_callbacks.append(callback)

    def start_memory_tracing(self) -> None:
        if not tracemalloc.is_tracing():
            tracemalloc.start()

    def stop_memory_tracing(self) -> None:
        if tracemalloc.is_tracing():
            tracemalloc.stop()

    def measure_memory(self, store) -> MemoryReport:
        """
        Report the store's memory footprint.

        The estimate covers the record list, each record object and its field
        values. Process-wide figures are added only while tracemalloc runs.
        """
        records = store.records()
        estimated = sys.getsizeof(records)
        for record in records:
            estimated += sys.getsizeof(record) + sys.getsizeof(record.__dict__)
            estimated += sum(sys.getsizeof(value) for value in record.__dict__.values())

        report = MemoryReport(record_count=len(records), estimated_bytes=estimated)
        if tracemalloc.is_tracing():
            report.traced_current_bytes, report.traced_peak_bytes = tracemalloc.get_traced_memory()

        self.record_metric(
            MetricType.MEMORY_FOOTPRINT,
            float(estimated),
            context={"record_count": report.record_count}
        )
        return report

    def reset(self) -> None:
        self._metrics.clear()

    def _check_threshold(self, metric: PerformanceMetric) -> None:
        """Check if metric exceeds threshold and trigger alerts."""
        threshold = self._get_threshold(metric.metric_type)

        if threshold and metric.value > threshold:
            audit_logger.log_performance_threshold_exceeded(
                metric_name=metric.metric_type.value,
                actual_value=metric.value,
                threshold_value=threshold,
                context=metric.context
            )

            for callback in self._alert_callbacks:
                try:
                    callback(metric.metric_type, metric.value, threshold)
                except Exception as e:
                    self.logger.error(
                        "Alert callback failed",
                        error=str(e),
                        metric_type=metric.metric_type.value
                    )

    def _get_threshold(self, metric_type: MetricType) -> Optional[float]:
        threshold_map = {
            MetricType.DATASET_LOAD_LATENCY: self.thresholds.dataset_load_latency_ms,
            MetricType.LOOKUP_LATENCY: self.thresholds.lookup_latency_ms,
            MetricType.MUTATION_LATENCY: self.thresholds.mutation_latency_ms,
            MetricType.OPERATION_LATENCY: self.thresholds.operation_latency_ms,
        }
        return threshold_map.get(metric_type)


# Global performance monitor instance
performance_monitor = PerformanceMonitor()
