"""
Observability module for the harvester.
Provides structured logging and run metrics.
"""

from .logger import configure_logging
from .metrics import MetricsCollector, MetricTimer

__all__ = [
    'configure_logging',
    'MetricsCollector', 'MetricTimer',
]
