"""Observability infrastructure: logging, metrics and events."""

from .logging import setup_logging
from .metrics import MetricsCollector
from .events import EventBus, INSTRUCTION_RUN, INSTRUCTION_UNDONE, GATE_EVALUATED

__all__ = [
    'setup_logging',
    'MetricsCollector',
    'EventBus', 'INSTRUCTION_RUN', 'INSTRUCTION_UNDONE', 'GATE_EVALUATED',
]
