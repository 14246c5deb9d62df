"""
Structured Logging for slac_view
================================

Bounded Context: Observability

JSON-structured logging with a typed event taxonomy.

Public API
----------
    LogEvent: Typed event names (enum)
    VIEWPORT_EVENTS, ERROR_EVENTS: Event categories for filtering
    StructuredLogger: JSON logger implementation
    create_logger: Factory function

Example:
    >>> from slac_view.logging import create_logger, LogEvent
    >>> logger = create_logger("renderer")
    >>> logger.info(
    ...     event=LogEvent.VIEWPORT_FITTED,
    ...     message="Viewport fitted",
    ...     metadata={'scale': 30.0}
    ... )
"""

from .events import ERROR_EVENTS, VIEWPORT_EVENTS, LogEvent
from .structured import StructuredLogger, create_logger

__all__ = [
    'ERROR_EVENTS',
    'LogEvent',
    'StructuredLogger',
    'VIEWPORT_EVENTS',
    'create_logger',
]
