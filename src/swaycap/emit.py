"""
Structured event emitter.

Default: JSON lines to stderr (captured by journald, pipeable).
Extensible: call add_handler() to attach extra transports.

Event format:
    {"event_type": "...", "timestamp": "...", "source": {"tool": "..."}, "data": {...}}

Events are always single-line JSON on stderr, distinguishable from log lines
(which are prefixed with the level name).
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

log = logging.getLogger(__name__)

EventHandler = Callable[[dict], None]

EVENT_CATALOG = [
    {
        "event_type": "config.resolved",
        "data_fields": ["config_path", "source"],
    },
    {
        "event_type": "operation.started",
        "data_fields": ["operation_type", "operation_id", "selection"],
    },
    {
        "event_type": "operation.completed",
        "data_fields": ["operation_type", "operation_id", "success", "target", "error_message"],
    },
    {
        "event_type": "selection.cancelled",
        "data_fields": ["operation_type"],
    },
    {
        "event_type": "recording.stopped",
        "data_fields": ["process_name"],
    },
    {
        "event_type": "error.handled",
        "data_fields": ["error_type", "message", "operation_type"],
    },
]

_handlers: List[EventHandler] = []
_source: str = "swaycap"
_stderr_enabled: bool = True


def configure(source: str, stderr: bool = True) -> None:
    """Set the source name for emitted events. Call once at startup.

    Args:
        source: Source identifier for events
        stderr: Whether to write events to stderr
    """
    global _source, _stderr_enabled
    _source = source
    _stderr_enabled = stderr


def add_handler(handler: EventHandler) -> None:
    """Register an additional event handler."""
    _handlers.append(handler)


def remove_handler(handler: EventHandler) -> None:
    if handler in _handlers:
        _handlers.remove(handler)


def emit(event_type: str, data: Dict[str, Any], source: Optional[str] = None) -> None:
    """Emit a structured event to stderr and every registered handler.

    Args:
        event_type: Event type (e.g., "operation.completed")
        data: Event payload
        source: Override source name for this event
    """
    event = {
        "event_type": event_type,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "source": {"tool": source or _source},
        "data": data,
    }

    if _stderr_enabled:
        print(json.dumps(event, default=str), file=sys.stderr, flush=True)

    for handler in _handlers:
        try:
            handler(event)
        except Exception as exc:
            log.debug("Event handler error: %s", exc)
