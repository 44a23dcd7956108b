"""
Lightweight Event System for Extensibility

Provides a simple event emitter pattern for hooks and extensibility.
The Workout aggregate collects domain events while it mutates; the
application service emits them here only after the aggregate was persisted.
"""
import logging
from typing import Callable, Dict, List

logger = logging.getLogger(__name__)

# Event registry: event_name -> list of handlers
_event_handlers: Dict[str, List[Callable]] = {}


def subscribe(event_name: str, handler: Callable):
    """
    Subscribe a handler function to an event.

    Args:
        event_name: Name of the event (e.g., 'workout.day_completed')
        handler: Function to call when event fires

    Example:
        def on_week_progressed(workout_id: str, new_week: int, **kwargs):
            ...
        subscribe(EVENT_WEEK_PROGRESSED, on_week_progressed)
    """
    if event_name not in _event_handlers:
        _event_handlers[event_name] = []

    _event_handlers[event_name].append(handler)
    logger.debug(f"Subscribed handler to event: {event_name}")


def unsubscribe(event_name: str, handler: Callable):
    """Remove a previously subscribed handler (no-op when absent)."""
    handlers = _event_handlers.get(event_name, [])
    if handler in handlers:
        handlers.remove(handler)


def clear_handlers():
    """Drop every subscription. Used by tests."""
    _event_handlers.clear()


def emit(event_name: str, **kwargs):
    """
    Emit an event, calling all subscribed handlers.

    Handler failures are logged and do not propagate: the state change that
    produced the event has already been persisted.

    Args:
        event_name: Name of the event
        **kwargs: Event data passed to handlers
    """
    if event_name not in _event_handlers:
        return

    for handler in _event_handlers[event_name]:
        try:
            handler(**kwargs)
        except Exception as e:
            logger.error(f"Error in event handler for {event_name}: {e}", exc_info=True)


# Common event names
EVENT_WORKOUT_CREATED = 'workout.created'
EVENT_WORKOUT_STARTED = 'workout.started'
EVENT_DAY_COMPLETED = 'workout.day_completed'
EVENT_WEEK_PROGRESSED = 'workout.week_progressed'
EVENT_TRAINING_MAX_ADJUSTED = 'workout.training_max_adjusted'
EVENT_WORKOUT_COMPLETED = 'workout.completed'
