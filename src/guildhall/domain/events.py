"""Append-only campaign event log."""

from __future__ import annotations

from .enums import EventType
from .models import EventID, GameEvent, GameState


def record_event(
    state: GameState,
    event_type: EventType,
    message: str,
    related_entity_id: int | None = None,
) -> GameEvent:
    """Stamp an event with the current calendar position and append it."""

    event = GameEvent(
        id=EventID(state.next_event_id),
        event_type=event_type,
        message=message,
        timestamp=state.timestamp,
        related_entity_id=related_entity_id,
    )
    state.next_event_id += 1
    state.events.append(event)
    return event


def recent_events(state: GameState, limit: int = 20) -> list[GameEvent]:
    """Most recent events, newest first."""

    if limit <= 0:
        return []
    return list(reversed(state.events[-limit:]))
