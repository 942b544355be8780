"""Calendar event CRUD for calendar blocks.

All calendar blocks in a document share one event collection. Events
are keyed by their own ids, not by the block that shows them, and they
outlive the deletion of any calendar block. Only the selected date is
stored on the block itself.

The month/day grid is drawn by an external calendar view. This module
supplies that view's contract (see CalendarBridge.view_props) and the
slot grouping the day view uses.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Callable
from uuid import uuid4

from dateutil import parser as date_parser

from .block_store import BlockStore
from .blocks_models import EVENT_COLORS, Block, CalendarEvent, CalendarPayload, parse_datetime
from .errors import Outcome, ValidationError

logger = logging.getLogger(__name__)

TIME_SLOTS: tuple[str, ...] = tuple(f"{hour:02d}:00" for hour in range(24))

EventsListener = Callable[[list[dict[str, Any]]], None]


def new_event_id() -> str:
    return f"event-{uuid4().hex[:12]}"


@dataclass(frozen=True)
class SlotEvent:
    """An event placed in an hour slot; later events stack on top."""

    event: CalendarEvent
    z_index: int


def event_from_form(form: dict[str, Any], *, today: date) -> dict[str, Any]:
    """Build event fields from the event editor form.

    The form holds a `date` (YYYY-MM-DD), `startTime`/`endTime` (HH:MM)
    and a comma-separated `attendees` string.

    Raises:
        ValidationError: If the date or times cannot be parsed.
    """
    day = form.get("date") or today.isoformat()
    start = form.get("startTime") or "09:00"
    end = form.get("endTime") or "10:00"
    try:
        start_time = date_parser.isoparse(f"{day}T{start}")
        end_time = date_parser.isoparse(f"{day}T{end}")
    except ValueError:
        raise ValidationError("Invalid event date or time", field="date", value=day) from None

    attendees = [name.strip() for name in (form.get("attendees") or "").split(",")]
    return {
        "title": form.get("title") or "",
        "description": form.get("description") or "",
        "startTime": start_time,
        "endTime": end_time,
        "color": form.get("color") or EVENT_COLORS[0],
        "location": form.get("location") or "",
        "attendees": [name for name in attendees if name],
    }


class CalendarBridge:
    """Owns the document-wide event collection."""

    def __init__(
        self,
        store: BlockStore,
        *,
        events: list[CalendarEvent | dict[str, Any]] | None = None,
        id_factory: Callable[[], str] | None = None,
        on_change: EventsListener | None = None,
    ) -> None:
        self._store = store
        self._id_factory = id_factory or new_event_id
        self._listeners: list[EventsListener] = [on_change] if on_change else []
        self._events: list[CalendarEvent] = []
        for item in events or []:
            event = item if isinstance(item, CalendarEvent) else CalendarEvent.from_dict(item)
            if self._find(event.id) is not None:
                raise ValidationError("Duplicate event id", field="id", value=event.id)
            self._events.append(event)

    @property
    def events(self) -> list[CalendarEvent]:
        """All events in creation order."""
        return list(self._events)

    def snapshot(self) -> list[dict[str, Any]]:
        return [event.to_dict() for event in self._events]

    def subscribe(self, listener: EventsListener) -> None:
        self._listeners.append(listener)

    def get_event(self, event_id: str) -> CalendarEvent | None:
        index = self._find(event_id)
        return None if index is None else self._events[index]

    # -------------------------------------------------------------------------
    # CRUD
    # -------------------------------------------------------------------------

    def create_event(self, fields: dict[str, Any]) -> Outcome[CalendarEvent]:
        """Add an event; any id in fields is replaced by a fresh one."""
        data = {**fields, "id": self._next_id()}
        try:
            event = CalendarEvent.from_dict(data)
        except ValidationError as exc:
            return Outcome.rejected(exc.message)
        problem = _timing_problem(event)
        if problem:
            return Outcome.rejected(problem, block_id=event.id)

        self._events.append(event)
        logger.debug("Created event %s at %s", event.id, event.start_time.isoformat())
        self._notify()
        return Outcome.applied(event, block_id=event.id)

    def update_event(self, event_id: str, fields: dict[str, Any]) -> Outcome[CalendarEvent]:
        index = self._find(event_id)
        if index is None:
            return Outcome.not_found(event_id)
        unknown = sorted(set(fields) - CalendarEvent.EDITABLE_FIELDS)
        if unknown:
            return Outcome.rejected(f"Unknown event fields: {', '.join(unknown)}", block_id=event_id)

        current = self._events[index]
        try:
            updated = CalendarEvent.from_dict({**current.to_dict(), **fields, "id": event_id})
        except ValidationError as exc:
            return Outcome.rejected(exc.message, block_id=event_id)
        problem = _timing_problem(updated)
        if problem:
            return Outcome.rejected(problem, block_id=event_id)

        if updated != current:
            self._events[index] = updated
            self._notify()
        return Outcome.applied(updated, block_id=event_id)

    def delete_event(self, event_id: str) -> Outcome[None]:
        index = self._find(event_id)
        if index is None:
            return Outcome.not_found(event_id)
        del self._events[index]
        logger.debug("Deleted event %s", event_id)
        self._notify()
        return Outcome.applied(block_id=event_id)

    def select_date(self, block_id: str, selected: datetime | str) -> Outcome[None]:
        """Write selectedDate on one calendar block."""
        try:
            when = parse_datetime(selected, "selectedDate")
        except ValidationError as exc:
            return Outcome.rejected(exc.message, block_id=block_id)

        def mutator(block: Block) -> Outcome[None] | None:
            if not isinstance(block.payload, CalendarPayload):
                return Outcome.rejected(f"{block.type.value} is not a calendar", block_id=block_id)
            block.payload.selected_date = when
            return None

        return self._store.mutate(block_id, mutator)

    # -------------------------------------------------------------------------
    # Views
    # -------------------------------------------------------------------------

    def events_for_date(self, day: date | datetime) -> list[CalendarEvent]:
        """Events starting on day, in creation order."""
        target = day.date() if isinstance(day, datetime) else day
        return [event for event in self._events if event.start_time.date() == target]

    def events_for_time_slot(self, day: date | datetime, hour: int) -> list[SlotEvent]:
        """Events starting in the given hour of day.

        Stacking follows creation order: the earliest event gets the
        lowest z_index.
        """
        slot = [event for event in self.events_for_date(day) if event.start_time.hour == hour]
        return [SlotEvent(event=event, z_index=position + 1) for position, event in enumerate(slot)]

    def view_props(self, block_id: str) -> dict[str, Any] | None:
        """The props handed to the calendar view for one calendar block.

        Returns None if block_id is not a calendar block.
        """
        block = self._store.get(block_id)
        if block is None or not isinstance(block.payload, CalendarPayload):
            return None
        return {
            "selectedDate": block.payload.selected_date,
            "events": self.events,
            "onDateSelect": lambda selected: self.select_date(block_id, selected),
            "onEventCreate": self.create_event,
            "onEventUpdate": self.update_event,
            "onEventDelete": self.delete_event,
        }

    def _find(self, event_id: str) -> int | None:
        for index, event in enumerate(self._events):
            if event.id == event_id:
                return index
        return None

    def _next_id(self) -> str:
        event_id = self._id_factory()
        while self._find(event_id) is not None:
            event_id = self._id_factory()
        return event_id

    def _notify(self) -> None:
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            listener(snapshot)


def _timing_problem(event: CalendarEvent) -> str | None:
    try:
        if event.end_time < event.start_time:
            return "An event cannot end before it starts"
    except TypeError:
        return "startTime and endTime must both carry a timezone, or neither"
    return None
