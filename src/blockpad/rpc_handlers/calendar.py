"""Calendar RPC handlers.

Events are shared by every calendar block in the document, so only
calendar/select_date takes a block id.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from blockpad.blocks_models import parse_datetime
from blockpad.calendar_bridge import TIME_SLOTS, event_from_form

from ._base import outcome_result, require_object, rpc_handler

if TYPE_CHECKING:
    from blockpad.editor import BlockEditor


@rpc_handler("calendar/events/list")
def handle_calendar_events_list(editor: BlockEditor) -> dict[str, Any]:
    return {"events": editor.calendar.snapshot(), "timeSlots": list(TIME_SLOTS)}


@rpc_handler("calendar/events/create")
def handle_calendar_events_create(
    editor: BlockEditor,
    *,
    fields: dict[str, Any] | None = None,
    form: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Create an event from raw fields, or from the event editor form."""
    if form is not None:
        fields = event_from_form(require_object(form, "form"), today=editor.store.now().date())
    outcome = editor.calendar.create_event(require_object(fields, "fields"))
    return outcome_result(outcome, event=outcome.value.to_dict() if outcome.value else None)


@rpc_handler("calendar/events/update")
def handle_calendar_events_update(
    editor: BlockEditor,
    *,
    event_id: str,
    fields: dict[str, Any],
) -> dict[str, Any]:
    outcome = editor.calendar.update_event(event_id, require_object(fields, "fields"))
    return outcome_result(outcome, event=outcome.value.to_dict() if outcome.value else None)


@rpc_handler("calendar/events/delete")
def handle_calendar_events_delete(editor: BlockEditor, *, event_id: str) -> dict[str, Any]:
    return outcome_result(editor.calendar.delete_event(event_id))


@rpc_handler("calendar/select_date")
def handle_calendar_select_date(editor: BlockEditor, *, block_id: str, date: str) -> dict[str, Any]:
    return outcome_result(editor.calendar.select_date(block_id, date))


@rpc_handler("calendar/slot")
def handle_calendar_slot(editor: BlockEditor, *, date: str, hour: int) -> dict[str, Any]:
    """Events in one hour slot of the day view, bottom of the stack first."""
    day = parse_datetime(date, "date")
    slot = editor.calendar.events_for_time_slot(day, hour)
    return {
        "events": [
            {**placed.event.to_dict(), "zIndex": placed.z_index}
            for placed in slot
        ]
    }
