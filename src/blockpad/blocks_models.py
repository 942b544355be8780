"""Data models for the block document.

A document is an ordered list of Blocks. Each Block carries the fields
every block has (id, type, content, alignment, colours) and a payload
that is specific to its type. Plain text types carry no payload.

The payload is the only place type-specific fields live, so a block can
never hold a field left over from a type it used to have.
"""

from __future__ import annotations

import copy
import math
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, ClassVar, NamedTuple, Union

from dateutil import parser as date_parser

from .errors import ValidationError


class BlockType(str, Enum):
    """The 21 block types, with their wire values."""

    # Text blocks
    PARAGRAPH = "paragraph"
    HEADING_1 = "heading1"
    HEADING_2 = "heading2"
    HEADING_3 = "heading3"
    QUOTE = "quote"
    CODE = "code"

    # List blocks
    LIST = "list"
    NUMBERED_LIST = "numbered-list"
    TODO = "todo"
    TOGGLE = "toggle"

    # Special blocks
    IMAGE = "image"
    DIVIDER = "divider"
    CALLOUT = "callout"
    TABLE = "table"
    CHART_BAR = "chart-bar"
    CHART_PIE = "chart-pie"
    CALENDAR = "calendar"

    # Media / embeds
    FILE = "file"
    VIDEO = "video"
    AUDIO = "audio"
    BOOKMARK = "bookmark"


class Alignment(str, Enum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


# Switching among these carries `content` forward.
CONTENT_PRESERVING_TYPES = frozenset({
    BlockType.PARAGRAPH,
    BlockType.HEADING_1,
    BlockType.HEADING_2,
    BlockType.HEADING_3,
    BlockType.QUOTE,
    BlockType.CODE,
    BlockType.LIST,
    BlockType.NUMBERED_LIST,
    BlockType.TODO,
    BlockType.CALLOUT,
})

# Switching into these resets `content` and installs a fresh payload.
STRUCTURED_TYPES = frozenset({
    BlockType.TABLE,
    BlockType.CHART_BAR,
    BlockType.CHART_PIE,
    BlockType.CALENDAR,
    BlockType.TOGGLE,
})

CHART_TYPES = frozenset({BlockType.CHART_BAR, BlockType.CHART_PIE})

MEDIA_TYPES = frozenset({BlockType.FILE, BlockType.VIDEO, BlockType.AUDIO})

# Types that offer left/center/right alignment controls.
ALIGNABLE_TYPES = frozenset(BlockType) - frozenset({
    BlockType.IMAGE,
    BlockType.DIVIDER,
    BlockType.CALLOUT,
    BlockType.TABLE,
    BlockType.CHART_BAR,
    BlockType.CHART_PIE,
    BlockType.CALENDAR,
    BlockType.FILE,
    BlockType.VIDEO,
    BlockType.AUDIO,
    BlockType.BOOKMARK,
})

NON_DRAGGABLE_TYPES = frozenset({BlockType.DIVIDER})


# =============================================================================
# Catalogs
# =============================================================================


class BlockTypeInfo(NamedTuple):
    """A block type as listed in the block, type and slash menus."""

    type: BlockType
    label: str
    description: str


BLOCK_TYPE_CATALOG: tuple[BlockTypeInfo, ...] = (
    BlockTypeInfo(BlockType.PARAGRAPH, "Text", "Just start writing with plain text."),
    BlockTypeInfo(BlockType.HEADING_1, "Heading 1", "Big section heading."),
    BlockTypeInfo(BlockType.HEADING_2, "Heading 2", "Medium section heading."),
    BlockTypeInfo(BlockType.HEADING_3, "Heading 3", "Small section heading."),
    BlockTypeInfo(BlockType.LIST, "Bulleted list", "Create a simple bulleted list."),
    BlockTypeInfo(BlockType.NUMBERED_LIST, "Numbered list", "Create a list with numbering."),
    BlockTypeInfo(BlockType.TODO, "To-do list", "Track tasks with a to-do list."),
    BlockTypeInfo(BlockType.TOGGLE, "Toggle list", "Toggles can hide and show content inside."),
    BlockTypeInfo(BlockType.CODE, "Code", "Capture a code snippet."),
    BlockTypeInfo(BlockType.QUOTE, "Quote", "Capture a quote."),
    BlockTypeInfo(BlockType.DIVIDER, "Divider", "Visually divide blocks."),
    BlockTypeInfo(BlockType.CALLOUT, "Callout", "Make writing stand out."),
    BlockTypeInfo(BlockType.IMAGE, "Image", "Upload or embed with a link."),
    BlockTypeInfo(BlockType.TABLE, "Table", "Create a table with data."),
    BlockTypeInfo(BlockType.CHART_BAR, "Bar Chart", "Display data as bar chart."),
    BlockTypeInfo(BlockType.CHART_PIE, "Pie Chart", "Display data as pie chart."),
    BlockTypeInfo(BlockType.CALENDAR, "Calendar", "Add a calendar view."),
    BlockTypeInfo(BlockType.FILE, "File", "Upload and embed files."),
    BlockTypeInfo(BlockType.VIDEO, "Video", "Embed video content."),
    BlockTypeInfo(BlockType.AUDIO, "Audio", "Embed audio content."),
    BlockTypeInfo(BlockType.BOOKMARK, "Bookmark", "Save a link with preview."),
)


class PaletteColor(NamedTuple):
    name: str
    text: str
    background: str


COLOR_PALETTE: tuple[PaletteColor, ...] = (
    PaletteColor("Default", "#000000", "transparent"),
    PaletteColor("Gray", "#6B7280", "#F3F4F6"),
    PaletteColor("Brown", "#92400E", "#FEF3C7"),
    PaletteColor("Orange", "#EA580C", "#FED7AA"),
    PaletteColor("Yellow", "#D97706", "#FEF3C7"),
    PaletteColor("Green", "#16A34A", "#DCFCE7"),
    PaletteColor("Blue", "#2563EB", "#DBEAFE"),
    PaletteColor("Purple", "#9333EA", "#E9D5FF"),
    PaletteColor("Pink", "#DB2777", "#FCE7F3"),
    PaletteColor("Red", "#DC2626", "#FEE2E2"),
    PaletteColor("Teal", "#0D9488", "#CCFBF1"),
    PaletteColor("Indigo", "#4338CA", "#E0E7FF"),
)

EVENT_COLORS: tuple[str, ...] = (
    "blue", "green", "purple", "red", "yellow", "pink", "indigo", "orange",
)


# =============================================================================
# Payloads
# =============================================================================


@dataclass
class TodoPayload:
    checked: bool = False

    FIELDS: ClassVar[frozenset[str]] = frozenset({"checked"})

    def to_fields(self) -> dict[str, Any]:
        return {"checked": self.checked}

    @classmethod
    def from_fields(cls, data: dict[str, Any]) -> TodoPayload:
        return cls(checked=_opt_bool(data.get("checked"), "checked"))


@dataclass
class TogglePayload:
    """Toggle state. Nested content lives in toggle_content, not children."""

    collapsed: bool = False
    toggle_title: str = ""
    toggle_content: str = ""
    # Kept for forward compatibility; the editor never reads it.
    children: list[dict[str, Any]] | None = None

    FIELDS: ClassVar[frozenset[str]] = frozenset(
        {"collapsed", "toggleTitle", "toggleContent", "children"}
    )

    def to_fields(self) -> dict[str, Any]:
        fields: dict[str, Any] = {
            "collapsed": self.collapsed,
            "toggleTitle": self.toggle_title,
            "toggleContent": self.toggle_content,
        }
        if self.children is not None:
            fields["children"] = copy.deepcopy(self.children)
        return fields

    @classmethod
    def from_fields(cls, data: dict[str, Any]) -> TogglePayload:
        children = data.get("children")
        if children is not None and not isinstance(children, list):
            raise ValidationError("children must be a list", field="children")
        return cls(
            collapsed=_opt_bool(data.get("collapsed"), "collapsed"),
            toggle_title=_as_str(data.get("toggleTitle", ""), "toggleTitle"),
            toggle_content=_as_str(data.get("toggleContent", ""), "toggleContent"),
            children=copy.deepcopy(children),
        )


@dataclass
class TablePayload:
    headers: list[str]
    rows: list[list[str]]

    FIELDS: ClassVar[frozenset[str]] = frozenset({"tableData"})

    @classmethod
    def default(cls) -> TablePayload:
        return cls(headers=["Column 1", "Column 2"], rows=[["", ""], ["", ""]])

    def is_consistent(self) -> bool:
        """Every row has exactly one cell per header."""
        width = len(self.headers)
        return all(len(row) == width for row in self.rows)

    def to_fields(self) -> dict[str, Any]:
        return {
            "tableData": {
                "headers": list(self.headers),
                "rows": [list(row) for row in self.rows],
            }
        }

    @classmethod
    def from_fields(cls, data: dict[str, Any]) -> TablePayload:
        table = data.get("tableData")
        if table is None:
            return cls.default()
        if not isinstance(table, dict):
            raise ValidationError("tableData must be an object", field="tableData")
        headers = table.get("headers")
        rows = table.get("rows")
        if not isinstance(headers, list) or not isinstance(rows, list):
            raise ValidationError("tableData needs headers and rows lists", field="tableData")
        if not all(isinstance(row, list) for row in rows):
            raise ValidationError("tableData rows must be lists", field="tableData")
        payload = cls(
            headers=[_as_str(h, "tableData.headers") for h in headers],
            rows=[[_as_str(c, "tableData.rows") for c in row] for row in rows],
        )
        if not payload.is_consistent():
            raise ValidationError(
                "Every table row must have one cell per header",
                field="tableData",
            )
        return payload


@dataclass
class ChartPayload:
    labels: list[str]
    values: list[float]

    FIELDS: ClassVar[frozenset[str]] = frozenset({"chartData"})

    @classmethod
    def default(cls) -> ChartPayload:
        return cls(labels=["A", "B", "C"], values=[10, 20, 30])

    def is_consistent(self) -> bool:
        return len(self.labels) == len(self.values)

    def to_fields(self) -> dict[str, Any]:
        return {"chartData": {"labels": list(self.labels), "values": list(self.values)}}

    @classmethod
    def from_fields(cls, data: dict[str, Any]) -> ChartPayload:
        chart = data.get("chartData")
        if chart is None:
            return cls.default()
        if not isinstance(chart, dict):
            raise ValidationError("chartData must be an object", field="chartData")
        labels = chart.get("labels")
        values = chart.get("values")
        if not isinstance(labels, list) or not isinstance(values, list):
            raise ValidationError("chartData needs labels and values lists", field="chartData")
        payload = cls(
            labels=[_as_str(label, "chartData.labels") for label in labels],
            values=[as_number(v, "chartData.values") for v in values],
        )
        if not payload.is_consistent():
            raise ValidationError(
                "chartData labels and values must have the same length",
                field="chartData",
            )
        return payload


@dataclass
class CalendarPayload:
    selected_date: datetime

    FIELDS: ClassVar[frozenset[str]] = frozenset({"selectedDate"})

    def to_fields(self) -> dict[str, Any]:
        return {"selectedDate": self.selected_date.isoformat()}

    @classmethod
    def from_fields(cls, data: dict[str, Any], *, now: datetime) -> CalendarPayload:
        raw = data.get("selectedDate")
        if raw is None:
            return cls(selected_date=now)
        return cls(selected_date=parse_datetime(raw, "selectedDate"))


@dataclass
class MediaPayload:
    """Metadata of an uploaded file, video or audio clip."""

    file_name: str | None = None
    file_size: str | None = None
    file_type: str | None = None

    FIELDS: ClassVar[frozenset[str]] = frozenset({"fileName", "fileSize", "fileType"})

    def to_fields(self) -> dict[str, Any]:
        fields = {
            "fileName": self.file_name,
            "fileSize": self.file_size,
            "fileType": self.file_type,
        }
        return {k: v for k, v in fields.items() if v is not None}

    @classmethod
    def from_fields(cls, data: dict[str, Any]) -> MediaPayload:
        return cls(
            file_name=_opt_str(data.get("fileName"), "fileName"),
            file_size=_opt_str(data.get("fileSize"), "fileSize"),
            file_type=_opt_str(data.get("fileType"), "fileType"),
        )


Payload = Union[
    TodoPayload, TogglePayload, TablePayload, ChartPayload, CalendarPayload, MediaPayload
]

# Field names every block has, regardless of type.
COMMON_FIELDS = frozenset({"content", "alignment", "color", "backgroundColor"})

# Payload fields an update may not clear. A seed that omits them gets a default.
NON_NULLABLE_FIELDS = frozenset({"tableData", "chartData", "selectedDate", "checked", "collapsed"})


def payload_class_for(block_type: BlockType) -> type | None:
    """Return the payload class a block of this type carries, if any."""
    match block_type:
        case BlockType.TODO:
            return TodoPayload
        case BlockType.TOGGLE:
            return TogglePayload
        case BlockType.TABLE:
            return TablePayload
        case BlockType.CHART_BAR | BlockType.CHART_PIE:
            return ChartPayload
        case BlockType.CALENDAR:
            return CalendarPayload
        case BlockType.FILE | BlockType.VIDEO | BlockType.AUDIO:
            return MediaPayload
        case _:
            return None


def merge_payload(payload: Payload, fields: dict[str, Any]) -> Payload:
    """Return a copy of payload with the given wire fields replaced.

    Raises:
        ValidationError: If a value is malformed or breaks a length invariant.
    """
    for name in sorted(fields):
        if fields[name] is None and name in NON_NULLABLE_FIELDS:
            raise ValidationError(f"{name} cannot be null", field=name)
    current = payload.to_fields()
    current.update(fields)
    if isinstance(payload, CalendarPayload):
        return CalendarPayload.from_fields(current, now=payload.selected_date)
    return type(payload).from_fields(current)


# =============================================================================
# Block
# =============================================================================


@dataclass
class Block:
    """One addressable unit of document content."""

    id: str
    type: BlockType
    content: str = ""
    alignment: Alignment = Alignment.LEFT
    color: str | None = None
    background_color: str | None = None
    payload: Payload | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to the seed/snapshot shape."""
        result: dict[str, Any] = {
            "id": self.id,
            "type": self.type.value,
            "content": self.content,
            "alignment": self.alignment.value,
        }
        if self.color is not None:
            result["color"] = self.color
        if self.background_color is not None:
            result["backgroundColor"] = self.background_color
        if self.payload is not None:
            result.update(self.payload.to_fields())
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any], *, now: datetime) -> Block:
        """Create from the seed shape.

        Fields that do not belong to the block's type are dropped.

        Raises:
            ValidationError: On a missing id, unknown type or malformed payload.
        """
        if not isinstance(data, dict):
            raise ValidationError("Block must be an object")
        block_id = data.get("id")
        if not isinstance(block_id, str) or not block_id:
            raise ValidationError("Block id must be a non-empty string", field="id")
        block_type = parse_block_type(data.get("type"))
        payload_cls = payload_class_for(block_type)
        if payload_cls is None:
            payload = None
        elif payload_cls is CalendarPayload:
            payload = CalendarPayload.from_fields(data, now=now)
        else:
            payload = payload_cls.from_fields(data)
        return cls(
            id=block_id,
            type=block_type,
            content=_as_str(data.get("content", ""), "content"),
            alignment=parse_alignment(data.get("alignment", Alignment.LEFT.value)),
            color=_opt_str(data.get("color"), "color"),
            background_color=_opt_str(data.get("backgroundColor"), "backgroundColor"),
            payload=payload,
        )

    def copy(self) -> Block:
        return copy.deepcopy(self)

    def field_names(self) -> frozenset[str]:
        """Wire field names this block accepts in an update."""
        if self.payload is None:
            return COMMON_FIELDS
        return COMMON_FIELDS | self.payload.FIELDS

    @property
    def is_draggable(self) -> bool:
        return self.type not in NON_DRAGGABLE_TYPES


# =============================================================================
# Calendar events
# =============================================================================


@dataclass
class CalendarEvent:
    """An event in the document-wide calendar collection."""

    id: str
    title: str
    start_time: datetime
    end_time: datetime
    color: str = EVENT_COLORS[0]
    description: str | None = None
    location: str | None = None
    attendees: list[str] | None = None

    EDITABLE_FIELDS: ClassVar[frozenset[str]] = frozenset({
        "title", "description", "startTime", "endTime", "color", "location", "attendees",
    })

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "startTime": self.start_time.isoformat(),
            "endTime": self.end_time.isoformat(),
            "color": self.color,
        }
        if self.description is not None:
            result["description"] = self.description
        if self.location is not None:
            result["location"] = self.location
        if self.attendees is not None:
            result["attendees"] = list(self.attendees)
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CalendarEvent:
        if not isinstance(data, dict):
            raise ValidationError("Event must be an object")
        event_id = data.get("id")
        if not isinstance(event_id, str) or not event_id:
            raise ValidationError("Event id must be a non-empty string", field="id")
        if "startTime" not in data or "endTime" not in data:
            raise ValidationError("Event needs startTime and endTime", field="startTime")
        attendees = data.get("attendees")
        if attendees is not None:
            if not isinstance(attendees, list):
                raise ValidationError("attendees must be a list", field="attendees")
            attendees = [_as_str(a, "attendees") for a in attendees]
        return cls(
            id=event_id,
            title=_as_str(data.get("title", ""), "title"),
            start_time=parse_datetime(data["startTime"], "startTime"),
            end_time=parse_datetime(data["endTime"], "endTime"),
            color=_as_str(data.get("color", EVENT_COLORS[0]), "color"),
            description=_opt_str(data.get("description"), "description"),
            location=_opt_str(data.get("location"), "location"),
            attendees=attendees,
        )


# =============================================================================
# Parsing helpers
# =============================================================================


def parse_block_type(value: Any) -> BlockType:
    if isinstance(value, BlockType):
        return value
    try:
        return BlockType(value)
    except ValueError:
        raise ValidationError("Unknown block type", field="type", value=value) from None


def parse_alignment(value: Any) -> Alignment:
    if isinstance(value, Alignment):
        return value
    try:
        return Alignment(value)
    except ValueError:
        raise ValidationError("Unknown alignment", field="alignment", value=value) from None


def parse_datetime(value: Any, name: str) -> datetime:
    """Accept a datetime or an ISO-8601 string."""
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str) or not value:
        raise ValidationError(f"{name} must be an ISO-8601 timestamp", field=name, value=value)
    try:
        return date_parser.isoparse(value)
    except ValueError:
        raise ValidationError(f"{name} is not a valid timestamp", field=name, value=value) from None


def as_number(value: Any, name: str) -> float:
    """Validate a chart value: a finite int or float, never a bool."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"{name} must be a number", field=name, value=value)
    if not math.isfinite(value):
        raise ValidationError(f"{name} must be finite", field=name, value=value)
    return value


def _as_str(value: Any, name: str) -> str:
    if not isinstance(value, str):
        raise ValidationError(f"{name} must be a string", field=name, value=value)
    return value


def _as_bool(value: Any, name: str) -> bool:
    if not isinstance(value, bool):
        raise ValidationError(f"{name} must be true or false", field=name, value=value)
    return value


def _opt_bool(value: Any, name: str) -> bool:
    if value is None:
        return False
    return _as_bool(value, name)


def _opt_str(value: Any, name: str) -> str | None:
    if value is None:
        return None
    return _as_str(value, name)
