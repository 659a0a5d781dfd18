"""Server event log: paged list of past events and single event lookup."""

from __future__ import annotations

import enum
import logging
from datetime import date, datetime, timezone
from typing import Any, Iterator, Optional

from .devices import Connection, IOCache, IOType

log = logging.getLogger(__name__)

DEFAULT_PER_PAGE = 50
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_SWITCH_STYLES = {
    IOType.LIGHT: "light",
    IOType.PUMP: "pump",
    IOType.OUTLET: "outlet",
    IOType.BOILER: "boiler",
    IOType.HEATER: "heater",
}


class EventType(enum.Enum):
    UNKNOWN = "unknown"
    IO_CHANGED = "io_changed"
    PUSH = "push"


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _to_float(value: Any) -> float:
    if isinstance(value, (bool, int, float)):
        return float(value)
    try:
        return float(_text(value).strip())
    except ValueError:
        return 0.0


class EventLogItem:
    """One entry of the event log, as shown to the user."""

    def __init__(self, connection: Connection, cache: IOCache) -> None:
        self.connection = connection
        self.cache = cache
        self.ev_title = ""
        self.ev_date = ""
        self.ev_time = ""
        self.ev_type = EventType.UNKNOWN
        self.ev_icon_source = ""
        self.ev_room_name = ""
        self.ev_notif_text = ""
        self.ev_has_picture = False
        self.ev_picture_url = ""
        self.ev_action_text = ""
        self.loading = False

    def load(self, data) -> None:
        """Fill the entry from one event record sent by the server."""
        event_type = _text(data.get("event_type"))
        if event_type == "3":
            self.ev_type = EventType.IO_CHANGED
            self.ev_title = "Appliance change"
        elif event_type == "22":
            self.ev_type = EventType.PUSH
            self.ev_title = "Push Notification"
            self.ev_icon_source = "icon_notif"
            raw = data.get("event_raw") or {}
            self.ev_notif_text = _text(raw.get("message"))
            pic_uid = _text(raw.get("pic_uid"))
            if pic_uid == "":
                self.ev_picture_url = ""
                self.ev_has_picture = False
            else:
                self.ev_picture_url = self.connection.notif_picture_url(pic_uid)
                self.ev_has_picture = True
        else:
            self.ev_type = EventType.UNKNOWN
            self.ev_title = "Unknown event!"

        self._load_date(_text(data.get("created_at")))

        io_id = _text(data.get("io_id"))
        io = self.cache.search_input(io_id) or self.cache.search_output(io_id)
        if io is None:
            return

        self.ev_title = io.io_name
        self.ev_room_name = io.room_name
        state = data.get("io_state")

        if io.io_type in _SWITCH_STYLES:
            style = _SWITCH_STYLES[io.io_type]
            if _text(state) == "true":
                self.ev_icon_source = f"icon_{style}_on"
                self.ev_action_text = "On"
            else:
                self.ev_icon_source = f"icon_{style}_off"
                self.ev_action_text = "Off"
        elif io.io_type in (IOType.LIGHT_DIMMER, IOType.LIGHT_RGB):
            if _to_float(state) > 0:
                self.ev_icon_source = "icon_light_on"
                self.ev_action_text = "On"
            else:
                self.ev_icon_source = "icon_light_off"
                self.ev_action_text = "Off"
        elif io.io_type is IOType.TEMP:
            self.ev_icon_source = "icon_temp"
            self.ev_action_text = "Temp changed"
        elif io.io_type in (IOType.SHUTTER, IOType.SHUTTER_SMART):
            if _text(state) == "true":
                self.ev_icon_source = "icon_shutter_on"
                self.ev_action_text = "Open"
            else:
                self.ev_icon_source = "icon_shutter_off"
                self.ev_action_text = "Closed"
        elif io.io_type is IOType.SCENARIO:
            self.ev_icon_source = "icon_scenario"
            self.ev_action_text = "Started"
        else:
            self.ev_icon_source = ""
            self.ev_action_text = ""

    def _load_date(self, created_at: str) -> None:
        try:
            utc = datetime.strptime(created_at, DATE_FORMAT).replace(tzinfo=timezone.utc)
        except ValueError:
            self.ev_date = ""
            self.ev_time = ""
            return
        local = utc.astimezone()
        if local.date() == date.today():
            self.ev_date = "Today"
        else:
            self.ev_date = local.strftime("%x")
        self.ev_time = local.strftime("%H:%M:%S")

    def request(self, uuid) -> None:
        """Ask the server for a single event; it is loaded when it arrives."""
        self.loading = True
        self.connection.send_json("eventlog", {"uuid": uuid})
        self.connection.log_event_loaded.connect(self.event_loaded)

    def event_loaded(self, data) -> None:
        if "events" in data:
            return
        self.connection.log_event_loaded.disconnect(self.event_loaded)
        self.loading = False
        self.load(data)


class EventLogModel:
    """Pages of events received from the server."""

    def __init__(self, connection: Connection, cache: IOCache) -> None:
        self.connection = connection
        self.cache = cache
        self.loading = False
        self._need_clear = False
        self._items: list[EventLogItem] = []
        connection.log_event_loaded.connect(self.event_loaded)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[EventLogItem]:
        return iter(list(self._items))

    def item(self, idx) -> Optional[EventLogItem]:
        if 0 <= idx < len(self._items):
            return self._items[idx]
        return None

    def load(self, page=0, per_page=DEFAULT_PER_PAGE) -> None:
        if self.loading:
            return
        self.loading = True
        self.connection.send_json("eventlog", {"page": page, "per_page": per_page})

    def load_more(self) -> None:
        log.debug("Load more... rows: %d", len(self._items))
        if self.loading:
            return
        self.load(len(self._items) // DEFAULT_PER_PAGE, DEFAULT_PER_PAGE)

    def refresh(self) -> None:
        if self.loading:
            return
        self._need_clear = True
        self.load()

    def load_event(self, uuid) -> EventLogItem:
        item = EventLogItem(self.connection, self.cache)
        item.request(uuid)
        return item

    def event_loaded(self, data) -> None:
        if "events" not in data:
            return
        if self._need_clear:
            self._items.clear()
        self._need_clear = False

        for event in data.get("events") or []:
            item = EventLogItem(self.connection, self.cache)
            item.load(dict(event))
            self._items.append(item)

        self.loading = False