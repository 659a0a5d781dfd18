"""Rooms and scenarios: lists of devices built from the server's home data."""

from __future__ import annotations

import enum
import logging
from collections.abc import Mapping
from typing import Any, Iterator, Optional

from .devices import (
    Connection,
    Direction,
    IOBase,
    IOCache,
    Signal,
    detect_old_gui_type,
)

log = logging.getLogger(__name__)

_VISIBLE_INPUT_TYPES = frozenset({"temp", "analog_in", "scenario", "string_in"})

_VISIBLE_OUTPUT_TYPES = frozenset(
    {
        "light",
        "light_dimmer",
        "light_rgb",
        "analog_out",
        "shutter",
        "shutter_smart",
        "var_bool",
        "var_int",
        "var_string",
        "string_out",
    }
)

_LOAD_ALL_OUTPUT_TYPES = frozenset(
    {"audio_output", "camera_output", "fav_all_lights", "audio_player", "camera"}
)


class LoadFlag(enum.Enum):
    NORMAL = 0  # only the usual devices
    ALL = 1  # everything, cameras and audio players included


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _as_list(value: Any) -> list:
    if isinstance(value, (list, tuple)):
        return list(value)
    return []


def _as_dict(value: Any) -> dict:
    if isinstance(value, Mapping):
        return dict(value)
    return {}


class ScenarioModel:
    """Scenario devices gathered from every room."""

    def __init__(self) -> None:
        self._items: list[IOBase] = []

    def append(self, io) -> None:
        self._items.append(io)

    def clear(self) -> None:
        self._items.clear()

    def item(self, idx) -> Optional[IOBase]:
        if 0 <= idx < len(self._items):
            return self._items[idx]
        return None

    def sorted_items(self) -> list[IOBase]:
        """Scenarios ordered by hit count, then by name."""
        return sorted(self._items, key=lambda io: (io.io_hits, io.io_name))

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[IOBase]:
        return iter(list(self._items))


class RoomModel:
    """The visible devices of one room."""

    def __init__(self, connection: Connection, cache: IOCache) -> None:
        self.connection = connection
        self.cache = cache
        self.name = ""
        self.type = ""
        self.hits = ""
        self.temperature_io: Optional[IOBase] = None
        self._items: list[IOBase] = []

        self.sig_light_on = Signal()
        self.sig_light_off = Signal()
        self.has_temp = Signal()
        self.temp_changed = Signal()

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[IOBase]:
        return iter(list(self._items))

    def item(self, idx) -> Optional[IOBase]:
        if 0 <= idx < len(self._items):
            return self._items[idx]
        return None

    def clear(self) -> None:
        self._items.clear()

    def load(self, room_data, scenario_model=None, load_flag=LoadFlag.NORMAL) -> None:
        """Fill the room from one entry of the home description."""
        load_flag = LoadFlag(load_flag)
        self.clear()
        self._drop_temperature_io(notify=False)

        self.type = _text(room_data.get("type"))
        self.name = _text(room_data.get("name"))
        self.hits = _text(room_data.get("hits"))

        items = room_data.get("items")
        if isinstance(items, Mapping) and "inputs" in items:
            self.connection.http_api_v2 = True
            inputs = _as_list(items.get("inputs"))
            outputs = _as_list(items.get("outputs"))
        else:
            self.connection.http_api_v2 = False
            inputs = _as_list(items)
            outputs = _as_list(items)

        for entry in inputs:
            self._load_input(_as_dict(entry), scenario_model)
        for entry in outputs:
            self._load_output(_as_dict(entry), load_flag)

    def _prepare(self, data: dict) -> dict:
        if _text(data.get("gui_type")) == "":
            data["gui_type"] = detect_old_gui_type(_text(data.get("type")))
        return data

    def _load_input(self, data: dict, scenario_model: Optional[ScenarioModel]) -> None:
        data = self._prepare(data)
        gui_type = _text(data.get("gui_type"))
        io_id = _text(data.get("id"))

        io = IOBase(self.connection, Direction.INPUT)
        io.load(data)
        io.room_name = self.name
        io.check_first_state()
        self.cache.add_input(io)

        if gui_type == "scenario" and scenario_model is not None:
            scenario_model.append(self.cache.search_input(io_id).clone())

        if _text(data.get("visible")) != "true":
            return

        if gui_type in _VISIBLE_INPUT_TYPES:
            self._items.append(self.cache.search_input(io_id).clone())

        if gui_type == "temp" and self.temperature_io is None:
            self.temperature_io = io
            self.temp_changed.emit(io.state_int())
            self.has_temp.emit(True)
            io.state_change.connect(self._temperature_changed)

    def _load_output(self, data: dict, load_flag: LoadFlag) -> None:
        data = self._prepare(data)
        gui_type = _text(data.get("gui_type"))
        io_id = _text(data.get("id"))

        io = IOBase(self.connection, Direction.OUTPUT)
        io.light_on.connect(self.sig_light_on.emit)
        io.light_off.connect(self.sig_light_off.emit)
        io.load(data)
        io.room_name = self.name
        io.check_first_state()
        self.cache.add_output(io)

        if load_flag is LoadFlag.ALL and gui_type in _LOAD_ALL_OUTPUT_TYPES:
            self._items.append(self.cache.search_output(io_id).clone())

        if _text(data.get("visible")) != "true":
            return

        if gui_type in _VISIBLE_OUTPUT_TYPES:
            self._items.append(self.cache.search_output(io_id).clone())

    def _temperature_changed(self) -> None:
        if self.temperature_io is not None:
            self.temp_changed.emit(self.temperature_io.state_int())

    def _drop_temperature_io(self, notify: bool = True) -> None:
        if self.temperature_io is None:
            return
        self.temperature_io.state_change.disconnect(self._temperature_changed)
        self.temperature_io = None
        if notify:
            self.has_temp.emit(False)