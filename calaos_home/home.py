"""The home: its rooms, light counters and the list of lights currently on."""

from __future__ import annotations

import logging
from typing import Any, Iterator, Optional

from .devices import Connection, IOBase, IOCache, Signal
from .rooms import LoadFlag, RoomModel, ScenarioModel

log = logging.getLogger(__name__)


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _to_int(value: Any) -> int:
    try:
        return int(_text(value).strip())
    except ValueError:
        return 0


class RoomItem:
    """One room of the home with its light and temperature summary."""

    def __init__(self, connection: Connection, cache: IOCache) -> None:
        self.connection = connection
        self.cache = cache
        self.room_type = ""
        self.room_hits = 0
        self.room_name = ""
        self.lights_on_count = 0
        self.has_temperature = False
        self.current_temperature = 0.0

        self.sig_light_on = Signal()
        self.sig_light_off = Signal()

        self.room = RoomModel(connection, cache)
        self.room.sig_light_on.connect(self._light_on)
        self.room.sig_light_off.connect(self._light_off)
        self.room.has_temp.connect(self._has_temperature)
        self.room.temp_changed.connect(self._temperature)

    def load(self, room_data, scenario_model=None, load_flag=LoadFlag.NORMAL) -> None:
        self.room.load(room_data, scenario_model, load_flag)

    def _light_on(self, io: IOBase) -> None:
        self.lights_on_count += 1
        self.sig_light_on.emit(io)

    def _light_off(self, io: IOBase) -> None:
        self.lights_on_count = max(self.lights_on_count - 1, 0)
        self.sig_light_off.emit(io)

    def _has_temperature(self, has: bool) -> None:
        self.has_temperature = bool(has)

    def _temperature(self, value: float) -> None:
        self.current_temperature = value

    def __repr__(self) -> str:
        return f"RoomItem(name={self.room_name!r}, type={self.room_type!r})"


class LightOnModel:
    """Lights that are currently on, each listed once."""

    def __init__(self) -> None:
        self._items: list[IOBase] = []
        self._on_cache: dict[str, IOBase] = {}
        self.light_count_changed = Signal()

    @property
    def lights_count(self) -> int:
        return len(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[IOBase]:
        return iter(list(self._items))

    def item(self, idx) -> Optional[IOBase]:
        if 0 <= idx < len(self._items):
            return self._items[idx]
        return None

    def add_light(self, io) -> None:
        if io.io_id in self._on_cache:
            return
        self._items.append(io.clone())
        self._on_cache[io.io_id] = io
        self.light_count_changed.emit()

    def remove_light(self, io) -> None:
        for idx, current in enumerate(self._items):
            if current.io_id == io.io_id:
                del self._items[idx]
                self._on_cache.pop(io.io_id, None)
                self.light_count_changed.emit()
                break

    def clear(self) -> None:
        self._items.clear()
        self._on_cache.clear()

    def snapshot(self) -> "LightOnModel":
        """A detached copy with lights grouped by room name."""
        grouped: dict[str, list[IOBase]] = {}
        for io in self._items:
            copy = io.clone()
            grouped.setdefault(copy.room_name, []).append(copy)

        model = LightOnModel()
        for lights in grouped.values():
            for io in lights:
                model.add_light(io)
        return model


class HomeModel:
    """All rooms of the home, loaded from the server's description."""

    def __init__(
        self,
        connection: Connection,
        cache: IOCache,
        scenario_model: ScenarioModel,
        light_on_model: LightOnModel,
    ) -> None:
        self.connection = connection
        self.cache = cache
        self.scenario_model = scenario_model
        self.light_on_model = light_on_model
        self.lights_on_count = 0
        self._rooms: list[RoomItem] = []

    def __len__(self) -> int:
        return len(self._rooms)

    def __iter__(self) -> Iterator[RoomItem]:
        return iter(list(self._rooms))

    def item(self, idx) -> Optional[RoomItem]:
        if 0 <= idx < len(self._rooms):
            return self._rooms[idx]
        return None

    def load(self, home_data) -> None:
        self._rooms.clear()
        self.scenario_model.clear()
        self.cache.clear()
        self.light_on_model.clear()
        self.lights_on_count = 0

        if "home" not in home_data:
            log.debug("no home entry")
            return

        for entry in home_data.get("home") or []:
            data = dict(entry)
            room = RoomItem(self.connection, self.cache)
            room.sig_light_on.connect(self._light_on)
            room.sig_light_off.connect(self._light_off)

            room.room_name = _text(data.get("name"))
            room.room_type = _text(data.get("type"))
            room.room_hits = _to_int(data.get("hits"))
            room.load(data, self.scenario_model, LoadFlag.NORMAL)
            self._rooms.append(room)

    def room_model(self, idx) -> Optional[RoomModel]:
        room = self.item(idx)
        return room.room if room is not None else None

    def _light_on(self, io: IOBase) -> None:
        self.lights_on_count += 1
        self.light_on_model.add_light(io)

    def _light_off(self, io: IOBase) -> None:
        self.lights_on_count = max(self.lights_on_count - 1, 0)
        self.light_on_model.remove_light(io)