"""Split a room's devices between a left and a right column, or keep scenarios."""

from __future__ import annotations

import enum
from typing import Optional

from .devices import IOBase, IOType
from .rooms import RoomModel

_SHUTTERS = (IOType.SHUTTER, IOType.SHUTTER_SMART)
_LIGHTS = (IOType.LIGHT, IOType.LIGHT_DIMMER, IOType.LIGHT_RGB)
_TEMPS = (IOType.TEMP, IOType.ANALOG_IN, IOType.VAR_INT)


class FilterType(enum.Enum):
    ALL = "all"
    LEFT = "left"
    RIGHT = "right"
    SCENARIO = "scenario"


class RoomFilterModel:
    """A filtered, sorted view of a :class:`RoomModel`.

    Shutters go left, temperatures right, and the rest is balanced between
    the two columns.
    """

    def __init__(self, source=None, filter_type=FilterType.ALL, scenario_visible=True):
        self._source: Optional[RoomModel] = source
        self._filter_type = FilterType(filter_type)
        self._scenario_visible = bool(scenario_visible)
        self.left_cache: dict[str, IOBase] = {}
        self.right_cache: dict[str, IOBase] = {}
        self._shutters: list[IOBase] = []
        self._lights: list[IOBase] = []
        self._temps: list[IOBase] = []
        self._other: list[IOBase] = []
        self.reset_cache()

    @property
    def source(self) -> Optional[RoomModel]:
        return self._source

    @source.setter
    def source(self, value) -> None:
        self._source = value
        self.reset_cache()

    @property
    def filter_type(self) -> FilterType:
        return self._filter_type

    @filter_type.setter
    def filter_type(self, value) -> None:
        self._filter_type = FilterType(value)
        self.reset_cache()

    @property
    def scenario_visible(self) -> bool:
        return self._scenario_visible

    @scenario_visible.setter
    def scenario_visible(self, value) -> None:
        self._scenario_visible = bool(value)
        self.reset_cache()

    def reset_cache(self) -> None:
        """Recompute which devices belong to the left and right columns."""
        self.left_cache.clear()
        self.right_cache.clear()
        self._shutters.clear()
        self._lights.clear()
        self._temps.clear()
        self._other.clear()

        if self._source is None:
            return

        total = 0
        for io in self._source:
            if io.io_type in _SHUTTERS:
                self._shutters.append(io)
            elif io.io_type in _LIGHTS:
                self._lights.append(io)
            elif io.io_type in _TEMPS:
                self._temps.append(io)
            else:
                self._other.append(io)

            if io.io_type is IOType.SHUTTER_SMART:
                total += 3
            elif io.io_type in (IOType.LIGHT_DIMMER, IOType.LIGHT_RGB):
                total += 2
            elif self._scenario_visible or io.io_type is not IOType.SCENARIO:
                total += 1

        left = right = 0
        for io in self._shutters:
            self.left_cache[io.io_id] = io
            left += 1 if io.io_type is IOType.SHUTTER else 3

        for io in self._temps:
            self.right_cache[io.io_id] = io
            right += 1

        half = total // 2

        for io in self._lights:
            weight = 1 if io.io_type is IOType.LIGHT else 2
            if left < half:
                self.left_cache[io.io_id] = io
                left += weight
            else:
                self.right_cache[io.io_id] = io
                right += weight

        for io in self._other:
            if left <= half:
                self.left_cache[io.io_id] = io
                left += 1
            else:
                self.right_cache[io.io_id] = io
                right += 1

    def accepts(self, io) -> bool:
        """Whether ``io`` is shown with the current filter."""
        if self._filter_type is FilterType.ALL:
            return True
        if io is None:
            return False
        hidden_scenario = not self._scenario_visible and io.io_type is IOType.SCENARIO
        if self._filter_type is FilterType.LEFT and io.io_id in self.left_cache:
            return not hidden_scenario
        if self._filter_type is FilterType.RIGHT and io.io_id in self.right_cache:
            return not hidden_scenario
        if self._filter_type is FilterType.SCENARIO and io.io_type is IOType.SCENARIO:
            return True
        return False

    def _rank(self, io: IOBase) -> int:
        if io.io_type is IOType.SCENARIO:
            return 0
        if any(io is x for x in self._shutters):
            return 1
        if any(io is x for x in self._temps):
            return 2
        if any(io is x for x in self._lights):
            return 3
        return 4

    def sort_key(self, io) -> tuple:
        """Scenarios, shutters, temperatures, lights, others; then name and id."""
        return (self._rank(io), io.io_name, io.io_id)

    def rows(self) -> list[IOBase]:
        if self._source is None:
            return []
        return sorted((io for io in self._source if self.accepts(io)), key=self.sort_key)

    def item(self, idx) -> Optional[IOBase]:
        rows = self.rows()
        if 0 <= idx < len(rows):
            return rows[idx]
        return None

    def index_to_source(self, idx) -> int:
        """Row in the source model of the view's row ``idx`` (-1 if none)."""
        io = self.item(idx)
        if io is None or self._source is None:
            return -1
        return next(i for i, candidate in enumerate(self._source) if candidate is io)

    def __len__(self) -> int:
        return len(self.rows())