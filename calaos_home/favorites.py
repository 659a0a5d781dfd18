"""User favourites and the room list used to pick new ones."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Any, Iterator, Optional

from .devices import Connection, IOBase, IOCache
from .home import RoomItem
from .rooms import LoadFlag, RoomModel

log = logging.getLogger(__name__)

SPECIAL_ROOM_HITS = 9999999


class FavoriteType(enum.IntEnum):
    IO = 0


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _to_int(value: Any) -> int:
    if isinstance(value, (bool, int)):
        return int(value)
    try:
        return int(_text(value).strip())
    except ValueError:
        return 0


@dataclass
class Favorite:
    io_id: str
    fav_type: int
    io: IOBase

    @property
    def name(self) -> str:
        return self.io.io_name


class FavoritesModel:
    """An ordered list of favourite devices."""

    def __init__(self, cache: IOCache) -> None:
        self.cache = cache
        self._items: list[Favorite] = []
        self._loaded = False

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Favorite]:
        return iter(list(self._items))

    def item(self, idx) -> Optional[IOBase]:
        if 0 <= idx < len(self._items):
            return self._items[idx].io
        return None

    def load(self, favorites) -> None:
        self._loaded = False
        self._items.clear()
        for entry in favorites:
            io_id = _text(entry.get("id"))
            if not self.add_favorite(io_id, _to_int(entry.get("type"))):
                log.debug("Failed to add IO: %s", io_id)
        self._loaded = True

    def save(self) -> list[dict]:
        saved = []
        for fav in self._items:
            if fav.fav_type == FavoriteType.IO:
                saved.append({"id": fav.io_id, "type": int(fav.fav_type)})
            else:
                log.debug("unsupported favourite type %s", fav.fav_type)
        return saved

    def add_favorite(self, io_id, fav_type) -> bool:
        """Add a device by id; returns False when it cannot be found."""
        if fav_type != FavoriteType.IO:
            log.debug("unsupported favourite type %s", fav_type)
            return False
        io = self.cache.search_input(io_id) or self.cache.search_output(io_id)
        if io is None:
            return False
        self._items.append(Favorite(io_id, int(fav_type), io.clone()))
        return True

    def delete_favorite(self, idx) -> None:
        if 0 <= idx < len(self._items):
            del self._items[idx]

    def move_favorite(self, idx, new_idx) -> None:
        if not 0 <= idx < len(self._items):
            raise IndexError(f"no favourite at index {idx}")
        fav = self._items.pop(idx)
        self._items.insert(new_idx, fav)


class HomeFavModel:
    """Rooms with every device, plus a special room of non-device actions."""

    def __init__(self, connection: Connection, cache: IOCache) -> None:
        self.connection = connection
        self.cache = cache
        self._rooms: list[RoomItem] = []

    def __len__(self) -> int:
        return len(self._rooms)

    def __iter__(self) -> Iterator[RoomItem]:
        return iter(list(self._rooms))

    def item(self, idx) -> Optional[RoomItem]:
        if 0 <= idx < len(self._rooms):
            return self._rooms[idx]
        return None

    def _add_room(self, data: dict) -> None:
        room = RoomItem(self.connection, self.cache)
        room.room_name = _text(data.get("name"))
        room.room_type = _text(data.get("type"))
        room.room_hits = _to_int(_text(data.get("hits")))
        room.load(data, None, LoadFlag.ALL)
        self._rooms.append(room)

    def load(self, home_data) -> None:
        self._rooms.clear()

        if "home" not in home_data:
            log.debug("no home entry")
            return

        specials = [
            {
                "name": "All lights On",
                "type": "fav_all_lights",
                "gui_type": "fav_all_lights",
                "id": "fav_all_lights",
            }
        ]
        if self.connection.http_api_v2:
            items: Any = {"inputs": [], "outputs": specials}
        else:
            items = specials
        self._add_room(
            {"items": items, "name": "Special", "type": "fav", "hits": SPECIAL_ROOM_HITS}
        )

        for entry in home_data.get("home") or []:
            self._add_room(dict(entry))

    def room_model(self, idx) -> Optional[RoomModel]:
        room = self.item(idx)
        return room.room if room is not None else None