import pytest

from calaos_home.devices import Connection, Direction, IOBase, IOCache, IOType
from calaos_home.favorites import (
    SPECIAL_ROOM_HITS,
    FavoritesModel,
    FavoriteType,
    HomeFavModel,
)


@pytest.fixture
def cache():
    conn = Connection()
    c = IOCache()
    for io_id, direction, gui in (("in1", Direction.INPUT, "temp"),
                                  ("out1", Direction.OUTPUT, "light"),
                                  ("out2", Direction.OUTPUT, "shutter")):
        io = IOBase(conn, direction)
        io.load({"id": io_id, "name": io_id.title(), "gui_type": gui})
        if direction is Direction.INPUT:
            c.add_input(io)
        else:
            c.add_output(io)
    return c


def test_add_favorite(cache):
    model = FavoritesModel(cache)
    assert model.add_favorite("out1", FavoriteType.IO) is True
    assert model.add_favorite("in1", 0) is True
    assert [model.item(i).io_id for i in range(len(model))] == ["out1", "in1"]
    assert model.item(0) is not cache.search_output("out1")


def test_add_favorite_failures(cache):
    model = FavoritesModel(cache)
    assert model.add_favorite("missing", FavoriteType.IO) is False
    assert model.add_favorite("out1", 7) is False
    assert len(model) == 0


def test_save_load_round_trip(cache):
    model = FavoritesModel(cache)
    model.add_favorite("out2", FavoriteType.IO)
    model.add_favorite("in1", FavoriteType.IO)
    saved = model.save()
    other = FavoritesModel(cache)
    assert other.is_loaded is False
    other.load(saved)
    assert other.is_loaded is True
    assert other.save() == saved
    assert saved[0]["id"] == "out2"


def test_load_skips_unknown(cache):
    model = FavoritesModel(cache)
    model.load([{"id": "gone", "type": 0}, {"id": "out1", "type": "0"}])
    assert [fav.io_id for fav in model] == ["out1"]


def test_delete_favorite(cache):
    model = FavoritesModel(cache)
    model.load([{"id": "out1", "type": 0}, {"id": "out2", "type": 0}])
    model.delete_favorite(-1)
    model.delete_favorite(2)
    assert len(model) == 2
    model.delete_favorite(0)
    assert [fav.io_id for fav in model] == ["out2"]


def test_move_favorite(cache):
    model = FavoritesModel(cache)
    model.load([{"id": i, "type": 0} for i in ("in1", "out1", "out2")])
    model.move_favorite(0, 2)
    assert [fav.io_id for fav in model] == ["out1", "out2", "in1"]
    with pytest.raises(IndexError):
        model.move_favorite(5, 0)


def _home():
    return {"home": [{"name": "Living", "type": "lounge", "hits": "4", "items": {
        "inputs": [],
        "outputs": [
            {"id": "cam1", "name": "Cam", "gui_type": "camera", "visible": "false"},
            {"id": "o1", "name": "Lamp", "gui_type": "light", "visible": "true",
             "state": "false"},
        ]}}]}


@pytest.mark.parametrize("v2", [True, False])
def test_home_fav_special_room(v2):
    conn = Connection(http_api_v2=v2)
    model = HomeFavModel(conn, IOCache())
    model.load(_home())
    special = model.item(0)
    assert special.room_name == "Special"
    assert special.room_type == "fav"
    assert special.room_hits == SPECIAL_ROOM_HITS
    items = list(model.room_model(0))
    assert [io.io_id for io in items] == ["fav_all_lights"]
    assert items[0].io_type is IOType.FAV_ALL_LIGHTS


def test_home_fav_rooms_load_everything():
    cache = IOCache()
    model = HomeFavModel(Connection(), cache)
    model.load(_home())
    assert len(model) == 2
    assert model.item(1).room_name == "Living"
    assert [io.io_id for io in model.room_model(1)] == ["cam1", "o1"]
    assert cache.search_output("fav_all_lights") is not None
    assert model.room_model(9) is None


def test_home_fav_without_home():
    model = HomeFavModel(Connection(), IOCache())
    model.load({"other": []})
    assert len(model) == 0