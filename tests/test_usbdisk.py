import pytest

from calaos_home.usbdisk import UsbDisk, UsbDiskModel, size_human


def _drive(device, size, mountpoints=(), description="Disk"):
    return {
        "device": device,
        "description": description,
        "size": size,
        "mountpoints": list(mountpoints),
        "isRemovable": True,
        "isSystem": False,
        "isUSB": True,
        "isCard": False,
    }


def test_size_human_bytes():
    assert size_human(0) == "0.00 bytes"


def test_size_human_kilobytes():
    assert size_human(1024) == "1.00 KB"


def test_size_human_stops_at_terabytes():
    assert size_human(1024 ** 6).endswith(" TB")


@pytest.mark.parametrize("size", [1, 1023, 1024, 10 ** 6, 10 ** 9, 10 ** 12])
def test_size_human_has_two_decimals(size):
    number, _unit = size_human(size).split(" ")
    assert len(number.split(".")[1]) == 2


def test_load_skips_empty_disks():
    model = UsbDiskModel()
    model.load([_drive("/dev/sda", 0), _drive("/dev/sdb", 2048)])
    assert len(model) == 1
    assert model.item_at(0).physical_device == "/dev/sdb"


def test_load_fills_fields():
    model = UsbDiskModel()
    model.load([_drive("/dev/sdc", 4096, ["/media/key"], "Key")])
    disk = model.item_at(0)
    assert disk.name == "Key"
    assert disk.volumes == ["/media/key"]
    assert disk.human_size == size_human(4096)
    assert disk.is_usb is True
    assert disk.is_sd is False


def test_item_at_out_of_range():
    model = UsbDiskModel()
    model.load([_drive("/dev/sdb", 10)])
    assert model.item_at(-1) is None
    assert model.item_at(1) is None


def test_display_text_joins_volumes():
    model = UsbDiskModel()
    model.load([_drive("/dev/sdb", 10, ["/a", "/b"], "Stick")])
    assert model.display_text(0) == "/a, /b - Stick"
    assert model.display_text(5) is None


def test_display_text_without_volumes():
    model = UsbDiskModel()
    model.load([_drive("/dev/sdb", 10, [], "Stick")])
    assert model.display_text(0) == " - Stick"


def test_header():
    assert UsbDiskModel().header() == "Removable disks"


def test_clear():
    model = UsbDiskModel()
    model.load([_drive("/dev/sdb", 10)])
    model.clear()
    assert len(model) == 0


def test_copy_is_independent_and_recomputes_size_text():
    disk = UsbDisk(name="d", volumes=["/x"], size=2048, human_size="stale")
    copied = disk.copy()
    copied.volumes.append("/y")
    assert disk.volumes == ["/x"]
    assert copied.human_size == size_human(2048)
    assert copied.name == disk.name


def test_load_rejects_unknown_entries():
    with pytest.raises(TypeError):
        UsbDiskModel().load([42])