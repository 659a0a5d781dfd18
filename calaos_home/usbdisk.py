"""Removable disks that the system can be installed on."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Any, Iterable, Iterator, Optional

_UNITS = ("KB", "MB", "GB", "TB")
HEADER_TEXT = "Removable disks"


def size_human(size) -> str:
    """Format a byte count with two decimals and a binary unit."""
    num = float(size)
    unit = "bytes"
    units = iter(_UNITS)
    while num >= 1024.0:
        next_unit = next(units, None)
        if next_unit is None:
            break
        unit = next_unit
        num /= 1024.0
    return f"{num:.2f} {unit}"


@dataclass
class UsbDisk:
    """One storage device and its mounted volumes."""

    name: str = ""
    volumes: list[str] = field(default_factory=list)
    size: int = 0
    human_size: str = ""
    sector_size: int = 0
    physical_device: str = ""
    is_removable: bool = False
    is_system: bool = False
    is_usb: bool = False
    is_sd: bool = False

    def copy(self) -> "UsbDisk":
        """An independent copy, with the size text computed afresh."""
        return replace(self, volumes=list(self.volumes), human_size=size_human(self.size))

    @classmethod
    def from_drive(cls, drive: Mapping) -> "UsbDisk":
        """Build a disk from a drive description mapping."""
        size = int(drive.get("size") or 0)
        return cls(
            name=str(drive.get("description") or ""),
            volumes=[str(m) for m in drive.get("mountpoints") or []],
            size=size,
            human_size=size_human(size),
            physical_device=str(drive.get("device") or ""),
            is_removable=bool(drive.get("isRemovable")),
            is_system=bool(drive.get("isSystem")),
            is_usb=bool(drive.get("isUSB")),
            is_sd=bool(drive.get("isCard")),
        )


def _as_disk(entry: Any) -> UsbDisk:
    if isinstance(entry, UsbDisk):
        return entry.copy()
    if isinstance(entry, Mapping):
        return UsbDisk.from_drive(entry)
    raise TypeError(f"cannot build a disk from {type(entry).__name__}")


class UsbDiskModel:
    """A table of the disks found on the machine."""

    def __init__(self) -> None:
        self._items: list[UsbDisk] = []

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[UsbDisk]:
        return iter(list(self._items))

    def load(self, disks: Iterable) -> None:
        """Replace the content; disks of size zero are left out."""
        loaded = [disk for disk in map(_as_disk, disks) if disk.size != 0]
        self._items = loaded

    def item_at(self, idx) -> Optional[UsbDisk]:
        if 0 <= idx < len(self._items):
            return self._items[idx]
        return None

    def clear(self) -> None:
        self._items.clear()

    def display_text(self, idx) -> Optional[str]:
        """The text shown for a row: its volumes, then its name."""
        disk = self.item_at(idx)
        if disk is None:
            return None
        return f"{', '.join(disk.volumes)} - {disk.name}"

    def header(self) -> str:
        return HEADER_TEXT