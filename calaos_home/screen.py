"""Screen power management: wake up, suspend and standby settings."""

from __future__ import annotations

import sys
import threading
from typing import Optional

WRITE_DELAY = 5.0
DEFAULT_DPMS_MINUTES = 1


def _to_int(text: str) -> int:
    try:
        return int(str(text).strip())
    except ValueError:
        return 0


class ScreenManager:
    """Controls display power through ``display`` and keeps the settings.

    ``display`` provides ``update_dpms(enable, seconds)`` and
    ``wake_up_screen(enable)``; ``config`` provides ``get_option`` and
    ``set_option``.
    """

    def __init__(self, config, display) -> None:
        self.config = config
        self.display = display
        self.write_delay = WRITE_DELAY
        self._timer: Optional[threading.Timer] = None

        self.display.update_dpms(False, 0)

        self.dpms_enabled = config.get_option("dpms_enable") == "true"
        self.dpms_time = _to_int(config.get_option("dpms_standby")) * 60 * 1000
        if self.dpms_time <= 0:
            self.dpms_time = DEFAULT_DPMS_MINUTES * 60 * 1000

    def wakeup_screen(self) -> None:
        if sys.platform.startswith("linux"):
            # the screen sometimes stays black; on-off-on avoids it
            self.display.wake_up_screen(True)
            self.display.wake_up_screen(False)
        self.display.wake_up_screen(True)
        self.display.update_dpms(False, 0)

    def suspend_screen(self) -> None:
        self.display.update_dpms(True, 0)
        self.display.wake_up_screen(False)

    def update_dpms_enabled(self, enabled) -> None:
        self.dpms_enabled = bool(enabled)
        self._schedule_write()

    def update_dpms_time(self, minutes) -> None:
        minutes = int(minutes)
        if minutes <= 0:
            minutes = DEFAULT_DPMS_MINUTES
        self.dpms_time = minutes * 60 * 1000
        self._schedule_write()

    def write_config(self) -> None:
        """Store the current settings in the configuration."""
        self.config.set_option("dpms_enable", "true" if self.dpms_enabled else "false")
        self.config.set_option("dpms_standby", f"{self.dpms_time / 1000.0 / 60.0:g}")

    def _schedule_write(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
        self._timer = threading.Timer(self.write_delay, self.write_config)
        self._timer.daemon = True
        self._timer.start()