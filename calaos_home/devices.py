"""Home devices (inputs and outputs), their state and the shared device cache."""

from __future__ import annotations

import enum
import logging
from typing import Any, Callable, Optional

log = logging.getLogger(__name__)


class Signal:
    """A minimal observer list: connected callables are invoked on emit."""

    def __init__(self) -> None:
        self._slots: list[Callable[..., Any]] = []

    def connect(self, slot) -> None:
        if slot not in self._slots:
            self._slots.append(slot)

    def disconnect(self, slot) -> bool:
        """Remove a slot; returns False when it was not connected."""
        try:
            self._slots.remove(slot)
        except ValueError:
            return False
        return True

    def emit(self, *args) -> None:
        for slot in list(self._slots):
            slot(*args)

    def __len__(self) -> int:
        return len(self._slots)


class IOType(enum.Enum):
    UNKNOWN = "unknown"
    LIGHT = "light"
    LIGHT_DIMMER = "light_dimmer"
    LIGHT_RGB = "light_rgb"
    PUMP = "pump"
    OUTLET = "outlet"
    BOILER = "boiler"
    HEATER = "heater"
    SHUTTER = "shutter"
    SHUTTER_SMART = "shutter_smart"
    TEMP = "temp"
    ANALOG_IN = "analog_in"
    ANALOG_OUT = "analog_out"
    STRING_IN = "string_in"
    STRING_OUT = "string_out"
    VAR_BOOL = "var_bool"
    VAR_INT = "var_int"
    VAR_STRING = "var_string"
    SCENARIO = "scenario"
    SWITCH = "switch"
    SWITCH_LONG = "switch_long"
    SWITCH3 = "switch3"
    TIME = "time"
    TIME_RANGE = "time_range"
    TIMER = "timer"
    AUDIO = "audio"
    CAMERA = "camera"
    AV_RECEIVER = "avreceiver"
    FAV_ALL_LIGHTS = "fav_all_lights"


class Direction(enum.Enum):
    INPUT = "input"
    OUTPUT = "output"


_GUI_TYPE_ALIASES = {
    "audio_player": IOType.AUDIO,
    "audio_output": IOType.AUDIO,
    "camera_output": IOType.CAMERA,
}

_LIGHT_STYLES = {
    "pump": IOType.PUMP,
    "outlet": IOType.OUTLET,
    "boiler": IOType.BOILER,
    "heater": IOType.HEATER,
}


def io_type_from_gui_type(gui_type, io_style="") -> IOType:
    """Map a server ``gui_type`` (and its style) to an :class:`IOType`."""
    if gui_type == "light" and io_style in _LIGHT_STYLES:
        return _LIGHT_STYLES[io_style]
    if gui_type in _GUI_TYPE_ALIASES:
        return _GUI_TYPE_ALIASES[gui_type]
    try:
        return IOType(gui_type)
    except ValueError:
        return IOType.UNKNOWN


_OLD_GUI_TYPES = {
    "InputTime": "time",
    "InPlageHoraire": "time_range",
    "TimeRange": "time_range",
    "GpioInputSwitch": "switch",
    "GpioInputSwitchLongPress": "switch_long",
    "GpioInputSwitchTriple": "switch3",
    "OWTemp": "temp",
    "WIAnalog": "analog_in",
    "WagoInputAnalog": "analog_in",
    "WIDigitalBP": "switch",
    "WIDigital": "switch",
    "WagoInputSwitch": "switch",
    "WIDigitalLong": "switch_long",
    "WagoInputSwitchLongPress": "switch_long",
    "WIDigitalTriple": "switch3",
    "WagoInputSwitchTriple": "switch3",
    "WITemp": "temp",
    "WagoInputTemp": "temp",
    "WebInputSwitch": "switch",
    "WebInputAnalog": "analog_in",
    "WebInputTemp": "temp",
    "WebInputString": "string_in",
    "ZibaseTemp": "temp",
    "ZibaseAnalogIn": "analog_in",
    "ZibaseDigitalIn": "switch",
    "MySensorsInputAnalog": "analog_in",
    "MySensorsInputString": "string_in",
    "MySensorsInputSwitch": "switch",
    "MySensorsInputSwitchLongPress": "switch_long",
    "MySensorsInputSwitchTriple": "switch3",
    "MySensorsInputTemp": "temp",
    "PingInputSwitch": "switch",
    "KNXInputSwitch": "switch",
    "KNXInputAnalog": "analog_in",
    "KNXInputSwitchLongPress": "switch_long",
    "KNXInputSwitchTriple": "switch3",
    "KNXInputTemp": "temp",
    "OutputFake": "light",
    "GpioOutputSwitch": "light",
    "GpioOutputShutter": "shutter",
    "GpioOutputShutterSmart": "shutter_smart",
    "WOAnalog": "analog_out",
    "WagoOutputAnalog": "analog_out",
    "WODali": "light_dimmer",
    "WagoOutputDimmer": "light_dimmer",
    "WODaliRVB": "light_rgb",
    "WagoOutputDimmerRGB": "light_rgb",
    "WODigital": "light",
    "WagoOutputLight": "light",
    "WOVolet": "shutter",
    "WagoOutputShutter": "shutter",
    "WOVoletSmart": "shutter_smart",
    "WagoOutputShutterSmart": "shutter_smart",
    "X10Output": "light",
    "WebOutputString": "string_out",
    "WebOutputLight": "light",
    "WebOutputLightRGB": "light_rgb",
    "ZibaseDigitalOut": "light",
    "MySensorsOutputAnalog": "analog_out",
    "MySensorsOutputDimmer": "light_dimmer",
    "MySensorsOutputLight": "light",
    "MySensorsOutputLightRGB": "light_rgb",
    "MySensorsOutputShutter": "shutter",
    "MySensorsOutputShutterSmart": "shutter_smart",
    "MySensorsOutputString": "string_out",
    "OLAOutputLightDimmer": "light_dimmer",
    "OLAOutputLightRGB": "light_rgb",
    "WOLOutputBool": "var_bool",
    "KNXOutputLight": "light",
    "KNXOutputAnalog": "analog_out",
    "KNXOutputLightDimmer": "light_dimmer",
    "KNXOutputLightRGB": "light_rgb",
    "KNXOutputShutter": "shutter",
    "KNXOutputShutterSmart": "shutter_smart",
    "HueOutputLightRGB": "light_rgb",
    "InputTimer": "timer",
    "Scenario": "scenario",
    "InternalInt": "var_int",
    "InternalBool": "var_bool",
    "InternalString": "var_string",
    "AVReceiver": "avreceiver",
    "slim": "audio",
    "Squeezebox": "audio",
    "Axis": "camera",
    "Gadspot": "camera",
    "Planet": "camera",
    "StandardMjpeg": "camera",
    "standard_mjpeg": "camera",
}


def detect_old_gui_type(type_name) -> str:
    """Return the ``gui_type`` for an old protocol IO class name, or ''."""
    return _OLD_GUI_TYPES.get(type_name, "")


def _format_number(value: float) -> str:
    number = float(value)
    if number.is_integer() and abs(number) < 1e15:
        return str(int(number))
    return repr(number)


def _to_str(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return _format_number(value)
    return str(value)


def _to_float(value: Any) -> float:
    if value is None:
        return 0.0
    if isinstance(value, (bool, int, float)):
        return float(value)
    try:
        return float(str(value).strip())
    except ValueError:
        return 0.0


def _to_int(value: Any) -> int:
    if value is None:
        return 0
    if isinstance(value, (bool, int)):
        return int(value)
    if isinstance(value, float):
        return int(round(value))
    try:
        return int(str(value).strip())
    except ValueError:
        return 0


def _parse_color(text: str) -> tuple[int, int, int]:
    digits = text.strip()
    if digits.startswith("#"):
        digits = digits[1:]
        try:
            if len(digits) == 3:
                return tuple(int(c * 2, 16) for c in digits)  # type: ignore[return-value]
            if len(digits) == 6:
                return (int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16))
        except ValueError:
            pass
    return (0, 0, 0)


class Connection:
    """Link to the server: outgoing commands and incoming change events."""

    def __init__(
        self,
        http_api_v2: bool = False,
        on_command: Optional[Callable[[str, str, str, str], None]] = None,
        on_json: Optional[Callable[[str, dict], None]] = None,
        picture_url_template: str = "{uid}",
    ) -> None:
        self.http_api_v2 = http_api_v2
        self.picture_url_template = picture_url_template
        self.event_input_change = Signal()
        self.event_output_change = Signal()
        self.log_event_loaded = Signal()
        self.commands: list[tuple[str, str, str, str]] = []
        self.messages: list[tuple[str, dict]] = []
        self._on_command = on_command
        self._on_json = on_json

    def send_command(self, io_id, value, io_type, action) -> None:
        command = (io_id, value, io_type, action)
        self.commands.append(command)
        if self._on_command is not None:
            self._on_command(*command)

    def send_json(self, msg, data) -> None:
        self.messages.append((msg, dict(data)))
        if self._on_json is not None:
            self._on_json(msg, dict(data))

    def notif_picture_url(self, uid) -> str:
        return self.picture_url_template.format(uid=uid)


class IOBase:
    """One input or output of the installation."""

    def __init__(self, connection: Connection, direction: Direction) -> None:
        self.connection = connection
        self.direction = Direction(direction)
        self._data: dict[str, Any] = {}

        self.io_type = IOType.UNKNOWN
        self.io_hits = 0
        self.io_name = ""
        self.io_id = ""
        self.io_style = ""
        self.unit = ""
        self.rw = False
        self.room_name = ""
        self.has_warning = False
        self.state_shutter_bool = False
        self.state_shutter_txt = ""
        self.state_shutter_txt_action = ""
        self.rgb_color: tuple[int, int, int] = (0, 0, 0)

        self.state_change = Signal()
        self.light_on = Signal()
        self.light_off = Signal()

    @property
    def data(self) -> dict[str, Any]:
        """A copy of the raw data the IO was loaded from."""
        return dict(self._data)

    def load(self, data) -> None:
        self._data = dict(data)
        d = self._data
        gui_type = _to_str(d.get("gui_type"))

        self.io_name = _to_str(d.get("name"))
        self.io_hits = _to_int(d.get("hits"))
        self.io_style = _to_str(d.get("io_style"))
        self.io_type = io_type_from_gui_type(gui_type, self.io_style)
        self.io_id = _to_str(d.get("id"))
        self.unit = _to_str(d.get("unit"))
        self.rw = _to_str(d.get("rw")) == "true"
        self.has_warning = _to_str(d.get("value_warning")) == "true"

        if gui_type == "light_rgb":
            if self.connection.http_api_v2:
                self.rgb_color = (self.state_red(), self.state_green(), self.state_blue())
            else:
                self.rgb_color = _parse_color(self.state_string())

        # analog outputs share the editable widget of var_int
        if self.io_type is IOType.ANALOG_OUT:
            self.rw = True

        if self.direction is Direction.INPUT:
            self.connection.event_input_change.connect(self.input_changed)
        else:
            self.connection.event_output_change.connect(self.output_changed)

    def _detach(self) -> None:
        self.connection.event_input_change.disconnect(self.input_changed)
        self.connection.event_output_change.disconnect(self.output_changed)

    def clone(self) -> "IOBase":
        io = IOBase(self.connection, self.direction)
        io.load(self._data)
        io.room_name = self.room_name
        io.state_shutter_bool = self.state_shutter_bool
        io.state_shutter_txt = self.state_shutter_txt
        io.state_shutter_txt_action = self.state_shutter_txt_action
        return io

    def check_first_state(self) -> None:
        """Announce a light that is already on when loaded."""
        if self.io_type is IOType.LIGHT:
            if self.state_bool():
                self.light_on.emit(self)
        elif self.io_type in (IOType.LIGHT_DIMMER, IOType.LIGHT_RGB):
            if self.state_int() > 0:
                self.light_on.emit(self)

    def _send(self, value: str, io_type: Optional[str] = None) -> None:
        if io_type is None:
            io_type = self.direction.value
        self.connection.send_command(_to_str(self._data.get("id")), value, io_type, "set_state")

    def send_true(self) -> None:
        self._send("true")

    def send_false(self) -> None:
        self._send("false")

    def send_inc(self) -> None:
        self._send("inc")

    def send_dec(self) -> None:
        self._send("dec")

    def send_down(self) -> None:
        self._send("down")

    def send_up(self) -> None:
        self._send("up")

    def send_stop(self) -> None:
        self._send("stop")

    def send_string_value(self, value) -> None:
        self._send(str(value))

    def send_int_value(self, value) -> None:
        self._send(f"set {_format_number(value)}")

    def send_color(self, red, green, blue) -> None:
        red, green, blue = int(red), int(green), int(blue)
        if self.connection.http_api_v2:
            value = (red << 16) + (green << 8) + blue
            self._send(f"set {value}")
        else:
            self._send(f"set #{red:02x}{green:02x}{blue:02x}", "")

    def state_bool(self) -> bool:
        return _to_str(self._data.get("state")) == "true"

    def state_int(self) -> float:
        return _to_float(self._data.get("state"))

    def state_string(self) -> str:
        return _to_str(self._data.get("state"))

    def state_red(self) -> int:
        if self.connection.http_api_v2:
            return _to_int(self._data.get("state")) >> 16
        return _parse_color(self.state_string())[0]

    def state_green(self) -> int:
        if self.connection.http_api_v2:
            return (_to_int(self._data.get("state")) >> 8) & 0xFF
        return _parse_color(self.state_string())[1]

    def state_blue(self) -> int:
        if self.connection.http_api_v2:
            return _to_int(self._data.get("state")) & 0xFF
        return _parse_color(self.state_string())[2]

    def shutter_position(self) -> int:
        """Return the closing percentage and refresh the shutter texts."""
        parts = self.state_string().split(" ")
        status = parts[0]
        percent = _to_int(parts[1]) if len(parts) > 1 else 0

        self.state_shutter_bool = percent < 100

        if percent == 0:
            self.state_shutter_txt = "State: Opened."
        elif 0 < percent < 50:
            self.state_shutter_txt = f"State: {percent}% Opened."
        elif 50 <= percent < 100:
            self.state_shutter_txt = f"State: {percent}% Closed."
        if percent == 100:
            self.state_shutter_txt = "State: Closed."

        if status in ("stop", ""):
            self.state_shutter_txt_action = "Action: stopped."
        elif status == "down":
            self.state_shutter_txt_action = "Action: Closing..."
        elif status == "up":
            self.state_shutter_txt_action = "Action: Opening..."

        return percent

    def input_changed(self, io_id, key, value) -> None:
        if io_id != _to_str(self._data.get("id")):
            return
        if key == "state":
            self._data["state"] = value
            self.state_change.emit()
        elif key == "name":
            self._data["name"] = value
            self.io_name = value
        elif key == "value_warning":
            self._data["value_warning"] = value
            self.has_warning = value == "true"

    def output_changed(self, io_id, key, value) -> None:
        if io_id != _to_str(self._data.get("id")):
            return
        if key == "state":
            v2 = self.connection.http_api_v2
            if self.io_type is IOType.LIGHT:
                if self.state_bool() != (value == "true"):
                    self._data["state"] = value
                    if value == "true":
                        self.light_on.emit(self)
                    else:
                        self.light_off.emit(self)
            elif self.io_type in (IOType.LIGHT_DIMMER, IOType.LIGHT_RGB):
                if v2 or self.io_type is IOType.LIGHT_DIMMER:
                    now_on = _to_float(value) > 0
                    if (self.state_int() > 0) != now_on:
                        self._data["state"] = value
                        if now_on:
                            self.light_on.emit(self)
                        else:
                            self.light_off.emit(self)

            self._data["state"] = value

            if self.io_type is IOType.LIGHT_RGB:
                if v2:
                    self.rgb_color = (self.state_red(), self.state_green(), self.state_blue())
                else:
                    self.rgb_color = _parse_color(self.state_string())
                    if any(self.rgb_color):
                        self.light_on.emit(self)
                    else:
                        self.light_off.emit(self)

            self.state_change.emit()
        elif key == "name":
            self._data["name"] = value
            self.io_name = value

    def __repr__(self) -> str:
        return f"IOBase(id={self.io_id!r}, name={self.io_name!r}, type={self.io_type.name})"


class IOCache:
    """Every loaded input and output, indexed by id."""

    def __init__(self) -> None:
        self._inputs: dict[str, IOBase] = {}
        self._outputs: dict[str, IOBase] = {}

    def search_input(self, io_id) -> Optional[IOBase]:
        return self._inputs.get(io_id)

    def search_output(self, io_id) -> Optional[IOBase]:
        return self._outputs.get(io_id)

    def add_input(self, io) -> None:
        if io is not None:
            self._inputs[io.io_id] = io

    def add_output(self, io) -> None:
        if io is not None:
            self._outputs[io.io_id] = io

    def del_input(self, io) -> None:
        if io is not None:
            self._inputs.pop(io.io_id, None)

    def del_output(self, io) -> None:
        if io is not None:
            self._outputs.pop(io.io_id, None)

    def clear(self) -> None:
        for io in (*self._inputs.values(), *self._outputs.values()):
            io._detach()
        self._inputs.clear()
        self._outputs.clear()