# calaos_home

Client-side models for a Calaos home automation installation, for use from
a Python program that talks to a Calaos server.

Python 3.10 or later is required; the only runtime dependency is `requests`.

## What is in the package

- `calaos_home.config`: `LocalConfig`, an XML option store
  (`local_config.xml`) with defaults written on first use and stored
  credentials (`load_auth`, `save_auth`); `ServerDiscovery` and
  `parse_discovery_reply` for finding a server on the LAN by UDP broadcast
  on port 4545; `parse_arguments` and `filter_arguments` for the `--config`
  and `--cache` command line options.
- `calaos_home.devices`: `IOBase` (one input or output: lights, dimmers,
  RGB lights, shutters, temperatures, scenarios, ...), `IOType`,
  `Direction`, `IOCache`, a small `Signal` observer list, and `Connection`,
  which records outgoing commands and JSON messages and carries the change
  events that devices listen to.
- `calaos_home.rooms`: `RoomModel` and `ScenarioModel`, built from one room
  of the server's home description; `LoadFlag` chooses whether cameras,
  audio players and similar items are included.
- `calaos_home.room_filter`: `RoomFilterModel`, a sorted view of a room that
  splits its devices into a left and a right column (`FilterType.LEFT`,
  `RIGHT`), or shows everything or only scenarios.
- `calaos_home.home`: `HomeModel` (all rooms), `RoomItem` (one room with its
  lights-on count and temperature) and `LightOnModel` (lights currently on).
- `calaos_home.favorites`: `FavoritesModel`, a user-ordered list of devices
  that can be saved to and loaded from a list of dicts, and `HomeFavModel`.
- `calaos_home.eventlog`: `EventLogModel` for paged loading of server events
  and `EventLogItem` for their presentation (title, date, icon, action text).
- `calaos_home.weather`: `WeatherModel`, current conditions and a five-day
  forecast from OpenWeatherMap, and `WeatherData`.
- `calaos_home.network`: `NetworkInfo`, `prefix_to_netmask`, `netmask_to_cidr`.
- `calaos_home.installer`: `OSInstaller` and `parse_log_line` for installer
  output.
- `calaos_home.usbdisk`: `UsbDisk`, `UsbDiskModel` and `size_human`.
- `calaos_home.screen`: `ScreenManager`, display standby settings.
- `calaos_home.users`: `UserInfoModel`, notification e-mail recipients;
  `send_email` starts the external `calaos_mail` program for each address.
- `calaos_home.netrequest`: `NetworkRequest`, an HTTP request returning a
  `RequestResult` with JSON, raw data, or data written to a file.

## Examples

```python
from calaos_home.network import netmask_to_cidr, prefix_to_netmask

netmask_to_cidr("255.255.255.0")   # 24
prefix_to_netmask(24)              # "255.255.255.0"
```

```python
from calaos_home.usbdisk import size_human

size_human(512)    # "512.00 bytes"
size_human(1536)   # "1.50 KB"
```

```python
from calaos_home.weather import convert_temp

convert_temp(293.15)   # "20"
```

Installer output lines carry terminal colour codes; `parse_log_line` strips
control characters and returns a `LogLine` with the cleaned text and a colour
name (`"blue"`, `"red"`, `"yellow"`, `"green"` or `"nocolor"`).

Older servers report hardware class names instead of display types;
`detect_old_gui_type` maps them, returning `""` for unknown names:

```python
from calaos_home.devices import detect_old_gui_type

detect_old_gui_type("WODali")     # "light_dimmer"
detect_old_gui_type("OWTemp")     # "temp"
```

## Local configuration

Without explicit directories, `LocalConfig` uses the first existing one of
`~/.config/calaos`, `/etc/calaos` and `/usr/local/etc/calaos`, and creates
`~/.config/calaos` if none exists; the cache goes to `~/.cache/calaos`.
`initialize()` writes a default `local_config.xml` when none is present and
returns whether it did. Options are plain strings; an unset option reads as
`""`.

```python
from calaos_home.config import LocalConfig

config = LocalConfig("/tmp/calaos-config", "/tmp/calaos-cache", None)
config.initialize()
config.set_option("lang", "en")
config.get_option("lang")   # "en"
```

Errors reading or writing the configuration raise `ConfigError`.

## What the package does not do

- There is no command to run and no user interface; the package holds
  models and helpers only.
- `Connection` does not open a network link to a server. It records the
  commands and messages it is given and hands them to optional callbacks;
  incoming changes are fed in by calling its signals' `emit`.
- `ScreenManager` does not drive a display itself: it calls
  `update_dpms` and `wake_up_screen` on the display object it is given.
- `UsbDiskModel` does not scan the machine for disks, and `OSInstaller`
  does not run an installation: they take disk descriptions and installer
  output from the caller.

## Running the tests

Install the `test` extra and run `pytest` from the project directory.