"""Local configuration storage, command line handling and server discovery."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Callable, Iterable, Optional
from xml.etree import ElementTree
from xml.sax.saxutils import quoteattr

log = logging.getLogger(__name__)

LOCAL_CONFIG = "local_config.xml"
ETC_CONFIG_PATH = "/etc/calaos"
PREFIX_CONFIG_PATH = "/usr/local/etc/calaos"
HOME_CONFIG_PATH = ".config/calaos"
HOME_CACHE_PATH = ".cache/calaos"
BCAST_UDP_PORT = 4545
BROADCAST_ADDRESS = "255.255.255.255"
CALAOS_NAMESPACE = "http://www.calaos.fr"
DISCOVER_MESSAGE = b"CALAOS_DISCOVER"
DISCOVER_REPLY = b"CALAOS_IP"

DEFAULT_OPTIONS = {
    "fw_version": "0",
    "show_cursor": "true",
    "dpms_enable": "false",
    "cn_user": "user",
    "cn_pass": "password",
    "longitude": "2.322235",
    "latitude": "48.864715",
}

WEBENGINE_ARGS = frozenset(
    {
        "--no-sandbox",
        "--remote-debugging-port",
        "--ppapi-flash-path",
        "--ppapi-flash-version",
        "--ppapi-widevine-path",
        "--register-pepper-plugins",
        "--touch-events",
        "--disable-gpu",
        "--disable-logging",
        "--enable-logging",
        "--single-process",
    }
)

_SKELETON = (
    '<?xml version="1.0" encoding="UTF-8" ?>\n'
    f'<calaos:config xmlns:calaos="{CALAOS_NAMESPACE}">\n'
    "</calaos:config>"
)


class ConfigError(Exception):
    """Raised when the configuration cannot be read or written."""


class LocalConfig:
    """Key/value options stored in ``local_config.xml``."""

    def __init__(self, config_dir=None, cache_dir=None, home=None):
        self.home = Path(home) if home is not None else Path.home()
        self._config_dir = Path(config_dir) if config_dir else None
        self._cache_dir = Path(cache_dir) if cache_dir else None
        self._config_base: Optional[Path] = self._config_dir
        self._cache_base: Optional[Path] = self._cache_dir

    def config_file(self, name) -> Path:
        """Return the path of ``name`` inside the configuration directory."""
        if self._config_base is None:
            candidates = (
                self.home / HOME_CONFIG_PATH,
                Path(ETC_CONFIG_PATH),
                Path(PREFIX_CONFIG_PATH),
            )
            found = next((d for d in candidates if d.is_dir()), None)
            if found is None:
                found = self.home / HOME_CONFIG_PATH
                found.mkdir(parents=True, exist_ok=True)
            self._config_base = found
        return self._config_base / name

    def cache_file(self, name) -> Path:
        """Return the path of ``name`` inside the cache directory."""
        if self._cache_base is None:
            self._cache_base = self.home / HOME_CACHE_PATH
            self._cache_base.mkdir(parents=True, exist_ok=True)
        return self._cache_base / name

    def initialize(self) -> bool:
        """Prepare directories and write a default config if none exists.

        Returns True when a default configuration was generated.
        """
        for directory in (self._config_dir, self._cache_dir):
            if directory is not None:
                directory.mkdir(parents=True, exist_ok=True)

        path = self.config_file(LOCAL_CONFIG)
        config_dir = self.config_file("")
        cache_dir = self.cache_file("")
        log.info("Using config path: %s", config_dir)
        log.info("Using cache path: %s", cache_dir)

        if not os.access(config_dir, os.W_OK):
            raise ConfigError("config path is not writable")
        if not os.access(cache_dir, os.W_OK):
            raise ConfigError("cache path is not writable")

        if path.exists():
            return False

        try:
            path.write_text(_SKELETON, encoding="utf-8")
        except OSError as exc:
            raise ConfigError("config path is not writable") from exc

        self._write(dict(DEFAULT_OPTIONS))
        log.warning(
            "no local_config.xml found, generating default config with "
            'username: "user" and password: "password"'
        )
        return True

    def all_options(self) -> dict[str, str]:
        """Read every option from the configuration file."""
        path = self.config_file(LOCAL_CONFIG)
        values: dict[str, str] = {}
        try:
            for _event, elem in ElementTree.iterparse(path, events=("start",)):
                if elem.tag.rpartition("}")[2] == "option":
                    values[elem.get("name", "")] = elem.get("value", "")
        except OSError as exc:
            raise ConfigError("config file is not readable") from exc
        except ElementTree.ParseError as exc:
            log.warning("Failed to parse config XML file: %s", exc)
        return values

    def get_option(self, key) -> str:
        """Return an option value, or an empty string when it is unset."""
        return self.all_options().get(key, "")

    def set_option(self, key, value) -> None:
        """Store an option and rewrite the configuration file."""
        values = self.all_options()
        values[key] = value
        self._write(values)

    def load_auth(self) -> tuple[str, str]:
        """Return the stored (user, password) pair."""
        return self.get_option("cn_user"), self.get_option("cn_pass")

    def save_auth(self, email, password) -> None:
        self.set_option("cn_user", email)
        self.set_option("cn_pass", password)

    def _write(self, values: dict[str, str]) -> None:
        lines = [
            '<?xml version="1.0"?>',
            f'<calaos:config xmlns:calaos="{CALAOS_NAMESPACE}">',
        ]
        lines.extend(
            f"    <calaos:option name={quoteattr(k)} value={quoteattr(v)}/>"
            for k, v in values.items()
        )
        lines.append("</calaos:config>")
        try:
            self.config_file(LOCAL_CONFIG).write_text(
                "\n".join(lines) + "\n", encoding="utf-8"
            )
        except OSError as exc:
            raise ConfigError("config file is not writable") from exc


def parse_discovery_reply(datagram) -> Optional[str]:
    """Return the server address announced in a discovery reply, if any."""
    data = bytes(datagram)
    if data[: len(DISCOVER_REPLY)] != DISCOVER_REPLY:
        return None
    return data[len(DISCOVER_REPLY):].decode("utf-8", "replace").strip()


class ServerDiscovery:
    """Finds a server on the LAN by UDP broadcast, or uses a forced host."""

    def __init__(self, config, on_detected: Optional[Callable[[str], None]] = None):
        self.config = config
        self.on_detected = on_detected
        self.host = ""
        self.active = True
        self._forced_notified = False

    def _notify(self) -> None:
        if self.on_detected is not None:
            self.on_detected(self.host)

    def discover(self, sock) -> bool:
        """Broadcast a discovery request; returns True if one was sent."""
        forced = self.config.get_option("calaos_server_host")
        if forced:
            if not self._forced_notified:
                self._forced_notified = True
                self.host = forced
                log.info("Force calaos_server on %s from config file", forced)
                self._notify()
            return False
        if not self.active:
            return False
        sock.sendto(DISCOVER_MESSAGE, (BROADCAST_ADDRESS, BCAST_UDP_PORT))
        return True

    def handle_datagram(self, datagram) -> Optional[str]:
        """Handle an incoming datagram; returns the detected host or None."""
        ip = parse_discovery_reply(datagram)
        if ip is None:
            return None
        if self.host != ip:
            self.host = ip
            log.info("Found calaos_server on %s", ip)
        self._notify()
        self.active = False
        return self.host


def filter_arguments(argv: Iterable[str]) -> list[str]:
    """Drop web engine switches that the application does not handle."""
    return [arg for arg in argv if arg not in WEBENGINE_ARGS]


def parse_arguments(argv=None) -> argparse.Namespace:
    """Parse command line options (program name excluded)."""
    if argv is None:
        argv = sys.argv[1:]
    parser = argparse.ArgumentParser(description="Calaos Home")
    parser.add_argument("--config", metavar="directory", help="Set config path to <directory>")
    parser.add_argument("--cache", metavar="directory", help="Set cache path to <directory>")
    return parser.parse_args(filter_arguments(argv))