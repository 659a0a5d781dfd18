"""Network interface description and netmask helpers."""

from __future__ import annotations

import ipaddress
from dataclasses import dataclass


def prefix_to_netmask(prefix) -> str:
    """Return the dotted IPv4 netmask for a prefix length."""
    prefix = int(prefix)
    if not 0 <= prefix <= 32:
        raise ValueError(f"invalid prefix length: {prefix}")
    mask = (0xFFFFFFFF << (32 - prefix)) & 0xFFFFFFFF
    return str(ipaddress.IPv4Address(mask))


def netmask_to_cidr(netmask) -> int:
    """Count the leading one bits of a dotted netmask (0 if unparsable)."""
    try:
        mask = int(ipaddress.IPv4Address(netmask))
    except ValueError:
        mask = 0
    cidr = 0
    while cidr < 32 and mask & (1 << (31 - cidr)):
        cidr += 1
    return cidr


def _split_list(text: str) -> list[str]:
    return [part.strip() for part in text.split(",") if part]


@dataclass
class NetworkInfo:
    """Configuration and state of one network interface."""

    netinterface: str = ""
    ipv4: str = ""
    netmask: str = ""
    ipv6: str = ""
    mac: str = ""
    gateway: str = ""
    netstate: str = ""
    is_dhcp: bool = False
    dns_servers: str = ""
    search_domains: str = ""
    is_loopback: bool = False

    def set_ipv4_cidr(self, cidr) -> None:
        """Set address and netmask from ``address/prefix`` notation."""
        parts = cidr.split("/")
        if len(parts) != 2:
            raise ValueError(f"invalid CIDR format: {cidr}")
        address, prefix_text = parts
        try:
            prefix = int(prefix_text)
        except ValueError as exc:
            raise ValueError(f"invalid prefix length: {prefix_text}") from exc
        netmask = prefix_to_netmask(prefix)
        self.ipv4 = address
        self.netmask = netmask

    def to_json(self) -> dict:
        return {
            "name": self.netinterface,
            "ipv4": f"{self.ipv4}/{netmask_to_cidr(self.netmask)}",
            "gateway": self.gateway,
            "dhcp": self.is_dhcp,
            "dns_servers": _split_list(self.dns_servers),
            "search_domains": _split_list(self.search_domains),
        }