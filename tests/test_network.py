import pytest

from calaos_home.network import NetworkInfo, netmask_to_cidr, prefix_to_netmask


def test_prefix_24():
    assert prefix_to_netmask(24) == "255.255.255.0"


@pytest.mark.parametrize("prefix", range(33))
def test_prefix_roundtrip(prefix):
    assert netmask_to_cidr(prefix_to_netmask(prefix)) == prefix


@pytest.mark.parametrize("prefix", [-1, 33])
def test_invalid_prefix(prefix):
    with pytest.raises(ValueError):
        prefix_to_netmask(prefix)


def test_netmask_unparsable():
    assert netmask_to_cidr("garbage") == 0


def test_set_ipv4_cidr():
    info = NetworkInfo()
    info.set_ipv4_cidr("192.168.1.10/24")
    assert info.ipv4 == "192.168.1.10"
    assert info.netmask == prefix_to_netmask(24)


@pytest.mark.parametrize("cidr", ["192.168.1.10", "1.2.3.4/40", "a/b/c", "1.2.3.4/x"])
def test_set_ipv4_cidr_invalid_keeps_state(cidr):
    info = NetworkInfo(ipv4="10.0.0.1", netmask="255.0.0.0")
    with pytest.raises(ValueError):
        info.set_ipv4_cidr(cidr)
    assert (info.ipv4, info.netmask) == ("10.0.0.1", "255.0.0.0")


def test_to_json():
    info = NetworkInfo(
        netinterface="eth0",
        gateway="10.0.0.254",
        is_dhcp=True,
        dns_servers="10.0.0.53, 10.0.0.54,",
        search_domains="example.com",
    )
    info.set_ipv4_cidr("10.0.0.2/16")
    data = info.to_json()
    assert data == {
        "name": "eth0",
        "ipv4": "10.0.0.2/16",
        "gateway": "10.0.0.254",
        "dhcp": True,
        "dns_servers": ["10.0.0.53", "10.0.0.54"],
        "search_domains": ["example.com"],
    }


def test_to_json_empty_lists():
    data = NetworkInfo().to_json()
    assert data["dns_servers"] == []
    assert data["search_domains"] == []