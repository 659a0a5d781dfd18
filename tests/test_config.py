import pytest

from calaos_home.config import (
    BCAST_UDP_PORT,
    DEFAULT_OPTIONS,
    DISCOVER_MESSAGE,
    LOCAL_CONFIG,
    ConfigError,
    LocalConfig,
    ServerDiscovery,
    filter_arguments,
    parse_arguments,
    parse_discovery_reply,
)


@pytest.fixture
def config(tmp_path):
    cfg = LocalConfig(tmp_path / "conf", tmp_path / "cache", tmp_path)
    cfg.initialize()
    return cfg


class FakeSocket:
    def __init__(self):
        self.sent = []

    def sendto(self, data, address):
        self.sent.append((data, address))


def test_initialize_writes_defaults(tmp_path):
    cfg = LocalConfig(tmp_path / "conf", tmp_path / "cache", tmp_path)
    assert cfg.initialize() is True
    assert (tmp_path / "conf" / LOCAL_CONFIG).exists()
    assert cfg.all_options() == DEFAULT_OPTIONS


def test_initialize_twice_keeps_config(config):
    config.set_option("lang", "fr")
    assert config.initialize() is False
    assert config.get_option("lang") == "fr"


def test_missing_option_is_empty(config):
    assert config.get_option("does_not_exist") == ""


def test_set_option_roundtrip_with_special_chars(config):
    value = 'a <b> & "c"'
    config.set_option("weird", value)
    assert config.get_option("weird") == value
    assert config.get_option("show_cursor") == DEFAULT_OPTIONS["show_cursor"]


def test_auth_roundtrip(config):
    assert config.load_auth() == (DEFAULT_OPTIONS["cn_user"], DEFAULT_OPTIONS["cn_pass"])
    password = "password"
    config.save_auth("[email]", password)
    assert config.load_auth() == ("[email]", password)


def test_all_options_without_file_raises(tmp_path):
    cfg = LocalConfig(tmp_path / "conf", tmp_path / "cache", tmp_path)
    with pytest.raises(ConfigError):
        cfg.all_options()


def test_home_config_dir_preferred(tmp_path):
    home_conf = tmp_path / ".config" / "calaos"
    home_conf.mkdir(parents=True)
    cfg = LocalConfig(home=tmp_path)
    assert cfg.config_file(LOCAL_CONFIG) == home_conf / LOCAL_CONFIG


def test_cache_dir_created_under_home(tmp_path):
    cfg = LocalConfig(home=tmp_path)
    path = cfg.cache_file("x")
    assert path == tmp_path / ".cache" / "calaos" / "x"
    assert path.parent.is_dir()


def test_parse_discovery_reply():
    assert parse_discovery_reply(b"CALAOS_IP 10.1.2.3\n") == "10.1.2.3"
    assert parse_discovery_reply(b"SOMETHING 10.1.2.3") is None


def test_discovery_broadcasts(config):
    sock = FakeSocket()
    disc = ServerDiscovery(config)
    assert disc.discover(sock) is True
    assert sock.sent == [(DISCOVER_MESSAGE, ("255.255.255.255", BCAST_UDP_PORT))]


def test_discovery_reply_stops_broadcast(config):
    found = []
    disc = ServerDiscovery(config, found.append)
    assert disc.handle_datagram(b"CALAOS_IP 10.1.2.3") == "10.1.2.3"
    assert found == ["10.1.2.3"]
    assert disc.host == "10.1.2.3"
    sock = FakeSocket()
    assert disc.discover(sock) is False
    assert sock.sent == []


def test_discovery_ignores_unknown_datagram(config):
    found = []
    disc = ServerDiscovery(config, found.append)
    assert disc.handle_datagram(b"HELLO") is None
    assert found == []
    assert disc.active is True


def test_discovery_forced_host(config):
    config.set_option("calaos_server_host", "server.example.com")
    found = []
    disc = ServerDiscovery(config, found.append)
    sock = FakeSocket()
    assert disc.discover(sock) is False
    assert disc.discover(sock) is False
    assert sock.sent == []
    assert found == ["server.example.com"]


def test_filter_arguments():
    args = ["--no-sandbox", "--config", "/x", "--single-process"]
    assert filter_arguments(args) == ["--config", "/x"]


def test_parse_arguments():
    ns = parse_arguments(["--config", "/cfg", "--disable-gpu", "--cache", "/c"])
    assert ns.config == "/cfg"
    assert ns.cache == "/c"


def test_parse_arguments_defaults():
    ns = parse_arguments([])
    assert ns.config is None and ns.cache is None