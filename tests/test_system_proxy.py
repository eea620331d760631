import subprocess

import pytest

from channelsnoop.system_proxy import (
    HardwarePort,
    ProxyError,
    ProxySettings,
    disable_proxy_macos,
    enable_proxy_macos,
    find_active_port,
    get_network_interface,
    parse_hardware_ports,
)

PORTS_OUTPUT = (
    "\n"
    "Hardware Port: Ethernet\n"
    "Device: en0\n"
    "\n"
    "Hardware Port: Thunderbolt Bridge\n"
    "Device: bridge0\n"
    "\n"
    "VLAN Configurations\n"
)

NWI_OUTPUT = "Network information\n\nIPv4 network interface information\n   Network interfaces: en0\n"


def _fake(responses, calls):
    def fake_run(cmd, **kwargs):
        calls.append(cmd)
        code, out = responses.get(cmd[0] + " " + cmd[1], (0, ""))
        return subprocess.CompletedProcess(cmd, code, stdout=out, stderr="")

    return fake_run


def test_parse_hardware_ports():
    assert parse_hardware_ports(PORTS_OUTPUT) == [
        HardwarePort(device="en0", port="Ethernet"),
        HardwarePort(device="bridge0", port="Thunderbolt Bridge"),
    ]


def test_parse_hardware_ports_empty():
    assert parse_hardware_ports("") == []


def test_find_active_port():
    ports = parse_hardware_ports(PORTS_OUTPUT)
    assert find_active_port(ports, NWI_OUTPUT).port == "Ethernet"


def test_find_active_port_singular_label():
    ports = parse_hardware_ports(PORTS_OUTPUT)
    assert find_active_port(ports, "Network interface: bridge0").device == "bridge0"


def test_find_active_port_missing():
    with pytest.raises(ProxyError):
        find_active_port(parse_hardware_ports(PORTS_OUTPUT), "Network interfaces: en9")


def test_get_network_interface(monkeypatch):
    calls = []
    responses = {
        "networksetup -listallhardwareports": (0, PORTS_OUTPUT),
        "scutil --nwi": (0, NWI_OUTPUT),
    }
    monkeypatch.setattr(subprocess, "run", _fake(responses, calls))
    assert get_network_interface() == HardwarePort(device="en0", port="Ethernet")
    assert len(calls) == 2


def test_with_defaults_uses_detected_port(monkeypatch):
    responses = {
        "networksetup -listallhardwareports": (0, PORTS_OUTPUT),
        "scutil --nwi": (0, NWI_OUTPUT),
    }
    monkeypatch.setattr(subprocess, "run", _fake(responses, []))
    settings = ProxySettings().with_defaults()
    assert settings == ProxySettings(device="Ethernet", hostname="127.0.0.1", port="2023")


def test_with_defaults_falls_back_to_wifi(monkeypatch):
    responses = {"networksetup -listallhardwareports": (1, "")}
    monkeypatch.setattr(subprocess, "run", _fake(responses, []))
    assert ProxySettings(port="2025").with_defaults().device == "Wi-Fi"


def test_with_defaults_keeps_given_values(monkeypatch):
    calls = []
    monkeypatch.setattr(subprocess, "run", _fake({}, calls))
    original = ProxySettings(device="en1", hostname="10.0.0.1", port="8080")
    assert original.with_defaults() == original
    assert calls == []


def test_enable_proxy_commands(monkeypatch):
    calls = []
    monkeypatch.setattr(subprocess, "run", _fake({}, calls))
    applied = enable_proxy_macos(ProxySettings(device="en1", port="2025"))
    assert applied == ProxySettings(device="en1", hostname="127.0.0.1", port="2025")
    assert calls == [
        ["networksetup", "-setwebproxy", "en1", "127.0.0.1", "2025"],
        ["networksetup", "-setsecurewebproxy", "en1", "127.0.0.1", "2025"],
    ]


def test_disable_proxy_commands(monkeypatch):
    calls = []
    monkeypatch.setattr(subprocess, "run", _fake({}, calls))
    applied = disable_proxy_macos(ProxySettings(device="en1", hostname="127.0.0.1"))
    assert applied == ProxySettings(device="en1", hostname="127.0.0.1", port="2023")
    assert calls == [
        ["networksetup", "-setwebproxystate", "en1", "off"],
        ["networksetup", "-setsecurewebproxystate", "en1", "off"],
    ]


def test_enable_failure_raises(monkeypatch):
    responses = {"networksetup -setwebproxy": (1, "")}
    monkeypatch.setattr(subprocess, "run", _fake(responses, []))
    with pytest.raises(ProxyError, match="HTTP"):
        enable_proxy_macos(ProxySettings(device="en1"))


def test_missing_command_raises(monkeypatch):
    def fake_run(cmd, **kwargs):
        raise FileNotFoundError(cmd[0])

    monkeypatch.setattr(subprocess, "run", fake_run)
    with pytest.raises(ProxyError):
        disable_proxy_macos(ProxySettings(device="en1"))