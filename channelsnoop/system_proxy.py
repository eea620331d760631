"""Switch the macOS system web proxy on and off with ``networksetup``."""

from __future__ import annotations

import dataclasses
import re
import subprocess
from dataclasses import dataclass

_INTERFACE_RE = re.compile(r"Network interfaces?: ([0-9a-zA-Z]+)")


class ProxyError(Exception):
    """Raised when system proxy settings cannot be read or changed."""


@dataclass
class HardwarePort:
    device: str = ""
    port: str = ""
    interface: str = ""


@dataclass
class ProxySettings:
    device: str = ""
    hostname: str = ""
    port: str = ""

    def with_defaults(self) -> ProxySettings:
        """Return a copy with empty fields filled in."""
        device = self.device
        if not device:
            try:
                device = get_network_interface().port
            except ProxyError:
                device = "Wi-Fi"
        return dataclasses.replace(
            self,
            device=device,
            hostname=self.hostname or "127.0.0.1",
            port=self.port or "2023",
        )


def _run(cmd: list[str], failure: str) -> str:
    try:
        result = subprocess.run(cmd, capture_output=True, text=True, errors="replace")
    except OSError as exc:
        raise ProxyError(f"{failure}{exc}") from exc
    if result.returncode != 0:
        raise ProxyError(f"{failure}exit status {result.returncode} {result.stdout}".rstrip())
    return result.stdout


def parse_hardware_ports(output: str) -> list[HardwarePort]:
    """Parse ``networksetup -listallhardwareports`` output."""
    ports: list[HardwarePort] = []
    current = HardwarePort()
    for raw in output.split("\n"):
        line = raw.strip()
        if line.startswith("Hardware Port:"):
            if current.port:
                ports.append(current)
            current = HardwarePort(port=line.removeprefix("Hardware Port: "))
        elif line.startswith("Device:"):
            current.device = line.removeprefix("Device: ")
    if current.port:
        ports.append(current)
    return ports


def find_active_port(ports: list[HardwarePort], nwi_output: str) -> HardwarePort:
    """Pick the entry whose device is the active interface in ``scutil --nwi``."""
    match = _INTERFACE_RE.search(nwi_output)
    if match:
        for entry in ports:
            if entry.device == match.group(1):
                return entry
    raise ProxyError("未找到硬件端口信息")


def get_network_interface() -> HardwarePort:
    """Look up the entry of the network interface currently in use."""
    ports = parse_hardware_ports(
        _run(["networksetup", "-listallhardwareports"], "执行 networksetup 命令失败: ")
    )
    nwi = _run(["scutil", "--nwi"], "执行 scutil 命令失败: ")
    return find_active_port(ports, nwi)


def enable_proxy_macos(settings: ProxySettings) -> ProxySettings:
    """Point the HTTP and HTTPS system proxies at the given host; return the settings applied."""
    s = settings.with_defaults()
    _run(["networksetup", "-setwebproxy", s.device, s.hostname, s.port], "设置 HTTP 代理失败，")
    _run(["networksetup", "-setsecurewebproxy", s.device, s.hostname, s.port], "设置 HTTPS 代理失败，")
    return s


def disable_proxy_macos(settings: ProxySettings) -> ProxySettings:
    """Turn off the HTTP and HTTPS system proxies; return the settings used."""
    s = settings.with_defaults()
    _run(["networksetup", "-setwebproxystate", s.device, "off"], "禁用 HTTP 代理失败，")
    _run(["networksetup", "-setsecurewebproxystate", s.device, "off"], "禁用 HTTPS 代理失败，")
    return s