"""Reading and writing the HomeVPN key=value configuration file."""

from __future__ import annotations

import dataclasses
import os
import re
from dataclasses import dataclass
from pathlib import Path

CONFIG_FILENAME = ".homeVPN"

_INT_MIN = -(2**31)
_INT_MAX = 2**31 - 1
_LEADING_INT = re.compile(r"[ \t\n\v\f\r]*([+-]?[0-9]+)")

# Accepted keys (including aliases) mapped to the Config field they set.
_KEY_FIELDS = {
    "vpn_connect_cmd": "vpn_connect_cmd",
    "vpn_connect": "vpn_connect_cmd",
    "vpn_disconnect_cmd": "vpn_disconnect_cmd",
    "vpn_disconnect": "vpn_disconnect_cmd",
    "mount_cmd": "mount_cmd",
    "unmount_cmd": "unmount_cmd",
    "check_ip_url": "check_ip_url",
    "expected_ip": "expected_ip",
    "home_ip": "home_ip_prefix",
    "home_ip_prefix": "home_ip_prefix",
}


@dataclass
class Config:
    """Commands and checks used to manage the VPN and the network share."""

    vpn_connect_cmd: str = "echo 'VPN Connect'"
    vpn_disconnect_cmd: str = "echo 'VPN Disconnect'"
    mount_cmd: str = "echo 'Mount'"
    unmount_cmd: str = "echo 'Unmount'"
    check_ip_url: str = "https://ipinfo.io/ip"
    expected_ip: str = ""
    home_ip_prefix: str = "192.168.1."
    status_check_interval: int = 30  # seconds

    def dumps(self) -> str:
        """Return the configuration in its file format."""
        return (
            "# HomeVPN Configuration\n"
            f"vpn_connect_cmd={self.vpn_connect_cmd}\n"
            f"vpn_disconnect_cmd={self.vpn_disconnect_cmd}\n"
            f"mount_cmd={self.mount_cmd}\n"
            f"unmount_cmd={self.unmount_cmd}\n"
            f"check_ip_url={self.check_ip_url}\n"
            f"expected_ip={self.expected_ip}\n"
            f"home_ip_prefix={self.home_ip_prefix}\n"
            f"status_check_interval={self.status_check_interval}\n"
        )


def default_config_path() -> Path | None:
    """Return ``$HOME/.homeVPN``, or None when HOME is not set."""
    home = os.environ.get("HOME")
    if home is None:
        return None
    return Path(home) / CONFIG_FILENAME


def _parse_int(value: str) -> int:
    """Parse a leading decimal integer the way a C++ stoi call does."""
    match = _LEADING_INT.match(value)
    if match is None:
        raise ValueError(f"no integer in {value!r}")
    number = int(match.group(1))
    if not _INT_MIN <= number <= _INT_MAX:
        raise ValueError(f"integer out of range: {value!r}")
    return number


def parse_config(text: str, base: Config) -> tuple[Config, list[str]]:
    """Apply the settings in ``text`` on top of ``base``.

    Returns the new configuration and a list of warnings about values
    that could not be used. ``base`` is left unchanged.
    """
    config = dataclasses.replace(base)
    warnings: list[str] = []
    for line in text.split("\n"):
        if not line or line.startswith("#"):
            continue
        key, sep, value = line.partition("=")
        if not sep:
            continue
        if len(value) >= 2 and value[0] == '"' and value[-1] == '"':
            value = value[1:-1]
        if key in _KEY_FIELDS:
            setattr(config, _KEY_FIELDS[key], value)
        elif key == "status_check_interval":
            try:
                config.status_check_interval = _parse_int(value)
            except ValueError:
                warnings.append(f"Invalid status_check_interval value: {value}")
    return config, warnings


def _resolve(path: str | os.PathLike[str] | None) -> Path:
    if path:
        return Path(path)
    resolved = default_config_path()
    if resolved is None:
        raise FileNotFoundError("HOME is not set; no default configuration path")
    return resolved


def load_config(path: str | os.PathLike[str] | None = None) -> tuple[Config, list[str]]:
    """Read a configuration file on top of the defaults.

    Raises OSError when the file cannot be read.
    """
    with open(_resolve(path), encoding="utf-8", newline="") as handle:
        text = handle.read()
    return parse_config(text, Config())


def save_config(config: Config, path: str | os.PathLike[str] | None = None) -> Path:
    """Write ``config`` to ``path`` (default ``~/.homeVPN``) and return the path."""
    target = _resolve(path)
    with open(target, "w", encoding="utf-8", newline="") as handle:
        handle.write(config.dumps())
    return target