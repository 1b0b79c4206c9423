"""VPN and network-share management: commands, status checks and logging."""

from __future__ import annotations

import dataclasses
import http.client
import os
import subprocess
import threading
import time
import urllib.error
import urllib.request
from collections import deque
from dataclasses import dataclass
from typing import Callable

from .config import Config, default_config_path, parse_config, save_config

MAX_LOG_ENTRIES = 100
DEFAULT_MOUNT_POINT = "/mnt/homeshare"
IP_FETCH_TIMEOUT = 10


@dataclass
class Status:
    """Current state of the VPN connection and the share."""

    vpn_connected: bool = False
    share_mounted: bool = False
    current_ip: str = ""
    last_error: str = ""


StatusCallback = Callable[[Status], None]
LogCallback = Callable[[str], None]


def current_timestamp() -> str:
    """Return the local time as HH:MM:SS."""
    return time.strftime("%H:%M:%S", time.localtime())


class HomeVPNCore:
    """Runs the configured commands and keeps track of the connection status."""

    CONNECT_DELAY = 2.0
    SETTLE_DELAY = 1.0

    def __init__(self, config: Config | None = None) -> None:
        self.config = config if config is not None else Config()
        self.status = Status()
        self.status_callback: StatusCallback | None = None
        self.log_callback: LogCallback | None = None
        self.connect_delay = self.CONNECT_DELAY
        self.settle_delay = self.SETTLE_DELAY
        self.mount_point = DEFAULT_MOUNT_POINT
        self._logs: deque[str] = deque(maxlen=MAX_LOG_ENTRIES)
        self._logs_lock = threading.Lock()
        self._status_lock = threading.RLock()
        self._monitor_thread: threading.Thread | None = None
        self._monitor_stop = threading.Event()
        self._monitor_running = False

    # Configuration

    def load_config(self, path: str | os.PathLike[str] | None = None) -> bool:
        """Read settings on top of the current configuration.

        Returns False when there is no file to read.
        """
        target = path if path else default_config_path()
        if target is None:
            return False
        try:
            with open(target, encoding="utf-8", newline="") as handle:
                text = handle.read()
        except OSError:
            self.add_log(f"Config file not found, using defaults: {target}")
            return False
        self.config, warnings = parse_config(text, self.config)
        for warning in warnings:
            self.add_log(warning)
        self.add_log(f"Configuration loaded from: {target}")
        return True

    def save_config(self, path: str | os.PathLike[str] | None = None) -> bool:
        """Write the current configuration; returns whether it was saved."""
        target = path if path else default_config_path()
        if target is None:
            return False
        try:
            save_config(self.config, target)
        except OSError:
            self.add_log(f"Failed to save config to: {target}")
            return False
        self.add_log(f"Configuration saved to: {target}")
        return True

    # Operations

    def connect_vpn(self) -> None:
        self.add_log("Connecting to VPN...")
        self.execute_command(self.config.vpn_connect_cmd)
        time.sleep(self.connect_delay)
        self.update_status()

    def disconnect_vpn(self) -> None:
        self.add_log("Disconnecting from VPN...")
        self.execute_command(self.config.vpn_disconnect_cmd)
        time.sleep(self.settle_delay)
        self.update_status()

    def mount_share(self) -> None:
        if not self.status.vpn_connected:
            self.add_log("ERROR: Cannot mount share - VPN not connected")
            self.status.last_error = "VPN not connected"
            self._notify_status_change()
            return
        self.add_log("Mounting network share...")
        self.execute_command(self.config.mount_cmd)
        time.sleep(self.settle_delay)
        self.update_status()

    def unmount_share(self) -> None:
        self.add_log("Unmounting network share...")
        self.execute_command(self.config.unmount_cmd)
        time.sleep(self.settle_delay)
        self.update_status()

    def update_status(self) -> None:
        """Re-check the IP address and the mount, logging any change."""
        with self._status_lock:
            status = self.status
            old = dataclasses.replace(status)

            status.current_ip = self.fetch_external_ip()
            status.vpn_connected = self.is_vpn_connected(status.current_ip)
            status.share_mounted = self.is_share_mounted()

            if not status.vpn_connected and status.share_mounted:
                self.execute_command(self.config.unmount_cmd)
                status.share_mounted = False
                self.add_log("VPN disconnected, unmounting share")

            if status.vpn_connected and not old.vpn_connected:
                status.last_error = ""

            if old.vpn_connected != status.vpn_connected:
                self.add_log("VPN Connected" if status.vpn_connected else "VPN Disconnected")
            if old.share_mounted != status.share_mounted:
                self.add_log("Share Mounted" if status.share_mounted else "Share Unmounted")

            self._notify_status_change()

    # Monitoring

    def start_status_monitor(self) -> None:
        if self._monitor_running:
            return
        self._monitor_running = True
        self._monitor_stop.clear()
        self._monitor_thread = threading.Thread(
            target=self._monitor_loop, name="homevpn-monitor", daemon=True
        )
        self._monitor_thread.start()
        self.add_log("Status monitor started")

    def stop_status_monitor(self) -> None:
        if not self._monitor_running:
            return
        self._monitor_running = False
        self._monitor_stop.set()
        thread = self._monitor_thread
        if thread is not None and thread is not threading.current_thread():
            thread.join()
        self._monitor_thread = None
        self.add_log("Status monitor stopped")

    def _monitor_loop(self) -> None:
        while not self._monitor_stop.is_set():
            self.update_status()
            interval = self.config.status_check_interval
            if interval > 0:
                self._monitor_stop.wait(interval)

    @property
    def monitor_running(self) -> bool:
        return self._monitor_running

    # Logging

    @property
    def logs(self) -> list[str]:
        """A snapshot of the most recent log entries, oldest first."""
        with self._logs_lock:
            return list(self._logs)

    def clear_logs(self) -> None:
        with self._logs_lock:
            self._logs.clear()

    def add_log(self, message: str) -> None:
        entry = f"{current_timestamp()}: {message}"
        with self._logs_lock:
            self._logs.append(entry)
        if self.log_callback is not None:
            self.log_callback(entry)

    # Checks and helpers

    def execute_command(self, command: str) -> str:
        """Run ``command`` in a shell and return its combined output."""
        try:
            completed = subprocess.run(
                command + " 2>&1",
                shell=True,
                stdout=subprocess.PIPE,
                stdin=subprocess.DEVNULL,
                check=False,
            )
        except OSError:
            self.add_log(f"ERROR: Failed to execute command: {command}")
            return "Error: Failed to execute command"
        result = completed.stdout.decode("utf-8", errors="replace")
        if result.endswith("\n"):
            result = result[:-1]
        if result:
            self.add_log(f"Command output: {result}")
        return result

    def fetch_external_ip(self) -> str:
        """Fetch the public address from the configured URL, or "" on failure."""
        url = self.config.check_ip_url
        if not url:
            return ""
        try:
            with urllib.request.urlopen(url, timeout=IP_FETCH_TIMEOUT) as response:
                body = response.read()
        except urllib.error.HTTPError as error:
            try:
                body = error.read()
            except (OSError, http.client.HTTPException):
                return ""
        except (OSError, ValueError, http.client.HTTPException):
            return ""
        return body.decode("utf-8", errors="replace").rstrip(" \n\r\t")

    def is_vpn_connected(self, ip: str) -> bool:
        """Decide from the external address whether the VPN is up."""
        if self.config.expected_ip:
            return self.config.expected_ip in ip
        if self.config.home_ip_prefix:
            return self.config.home_ip_prefix in ip
        return bool(ip) and ip != "Error" and len(ip) > 5

    def is_share_mounted(self) -> bool:
        try:
            completed = subprocess.run(
                ["mountpoint", "-q", self.mount_point],
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                check=False,
            )
        except OSError:
            return False
        return completed.returncode == 0

    def _notify_status_change(self) -> None:
        if self.status_callback is not None:
            self.status_callback(self.status)

    def __enter__(self) -> HomeVPNCore:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop_status_monitor()