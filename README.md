# homevpn

A small terminal tool for switching a home VPN connection on and off. It also mounts and
unmounts a network share that is reachable through that connection.

homevpn does not speak any VPN or file-sharing protocol itself. It runs the shell
commands you configure for connecting, disconnecting, mounting and unmounting. To decide
whether the VPN is up, it fetches your external IP address from a URL. To decide whether
the share is mounted, it runs `mountpoint -q /mnt/homeshare`. If the VPN turns out to be
down while the share is still mounted, homevpn runs the unmount command.

## Installation

```
pip install .
```

The package has no dependencies beyond the Python standard library. It needs Python 3.10
or later and a system with `curses` and the `mountpoint` command, such as Linux.

## Configuration

Settings are read from `~/.homeVPN`. The file holds plain `key=value` lines:

- Empty lines and lines starting with `#` are ignored.
- Lines without `=` are ignored.
- A value wrapped in double quotes has the quotes removed.

```
# HomeVPN Configuration
vpn_connect_cmd=nmcli connection up home-vpn
vpn_disconnect_cmd=nmcli connection down home-vpn
mount_cmd=sudo mount -t cifs //192.168.1.10/share /mnt/homeshare -o credentials=/etc/homeshare.cred
unmount_cmd=sudo umount /mnt/homeshare
check_ip_url=https://ipinfo.io/ip
expected_ip=
home_ip_prefix=192.168.1.
status_check_interval=30
```

`vpn_connect` and `vpn_disconnect` are accepted as aliases for the two VPN command keys.
`home_ip` is accepted as an alias for `home_ip_prefix`. Unknown keys are ignored. An
invalid `status_check_interval` is reported as a warning and the previous value is kept.

If the file is missing, the built-in defaults are used. The default commands only
`echo` a message.

The VPN counts as connected when:

- the external IP contains `expected_ip`, if that is set;
- otherwise, the external IP contains `home_ip_prefix`, if that is set;
- otherwise, the external IP is longer than five characters and is not `Error`.

## Usage

```
homevpn
```

The upper half of the screen shows the VPN state, the share state, the current external
IP and the last error. The lower half shows the newest log lines. The status is checked
again every `status_check_interval` seconds.

| Key             | Action                                   |
|-----------------|------------------------------------------|
| Up / Down       | select the VPN or the share line         |
| Enter / Space   | toggle the selected item                 |
| m               | minimize: leave the curses screen        |
| q               | quit                                     |

A share can only be mounted or unmounted while the VPN is connected. Ctrl+Z is ignored
while the program runs.

## Library use

```python
from homevpn.core import HomeVPNCore

with HomeVPNCore() as core:
    core.load_config()
    core.connect_vpn()
    print(core.status.vpn_connected, core.status.current_ip)
    print("\n".join(core.logs))
```

`HomeVPNCore` works as follows:

- It has `connect_vpn`, `disconnect_vpn`, `mount_share`, `unmount_share` and
  `update_status`.
- `start_status_monitor` and `stop_status_monitor` control a background status check.
  Leaving the `with` block stops it.
- `status_callback` and `log_callback` can be set to functions that receive the `Status`
  or each new log line.
- The last 100 log entries are kept. Each is stamped `HH:MM:SS`.
- `mount_point` (default `/mnt/homeshare`) is the path checked for the share.
- `connect_delay` and `settle_delay` are the pauses after each command, 2 and 1 seconds
  by default.

`homevpn.config` reads and writes the configuration file directly:

- `Config` holds the settings, and `Config.dumps` returns them in file format.
- `parse_config(text, base)` returns a new `Config` and a list of warnings.
- `load_config(path)` raises `OSError` if the file cannot be read.
- `save_config(config, path)` writes the file and returns its path.

## What it does not do

- There is no graphical window or tray icon. The only front end is the terminal screen.
- Once minimized with `m`, the interface does not come back. The program keeps running
  in the background until it is interrupted, for example with Ctrl+C.
- The `homevpn` command takes no options. Settings come only from `~/.homeVPN`.