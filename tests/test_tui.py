import curses

import pytest

from homevpn.config import Config
from homevpn.core import HomeVPNCore, Status
from homevpn.tui import (
    HELP_TEXT,
    TITLE,
    HomeVPNTui,
    LineStyle,
    status_lines,
    visible_logs,
)


@pytest.fixture
def core(tmp_path):
    config = Config(
        vpn_connect_cmd="true",
        vpn_disconnect_cmd="true",
        mount_cmd="true",
        unmount_cmd="true",
        check_ip_url="",
    )
    instance = HomeVPNCore(config)
    instance.connect_delay = 0
    instance.settle_delay = 0
    instance.mount_point = str(tmp_path)
    return instance


@pytest.fixture
def tui(core):
    return HomeVPNTui(core)


def _messages(core):
    return [entry.split(": ", 1)[1] for entry in core.logs]


def test_status_lines_layout_disconnected():
    lines = status_lines(Status(), 0)
    texts = [line.text for line in lines]
    assert texts[0] == TITLE
    assert lines[0].style is LineStyle.TITLE
    assert texts[1] == ""
    assert texts[2] == "[1] VPN: Disconnected"
    assert lines[2].style is LineStyle.BAD
    assert texts[3].endswith("Unmounted")
    assert texts[-1] == HELP_TEXT
    assert texts[-2] == ""


def test_status_lines_connected_and_ip():
    status = Status(vpn_connected=True, share_mounted=True, current_ip="10.0.0.1")
    lines = status_lines(status, 1)
    assert lines[2].text.endswith("Connected")
    assert lines[2].style is LineStyle.GOOD
    assert lines[3].text.endswith("Mounted")
    assert lines[3].style is LineStyle.GOOD
    assert "10.0.0.1" in lines[4].text
    assert lines[4].style is LineStyle.INFO


@pytest.mark.parametrize("selected, prefix", [(0, "[1]"), (1, "[2]")])
def test_status_lines_marks_selected_item(selected, prefix):
    marked = [line.text for line in status_lines(Status(), selected) if line.marked]
    assert len(marked) == 1
    assert marked[0].startswith(prefix)


def test_status_lines_error_line_only_when_error():
    without = status_lines(Status(), 0)
    with_error = status_lines(Status(last_error="VPN not connected"), 0)
    assert len(with_error) == len(without) + 1
    errors = [line for line in with_error if line.style is LineStyle.WARNING]
    assert len(errors) == 1
    assert "VPN not connected" in errors[0].text
    assert not any(line.style is LineStyle.WARNING for line in without)


def test_visible_logs_keeps_newest_entries():
    logs = [f"entry {n}" for n in range(10)]
    assert visible_logs(logs, 5) == logs[-3:]


def test_visible_logs_all_when_room():
    logs = ["a", "b"]
    assert visible_logs(logs, 10) == logs


@pytest.mark.parametrize("height", [0, 1, 2])
def test_visible_logs_no_room(height):
    assert visible_logs(["a", "b"], height) == []


@pytest.mark.parametrize("key", [curses.KEY_UP, curses.KEY_DOWN])
def test_arrow_keys_cycle_selection(tui, key):
    assert tui.selected == 0
    tui.handle_key(key)
    assert tui.selected == 1
    tui.handle_key(key)
    assert tui.selected == 0


@pytest.mark.parametrize("key", [ord("q"), ord("Q")])
def test_quit_keys_stop_running(tui, key):
    tui.handle_key(key)
    assert tui.running is False


@pytest.mark.parametrize("key", [ord("m"), ord("M")])
def test_minimize_keys(tui, key):
    tui.handle_key(key)
    assert tui.minimized is True
    assert tui.running is True


def test_unknown_key_changes_nothing(tui):
    tui.handle_key(-1)
    tui.handle_key(ord("x"))
    assert (tui.selected, tui.running, tui.minimized) == (0, True, False)


@pytest.mark.parametrize("key", [ord("\n"), ord(" ")])
def test_toggle_vpn_connects_when_disconnected(tui, core, key):
    tui.handle_key(key)
    assert "Connecting to VPN..." in _messages(core)
    assert core.status.vpn_connected is False


def test_toggle_vpn_disconnects_when_connected(tui, core):
    core.status.vpn_connected = True
    tui.handle_key(ord(" "))
    messages = _messages(core)
    assert "Disconnecting from VPN..." in messages
    assert "VPN Disconnected" in messages
    assert core.status.vpn_connected is False


def test_toggle_share_requires_vpn(tui, core):
    tui.handle_key(curses.KEY_DOWN)
    tui.handle_key(ord(" "))
    assert _messages(core) == ["Cannot mount/unmount: VPN not connected"]


def test_toggle_share_mounts_when_connected(tui, core):
    core.status.vpn_connected = True
    tui.handle_key(curses.KEY_DOWN)
    tui.handle_key(ord("\n"))
    assert "Mounting network share..." in _messages(core)


def test_toggle_share_unmounts_when_mounted(tui, core):
    core.status.vpn_connected = True
    core.status.share_mounted = True
    tui.handle_key(curses.KEY_DOWN)
    tui.handle_key(ord(" "))
    assert "Unmounting network share..." in _messages(core)
    assert core.status.share_mounted is False


def test_callbacks_set_flags(tui, core):
    assert tui.new_log is False
    assert tui.status_changed is False
    core.add_log("hello")
    assert tui.new_log is True
    core.update_status()
    assert tui.status_changed is True