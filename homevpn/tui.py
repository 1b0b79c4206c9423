"""Terminal interface for controlling the VPN connection and the network share."""

from __future__ import annotations

import argparse
import curses
import signal
import time
from enum import Enum
from typing import NamedTuple, Sequence

from .core import HomeVPNCore, Status

TITLE = "HomeVPN TUI"
HELP_TEXT = "[Up/Down] Select  [Enter/Space] Toggle  [q] Quit  [m] Minimize"
SELECTION_MARKER = "<--"
MARKER_OFFSET = 10
INPUT_TIMEOUT_MS = 100
MINIMIZED_POLL = 0.1

VPN_ITEM = 0
SHARE_ITEM = 1
ITEM_COUNT = 2

_ENTER = ord("\n")
_SPACE = ord(" ")
_QUIT_KEYS = {ord("q"), ord("Q")}
_MINIMIZE_KEYS = {ord("m"), ord("M")}


class LineStyle(Enum):
    """How a line of the status window is highlighted."""

    PLAIN = "plain"
    TITLE = "title"
    GOOD = "good"
    BAD = "bad"
    INFO = "info"
    WARNING = "warning"


class ScreenLine(NamedTuple):
    """One row of the status window."""

    text: str
    style: LineStyle = LineStyle.PLAIN
    marked: bool = False


def _state_style(ok: bool) -> LineStyle:
    return LineStyle.GOOD if ok else LineStyle.BAD


def status_lines(status: Status, selected: int) -> list[ScreenLine]:
    """Lay out the status window, one entry per row starting at row 1."""
    lines = [
        ScreenLine(TITLE, LineStyle.TITLE),
        ScreenLine(""),
        ScreenLine(
            f"[1] VPN: {'Connected' if status.vpn_connected else 'Disconnected'}",
            _state_style(status.vpn_connected),
            selected == VPN_ITEM,
        ),
        ScreenLine(
            f"[2] Share: {'Mounted' if status.share_mounted else 'Unmounted'}",
            _state_style(status.share_mounted),
            selected == SHARE_ITEM,
        ),
        ScreenLine(f"IP: {status.current_ip}", LineStyle.INFO),
    ]
    if status.last_error:
        lines.append(ScreenLine(f"Error: {status.last_error}", LineStyle.WARNING))
    lines.append(ScreenLine(""))
    lines.append(ScreenLine(HELP_TEXT))
    return lines


def visible_logs(logs: Sequence[str], height: int) -> list[str]:
    """Return the newest entries that fit in a boxed window of ``height`` rows."""
    capacity = height - 2
    if capacity <= 0:
        return []
    return list(logs[-capacity:])


class HomeVPNTui:
    """Keyboard-driven curses front end for a :class:`HomeVPNCore`."""

    def __init__(self, core: HomeVPNCore) -> None:
        self.core = core
        self.selected = VPN_ITEM
        self.running = True
        self.minimized = False
        self.status_changed = False
        self.new_log = False
        self._suspended = False
        self._main_win: curses.window | None = None
        self._log_win: curses.window | None = None
        self._attrs: dict[LineStyle, int] = {}
        core.status_callback = self._on_status
        core.log_callback = self._on_log

    def _on_status(self, status: Status) -> None:
        self.status_changed = True

    def _on_log(self, message: str) -> None:
        self.new_log = True

    def handle_key(self, key: int) -> None:
        """React to one key code as returned by ``getch``."""
        if key in (curses.KEY_UP, curses.KEY_DOWN):
            self.selected = (self.selected + 1) % ITEM_COUNT
        elif key in (_ENTER, _SPACE):
            self._toggle_selected()
        elif key in _QUIT_KEYS:
            self.running = False
        elif key in _MINIMIZE_KEYS:
            self.minimized = True

    def _toggle_selected(self) -> None:
        core = self.core
        if self.selected == VPN_ITEM:
            if core.status.vpn_connected:
                core.disconnect_vpn()
            else:
                core.connect_vpn()
        elif self.selected == SHARE_ITEM:
            if not core.status.vpn_connected:
                core.add_log("Cannot mount/unmount: VPN not connected")
            elif core.status.share_mounted:
                core.unmount_share()
            else:
                core.mount_share()

    def run(self, stdscr: curses.window) -> None:
        """Drive the interface on ``stdscr`` until the user quits."""
        self._setup(stdscr)
        self.core.update_status()
        self.core.start_status_monitor()
        try:
            while self.running:
                if self.minimized:
                    if not self._suspended:
                        curses.endwin()
                        self._suspended = True
                    time.sleep(MINIMIZED_POLL)
                    continue
                self._draw(stdscr)
                self.handle_key(stdscr.getch())
        finally:
            self.core.stop_status_monitor()

    def _setup(self, stdscr: curses.window) -> None:
        curses.cbreak()
        curses.noecho()
        stdscr.keypad(True)
        try:
            curses.curs_set(0)
        except curses.error:
            pass
        stdscr.timeout(INPUT_TIMEOUT_MS)

        self._attrs = {style: 0 for style in LineStyle}
        self._attrs[LineStyle.TITLE] = curses.A_BOLD
        if curses.has_colors():
            curses.start_color()
            curses.init_pair(1, curses.COLOR_GREEN, curses.COLOR_BLACK)
            curses.init_pair(2, curses.COLOR_RED, curses.COLOR_BLACK)
            curses.init_pair(3, curses.COLOR_YELLOW, curses.COLOR_BLACK)
            curses.init_pair(4, curses.COLOR_CYAN, curses.COLOR_BLACK)
            self._attrs[LineStyle.GOOD] = curses.color_pair(1)
            self._attrs[LineStyle.BAD] = curses.color_pair(2)
            self._attrs[LineStyle.WARNING] = curses.color_pair(3)
            self._attrs[LineStyle.INFO] = curses.color_pair(4)

        stdscr.clear()
        stdscr.refresh()
        height, width = stdscr.getmaxyx()
        log_height = height // 2
        self._main_win = curses.newwin(max(height - log_height - 2, 1), width, 0, 0)
        self._log_win = curses.newwin(max(log_height, 1), width, max(height - log_height - 1, 0), 0)

    @staticmethod
    def _put(window: curses.window, row: int, col: int, text: str, attr: int = 0) -> None:
        rows, cols = window.getmaxyx()
        room = cols - col - 1
        if row < 0 or row >= rows or col < 0 or room <= 0:
            return
        try:
            window.addnstr(row, col, text, room, attr)
        except curses.error:
            pass

    def _draw(self, stdscr: curses.window) -> None:
        main_win, log_win = self._main_win, self._log_win
        if main_win is None or log_win is None:
            return
        _, width = stdscr.getmaxyx()
        main_win.erase()
        log_win.erase()
        main_win.box()
        log_win.box()

        for row, line in enumerate(status_lines(self.core.status, self.selected), start=1):
            if line.text:
                self._put(main_win, row, 2, line.text, self._attrs.get(line.style, 0))
            if line.marked:
                self._put(main_win, row, width - MARKER_OFFSET, SELECTION_MARKER)
        main_win.refresh()

        log_height, _ = log_win.getmaxyx()
        for row, entry in enumerate(visible_logs(self.core.logs, log_height), start=1):
            self._put(log_win, row, 2, entry)
        self._put(log_win, 0, 2, "Log")
        log_win.refresh()
        self.status_changed = False
        self.new_log = False


def main(argv: Sequence[str] | None = None) -> int:
    """Start the terminal interface."""
    parser = argparse.ArgumentParser(
        prog="homevpn",
        description="Manage a VPN connection and a network share from the terminal.",
    )
    parser.parse_args(argv)

    if hasattr(signal, "SIGTSTP"):
        signal.signal(signal.SIGTSTP, signal.SIG_IGN)

    core = HomeVPNCore()
    core.load_config()
    with core:
        curses.wrapper(HomeVPNTui(core).run)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())