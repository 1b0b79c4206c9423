"""Manage a home VPN connection and a network share from the terminal."""

__version__ = "1.0.0"
__all__ = ["config", "core", "tui"]