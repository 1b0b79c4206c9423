[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "homevpn"
version = "1.0.0"
description = "Terminal manager for a home VPN connection and a network share"
requires-python = ">=3.10"
dependencies = []
keywords = ["vpn", "network-share", "mount", "curses", "tui"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console :: Curses",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Networking",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
homevpn = "homevpn.tui:main"

[tool.hatch.build.targets.wheel]
packages = ["homevpn"]

[tool.pytest.ini_options]
addopts = "-ra"
