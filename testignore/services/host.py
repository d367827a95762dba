from __future__ import annotations

import platform
import sys

_ARCH_ALIASES: dict[str, str] = {
    "amd64": "x86_64",
    "x64": "x86_64",
    "x86-64": "x86_64",
    "arm64": "aarch64",
    "armv8": "aarch64",
}

_OS_PREFIXES: tuple[tuple[str, str], ...] = (
    ("darwin", "macos"),
    ("win32", "windows"),
    ("cygwin", "windows"),
    ("msys", "windows"),
    ("linux", "linux"),
    ("freebsd", "freebsd"),
)


def normalize_arch(machine: str) -> str:
    lowered = machine.strip().lower()
    return _ARCH_ALIASES.get(lowered, lowered)


def normalize_os(platform_name: str) -> str:
    lowered = platform_name.strip().lower()
    for prefix, name in _OS_PREFIXES:
        if lowered.startswith(prefix):
            return name
    return lowered


def detect_host() -> tuple[str, str]:
    """Return ``(arch, os)`` for the running interpreter, using manifest tag names."""
    return normalize_arch(platform.machine()), normalize_os(sys.platform)
