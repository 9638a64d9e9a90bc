"""
Host probes: platform identification, privilege check and volume listing.
"""
import os
import platform
import string
import sys
from pathlib import Path
from typing import List

# Normalized names recorded in the metadata table
_OS_NAMES = {"win32": "windows", "cygwin": "windows", "darwin": "darwin"}
_ARCH_NAMES = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "aarch64": "arm64",
    "arm64": "arm64",
    "i386": "386",
    "i686": "386",
    "x86": "386",
}


def is_windows() -> bool:
    return sys.platform in ("win32", "cygwin")


def host_platform() -> str:
    if sys.platform.startswith("linux"):
        return "linux"
    return _OS_NAMES.get(sys.platform, sys.platform)


def host_architecture() -> str:
    machine = platform.machine().lower()
    return _ARCH_NAMES.get(machine, machine or "unknown")


def can_enumerate_volumes() -> bool:
    """True if this process may read raw volumes (admin / root)."""
    if is_windows():
        try:
            with open(r"\\.\PHYSICALDRIVE0", "rb"):
                return True
        except OSError:
            return False
    return hasattr(os, "geteuid") and os.geteuid() == 0


def list_volumes() -> List[Path]:
    """Roots that can be enumerated on this host."""
    if not is_windows():
        return [Path("/")]

    volumes = []
    for letter in string.ascii_uppercase:
        root = Path(f"{letter}:\\")
        if root.exists():
            volumes.append(root)
    return volumes


def max_workers() -> int:
    return os.cpu_count() or 1
