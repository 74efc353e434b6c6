"""
Lexical path canonicalization.

Device paths declared in slot attributes are normalized before they are
matched against the partition grammar and before they are written into
AppArmor and udev rules, so both sides always see the same string.
"""

from __future__ import annotations

import posixpath


# Fixed directory holding kernel device nodes
DEVICE_DIR = "/dev/"


def clean_path(path: str) -> str:
    """
    Return the shortest path name lexically equivalent to ``path``.

    Duplicate separators are collapsed, ``.`` segments dropped and ``..``
    segments resolved against the preceding element. ``..`` at the root
    stays at the root. The filesystem is never consulted, so symlinks are
    not followed.

    Args:
        path: Raw path string

    Returns:
        Canonical path. An empty string cleans to ``"."``.
    """
    cleaned = posixpath.normpath(path)
    # POSIX allows an implementation-defined meaning for exactly two
    # leading slashes; the kernel treats them as one.
    if cleaned.startswith("//"):
        cleaned = cleaned[1:]
    return cleaned


def kernel_name(path: str) -> str:
    """
    Get the kernel device name for a canonical device path.

    ``/dev/mmcblk0p1`` becomes ``mmcblk0p1``. Paths outside the device
    directory are returned unchanged.
    """
    if path.startswith(DEVICE_DIR):
        return path[len(DEVICE_DIR):]
    return path
