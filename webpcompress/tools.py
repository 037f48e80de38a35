from __future__ import annotations

import logging
import os
import stat
import sys
from pathlib import Path
from threading import Lock

from .errors import InitializationError, UnsupportedPlatformError

logger = logging.getLogger(__name__)

TOOLS = ("cwebp", "dwebp")
PLATFORM_DIRS = {
    "windows": "windows-x64",
    "linux": "linux-x86-64",
    "macos": "mac-x86-64",
}
VENDOR_DIR_ENV = "WEBPCOMPRESS_VENDOR_DIR"

_READY: set[tuple[str, str]] = set()
_READY_LOCK = Lock()


def detect_platform(platform: str | None = None) -> str:
    platform = sys.platform if platform is None else platform
    if platform.startswith("win"):
        return "windows"
    if platform == "darwin":
        return "macos"
    if platform.startswith("linux"):
        return "linux"
    raise UnsupportedPlatformError(platform)


def get_vendor_root() -> Path:
    override = os.environ.get(VENDOR_DIR_ENV)
    if override:
        return Path(override).expanduser().resolve()
    meipass = getattr(sys, "_MEIPASS", None)
    if meipass:
        frozen_root = Path(meipass) / "webpcompress" / "webp"
        if frozen_root.is_dir():
            return frozen_root
    return Path(__file__).resolve().parent / "webp"


def get_command(tool: str, platform: str | None = None) -> Path:
    """Return the vendored binary for ``tool`` on the given (or current) platform.

    Raises UnsupportedPlatformError for platforms without a vendored build.
    """
    if tool not in TOOLS:
        raise ValueError(f"Unknown tool: {tool!r} (expected one of {', '.join(TOOLS)})")
    platform_key = detect_platform(platform)
    return get_vendor_root() / PLATFORM_DIRS[platform_key] / executable_name(tool, platform_key)


def executable_name(tool: str, platform_key: str) -> str:
    if platform_key == "windows":
        return f"{tool}.exe"
    return tool


def ensure_executable(path: Path, platform_key: str) -> None:
    mode = path.stat().st_mode
    # an installed binary may be executable without being ours to chmod
    if platform_key == "windows" or os.access(path, os.X_OK):
        return
    path.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)


def ensure_ready(platform: str | None = None) -> None:
    """Mark both vendored binaries executable, once per vendor root.

    Failures are raised as InitializationError and are not memoized, so the
    next call tries again.
    """
    platform_key = detect_platform(platform)
    key = (str(get_vendor_root()), platform_key)
    with _READY_LOCK:
        if key in _READY:
            return
        for tool in TOOLS:
            command = get_command(tool, platform)
            try:
                ensure_executable(command, platform_key)
            except OSError as error:
                raise InitializationError(f"Could not make {command} executable: {error}") from error
        _READY.add(key)
    logger.info("Vendored binaries ready in %s", key[0])


def reset_ready() -> None:
    with _READY_LOCK:
        _READY.clear()
