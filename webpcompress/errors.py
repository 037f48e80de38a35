from __future__ import annotations

from typing import Sequence


class WebpError(Exception):
    pass


class UnsupportedPlatformError(WebpError):
    def __init__(self, platform: str) -> None:
        super().__init__(f"Platform is not supported: {platform}")
        self.platform = platform


class InitializationError(WebpError):
    """The vendored binaries could not be made executable."""


class ExecutionError(WebpError):
    """The encoder could not be started or exited with a non-zero status.

    ``log`` holds the encoder's stderr, or the operating system error when
    the process never started (``returncode`` is then ``None``).
    """

    def __init__(self, log: str, returncode: int | None, command: Sequence[str]) -> None:
        if returncode is None:
            message = f"Could not start {command[0]}: {log}"
        else:
            message = f"{command[0]} exited with status {returncode}: {log}"
        super().__init__(message)
        self.log = log
        self.returncode = returncode
        self.command = list(command)
