"""Exceptions raised by vmlaunch."""

from __future__ import annotations


class VMLaunchError(Exception):
    """Base exception for all vmlaunch errors."""

    pass


class SpawnError(VMLaunchError):
    """Raised when the QEMU process could not be created at all."""

    def __init__(self, binary: str, message: str) -> None:
        super().__init__(f"'{binary}': {message}")
        self.binary = binary


class EarlyExitError(VMLaunchError):
    """Raised when QEMU exits abnormally within the launch grace period.

    A negative returncode means the process was killed by that signal.
    """

    def __init__(self, arch: str, binary: str, returncode: int) -> None:
        if returncode < 0:
            status = f"signal: {-returncode}"
        else:
            status = f"exit status {returncode}"
        super().__init__(f"'{binary}': {status}")
        self.arch = arch
        self.binary = binary
        self.returncode = returncode


class ManifestError(VMLaunchError):
    """Raised when a machine manifest is missing or malformed."""

    pass
