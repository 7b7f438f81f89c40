from __future__ import annotations

import os
from dataclasses import dataclass


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class LauncherConfig:
    arch: str = "x86_64"  # CLI default; start_machine takes arch as an argument
    kvm: bool = False
    binary_prefix: str = "qemu-system"
    grace_period: float = 0.05  # seconds QEMU gets to fail before we call it started
    stdout_path: str = ""  # "" = discard QEMU's stdout/stderr

    @staticmethod
    def from_env() -> LauncherConfig:
        return LauncherConfig(
            arch=os.environ.get("VMLAUNCH_ARCH", "x86_64"),
            kvm=_env_flag("VMLAUNCH_KVM"),
            binary_prefix=os.environ.get("VMLAUNCH_BINARY_PREFIX", "qemu-system"),
            grace_period=float(os.environ.get("VMLAUNCH_GRACE_PERIOD", "0.05")),
            stdout_path=os.environ.get("VMLAUNCH_LOG_FILE", ""),
        )
