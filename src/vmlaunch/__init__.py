"""vmlaunch — describe QEMU virtual machines and launch them."""

from vmlaunch.config import LauncherConfig
from vmlaunch.errors import EarlyExitError, ManifestError, SpawnError, VMLaunchError
from vmlaunch.launcher import binary_name, render_args, render_command, start_machine
from vmlaunch.machine import Drive, Image, Machine, NetDev

__version__ = "0.1.0"

__all__ = [
    "Drive",
    "EarlyExitError",
    "Image",
    "LauncherConfig",
    "Machine",
    "ManifestError",
    "NetDev",
    "SpawnError",
    "VMLaunchError",
    "binary_name",
    "render_args",
    "render_command",
    "start_machine",
]
