"""In-memory description of a QEMU virtual machine.

A Machine is built in two steps. Sizing (vCPUs, memory) is fixed at
construction. Resources (CD-ROM, drives, network interfaces, VNC, QMP
monitor) are then attached one at a time.

Nothing here touches the host: paths and addresses are stored as given and
only interpreted once the launcher renders them into QEMU arguments.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class Drive:
    """A hard drive backed by an image file on the host."""

    path: str
    format: str


@dataclass
class Image:
    """A disk image on the host, as described by an image catalog."""

    path: str
    format: str


@dataclass
class NetDev:
    """A network interface: a host-side backend plus a guest virtio NIC."""

    # Backend kind passed straight to -netdev (user, tap, bridge, ...).
    type: str

    # Backend id; the guest device is bound to it, so it must be unique per machine.
    id: str

    # Host interface name (tap/bridge backends). Empty = let QEMU decide.
    ifname: str = ""

    # Guest MAC address. Empty = QEMU assigns one.
    mac: str = ""


class Machine:
    """A virtual machine description, consumed once by start_machine()."""

    def __init__(self, cores: int, memory: int) -> None:
        self.cores = cores
        # RAM in megabytes
        self.memory = memory

        self._cdrom: str = ""
        self._vnc: str = ""
        self._monitor: str = ""
        self._drives: list[Drive] = []
        self._netdevs: list[NetDev] = []

    def __repr__(self) -> str:
        return (
            f"Machine(cores={self.cores}, memory={self.memory}, "
            f"drives={len(self._drives)}, netdevs={len(self._netdevs)})"
        )

    @property
    def cdrom(self) -> str:
        return self._cdrom

    @property
    def vnc(self) -> str:
        return self._vnc

    @property
    def monitor(self) -> str:
        return self._monitor

    @property
    def drives(self) -> list[Drive]:
        return list(self._drives)

    @property
    def netdevs(self) -> list[NetDev]:
        return list(self._netdevs)

    def attach_cdrom(self, path: str) -> None:
        """Attach a disk image as the CD-ROM, replacing any previous one."""
        self._cdrom = path

    def attach_drive(self, drive: Drive) -> None:
        """Attach a hard drive after the ones already attached."""
        self._drives.append(drive)

    def attach_drive_image(self, image: Image) -> None:
        """Attach an image as a hard drive.

        Any object with ``path`` and ``format`` attributes is accepted.
        """
        self._drives.append(Drive(image.path, image.format))

    def attach_netdev(self, netdev: NetDev) -> None:
        """Attach a network interface after the ones already attached."""
        self._netdevs.append(netdev)

    def attach_vnc(self, address: str, port: int) -> None:
        """Serve the display over VNC on address:port."""
        self._vnc = f"{address}:{port}"

    def attach_monitor(self, path: str) -> None:
        """Expose the QMP monitor on a unix socket at path."""
        self._monitor = path
