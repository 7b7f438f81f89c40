"""TOML machine manifests.

A manifest is the on-disk form of a Machine:

    cores = 2
    memory = 1024
    cdrom = "/isos/install.iso"
    monitor = "/run/vm.qmp"

    [vnc]
    address = "127.0.0.1"
    port = 5901

    [[drives]]
    path = "/vm.qcow2"
    format = "qcow2"

    [[netdevs]]
    type = "user"
    id = "net0"

Tables are applied in document order, so [[drives]] and [[netdevs]] keep
the order they are written in.
"""

from __future__ import annotations

import os
import tomllib
from typing import Any

import tomli_w

from vmlaunch.errors import ManifestError
from vmlaunch.machine import Drive, Machine, NetDev

_KNOWN_KEYS = {"cores", "memory", "cdrom", "monitor", "vnc", "drives", "netdevs"}


def _require(table: Any, key: str, where: str) -> Any:
    if not isinstance(table, dict):
        raise ManifestError(f"{where}: expected a table")
    if key not in table:
        raise ManifestError(f"{where}: missing required key '{key}'")
    return table[key]


def _array(data: dict, key: str) -> list:
    value = data.get(key, [])
    if not isinstance(value, list):
        raise ManifestError(f"{key}: expected an array of tables")
    return value


def machine_from_dict(data: dict) -> Machine:
    """Build a Machine from parsed manifest data.

    Only the shape is checked. Values go through as given, so QEMU
    stays the judge of e.g. zero cores or duplicate netdev ids.
    """
    unknown = set(data) - _KNOWN_KEYS
    if unknown:
        raise ManifestError(f"Unknown manifest keys: {', '.join(sorted(unknown))}")

    machine = Machine(
        cores=_require(data, "cores", "manifest"),
        memory=_require(data, "memory", "manifest"),
    )

    if data.get("cdrom"):
        machine.attach_cdrom(data["cdrom"])

    for i, d in enumerate(_array(data, "drives")):
        where = f"drives[{i}]"
        machine.attach_drive(Drive(_require(d, "path", where), _require(d, "format", where)))

    for i, n in enumerate(_array(data, "netdevs")):
        where = f"netdevs[{i}]"
        machine.attach_netdev(
            NetDev(
                type=_require(n, "type", where),
                id=_require(n, "id", where),
                ifname=n.get("ifname", ""),
                mac=n.get("mac", ""),
            )
        )

    vnc = data.get("vnc")
    if vnc is not None:
        machine.attach_vnc(_require(vnc, "address", "vnc"), _require(vnc, "port", "vnc"))

    if data.get("monitor"):
        machine.attach_monitor(data["monitor"])

    return machine


def load_machine(path: str) -> Machine:
    """Read a manifest file into a Machine."""
    if not os.path.exists(path):
        raise ManifestError(f"Manifest not found: {path}")
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except (tomllib.TOMLDecodeError, UnicodeDecodeError) as e:
        raise ManifestError(f"Invalid manifest {path}: {e}") from e
    except OSError as e:
        raise ManifestError(f"Cannot read manifest {path}: {e.strerror or e}") from e
    return machine_from_dict(data)


def machine_to_dict(machine: Machine) -> dict:
    """Inverse of machine_from_dict(); unset resources are left out."""
    data: dict[str, Any] = {"cores": machine.cores, "memory": machine.memory}
    if machine.cdrom:
        data["cdrom"] = machine.cdrom
    if machine.monitor:
        data["monitor"] = machine.monitor
    if machine.vnc:
        address, _, port = machine.vnc.rpartition(":")
        data["vnc"] = {"address": address, "port": int(port)}
    if machine.drives:
        data["drives"] = [{"path": d.path, "format": d.format} for d in machine.drives]
    if machine.netdevs:
        netdevs = []
        for n in machine.netdevs:
            entry = {"type": n.type, "id": n.id}
            if n.ifname:
                entry["ifname"] = n.ifname
            if n.mac:
                entry["mac"] = n.mac
            netdevs.append(entry)
        data["netdevs"] = netdevs
    return data


def dump_machine(machine: Machine, path: str) -> None:
    """Write a Machine as a manifest file."""
    with open(path, "wb") as f:
        tomli_w.dump(machine_to_dict(machine), f)
