"""vmlaunch new — write a machine manifest from flags."""

from __future__ import annotations

import os

import click

from vmlaunch.machine import Drive, Machine, NetDev
from vmlaunch.manifest import dump_machine


def _parse_pair(value: str, what: str) -> tuple[str, str]:
    """Split 'a:b' on the last colon ('a' may itself contain colons)."""
    left, sep, right = value.rpartition(":")
    if not sep or not left or not right:
        raise click.BadParameter(f"expected {what}, got '{value}'")
    return left, right


@click.command()
@click.argument("manifest", type=click.Path(dir_okay=False))
@click.option("--cores", "-c", default=1, type=int, help="Number of vCPUs")
@click.option("--memory", "-m", default=512, type=int, help="RAM in megabytes")
@click.option("--cdrom", default="", help="CD-ROM image path")
@click.option("--drive", "drives", multiple=True, help="Hard drive as PATH:FORMAT (repeatable)")
@click.option("--netdev", "netdevs", multiple=True, help="Network backend as TYPE:ID (repeatable)")
@click.option("--vnc", default="", help="VNC endpoint as ADDRESS:PORT")
@click.option("--monitor", default="", help="QMP unix socket path")
@click.option("--force", is_flag=True, help="Overwrite an existing manifest")
def new(
    manifest: str,
    cores: int,
    memory: int,
    cdrom: str,
    drives: tuple[str, ...],
    netdevs: tuple[str, ...],
    vnc: str,
    monitor: str,
    force: bool,
) -> None:
    """Create a machine manifest."""
    if os.path.exists(manifest) and not force:
        raise click.ClickException(f"{manifest} already exists (use --force to overwrite)")

    machine = Machine(cores, memory)
    if cdrom:
        machine.attach_cdrom(cdrom)
    for value in drives:
        path, fmt = _parse_pair(value, "PATH:FORMAT")
        machine.attach_drive(Drive(path, fmt))
    for value in netdevs:
        kind, _, net_id = value.partition(":")
        if not kind or not net_id:
            raise click.BadParameter(f"expected TYPE:ID, got '{value}'")
        machine.attach_netdev(NetDev(kind, net_id))
    if vnc:
        address, port = _parse_pair(vnc, "ADDRESS:PORT")
        if not port.isdigit():
            raise click.BadParameter(f"VNC port must be a number, got '{port}'")
        machine.attach_vnc(address, int(port))
    if monitor:
        machine.attach_monitor(monitor)

    dump_machine(machine, manifest)
    click.echo(f"Wrote {manifest}")
