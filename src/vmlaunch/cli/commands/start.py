"""vmlaunch start — launch a manifest and stay attached until the VM exits."""

from __future__ import annotations

import asyncio

import click

from vmlaunch.cli.config import resolve_defaults
from vmlaunch.config import LauncherConfig
from vmlaunch.errors import VMLaunchError
from vmlaunch.launcher import binary_name, start_machine
from vmlaunch.machine import Machine
from vmlaunch.manifest import load_machine


@click.command()
@click.argument("manifest", type=click.Path(dir_okay=False))
@click.option("--arch", default=None, help="Target architecture (e.g. x86_64, aarch64)")
@click.option("--kvm/--no-kvm", default=None, help="Enable KVM acceleration")
@click.option("--grace", default=None, type=float, help="Seconds QEMU has to fail before it counts as started")
@click.option("--log-file", default=None, help="Append QEMU output to this file")
def start(
    manifest: str,
    arch: str | None,
    kvm: bool | None,
    grace: float | None,
    log_file: str | None,
) -> None:
    """Start a machine and wait for it to exit (Ctrl+C stops it)."""
    arch, kvm = resolve_defaults(arch, kvm)
    config = LauncherConfig.from_env()
    config.arch = arch
    config.kvm = kvm
    if grace is not None:
        config.grace_period = grace
    if log_file is not None:
        config.stdout_path = log_file

    try:
        machine = load_machine(manifest)
        returncode = asyncio.run(_run(machine, config))
    except VMLaunchError as e:
        raise click.ClickException(str(e))

    if returncode != 0:
        raise click.ClickException(
            f"'{binary_name(arch, config.binary_prefix)}' exited with status {returncode}"
        )


async def _run(machine: Machine, config: LauncherConfig) -> int:
    proc = await start_machine(machine, config.arch, config.kvm, config=config)
    click.echo(f"Started {binary_name(config.arch, config.binary_prefix)} (pid {proc.pid})")

    # The VM runs in its own session, so Ctrl+C only reaches us; pass it on.
    try:
        return await proc.wait()
    finally:
        if proc.returncode is None:
            proc.terminate()
            await proc.wait()
