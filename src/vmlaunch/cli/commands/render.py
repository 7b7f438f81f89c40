"""vmlaunch render — print the QEMU command line for a manifest."""

from __future__ import annotations

import shlex

import click

from vmlaunch.cli.config import resolve_defaults
from vmlaunch.config import LauncherConfig
from vmlaunch.errors import VMLaunchError
from vmlaunch.launcher import render_command
from vmlaunch.manifest import load_machine


@click.command()
@click.argument("manifest", type=click.Path(dir_okay=False))
@click.option("--arch", default=None, help="Target architecture (e.g. x86_64, aarch64)")
@click.option("--kvm/--no-kvm", default=None, help="Enable KVM acceleration")
def render(manifest: str, arch: str | None, kvm: bool | None) -> None:
    """Print the command that `vmlaunch start` would run."""
    arch, kvm = resolve_defaults(arch, kvm)
    try:
        machine = load_machine(manifest)
    except VMLaunchError as e:
        raise click.ClickException(str(e))

    prefix = LauncherConfig.from_env().binary_prefix
    click.echo(shlex.join(render_command(machine, arch, kvm, prefix)))
