"""vmlaunch configure — store default launch settings."""

from __future__ import annotations

import click

from vmlaunch.cli.config import load_config, save_config


@click.command()
@click.option("--arch", default=None, help="Default target architecture")
@click.option("--kvm/--no-kvm", default=None, help="Enable KVM by default")
def configure(arch: str | None, kvm: bool | None) -> None:
    """Save defaults used when --arch/--kvm are not given."""
    cfg = load_config()
    if arch is not None:
        cfg["arch"] = arch
    if kvm is not None:
        cfg["kvm"] = kvm

    save_config(cfg)
    for key in sorted(cfg):
        click.echo(f"{key} = {cfg[key]}")
