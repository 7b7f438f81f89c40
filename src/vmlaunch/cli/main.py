"""vmlaunch CLI — render and start QEMU machines from TOML manifests."""

from __future__ import annotations

import logging

import click

from vmlaunch.cli.commands.configure import configure
from vmlaunch.cli.commands.new import new
from vmlaunch.cli.commands.render import render
from vmlaunch.cli.commands.start import start


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Log launcher activity to stderr")
def cli(verbose: bool) -> None:
    """vmlaunch — start QEMU virtual machines without hand-written command lines."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(name)s %(levelname)s %(message)s",
    )


# Register subcommands
cli.add_command(new)
cli.add_command(render)
cli.add_command(start)
cli.add_command(configure)
