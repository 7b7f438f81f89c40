"""CLI config — reads/writes ~/.vmlaunch/config.toml."""

from __future__ import annotations

import os
import stat
import tomllib

import click
import tomli_w

from vmlaunch.config import LauncherConfig


CONFIG_DIR = os.path.expanduser("~/.vmlaunch")
CONFIG_PATH = os.path.join(CONFIG_DIR, "config.toml")


def load_config() -> dict:
    """Load the CLI config file, returning {} if it doesn't exist.

    A config file that can't be read or parsed aborts the command with a
    message pointing at it, rather than a traceback.
    """
    if not os.path.exists(CONFIG_PATH):
        return {}
    try:
        with open(CONFIG_PATH, "rb") as f:
            return tomllib.load(f)
    except (tomllib.TOMLDecodeError, UnicodeDecodeError, OSError) as e:
        raise click.ClickException(f"Invalid config file {CONFIG_PATH}: {e}") from e


def save_config(data: dict) -> None:
    """Write the CLI config file with restricted permissions (0600)."""
    os.makedirs(CONFIG_DIR, exist_ok=True)
    with open(CONFIG_PATH, "wb") as f:
        tomli_w.dump(data, f)
    os.chmod(CONFIG_PATH, stat.S_IRUSR | stat.S_IWUSR)


def resolve_defaults(arch: str | None, kvm: bool | None) -> tuple[str, bool]:
    """Fill in arch/kvm not given on the command line.

    Precedence: flag, then config file, then VMLAUNCH_* environment.
    """
    cfg = load_config()
    env = LauncherConfig.from_env()
    if arch is None:
        arch = cfg.get("arch", env.arch)
    if kvm is None:
        kvm = bool(cfg.get("kvm", env.kvm))
    return arch, kvm
