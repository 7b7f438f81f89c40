"""QEMU process launching.

Turns a Machine into a qemu-system-<arch> command line and starts it:

    Machine
        └── render_args()      – ordered QEMU flags (pure, deterministic)
                └── start_machine()
                        ├── spawn in a new session (survives the caller's terminal)
                        ├── background task awaiting exit → single-use future
                        └── grace period, then one non-blocking look at the future

The grace period only catches QEMU refusing to start (bad flags, missing image,
KVM unavailable). Anything that dies later is the caller's business: the
returned process handle is theirs to wait on, signal and reap.
"""

from __future__ import annotations

import asyncio
import logging
import shlex

from vmlaunch.config import LauncherConfig
from vmlaunch.errors import EarlyExitError, SpawnError, VMLaunchError
from vmlaunch.machine import Machine

logger = logging.getLogger(__name__)

# Guest NIC model every netdev is bound to.
NET_DEVICE_MODEL = "virtio-net"

# Exit watchers outlive start_machine(); hold a reference until each finishes.
_watchers: set[asyncio.Task] = set()


def binary_name(arch: str, prefix: str = "qemu-system") -> str:
    return f"{prefix}-{arch}"


def render_args(machine: Machine, kvm: bool = False) -> list[str]:
    """Render a Machine into QEMU arguments.

    The order is fixed: sizing, KVM, CD-ROM, drives, network, VNC, QMP.
    Rendering the same machine twice yields the same list.
    """
    args = ["-smp", str(machine.cores), "-m", str(machine.memory)]

    if kvm:
        args.append("-enable-kvm")

    if machine.cdrom:
        args += ["-cdrom", machine.cdrom]

    for drive in machine.drives:
        args += ["-drive", f"file={drive.path},format={drive.format}"]

    netdevs = machine.netdevs
    if not netdevs:
        # Without this QEMU would attach its default user-mode NIC.
        args += ["-net", "none"]

    for netdev in netdevs:
        backend = f"{netdev.type},id={netdev.id}"
        if netdev.ifname:
            backend += f",ifname={netdev.ifname}"

        device = f"{NET_DEVICE_MODEL},netdev={netdev.id}"
        if netdev.mac:
            device += f",mac={netdev.mac}"

        args += ["-netdev", backend, "-device", device]

    if machine.vnc:
        args += ["-vnc", machine.vnc]

    if machine.monitor:
        args += ["-qmp", f"unix:{machine.monitor},server,nowait"]

    return args


def render_command(
    machine: Machine,
    arch: str,
    kvm: bool = False,
    prefix: str = "qemu-system",
) -> list[str]:
    """Full argv: the qemu-system binary followed by render_args()."""
    return [binary_name(arch, prefix), *render_args(machine, kvm)]


async def _watch_exit(
    proc: asyncio.subprocess.Process,
    arch: str,
    binary: str,
    errc: asyncio.Future,
) -> None:
    """Wait for QEMU to exit and report an abnormal exit on errc.

    A clean exit leaves errc unset. errc is only ever written here.
    """
    returncode = await proc.wait()
    logger.info("%s (pid %d) exited with %d", binary, proc.pid, returncode)
    if returncode != 0 and not errc.done():
        errc.set_result(EarlyExitError(arch, binary, returncode))


async def start_machine(
    machine: Machine,
    arch: str,
    kvm: bool = False,
    *,
    config: LauncherConfig | None = None,
) -> asyncio.subprocess.Process:
    """Start QEMU for a machine and return the running process.

    1. Render the command line for arch.
    2. Spawn it in its own session, so signals aimed at the caller's
       terminal (Ctrl+C, hangup) don't reach the VM.
    3. Watch for exit in a background task.
    4. Sleep for the grace period, then check once whether QEMU already failed.

    arch and kvm always come from the arguments. From config only the binary
    prefix, grace period and stdout_path are used; its arch and kvm fields are
    defaults for the CLI.

    Raises SpawnError if the binary can't be executed, VMLaunchError if the
    log file can't be opened, and EarlyExitError if QEMU exits non-zero
    within the grace period. Later exits are not reported.
    """
    config = config or LauncherConfig()
    cmd = render_command(machine, arch, kvm, config.binary_prefix)
    binary = cmd[0]
    logger.debug("Launching: %s", shlex.join(cmd))

    out = None
    if config.stdout_path:
        try:
            out = open(config.stdout_path, "ab")
        except OSError as e:
            raise VMLaunchError(
                f"cannot open log file {config.stdout_path}: {e.strerror or e}"
            ) from e

    try:
        proc = await asyncio.create_subprocess_exec(
            *cmd,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=out if out is not None else asyncio.subprocess.DEVNULL,
            stderr=asyncio.subprocess.STDOUT if out is not None else asyncio.subprocess.DEVNULL,
            start_new_session=True,
        )
    except OSError as e:
        raise SpawnError(binary, e.strerror or str(e)) from e
    finally:
        # The child keeps its own copy of the descriptor.
        if out is not None:
            out.close()

    logger.info("Started %s (pid %d)", binary, proc.pid)

    errc: asyncio.Future = asyncio.get_running_loop().create_future()
    watcher = asyncio.create_task(_watch_exit(proc, arch, binary, errc))
    _watchers.add(watcher)
    watcher.add_done_callback(_watchers.discard)

    await asyncio.sleep(config.grace_period)

    if errc.done():
        raise errc.result()

    return proc
