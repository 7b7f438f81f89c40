"""Tests for TOML machine manifests."""

import pytest

from vmlaunch.errors import ManifestError
from vmlaunch.launcher import render_args
from vmlaunch.machine import Drive, Machine, NetDev
from vmlaunch.manifest import dump_machine, load_machine, machine_from_dict, machine_to_dict

MANIFEST = """\
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

[[drives]]
path = "/data.raw"
format = "raw"

[[netdevs]]
type = "tap"
id = "net0"
ifname = "tap0"
mac = "52:54:00:12:34:56"
"""


def test_load_machine(tmp_path):
    path = tmp_path / "vm.toml"
    path.write_text(MANIFEST)

    machine = load_machine(str(path))
    assert machine.cores == 2
    assert machine.memory == 1024
    assert machine.cdrom == "/isos/install.iso"
    assert machine.monitor == "/run/vm.qmp"
    assert machine.vnc == "127.0.0.1:5901"
    assert machine.drives == [Drive("/vm.qcow2", "qcow2"), Drive("/data.raw", "raw")]
    assert machine.netdevs == [NetDev("tap", "net0", ifname="tap0", mac="52:54:00:12:34:56")]


def test_minimal_manifest_renders_without_network():
    machine = machine_from_dict({"cores": 1, "memory": 256})
    assert render_args(machine) == ["-smp", "1", "-m", "256", "-net", "none"]


def test_missing_sizing_is_rejected():
    with pytest.raises(ManifestError, match="'memory'"):
        machine_from_dict({"cores": 1})


def test_incomplete_drive_is_rejected():
    with pytest.raises(ManifestError, match=r"drives\[0\].*'format'"):
        machine_from_dict({"cores": 1, "memory": 256, "drives": [{"path": "/vm.qcow2"}]})


def test_incomplete_netdev_is_rejected():
    with pytest.raises(ManifestError, match=r"netdevs\[1\].*'id'"):
        machine_from_dict(
            {
                "cores": 1,
                "memory": 256,
                "netdevs": [{"type": "user", "id": "net0"}, {"type": "user"}],
            }
        )


def test_unknown_keys_are_rejected():
    with pytest.raises(ManifestError, match="smp"):
        machine_from_dict({"cores": 1, "memory": 256, "smp": 4})


def test_missing_file(tmp_path):
    with pytest.raises(ManifestError, match="not found"):
        load_machine(str(tmp_path / "nope.toml"))


def test_invalid_toml(tmp_path):
    path = tmp_path / "broken.toml"
    path.write_text("cores = \n")
    with pytest.raises(ManifestError, match="Invalid manifest"):
        load_machine(str(path))


def test_invalid_utf8(tmp_path):
    path = tmp_path / "latin1.toml"
    path.write_bytes(b'cores = 1\nmemory = 128\ncdrom = "\xff"\n')
    with pytest.raises(ManifestError, match="Invalid manifest"):
        load_machine(str(path))


def test_unreadable_manifest(tmp_path):
    # A directory exists but can't be opened as a file
    with pytest.raises(ManifestError, match="Cannot read manifest"):
        load_machine(str(tmp_path))


@pytest.mark.parametrize(
    "data, message",
    [
        ({"drives": [1]}, r"drives\[0\]: expected a table"),
        ({"netdevs": ["x"]}, r"netdevs\[0\]: expected a table"),
        ({"vnc": 5}, "vnc: expected a table"),
        ({"vnc": "address"}, "vnc: expected a table"),
        ({"drives": {"path": "/vm.qcow2", "format": "qcow2"}}, "drives: expected an array"),
        ({"netdevs": "user"}, "netdevs: expected an array"),
    ],
)
def test_wrongly_shaped_entries_are_rejected(data, message):
    with pytest.raises(ManifestError, match=message):
        machine_from_dict({"cores": 1, "memory": 256, **data})


def test_machine_to_dict_omits_unset_fields():
    machine = Machine(1, 512)
    machine.attach_netdev(NetDev("user", "net0"))
    assert machine_to_dict(machine) == {
        "cores": 1,
        "memory": 512,
        "netdevs": [{"type": "user", "id": "net0"}],
    }


def test_dump_then_load_renders_identically(tmp_path):
    path = tmp_path / "vm.toml"
    path.write_text(MANIFEST)
    original = load_machine(str(path))

    copy_path = tmp_path / "copy.toml"
    dump_machine(original, str(copy_path))
    assert render_args(load_machine(str(copy_path)), kvm=True) == render_args(original, kvm=True)
