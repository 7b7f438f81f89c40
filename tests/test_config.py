"""Tests for configuration."""

from vmlaunch.config import LauncherConfig


def test_config_defaults():
    config = LauncherConfig()
    assert config.arch == "x86_64"
    assert config.kvm is False
    assert config.binary_prefix == "qemu-system"
    assert config.grace_period == 0.05
    assert config.stdout_path == ""


def test_config_from_env(monkeypatch):
    monkeypatch.setenv("VMLAUNCH_ARCH", "aarch64")
    monkeypatch.setenv("VMLAUNCH_KVM", "yes")
    monkeypatch.setenv("VMLAUNCH_BINARY_PREFIX", "/opt/qemu/bin/qemu-system")
    monkeypatch.setenv("VMLAUNCH_GRACE_PERIOD", "0.2")
    monkeypatch.setenv("VMLAUNCH_LOG_FILE", "/tmp/qemu.log")

    config = LauncherConfig.from_env()
    assert config.arch == "aarch64"
    assert config.kvm is True
    assert config.binary_prefix == "/opt/qemu/bin/qemu-system"
    assert config.grace_period == 0.2
    assert config.stdout_path == "/tmp/qemu.log"


def test_kvm_env_flag_is_false_unless_truthy(monkeypatch):
    monkeypatch.setenv("VMLAUNCH_KVM", "0")
    assert LauncherConfig.from_env().kvm is False

    monkeypatch.delenv("VMLAUNCH_KVM")
    assert LauncherConfig.from_env().kvm is False
