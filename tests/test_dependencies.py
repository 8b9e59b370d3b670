import pytest

from conftest import FakeTools
from debsnap.config import REQUIRED_TOOLS
from debsnap.dependencies import DependencyChecker
from debsnap.errors import MissingDependencyError


def test_all_present_installs_nothing(config):
    tools = FakeTools()
    installed = DependencyChecker(config, tools).ensure()
    assert installed == []
    assert tools.calls == []


def test_all_absent_installs_each_once(config):
    tools = FakeTools(present=[])
    installed = DependencyChecker(config, tools).ensure()
    expected = [["apt", "install", "-y", package] for package in REQUIRED_TOOLS.values()]
    assert tools.calls == expected
    assert installed == list(REQUIRED_TOOLS.values())
    assert "python3-pip" in installed
    assert "dconf-cli" in installed
    assert "pip" not in installed


def test_install_uses_sudo_prefix(config):
    config.sudo = ["sudo"]
    tools = FakeTools(present=set(REQUIRED_TOOLS) - {"pip"})
    DependencyChecker(config, tools).ensure()
    assert tools.calls == [["sudo", "apt", "install", "-y", "python3-pip"]]


def test_failed_install_is_fatal(config):
    tools = FakeTools(present=set(REQUIRED_TOOLS) - {"flatpak", "rsync"}, fail=[("apt", "install", "-y", "flatpak")])
    with pytest.raises(MissingDependencyError, match="flatpak"):
        DependencyChecker(config, tools).ensure()
    # rsync is never attempted once flatpak fails.
    assert tools.calls == [["apt", "install", "-y", "flatpak"]]


def test_dry_run_reports_without_installing(config):
    config.dry_run = True
    tools = FakeTools(present=[])
    checker = DependencyChecker(config, tools)
    assert checker.missing() == list(REQUIRED_TOOLS)
    assert checker.ensure() == []
    assert tools.calls == []
