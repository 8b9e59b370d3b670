from pathlib import Path

from debsnap.config import Config


def test_backup_root_defaults_under_home(tmp_path):
    config = Config(home=tmp_path, sudo=[])
    assert config.backup_root == tmp_path / "system_backup"
    assert config.log_file == tmp_path / "system_backup" / "backup_restore.log"


def test_from_env_reads_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("DEBSNAP_HOME", str(tmp_path / "home"))
    monkeypatch.setenv("DEBSNAP_BACKUP_DIR", str(tmp_path / "snap"))
    monkeypatch.setenv("LOG_LEVEL", "debug")
    config = Config.from_env()
    assert config.home == tmp_path / "home"
    assert config.backup_root == tmp_path / "snap"
    assert config.log_level == "DEBUG"


def test_explicit_values_beat_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("DEBSNAP_BACKUP_DIR", str(tmp_path / "env"))
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    config = Config.from_env(backup_root=Path(tmp_path / "flag"), log_level=None)
    assert config.backup_root == tmp_path / "flag"
    assert config.log_level == "INFO"


def test_privileged_prefixes_sudo(tmp_path):
    assert Config(home=tmp_path, sudo=["sudo"]).privileged("apt", "update") == ["sudo", "apt", "update"]
    assert Config(home=tmp_path, sudo=[]).privileged("apt", "update") == ["apt", "update"]
