"""Run configuration passed to the dependency checker and both orchestrators."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

LOG_FILE_NAME = "backup_restore.log"
LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Command name -> apt package providing it.
REQUIRED_TOOLS: Dict[str, str] = {
    "dpkg": "dpkg",
    "flatpak": "flatpak",
    "snap": "snapd",
    "pip": "python3-pip",
    "npm": "npm",
    "dconf": "dconf-cli",
    "rsync": "rsync",
}


def _default_sudo() -> List[str]:
    return [] if os.geteuid() == 0 else ["sudo"]


@dataclass
class Config:
    home: Path = field(default_factory=Path.home)
    backup_root: Optional[Path] = None
    dry_run: bool = False
    keep_going: bool = False
    log_level: str = "INFO"
    flatpak_remote: str = "flathub"
    sudo: List[str] = field(default_factory=_default_sudo)
    required_tools: Dict[str, str] = field(
        default_factory=lambda: dict(REQUIRED_TOOLS)
    )
    dotfiles: List[str] = field(
        default_factory=lambda: [
            ".bashrc",
            ".zshrc",
            ".profile",
            ".bash_aliases",
            ".gitconfig",
            ".tmux.conf",
            ".vimrc",
            ".inputrc",
        ]
    )
    face_file: str = ".face"
    credential_dirs: List[str] = field(default_factory=lambda: [".ssh", ".gnupg"])
    user_dirs: List[str] = field(
        default_factory=lambda: [
            ".icons",
            ".themes",
            ".fonts",
            ".local/share/applications",
            ".config",
            ".config/autostart",
            ".config/gtk-3.0",
            ".config/gtk-4.0",
        ]
    )
    extensions_dir: str = ".local/share/gnome-shell/extensions"
    wallpaper_dir: str = "Pictures/Wallpaper"

    def __post_init__(self):
        self.home = Path(self.home).expanduser()
        if self.backup_root is None:
            self.backup_root = self.home / "system_backup"
        self.backup_root = Path(self.backup_root).expanduser()
        self.log_level = self.log_level.upper()

    @classmethod
    def from_env(cls, **overrides) -> "Config":
        """Build a Config from DEBSNAP_HOME, DEBSNAP_BACKUP_DIR and LOG_LEVEL."""
        values = {}
        if os.environ.get("DEBSNAP_HOME"):
            values["home"] = Path(os.environ["DEBSNAP_HOME"])
        if os.environ.get("DEBSNAP_BACKUP_DIR"):
            values["backup_root"] = Path(os.environ["DEBSNAP_BACKUP_DIR"])
        if os.environ.get("LOG_LEVEL"):
            values["log_level"] = os.environ["LOG_LEVEL"]
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

    @property
    def log_file(self) -> Path:
        return self.backup_root / LOG_FILE_NAME

    def privileged(self, *argv: str) -> List[str]:
        return [*self.sudo, *argv]
