"""Backup orchestration: the fixed list of capture steps."""

from pathlib import Path
from typing import List

from debsnap.config import Config
from debsnap.console import print_section, print_step, print_success
from debsnap.errors import ActionFailureError
from debsnap.steps import Artifact, Direction, Export, Method, Step, StepOutcome, StepRunner, Sync

# (step name, description, backup file, command)
LIST_EXPORTS = [
    ("apt-packages", "APT packages", "apt-packages.txt", ["dpkg", "--get-selections"]),
    (
        "flatpak-packages",
        "Flatpak packages",
        "flatpak-packages.txt",
        ["flatpak", "list", "--app", "--columns=application"],
    ),
    ("snap-packages", "Snap packages", "snap-packages.txt", ["snap", "list"]),
    ("dconf-settings", "GNOME settings", "dconf-settings.txt", ["dconf", "dump", "/"]),
]

# Captured after the file trees, matching the order a user reads the backup.
TRAILING_EXPORTS = [
    ("pip-packages", "pip user packages", "pip-packages.txt", ["pip", "list", "--user"]),
    ("npm-packages", "npm global packages", "npm-packages.txt", ["npm", "list", "-g", "--depth=0"]),
    (
        "systemd-user-units",
        "systemd user units",
        "systemd-user-units.txt",
        ["systemctl", "--user", "list-units", "--type=service", "--all"],
    ),
]

EXTENSIONS_DEST = "gnome_extensions"
WALLPAPERS_DEST = "Wallpapers"


def _export_step(config: Config, name: str, description: str, filename: str, argv: List[str]) -> Step:
    method = Method.SETTINGS_DUMP if name == "dconf-settings" else Method.LIST_EXPORT
    artifact = Artifact(name, filename, method)
    return Step(
        name=name,
        description=description,
        direction=Direction.CAPTURE,
        artifact=artifact,
        actions=[Export(argv, config.backup_root / filename)],
    )


def _sync_step(name: str, description: str, source: Path, dest_root: Path, dest: str, optional: bool = False) -> Step:
    method = Method.FILE_COPY if optional else Method.DIRECTORY_SYNC
    artifact = Artifact(name, dest, method, source=source, optional=optional)
    return Step(
        name=name,
        description=description,
        direction=Direction.CAPTURE,
        artifact=artifact,
        actions=[Sync(source, dest_root / dest)],
    )


def backup_steps(config: Config) -> List[Step]:
    """
    Build the capture steps for one backup run.

    None of the steps read another step's output, so every step is
    independent; the order only groups related artifacts in the output.
    """
    home, root = config.home, config.backup_root
    steps = [_export_step(config, *entry) for entry in LIST_EXPORTS]
    steps.append(
        _sync_step(
            "gnome-extensions",
            "GNOME extensions",
            home / config.extensions_dir,
            root,
            EXTENSIONS_DEST,
        )
    )
    for dotfile in config.dotfiles:
        steps.append(_sync_step(f"dotfile:{dotfile}", dotfile, home / dotfile, root, dotfile, optional=True))
    steps.append(
        _sync_step("face", "user picture", home / config.face_file, root, config.face_file, optional=True)
    )
    for directory in config.credential_dirs:
        steps.append(_sync_step(directory.lstrip("."), f"{directory} directory", home / directory, root, directory))
    for directory in config.user_dirs:
        dest = Path(directory).name
        steps.append(_sync_step(f"dir:{directory}", f"~/{directory}", home / directory, root, dest))
    steps.append(_sync_step("wallpapers", "wallpapers", home / config.wallpaper_dir, root, WALLPAPERS_DEST))
    steps.extend(_export_step(config, *entry) for entry in TRAILING_EXPORTS)
    return steps


def run_backup(config: Config, runner: StepRunner) -> List[StepOutcome]:
    print_section("System Backup")
    print_step(f"Creating backup at {config.backup_root}...")
    if not config.dry_run:
        try:
            config.backup_root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ActionFailureError(f"Failed to create backup directory {config.backup_root}: {e}")
    outcomes = runner.run(backup_steps(config))
    if config.dry_run:
        print_success("Backup plan complete; nothing was written.")
    else:
        print_success("Backup complete.")
    return outcomes
