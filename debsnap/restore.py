"""Restore orchestration: apply a backup root back onto the live system."""

from pathlib import Path
from typing import List, Tuple

from debsnap.backup import EXTENSIONS_DEST, WALLPAPERS_DEST
from debsnap.config import Config
from debsnap.console import print_section, print_success
from debsnap.manifests import normalize_selections, parse_flatpak_ids, parse_snap_list
from debsnap.steps import (
    Artifact,
    Direction,
    Feed,
    InstallEach,
    Method,
    Restrict,
    Run,
    Step,
    StepOutcome,
    StepRunner,
    Sync,
)


def flatpak_commands(config: Config):
    def commands(text: str) -> List[Tuple[str, List[str]]]:
        return [
            (app, ["flatpak", "install", "-y", config.flatpak_remote, app])
            for app in parse_flatpak_ids(text)
        ]

    return commands


def snap_commands(config: Config):
    def commands(text: str) -> List[Tuple[str, List[str]]]:
        result = []
        for name, classic in parse_snap_list(text):
            argv = config.privileged("snap", "install", name)
            if classic:
                argv.append("--classic")
            result.append((name, argv))
        return result

    return commands


def _apply_step(name: str, description: str, artifact: Artifact, actions, after=None) -> Step:
    return Step(
        name=name,
        description=description,
        direction=Direction.APPLY,
        artifact=artifact,
        actions=actions,
        after=after,
    )


def _restore_tree(name: str, description: str, root: Path, dest: str, target: Path, optional: bool = False) -> Step:
    method = Method.FILE_COPY if optional else Method.DIRECTORY_SYNC
    artifact = Artifact(name, dest, method, source=target, optional=optional)
    return _apply_step(name, description, artifact, [Sync(root / dest, target)])


def restore_steps(config: Config) -> List[Step]:
    """
    Build the apply steps for one restore run.

    The APT step is declare-then-apply: the package index is refreshed and
    the selections declared before dselect-upgrade reconciles the system.
    The three commands run in that order inside a single step and are never
    reordered.
    """
    home, root = config.home, config.backup_root
    apt_list = root / "apt-packages.txt"
    steps = [
        _apply_step(
            "apt-packages",
            "APT packages",
            Artifact("apt-packages", "apt-packages.txt", Method.LIST_EXPORT),
            [
                Run(config.privileged("apt", "update")),
                Feed(config.privileged("dpkg", "--set-selections"), apt_list, normalize_selections),
                Run(config.privileged("apt-get", "dselect-upgrade", "-y")),
            ],
        ),
        _apply_step(
            "flatpak-packages",
            "Flatpak packages",
            Artifact("flatpak-packages", "flatpak-packages.txt", Method.LIST_EXPORT),
            [InstallEach(root / "flatpak-packages.txt", flatpak_commands(config), config.keep_going)],
            after="apt-packages",
        ),
        _apply_step(
            "snap-packages",
            "Snap packages",
            Artifact("snap-packages", "snap-packages.txt", Method.LIST_EXPORT),
            [InstallEach(root / "snap-packages.txt", snap_commands(config), config.keep_going)],
            after="apt-packages",
        ),
        _restore_tree(
            "gnome-extensions",
            "GNOME extensions",
            root,
            EXTENSIONS_DEST,
            home / config.extensions_dir,
        ),
        _apply_step(
            "dconf-settings",
            "GNOME settings",
            Artifact("dconf-settings", "dconf-settings.txt", Method.SETTINGS_DUMP),
            [Feed(["dconf", "load", "/"], root / "dconf-settings.txt")],
            after="gnome-extensions",
        ),
    ]
    for dotfile in config.dotfiles:
        steps.append(_restore_tree(f"dotfile:{dotfile}", dotfile, root, dotfile, home / dotfile, optional=True))
    steps.append(
        _restore_tree("face", "user picture", root, config.face_file, home / config.face_file, optional=True)
    )
    for directory in config.credential_dirs:
        step = _restore_tree(directory.lstrip("."), f"{directory} directory", root, directory, home / directory)
        step.actions.append(Restrict(home / directory))
        steps.append(step)
    for directory in config.user_dirs:
        dest = Path(directory).name
        steps.append(_restore_tree(f"dir:{directory}", f"~/{directory}", root, dest, home / directory))
    steps.append(_restore_tree("wallpapers", "wallpapers", root, WALLPAPERS_DEST, home / config.wallpaper_dir))
    return steps


def run_restore(config: Config, runner: StepRunner) -> List[StepOutcome]:
    print_section("System Restore")
    outcomes = runner.run(restore_steps(config))
    if config.dry_run:
        print_success("Restore plan complete; nothing was changed.")
    else:
        print_success("Restore complete.")
    return outcomes
