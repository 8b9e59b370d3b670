"""Parsers for the package manifests that restore reads back."""

from typing import List, Tuple

from debsnap.console import print_warning

SELECTION_STATES = ("install", "hold", "deinstall", "purge")


def parse_selections(text: str) -> List[Tuple[str, str]]:
    """
    Parse `dpkg --get-selections` output into (package, state) pairs.

    Blank lines and comments are ignored. Lines that do not have exactly a
    package and a known state are reported and dropped so a damaged line
    cannot poison the whole declaration.
    """
    selections = []
    for number, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        fields = line.split()
        if len(fields) != 2 or fields[1] not in SELECTION_STATES:
            print_warning(f"Ignoring malformed selection on line {number}: {line!r}")
            continue
        selections.append((fields[0], fields[1]))
    return selections


def format_selections(selections: List[Tuple[str, str]]) -> str:
    return "".join(f"{package}\t{state}\n" for package, state in selections)


def normalize_selections(text: str) -> str:
    return format_selections(parse_selections(text))


def parse_flatpak_ids(text: str) -> List[str]:
    """One application identifier per line, as written by `flatpak list --columns=application`."""
    ids = []
    for raw in text.splitlines():
        line = raw.strip()
        if not line or line.startswith("#") or line == "Application ID":
            continue
        ids.append(line.split()[0])
    return ids


def parse_snap_list(text: str) -> List[Tuple[str, bool]]:
    """
    Parse the `snap list` table into (name, classic) pairs.

    The first row is the column header. The last column holds comma separated
    notes; a `classic` note means the snap needs confinement relaxed on install.
    """
    snaps = []
    for raw in text.splitlines():
        fields = raw.split()
        if not fields or fields[0] == "Name":
            continue
        notes = fields[-1].split(",") if len(fields) > 1 else []
        snaps.append((fields[0], "classic" in notes))
    return snaps
