"""
Declarative step model and the generic runner that executes it.

A Step binds one Artifact to a direction (capture or apply) and an ordered
list of Actions. The runner checks preconditions, executes the actions (or
only lists them in dry-run mode) and records one StepOutcome per step. Any
ActionFailureError aborts the run.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple

from debsnap.config import Config
from debsnap.console import print_error, print_message, print_step, print_success, print_warning, transcript
from debsnap.errors import ActionFailureError, SourceAbsentError, StepOrderError
from debsnap.tools import Tools


# ----------------------------------------------------------------
# Data Structures
# ----------------------------------------------------------------
class Direction(str, Enum):
    CAPTURE = "capture"
    APPLY = "apply"


class Method(str, Enum):
    LIST_EXPORT = "list-export"
    SETTINGS_DUMP = "settings-dump"
    FILE_COPY = "file-copy"
    DIRECTORY_SYNC = "directory-sync"


class StepStatus(str, Enum):
    DONE = "done"
    SKIPPED = "skipped"
    PLANNED = "planned"
    FAILED = "failed"


@dataclass
class Artifact:
    """One captured state category and where it lives inside the backup root."""

    name: str
    destination: str
    method: Method
    source: Optional[Path] = None
    optional: bool = False


@dataclass
class StepOutcome:
    name: str
    status: StepStatus
    message: str = ""


# ----------------------------------------------------------------
# Actions
# ----------------------------------------------------------------
class Action:
    """A single external effect. execute() returns per-item failures, if any."""

    def plan(self) -> List[str]:
        raise NotImplementedError

    def execute(self, tools: Tools) -> List[str]:
        raise NotImplementedError


def _join(argv: Sequence[str]) -> str:
    return " ".join(str(a) for a in argv)


@dataclass
class Export(Action):
    argv: List[str]
    dest: Path

    def plan(self) -> List[str]:
        return [f"{_join(self.argv)} > {self.dest}"]

    def execute(self, tools: Tools) -> List[str]:
        tools.export(self.argv, self.dest)
        return []


@dataclass
class Feed(Action):
    """Pipe a backed-up file, optionally rewritten by transform, into a command."""

    argv: List[str]
    source: Path
    transform: Optional[Callable[[str], str]] = None

    def plan(self) -> List[str]:
        return [f"{_join(self.argv)} < {self.source}"]

    def execute(self, tools: Tools) -> List[str]:
        data = Path(self.source).read_text(encoding="utf-8", errors="surrogateescape")
        if self.transform:
            data = self.transform(data)
        tools.apply(self.argv, data)
        return []


@dataclass
class Run(Action):
    argv: List[str]

    def plan(self) -> List[str]:
        return [_join(self.argv)]

    def execute(self, tools: Tools) -> List[str]:
        output = tools.run(self.argv)
        for line in output.splitlines():
            transcript().debug(f"[{self.argv[0]}] {line}")
        return []


@dataclass
class Sync(Action):
    source: Path
    dest: Path

    def plan(self) -> List[str]:
        return [f"sync {self.source} -> {self.dest}"]

    def execute(self, tools: Tools) -> List[str]:
        tools.sync(self.source, self.dest)
        return []


@dataclass
class InstallEach(Action):
    """
    Install items one at a time from a manifest.

    commands() turns the manifest text into (item, argv) pairs. The first
    failing item aborts the run unless keep_going is set, in which case the
    failures are collected and returned.
    """

    source: Path
    commands: Callable[[str], List[Tuple[str, List[str]]]]
    keep_going: bool = False

    def _items(self) -> List[Tuple[str, List[str]]]:
        return self.commands(Path(self.source).read_text(encoding="utf-8"))

    def plan(self) -> List[str]:
        if not Path(self.source).is_file():
            return [f"install each entry listed in {self.source}"]
        return [_join(argv) for _, argv in self._items()]

    def execute(self, tools: Tools) -> List[str]:
        failed = []
        for item, argv in self._items():
            try:
                output = tools.run(argv)
            except ActionFailureError as e:
                if not self.keep_going:
                    raise ActionFailureError(f"Failed to install {item}: {e}", e.returncode)
                print_warning(f"Failed to install {item}; continuing.")
                failed.append(item)
                continue
            for line in output.splitlines():
                transcript().debug(f"[{argv[0]}] {line}")
            print_success(f"Installed {item}")
        return failed


@dataclass
class Restrict(Action):
    path: Path

    def plan(self) -> List[str]:
        return [f"chmod 700 dirs / 600 files under {self.path}"]

    def execute(self, tools: Tools) -> List[str]:
        tools.restrict(self.path)
        return []


# ----------------------------------------------------------------
# Steps
# ----------------------------------------------------------------
@dataclass
class Step:
    """
    An ordered unit of work for one artifact.

    `after` names a step that must have run earlier in the same list; None
    marks the step as independent of every other step.
    """

    name: str
    description: str
    direction: Direction
    artifact: Artifact
    actions: List[Action] = field(default_factory=list)
    after: Optional[str] = None


def validate_order(steps: Sequence[Step]) -> None:
    seen = set()
    for i, step in enumerate(steps):
        if step.name in seen:
            raise StepOrderError(f"Duplicate step name {step.name!r} at index {i}")
        if step.after is not None and step.after not in seen:
            raise StepOrderError(
                f"Step {step.name!r} must follow {step.after!r}, which does not precede it"
            )
        seen.add(step.name)


class StepRunner:
    """Executes steps in order and keeps the outcome of each one."""

    def __init__(self, tools: Tools, config: Config):
        self.tools = tools
        self.config = config
        self.outcomes: List[StepOutcome] = []

    def run(self, steps: Sequence[Step]) -> List[StepOutcome]:
        validate_order(steps)
        for step in steps:
            self.run_step(step)
        return self.outcomes

    def _record(self, step: Step, status: StepStatus, message: str = "") -> StepOutcome:
        outcome = StepOutcome(step.name, status, message)
        self.outcomes.append(outcome)
        return outcome

    def check_preconditions(self, step: Step) -> None:
        """Raise SourceAbsentError when the step has nothing to work from."""
        artifact = step.artifact
        if step.direction is Direction.CAPTURE:
            if artifact.optional and artifact.source is not None and not artifact.source.exists():
                raise SourceAbsentError(f"{artifact.source} not found")
            return
        backed_up = self.config.backup_root / artifact.destination
        if not backed_up.exists():
            raise SourceAbsentError(f"{artifact.name} backup not found at {backed_up}")

    def run_step(self, step: Step) -> StepOutcome:
        verb = "Backing up" if step.direction is Direction.CAPTURE else "Restoring"
        print_step(f"{verb} {step.description}...")
        try:
            self.check_preconditions(step)
        except SourceAbsentError as e:
            if step.direction is Direction.APPLY:
                print_warning(f"{e}; skipping.")
            else:
                print_message(f"{e}; skipping.", prefix="-")
            return self._record(step, StepStatus.SKIPPED, str(e))

        if self.config.dry_run:
            for action in step.actions:
                for line in action.plan():
                    print_message(f"Would run: {line}", prefix=" ")
            return self._record(step, StepStatus.PLANNED)

        failures: List[str] = []
        for action in step.actions:
            try:
                failures.extend(action.execute(self.tools))
            except (ActionFailureError, OSError, UnicodeError) as e:
                doing = "back up" if step.direction is Direction.CAPTURE else "restore"
                print_error(f"Failed to {doing} {step.description}: {e}")
                self._record(step, StepStatus.FAILED, str(e))
                if not isinstance(e, ActionFailureError):
                    raise ActionFailureError(str(e)) from e
                raise
        if failures:
            message = f"{len(failures)} item(s) failed: {', '.join(failures)}"
            print_warning(message)
            return self._record(step, StepStatus.FAILED, message)
        return self._record(step, StepStatus.DONE)
