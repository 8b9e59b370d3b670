"""
Capability interface over the external tools a run depends on.

Orchestration code only ever talks to a Tools instance, so every capture and
apply step can be exercised against a fake without touching the system.
"""

import logging
import os
import shutil
import subprocess
from pathlib import Path
from typing import List, Optional, Sequence

from debsnap.console import transcript
from debsnap.errors import ActionFailureError

logger = logging.getLogger("debsnap.tools")


class Tools:
    """
    Base capability interface: {exists, list, export, apply, sync}.

    Subclasses provide exists(), run() and sync(); the remaining capabilities
    are expressed in terms of those.
    """

    def exists(self, command: str) -> bool:
        raise NotImplementedError

    def run(self, argv: Sequence[str], input_text: Optional[str] = None) -> str:
        """Run a command to completion and return its standard output."""
        raise NotImplementedError

    def sync(self, source: Path, dest: Path) -> None:
        """Mirror a file or directory tree onto dest, preserving attributes."""
        raise NotImplementedError

    def list(self, argv: Sequence[str]) -> List[str]:
        return self.run(argv).splitlines()

    def export(self, argv: Sequence[str], dest: Path) -> None:
        output = self.run(argv)
        dest = Path(dest)
        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_text(output, encoding="utf-8", errors="surrogateescape")

    def apply(self, argv: Sequence[str], data: str) -> None:
        self.run(argv, input_text=data)

    def restrict(self, path: Path) -> None:
        """Owner-only access: 0700 on directories, 0600 on everything else."""
        path = Path(path)
        os.chmod(path, 0o700)
        for root, dirs, files in os.walk(path):
            for d in dirs:
                dir_path = os.path.join(root, d)
                if not os.path.islink(dir_path):
                    os.chmod(dir_path, 0o700)
            for f in files:
                file_path = os.path.join(root, f)
                if not os.path.islink(file_path):
                    os.chmod(file_path, 0o600)


class SystemTools(Tools):
    """Tools backed by subprocess and rsync."""

    def exists(self, command: str) -> bool:
        return shutil.which(command) is not None

    def run(self, argv: Sequence[str], input_text: Optional[str] = None) -> str:
        # Output bytes that are not UTF-8 survive as surrogates, so exports
        # written back with the same error handler stay byte-identical.
        argv = [str(a) for a in argv]
        command = " ".join(argv)
        logger.debug(f"Running command: {command}")
        try:
            result = subprocess.run(
                argv,
                input=input_text,
                capture_output=True,
                encoding="utf-8",
                errors="surrogateescape",
                check=False,
            )
        except FileNotFoundError:
            raise ActionFailureError(f"Command not found: {argv[0]}", 127)
        except OSError as e:
            raise ActionFailureError(f"Could not execute {command}: {e}")
        record = transcript()
        for line in result.stderr.splitlines():
            record.debug(f"[{argv[0]}] {line}")
        if result.returncode != 0:
            for line in result.stdout.splitlines():
                record.debug(f"[{argv[0]}] {line}")
            raise ActionFailureError(
                f"Command failed with exit code {result.returncode}: {command}",
                result.returncode,
            )
        return result.stdout

    def sync(self, source: Path, dest: Path) -> None:
        source, dest = Path(source), Path(dest)
        if source.is_dir():
            dest.mkdir(parents=True, exist_ok=True)
            output = self.run(["rsync", "-a", f"{source}/", f"{dest}/"])
        else:
            dest.parent.mkdir(parents=True, exist_ok=True)
            output = self.run(["rsync", "-a", str(source), str(dest)])
        for line in output.splitlines():
            transcript().debug(f"[rsync] {line}")
