"""Check for the external tools a run needs and install the missing ones."""

from typing import List

from debsnap.config import Config
from debsnap.console import print_error, print_message, print_section, print_success, print_warning
from debsnap.errors import ActionFailureError, MissingDependencyError
from debsnap.tools import Tools


class DependencyChecker:
    def __init__(self, config: Config, tools: Tools):
        self.config = config
        self.tools = tools

    def missing(self) -> List[str]:
        return [cmd for cmd in self.config.required_tools if not self.tools.exists(cmd)]

    def install_command(self, command: str) -> List[str]:
        package = self.config.required_tools[command]
        return self.config.privileged("apt", "install", "-y", package)

    def ensure(self) -> List[str]:
        """
        Install every missing tool, one apt call per tool.

        Returns the packages that were installed. Any failed install raises
        MissingDependencyError before a single capture or apply step runs.
        """
        print_section("Checking Dependencies")
        missing = self.missing()
        if not missing:
            print_success("All dependencies are installed.")
            return []

        print_warning(f"Missing dependencies: {' '.join(missing)}")
        installed = []
        for cmd in missing:
            argv = self.install_command(cmd)
            package = argv[-1]
            if self.config.dry_run:
                print_message(f"Would run: {' '.join(argv)}", prefix=" ")
                continue
            try:
                self.tools.run(argv)
            except ActionFailureError as e:
                print_error(f"Failed to install {package}.")
                raise MissingDependencyError(f"Failed to install {package} (provides {cmd}): {e}") from e
            installed.append(package)
        if not self.config.dry_run:
            print_success("All missing dependencies have been installed.")
        return installed
