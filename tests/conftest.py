import shutil
from pathlib import Path

import pytest

from debsnap.config import REQUIRED_TOOLS, Config
from debsnap.errors import ActionFailureError
from debsnap.log import close_logger
from debsnap.tools import Tools

COMMAND_OUTPUTS = {
    ("dpkg", "--get-selections"): "bash\t\t\t\t\tinstall\nvim\t\t\t\t\tinstall\nnano\t\t\t\t\tdeinstall\n",
    ("flatpak", "list"): "org.videolan.VLC\ncom.discordapp.Discord\n",
    ("snap", "list"): (
        "Name     Version  Rev   Tracking       Publisher    Notes\n"
        "core22   20240111 1122  latest/stable  canonical**  base\n"
        "code     1.86     151   latest/stable  vscode**     classic\n"
    ),
    ("dconf", "dump", "/"): "[org/gnome/desktop/interface]\ncolor-scheme='prefer-dark'\n",
    ("pip", "list", "--user"): "Package  Version\n-------- -------\nrequests 2.31.0\n",
    ("npm", "list", "-g"): "/usr/local/lib\n`-- npm@9.2.0\n",
    ("systemctl", "--user"): "UNIT             LOAD   ACTIVE SUB     DESCRIPTION\nsyncthing.service loaded active running Syncthing\n",
}


class FakeTools(Tools):
    """Records every call; copies files for sync so round trips can be checked."""

    def __init__(self, present=None, outputs=None, fail=()):
        self.present = set(REQUIRED_TOOLS) if present is None else set(present)
        self.outputs = dict(COMMAND_OUTPUTS if outputs is None else outputs)
        self.fail = [list(prefix) for prefix in fail]
        self.calls = []
        self.inputs = []

    def exists(self, command):
        return command in self.present

    def run(self, argv, input_text=None):
        argv = [str(a) for a in argv]
        self.calls.append(argv)
        self.inputs.append(input_text)
        for prefix in self.fail:
            if argv[: len(prefix)] == prefix:
                raise ActionFailureError(f"Command failed with exit code 100: {' '.join(argv)}", 100)
        for prefix, output in self.outputs.items():
            if tuple(argv[: len(prefix)]) == prefix:
                return output
        return ""

    def sync(self, source, dest):
        source, dest = Path(source), Path(dest)
        self.calls.append(["sync", str(source), str(dest)])
        self.inputs.append(None)
        if not source.exists():
            raise ActionFailureError(f"rsync: link_stat {source} failed: No such file or directory", 23)
        if source.is_dir():
            shutil.copytree(source, dest, dirs_exist_ok=True)
        else:
            dest.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(source, dest)

    def commands(self):
        return [call for call in self.calls if call[0] != "sync"]


def populate_home(home: Path) -> Path:
    files = {
        ".bashrc": "alias ll='ls -l'\n",
        ".zshrc": "export ZSH=1\n",
        ".profile": "PATH=$HOME/bin:$PATH\n",
        ".bash_aliases": "alias g=git\n",
        ".gitconfig": "[user]\n\tname = Test\n",
        ".tmux.conf": "set -g mouse on\n",
        ".vimrc": "set number\n",
        ".inputrc": "set editing-mode vi\n",
        ".face": "PNGDATA",
        ".ssh/id_ed25519": "PRIVATE KEY",
        ".ssh/id_ed25519.pub": "ssh-ed25519 AAAA test@host",
        ".ssh/config.d/work": "Host work\n",
        ".gnupg/pubring.kbx": "KBX",
        ".gnupg/private-keys-v1.d/key.key": "SECRET",
        ".icons/cursor/index.theme": "[Icon Theme]\n",
        ".themes/Nord/gtk-3.0/gtk.css": "* {}\n",
        ".fonts/Hack.ttf": "TTF",
        ".local/share/applications/editor.desktop": "[Desktop Entry]\n",
        ".local/share/gnome-shell/extensions/dash@x/metadata.json": '{"uuid": "dash@x"}',
        ".config/app/settings.ini": "value=1\n",
        ".config/autostart/app.desktop": "[Desktop Entry]\n",
        ".config/gtk-3.0/settings.ini": "[Settings]\n",
        ".config/gtk-4.0/settings.ini": "[Settings]\n",
        "Pictures/Wallpaper/mountains.jpg": "JPEG",
    }
    for rel, content in files.items():
        path = home / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
    (home / ".ssh/id_ed25519").chmod(0o644)
    (home / ".ssh").chmod(0o755)
    return home


@pytest.fixture(autouse=True)
def _close_logs():
    yield
    close_logger()


@pytest.fixture
def home(tmp_path):
    return populate_home(tmp_path / "home")


@pytest.fixture
def config(tmp_path, home):
    return Config(home=home, backup_root=tmp_path / "system_backup", sudo=[])


@pytest.fixture
def tools():
    return FakeTools()
