import shutil

import pytest

from debsnap.errors import ActionFailureError
from debsnap.tools import SystemTools


def test_run_returns_stdout():
    assert SystemTools().run(["echo", "hello"]) == "hello\n"


def test_run_feeds_input():
    assert SystemTools().run(["cat"], input_text="a\nb\n") == "a\nb\n"


def test_run_nonzero_exit_raises():
    with pytest.raises(ActionFailureError) as excinfo:
        SystemTools().run(["false"])
    assert excinfo.value.returncode == 1


def test_run_unknown_command_raises():
    with pytest.raises(ActionFailureError, match="Command not found") as excinfo:
        SystemTools().run(["debsnap-no-such-command"])
    assert excinfo.value.returncode == 127


def test_exists_and_export(tmp_path):
    tools = SystemTools()
    assert tools.exists("echo")
    assert not tools.exists("debsnap-no-such-command")
    dest = tmp_path / "nested" / "out.txt"
    tools.export(["echo", "listed"], dest)
    assert dest.read_text() == "listed\n"
    assert tools.list(["printf", "a\\nb\\n"]) == ["a", "b"]


def test_export_keeps_non_utf8_bytes(tmp_path):
    dest = tmp_path / "raw.txt"
    SystemTools().export(["printf", "caf\\351\\n"], dest)
    assert dest.read_bytes() == b"caf\xe9\n"


@pytest.mark.skipif(shutil.which("rsync") is None, reason="rsync not installed")
def test_sync_mirrors_tree(tmp_path):
    source = tmp_path / "src"
    (source / "sub").mkdir(parents=True)
    (source / "sub" / "file").write_text("data")
    dest = tmp_path / "dest" / "copy"
    SystemTools().sync(source, dest)
    assert (dest / "sub" / "file").read_text() == "data"
