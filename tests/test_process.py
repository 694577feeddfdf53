"""Tests for the subprocess runner (uses /bin/sh)."""

import pytest

from xtc.errors import CommandError
from xtc.process import STATUS_NOT_EXECUTABLE, STATUS_NOT_FOUND, Runner, render


def test_exit_status(tmp_path):
    assert Runner().run(["sh", "-c", "exit 0"], cwd=tmp_path, env={"PATH": "/usr/bin:/bin"}) == 0
    assert Runner().run(["sh", "-c", "exit 2"], cwd=tmp_path, env={"PATH": "/usr/bin:/bin"}) == 2


def test_env_and_cwd_passed(tmp_path):
    env = {"PATH": "/usr/bin:/bin", "XTC_MARK": "cross"}
    Runner().run(["sh", "-c", 'echo "$XTC_MARK" > mark'], cwd=tmp_path, env=env)
    assert (tmp_path / "mark").read_text().strip() == "cross"


def test_missing_executable(tmp_path):
    assert Runner().run(["/nonexistent/xtc-tool"], cwd=tmp_path, env={}) == STATUS_NOT_FOUND


def test_script_without_shebang(tmp_path):
    script = tmp_path / "configure"
    script.write_text("echo configured\n")
    script.chmod(0o755)
    assert Runner().run([str(script)], cwd=tmp_path, env={}) == STATUS_NOT_EXECUTABLE


def test_cwd_is_a_file(tmp_path):
    (tmp_path / "build").write_text("")
    status = Runner().run(["sh", "-c", "exit 0"], cwd=tmp_path / "build",
                          env={"PATH": "/usr/bin:/bin"})
    assert status != 0


def test_capture_unlaunchable(tmp_path):
    with pytest.raises(CommandError):
        Runner().capture(["/nonexistent/config.guess"], cwd=tmp_path, env={})


def test_capture(tmp_path):
    out = Runner().capture(["sh", "-c", "echo x86_64-pc-linux-gnu"],
                           cwd=tmp_path, env={"PATH": "/usr/bin:/bin"})
    assert out == "x86_64-pc-linux-gnu"


def test_capture_failure(tmp_path):
    with pytest.raises(CommandError) as exc:
        Runner().capture(["sh", "-c", "exit 4"], cwd=tmp_path, env={"PATH": "/usr/bin:/bin"})
    assert exc.value.status == 4


def test_render_quotes():
    assert render(["make", "INSTALL_HDR_PATH=/opt/my dir"]) == "make 'INSTALL_HDR_PATH=/opt/my dir'"
