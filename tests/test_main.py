"""Tests for the xtc command line."""

import pytest

from xtc import main as xtc_main


@pytest.fixture
def config_file(tmp_path, config):
    f = tmp_path / "xtc.toml"
    f.write_text(
        f'prefix = "{config.prefix}"\n'
        f'sources_root = "{config.sources_root}"\n'
        f'build_root = "{config.build_root}"\n'
        "jobs = 4\n"
        "elevate = []\n"
    )
    return str(f)


def test_plan_lists_stages_in_order(config_file, capsys):
    assert xtc_main.main(["--config", config_file, "plan"]) == 0
    out = capsys.readouterr().out
    names = ["binutils", "gcc-pass1", "linux-headers", "glibc",
             "usr-lib-symlink", "gcc-pass2", "cmake"]
    positions = [out.index(f". {n}:") for n in names]
    assert positions == sorted(positions)
    assert "headers_check  # advisory" in out
    assert "unless lib exists" in out


def test_plan_gdb_variant(config_file, capsys):
    assert xtc_main.main(["--config", config_file, "--variant", "gdb", "plan"]) == 0
    out = capsys.readouterr().out
    assert "7. gmp:" in out
    assert "8. gdb:" in out
    assert "cmake" not in out


def test_plan_without_elevation(config_file, capsys):
    xtc_main.main(["--config", config_file, "plan"])
    assert "sudo" not in capsys.readouterr().out


def test_env_shows_overlay(config_file, capsys, monkeypatch, config):
    monkeypatch.setenv("PATH", "/usr/bin")
    monkeypatch.delenv("CC", raising=False)
    assert xtc_main.main(["--config", config_file, "env", "glibc"]) == 0
    out = capsys.readouterr().out.splitlines()
    assert "CC=x86_64-infra-linux-gnu-gcc" in out
    assert f"PATH={config.prefix}/bin:/usr/bin" in out


def test_env_host_stage_unsets(config_file, capsys, monkeypatch):
    monkeypatch.setenv("CC", "clang")
    assert xtc_main.main(["--config", config_file, "env", "gcc-pass2"]) == 0
    assert "unset CC" in capsys.readouterr().out.splitlines()


def test_env_unknown_stage(config_file):
    assert xtc_main.main(["--config", config_file, "env", "gcc-pass3"]) == 2


def test_bad_jobs(config_file):
    assert xtc_main.main(["--config", config_file, "--jobs", "0", "plan"]) == 2


def test_wrong_config_type(tmp_path):
    f = tmp_path / "xtc.toml"
    f.write_text("target = 5\n")
    assert xtc_main.main(["--config", str(f), "plan"]) == 2


def test_bare_invocation_builds(config_file, sources, fake_runner, monkeypatch):
    monkeypatch.setattr(xtc_main, "Runner", lambda: fake_runner)
    # config file carries the tmp layout; everything else is default
    assert xtc_main.main(["--config", config_file]) == 0
    assert any("bootstrap" in cmd for cmd in fake_runner.rendered())


def test_build_failure_exit_code(config_file, sources, fake_runner, monkeypatch, config):
    monkeypatch.setattr(xtc_main, "Runner", lambda: fake_runner)
    glibc_build = config.paths["glibc"].build
    fake_runner.fail_when(lambda argv, cwd: cwd == glibc_build and argv[0] == "make", 2)
    assert xtc_main.main(["--config", config_file, "build"]) == 2


def test_reset_command(config_file, config, monkeypatch, fake_runner):
    monkeypatch.setattr(xtc_main, "Runner", lambda: fake_runner)
    stale = config.build_root / "old"
    stale.mkdir(parents=True)
    assert xtc_main.main(["--config", config_file, "reset"]) == 0
    assert not stale.exists()
    assert config.paths["glibc"].build.is_dir()
