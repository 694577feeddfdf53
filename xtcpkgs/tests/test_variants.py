"""Tests for the pipeline variants: order, dependency edges, scenarios."""

import pytest

from xtc.errors import BuildError
from xtc.pipeline import run_all, validate_order
from xtcpkgs.bootstrap import (
    DEFAULT_VARIANT, VARIANTS, CMakeToolchain, GdbToolchain, get_variant,
)

PREFIX = ["binutils", "gcc-pass1", "linux-headers", "glibc", "usr-lib-symlink", "gcc-pass2"]
BASE = {"PATH": "/usr/bin:/bin", "HOME": "/root"}


def _run(tc, runner):
    return run_all(tc.stages, build_root=tc.config.build_root,
                   install_root=tc.config.prefix, runner=runner, base_env=BASE)


class TestOrder:
    def test_cmake_variant(self, config):
        assert CMakeToolchain(config).names == PREFIX + ["cmake"]

    def test_gdb_variant(self, config):
        assert GdbToolchain(config).names == PREFIX + ["gmp", "gdb"]

    def test_default_variant(self, config):
        assert isinstance(get_variant(DEFAULT_VARIANT, config), CMakeToolchain)

    def test_unknown_variant(self, config):
        with pytest.raises(KeyError, match="unknown variant"):
            get_variant("ninja", config)

    @pytest.mark.parametrize("variant", sorted(VARIANTS))
    def test_requires_satisfied(self, config, variant):
        validate_order(get_variant(variant, config).stages)

    @pytest.mark.parametrize("variant", sorted(VARIANTS))
    def test_glibc_after_pass1_and_headers(self, config, variant):
        names = get_variant(variant, config).names
        glibc = names.index("glibc")
        assert names.index("gcc-pass1") < glibc
        assert names.index("linux-headers") < glibc
        assert names.index("gcc-pass2") > glibc

    def test_glibc_declares_its_edges(self, config):
        tc = CMakeToolchain(config)
        assert set(tc.glibc.requires) == {"gcc-pass1", "linux-headers"}
        assert "glibc" in tc.gcc_pass2.requires

    def test_stages_cached(self, config):
        tc = GdbToolchain(config)
        assert tc.stages is tc.stages
        assert tc.glibc is tc.glibc


class TestScenarios:
    def test_fresh_run_all_succeed(self, config, sources, fake_runner):
        tc = CMakeToolchain(config)
        result = _run(tc, fake_runner)

        assert result.ok
        assert result.stages == PREFIX + ["cmake"]
        # stage cwds observed in exactly the pipeline order
        seen = []
        by_cwd = {s.cwd: s.name for s in tc.stages}
        for cwd in fake_runner.cwds():
            name = by_cwd[cwd]
            if not seen or seen[-1] != name:
                seen.append(name)
        assert seen == PREFIX + ["cmake"]

    def test_gdb_run_all_succeed(self, config, sources, fake_runner):
        result = _run(GdbToolchain(config), fake_runner)
        assert result.ok
        assert result.stages == PREFIX + ["gmp", "gdb"]

    def test_glibc_build_fails(self, config, sources, fake_runner):
        tc = CMakeToolchain(config)
        glibc_build = config.paths["glibc"].build
        fake_runner.fail_when(
            lambda argv, cwd: cwd == glibc_build and argv[:2] == ["make", "-j4"], 2,
        )

        result = _run(tc, fake_runner)

        assert not result.ok
        assert result.failed_stage == "glibc"
        assert result.status == 2
        assert isinstance(result.error, BuildError)
        later = {tc.gcc_pass2.cwd, tc.usr_lib_symlink.cwd, tc.cmake.cwd}
        assert not later & set(fake_runner.cwds())

    def test_stale_build_dir_removed(self, config, sources, fake_runner):
        stale = config.build_root / "gcc-third"
        stale.mkdir(parents=True)
        _run(CMakeToolchain(config), fake_runner)
        assert not stale.exists()

    def test_headers_check_failure_is_a_warning(self, config, sources, fake_runner):
        fake_runner.fail_when(lambda argv, cwd: "headers_check" in argv, 2)
        assert _run(CMakeToolchain(config), fake_runner).ok

    def test_headers_install_failure_aborts(self, config, sources, fake_runner):
        fake_runner.fail_when(lambda argv, cwd: "headers_install" in argv, 1)
        result = _run(CMakeToolchain(config), fake_runner)
        assert result.failed_stage == "linux-headers"

    def test_overlay_never_leaks_past_glibc(self, config, sources, fake_runner):
        tc = CMakeToolchain(config)
        _run(tc, fake_runner)
        for argv, cwd, env in fake_runner.calls:
            if cwd == tc.glibc.cwd:
                assert env["CC"] == f"{config.target}-gcc"
            else:
                assert "CC" not in env, (cwd, argv)
                assert env["PATH"] == BASE["PATH"]

    def test_symlink_stage_idempotent(self, config, sources, fake_runner):
        """After the reset wipes the prefix, seed it like glibc's install would."""
        tc = CMakeToolchain(config)

        class SeedingRunner(type(fake_runner)):
            def run(self, argv, *, cwd, env):
                if "install_root=" + str(config.prefix) in argv:
                    (config.prefix / "usr" / "lib64").mkdir(parents=True, exist_ok=True)
                    (config.prefix / "usr" / "lib").symlink_to("lib64")
                return super().run(argv, cwd=cwd, env=env)

        runner = SeedingRunner()
        assert _run(tc, runner).ok
        assert not any(argv[0] == "ln" for argv, _, _ in runner.calls)
