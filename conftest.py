"""Shared fixtures: a temporary layout and a runner that never spawns."""

from pathlib import Path

import pytest

from xtc.config import BootstrapConfig
from xtc.process import Runner, render

TRIPLET = "x86_64-pc-linux-gnu"


class FakeRunner(Runner):
    """Records every launch and answers with scripted exit statuses.

    ``fail_when(pred, status)`` makes commands for which ``pred(argv, cwd)``
    is true exit with status; everything else succeeds instantly.
    """

    def __init__(self, triplet: str = TRIPLET):
        self.calls: list[tuple[list[str], Path, dict[str, str]]] = []
        self.captures: list[list[str]] = []
        self.triplet = triplet
        self._failures = []

    def fail_when(self, pred, status: int) -> None:
        self._failures.append((pred, status))

    def run(self, argv, *, cwd, env):
        argv = [str(a) for a in argv]
        self.calls.append((argv, Path(cwd), dict(env)))
        for pred, status in self._failures:
            if pred(argv, Path(cwd)):
                return status
        return 0

    def capture(self, argv, *, cwd, env):
        self.captures.append([str(a) for a in argv])
        return self.triplet

    def rendered(self) -> list[str]:
        return [render(argv) for argv, _, _ in self.calls]

    def cwds(self) -> list[Path]:
        return [cwd for _, cwd, _ in self.calls]


@pytest.fixture
def fake_runner():
    return FakeRunner()


@pytest.fixture
def config(tmp_path):
    return BootstrapConfig(
        prefix=tmp_path / "toolchain",
        sources_root=tmp_path / "sources",
        build_root=tmp_path / "build",
        jobs=4,
        elevate=(),
    )


@pytest.fixture
def sources(config):
    """Pre-extracted source trees for every component."""
    for component in config.paths.values():
        component.source.mkdir(parents=True, exist_ok=True)
    return config.sources_root
