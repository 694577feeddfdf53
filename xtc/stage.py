"""Stages: one external component's configure / build / install.

A Stage is plain data. ``run_stage()`` is the only code that executes one:

    Stage(
        name="binutils",
        cwd=paths["binutils"].build,
        commands=(
            Command((src / "configure", "--prefix=/toolchain"), phase="configure"),
            Command(("make", "-j8")),
            Command(("make", "install"), phase="install", privileged=True),
        ),
    )

Commands run strictly in order. A non-zero mandatory command stops the
stage with the error class of its phase; an advisory command only warns.
The stage's overlay is active for exactly the duration of its commands.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence, Union

from xtc.archive import ArchiveError, ensure_unpacked
from xtc.env import EMPTY, EnvScope, Overlay
from xtc.errors import PHASE_ERRORS, CommandError, ConfigurationError
from xtc.process import Runner, render

log = logging.getLogger(__name__)

PHASES = ("configure", "build", "install")


@dataclass(frozen=True)
class Probe:
    """An argument only known at stage time: the stdout of a helper command.

        Probe((glibc_src / "scripts/config.guess",), "--build={}")
    """

    argv: tuple[str, ...]
    template: str = "{}"

    def __post_init__(self):
        object.__setattr__(self, "argv", tuple(str(a) for a in self.argv))

    def __str__(self) -> str:
        return self.template.format(f"$({render(self.argv)})")


Arg = Union[str, Probe]


@dataclass(frozen=True)
class Command:
    argv: tuple[Arg, ...]
    phase: str = "build"
    advisory: bool = False
    privileged: bool = False
    creates: str | None = None  # skip when this path (relative to cwd) exists

    def __post_init__(self):
        if self.phase not in PHASES:
            raise ValueError(f"unknown phase {self.phase!r}")
        if not self.argv:
            raise ValueError("empty command")
        object.__setattr__(self, "argv", tuple(
            a if isinstance(a, Probe) else str(a) for a in self.argv
        ))

    @property
    def probes(self) -> list[Probe]:
        return [a for a in self.argv if isinstance(a, Probe)]

    def argv_for(self, elevate: Sequence[str] = (),
                 probed: dict[Probe, str] | None = None) -> list[str]:
        """Final argv: elevation prefix plus resolved probe values."""
        probed = probed or {}
        args = [
            a.template.format(probed[a]) if isinstance(a, Probe) and a in probed
            else str(a)
            for a in self.argv
        ]
        if self.privileged:
            args = [*elevate, *args]
        return args

    def render(self, elevate: Sequence[str] = ()) -> str:
        return render(self.argv_for(elevate))


@dataclass(frozen=True)
class Stage:
    name: str
    cwd: Path
    commands: tuple[Command, ...]
    overlay: Overlay = EMPTY
    source: Path | None = None   # unpacked from archive when missing
    archive: Path | None = None
    description: str = ""
    requires: tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "cwd", Path(self.cwd))
        object.__setattr__(self, "commands", tuple(self.commands))
        object.__setattr__(self, "overlay", Overlay(self.overlay))
        object.__setattr__(self, "requires", tuple(self.requires))

    def __str__(self) -> str:
        return self.name


def _unpack(stage: Stage) -> None:
    if stage.source is None or stage.archive is None:
        return
    try:
        ensure_unpacked(stage.archive, stage.source)
    except ArchiveError as e:
        raise ConfigurationError(
            stage.name, f"unpack {stage.archive}", 1, reason=str(e),
        ) from e


def _resolve_probes(stage: Stage, runner: Runner, env) -> dict[Probe, str]:
    probed: dict[Probe, str] = {}
    for cmd in stage.commands:
        for probe in cmd.probes:
            if probe in probed:
                continue
            try:
                probed[probe] = runner.capture(probe.argv, cwd=stage.cwd, env=env)
            except CommandError as e:
                raise ConfigurationError(
                    stage.name, e.command, e.status, reason="probe failed",
                ) from e
            log.info("%s: %s", stage.name, probe.template.format(probed[probe]))
    return probed


def run_stage(stage: Stage, runner: Runner, scope: EnvScope,
              elevate: Sequence[str] = ()) -> None:
    """Run every command of stage in order. Raises StageError on failure."""
    _unpack(stage)
    try:
        stage.cwd.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ConfigurationError(
            stage.name, f"mkdir {stage.cwd}", 1, reason=e.strerror or str(e),
        ) from e

    with scope.applied(stage.overlay) as env:
        probed = _resolve_probes(stage, runner, env)
        for cmd in stage.commands:
            if cmd.creates is not None and os.path.lexists(stage.cwd / cmd.creates):
                log.info("%s: %s already exists, skipping", stage.name, cmd.creates)
                continue

            argv = cmd.argv_for(elevate, probed)
            status = runner.run(argv, cwd=stage.cwd, env=env)
            if status == 0:
                continue
            if cmd.advisory:
                log.warning("%s: %s exited with %d (ignored)",
                            stage.name, render(argv), status)
                continue
            raise PHASE_ERRORS[cmd.phase](stage.name, render(argv), status)
