"""Pipeline driver: state reset, then every stage in order, fail-fast.

Stages only talk to each other through the install prefix, so the driver
carries no data between them. It owns the one EnvScope of the run, which
guarantees each stage starts from the untouched base environment.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Sequence

from xtc.env import EnvScope
from xtc.errors import OrderError, PreconditionError, StageError, XtcError
from xtc.process import Runner
from xtc.reset import reset_state
from xtc.stage import Stage, run_stage

log = logging.getLogger(__name__)

RESET = "reset"


@dataclass
class PipelineResult:
    completed: bool
    stages: list[str] = field(default_factory=list)  # stages that finished
    failed_stage: str | None = None
    status: int | None = None
    error: XtcError | None = None

    @property
    def ok(self) -> bool:
        return self.completed

    @property
    def exit_code(self) -> int:
        if self.completed:
            return 0
        if self.status is not None and 0 < self.status < 256:
            return self.status
        return 1


def validate_order(stages: Sequence[Stage]) -> None:
    """Check every stage's ``requires`` appear earlier in the list."""
    seen: set[str] = set()
    for stage in stages:
        if stage.name in seen:
            raise OrderError(f"stage {stage.name!r} listed twice")
        missing = [r for r in stage.requires if r not in seen]
        if missing:
            raise OrderError(
                f"stage {stage.name!r} must come after {', '.join(missing)}"
            )
        seen.add(stage.name)


def skeleton_for(stages: Sequence[Stage], build_root: Path) -> list[Path]:
    """Working directories that live under build_root, in stage order."""
    build_root = Path(build_root)
    dirs = []
    for stage in stages:
        if stage.cwd.is_relative_to(build_root) and stage.cwd not in dirs:
            dirs.append(stage.cwd)
    return dirs


def run_all(stages: Sequence[Stage], *, build_root: Path, install_root: Path,
            runner: Runner | None = None,
            base_env: Mapping[str, str] | None = None,
            elevate: Sequence[str] = ()) -> PipelineResult:
    """Reset state, then run stages in order until one fails."""
    validate_order(stages)
    runner = runner or Runner()
    base_env = dict(os.environ if base_env is None else base_env)

    try:
        reset_state(build_root, install_root, skeleton_for(stages, build_root),
                    runner=runner, elevate=elevate, env=base_env)
    except PreconditionError as e:
        log.error("state reset failed: %s", e)
        return PipelineResult(False, failed_stage=RESET, error=e)

    scope = EnvScope(base_env)
    done: list[str] = []
    for n, stage in enumerate(stages, 1):
        log.info("Stage %d: %s", n, stage.description or stage.name)
        try:
            run_stage(stage, runner, scope, elevate)
        except StageError as e:
            log.error("%s", e)
            return PipelineResult(False, done, stage.name, e.status, e)
        done.append(stage.name)

    log.info("All stages completed. Toolchain installed in %s", install_root)
    return PipelineResult(True, done)
