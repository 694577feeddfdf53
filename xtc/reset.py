"""Full state reset, the unconditional first step of every run.

Stale objects from an earlier (possibly failed) run must never leak into
this one, so nothing is reused: every build directory goes, the install
prefix is emptied, and the directory skeleton is recreated.
"""

import logging
import os
import shutil
from pathlib import Path
from typing import Iterable, Mapping, Sequence

from xtc.errors import PreconditionError
from xtc.process import Runner, render

log = logging.getLogger(__name__)


def _remove(path: Path, runner: Runner | None, elevate: Sequence[str],
            env: Mapping[str, str]) -> None:
    try:
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        else:
            path.unlink()
        return
    except FileNotFoundError:
        return
    except PermissionError as e:
        if not elevate or runner is None:
            raise PreconditionError(f"cannot remove {path}: {e.strerror}") from e
        denied = e
    except OSError as e:
        raise PreconditionError(f"cannot remove {path}: {e.strerror or e}") from e

    argv = [*elevate, "rm", "-rf", "--", str(path)]
    status = runner.run(argv, cwd=path.parent, env=env)
    if status != 0:
        raise PreconditionError(
            f"cannot remove {path}: {denied.strerror}; {render(argv)} exited with {status}"
        )


def _listdir(path: Path) -> list[Path]:
    try:
        return sorted(path.iterdir())
    except OSError as e:
        raise PreconditionError(f"cannot list {path}: {e.strerror or e}") from e


def reset_state(build_root: Path, install_root: Path, skeleton: Iterable[Path] = (),
                runner: Runner | None = None, elevate: Sequence[str] = (),
                env: Mapping[str, str] | None = None) -> None:
    """Clear build_root's subdirectories and install_root's contents.

    build_root itself and any plain files directly in it are kept.
    install_root is kept (not created) and emptied if it exists. Then each
    skeleton directory is created. Permission problems are retried through
    ``elevate`` when given, and otherwise raise PreconditionError.
    """
    env = os.environ if env is None else env
    build_root = Path(build_root)
    install_root = Path(install_root)

    log.info("Cleaning build subdirectories...")
    if build_root.is_dir():
        for child in _listdir(build_root):
            if child.is_dir() and not child.is_symlink():
                _remove(child, runner, elevate, env)

    log.info("Cleaning install prefix: %s", install_root)
    if install_root.is_dir():
        for child in _listdir(install_root):
            _remove(child, runner, elevate, env)

    for path in skeleton:
        try:
            Path(path).mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise PreconditionError(f"cannot create {path}: {e.strerror}") from e
