"""External command invocation.

Every configure/make/install step is an opaque child process. ``Runner``
blocks until it exits and hands back the status; deciding whether a
non-zero status is fatal is the caller's job.
"""

import logging
import shlex
import subprocess
from pathlib import Path
from typing import Mapping, Sequence

from xtc.errors import CommandError

log = logging.getLogger(__name__)

# Statuses reported when the executable itself can't be launched, as a shell would.
STATUS_NOT_FOUND = 127
STATUS_NOT_EXECUTABLE = 126


def render(argv: Sequence[str]) -> str:
    return shlex.join(str(a) for a in argv)


class Runner:
    """Runs commands with an explicit working directory and environment."""

    def run(self, argv: Sequence[str], *, cwd: Path, env: Mapping[str, str]) -> int:
        log.debug("$ %s  (in %s)", render(argv), cwd)
        try:
            proc = subprocess.run([str(a) for a in argv], cwd=cwd, env=dict(env))
        except FileNotFoundError:
            log.error("command not found: %s", argv[0])
            return STATUS_NOT_FOUND
        except PermissionError:
            log.error("command not executable: %s", argv[0])
            return STATUS_NOT_EXECUTABLE
        except OSError as e:
            log.error("cannot run %s: %s", argv[0], e.strerror or e)
            return STATUS_NOT_EXECUTABLE
        return proc.returncode

    def capture(self, argv: Sequence[str], *, cwd: Path, env: Mapping[str, str]) -> str:
        """Run argv and return its stripped stdout. Raises CommandError."""
        log.debug("$ %s  (capture, in %s)", render(argv), cwd)
        try:
            proc = subprocess.run(
                [str(a) for a in argv], cwd=cwd, env=dict(env),
                stdout=subprocess.PIPE, text=True,
            )
        except OSError:
            raise CommandError(render(argv), STATUS_NOT_FOUND) from None
        if proc.returncode != 0:
            raise CommandError(render(argv), proc.returncode)
        return proc.stdout.strip()
