"""Bootstrap configuration and the derived per-component paths.

BootstrapConfig is read once at start-up and frozen for the rest of the
run. Precedence, lowest first: built-in defaults, the inherited ``JOBS``
hint, an optional TOML file, command-line overrides.

    config = load_config("xtc.toml", os.environ).replace(jobs=4)
    paths = config.paths
    paths["glibc"].build    # <cwd>/build/glibc
"""

from __future__ import annotations

import dataclasses
import os
import tomllib
from dataclasses import dataclass, field
from functools import cached_property
from pathlib import Path
from typing import Mapping

from xtc.errors import ConfigError

JOBS_ENV = "JOBS"


def _default_jobs() -> int:
    return os.cpu_count() or 1


@dataclass(frozen=True)
class ComponentPaths:
    source: Path
    build: Path
    archive: Path


@dataclass(frozen=True)
class BootstrapConfig:
    """User-tunable parameters of a bootstrap run."""

    prefix: Path = Path("/toolchain")
    target: str = "x86_64-infra-linux-gnu"
    binutils_version: str = "2.38"
    gcc_version: str = "11.4.0"
    glibc_version: str = "2.29"
    linux_version: str = "5.4.266"
    cmake_version: str = "3.22.2"
    gmp_version: str = "6.3.0"
    gdb_version: str = "12.1"
    jobs: int = field(default_factory=_default_jobs)
    kernel_arch: str = "x86"
    enable_kernel: str = "4.10.0"
    lib_path: str = "/usr/lib64:/lib64:/usr/lib:/lib"
    sources_root: Path = field(default_factory=lambda: Path.cwd() / "sources")
    build_root: Path = field(default_factory=lambda: Path.cwd() / "build")
    elevate: tuple[str, ...] = ("sudo",)

    def __post_init__(self):
        for f in dataclasses.fields(self):
            value = getattr(self, f.name)
            if f.type == "Path":
                if not isinstance(value, (str, os.PathLike)):
                    raise ConfigError(f"{f.name} must be a path, got {value!r}")
                object.__setattr__(self, f.name, Path(value))
            elif f.type == "str" and not isinstance(value, str):
                raise ConfigError(f"{f.name} must be a string, got {value!r}")
        object.__setattr__(self, "elevate", _parse_elevate(self.elevate))
        if not isinstance(self.jobs, int) or isinstance(self.jobs, bool) or self.jobs < 1:
            raise ConfigError(f"jobs must be a positive integer, got {self.jobs!r}")
        if not self.target or self.target.count("-") < 2:
            raise ConfigError(f"target triple looks malformed: {self.target!r}")

    @classmethod
    def from_environ(cls, environ: Mapping[str, str] | None = None, **kw) -> BootstrapConfig:
        """Defaults plus the inherited job-count hint, if any."""
        environ = os.environ if environ is None else environ
        hint = environ.get(JOBS_ENV)
        if hint and "jobs" not in kw:
            kw["jobs"] = _parse_jobs(hint)
        return cls(**kw)

    def replace(self, **overrides) -> BootstrapConfig:
        """Return a copy with some fields changed. None values are ignored."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return dataclasses.replace(self, **changes)

    @cached_property
    def paths(self) -> PathSet:
        return PathSet(self)


def _parse_jobs(value: str) -> int:
    try:
        jobs = int(value)
    except ValueError:
        raise ConfigError(f"{JOBS_ENV} must be an integer, got {value!r}") from None
    if jobs < 1:
        raise ConfigError(f"{JOBS_ENV} must be positive, got {jobs}")
    return jobs


def _parse_elevate(value) -> tuple[str, ...]:
    """A single command name or a list of argv words; empty disables elevation."""
    if isinstance(value, str):
        return (value,) if value else ()
    if not isinstance(value, (list, tuple)) or not all(isinstance(w, str) for w in value):
        raise ConfigError(f"elevate must be a command or a list of strings, got {value!r}")
    return tuple(value)


def load_config(path: str | Path | None = None,
                environ: Mapping[str, str] | None = None) -> BootstrapConfig:
    """Build a config from the environment hint and an optional TOML file.

    The file holds top-level keys named after BootstrapConfig fields::

        prefix = "/opt/cross"
        target = "aarch64-infra-linux-gnu"
        jobs = 8
        elevate = []
    """
    values: dict = {}
    if path is not None:
        try:
            with open(path, "rb") as f:
                values = tomllib.load(f)
        except FileNotFoundError:
            raise ConfigError(f"config file not found: {path}") from None
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"{path}: {e}") from None
        known = {f.name for f in dataclasses.fields(BootstrapConfig)}
        unknown = sorted(set(values) - known)
        if unknown:
            raise ConfigError(f"{path}: unknown keys: {', '.join(unknown)}")
    return BootstrapConfig.from_environ(environ, **values)


class PathSet(Mapping[str, ComponentPaths]):
    """Component name -> source, build and archive paths.

    Every build directory is a distinct immediate child of build_root, so
    state reset can clear them all by listing that one directory.
    """

    # component -> (source name, version field, build dir name)
    LAYOUT = {
        "binutils": ("binutils", "binutils_version", "binutils"),
        "gcc-pass1": ("gcc", "gcc_version", "gcc-first"),
        "linux": ("linux", "linux_version", "linux"),
        "glibc": ("glibc", "glibc_version", "glibc"),
        "gcc-pass2": ("gcc", "gcc_version", "gcc-second"),
        "cmake": ("cmake", "cmake_version", "cmake"),
        "gmp": ("gmp", "gmp_version", "gmp"),
        "gdb": ("gdb", "gdb_version", "gdb"),
    }

    def __init__(self, config: BootstrapConfig):
        self._paths: dict[str, ComponentPaths] = {}
        for component, (src_name, version_field, build_name) in self.LAYOUT.items():
            dirname = f"{src_name}-{getattr(config, version_field)}"
            self._paths[component] = ComponentPaths(
                source=config.sources_root / dirname,
                build=config.build_root / build_name,
                archive=config.sources_root / f"{dirname}.tar.gz",
            )

    def __getitem__(self, component: str) -> ComponentPaths:
        return self._paths[component]

    def __iter__(self):
        return iter(self._paths)

    def __len__(self) -> int:
        return len(self._paths)
