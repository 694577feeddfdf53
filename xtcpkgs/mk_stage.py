"""The standard configure / make / install stage.

Most components build the autotools way from a dedicated build directory::

    <src>/configure <flags...>
    make -j<jobs> [targets...]
    sudo make [vars...] install

``mk_stage`` produces that command triple; components with a different
shape (kernel headers, the lib symlink) build their Stage directly.

Usage::

    stage = mk_stage(
        "binutils", config=config, component="binutils",
        configure_flags=[f"--prefix={config.prefix}", "--disable-nls"],
    )
"""

from pathlib import Path
from typing import Mapping, Sequence

from xtc.config import BootstrapConfig
from xtc.env import EMPTY
from xtc.stage import Arg, Command, Stage


def make_command(config: BootstrapConfig, *targets: str) -> Command:
    return Command(("make", f"-j{config.jobs}", *targets), phase="build")


def install_command(*args: str) -> Command:
    return Command(("make", *args), phase="install", privileged=True)


def mk_stage(
    name: str,
    *,
    config: BootstrapConfig,
    component: str,
    configure_flags: Sequence[Arg],
    configure_script: str | Path | None = None,
    make_targets: Sequence[str] = (),
    install_args: Sequence[str] = ("install",),
    overlay: Mapping[str, str | None] = EMPTY,
    requires: Sequence[str] = (),
    description: str = "",
    unpack: bool = False,
) -> Stage:
    """Create a configure/build/install stage for one component.

    Args:
        name:             Pipeline stage name (``gcc-pass1``).
        config:           The run's BootstrapConfig.
        component:        PathSet key providing source and build dirs.
        configure_flags:  Arguments to the configure script; may hold Probes.
        configure_script: Defaults to ``<source>/configure``.
        make_targets:     Targets for the build command (default: all).
        install_args:     Variables and targets for the install command.
        overlay:          Environment overlay for every command.
        requires:         Stages that must have completed first.
        description:      Log line shown when the stage starts.
        unpack:           Unpack the component's archive if its source
                          directory is missing.
    """
    paths = config.paths[component]
    script = configure_script or paths.source / "configure"
    return Stage(
        name=name,
        cwd=paths.build,
        commands=(
            Command((str(script), *configure_flags), phase="configure"),
            make_command(config, *make_targets),
            install_command(*install_args),
        ),
        overlay=overlay,
        source=paths.source if unpack else None,
        archive=paths.archive if unpack else None,
        description=description or f"Building {name}",
        requires=tuple(requires),
    )
