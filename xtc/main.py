#!/usr/bin/env python3
"""xtc — bootstrap a cross toolchain from source."""

import argparse
import logging
import os
import sys

from xtc import env as xenv
from xtc.config import load_config
from xtc.errors import ConfigError, OrderError, PreconditionError
from xtc.pipeline import run_all, skeleton_for, validate_order
from xtc.process import Runner
from xtc.reset import reset_state
from xtcpkgs.bootstrap import DEFAULT_VARIANT, VARIANTS, get_variant

log = logging.getLogger("xtc")


def _toolchain(args):
    config = load_config(args.config, os.environ).replace(
        prefix=args.prefix,
        target=args.target,
        jobs=args.jobs,
        elevate=() if args.no_elevate else None,
    )
    return get_variant(args.variant, config)


def cmd_build(args):
    tc = _toolchain(args)
    config = tc.config
    log.info("Bootstrapping %s toolchain for %s into %s (%d jobs)",
             args.variant, config.target, config.prefix, config.jobs)
    result = run_all(
        tc.stages,
        build_root=config.build_root,
        install_root=config.prefix,
        runner=Runner(),
        elevate=config.elevate,
    )
    if not result.ok:
        log.error("bootstrap aborted at %s", result.failed_stage)
    return result.exit_code


def cmd_plan(args):
    tc = _toolchain(args)
    validate_order(tc.stages)
    elevate = tc.config.elevate
    for n, stage in enumerate(tc.stages, 1):
        print(f"{n}. {stage.name}: {stage.description}")
        if stage.archive is not None:
            print(f"   unpack {stage.archive} (if {stage.source} is missing)")
        if stage.overlay:
            print(f"   overlay: {', '.join(stage.overlay)}")
        print(f"   cd {stage.cwd}")
        for cmd in stage.commands:
            flags = []
            if cmd.advisory:
                flags.append("advisory")
            if cmd.creates:
                flags.append(f"unless {cmd.creates} exists")
            suffix = f"  # {', '.join(flags)}" if flags else ""
            print(f"   {cmd.render(elevate)}{suffix}")
    return 0


def cmd_reset(args):
    tc = _toolchain(args)
    config = tc.config
    try:
        reset_state(config.build_root, config.prefix,
                    skeleton_for(tc.stages, config.build_root),
                    runner=Runner(), elevate=config.elevate)
    except PreconditionError as e:
        log.error("state reset failed: %s", e)
        return 1
    return 0


def cmd_env(args):
    tc = _toolchain(args)
    try:
        stage = tc.stage(args.stage)
    except KeyError as e:
        log.error("%s", e.args[0])
        return 2
    base = dict(os.environ)
    changed = xenv.delta(base, xenv.merge(base, stage.overlay))
    for name in sorted(changed):
        value = changed[name]
        print(f"unset {name}" if value is None else f"{name}={value}")
    return 0


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="xtc", description="Bootstrap a cross toolchain from source",
    )
    parser.add_argument("--variant", choices=sorted(VARIANTS), default=DEFAULT_VARIANT,
                        help=f"pipeline variant (default: {DEFAULT_VARIANT})")
    parser.add_argument("--config", help="TOML file with BootstrapConfig fields")
    parser.add_argument("--prefix", help="installation prefix")
    parser.add_argument("--target", help="target triple")
    parser.add_argument("--jobs", "-j", type=int, help="parallel jobs for make")
    parser.add_argument("--no-elevate", action="store_true",
                        help="run install steps without sudo")
    parser.add_argument("-v", "--verbose", action="store_true", help="log every command")
    sub = parser.add_subparsers(dest="command")

    # build
    p = sub.add_parser("build", help="Reset state and run every stage (default)")
    p.set_defaults(func=cmd_build)

    # plan
    p = sub.add_parser("plan", help="Print stages and commands without running them")
    p.set_defaults(func=cmd_plan)

    # reset
    p = sub.add_parser("reset", help="Only clear build dirs and the install prefix")
    p.set_defaults(func=cmd_reset)

    # env
    p = sub.add_parser("env", help="Show a stage's environment changes")
    p.add_argument("stage")
    p.set_defaults(func=cmd_env)

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="[+] %(message)s",
    )
    func = getattr(args, "func", cmd_build)
    try:
        return func(args)
    except (ConfigError, OrderError) as e:
        log.error("%s", e)
        return 2


if __name__ == "__main__":
    sys.exit(main())
