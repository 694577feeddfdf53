"""gdb — debugger for the target, built against the target gmp."""

from xtc.config import BootstrapConfig
from xtc.stage import Stage
from xtcpkgs.helpers import build_triplet, cross_overlay
from xtcpkgs.mk_stage import mk_stage


def make_gdb(config: BootstrapConfig, gcc_pass2: Stage, gmp: Stage) -> Stage:
    """Cross-compile gdb into ``<prefix>/usr``.

    Args:
        config: Run configuration.
        gcc_pass2: The C/C++ compiler stage.
        gmp: The gmp stage (gdb 11+ refuses to configure without it).
    """
    src = config.paths["gdb"].source
    prefix = config.prefix
    return mk_stage(
        "gdb",
        config=config,
        component="gdb",
        configure_flags=[
            "--prefix=/usr",
            f"--host={config.target}",
            build_triplet(src / "config.guess"),
            f"--with-libgmp-prefix={prefix / 'usr'}",
            f"--with-sysroot={prefix}",
            "--disable-nls",
            "--disable-werror",
            "--without-python",
        ],
        install_args=[f"DESTDIR={prefix}", "install"],
        overlay=cross_overlay(config),
        requires=[gcc_pass2.name, gmp.name],
        description=f"Building GDB {config.gdb_version}",
        unpack=True,
    )
