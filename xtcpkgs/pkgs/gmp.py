"""gmp — GNU Multiple Precision Arithmetic Library, for the target.

Prerequisite of gdb. Cross-compiled with the finished pass-2 compiler
(C++ bindings included) and installed into the prefix as a sysroot.
gmp's top-level ``config.guess`` prints a CPU-specific triplet, so the
build triplet comes from the plain ``configfsf.guess`` next to it.
"""

from xtc.config import BootstrapConfig
from xtc.stage import Stage
from xtcpkgs.helpers import build_triplet, cross_overlay
from xtcpkgs.mk_stage import mk_stage


def make_gmp(config: BootstrapConfig, gcc_pass2: Stage) -> Stage:
    src = config.paths["gmp"].source
    return mk_stage(
        "gmp",
        config=config,
        component="gmp",
        configure_flags=[
            "--prefix=/usr",
            f"--host={config.target}",
            build_triplet(src / "configfsf.guess"),
            "--enable-cxx",
            "--disable-static",
        ],
        install_args=[f"DESTDIR={config.prefix}", "install"],
        overlay=cross_overlay(config),
        requires=[gcc_pass2.name],
        description=f"Building GMP {config.gmp_version}",
        unpack=True,
    )
