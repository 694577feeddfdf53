"""binutils — cross assembler, linker and binary tools.

First stage of the chain and built with the host compiler. Everything
after it finds ``<target>-as`` / ``<target>-ld`` in ``<prefix>/bin``.
"""

from xtc.config import BootstrapConfig
from xtc.stage import Stage
from xtcpkgs.mk_stage import mk_stage


def make_binutils(config: BootstrapConfig) -> Stage:
    return mk_stage(
        "binutils",
        config=config,
        component="binutils",
        configure_flags=[
            f"--prefix={config.prefix}",
            f"--target={config.target}",
            "--disable-nls",
            "--enable-gold=yes",
            "--enable-lto",
        ],
        description="Building Binutils",
    )
