"""glibc — the target C library.

Configured for ``--host=<target>`` and compiled by gcc pass 1, so this is
the first stage that needs the cross tools on PATH and in CC/AS/LD/...
The build machine triplet comes from glibc's own ``config.guess`` at stage
time. Installed with ``install_root=<prefix>`` under ``--prefix=/usr``,
giving ``<prefix>/usr/lib64``, ``<prefix>/usr/include``, etc.
"""

from xtc.config import BootstrapConfig
from xtc.stage import Stage
from xtcpkgs.helpers import build_triplet, cross_overlay
from xtcpkgs.mk_stage import mk_stage


def make_glibc(config: BootstrapConfig, gcc_pass1: Stage, linux_headers: Stage) -> Stage:
    """Build glibc with the pass-1 compiler against the kernel headers.

    Args:
        config: Run configuration.
        gcc_pass1: The library-less compiler stage.
        linux_headers: The kernel headers stage.
    """
    src = config.paths["glibc"].source
    prefix = config.prefix
    return mk_stage(
        "glibc",
        config=config,
        component="glibc",
        configure_flags=[
            "--prefix=/usr",
            f"--host={config.target}",
            build_triplet(src / "scripts" / "config.guess"),
            f"--with-binutils={prefix / 'bin'}",
            f"--with-headers={prefix / 'usr' / 'include'}",
            f"--enable-kernel={config.enable_kernel}",
            "--disable-profile",
            "--disable-werror",
        ],
        install_args=[f"install_root={prefix}", "install"],
        overlay=cross_overlay(config),
        requires=[gcc_pass1.name, linux_headers.name],
        description="Building glibc",
    )
