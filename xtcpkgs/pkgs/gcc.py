"""gcc — built twice.

Pass 1 is a C-only compiler with no C library behind it (``--with-newlib
--without-headers``): just enough to compile glibc. Pass 2 comes after
glibc is installed into the prefix and is the full C/C++ compiler with
shared libraries, threads and LTO, using the prefix as its sysroot.

Both passes share the gcc source tree but have separate build dirs.
"""

from xtc.config import BootstrapConfig
from xtc.stage import Stage
from xtcpkgs.helpers import HOST_OVERLAY
from xtcpkgs.mk_stage import mk_stage


def make_gcc_pass1(config: BootstrapConfig, binutils: Stage) -> Stage:
    """Library-less bootstrap compiler.

    Args:
        config: Run configuration.
        binutils: The binutils stage (its assembler/linker are required).
    """
    return mk_stage(
        "gcc-pass1",
        config=config,
        component="gcc-pass1",
        configure_flags=[
            f"--prefix={config.prefix}",
            f"--target={config.target}",
            f"--with-glibc-version={config.glibc_version}",
            "--with-newlib",
            "--without-headers",
            "--disable-shared",
            "--disable-nls",
            "--disable-libgomp",
            "--disable-libmudflap",
            "--disable-libatomic",
            "--disable-libssp",
            "--disable-libstdcxx",
            "--disable-libvtv",
            "--enable-languages=c",
            "--disable-threads",
        ],
        make_targets=["all-gcc", "all-target-libgcc"],
        install_args=["install-gcc", "install-target-libgcc"],
        requires=[binutils.name],
        description="Building first-stage GCC (C only)",
    )


def make_gcc_pass2(config: BootstrapConfig, glibc: Stage, usr_lib_symlink: Stage) -> Stage:
    """Full C/C++ compiler against the installed glibc.

    Runs with every cross-tool variable unset: gcc's own build picks
    host and target tools itself and a stray ``CC`` would break that.

    Args:
        config: Run configuration.
        glibc: The glibc stage (target C library must exist).
        usr_lib_symlink: The ``usr/lib`` symlink stage.
    """
    prefix = config.prefix
    return mk_stage(
        "gcc-pass2",
        config=config,
        component="gcc-pass2",
        configure_flags=[
            f"--prefix={prefix}",
            f"--target={config.target}",
            f"--with-glibc-version={config.glibc_version}",
            "--enable-languages=c,c++",
            "--disable-multilib",
            "--disable-nls",
            "--enable-shared",
            "--enable-threads=posix",
            f"--with-sysroot={prefix}",
            f"--with-build-sysroot={prefix}",
            "--enable-lto",
            "--enable-gold=yes",
            f"--with-lib-path={config.lib_path}",
        ],
        overlay=HOST_OVERLAY,
        requires=[glibc.name, usr_lib_symlink.name],
        description="Building second-stage GCC (C/C++)",
    )
