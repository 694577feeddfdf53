"""The shared toolchain prefix of every variant.

    binutils → gcc-pass1 → linux-headers → glibc → usr-lib-symlink → gcc-pass2

gcc-pass1 precedes glibc because glibc is compiled by it; the kernel
headers precede glibc because glibc's configure reads them; gcc-pass2
follows glibc because a shared, C++-capable compiler links against it.
Each stage's ``requires`` records these edges and ``validate_order``
checks them before anything runs.
"""

from functools import cached_property

from xtc.stage import Stage
from xtcpkgs.pkgs.binutils import make_binutils
from xtcpkgs.pkgs.gcc import make_gcc_pass1, make_gcc_pass2
from xtcpkgs.pkgs.glibc import make_glibc
from xtcpkgs.pkgs.linux_headers import make_linux_headers
from xtcpkgs.pkgs.usr_lib_symlink import make_usr_lib_symlink
from xtcpkgs.stage_set import StageSet


class Toolchain(StageSet):
    """Cross binutils, both gcc passes, kernel headers and glibc (6 stages)."""

    ORDER = (
        "binutils",
        "gcc_pass1",
        "linux_headers",
        "glibc",
        "usr_lib_symlink",
        "gcc_pass2",
    )

    @cached_property
    def binutils(self) -> Stage:
        return make_binutils(self.config)

    @cached_property
    def gcc_pass1(self) -> Stage:
        return self.call(make_gcc_pass1)

    @cached_property
    def linux_headers(self) -> Stage:
        return make_linux_headers(self.config)

    @cached_property
    def glibc(self) -> Stage:
        return self.call(make_glibc)

    @cached_property
    def usr_lib_symlink(self) -> Stage:
        return self.call(make_usr_lib_symlink)

    @cached_property
    def gcc_pass2(self) -> Stage:
        return self.call(make_gcc_pass2)
