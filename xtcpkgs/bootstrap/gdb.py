"""Toolchain + debugger variant: gmp first, then gdb linked against it."""

from functools import cached_property

from xtc.stage import Stage
from xtcpkgs.bootstrap.toolchain import Toolchain
from xtcpkgs.pkgs.gdb import make_gdb
from xtcpkgs.pkgs.gmp import make_gmp


class GdbToolchain(Toolchain):
    ORDER = Toolchain.ORDER + ("gmp", "gdb")

    @cached_property
    def gmp(self) -> Stage:
        return self.call(make_gmp)

    @cached_property
    def gdb(self) -> Stage:
        return self.call(make_gdb)
