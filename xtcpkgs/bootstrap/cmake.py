"""Toolchain + CMake variant."""

from functools import cached_property

from xtc.stage import Stage
from xtcpkgs.bootstrap.toolchain import Toolchain
from xtcpkgs.pkgs.cmake import make_cmake


class CMakeToolchain(Toolchain):
    ORDER = Toolchain.ORDER + ("cmake",)

    @cached_property
    def cmake(self) -> Stage:
        return self.call(make_cmake)
