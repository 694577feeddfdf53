"""Pipeline variants.

Both share the six-stage toolchain prefix and differ only in what comes
after gcc-pass2:

    cmake:  ... → gcc-pass2 → cmake
    gdb:    ... → gcc-pass2 → gmp → gdb

A new variant is a Toolchain subclass with a longer ``ORDER`` plus an entry
in ``VARIANTS``.
"""

from xtc.config import BootstrapConfig
from xtcpkgs.bootstrap.cmake import CMakeToolchain
from xtcpkgs.bootstrap.gdb import GdbToolchain
from xtcpkgs.bootstrap.toolchain import Toolchain

VARIANTS: dict[str, type[Toolchain]] = {
    "cmake": CMakeToolchain,
    "gdb": GdbToolchain,
}

DEFAULT_VARIANT = "cmake"


def get_variant(name: str, config: BootstrapConfig | None = None) -> Toolchain:
    try:
        cls = VARIANTS[name]
    except KeyError:
        raise KeyError(
            f"unknown variant {name!r} (choose from {', '.join(VARIANTS)})"
        ) from None
    return cls(config)


__all__ = [
    "Toolchain", "CMakeToolchain", "GdbToolchain",
    "VARIANTS", "DEFAULT_VARIANT", "get_variant",
]
