"""Stage definitions for the cross-toolchain bootstrap.

Each component's stage is built by a ``make_*`` function in
``xtcpkgs.pkgs``; ``xtcpkgs.bootstrap`` strings them together into the
supported pipeline variants.
"""

from xtcpkgs.mk_stage import mk_stage
from xtcpkgs.stage_set import StageSet

__all__ = ["mk_stage", "StageSet"]
