"""Overlays and probes shared across stages.

  - CROSS_TOOLS: tool variables pointed at ``<target>-<tool>`` binaries
  - cross_overlay(): complete overlay for stages built with the new cross tools
  - HOST_OVERLAY: unsets every cross-tool variable, leaving host defaults
  - build_triplet(): probe for the build machine's config.guess triplet
"""

from pathlib import Path

from xtc.config import BootstrapConfig
from xtc.env import Overlay
from xtc.stage import Probe


# ---------------------------------------------------------------------------
# Tool variables
# ---------------------------------------------------------------------------

CROSS_TOOLS = {
    "CC": "gcc",
    "CXX": "g++",
    "AR": "ar",
    "RANLIB": "ranlib",
    "LD": "ld",
    "READELF": "readelf",
    "OBJDUMP": "objdump",
    "NM": "nm",
    "AS": "as",
}

HOST_OVERLAY = Overlay({name: None for name in CROSS_TOOLS})


def cross_overlay(config: BootstrapConfig) -> Overlay:
    """Point every tool variable at the cross binaries in ``<prefix>/bin``.

    The overlay is complete on its own: each stage that needs cross tools
    declares it, none relies on a previous stage's environment.
    """
    values: dict[str, str | None] = {
        name: f"{config.target}-{tool}" for name, tool in CROSS_TOOLS.items()
    }
    values["PATH"] = f"{config.prefix / 'bin'}:{{PATH}}"
    return Overlay(values)


# ---------------------------------------------------------------------------
# Probes
# ---------------------------------------------------------------------------

def build_triplet(script: Path, template: str = "--build={}") -> Probe:
    """The build machine's triplet, as printed by a shipped config.guess."""
    return Probe((str(script),), template)
