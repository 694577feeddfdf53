"""xtc — staged cross-toolchain bootstrap orchestrator."""

__version__ = "0.1.0"
