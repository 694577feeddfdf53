"""Lazy stage set.

A pipeline variant is a StageSet subclass: each stage is a
``@cached_property`` and ``ORDER`` lists the attribute names in run order.

    class MyToolchain(StageSet):
        ORDER = ("binutils", "gcc_pass1")

        @cached_property
        def binutils(self):
            return make_binutils(self.config, self.paths["binutils"])

Subclasses extend a variant by appending to ``ORDER`` and adding stages;
nothing is built until ``stages`` is first read.
"""

import inspect
from functools import cached_property

from xtc.config import BootstrapConfig, PathSet
from xtc.stage import Stage


class StageSet:
    """Base class for an ordered, lazily-built set of stages."""

    ORDER: tuple[str, ...] = ()

    def __init__(self, config: BootstrapConfig | None = None):
        self.config = config or BootstrapConfig()

    @property
    def paths(self) -> PathSet:
        return self.config.paths

    @cached_property
    def stages(self) -> list[Stage]:
        return [getattr(self, attr) for attr in self.ORDER]

    @property
    def names(self) -> list[str]:
        return [s.name for s in self.stages]

    def stage(self, name: str) -> Stage:
        """Look a stage up by its pipeline name (``gcc-pass1``)."""
        for s in self.stages:
            if s.name == name:
                return s
        raise KeyError(f"no stage {name!r} in {type(self).__name__}")

    def call(self, fn):
        """Resolve fn's parameters from this stage set and call it.

            self.call(lambda config, glibc: ...)
            # equivalent to: fn(config=self.config, glibc=self.glibc)
        """
        sig = inspect.signature(fn)
        kwargs = {}
        for name in sig.parameters:
            if name == "self":
                continue
            if not hasattr(self, name):
                raise AttributeError(
                    f"stage set has no attribute {name!r} "
                    f"(required by {fn.__qualname__})"
                )
            kwargs[name] = getattr(self, name)
        return fn(**kwargs)
