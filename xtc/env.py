"""Stage-scoped environment overlays.

An overlay is a small mapping of variable overrides attached to one stage:
cross-tool names (``CC=x86_64-infra-linux-gnu-gcc``), a PATH with the
prefix's bin directory in front, or ``None`` to unset a variable the
invoking shell may have exported.

Overlays are never written into ``os.environ``. ``merge()`` turns a base
environment plus an overlay into the mapping handed to ``subprocess``, and
``EnvScope`` tracks which overlay is active so a stage can't inherit the
previous stage's tools.
"""

from __future__ import annotations

import logging
import re
from contextlib import contextmanager
from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterator, Mapping

from xtc.errors import ScopeError

log = logging.getLogger(__name__)

_REF = re.compile(r"\{([A-Za-z_][A-Za-z0-9_]*)\}")


class Overlay(Mapping[str, "str | None"]):
    """Immutable name -> value mapping. A value of None unsets the name.

    Values may reference the base environment as ``{NAME}``::

        Overlay(PATH="/toolchain/bin:{PATH}")
    """

    def __init__(self, values: Mapping[str, str | None] | None = None, **kw: str | None):
        self._values = MappingProxyType({**(values or {}), **kw})

    def __getitem__(self, name: str) -> str | None:
        return self._values[name]

    def __iter__(self):
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"Overlay({dict(self._values)!r})"

    def __hash__(self) -> int:
        return hash(tuple(sorted(self._values.items(), key=lambda kv: kv[0])))

    def __eq__(self, other) -> bool:
        if not isinstance(other, Mapping):
            return NotImplemented
        return dict(self._values) == dict(other)


EMPTY = Overlay()


def _expand(value: str, base: Mapping[str, str]) -> str:
    return _REF.sub(lambda m: base.get(m.group(1), ""), value)


def merge(base: Mapping[str, str], overlay: Mapping[str, str | None]) -> dict[str, str]:
    """Return base with overlay applied. Neither argument is modified."""
    merged = dict(base)
    for name, value in overlay.items():
        if value is None:
            merged.pop(name, None)
        else:
            merged[name] = _expand(value, base)
    return merged


def delta(base: Mapping[str, str], env: Mapping[str, str]) -> dict[str, str | None]:
    """Variables that differ between base and env (None = removed)."""
    changed: dict[str, str | None] = {
        k: v for k, v in env.items() if base.get(k) != v
    }
    for k in base:
        if k not in env:
            changed[k] = None
    return changed


@dataclass(frozen=True)
class _Token:
    serial: int
    overlay: Overlay


class EnvScope:
    """Tracks the single active overlay over a fixed base environment.

    ``apply()`` snapshots and returns a token, ``revert(token)`` restores the
    snapshot. Applying while another overlay is active is an error: overlays
    are never stacked across stages.
    """

    def __init__(self, base: Mapping[str, str]):
        self._base = dict(base)
        self._active: _Token | None = None
        self._serial = 0
        self._current: dict[str, str] = dict(self._base)

    @property
    def base(self) -> Mapping[str, str]:
        return MappingProxyType(self._base)

    @property
    def current(self) -> Mapping[str, str]:
        """Environment the next process launch should see."""
        return MappingProxyType(self._current)

    @property
    def active(self) -> bool:
        return self._active is not None

    def apply(self, overlay: Mapping[str, str | None]) -> _Token:
        if self._active is not None:
            raise ScopeError(
                f"overlay {dict(self._active.overlay)!r} still active"
            )
        self._serial += 1
        token = _Token(self._serial, Overlay(overlay))
        self._current = merge(self._base, overlay)
        self._active = token
        if overlay:
            log.debug("overlay applied: %s", ", ".join(
                f"{k}={'<unset>' if v is None else v}" for k, v in overlay.items()
            ))
        return token

    def revert(self, token: _Token) -> None:
        if self._active is None or token.serial != self._active.serial:
            raise ScopeError("revert of an overlay that is not active")
        self._current = dict(self._base)
        self._active = None

    @contextmanager
    def applied(self, overlay: Mapping[str, str | None]) -> Iterator[Mapping[str, str]]:
        token = self.apply(overlay)
        try:
            yield self.current
        finally:
            self.revert(token)
