"""LevelIndex — resolves the effective floor for a target.

Per-target overrides are matched most-specific-first.  The target is tested
as a whole, then with its trailing ``::segment`` stripped, and so on down to
the first segment.  The first override found wins; with none, the node's
default floor applies.

Only the two-character separator ``::`` marks a segment boundary.  A lone
``:`` is part of the segment name, and a target that merely starts with the
same characters as an override key (``"rooty"`` vs ``"root"``) does not match
it.
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum

from logtree.models.levels import LevelFilter
from logtree.models.records import TARGET_SEPARATOR

# Above this many overrides a dict lookup replaces the linear scan.
DICT_THRESHOLD = 12


class IndexKind(str, Enum):
    """How the override set is stored."""

    JUST_DEFAULT = "just_default"
    MINIMAL = "minimal"
    MANY = "many"


class LevelIndex:
    """Immutable override set plus the default floor it falls back to.

    Parameters
    ----------
    levels:
        ``(target, floor)`` pairs.  Keys are expected to be unique already;
        the builder guarantees that by replacing on re-assignment.
    default_level:
        Floor returned when no override matches.
    """

    __slots__ = ("_kind", "_minimal", "_many", "_default")

    def __init__(
        self,
        levels: Iterable[tuple[str, LevelFilter]] = (),
        default_level: LevelFilter = LevelFilter.TRACE,
    ) -> None:
        pairs = tuple(levels)
        self._default = default_level
        self._minimal: tuple[tuple[str, LevelFilter], ...] = ()
        self._many: dict[str, LevelFilter] = {}

        if not pairs:
            self._kind = IndexKind.JUST_DEFAULT
        elif len(pairs) > DICT_THRESHOLD:
            self._kind = IndexKind.MANY
            self._many = dict(pairs)
        else:
            self._kind = IndexKind.MINIMAL
            self._minimal = pairs

    @property
    def kind(self) -> IndexKind:
        return self._kind

    @property
    def default_level(self) -> LevelFilter:
        return self._default

    def __len__(self) -> int:
        if self._kind is IndexKind.MANY:
            return len(self._many)
        return len(self._minimal)

    def items(self) -> list[tuple[str, LevelFilter]]:
        if self._kind is IndexKind.MANY:
            return list(self._many.items())
        return list(self._minimal)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def find_exact(self, target: str) -> LevelFilter | None:
        """Return the override registered for exactly *target*, if any."""
        if self._kind is IndexKind.MANY:
            return self._many.get(target)
        for name, level in self._minimal:
            if name == target:
                return level
        return None

    def find_module(self, target: str) -> LevelFilter | None:
        """Return the most specific override covering *target*, if any."""
        if self._kind is IndexKind.JUST_DEFAULT:
            return None

        level = self.find_exact(target)
        if level is not None:
            return level

        # "a::b::c" tests "a::b" then "a".
        end = target.rfind(TARGET_SEPARATOR)
        while end != -1:
            level = self.find_exact(target[:end])
            if level is not None:
                return level
            end = target.rfind(TARGET_SEPARATOR, 0, end)
        return None

    def resolve(self, target: str) -> LevelFilter:
        """Return the effective floor for *target*."""
        level = self.find_module(target)
        return self._default if level is None else level

    def __repr__(self) -> str:
        entries = ", ".join(f"{name!r}: {level}" for name, level in self.items())
        return (
            f"LevelIndex(kind={self._kind.value}, default={self._default}, "
            f"levels={{{entries}}})"
        )
