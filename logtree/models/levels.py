"""Severity levels and level filters.

``Level`` is the severity carried by a record.  ``LevelFilter`` is the floor a
dispatch node is configured with; it has every ``Level`` member plus ``OFF``,
which sits above all of them.  A record passes a floor when
``record.level >= floor``.

Numeric values line up with the standard library so records can cross the
``logging`` bridge without a lookup table.
"""

from __future__ import annotations

from enum import IntEnum

_ALIASES: dict[str, str] = {
    "WARNING": "WARN",
    "CRITICAL": "ERROR",
    "FATAL": "ERROR",
    "NONE": "OFF",
}


def _normalize(name: str) -> str:
    key = name.strip().upper()
    return _ALIASES.get(key, key)


class Level(IntEnum):
    """Severity of a single log record, least severe first."""

    TRACE = 5
    DEBUG = 10
    INFO = 20
    WARN = 30
    ERROR = 40

    def __str__(self) -> str:
        return self.name

    @classmethod
    def parse(cls, name: str) -> Level:
        """Parse a level name case-insensitively (``"warning"`` -> ``WARN``)."""
        try:
            return cls[_normalize(name)]
        except KeyError:
            raise ValueError(f"Unknown log level: {name!r}") from None

    @classmethod
    def from_stdlib(cls, levelno: int) -> Level:
        """Bucket a stdlib ``logging`` level number into a ``Level``."""
        if levelno >= cls.ERROR:
            return cls.ERROR
        if levelno >= cls.WARN:
            return cls.WARN
        if levelno >= cls.INFO:
            return cls.INFO
        if levelno >= cls.DEBUG:
            return cls.DEBUG
        return cls.TRACE

    def to_filter(self) -> LevelFilter:
        return LevelFilter(int(self))


class LevelFilter(IntEnum):
    """Minimum severity a node lets through.  ``OFF`` lets nothing through."""

    TRACE = 5
    DEBUG = 10
    INFO = 20
    WARN = 30
    ERROR = 40
    OFF = 100

    def __str__(self) -> str:
        return self.name

    @classmethod
    def parse(cls, name: str) -> LevelFilter:
        """Parse a filter name case-insensitively (``"off"`` -> ``OFF``)."""
        try:
            return cls[_normalize(name)]
        except KeyError:
            raise ValueError(f"Unknown level filter: {name!r}") from None

    @classmethod
    def coerce(cls, value: LevelFilter | Level | str | int) -> LevelFilter:
        """Accept a filter, a level, a name or a stdlib-style number."""
        if isinstance(value, str):
            return cls.parse(value)
        return cls(int(value))

    def allows(self, level: Level) -> bool:
        """Return ``True`` if a record at *level* passes this floor."""
        return level >= self
