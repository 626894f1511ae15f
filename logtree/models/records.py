"""Log record models — the immutable event that flows through a dispatch tree.

A ``Record`` is built at the call site, handed to the root of a tree, and
never mutated.  Formatting produces a *new* record (``with_message``) rather
than editing the original, so sibling branches always see the message their
own formatter chain produced.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict

from logtree.models.levels import Level

TARGET_SEPARATOR = "::"


def module_target(name: str) -> str:
    """Convert a dotted Python module name into a ``::`` separated target.

    >>> module_target("package.sub.module")
    'package::sub::module'
    """
    return name.replace(".", TARGET_SEPARATOR)


class Metadata(BaseModel):
    """The part of a record that filters and level checks look at."""

    model_config = ConfigDict(frozen=True)

    level: Level
    target: str


class Location(BaseModel):
    """Where a record was emitted.  Every field is optional."""

    model_config = ConfigDict(frozen=True)

    module_path: str | None = None
    file: str | None = None
    line: int | None = None

    def __str__(self) -> str:
        parts = [
            f"module_path={self.module_path!r}",
            f"file={self.file!r}",
            f"line={self.line!r}",
        ]
        return "Location(" + ", ".join(parts) + ")"


class Record(BaseModel):
    """A single structured log event.

    The message is stored as a template plus arguments and rendered on
    demand with ``%`` interpolation, the same convention stdlib logging
    uses, so records that never reach a sink never pay for rendering.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    level: Level
    target: str
    msg: str
    args: Any = ()
    location: Location = Location()

    @property
    def metadata(self) -> Metadata:
        return Metadata(level=self.level, target=self.target)

    def get_message(self) -> str:
        """Render ``msg % args``; a record without args returns ``msg`` as is.

        A lone mapping argument is used as the mapping itself, so
        ``"%(user)s"`` with ``({"user": "ann"},)`` renders the way stdlib
        logging renders it.
        """
        args = self.args
        if not args:
            return self.msg
        if isinstance(args, tuple) and len(args) == 1 and isinstance(args[0], Mapping) and args[0]:
            args = args[0]
        return self.msg % args

    def with_message(self, message: str) -> Record:
        """Return a copy carrying an already rendered *message*."""
        return self.model_copy(update={"msg": message, "args": ()})

    @classmethod
    def from_stdlib(cls, log_record: logging.LogRecord) -> Record:
        """Build a record from a stdlib ``logging.LogRecord``.

        The logger name becomes the target (dots turned into ``::``) and the
        message is rendered eagerly, including any attached traceback.
        """
        message = log_record.getMessage()
        if log_record.exc_info:
            message = message + "\n" + logging.Formatter().formatException(
                log_record.exc_info
            )
        return cls(
            level=Level.from_stdlib(log_record.levelno),
            target=module_target(log_record.name),
            msg=message,
            location=Location(
                module_path=log_record.module,
                file=log_record.pathname,
                line=log_record.lineno,
            ),
        )
