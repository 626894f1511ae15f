"""Last-resort handling for sink write failures.

Sinks wrap each write in ``fallback_on_error``.  A failing write is reported
on ``sys.stderr`` together with the record it was trying to deliver, and the
caller carries on as if nothing happened.  If stderr cannot be written either
there is nothing sensible left to do, and ``UnrecoverableLoggingError`` is
raised with both errors attached.
"""

from __future__ import annotations

import sys
from collections.abc import Callable

from logtree.errors import UnrecoverableLoggingError
from logtree.models.records import Record


def _payload_of(record: Record) -> str:
    try:
        return record.get_message()
    except Exception:  # noqa: BLE001
        return f"{record.msg!r} % {record.args!r}"


def backup_logging(record: Record, error: BaseException) -> None:
    """Write a diagnostic for *record* and *error* to ``sys.stderr``."""
    payload = _payload_of(record)
    try:
        stream = sys.stderr
        stream.write(
            "Error performing logging."
            f"\n\tattempted to log: {payload}"
            f"\n\torigin location: {record.location}"
            f"\n\tlogging error: {error!r}\n"
        )
        stream.flush()
    except Exception as second_error:  # noqa: BLE001
        raise UnrecoverableLoggingError(
            payload, record.location, error, second_error
        ) from second_error


def fallback_on_error(record: Record, log_func: Callable[[Record], None]) -> None:
    """Run ``log_func(record)``; report any exception via ``backup_logging``."""
    try:
        log_func(record)
    except Exception as error:  # noqa: BLE001
        backup_logging(record, error)
