"""logtree: runtime-configurable, synchronous log routing.

Build a tree of dispatch nodes, each with its own level floor, per-target
overrides, filters and formatter, and fan records out to writers, files,
rotating files, channels, stdlib loggers or nested trees:

    import logtree

    logtree.Dispatch() \\
        .level("info") \\
        .level_for("noisy::dependency", "warn") \\
        .chain(logtree.stdout()) \\
        .chain(logtree.Dispatch().level("debug").chain(logtree.file("app.log"))) \\
        .apply()

    log = logtree.get_logger(__name__)
    log.info("ready")
"""

__version__ = "0.1.0"
__description__ = "Runtime-configurable log routing trees with per-target levels"

from logtree.api import Logger, get_logger, global_logger, max_level, set_logger, set_max_level
from logtree.errors import (
    FormatCallbackError,
    InitError,
    LoggedPanic,
    LogtreeError,
    SetLoggerError,
    UnrecoverableLoggingError,
)
from logtree.models import Level, LevelFilter, Location, Metadata, Record
from logtree.routing.dispatcher import (
    Dispatch,
    DispatchImpl,
    FormatCallback,
    Output,
    SharedDispatch,
)
from logtree.routing.sinks import BaseSink
from logtree.routing.sinks.callback import CallSink, NullSink, PanicSink, call
from logtree.routing.sinks.channel import ChannelSink, sender
from logtree.routing.sinks.rotating import RotatingFileSink, date_based
from logtree.routing.sinks.stdlib import StdlibLoggerSink, stdlib_logger
from logtree.routing.sinks.writer import Writer, file, stderr, stdout, writer

__all__ = [
    "__version__",
    # builder and nodes
    "Dispatch",
    "DispatchImpl",
    "FormatCallback",
    "Output",
    "SharedDispatch",
    # models
    "Level",
    "LevelFilter",
    "Location",
    "Metadata",
    "Record",
    # sinks
    "BaseSink",
    "CallSink",
    "ChannelSink",
    "NullSink",
    "PanicSink",
    "RotatingFileSink",
    "StdlibLoggerSink",
    "Writer",
    "call",
    "date_based",
    "file",
    "sender",
    "stderr",
    "stdlib_logger",
    "stdout",
    "writer",
    # global logger
    "Logger",
    "get_logger",
    "global_logger",
    "max_level",
    "set_logger",
    "set_max_level",
    # errors
    "FormatCallbackError",
    "InitError",
    "LoggedPanic",
    "LogtreeError",
    "SetLoggerError",
    "UnrecoverableLoggingError",
]
