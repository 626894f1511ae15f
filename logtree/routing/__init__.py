"""logtree routing — compiled dispatch trees and the sinks they feed.

A tree is assembled with the ``Dispatch`` builder and compiled into immutable
``DispatchImpl`` nodes.  Each node filters, resolves a per-target level
floor, optionally reformats, and fans a record out to its children in
attachment order.  Children are nested nodes, shared nodes, or any object
implementing the ``BaseSink`` protocol.

A write failure in one sink never reaches the caller and never stops delivery to
the other sinks: it is reported on stderr by the fallback path.
"""
