"""
Identity bookkeeping for one top-level copy or merge.

A tracker lives exactly as long as the outermost public call that created
it. Nested public calls made while it is active (a merge that copies, a
strategy that merges elements, a user type calling back into isdeep)
join the same tracker, so cycles and shared references are recognized
across the whole call tree.

The active tracker is held in a context variable, which isolates it per
thread and per asyncio task. Internal recursion receives the tracker as
an explicit argument; only public entry points look it up.

Example:
    >>> with scope() as tracker:
    ...     tracker.visit(some_dict)
    True
"""

from __future__ import annotations

import contextlib as _contextlib
import contextvars as _contextvars
import typing as _typing

_active: _contextvars.ContextVar[IdentityTracker | None] = _contextvars.ContextVar(
    "isdeep_identity_tracker",
    default=None,
)


class IdentityTracker:
    """
    Per-invocation tables keyed by object identity.

    Two tables are kept apart so copying and merging never confuse each
    other's entries:

    - ``memo``: source id -> copy. Uses the ``copy.deepcopy`` memo layout,
      including the keep-alive list stored under ``memo[id(memo)]``, so it
      can be handed straight to ``copy.deepcopy`` and ``__deepcopy__`` hooks.
    - ``visited``: id -> target for merges already entered.

    Both tables hold references to the objects they key on, so an id cannot
    be recycled by the garbage collector while the tracker is alive.

    Do not instantiate directly; use ``scope()``.
    """

    __slots__ = ("_depth", "memo", "visited")

    def __init__(self) -> None:
        self._depth = 0
        self.memo: dict[int, _typing.Any] = {}
        self.visited: dict[int, _typing.Any] = {}

    @property
    def depth(self) -> int:
        """Number of nested scopes currently holding this tracker."""
        return self._depth

    def copy_of(self, source: _typing.Any) -> tuple[bool, _typing.Any]:
        """
        Look up the copy previously produced for ``source``.

        Returns:
            ``(True, copy)`` if ``source`` was copied in this invocation,
            otherwise ``(False, None)``.
        """
        key = id(source)
        if key in self.memo:
            return True, self.memo[key]
        return False, None

    def remember_copy(self, source: _typing.Any, copy: _typing.Any) -> None:
        """Register ``copy`` as the result for ``source``."""
        self.memo[id(source)] = copy
        self.memo.setdefault(id(self.memo), []).append(source)

    def visit(self, target: _typing.Any) -> bool:
        """
        Mark ``target`` as entered by a merge.

        Returns:
            False if the target was already entered during this invocation
            (a cycle), True on first entry.
        """
        key = id(target)
        if key in self.visited:
            return False
        self.visited[key] = target
        return True

    def _enter(self) -> None:
        self._depth += 1

    def _exit(self) -> None:
        self._depth -= 1


@_contextlib.contextmanager
def scope(*, fresh: bool = False) -> _typing.Iterator[IdentityTracker]:
    """
    Enter the tracker for the current call tree.

    Creates a fresh tracker when none is active in this context, otherwise
    joins the active one. The tracker is discarded when the scope that
    created it exits, even if the body raised.

    Args:
        fresh: Always start a new tracker, hiding the active one until
            this scope exits. Public calls nested inside join the new one.

    Yields:
        The tracker shared by the whole call tree.
    """
    tracker = None if fresh else _active.get()
    token: _contextvars.Token[IdentityTracker | None] | None = None
    if tracker is None:
        tracker = IdentityTracker()
        token = _active.set(tracker)
    tracker._enter()
    try:
        yield tracker
    finally:
        tracker._exit()
        if token is not None:
            _active.reset(token)


def active_tracker() -> IdentityTracker | None:
    """Return the tracker of the current call tree, or None outside any call."""
    return _active.get()
