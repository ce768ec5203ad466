"""Last-writer-wins by issue order for concurrent fetches.

Each fetch takes a ticket before awaiting the network. When the response
arrives it may only be applied if no younger ticket has already been
applied; otherwise it is stale and gets discarded.
"""

from __future__ import annotations

import itertools


class RequestSequencer:

    def __init__(self) -> None:
        self._counter = itertools.count(1)
        self._applied = 0

    def issue(self) -> int:
        return next(self._counter)

    def is_stale(self, ticket: int) -> bool:
        """True once a younger ticket was applied or the sequencer invalidated."""
        return ticket <= self._applied

    def try_apply(self, ticket: int) -> bool:
        """Mark *ticket* as applied if it is newer than the last applied one."""
        if ticket <= self._applied:
            return False
        self._applied = ticket
        return True

    def invalidate(self) -> None:
        """Make every ticket issued so far stale (e.g. on logout)."""
        self._applied = self.issue()
