"""
ID generation utilities for shot events.

Shot ids must stay unique across every round of a room, and resolution
must stay a pure function of its input, so the counter is seeded from the
state rather than held globally.
"""

import itertools
from typing import Iterator

SHOT_ID_PREFIX = "bullet"


class IDGenerator:
    """
    Generates unique, sequential shot IDs.

    This is a simple wrapper around itertools.count that remembers the
    last number handed out so it can be written back to the state.
    """

    def __init__(self, start: int = 1, prefix: str = SHOT_ID_PREFIX):
        """
        Initialize the ID generator.

        Args:
            start: The first number to generate (default: 1)
            prefix: Text placed before the number
        """
        self._prefix = prefix
        self._counter: Iterator[int] = itertools.count(start)
        self.last: int = start - 1

    @classmethod
    def after(cls, last_issued: int, prefix: str = SHOT_ID_PREFIX) -> "IDGenerator":
        """Generator that continues right after `last_issued`."""
        return cls(start=last_issued + 1, prefix=prefix)

    def next_id(self) -> str:
        """Generate the next unique ID."""
        self.last = next(self._counter)
        return f"{self._prefix}-{self.last}"
