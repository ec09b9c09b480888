"""Clock protocol — source of the current time."""
from typing import Protocol


class Clock(Protocol):
    """Abstract interface returning the current time in whole epoch seconds."""

    def now(self) -> int: ...
