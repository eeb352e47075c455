"""Transaction ID generation."""

from __future__ import annotations

import random
from dataclasses import dataclass


@dataclass(frozen=True)
class TxidGenerator:
    """Creates transaction IDs: random ones, or a fixed starting value if given."""

    start: int | None = None

    def __post_init__(self) -> None:
        if self.start is not None and not 0 <= self.start <= 0xFFFF:
            raise ValueError(f"transaction ID out of range: {self.start}")

    def generate(self) -> int:
        """Return a transaction ID."""
        if self.start is None:
            return random.getrandbits(16)
        return self.start