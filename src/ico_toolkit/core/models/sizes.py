"""
Module: sizes

Purpose:
    Provides the SizeSelection dataclass - the cleaned, ordered set of icon
    sizes to generate, along with the requested sizes that were rejected
    for falling outside the range an ICO directory entry can describe.

Key Functions:
    - SizeSelection.from_requested(sizes): Sort, deduplicate and clamp
    - SizeSelection.largest: Biggest size to generate

Dependencies:
    - dataclasses (std)
    - typing (std)

Used By:
    - converter.validation
    - converter.decoding
    - converter.pipeline
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, Tuple

MIN_ICON_SIZE = 1
MAX_ICON_SIZE = 256

DEFAULT_SIZES: Tuple[int, ...] = (16, 20, 24, 32, 40, 48, 64, 96, 128, 256)


@dataclass(frozen=True, slots=True)
class SizeSelection:
    """
    Icon sizes after validation.

    Attributes:
        sizes: Accepted sizes, ascending and unique
        rejected: Requested sizes outside [MIN_ICON_SIZE, MAX_ICON_SIZE],
            ascending and unique

    Invariants:
        - sizes is strictly ascending
        - every value in sizes is within [MIN_ICON_SIZE, MAX_ICON_SIZE]
        - sizes and rejected are disjoint

    Example:
        >>> sel = SizeSelection.from_requested([64, 16, 300, 0, 16])
        >>> sel.sizes
        (16, 64)
        >>> sel.rejected
        (0, 300)
    """

    sizes: Tuple[int, ...]
    rejected: Tuple[int, ...] = ()

    def __post_init__(self) -> None:
        """Validate selection on construction."""
        for size in self.sizes:
            if not MIN_ICON_SIZE <= size <= MAX_ICON_SIZE:
                raise ValueError(f"size out of range: {size}")
        if list(self.sizes) != sorted(set(self.sizes)):
            raise ValueError(f"sizes must be ascending and unique: {self.sizes}")

    @classmethod
    def from_requested(cls, requested: Iterable[int]) -> "SizeSelection":
        """Build a selection from raw user input."""
        unique = sorted(set(int(size) for size in requested))
        accepted = tuple(s for s in unique if MIN_ICON_SIZE <= s <= MAX_ICON_SIZE)
        rejected = tuple(s for s in unique if not MIN_ICON_SIZE <= s <= MAX_ICON_SIZE)
        return cls(sizes=accepted, rejected=rejected)

    @property
    def largest(self) -> int:
        """Biggest accepted size (0 when empty)."""
        return self.sizes[-1] if self.sizes else 0

    @property
    def is_empty(self) -> bool:
        return not self.sizes

    def __iter__(self) -> Iterator[int]:
        return iter(self.sizes)

    def __len__(self) -> int:
        return len(self.sizes)
