"""
Module: ledger

Purpose:
    Ordered record of advisory conditions met during a conversion. Each
    warning is logged as soon as it is recorded; under strict mode the
    first one is escalated to AbortedByWarning instead.

Key Classes:
    - WarningKind: The closed set of advisory conditions
    - ConversionWarning: One recorded condition
    - WarningLedger: Ordered collection with the strict-mode policy

Dependencies:
    - logging (std)
    - core.errors: AbortedByWarning

Used By:
    - converter.validation
    - converter.decoding
    - converter.pipeline
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List

from ..errors import AbortedByWarning

logger = logging.getLogger(__name__)


class WarningKind(str, Enum):
    OUTPUT_EXISTS = "output_exists"
    SIZES_CLAMPED = "sizes_clamped"
    NON_SQUARE_INPUT = "non_square_input"
    UPSCALE_REQUESTED = "upscale_requested"


# Message used when strict mode turns a warning into an error
_ABORT_REASONS = {
    WarningKind.OUTPUT_EXISTS: "Program would overwrite existing icon",
    WarningKind.SIZES_CLAMPED: "Some requested sizes are out of range!",
    WarningKind.NON_SQUARE_INPUT: "Input image isn't square!",
    WarningKind.UPSCALE_REQUESTED: "Input image would be scaled up!",
}


@dataclass(frozen=True, slots=True)
class ConversionWarning:
    """
    One advisory condition.

    Attributes:
        kind: Which condition was met
        message: Human-readable description shown to the user
    """
    kind: WarningKind
    message: str

    @property
    def abort_reason(self) -> str:
        return _ABORT_REASONS[self.kind]


@dataclass
class WarningLedger:
    """
    Ordered warnings for one conversion.

    Attributes:
        strict: Escalate the first warning to AbortedByWarning
        entries: Warnings recorded so far, in order

    Example:
        >>> ledger = WarningLedger()
        >>> ledger.warn(WarningKind.UPSCALE_REQUESTED, "scaled up")
        >>> [w.kind for w in ledger]
        [<WarningKind.UPSCALE_REQUESTED: 'upscale_requested'>]
    """
    strict: bool = False
    entries: List[ConversionWarning] = field(default_factory=list)

    def warn(self, kind: WarningKind, message: str) -> None:
        """
        Record and log a warning.

        Raises:
            AbortedByWarning: If strict mode is on
        """
        warning = ConversionWarning(kind, message)
        self.entries.append(warning)
        logger.warning(message)
        if self.strict:
            raise AbortedByWarning(warning.abort_reason, warning)

    def kinds(self) -> List[WarningKind]:
        return [w.kind for w in self.entries]

    def __iter__(self) -> Iterator[ConversionWarning]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)
