"""
Core Models Package

Immutable, validated data models shared by every conversion stage.
The source descriptor and size selection are frozen dataclasses so they
can be handed to worker threads without copying.
"""

from .sizes import SizeSelection, DEFAULT_SIZES, MIN_ICON_SIZE, MAX_ICON_SIZE
from .source import SourceDescriptor, SourceKind, ICON_EXTENSION
from .ledger import ConversionWarning, WarningKind, WarningLedger

__all__ = [
    "SizeSelection",
    "DEFAULT_SIZES",
    "MIN_ICON_SIZE",
    "MAX_ICON_SIZE",
    "SourceDescriptor",
    "SourceKind",
    "ICON_EXTENSION",
    "ConversionWarning",
    "WarningKind",
    "WarningLedger",
]
