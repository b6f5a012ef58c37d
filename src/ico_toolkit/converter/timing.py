"""
Module: converter.timing

Purpose:
    Timing instrumentation for the conversion pipeline. Records how long
    each stage, and each size within the resize and encode stages, took
    so slow decodes or encodes can be spotted with --verbose.

Key Classes:
    - TimingLog: Collects stage-level and per-size timings

Key Functions:
    - timed_phase: Context manager for timing code blocks

Dependencies:
    - time (std)
    - contextlib (std)
    - dataclasses (std)

Used By:
    - converter.pipeline: Main conversion orchestrator
    - converter.resizing, converter.encoding: Per-size timings
"""

from __future__ import annotations

import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Dict, Generator, Optional, Tuple


@dataclass
class TimingLog:
    """
    Timing metrics for one conversion.

    Attributes:
        stage_timings: Dict of stage_name -> duration_seconds, in the
            order stages finished
        size_timings: Dict of size -> {phase: duration_seconds} for the
            per-size resize and encode work

    Example:
        >>> log = TimingLog()
        >>> log.log_stage("decode", 0.012)
        >>> log.total
        0.012
    """
    stage_timings: Dict[str, float] = field(default_factory=dict)
    size_timings: Dict[int, Dict[str, float]] = field(default_factory=dict)

    def log_stage(self, stage: str, duration: float) -> None:
        """Log a stage timing, accumulating if the stage repeats."""
        self.stage_timings[stage] = self.stage_timings.get(stage, 0.0) + duration

    def log_size(self, size: int, phase: str, duration: float) -> None:
        """Log the time one size spent in a phase (resize, encode)."""
        phases = self.size_timings.setdefault(size, {})
        phases[phase] = phases.get(phase, 0.0) + duration

    @property
    def total(self) -> float:
        return sum(self.stage_timings.values())

    def slowest(self) -> Optional[Tuple[str, float]]:
        """Slowest stage and its duration, or None if nothing was timed."""
        if not self.stage_timings:
            return None
        return max(self.stage_timings.items(), key=lambda x: x[1])

    def summary(self) -> str:
        """Generate human-readable timing summary."""
        lines = ["=== Conversion Timing Summary ==="]
        for stage, duration in self.stage_timings.items():
            lines.append(f"  {stage:12s} {duration:.3f}s")
        lines.append(f"  {'total':12s} {self.total:.3f}s")

        slowest = self.slowest()
        if slowest is not None:
            lines.append(f"  slowest stage: {slowest[0]} ({slowest[1]:.3f}s)")

        if self.size_timings:
            lines.append("  per size:")
            for size in sorted(self.size_timings):
                phases = "  ".join(
                    f"{phase} {duration:.3f}s"
                    for phase, duration in self.size_timings[size].items()
                )
                lines.append(f"    {size:>3d}px  {phases}")
        return "\n".join(lines)


@contextmanager
def timed_phase(log: TimingLog, stage: str) -> Generator[None, None, None]:
    """
    Context manager for timing a pipeline stage.

    The duration is recorded even if the block raises.

    Example:
        >>> log = TimingLog()
        >>> with timed_phase(log, "resize"):
        ...     images = resize_all(image, sizes, ResizeFilter.CUBIC)
    """
    start = time.perf_counter()
    try:
        yield
    finally:
        log.log_stage(stage, time.perf_counter() - start)
