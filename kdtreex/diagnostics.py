from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator

import psutil

from kdtreex import config as kx_config


@dataclass
class _ResourceSnapshot:
    cpu_user: float
    rss: int


def _take_snapshot(process: psutil.Process) -> _ResourceSnapshot:
    return _ResourceSnapshot(
        cpu_user=float(process.cpu_times().user),
        rss=int(process.memory_info().rss),
    )


def _format_value(value: Any) -> str:
    if isinstance(value, float):
        return f"{value:.3f}"
    return str(value)


@dataclass
class OperationLog:
    """Mutable record populated inside :func:`log_operation`."""

    op: str
    metadata: Dict[str, Any] = field(default_factory=dict)
    wall_ms: float | None = None
    cpu_user_ms: float | None = None
    rss_delta: int | None = None

    def add_metadata(self, **kwargs: Any) -> None:
        self.metadata.update(kwargs)

    def render(self) -> str:
        parts = [f"op={self.op}"]
        parts.append(
            f"wall_ms={self.wall_ms:.3f}" if self.wall_ms is not None else "wall_ms=NA"
        )
        parts.append(
            f"cpu_user_ms={self.cpu_user_ms:.3f}"
            if self.cpu_user_ms is not None
            else "cpu_user_ms=NA"
        )
        parts.append(
            f"rss_delta={self.rss_delta}" if self.rss_delta is not None else "rss_delta=NA"
        )
        for key, value in self.metadata.items():
            parts.append(f"{key}={_format_value(value)}")
        return " ".join(parts)


@contextmanager
def log_operation(logger: logging.Logger, op: str) -> Iterator[OperationLog]:
    """Time an operation and emit a single ``op=...`` summary line at INFO.

    CPU and resident-memory deltas are sampled through ``psutil`` when
    diagnostics are enabled in the runtime config; otherwise they are
    reported as ``NA``. Nothing is logged if the body raises.
    """

    runtime = kx_config.runtime_config()
    record = OperationLog(op=op)
    process = psutil.Process() if runtime.enable_diagnostics else None
    before = _take_snapshot(process) if process is not None else None
    start = time.perf_counter()
    yield record
    record.wall_ms = (time.perf_counter() - start) * 1e3
    if process is not None and before is not None:
        after = _take_snapshot(process)
        record.cpu_user_ms = (after.cpu_user - before.cpu_user) * 1e3
        record.rss_delta = after.rss - before.rss
    if logger.isEnabledFor(logging.INFO):
        logger.info(record.render())


__all__ = ["OperationLog", "log_operation"]
