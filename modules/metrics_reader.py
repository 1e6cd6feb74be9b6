"""
metrics_reader.py — Extract CPU, memory and kernel summaries for the
Device Info screen.

Sources are line-oriented pseudo-files opened through an
EnvironmentSnapshot:
  • /proc/cpuinfo  — line 1 only, value right of the first ':'
  • /proc/meminfo  — lines 1-4 in fixed order (Total, Free, Buffers, Cached)
  • /proc/version  — line 1, reformatted to release / builder / date

Every public reader is total: a missing or malformed source degrades to
a fixed fallback string and never raises to the caller.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from config import (
    CPU_ERROR_SENTINEL,
    CPUINFO_PATH,
    DEVICE_INFO_DEFAULT,
    KERNEL_VERSION_PATH,
    MAX_LINE_CHARS,
    MEMINFO_LINES,
    MEMINFO_PATH,
)
from modules.environment import EnvironmentSnapshot, Fault

logger = logging.getLogger(__name__)


# ── Data model ───────────────────────────────────────────────────────

@dataclass
class MemInfoSnapshot:
    """Kernel memory totals (all values in KB)."""
    total_kb: int = 0
    free_kb: int = 0
    cached_kb: int = 0

    @property
    def available_mb(self) -> int:
        return (self.free_kb + self.cached_kb) // 1024

    @property
    def total_mb(self) -> int:
        return self.total_kb // 1024

    def summary(self) -> str:
        return f"{self.available_mb} MB / {self.total_mb} MB"


@dataclass
class MemInfoResult:
    snapshot: MemInfoSnapshot = field(default_factory=MemInfoSnapshot)
    fault: Optional[Fault] = None


@dataclass
class CpuInfoResult:
    value: str
    fault: Optional[Fault] = None


# ── Line access ──────────────────────────────────────────────────────

def _read_lines(env: EnvironmentSnapshot, path: str, count: int) -> List[str]:
    """Read at most *count* lines (each capped at MAX_LINE_CHARS) from *path*.

    Raises OSError when the source cannot be opened or read.
    """
    lines: List[str] = []
    with env.open_text(path) as stream:
        for _ in range(count):
            line = stream.readline(MAX_LINE_CHARS)
            if not line:
                break
            # Skip the rest of a capped line so the next read starts a new one
            rest = line
            while len(rest) == MAX_LINE_CHARS and not rest.endswith("\n"):
                rest = stream.readline(MAX_LINE_CHARS)
            lines.append(line.rstrip("\r\n"))
    return lines


def _kb_value(line: str) -> Optional[int]:
    """'MemFree:   204800 kB' → 204800; None if the line is malformed."""
    _, sep, value = line.partition(":")
    if not sep:
        return None
    tokens = value.split()
    # isdigit() alone also accepts digits int() rejects, such as '²'
    if not tokens or not (tokens[0].isascii() and tokens[0].isdigit()):
        return None
    return int(tokens[0])


# ── Pure parsers ─────────────────────────────────────────────────────

def parse_cpu_line(line: Optional[str]) -> CpuInfoResult:
    """Return the trimmed value right of the first ':' in a cpuinfo line."""
    if line is None or ":" not in line:
        return CpuInfoResult(CPU_ERROR_SENTINEL, Fault.MALFORMED_LINE)
    return CpuInfoResult(line.split(":", 1)[1].strip())


def parse_meminfo_lines(lines: Sequence[str]) -> MemInfoResult:
    """Build a MemInfoSnapshot from the first four meminfo lines.

    Line 3 (Buffers) is positional only. Anything short or malformed
    yields an all-zero snapshot.
    """
    if len(lines) < MEMINFO_LINES:
        return MemInfoResult(fault=Fault.MALFORMED_LINE)

    total = _kb_value(lines[0])
    free = _kb_value(lines[1])
    cached = _kb_value(lines[3])
    if total is None or free is None or cached is None:
        return MemInfoResult(fault=Fault.MALFORMED_LINE)

    return MemInfoResult(MemInfoSnapshot(total_kb=total, free_kb=free, cached_kb=cached))


# Linux version <release> (<user@host>) (<compiler>) #<n> [SMP] [PREEMPT] <date>
_RE_PROC_VERSION = re.compile(
    r"Linux version (\S+) "
    r"\(([^\s@)]+(?:@[^\s.)]+)?)[^)]*\) "
    # compiler section may nest parentheses; the build tag follows the last ") "
    r"\(.*\) "
    r"(#\S+) (?:SMP )?(?:PREEMPT )?(.+)"
)


def parse_kernel_version(line: Optional[str]) -> Optional[str]:
    """'Linux version 3.0.8 (b@h) (gcc …) #1 SMP PREEMPT <date>' →
    '3.0.8\\nb@h #1\\n<date>'; None when the line does not match."""
    if not line:
        return None
    m = _RE_PROC_VERSION.match(line.strip())
    if not m:
        return None
    return f"{m.group(1)}\n{m.group(2)} {m.group(3)}\n{m.group(4)}"


# ── Public API ───────────────────────────────────────────────────────

def read_cpu_summary(env: EnvironmentSnapshot, path: str = CPUINFO_PATH) -> str:
    """Return the CPU descriptor from line 1 of *path*, or "error"."""
    try:
        lines = _read_lines(env, path, 1)
    except OSError as exc:
        logger.warning("Cannot read %s: %s", path, exc)
        return CPU_ERROR_SENTINEL

    result = parse_cpu_line(lines[0] if lines else None)
    if result.fault:
        logger.warning("No ':' in first line of %s", path)
    return result.value


def read_memory_snapshot(env: EnvironmentSnapshot, path: str = MEMINFO_PATH) -> MemInfoResult:
    """Parse *path* into a MemInfoResult; zeros plus a fault on failure."""
    try:
        lines = _read_lines(env, path, MEMINFO_LINES)
    except OSError as exc:
        logger.warning("Cannot read %s: %s", path, exc)
        return MemInfoResult(fault=Fault.SOURCE_UNREADABLE)

    result = parse_meminfo_lines(lines)
    if result.fault:
        logger.warning("Malformed %s (%d lines read)", path, len(lines))
    return result


def read_memory_summary(env: EnvironmentSnapshot, path: str = MEMINFO_PATH) -> str:
    """Return '<available> MB / <total> MB'; '0 MB / 0 MB' on any failure."""
    return read_memory_snapshot(env, path).snapshot.summary()


def read_kernel_summary(env: EnvironmentSnapshot, path: str = KERNEL_VERSION_PATH) -> str:
    """Return the formatted kernel version, or the placeholder default."""
    try:
        lines = _read_lines(env, path, 1)
    except OSError as exc:
        logger.warning("Cannot read %s: %s", path, exc)
        return DEVICE_INFO_DEFAULT

    formatted = parse_kernel_version(lines[0] if lines else None)
    if formatted is None:
        logger.warning("Unrecognised kernel version format in %s", path)
        return DEVICE_INFO_DEFAULT
    return formatted
