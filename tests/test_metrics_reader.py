import pytest

from config import MAX_LINE_CHARS
from modules.environment import Fault, LocalEnvironment
from modules.metrics_reader import (
    MemInfoSnapshot,
    parse_cpu_line,
    parse_kernel_version,
    parse_meminfo_lines,
    read_cpu_summary,
    read_kernel_summary,
    read_memory_snapshot,
    read_memory_summary,
)


# ── CPU ──────────────────────────────────────────────────────────────

def test_cpu_summary_is_trimmed_value(proc_env):
    env = proc_env(cpuinfo="Processor: ARMv7\nBogoMIPS: 996.14\n")
    assert read_cpu_summary(env) == "ARMv7"


def test_cpu_summary_splits_on_first_colon_only(proc_env):
    env = proc_env(cpuinfo="Processor\t: ARMv7 rev 2: v7l\n")
    assert read_cpu_summary(env) == "ARMv7 rev 2: v7l"


def test_cpu_summary_without_delimiter_is_error(proc_env):
    env = proc_env(cpuinfo="ARMv7 Processor\n")
    assert read_cpu_summary(env) == "error"


def test_cpu_summary_missing_source_is_error(proc_env):
    assert read_cpu_summary(proc_env()) == "error"


def test_cpu_summary_empty_source_is_error(proc_env):
    assert read_cpu_summary(proc_env(cpuinfo="")) == "error"


def test_parse_cpu_line_reports_fault():
    result = parse_cpu_line("no delimiter")
    assert result.value == "error"
    assert result.fault is Fault.MALFORMED_LINE
    assert parse_cpu_line("model name : Cortex-A53").fault is None


# ── Memory ───────────────────────────────────────────────────────────

def test_memory_summary_example(proc_env, meminfo_1gb):
    assert read_memory_summary(proc_env(meminfo=meminfo_1gb)) == "1000 MB / 1024 MB"


def test_memory_values_truncate():
    snapshot = MemInfoSnapshot(total_kb=2047, free_kb=1023, cached_kb=1025)
    assert snapshot.total_mb == 1
    assert snapshot.available_mb == 2


def test_memory_buffers_line_is_ignored():
    lines = ["MemTotal: 4096 kB", "MemFree: 1024 kB", "Buffers: garbage", "Cached: 1024 kB"]
    result = parse_meminfo_lines(lines)
    assert result.fault is None
    assert result.snapshot == MemInfoSnapshot(total_kb=4096, free_kb=1024, cached_kb=1024)


def test_memory_lines_are_positional_not_labelled():
    lines = ["A: 2048 kB", "B: 1024 kB", "C: 0 kB", "D: 1024 kB"]
    assert parse_meminfo_lines(lines).snapshot.summary() == "2 MB / 2 MB"


@pytest.mark.parametrize("meminfo", [
    "MemTotal: 1048576 kB\nMemFree: 204800 kB\nBuffers: 1024 kB\n",
    "MemTotal: 1048576 kB\nMemFree 204800 kB\nBuffers: 1024 kB\nCached: 819200 kB\n",
    "MemTotal: lots kB\nMemFree: 204800 kB\nBuffers: 1024 kB\nCached: 819200 kB\n",
    "MemTotal: 1048576 kB\nMemFree: -1 kB\nBuffers: 1024 kB\nCached: 819200 kB\n",
    "MemTotal: \u00b2 kB\nMemFree: 1 kB\nBuffers: 1 kB\nCached: 1 kB\n",
    "",
])
def test_memory_malformed_defaults_to_zero(proc_env, meminfo):
    env = proc_env(meminfo=meminfo)
    result = read_memory_snapshot(env)
    assert result.fault is Fault.MALFORMED_LINE
    assert result.snapshot == MemInfoSnapshot()
    assert read_memory_summary(env) == "0 MB / 0 MB"


def test_memory_missing_source(proc_env):
    env = proc_env()
    assert read_memory_snapshot(env).fault is Fault.SOURCE_UNREADABLE
    assert read_memory_summary(env) == "0 MB / 0 MB"


def test_memory_from_real_file(tmp_path, meminfo_1gb):
    path = tmp_path / "meminfo"
    path.write_text(meminfo_1gb)
    assert read_memory_summary(LocalEnvironment(), str(path)) == "1000 MB / 1024 MB"


def test_memory_real_file_missing(tmp_path):
    env = LocalEnvironment()
    assert read_memory_summary(env, str(tmp_path / "absent")) == "0 MB / 0 MB"


# ── Kernel ───────────────────────────────────────────────────────────

KERNEL_LINE = (
    "Linux version 3.0.8-g1234abc (android-build@vpbs1) "
    "(gcc version 4.4.3 (GCC) ) #1 SMP PREEMPT Tue Oct 4 12:00:00 PDT 2011"
)


def test_parse_kernel_version():
    assert parse_kernel_version(KERNEL_LINE) == (
        "3.0.8-g1234abc\nandroid-build@vpbs1 #1\nTue Oct 4 12:00:00 PDT 2011"
    )


def test_kernel_summary_unrecognised(proc_env):
    assert read_kernel_summary(proc_env(version="Darwin Kernel\n")) == "Unavailable"
    assert read_kernel_summary(proc_env()) == "Unavailable"


def test_kernel_summary_reads_first_line(proc_env):
    env = proc_env(version=KERNEL_LINE + "\n")
    assert read_kernel_summary(env).startswith("3.0.8-g1234abc\n")


CLANG_KERNEL_LINE = (
    "Linux version 5.10.177-android12-9-00001-gabc (build-user@build-host) "
    "(Android (8508608, based on r450784e) clang version 14.0.7 "
    "(https://android.googlesource.com/toolchain/llvm-project 4c603efb), LLD 14.0.7) "
    "#1 SMP PREEMPT Mon Jan 1 00:00:00 UTC 2024"
)


def test_parse_kernel_version_clang_build():
    assert parse_kernel_version(CLANG_KERNEL_LINE) == (
        "5.10.177-android12-9-00001-gabc\nbuild-user@build-host #1\nMon Jan 1 00:00:00 UTC 2024"
    )


# ── Read limit ───────────────────────────────────────────────────────

def test_cpu_line_is_capped(proc_env):
    env = proc_env(cpuinfo="Processor: " + "A" * (MAX_LINE_CHARS * 2) + "\n")
    assert read_cpu_summary(env) == "A" * (MAX_LINE_CHARS - len("Processor: "))


def test_overlong_meminfo_line_keeps_positions(proc_env):
    meminfo = (
        "MemTotal: 1048576 kB\n"
        "MemFree: 204800 kB\n"
        "Buffers: " + "9" * (MAX_LINE_CHARS * 3) + " kB\n"
        "Cached: 819200 kB\n"
    )
    assert read_memory_summary(proc_env(meminfo=meminfo)) == "1000 MB / 1024 MB"


def test_overlong_meminfo_label_fails_soft(proc_env):
    meminfo = (
        "X" * (MAX_LINE_CHARS + 5) + ": 1048576 kB\n"
        "MemFree: 204800 kB\n"
        "Buffers: 1024 kB\n"
        "Cached: 819200 kB\n"
    )
    result = read_memory_snapshot(proc_env(meminfo=meminfo))
    assert result.fault is Fault.MALFORMED_LINE
    assert result.snapshot.summary() == "0 MB / 0 MB"
