import pytest

from config import CPUINFO_PATH, KERNEL_VERSION_PATH, MEMINFO_PATH
from modules.environment import StaticEnvironment


@pytest.fixture
def meminfo_1gb():
    return (
        "MemTotal:        1048576 kB\n"
        "MemFree:          204800 kB\n"
        "Buffers:            1024 kB\n"
        "Cached:           819200 kB\n"
        "SwapCached:            0 kB\n"
    )


@pytest.fixture
def proc_env():
    """Factory for a StaticEnvironment serving the given pseudo-files."""
    def make(cpuinfo=None, meminfo=None, version=None, **kwargs):
        files = {}
        if cpuinfo is not None:
            files[CPUINFO_PATH] = cpuinfo
        if meminfo is not None:
            files[MEMINFO_PATH] = meminfo
        if version is not None:
            files[KERNEL_VERSION_PATH] = version
        return StaticEnvironment(files=files, **kwargs)
    return make
