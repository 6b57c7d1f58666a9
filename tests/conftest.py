import os
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

# Subprocess coverage for the CLI; the collector teardown is replaced because
# it asserts on collectors that were already stopped in containerized runs.
if os.getenv("COVERAGE_PROCESS_START"):
    import coverage

    coverage.process_startup()

    import coverage.collector

    def safe_stop(self: Any) -> None:
        if self in getattr(self, "_collectors", []):
            self._collectors.remove(self)

    coverage.collector.Collector.stop = safe_stop


@pytest.fixture  # type: ignore[misc]
def sn_file(tmp_path: Path) -> Callable[[str], Path]:
    """Writes SIGN source to a fresh `.sn` file and returns its path."""
    counter = 0

    def write(source: str) -> Path:
        nonlocal counter
        counter += 1
        path = tmp_path / f"program{counter}.sn"
        path.write_text(source, encoding="utf-8")
        return path

    return write
