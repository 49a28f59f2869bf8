from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass
from pathlib import Path

from sentinel.core.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class RunStats:
    passed: int = 0
    failed: int = 0
    skipped: int = 0

    @property
    def total(self) -> int:
        return self.passed + self.failed + self.skipped

    @property
    def is_success(self) -> bool:
        return self.failed == 0 and self.total > 0

    @property
    def success_rate(self) -> float:
        if self.total == 0:
            return 0.0
        return self.passed / self.total * 100.0


def read_junit_stats(path: Path) -> RunStats | None:
    if not path.is_file():
        logger.warning("stats.report_missing", path=str(path))
        return None
    try:
        root = ET.parse(path).getroot()
    except (ET.ParseError, OSError) as exc:
        logger.warning("stats.report_unreadable", path=str(path), error=str(exc))
        return None

    passed = failed = skipped = 0
    for case in root.iter("testcase"):
        if case.find("failure") is not None or case.find("error") is not None:
            failed += 1
        elif case.find("skipped") is not None:
            skipped += 1
        else:
            passed += 1
    return RunStats(passed=passed, failed=failed, skipped=skipped)
