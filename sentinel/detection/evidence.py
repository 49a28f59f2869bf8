"""Evidence about which test suite just ran.

Each reader returns a ``SourceReading``: the items it produced, or an empty
reading whose ``reason`` says why the source contributed nothing. Readers
never raise for missing or unreadable inputs.
"""

from __future__ import annotations

import sys
import xml.etree.ElementTree as ET
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from sentinel.config.settings import Settings, settings as default_settings
from sentinel.core.logger import get_logger

logger = get_logger(__name__)


class EvidenceSource(str, Enum):
    EXECUTED_FILES = "executed_files"
    FILENAME = "filename"
    CLI_ARG = "cli_arg"
    HTML_CONTENT = "html_content"


@dataclass(frozen=True, slots=True)
class EvidenceItem:
    source: EvidenceSource
    payload: str | tuple[str, ...]
    priority: float

    def __post_init__(self) -> None:
        if not 0.0 <= self.priority <= 1.0:
            raise ValueError(f"Evidence priority must be within [0, 1], got {self.priority}")

    @property
    def texts(self) -> tuple[str, ...]:
        if isinstance(self.payload, str):
            return (self.payload,)
        return tuple(self.payload)


@dataclass(frozen=True, slots=True)
class SourcePriorities:
    """Most reliable first: files that actually ran, explicit CLI args, files on disk, report text."""

    executed_files: float = 1.0
    cli_arg: float = 0.8
    filename: float = 0.5
    html_content: float = 0.3

    def __post_init__(self) -> None:
        for source in EvidenceSource:
            value = getattr(self, source.value)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"Priority for {source.value} must be within [0, 1], got {value}")


@dataclass(frozen=True, slots=True)
class SourceReading:
    source: EvidenceSource
    items: tuple[EvidenceItem, ...] = ()
    reason: str | None = None

    @property
    def ok(self) -> bool:
        return self.reason is None


def read_executed_files(junit_path: Path, priority: float) -> SourceReading:
    source = EvidenceSource.EXECUTED_FILES
    if not junit_path.is_file():
        return SourceReading(source, reason=f"junit report not found: {junit_path}")
    try:
        root = ET.parse(junit_path).getroot()
    except (ET.ParseError, OSError) as exc:
        return SourceReading(source, reason=f"junit report unreadable: {exc}")

    executed: list[str] = []
    for case in root.iter("testcase"):
        name = case.get("file") or case.get("classname") or ""
        if name and name not in executed:
            executed.append(name)
    if not executed:
        return SourceReading(source, reason="junit report lists no test cases")
    items = tuple(EvidenceItem(source, name, priority) for name in executed)
    return SourceReading(source, items)


def read_test_files(tests_dir: Path, patterns: Sequence[str], priority: float) -> SourceReading:
    source = EvidenceSource.FILENAME
    if not tests_dir.is_dir():
        return SourceReading(source, reason=f"tests directory not found: {tests_dir}")
    try:
        found = sorted({path.name for pattern in patterns for path in tests_dir.rglob(pattern) if path.is_file()})
    except OSError as exc:
        return SourceReading(source, reason=f"tests directory unreadable: {exc}")
    if not found:
        return SourceReading(source, reason="no test files match the configured patterns")
    return SourceReading(source, tuple(EvidenceItem(source, name, priority) for name in found))


def read_cli_args(argv: Sequence[str], priority: float) -> SourceReading:
    source = EvidenceSource.CLI_ARG
    args = [arg for arg in argv if arg.strip()]
    if not args:
        return SourceReading(source, reason="no command line arguments")
    return SourceReading(source, (EvidenceItem(source, " ".join(args), priority),))


def read_html_report(report_path: Path, limit: int, priority: float) -> SourceReading:
    source = EvidenceSource.HTML_CONTENT
    if not report_path.is_file():
        return SourceReading(source, reason=f"html report not found: {report_path}")
    try:
        with report_path.open("r", encoding="utf-8", errors="replace") as handle:
            snippet = handle.read(max(limit, 0))
    except OSError as exc:
        return SourceReading(source, reason=f"html report unreadable: {exc}")
    if not snippet.strip():
        return SourceReading(source, reason="html report is empty")
    return SourceReading(source, (EvidenceItem(source, snippet, priority),))


class EvidenceCollector:
    def __init__(
        self,
        config: Settings | None = None,
        argv: Sequence[str] | None = None,
        priorities: SourcePriorities | None = None,
    ) -> None:
        self.config = config or default_settings
        self.argv = list(sys.argv[1:] if argv is None else argv)
        self.priorities = priorities or SourcePriorities()

    def read_sources(self) -> list[SourceReading]:
        p = self.priorities
        return [
            read_executed_files(self.config.junit_report_path, p.executed_files),
            read_cli_args(self.argv, p.cli_arg),
            read_test_files(self.config.tests_dir_path, self.config.test_file_patterns, p.filename),
            read_html_report(self.config.html_report_path, self.config.HTML_SNIPPET_CHARS, p.html_content),
        ]

    def collect_evidence(self) -> list[EvidenceItem]:
        evidence: list[EvidenceItem] = []
        for reading in self.read_sources():
            if not reading.ok:
                logger.info("detection.source_skipped", source=reading.source.value, reason=reading.reason)
                continue
            evidence.extend(reading.items)
        return evidence
