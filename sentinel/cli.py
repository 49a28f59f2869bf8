from __future__ import annotations

import argparse
import asyncio
import json
from pathlib import Path
from typing import Sequence

from sentinel.config.settings import Settings, settings
from sentinel.core.logger import configure_logging, get_logger
from sentinel.detection.detector import SuiteDetector
from sentinel.detection.evidence import EvidenceCollector
from sentinel.notify.run_stats import RunStats, read_junit_stats
from sentinel.notify.slack import build_payload, send_notification

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sentinel-notify",
        description="Detect which API suite ran and post a run summary to the chat webhook.",
    )
    parser.add_argument("hints", nargs="*", help="free-form hints about the run, e.g. the pytest -k expression")
    parser.add_argument("--junit", type=Path, default=None, help="JUnit XML report of the run")
    parser.add_argument("--html", type=Path, default=None, help="HTML report of the run")
    parser.add_argument("--tests-dir", type=Path, default=None, help="directory holding the test files")
    parser.add_argument("--dry-run", action="store_true", help="build and log the payload without sending it")
    return parser


def _effective_settings(args: argparse.Namespace, base: Settings) -> Settings:
    overrides = {}
    if args.junit is not None:
        overrides["JUNIT_REPORT_PATH"] = str(args.junit)
    if args.html is not None:
        overrides["HTML_REPORT_PATH"] = str(args.html)
    if args.tests_dir is not None:
        overrides["TESTS_DIR"] = str(args.tests_dir)
    return base.model_copy(update=overrides) if overrides else base


async def run(args: argparse.Namespace, base: Settings | None = None) -> bool:
    config = _effective_settings(args, base or settings)
    detector = SuiteDetector(collector=EvidenceCollector(config, argv=args.hints))
    analysis = detector.detect()

    stats = read_junit_stats(config.junit_report_path) or RunStats()
    logger.info(
        "notify.stats",
        passed=stats.passed,
        failed=stats.failed,
        skipped=stats.skipped,
        total=stats.total,
    )

    payload = build_payload(stats, analysis, config, registry=detector.registry)
    logger.debug("notify.payload", payload=json.dumps(payload, ensure_ascii=False))
    if args.dry_run:
        logger.info("notify.dry_run", text=payload["text"])
        return False
    return await send_notification(config.SLACK_WEBHOOK_URL, payload, timeout=config.WEBHOOK_TIMEOUT_SEC)


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(settings)
    try:
        asyncio.run(run(args))
    except Exception as exc:
        # a broken notification must not fail the CI job
        logger.exception("notify.failed", error=str(exc))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
