from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

import httpx

from sentinel.config.settings import Settings
from sentinel.core.logger import get_logger
from sentinel.detection.detector import AnalysisResult
from sentinel.detection.registry import SuiteRegistry
from sentinel.notify.run_stats import RunStats

logger = get_logger(__name__)

TITLE = "🛡️ *API Sentinel QA*"
DIVIDER = "━" * 35
FALLBACK_SUITE_NAME = "Tests Automatizados"


def _status(stats: RunStats) -> tuple[str, str, str]:
    if stats.total == 0:
        return "⚠️", "NO SE EJECUTARON TESTS", "warning"
    if stats.is_success:
        return "✅", "TODOS LOS TESTS PASARON", "good"
    plural = "S" if stats.failed > 1 else ""
    return "❌", f"{stats.failed} TEST{plural} FALLARON", "danger"


def _endpoint_lines(analysis: AnalysisResult, registry: SuiteRegistry) -> list[str]:
    primary = analysis.primary_suite
    suite = registry.get(primary.suite_key) if primary else None
    if suite is None:
        return ["*🔧 API Testing:* Tests completados"]
    lines = [f"*{suite.icon} Endpoint:* `{suite.endpoint}` - Tests de {suite.display_name} completados"]
    if suite.operations:
        lines.append(f"⚙️ *Operaciones:* {', '.join(suite.operations)}")
    if suite.features:
        lines.append(f"🧩 *Cobertura:* {', '.join(suite.features)}")
    return lines


def build_payload(
    stats: RunStats,
    analysis: AnalysisResult,
    config: Settings,
    registry: SuiteRegistry | None = None,
    now: datetime | None = None,
) -> dict[str, Any]:
    if registry is None:
        registry = SuiteRegistry()
    moment = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)
    timestamp = moment.strftime("%Y-%m-%d %H:%M:%S") + " UTC"
    emoji, status_text, color = _status(stats)

    suite_name = analysis.primary_name or FALLBACK_SUITE_NAME
    if analysis.primary_suite is not None:
        suite_label = f"{suite_name} ({analysis.overall_confidence * 100:.1f}% confianza)"
    else:
        suite_label = suite_name

    lines = [
        TITLE,
        DIVIDER,
        "",
        f"{emoji} *{status_text}*",
        f"📅 {timestamp} | 👤 {config.GITHUB_ACTOR or 'Automatizado'} | 🌿 {config.branch}",
        "",
        "📊 *Resultados:*",
        f"✅ Pasaron: {stats.passed}     ❌ Fallaron: {stats.failed}     ⏭️ Omitidos: {stats.skipped}",
        f"📈 Total: {stats.total}     Éxito: {stats.success_rate:.1f}%",
        "",
        f"🎯 *Suite:* {suite_label}",
        *_endpoint_lines(analysis, registry),
    ]
    if len(analysis.all_suites) > 1:
        lines.append(f"🔎 *Detectadas:* {', '.join(analysis.suite_names)}")
    lines.extend(["", f"🔗 <{config.pages_url}|Ver Reporte> | <{config.run_url}|Workflow>"])

    return {
        "text": f"{emoji} Tests Ejecutados: {suite_name}",
        "attachments": [
            {
                "color": color,
                "text": "\n".join(lines),
                "mrkdwn_in": ["text"],
            }
        ],
    }


async def send_notification(
    webhook_url: str | None,
    payload: dict[str, Any],
    timeout: float = 10.0,
    transport: httpx.AsyncBaseTransport | None = None,
) -> bool:
    url = str(webhook_url or "").strip()
    if not url:
        logger.warning("notify.skipped", reason="SLACK_WEBHOOK_URL is not configured")
        return False

    async with httpx.AsyncClient(timeout=httpx.Timeout(timeout), transport=transport) as client:
        try:
            response = await client.post(url, json=payload)
        except httpx.HTTPError as exc:
            logger.error("notify.request_failed", error=str(exc))
            return False

    if 200 <= response.status_code < 300:
        logger.info("notify.sent", status_code=response.status_code)
        return True
    logger.error("notify.http_error", status_code=response.status_code, body=response.text[:200])
    return False
