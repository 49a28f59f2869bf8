from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from sentinel.core.logger import get_logger
from sentinel.detection.evidence import EvidenceCollector, EvidenceItem, EvidenceSource
from sentinel.detection.registry import SuiteRegistry

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class Detection:
    suite_key: str
    confidence: float
    origin_source: EvidenceSource
    detail: str


@dataclass(frozen=True, slots=True)
class SuiteScore:
    suite_key: str
    display_name: str
    endpoint: str
    confidence: float
    detection_count: int
    origin_sources: frozenset[EvidenceSource]


@dataclass(frozen=True, slots=True)
class AnalysisResult:
    primary_suite: SuiteScore | None = None
    all_suites: tuple[SuiteScore, ...] = ()
    overall_confidence: float = 0.0

    @property
    def primary_name(self) -> str | None:
        return self.primary_suite.display_name if self.primary_suite else None

    @property
    def suite_names(self) -> list[str]:
        return [score.display_name for score in self.all_suites]


def _excerpt(text: str, limit: int = 80) -> str:
    flat = " ".join(text.split())
    return flat if len(flat) <= limit else flat[: limit - 3] + "..."


class SuiteDetector:
    """Ranks registered suites by how strongly the available evidence points at them."""

    def __init__(self, registry: SuiteRegistry | None = None, collector: EvidenceCollector | None = None) -> None:
        self.registry = registry if registry is not None else SuiteRegistry()
        self.collector = collector or EvidenceCollector()

    def collect_evidence(self) -> list[EvidenceItem]:
        return self.collector.collect_evidence()

    def match(self, evidence: Iterable[EvidenceItem]) -> list[Detection]:
        detections: list[Detection] = []
        for item in evidence:
            lowered = [(text, text.lower()) for text in item.texts]
            for suite in self.registry:
                keywords = [kw.lower() for kw in suite.keywords if kw]
                hit = next(
                    (text for text, low in lowered if any(kw in low for kw in keywords)),
                    None,
                )
                if hit is None:
                    continue
                detail = hit if item.source is not EvidenceSource.HTML_CONTENT else "found in report content"
                detections.append(
                    Detection(
                        suite_key=suite.key,
                        confidence=item.priority,
                        origin_source=item.source,
                        detail=_excerpt(detail),
                    )
                )
        return detections

    def aggregate(self, detections: Sequence[Detection]) -> AnalysisResult:
        grouped: dict[str, list[Detection]] = {key: [] for key in self.registry.keys()}
        for detection in detections:
            grouped.setdefault(detection.suite_key, []).append(detection)

        scores: list[SuiteScore] = []
        for key, hits in grouped.items():
            if not hits:
                continue
            confidences = [hit.confidence for hit in hits]
            mean = sum(confidences) / len(confidences)
            confidence = min(1.0, max(0.0, max(mean, max(confidences))))
            suite = self.registry.get(key)
            scores.append(
                SuiteScore(
                    suite_key=key,
                    display_name=suite.display_name if suite else key,
                    endpoint=suite.endpoint if suite else "",
                    confidence=confidence,
                    detection_count=len(hits),
                    origin_sources=frozenset(hit.origin_source for hit in hits),
                )
            )

        # stable sort: equal confidence keeps registry order
        scores.sort(key=lambda score: score.confidence, reverse=True)
        if not scores:
            return AnalysisResult()
        return AnalysisResult(
            primary_suite=scores[0],
            all_suites=tuple(scores),
            overall_confidence=scores[0].confidence,
        )

    def detect(self) -> AnalysisResult:
        evidence = self.collect_evidence()
        result = self.aggregate(self.match(evidence))
        if result.primary_suite is None:
            logger.info("detection.undetermined", evidence=len(evidence))
        else:
            logger.info(
                "detection.completed",
                primary_suite=result.primary_name,
                confidence=round(result.overall_confidence, 3),
                suites=result.suite_names,
                evidence=len(evidence),
            )
        return result
