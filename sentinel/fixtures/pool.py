from __future__ import annotations

import random
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

from sentinel.core.logger import get_logger
from sentinel.fixtures.payload import (
    ClassifiedPayload,
    PayloadKind,
    classify_coupon_payload,
    classify_payload,
    entity_id,
    has_value,
)

logger = get_logger(__name__)

SAMPLE_CAP = 5
ENTITY_LIST_CAP = 50
FALLBACK_TYPE = "video"
NUMERIC_WINDOW = 1000
DATE_WINDOW = timedelta(hours=24)
DATE_FIELDS = ("created_at", "date_created", "createdAt")


@dataclass(frozen=True, slots=True)
class ValueWindow:
    sample: float
    minimum: float
    maximum: float


@dataclass(frozen=True, slots=True)
class DateWindow:
    sample: str
    after: str
    before: str


def _add_unique(target: list[Any], value: Any, cap: int | None = None) -> bool:
    if not has_value(value) or value in target:
        return False
    if cap is not None and len(target) >= cap:
        return False
    target.append(value)
    return True


def _as_number(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value


def _parse_timestamp(value: Any) -> datetime | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000.0, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _shift(moment: datetime, delta: timedelta) -> datetime:
    try:
        return moment + delta
    except OverflowError:
        bound = datetime.max if delta > timedelta(0) else datetime.min
        return bound.replace(tzinfo=timezone.utc)


def _iso_utc(moment: datetime) -> str:
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class FixturePool:
    """Values harvested from live responses, shared by later test cases of one run.

    A pool belongs to a single test-run process and is not safe for
    concurrent writers. ``sample_entity`` and ``sample_coupon`` keep the first
    record ever observed; ``entity_list`` and ``coupon_list`` hold the most
    recent list. ``ids`` and ``titles`` keep the first five distinct values
    and drop the rest.
    """

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random()
        self.sample_entity: Mapping[str, Any] | None = None
        self.entity_list: list[Mapping[str, Any]] = []
        self.ids: list[Any] = []
        self.titles: list[str] = []
        self.types: list[Any] = []
        self.categories: list[Any] = []
        self.tags: list[Any] = []

        self.sample_coupon: Mapping[str, Any] | None = None
        self.coupon_list: list[Mapping[str, Any]] = []
        self.group_ids: list[Any] = []
        self.coupon_codes: list[Any] = []

    # ingestion

    def ingest(self, body: Any) -> ClassifiedPayload:
        classified = classify_payload(body)
        if classified.kind is PayloadKind.ENTITY_LIST:
            self._ingest_entity_list(classified.entities)
        elif classified.kind is PayloadKind.SINGLE_ENTITY:
            self._ingest_single_entity(classified.entities[0])
        logger.debug(
            "fixtures.ingested",
            kind=classified.kind.value,
            entities=len(classified.entities),
            ids=len(self.ids),
            titles=len(self.titles),
        )
        return classified

    def _ingest_entity_list(self, entities: tuple[Mapping[str, Any], ...]) -> None:
        if not entities:
            return
        self.entity_list = list(entities[:ENTITY_LIST_CAP])
        if self.sample_entity is None:
            self.sample_entity = entities[0]

        for entity in entities:
            _add_unique(self.ids, entity_id(entity), SAMPLE_CAP)
            title = entity.get("title")
            if isinstance(title, str):
                _add_unique(self.titles, title, SAMPLE_CAP)
            _add_unique(self.types, entity.get("type"))

            categories = entity.get("categories")
            if isinstance(categories, list):
                for category in categories:
                    if isinstance(category, Mapping):
                        _add_unique(self.categories, category.get("id"))

            tags = entity.get("tags")
            if isinstance(tags, list):
                for tag in tags:
                    name = tag.get("name") if isinstance(tag, Mapping) else tag
                    if isinstance(name, str):
                        _add_unique(self.tags, name)

    def _ingest_single_entity(self, entity: Mapping[str, Any]) -> None:
        if self.sample_entity is None:
            self.sample_entity = entity
        _add_unique(self.ids, entity_id(entity), SAMPLE_CAP)
        title = entity.get("title")
        if isinstance(title, str):
            _add_unique(self.titles, title, SAMPLE_CAP)
        _add_unique(self.types, entity.get("type"))

    def ingest_coupons(self, body: Any) -> ClassifiedPayload:
        classified = classify_coupon_payload(body)
        if classified.kind is PayloadKind.ENTITY_LIST and classified.entities:
            self.coupon_list = list(classified.entities[:ENTITY_LIST_CAP])
        if classified.entities and self.sample_coupon is None:
            self.sample_coupon = classified.entities[0]
        for coupon in classified.entities:
            _add_unique(self.group_ids, coupon.get("group"))
            _add_unique(self.coupon_codes, coupon.get("code"))
        logger.debug(
            "fixtures.coupons_ingested",
            kind=classified.kind.value,
            coupons=len(classified.entities),
            group_ids=len(self.group_ids),
            codes=len(self.coupon_codes),
        )
        return classified

    # accessors

    def _pick(self, values: list[Any]) -> Any:
        return self._rng.choice(values) if values else None

    def random_id(self) -> Any:
        return self._pick(self.ids)

    def random_title(self) -> str | None:
        return self._pick(self.titles)

    def search_word_from_title(self) -> str | None:
        title = self.random_title()
        if not title:
            return None
        for word in title.split():
            if len(word) > 3:
                return word
        return title[:5]

    def available_type(self) -> Any:
        return self.types[0] if self.types else FALLBACK_TYPE

    def available_category(self) -> Any:
        return self.categories[0] if self.categories else None

    def available_tag(self) -> Any:
        return self.tags[0] if self.tags else None

    def random_group_id(self) -> Any:
        return self._pick(self.group_ids)

    def random_coupon_code(self) -> Any:
        return self._pick(self.coupon_codes)

    def all_group_ids(self) -> list[Any]:
        return list(self.group_ids)

    def all_coupon_codes(self) -> list[Any]:
        return list(self.coupon_codes)

    def has_valid_data(self) -> bool:
        return bool(self.ids) or self.sample_entity is not None

    def _numeric_window(self, *fields: str) -> ValueWindow | None:
        if self.sample_entity is None:
            return None
        for field in fields:
            value = _as_number(self.sample_entity.get(field))
            if value is not None:
                return ValueWindow(
                    sample=value,
                    minimum=max(0, value - NUMERIC_WINDOW),
                    maximum=value + NUMERIC_WINDOW,
                )
        return None

    def duration_info(self) -> ValueWindow | None:
        return self._numeric_window("duration")

    def views_info(self) -> ValueWindow | None:
        return self._numeric_window("views", "view_count")

    def date_info(self) -> DateWindow | None:
        if self.sample_entity is None:
            return None
        for field in DATE_FIELDS:
            moment = _parse_timestamp(self.sample_entity.get(field))
            if moment is not None:
                return DateWindow(
                    sample=_iso_utc(moment),
                    after=_iso_utc(_shift(moment, -DATE_WINDOW)),
                    before=_iso_utc(_shift(moment, DATE_WINDOW)),
                )
        return None

    # reporting

    def summary(self) -> dict[str, Any]:
        sample_title = None
        if self.sample_entity is not None:
            sample_title = self.sample_entity.get("title") or "untitled"
        return {
            "ids": len(self.ids),
            "titles": len(self.titles),
            "types": list(self.types),
            "categories": len(self.categories),
            "tags": len(self.tags),
            "group_ids": len(self.group_ids),
            "coupon_codes": len(self.coupon_codes),
            "sample_title": sample_title,
        }

    def log_summary(self, log: Any | None = None) -> None:
        (log or logger).info("fixtures.summary", **self.summary())
