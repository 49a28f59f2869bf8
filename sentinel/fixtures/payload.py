"""Shape classification for loosely structured API response bodies.

The API under test wraps collections differently depending on the endpoint
(bare arrays, ``{"data": [...]}``, ``{"results": [...]}``) and returns single
records as plain objects. ``classify_payload`` resolves a decoded body into a
``ClassifiedPayload`` so ingestion code never inspects raw shapes itself.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any


class PayloadKind(str, Enum):
    ENTITY_LIST = "entity_list"
    SINGLE_ENTITY = "single_entity"
    UNRECOGNIZED = "unrecognized"


@dataclass(frozen=True, slots=True)
class ClassifiedPayload:
    kind: PayloadKind
    entities: tuple[Mapping[str, Any], ...] = ()

    @property
    def recognized(self) -> bool:
        return self.kind is not PayloadKind.UNRECOGNIZED


UNRECOGNIZED = ClassifiedPayload(PayloadKind.UNRECOGNIZED)


def has_value(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return True


def entity_id(entity: Mapping[str, Any]) -> Any:
    value = entity.get("id")
    if has_value(value):
        return value
    value = entity.get("_id")
    return value if has_value(value) else None


def _as_entity_list(items: list[Any]) -> ClassifiedPayload:
    entities = tuple(item for item in items if isinstance(item, Mapping))
    return ClassifiedPayload(PayloadKind.ENTITY_LIST, entities)


def _as_single(body: Mapping[str, Any]) -> ClassifiedPayload:
    if entity_id(body) is None:
        return UNRECOGNIZED
    return ClassifiedPayload(PayloadKind.SINGLE_ENTITY, (body,))


def classify_payload(body: Any) -> ClassifiedPayload:
    """Classify a media-style body: list, ``data``, ``results``, then single record."""
    if isinstance(body, list):
        return _as_entity_list(body)
    if not isinstance(body, Mapping):
        return UNRECOGNIZED
    if isinstance(body.get("data"), list):
        return _as_entity_list(body["data"])
    if isinstance(body.get("results"), list):
        return _as_entity_list(body["results"])
    return _as_single(body)


def classify_coupon_payload(body: Any) -> ClassifiedPayload:
    """Coupon endpoints answer ``{"status": "OK", "data": [...]}`` and never use ``results``."""
    if isinstance(body, Mapping) and isinstance(body.get("data"), list):
        return _as_entity_list(body["data"])
    if isinstance(body, list):
        return _as_entity_list(body)
    if isinstance(body, Mapping):
        return _as_single(body)
    return UNRECOGNIZED
