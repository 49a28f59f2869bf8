"""Static query parameters for the media endpoint.

Used when a live test needs a known-good query that does not depend on
harvested data.
"""

from __future__ import annotations

from typing import Any

from sentinel.config.settings import Settings

BASIC_PARAMS: dict[str, Any] = {
    "limit": 10,
    "skip": 0,
    "count": False,
    "all": False,
    "published": True,
    "type": "all",
    "status": "OK",
}

PAGINATION: dict[str, dict[str, int]] = {
    "first_page": {"limit": 10, "skip": 0},
    "second_page": {"limit": 10, "skip": 10},
    "large_limit": {"limit": 100, "skip": 0},
    "small_limit": {"limit": 5, "skip": 0},
}

SORTING: dict[str, dict[str, str]] = {
    "date_created_desc": {"sort": "-date_created"},
    "date_created_asc": {"sort": "date_created"},
    "title_asc": {"sort": "title"},
    "title_desc": {"sort": "-title"},
}

CREATED_AFTER_FALLBACK: dict[str, str] = {"created_after": "2020-06-18T15:37:40.675Z"}


def with_basic(**overrides: Any) -> dict[str, Any]:
    return {**BASIC_PARAMS, **overrides}


def default_pagination(config: Settings) -> dict[str, int]:
    return {"limit": config.DEFAULT_LIMIT, "skip": config.DEFAULT_SKIP}
