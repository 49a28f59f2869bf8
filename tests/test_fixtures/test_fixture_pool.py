from __future__ import annotations

import random

from sentinel.fixtures.payload import PayloadKind
from sentinel.fixtures.pool import FALLBACK_TYPE, SAMPLE_CAP, DateWindow, FixturePool, ValueWindow


def test_empty_pool_accessors_return_no_value(pool: FixturePool):
    assert pool.has_valid_data() is False
    assert pool.random_id() is None
    assert pool.random_title() is None
    assert pool.search_word_from_title() is None
    assert pool.available_type() == FALLBACK_TYPE
    assert pool.available_category() is None
    assert pool.available_tag() is None
    assert pool.duration_info() is None
    assert pool.views_info() is None
    assert pool.date_info() is None


def test_ingest_data_wrapper_extracts_ids_types_and_sample(pool: FixturePool):
    body = {
        "data": [
            {"id": "a", "title": "Hello World", "type": "video"},
            {"id": "b", "title": "Second Clip", "type": "audio"},
        ]
    }
    result = pool.ingest(body)
    assert result.kind is PayloadKind.ENTITY_LIST
    assert pool.ids == ["a", "b"]
    assert pool.types == ["video", "audio"]
    assert pool.sample_entity["id"] == "a"
    assert pool.has_valid_data() is True


def test_list_ingestion_walks_categories_and_tags_once(pool: FixturePool, media_list):
    pool.ingest(media_list)
    pool.ingest(media_list)
    assert pool.ids == ["m1", "m2", "m3"]
    assert pool.titles == ["Hello World", "Second Clip"]
    assert pool.types == ["video", "audio"]
    assert pool.categories == ["c1", "c2"]
    assert pool.tags == ["launch", "promo", "weekly"]
    assert pool.available_category() == "c1"
    assert pool.available_tag() == "launch"


def test_ids_and_titles_keep_first_five_and_drop_the_rest(pool: FixturePool):
    pool.ingest([{"id": f"id-{n}", "title": f"Title number {n}"} for n in range(8)])
    pool.ingest([{"id": "late", "title": "Late arrival"}])
    pool.ingest({"id": "single", "title": "Single record"})
    assert len(pool.ids) == SAMPLE_CAP
    assert pool.ids == [f"id-{n}" for n in range(5)]
    assert pool.titles == [f"Title number {n}" for n in range(5)]


def test_random_picks_only_return_ingested_values(pool: FixturePool, media_list):
    pool.ingest(media_list)
    for _ in range(20):
        assert pool.random_id() in {"m1", "m2", "m3"}
        assert pool.random_title() in {"Hello World", "Second Clip"}


def test_search_word_is_first_token_longer_than_three_chars():
    pool = FixturePool(rng=random.Random(0))
    pool.ingest({"id": "x", "title": "The big Announcement today"})
    assert pool.search_word_from_title() == "Announcement"


def test_search_word_falls_back_to_first_five_characters():
    pool = FixturePool(rng=random.Random(0))
    pool.ingest({"id": "x", "title": "Hi all"})
    assert pool.search_word_from_title() == "Hi al"


def test_sample_entity_keeps_the_first_observation(pool: FixturePool):
    pool.ingest([{"id": "first"}, {"id": "second"}])
    pool.ingest([{"id": "third"}])
    pool.ingest({"id": "single"})
    assert pool.sample_entity["id"] == "first"
    assert [e["id"] for e in pool.entity_list] == ["third"]


def test_single_entity_ingestion_appends_without_duplicates(pool: FixturePool):
    pool.ingest({"_id": "s1", "title": "Solo", "type": "image"})
    pool.ingest({"_id": "s1", "title": "Solo", "type": "image"})
    assert pool.ids == ["s1"]
    assert pool.titles == ["Solo"]
    assert pool.types == ["image"]
    assert pool.sample_entity["_id"] == "s1"


def test_unrecognized_payload_leaves_pool_unchanged(pool: FixturePool):
    result = pool.ingest({"status": "OK", "message": "nothing here"})
    assert result.kind is PayloadKind.UNRECOGNIZED
    assert pool.has_valid_data() is False
    assert pool.entity_list == []


def test_empty_list_is_recognized_but_adds_nothing(pool: FixturePool):
    pool.ingest({"data": []})
    assert pool.has_valid_data() is False
    assert pool.sample_entity is None


def test_duration_and_views_windows_are_clamped_at_zero(pool: FixturePool):
    pool.ingest([{"id": "a", "duration": 400, "view_count": 2500}])
    assert pool.duration_info() == ValueWindow(sample=400, minimum=0, maximum=1400)
    assert pool.views_info() == ValueWindow(sample=2500, minimum=1500, maximum=3500)


def test_views_prefers_views_over_view_count(pool: FixturePool, media_list):
    pool.ingest(media_list)
    assert pool.views_info().sample == 120
    assert pool.duration_info() == ValueWindow(sample=5400, minimum=4400, maximum=6400)


def test_date_window_spans_a_day_each_side(pool: FixturePool, media_list):
    pool.ingest(media_list)
    assert pool.date_info() == DateWindow(
        sample="2024-03-10T12:00:00.000Z",
        after="2024-03-09T12:00:00.000Z",
        before="2024-03-11T12:00:00.000Z",
    )


def test_date_window_accepts_alternate_fields_and_epoch_millis(pool: FixturePool):
    pool.ingest({"id": "a", "createdAt": 0})
    assert pool.date_info().sample == "1970-01-01T00:00:00.000Z"
    assert pool.date_info().after == "1969-12-31T00:00:00.000Z"


def test_date_window_clamps_at_calendar_bounds(pool: FixturePool):
    pool.ingest({"id": "a", "created_at": "0001-01-01T00:00:00Z"})
    assert pool.date_info() == DateWindow(
        sample="0001-01-01T00:00:00.000Z",
        after="0001-01-01T00:00:00.000Z",
        before="0001-01-02T00:00:00.000Z",
    )

    late = FixturePool()
    late.ingest({"id": "b", "created_at": "9999-12-31T12:00:00Z"})
    assert late.date_info() == DateWindow(
        sample="9999-12-31T12:00:00.000Z",
        after="9999-12-30T12:00:00.000Z",
        before="9999-12-31T23:59:59.999Z",
    )


def test_unparseable_date_gives_no_window(pool: FixturePool):
    pool.ingest({"id": "a", "created_at": "yesterday-ish"})
    assert pool.date_info() is None


def test_summary_reports_counts(pool: FixturePool, media_list):
    pool.ingest(media_list)
    summary = pool.summary()
    assert summary["ids"] == 3
    assert summary["types"] == ["video", "audio"]
    assert summary["sample_title"] == "Hello World"


def test_log_summary_accepts_a_bound_logger(pool: FixturePool, media_list):
    events = []

    class Recorder:
        def info(self, event, **fields):
            events.append((event, fields))

    pool.ingest(media_list)
    pool.log_summary(Recorder())
    assert events == [("fixtures.summary", pool.summary())]
