# tests/database/test_media_tag_query.py
from __future__ import annotations

import pytest

from mediatags.domain.errors import StorageFailure


@pytest.fixture()
def tagged(tag_repo, media_tag_repo):
    """
    m1: {t1, t2}
    m2: {t1}
    m3: {t2, t3}
    t4 unused
    """
    t1 = tag_repo.create_tag("Beach")
    t2 = tag_repo.create_tag("Family")
    t3 = tag_repo.create_tag("Sunset")
    t4 = tag_repo.create_tag("Unused")
    for media_id, tag in (("m1", t1), ("m1", t2), ("m2", t1), ("m3", t2), ("m3", t3)):
        media_tag_repo.assign(media_id, tag.id)
    return t1, t2, t3, t4


def test_tags_for_media(query, tagged):
    t1, t2, t3, _ = tagged
    assert {t.id for t in query.tags_for_media("m1")} == {t1.id, t2.id}
    assert query.tags_for_media("unknown") == []
    assert query.tag_ids_for_media("m3") == {t2.id, t3.id}


def test_has_tag_and_media_for_tag(query, tagged):
    t1, t2, t3, t4 = tagged
    assert query.has_tag("m2", t1.id)
    assert not query.has_tag("m2", t2.id)
    assert sorted(query.media_for_tag(t1.id)) == ["m1", "m2"]
    assert query.media_for_tag(t4.id) == []


def test_media_with_all_tags(query, tagged):
    t1, t2, t3, t4 = tagged
    assert query.media_with_all_tags([t1.id, t2.id]) == ["m1"]
    assert sorted(query.media_with_all_tags([t1.id])) == ["m1", "m2"]
    assert query.media_with_all_tags([t1.id, t4.id]) == []


def test_media_with_all_tags_empty_returns_every_tagged_media(query, tagged, media_tag_repo):
    assert sorted(query.media_with_all_tags([])) == ["m1", "m2", "m3"]


def test_media_with_any_tags(query, tagged):
    t1, t2, t3, t4 = tagged
    assert sorted(query.media_with_any_tags([t1.id, t3.id])) == ["m1", "m2", "m3"]
    assert query.media_with_any_tags([t4.id]) == []
    assert query.media_with_any_tags([]) == []


def test_any_result_has_no_duplicates(query, tagged):
    t1, t2, _, _ = tagged
    out = query.media_with_any_tags([t1.id, t2.id])
    assert len(out) == len(set(out)) == 3


def test_usage_counts(query, tagged):
    t1, t2, t3, t4 = tagged
    assert query.usage_counts() == {t1.id: 2, t2.id: 2, t3.id: 1}


def test_batch_tags_for_media(query, tagged):
    t1, t2, _, _ = tagged
    out = query.batch_tags_for_media(["m2", "nothing", "m2"])
    assert list(out) == ["m2", "nothing"]
    assert [t.id for t in out["m2"]] == [t1.id]
    assert out["nothing"] == []
    assert query.batch_tags_for_media([]) == {}


def test_storage_stats(query, tagged):
    stats = query.storage_stats()
    assert (stats.total_tags, stats.total_associations, stats.unique_media_count) == (4, 5, 3)


def test_malformed_link_raises(records, query):
    records.write_links([{"media_id": "m1"}])
    with pytest.raises(StorageFailure):
        query.media_with_any_tags([1])
