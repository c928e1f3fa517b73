import random
from datetime import date

from factories import release

from app.domain.models import Release
from app.services.aggregation import build_metadata_entry, calculate_downloads, latest_release_date


def releases(*payloads):
    return [Release.model_validate(p) for p in payloads]


def test_downloads_sum_all_assets_of_non_draft_releases():
    items = releases(
        release([10, 5]),
        release([7], prerelease=True),
        release([1000], draft=True),
        release([]),
    )
    assert calculate_downloads(items) == 22


def test_downloads_are_independent_of_release_order():
    items = releases(*(release([i, i * 2], draft=i % 4 == 0) for i in range(1, 30)))
    expected = calculate_downloads(items)
    shuffled = list(items)
    random.Random(7).shuffle(shuffled)
    assert calculate_downloads(shuffled) == expected


def test_latest_date_ignores_drafts_and_prereleases():
    items = releases(
        release(published_at="2024-03-01T08:00:00Z"),
        release(published_at="2024-05-20T23:59:59Z"),
        release(published_at="2024-09-01T00:00:00Z", prerelease=True),
        release(published_at="2024-10-01T00:00:00Z", draft=True),
    )
    assert latest_release_date(items) == date(2024, 5, 20)
    assert latest_release_date(list(reversed(items))) == date(2024, 5, 20)


def test_latest_date_is_none_without_stable_releases():
    items = releases(
        release(prerelease=True),
        release(draft=True),
        release(published_at=None),
    )
    assert latest_release_date(items) is None
    assert latest_release_date([]) is None


def test_entry_requires_downloads_or_date():
    assert build_metadata_entry([]) is None
    assert build_metadata_entry(releases(release([0], prerelease=True))) is None


def test_entry_with_prerelease_downloads_only_has_no_date():
    entry = build_metadata_entry(releases(release([3], prerelease=True)))
    assert entry.to_json() == {"downloads": 3}


def test_entry_with_date_only_omits_downloads():
    entry = build_metadata_entry(releases(release([0], published_at="2023-12-31T22:00:00Z")))
    assert entry.to_json() == {"lastUpdated": "2023-12-31"}


def test_latest_date_compares_offset_and_naive_timestamps_as_utc():
    items = releases(
        release(published_at="2024-06-01T10:00:00Z"),
        release(published_at="2024-06-02T00:00:00"),
        release(published_at="2024-06-02T01:00:00+02:00"),
    )
    # 2024-06-02T01:00:00+02:00 is 2024-06-01T23:00:00Z, older than the naive value.
    assert latest_release_date(items) == date(2024, 6, 2)
    assert latest_release_date(items[::2]) == date(2024, 6, 1)
