import asyncio
from datetime import date

import pytest

from core.errors import StorageError, ValidationError
from core.validation import MAX_BATCH_PATHS


@pytest.mark.asyncio
async def test_track_is_idempotent_within_a_day(view_counter):
    first = await view_counter.track("/blogs/1", "203.0.113.1", "UA/X")
    repeats = [await view_counter.track("/blogs/1", "203.0.113.1", "UA/X") for _ in range(4)]

    assert (first.count, first.is_new_unique) == (1, True)
    assert all(r.count == 1 and r.is_new_unique is False for r in repeats)


@pytest.mark.asyncio
async def test_track_counts_again_after_day_rollover(view_counter, clock):
    await view_counter.track("/blogs/1", "203.0.113.1", "UA/X")
    clock.day = date(2026, 3, 15)
    second = await view_counter.track("/blogs/1", "203.0.113.1", "UA/X")

    assert second.is_new_unique is True
    assert second.count == 2


@pytest.mark.asyncio
async def test_concurrent_duplicates_count_once(view_counter, fake_db):
    results = await asyncio.gather(
        *(view_counter.track("/blogs/race", "203.0.113.1", "UA/X") for _ in range(25))
    )

    assert sum(r.is_new_unique for r in results) == 1
    assert fake_db.views["/blogs/race"] == 1
    assert (await view_counter.get("/blogs/race")).count == 1


@pytest.mark.asyncio
async def test_concurrent_distinct_visitors_all_count(view_counter):
    results = await asyncio.gather(
        *(view_counter.track("/blogs/busy", f"198.51.100.{i}", "UA/X") for i in range(10))
    )

    assert all(r.is_new_unique for r in results)
    assert (await view_counter.get("/blogs/busy")).count == 10


@pytest.mark.asyncio
async def test_counter_matches_unique_rows(view_counter, fake_db):
    for ip in ("a", "b", "a", "c", "b"):
        await view_counter.track("/blogs/2", ip, "UA")

    rows = [key for key in fake_db.view_uniques if key[0] == "/blogs/2"]
    assert fake_db.views["/blogs/2"] == len(rows) == 3


@pytest.mark.asyncio
async def test_read_after_write(view_counter):
    tracked = await view_counter.track("/notes/9", "1.1.1.1", "UA")
    read = await view_counter.get("/notes/9")

    assert tracked.is_new_unique
    assert read.count == tracked.count >= 1


@pytest.mark.asyncio
async def test_get_unknown_path_is_zero(view_counter):
    assert (await view_counter.get("/never")).count == 0


@pytest.mark.asyncio
async def test_batch_preserves_order_and_fills_zeros(view_counter):
    await view_counter.track("/p1", "1.1.1.1", "UA")
    await view_counter.track("/p3", "1.1.1.1", "UA")
    await view_counter.track("/p3", "2.2.2.2", "UA")

    batch = await view_counter.get_batch(["/p3", "/p2", "/p1"])
    singles = [await view_counter.get(p) for p in ("/p3", "/p2", "/p1")]

    assert [(r.path, r.count) for r in batch] == [("/p3", 2), ("/p2", 0), ("/p1", 1)]
    assert batch == singles


@pytest.mark.asyncio
async def test_empty_batch_skips_the_database(view_counter, fake_db):
    assert await view_counter.get_batch([]) == []
    assert fake_db.calls == []


@pytest.mark.asyncio
@pytest.mark.parametrize("path", ["", None, "blogs/1", 42])
async def test_invalid_path_is_rejected_before_any_store_call(view_counter, fake_db, path):
    with pytest.raises(ValidationError):
        await view_counter.track(path, "1.1.1.1", "UA")
    assert fake_db.calls == []


@pytest.mark.asyncio
async def test_batch_rejects_non_string_entries(view_counter, fake_db):
    with pytest.raises(ValidationError, match="array of strings"):
        await view_counter.get_batch(["/ok", 3])
    assert fake_db.calls == []


@pytest.mark.asyncio
async def test_failed_increment_rolls_back_the_unique_record(view_counter, fake_db):
    fake_db.fail_on = "view_increment"
    with pytest.raises(StorageError, match="Failed to track view"):
        await view_counter.track("/blogs/1", "1.1.1.1", "UA")

    assert fake_db.view_uniques == set()
    assert fake_db.views == {}

    # The retry is counted because nothing from the failed attempt survived.
    fake_db.fail_on = None
    retried = await view_counter.track("/blogs/1", "1.1.1.1", "UA")
    assert (retried.count, retried.is_new_unique) == (1, True)


@pytest.mark.asyncio
async def test_read_failure_surfaces_as_storage_error(view_counter, fake_db):
    fake_db.fail_on = "view_get_counts"
    with pytest.raises(StorageError, match="Failed to fetch batch view counts"):
        await view_counter.get_batch(["/a"])


@pytest.mark.asyncio
async def test_batch_limit_is_inclusive(view_counter, fake_db):
    rows = await view_counter.get_batch([f"/p/{i}" for i in range(MAX_BATCH_PATHS)])

    assert len(rows) == MAX_BATCH_PATHS
    assert all(r.count == 0 for r in rows)


@pytest.mark.asyncio
async def test_batch_over_limit_is_rejected_before_any_store_call(view_counter, fake_db):
    with pytest.raises(ValidationError, match=f"at most {MAX_BATCH_PATHS}"):
        await view_counter.get_batch([f"/p/{i}" for i in range(MAX_BATCH_PATHS + 1)])
    assert fake_db.calls == []


@pytest.mark.asyncio
async def test_statement_timeout_surfaces_as_storage_error(view_counter, fake_db):
    fake_db.fail_on = "view_increment"
    fake_db.fail_error = TimeoutError
    with pytest.raises(StorageError, match="Failed to track view"):
        await view_counter.track("/blogs/1", "1.1.1.1", "UA")
    assert fake_db.view_uniques == set()
