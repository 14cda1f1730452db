import pytest
from character_catalog.errors import RemoteError
from character_catalog.pipeline import fetch_all_pages
from fakes import FakeCharactersAPI, make_characters

@pytest.mark.asyncio
@pytest.mark.parametrize("filters", [{}, {"name": "smith"}, {"status": "dead"}, {"species": "alien", "gender": "male"}])
async def test_fetch_all_pages_collects_count_records(filters):
    api = FakeCharactersAPI(make_characters(93))
    first = await api.fetch_page(1, filters)
    api.calls.clear()

    outcome = await fetch_all_pages(api, filters)

    assert len(outcome.records) == first["count"]
    assert not outcome.truncated
    # strictly sequential, in page order, stopping at the last page
    assert [p for p, _ in api.calls] == list(range(1, first["pages"] + 1))
    assert all(f == filters for _, f in api.calls)

@pytest.mark.asyncio
async def test_fetch_all_pages_keeps_arrival_order():
    records = list(reversed(make_characters(45)))
    outcome = await fetch_all_pages(FakeCharactersAPI(records), {})
    assert [c["id"] for c in outcome.records] == [c["id"] for c in records]

@pytest.mark.asyncio
async def test_failure_on_a_later_page_aborts_remaining_calls():
    class FailingOnPage2(FakeCharactersAPI):
        async def fetch_page(self, page, filters=None):
            if page == 2:
                self.calls.append((page, dict(filters or {})))
                raise RemoteError("API error: 500", status_code=500)
            return await super().fetch_page(page, filters)

    api = FailingOnPage2(make_characters(80))
    with pytest.raises(RemoteError):
        await fetch_all_pages(api, {})
    assert [p for p, _ in api.calls] == [1, 2]

@pytest.mark.asyncio
async def test_max_records_truncates_and_stops_fetching():
    api = FakeCharactersAPI(make_characters(100))
    outcome = await fetch_all_pages(api, {}, max_records=30)

    assert outcome.truncated
    assert [c["id"] for c in outcome.records] == list(range(1, 31))
    assert [p for p, _ in api.calls] == [1, 2]

@pytest.mark.asyncio
async def test_max_records_equal_to_count_is_not_truncated():
    outcome = await fetch_all_pages(FakeCharactersAPI(make_characters(40)), {}, max_records=40)
    assert len(outcome.records) == 40
    assert not outcome.truncated
