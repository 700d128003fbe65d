import asyncio
import pytest
from pawpal.client import QueryCache, QueryStatus, query_key
from pawpal.errors import FetchError
from pawpal.schemas import EntityKind


class Fetcher:
    """Counts calls; each call waits until released."""

    def __init__(self, *results):
        self.results = list(results)
        self.calls = 0
        self.release = asyncio.Event()

    async def __call__(self):
        self.calls += 1
        result = self.results[min(self.calls, len(self.results)) - 1]
        await self.release.wait()
        if isinstance(result, Exception):
            raise result
        return result


@pytest.mark.asyncio
async def test_concurrent_callers_share_one_fetch():
    cache = QueryCache()
    fetcher = Fetcher(['rex'])
    first = asyncio.ensure_future(cache.fetch('/api/pets', fetcher))
    second = asyncio.ensure_future(cache.fetch('/api/pets', fetcher))
    await asyncio.sleep(0)
    assert cache.get_entry('/api/pets').status is QueryStatus.LOADING
    fetcher.release.set()
    assert await first == ['rex']
    assert await second == ['rex']
    assert fetcher.calls == 1
    assert cache.get_entry('/api/pets').status is QueryStatus.SUCCESS


@pytest.mark.asyncio
async def test_fresh_data_is_served_from_cache():
    cache = QueryCache()
    fetcher = Fetcher(['rex'])
    fetcher.release.set()
    await cache.fetch('/api/pets', fetcher)
    await cache.fetch('/api/pets', fetcher)
    assert fetcher.calls == 1
    await cache.fetch('/api/pets', fetcher, force=True)
    assert fetcher.calls == 2


@pytest.mark.asyncio
async def test_all_callers_see_the_same_failure():
    cache = QueryCache()
    fetcher = Fetcher(FetchError(500, 'boom'))
    callers = [asyncio.ensure_future(cache.fetch('/api/pets', fetcher)) for _ in range(3)]
    fetcher.release.set()
    results = await asyncio.gather(*callers, return_exceptions=True)
    assert fetcher.calls == 1
    assert all(isinstance(r, FetchError) for r in results)
    assert results[0] is results[1] is results[2]
    entry = cache.get_entry('/api/pets')
    assert entry.status is QueryStatus.ERROR
    assert entry.stale


@pytest.mark.asyncio
async def test_failed_entry_is_fetched_again():
    cache = QueryCache()
    fetcher = Fetcher(FetchError(503, 'down'), ['rex'])
    fetcher.release.set()
    with pytest.raises(FetchError):
        await cache.fetch('/api/pets', fetcher)
    assert await cache.fetch('/api/pets', fetcher) == ['rex']
    assert cache.get_entry('/api/pets').error is None


@pytest.mark.asyncio
async def test_invalidate_marks_matching_keys_only():
    cache = QueryCache()
    for key in ('/api/pets', query_key('/api/pets', {'status': 'available'}), '/api/pets/3',
                '/api/petsx', '/api/resources'):
        cache.set_data(key, [])
    invalidated = cache.invalidate('/api/pets')
    assert sorted(invalidated) == ['/api/pets', '/api/pets/3', '/api/pets?status=available']
    assert not cache.get_entry('/api/petsx').stale
    assert not cache.get_entry('/api/resources').stale


@pytest.mark.asyncio
async def test_invalidate_kind_uses_listing_paths():
    cache = QueryCache()
    cache.set_data('/api/me/pets', [])
    cache.set_data('/api/testimonials', [])
    assert cache.invalidate_kind(EntityKind.PET) == ['/api/me/pets']
    assert not cache.get_entry('/api/testimonials').stale


@pytest.mark.asyncio
async def test_stale_fetch_does_not_overwrite_newer_data():
    cache = QueryCache()
    old = Fetcher(['old'])
    new = Fetcher(['new'])
    slow = asyncio.ensure_future(cache.fetch('/api/pets', old))
    await asyncio.sleep(0)

    cache.invalidate('/api/pets')
    new.release.set()
    assert await cache.fetch('/api/pets', new) == ['new']

    old.release.set()
    # the caller of the old fetch still gets its own answer
    assert await slow == ['old']
    assert cache.get_data('/api/pets') == ['new']


@pytest.mark.asyncio
async def test_invalidated_in_flight_fetch_is_not_joined():
    cache = QueryCache()
    first = Fetcher(['first'])
    second = Fetcher(['second'])
    pending = asyncio.ensure_future(cache.fetch('/api/pets', first))
    await asyncio.sleep(0)
    cache.invalidate('/api/pets')
    fresh = asyncio.ensure_future(cache.fetch('/api/pets', second))
    await asyncio.sleep(0)
    second.release.set()
    first.release.set()
    assert await fresh == ['second']
    assert await pending == ['first']
    assert first.calls == 1 and second.calls == 1
    assert cache.get_data('/api/pets') == ['second']


@pytest.mark.asyncio
async def test_set_data_supersedes_in_flight_fetch():
    cache = QueryCache()
    fetcher = Fetcher(['server'])
    pending = asyncio.ensure_future(cache.fetch('/api/auth/me', fetcher))
    await asyncio.sleep(0)
    cache.set_data('/api/auth/me', ['optimistic'])
    fetcher.release.set()
    await pending
    assert cache.get_data('/api/auth/me') == ['optimistic']


@pytest.mark.asyncio
async def test_cancelled_caller_does_not_cancel_shared_fetch():
    cache = QueryCache()
    fetcher = Fetcher(['rex'])
    leaving = asyncio.ensure_future(cache.fetch('/api/pets', fetcher))
    staying = asyncio.ensure_future(cache.fetch('/api/pets', fetcher))
    await asyncio.sleep(0)
    leaving.cancel()
    with pytest.raises(asyncio.CancelledError):
        await leaving
    fetcher.release.set()
    assert await staying == ['rex']
    assert cache.get_data('/api/pets') == ['rex']


@pytest.mark.asyncio
async def test_result_for_removed_key_is_discarded():
    cache = QueryCache()
    fetcher = Fetcher(['rex'])
    pending = asyncio.ensure_future(cache.fetch('/api/pets', fetcher))
    await asyncio.sleep(0)
    cache.clear()
    fetcher.release.set()
    assert await pending == ['rex']
    assert cache.get_entry('/api/pets') is None
    assert len(cache) == 0


@pytest.mark.asyncio
async def test_previous_data_stays_readable_during_refetch():
    cache = QueryCache()
    cache.set_data('/api/pets', ['rex'])
    cache.invalidate('/api/pets')
    fetcher = Fetcher(FetchError(502, 'bad gateway'))
    refetch = asyncio.ensure_future(cache.fetch('/api/pets', fetcher))
    await asyncio.sleep(0)
    assert cache.get_entry('/api/pets').status is QueryStatus.LOADING
    assert cache.get_data('/api/pets') == ['rex']

    fetcher.release.set()
    with pytest.raises(FetchError):
        await refetch
    assert cache.get_entry('/api/pets').status is QueryStatus.ERROR
    assert cache.get_data('/api/pets') == ['rex']


@pytest.mark.asyncio
async def test_failed_first_fetch_has_no_data():
    cache = QueryCache()
    fetcher = Fetcher(FetchError(500, 'boom'))
    fetcher.release.set()
    with pytest.raises(FetchError):
        await cache.fetch('/api/pets', fetcher)
    assert cache.get_data('/api/pets', default=[]) == []
