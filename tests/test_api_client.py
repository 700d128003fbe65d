import json

import httpx
import pytest
import pytest_asyncio
from pawpal.client import PawPalClient, QueryCache
from pawpal.errors import FetchError, NotFound, ValidationFailed
from pawpal.filters import PetFilter
from pawpal.models import PetSpecies

PETS = [
    {'id': 1, 'name': 'Rex', 'species': 'dog', 'breed': 'Beagle', 'age': 5, 'good_with': {}},
    {'id': 2, 'name': 'Tom', 'species': 'cat', 'breed': 'Siamese', 'age': 40, 'good_with': {}},
]


class FakeServer:
    def __init__(self):
        self.requests = []
        self.favorites = []
        self.records = [{'id': 5, 'pet_id': 3, 'record_type': 'checkup', 'notes': 'old'}]

    def __call__(self, request):
        self.requests.append((request.method, str(request.url.raw_path, 'ascii')))
        path = request.url.path
        if request.method == 'POST' and path == '/api/auth/login':
            return httpx.Response(200, json={'access_token': 'tok', 'user': {'id': 7, 'favorites': []}})
        if path == '/api/auth/me':
            if request.headers.get('Authorization') != 'Bearer tok':
                return httpx.Response(401, json={'message': 'Authentication required'})
            return httpx.Response(200, json={'id': 7, 'favorites': self.favorites})
        if path == '/api/pets':
            return httpx.Response(200, json=PETS)
        if path == '/api/pets/favorites':
            return httpx.Response(200, json=[p for p in PETS if p['id'] in self.favorites])
        if path == '/api/pets/1/favorite':
            self.favorites = [] if self.favorites else [1]
            return httpx.Response(200, json={'pet_id': 1, 'favorited': bool(self.favorites),
                                             'favorites': self.favorites})
        if path == '/api/testimonials' and request.method == 'POST':
            return httpx.Response(201, json=dict(json.loads(request.content), id=1))
        if path == '/api/pets/3/medical-records':
            return httpx.Response(200, json=self.records)
        if path == '/api/pet-medical-records/5' and request.method == 'PUT':
            self.records = [dict(self.records[0], **json.loads(request.content))]
            return httpx.Response(200, json=self.records[0])
        if path == '/api/pet-medical-records/5' and request.method == 'DELETE':
            self.records = []
            return httpx.Response(200, json={'message': 'Medical record deleted', 'pet_id': 3})
        if path == '/api/resources':
            return httpx.Response(500, json={'message': 'Database error'})
        if path == '/api/adoption-applications' and request.method == 'POST':
            return httpx.Response(400, json={'message': 'Invalid application data',
                                             'errors': [{'field': 'pet_id', 'reason': 'Field required'}]})
        return httpx.Response(404, json={'message': 'Not found'})

    def count(self, method, path):
        return self.requests.count((method, path))


@pytest_asyncio.fixture
async def api():
    server = FakeServer()
    client = PawPalClient(base_url='http://pawpal.test', cache=QueryCache(),
                          transport=httpx.MockTransport(server))
    client.server = server
    yield client
    await client.aclose()


@pytest.mark.asyncio
async def test_reads_are_cached_and_filtered_locally(api):
    cats = await api.list_pets(PetFilter(species=PetSpecies.CAT))
    everyone = await api.list_pets()
    assert [p['name'] for p in cats] == ['Tom']
    assert len(everyone) == 2
    assert api.server.count('GET', '/api/pets') == 1


@pytest.mark.asyncio
async def test_status_param_gets_its_own_key(api):
    await api.list_pets(status='available')
    await api.list_pets()
    assert api.server.count('GET', '/api/pets?status=available') == 1
    assert api.server.count('GET', '/api/pets') == 1


@pytest.mark.asyncio
async def test_login_sends_bearer_token_and_primes_cache(api):
    user = await api.login('alice@example.com', 'secret123')
    assert user['id'] == 7
    assert await api.me() == user
    assert api.server.count('GET', '/api/auth/me') == 0

    api.cache.invalidate('/api/auth/me')
    assert (await api.me())['id'] == 7
    assert api.server.count('GET', '/api/auth/me') == 1


@pytest.mark.asyncio
async def test_favorite_toggle_invalidates_favorites_only(api):
    await api.list_pets()
    assert await api.favorite_pets() == []

    result = await api.set_favorite(1)
    assert result['favorited'] is True
    assert [p['id'] for p in await api.favorite_pets()] == [1]
    assert api.server.count('GET', '/api/pets/favorites') == 2

    await api.list_pets()
    assert api.server.count('GET', '/api/pets') == 1


@pytest.mark.asyncio
async def test_not_found_and_server_errors_are_distinct(api):
    with pytest.raises(NotFound):
        await api.get_pet(42)
    with pytest.raises(FetchError) as exc_info:
        await api.resources()
    assert exc_info.value.status_code == 500
    assert exc_info.value.message == 'Database error'


@pytest.mark.asyncio
async def test_unauthenticated_read_is_a_fetch_error(api):
    with pytest.raises(FetchError) as exc_info:
        await api.me()
    assert exc_info.value.status_code == 401


@pytest.mark.asyncio
async def test_server_validation_errors_keep_their_fields(api):
    with pytest.raises(ValidationFailed) as exc_info:
        await api.apply_for_adoption(1)
    assert [e.field for e in exc_info.value.errors] == ['pet_id']


@pytest.mark.asyncio
async def test_invalid_payload_never_leaves_the_client(api):
    with pytest.raises(ValidationFailed) as exc_info:
        await api.create_testimonial({'name': 'Dana', 'pet_name': 'Milo', 'pet_type': 'cat',
                                      'content': 'Great', 'rating': 'five'})
    assert [e.field for e in exc_info.value.errors] == ['rating']
    assert api.server.requests == []

    created = await api.create_testimonial({'name': 'Dana', 'pet_name': 'Milo', 'pet_type': 'cat',
                                            'content': 'Great', 'rating': 5})
    assert created['id'] == 1


@pytest.mark.asyncio
async def test_transport_failure_is_a_fetch_error():
    def broken(request):
        raise httpx.ConnectError('connection refused', request=request)

    async with PawPalClient(base_url='http://pawpal.test', transport=httpx.MockTransport(broken)) as client:
        with pytest.raises(FetchError) as exc_info:
            await client.testimonials()
    assert exc_info.value.status_code is None
    entry = client.cache.get_entry('/api/testimonials')
    assert isinstance(entry.error, FetchError)


@pytest.mark.asyncio
async def test_record_changes_refresh_the_pets_record_listing(api):
    assert [r['notes'] for r in await api.pet_medical_records(3)] == ['old']
    key = '/api/pets/3/medical-records'

    await api.update_medical_record(5, notes='new')
    assert api.cache.get_entry(key).stale
    assert [r['notes'] for r in await api.pet_medical_records(3)] == ['new']

    await api.delete_medical_record(5)
    assert api.cache.get_entry(key).stale
    assert await api.pet_medical_records(3) == []
    assert api.server.count('GET', key) == 3
