from pawpal.client import INVALIDATION_PATHS, key_path, matches_path, query_key
from pawpal.schemas import EntityKind


def test_parameter_order_does_not_matter():
    assert query_key('/api/pets', {'a': '1', 'b': '2'}) == query_key('/api/pets', {'b': '2', 'a': '1'})
    assert query_key('/api/pets', [('b', '2'), ('a', '1')]) == query_key('/api/pets?a=1', {'b': '2'})


def test_different_values_give_different_keys():
    assert query_key('/api/pets', {'a': '1'}) != query_key('/api/pets', {'a': '2'})
    assert query_key('/api/pets', {'status': 'available'}) != query_key('/api/pets')


def test_none_values_are_dropped():
    assert query_key('/api/pets', {'status': None}) == '/api/pets'
    assert query_key('/api/pets/', None) == '/api/pets'


def test_values_are_encoded_and_multi_values_kept():
    key = query_key('/api/pets', {'goodWith': ['kids', 'dogs'], 'search': 'golden retriever',
                                  'adopted': False})
    assert key == '/api/pets?adopted=false&goodWith=dogs&goodWith=kids&search=golden+retriever'


def test_key_path_and_prefix_matching():
    key = query_key('/api/pets', {'status': 'available'})
    assert key_path(key) == '/api/pets'
    assert matches_path(key, '/api/pets')
    assert matches_path('/api/pets/3', '/api/pets')
    assert matches_path('/api/pets/favorites', '/api/pets/')
    assert not matches_path('/api/petsx', '/api/pets')
    assert not matches_path('/api/me/pets', '/api/pets')


def test_every_entity_kind_has_listing_paths():
    assert set(INVALIDATION_PATHS) == set(EntityKind)
    assert '/api/pets' in INVALIDATION_PATHS[EntityKind.PET]
