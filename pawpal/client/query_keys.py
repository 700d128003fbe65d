"""
Cache keys for data requests.

A key is the request path followed by a canonical query string, so it can
be used directly as the URL to fetch. Parameters are merged with any query
already in the path, ``None`` values are dropped and the pairs are sorted,
which makes the key independent of the order parameters were supplied in.
"""
import re
from collections.abc import Mapping
from urllib.parse import parse_qsl, urlencode

from pawpal.schemas import EntityKind

# Listing paths a mutation of each entity kind makes stale.
INVALIDATION_PATHS = {
    EntityKind.USER: ('/api/auth/me', '/api/admin/users'),
    EntityKind.PET: ('/api/pets', '/api/me/pets'),
    EntityKind.ADOPTION_APPLICATION: ('/api/adoption-applications',),
    EntityKind.APPOINTMENT: ('/api/appointments', '/api/admin/appointments'),
    EntityKind.RESOURCE: ('/api/resources',),
    EntityKind.TESTIMONIAL: ('/api/testimonials',),
    EntityKind.EMERGENCY_CONTACT: ('/api/emergency-contacts',),
    EntityKind.PET_MEDICAL_RECORD: ('/api/pet-medical-records',),
}

# Toggling a favorite touches the favorites list and the user's own record only.
FAVORITE_PATHS = ('/api/pets/favorites', '/api/auth/me')

# Per-pet medical record listings, which a record update or delete may touch.
PET_RECORDS_PATH = re.compile(r'/api/pets/\d+/medical-records')


def _text(value):
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if hasattr(value, 'value'):
        value = value.value
    return str(value)


def _normalize_path(path):
    path = path.strip() or '/'
    if len(path) > 1:
        path = path.rstrip('/')
    return path


def _pairs(params):
    items = params.items() if isinstance(params, Mapping) else params
    for name, value in items:
        if value is None:
            continue
        if isinstance(value, (list, tuple, set, frozenset)):
            for item in value:
                if item is not None:
                    yield str(name), _text(item)
        else:
            yield str(name), _text(value)


def query_key(path, params=None):
    """Stable key for ``path`` with ``params`` (mapping or pairs)."""
    base, _, query = path.partition('?')
    pairs = parse_qsl(query, keep_blank_values=True)
    if params:
        pairs.extend(_pairs(params))
    base = _normalize_path(base)
    if not pairs:
        return base
    return f"{base}?{urlencode(sorted(pairs))}"


def key_path(key):
    return _normalize_path(key.partition('?')[0])


def matches_path(key, path):
    """True when ``path`` is a whole-segment prefix of the key's path."""
    prefix = _normalize_path(path.partition('?')[0])
    own = key_path(key)
    if prefix == '/':
        return True
    return own == prefix or own.startswith(prefix + '/')
