"""Async HTTP client for the PawPal API with a shared query cache."""
import logging

import httpx

from pawpal.client.query_cache import QueryCache
from pawpal.client.query_keys import FAVORITE_PATHS, PET_RECORDS_PATH, key_path, query_key
from pawpal.errors import FetchError, FieldError, NotFound, ValidationFailed
from pawpal.filters import filter_pets
from pawpal.schemas import EntityKind, validate_insert

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = 'http://localhost:5000'


def _error_message(response, default):
    try:
        body = response.json()
    except ValueError:
        return default
    if isinstance(body, dict) and body.get('message'):
        return body['message']
    return default


def _field_errors(response):
    try:
        body = response.json()
    except ValueError:
        return None
    errors = body.get('errors') if isinstance(body, dict) else None
    if not isinstance(errors, list):
        return None
    return [FieldError(e.get('field', 'body'), e.get('reason', '')) for e in errors if isinstance(e, dict)]


class PawPalClient:
    """
    Reads go through the injected :class:`QueryCache`; every mutation
    invalidates the listings it makes stale once the server accepts it.
    """

    def __init__(self, base_url=DEFAULT_BASE_URL, cache=None, token=None, transport=None, timeout=10.0):
        self.cache = cache if cache is not None else QueryCache()
        self.token = token
        self._http = httpx.AsyncClient(base_url=base_url, transport=transport, timeout=timeout)

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()

    async def aclose(self):
        await self._http.aclose()

    def _headers(self):
        if not self.token:
            return {}
        return {'Authorization': f'Bearer {self.token}'}

    async def request(self, method, path, json=None, params=None, files=None):
        try:
            response = await self._http.request(method, path, json=json, params=params,
                                                files=files, headers=self._headers())
        except httpx.HTTPError as e:
            logger.warning(f"{method} {path} failed: {e}")
            raise FetchError(message=f"Request to {path} failed: {e}") from e

        if response.status_code == 404:
            raise NotFound(_error_message(response, 'Not found'))
        if response.status_code == 400:
            errors = _field_errors(response)
            if errors is not None:
                raise ValidationFailed(errors, _error_message(response, 'Invalid data'))
        if response.is_error:
            logger.warning(f"{method} {path} returned {response.status_code}")
            raise FetchError(response.status_code, _error_message(response, response.reason_phrase))
        if not response.content:
            return None
        return response.json()

    async def query(self, path, params=None, force=False):
        key = query_key(path, params)
        return await self.cache.fetch(key, lambda: self.request('GET', key), force=force)

    async def _mutate(self, method, path, json=None, kinds=(), paths=(), files=None):
        result = await self.request(method, path, json=json, files=files)
        for kind in kinds:
            self.cache.invalidate_kind(kind)
        for invalidated in paths:
            self.cache.invalidate(invalidated)
        return result

    @staticmethod
    def _precheck(kind, payload):
        _, errors = validate_insert(kind, payload)
        if errors:
            raise ValidationFailed(errors)

    # auth

    async def register(self, username, email, password, name=None, **profile):
        payload = dict(profile, username=username, email=email, password=password)
        if name:
            payload['name'] = name
        return self._signed_in(await self.request('POST', '/api/auth/register', json=payload))

    async def login(self, email, password):
        result = await self.request('POST', '/api/auth/login', json={'email': email, 'password': password})
        return self._signed_in(result)

    def _signed_in(self, result):
        self.cache.clear()
        self.token = result['access_token']
        self.cache.set_data(query_key('/api/auth/me'), result['user'])
        return result['user']

    def logout(self):
        self.token = None
        self.cache.clear()

    async def me(self):
        return await self.query('/api/auth/me')

    async def update_profile(self, **changes):
        user = await self._mutate('PATCH', '/api/user', json=changes, kinds=(EntityKind.USER,))
        self.cache.set_data(query_key('/api/auth/me'), user)
        return user

    # pets

    async def list_pets(self, pet_filter=None, status=None):
        """Pets from the shared listing, narrowed locally by ``pet_filter``."""
        pets = await self.query('/api/pets', {'status': status})
        return filter_pets(pets, pet_filter)

    async def get_pet(self, pet_id):
        return await self.query(f'/api/pets/{pet_id}')

    async def my_pets(self):
        return await self.query('/api/me/pets')

    async def favorite_pets(self):
        return await self.query('/api/pets/favorites')

    async def create_pet(self, pet):
        self._precheck(EntityKind.PET, pet)
        return await self._mutate('POST', '/api/pets', json=pet, kinds=(EntityKind.PET,))

    async def list_pet(self, listing):
        return await self._mutate('POST', '/api/pets/listings', json=listing, kinds=(EntityKind.PET,))

    async def update_pet(self, pet_id, **changes):
        return await self._mutate('PUT', f'/api/pets/{pet_id}', json=changes, kinds=(EntityKind.PET,))

    async def delete_pet(self, pet_id):
        return await self._mutate('DELETE', f'/api/pets/{pet_id}', kinds=(EntityKind.PET,))

    async def set_favorite(self, pet_id, favorited=None):
        payload = {} if favorited is None else {'favorited': favorited}
        return await self._mutate('POST', f'/api/pets/{pet_id}/favorite', json=payload, paths=FAVORITE_PATHS)

    async def upload_pet_image(self, filename, content, content_type='image/jpeg'):
        result = await self.request('POST', '/api/uploads/pet-image',
                                    files={'file': (filename, content, content_type)})
        return result['image_url']

    # adoption

    async def adoption_applications(self):
        return await self.query('/api/adoption-applications')

    async def pet_applications(self, pet_id):
        return await self.query(f'/api/pets/{pet_id}/adoption-applications')

    async def apply_for_adoption(self, pet_id, notes=None):
        payload = {'pet_id': pet_id}
        if notes is not None:
            payload['notes'] = notes
        return await self._mutate('POST', '/api/adoption-applications', json=payload,
                                  kinds=(EntityKind.ADOPTION_APPLICATION,),
                                  paths=(f'/api/pets/{pet_id}/adoption-applications',))

    async def update_application_status(self, application_id, status):
        # approval changes the pet's status and the applicant's history
        return await self._mutate('PUT', f'/api/adoption-applications/{application_id}',
                                  json={'status': status},
                                  kinds=(EntityKind.ADOPTION_APPLICATION, EntityKind.PET, EntityKind.USER))

    # appointments

    async def appointments(self):
        return await self.query('/api/appointments')

    async def all_appointments(self):
        return await self.query('/api/admin/appointments')

    async def book_appointment(self, appointment):
        return await self._mutate('POST', '/api/appointments', json=appointment,
                                  kinds=(EntityKind.APPOINTMENT,))

    async def update_appointment(self, appointment_id, **changes):
        return await self._mutate('PUT', f'/api/appointments/{appointment_id}', json=changes,
                                  kinds=(EntityKind.APPOINTMENT,))

    async def delete_appointment(self, appointment_id):
        return await self._mutate('DELETE', f'/api/appointments/{appointment_id}',
                                  kinds=(EntityKind.APPOINTMENT,))

    # content

    async def resources(self, category=None):
        return await self.query('/api/resources', {'category': category})

    async def featured_resources(self):
        return await self.query('/api/resources/featured')

    async def get_resource(self, resource_id):
        return await self.query(f'/api/resources/{resource_id}')

    async def create_resource(self, resource):
        self._precheck(EntityKind.RESOURCE, resource)
        return await self._mutate('POST', '/api/resources', json=resource, kinds=(EntityKind.RESOURCE,))

    async def testimonials(self):
        return await self.query('/api/testimonials')

    async def create_testimonial(self, testimonial):
        self._precheck(EntityKind.TESTIMONIAL, testimonial)
        return await self._mutate('POST', '/api/testimonials', json=testimonial,
                                  kinds=(EntityKind.TESTIMONIAL,))

    async def subscribe_newsletter(self, email):
        return await self.request('POST', '/api/newsletter', json={'email': email})

    # emergency care

    async def emergency_contacts(self):
        return await self.query('/api/emergency-contacts')

    async def create_emergency_contact(self, contact):
        return await self._mutate('POST', '/api/emergency-contacts', json=contact,
                                  kinds=(EntityKind.EMERGENCY_CONTACT,))

    async def update_emergency_contact(self, contact_id, **changes):
        return await self._mutate('PUT', f'/api/emergency-contacts/{contact_id}', json=changes,
                                  kinds=(EntityKind.EMERGENCY_CONTACT,))

    async def delete_emergency_contact(self, contact_id):
        return await self._mutate('DELETE', f'/api/emergency-contacts/{contact_id}',
                                  kinds=(EntityKind.EMERGENCY_CONTACT,))

    async def medical_records(self):
        return await self.query('/api/pet-medical-records')

    async def pet_medical_records(self, pet_id):
        return await self.query(f'/api/pets/{pet_id}/medical-records')

    async def create_medical_record(self, record):
        return await self._mutate('POST', '/api/pet-medical-records', json=record,
                                  kinds=(EntityKind.PET_MEDICAL_RECORD,),
                                  paths=self._record_paths(record.get('pet_id')))

    async def update_medical_record(self, record_id, **changes):
        return await self._mutate('PUT', f'/api/pet-medical-records/{record_id}', json=changes,
                                  kinds=(EntityKind.PET_MEDICAL_RECORD,),
                                  paths=self._cached_record_listings())

    async def delete_medical_record(self, record_id):
        return await self._mutate('DELETE', f'/api/pet-medical-records/{record_id}',
                                  kinds=(EntityKind.PET_MEDICAL_RECORD,),
                                  paths=self._cached_record_listings())

    @staticmethod
    def _record_paths(pet_id):
        if pet_id is None:
            return ()
        return (f'/api/pets/{pet_id}/medical-records',)

    def _cached_record_listings(self):
        # the record's pet is only known to the server, and may change on update
        paths = (key_path(key) for key in self.cache.keys())
        return tuple(path for path in paths if PET_RECORDS_PATH.fullmatch(path))
