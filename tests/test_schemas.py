import pytest
from pawpal.schemas import EntityKind, validate_insert, validate_update
from conftest import pet_data

VALID = {
    EntityKind.USER: {'username': 'alice', 'password': 'secret123', 'email': 'alice@example.com',
                      'name': 'Alice'},
    EntityKind.PET: pet_data(),
    EntityKind.ADOPTION_APPLICATION: {'user_id': 1, 'pet_id': 2},
    EntityKind.APPOINTMENT: {'user_id': 1, 'type': 'meet_and_greet', 'date': '2026-11-02T10:30:00Z'},
    EntityKind.RESOURCE: {'title': 'First week at home', 'content': 'Long text', 'summary': 'Short',
                          'category': 'care', 'image_url': '/img/a.jpg'},
    EntityKind.TESTIMONIAL: {'name': 'Dana', 'pet_name': 'Milo', 'pet_type': 'cat',
                             'content': 'Best decision ever', 'rating': 5},
    EntityKind.EMERGENCY_CONTACT: {'user_id': 1, 'contact_name': 'Dr. Vet', 'phone': '+7 700 000 00 00',
                                   'address': '1 Main St'},
    EntityKind.PET_MEDICAL_RECORD: {'user_id': 1, 'pet_id': 2, 'record_type': 'vaccination',
                                    'record_date': '2026-01-15', 'description': 'Rabies shot'},
}


def error_fields(errors):
    return [e.field for e in errors]


@pytest.mark.parametrize('kind', list(EntityKind))
def test_valid_candidate_is_accepted(kind):
    record, errors = validate_insert(kind, VALID[kind])
    assert errors == []
    assert record is not None


@pytest.mark.parametrize('kind', list(EntityKind))
def test_missing_required_field_is_named(kind):
    candidate = dict(VALID[kind])
    missing = next(iter(candidate))
    del candidate[missing]
    record, errors = validate_insert(kind, candidate)
    assert record is None
    assert missing in error_fields(errors)


def test_defaults_are_filled():
    pet, _ = validate_insert(EntityKind.PET, pet_data())
    assert pet['status'] == 'available'
    assert pet['good_with'] == {}

    user, _ = validate_insert(EntityKind.USER, VALID[EntityKind.USER])
    assert user['role'] == 'user'

    contact, _ = validate_insert(EntityKind.EMERGENCY_CONTACT, VALID[EntityKind.EMERGENCY_CONTACT])
    assert contact['is_vet'] is False


def test_good_with_keeps_unknown_apart_from_false():
    pet, _ = validate_insert(EntityKind.PET, pet_data(good_with={'kids': True, 'cats': False}))
    assert pet['good_with'] == {'kids': True, 'cats': False}

    _, errors = validate_insert(EntityKind.PET, pet_data(good_with={'kids': 'yes'}))
    assert error_fields(errors) == ['good_with.kids']


def test_empty_name_is_rejected():
    record, errors = validate_insert(EntityKind.PET, pet_data(name='   '))
    assert record is None
    assert error_fields(errors) == ['name']


@pytest.mark.parametrize('field,value', [
    ('species', 'dragon'),
    ('gender', 'unknown'),
    ('size', 'huge'),
    ('status', 'sold'),
    ('age', '5'),
    ('age', True),
    ('age', -1),
])
def test_bad_pet_values(field, value):
    _, errors = validate_insert(EntityKind.PET, pet_data(**{field: value}))
    assert error_fields(errors) == [field]


def test_server_assigned_fields_are_not_insertable():
    _, errors = validate_insert(EntityKind.PET, pet_data(id=7))
    assert error_fields(errors) == ['id']

    candidate = dict(VALID[EntityKind.ADOPTION_APPLICATION], status='approved')
    _, errors = validate_insert(EntityKind.ADOPTION_APPLICATION, candidate)
    assert error_fields(errors) == ['status']


def test_user_password_and_email_rules():
    candidate = dict(VALID[EntityKind.USER], password='short', email='not-an-email')
    _, errors = validate_insert(EntityKind.USER, candidate)
    assert sorted(error_fields(errors)) == ['email', 'password']

    record, _ = validate_insert(EntityKind.USER, dict(VALID[EntityKind.USER], email='Alice@Example.com'))
    assert record['email'] == 'alice@example.com'


def test_appointment_date_is_parsed():
    record, _ = validate_insert(EntityKind.APPOINTMENT, VALID[EntityKind.APPOINTMENT])
    assert record['date'].year == 2026
    assert record['type'] == 'meet_and_greet'

    _, errors = validate_insert(EntityKind.APPOINTMENT, dict(VALID[EntityKind.APPOINTMENT], date='soon'))
    assert error_fields(errors) == ['date']


def test_appointment_participant_is_not_client_settable():
    candidate = dict(VALID[EntityKind.APPOINTMENT], participant_user_id=2)
    _, errors = validate_insert(EntityKind.APPOINTMENT, candidate)
    assert error_fields(errors) == ['participant_user_id']

    _, errors = validate_update(EntityKind.APPOINTMENT, {'participant_user_id': 2})
    assert error_fields(errors) == ['participant_user_id']


def test_testimonial_rating_must_be_an_integer():
    candidate = dict(VALID[EntityKind.TESTIMONIAL], rating='5')
    _, errors = validate_insert(EntityKind.TESTIMONIAL, candidate)
    assert error_fields(errors) == ['rating']


def test_non_mapping_candidate():
    record, errors = validate_insert(EntityKind.PET, ['Rex'])
    assert record is None
    assert error_fields(errors) == ['body']


def test_update_returns_only_supplied_fields():
    changes, errors = validate_update(EntityKind.PET, {'status': 'adopted', 'age': 7})
    assert errors == []
    assert changes == {'status': 'adopted', 'age': 7}


def test_update_accepts_status_where_insert_does_not():
    changes, _ = validate_update(EntityKind.ADOPTION_APPLICATION, {'status': 'approved'})
    assert changes == {'status': 'approved'}

    _, errors = validate_update(EntityKind.ADOPTION_APPLICATION, {'status': 'maybe'})
    assert error_fields(errors) == ['status']


def test_update_rejects_owner_change_and_unknown_fields():
    _, errors = validate_update(EntityKind.EMERGENCY_CONTACT, {'user_id': 3, 'fax': '123'})
    assert error_fields(errors) == ['user_id', 'fax']


def test_update_applies_user_field_checks():
    _, errors = validate_update(EntityKind.USER, {'email': 'nope'})
    assert error_fields(errors) == ['email']

    changes, _ = validate_update(EntityKind.USER, {'email': 'New@Example.com'})
    assert changes == {'email': 'new@example.com'}


def test_insert_then_filter_scenario():
    from pawpal.filters import PetFilter, filter_pets
    from pawpal.models import PetSpecies

    _, errors = validate_insert(EntityKind.PET, pet_data(name=''))
    assert 'name' in error_fields(errors)

    rex, errors = validate_insert(EntityKind.PET, pet_data())
    assert errors == []
    assert rex['status'] == 'available'

    pets = [dict(rex, id=1), dict(pet_data(name='Tom', species='cat'), id=2),
            dict(pet_data(name='Ace'), id=3)]
    assert len(filter_pets(pets, PetFilter(species=PetSpecies.CAT))) == 1
