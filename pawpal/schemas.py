"""
Insert schemas for every PawPal entity.

Each pydantic model is the "insertable" shape of an entity: the fields a
client may supply when creating it. Identity, server timestamps and
server-managed fields are not part of these models, so supplying them is
a validation error rather than something silently ignored.

``validate_insert`` and ``validate_update`` are the entry points used by
the services; they never raise on bad input and return ``(record, errors)``
the same way the rest of the code base reports recoverable failures.
"""
import enum
import re
from collections.abc import Mapping
from datetime import datetime
from functools import lru_cache
from typing import Annotated, Optional

from pydantic import (BaseModel, ConfigDict, Field, StrictBool, StrictInt, StringConstraints,
                      TypeAdapter, ValidationError, field_serializer, field_validator)

from pawpal.errors import FieldError
from pawpal.models import (ApplicationStatus, AppointmentStatus, AppointmentType, PetGender,
                           PetSize, PetSpecies, PetStatus, Role)

PASSWORD_REGEX = re.compile(r'^(?=.*[A-Za-z])(?=.*\d).{6,}$')
EMAIL_REGEX = re.compile(r'^[a-zA-Z0-9_.+-]+@[a-zA-Z0-9-]+\.[a-zA-Z0-9-.]+$')

NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
NonNegativeInt = Annotated[StrictInt, Field(ge=0)]


def check_password(value):
    if not PASSWORD_REGEX.match(value):
        raise ValueError('must be at least 6 characters and contain a letter and a digit')
    return value


def check_email(value):
    if not EMAIL_REGEX.match(value):
        raise ValueError('is not a valid e-mail address')
    return value.lower()


class EntityKind(enum.Enum):
    USER = 'user'
    PET = 'pet'
    ADOPTION_APPLICATION = 'adoption_application'
    APPOINTMENT = 'appointment'
    RESOURCE = 'resource'
    TESTIMONIAL = 'testimonial'
    EMERGENCY_CONTACT = 'emergency_contact'
    PET_MEDICAL_RECORD = 'pet_medical_record'


class InsertSchema(BaseModel):
    model_config = ConfigDict(extra='forbid', use_enum_values=True)


class GoodWith(InsertSchema):
    # None means "unknown", which is not the same as False
    kids: Optional[StrictBool] = None
    dogs: Optional[StrictBool] = None
    cats: Optional[StrictBool] = None


class UserInsert(InsertSchema):
    username: Annotated[str, StringConstraints(strip_whitespace=True, min_length=3, max_length=80)]
    password: str
    email: NonEmptyStr
    name: NonEmptyStr
    role: Role = Role.USER
    profile_image: Optional[str] = None
    phone: Optional[str] = None

    @field_validator('password')
    @classmethod
    def validate_password(cls, value):
        return check_password(value)

    @field_validator('email')
    @classmethod
    def validate_email(cls, value):
        return check_email(value)


class PetInsert(InsertSchema):
    name: NonEmptyStr
    species: PetSpecies
    breed: NonEmptyStr
    age: NonNegativeInt
    gender: PetGender
    size: PetSize
    description: NonEmptyStr
    image_url: NonEmptyStr
    status: PetStatus = PetStatus.AVAILABLE
    location: NonEmptyStr
    health_details: NonEmptyStr
    good_with: GoodWith = Field(default_factory=GoodWith)

    @field_validator('good_with', mode='before')
    @classmethod
    def default_good_with(cls, value):
        return {} if value is None else value

    @field_serializer('good_with')
    def dump_good_with(self, value):
        return value.model_dump(exclude_none=True)


class AdoptionApplicationInsert(InsertSchema):
    user_id: StrictInt
    pet_id: StrictInt
    notes: Optional[str] = None


class AppointmentInsert(InsertSchema):
    user_id: StrictInt
    pet_id: Optional[StrictInt] = None
    type: AppointmentType
    date: datetime
    notes: Optional[str] = None


class ResourceInsert(InsertSchema):
    title: NonEmptyStr
    content: NonEmptyStr
    summary: NonEmptyStr
    category: NonEmptyStr
    image_url: NonEmptyStr


class TestimonialInsert(InsertSchema):
    name: NonEmptyStr
    pet_name: NonEmptyStr
    pet_type: NonEmptyStr
    content: NonEmptyStr
    rating: StrictInt
    image_url: Optional[str] = None


class EmergencyContactInsert(InsertSchema):
    user_id: StrictInt
    contact_name: NonEmptyStr
    phone: NonEmptyStr
    address: NonEmptyStr
    is_vet: StrictBool = False
    email: Optional[str] = None
    notes: Optional[str] = None


class PetMedicalRecordInsert(InsertSchema):
    user_id: StrictInt
    pet_id: StrictInt
    record_type: NonEmptyStr
    record_date: datetime
    description: NonEmptyStr
    vet_name: Optional[str] = None
    attachment_url: Optional[str] = None
    notes: Optional[str] = None


INSERT_SCHEMAS = {
    EntityKind.USER: UserInsert,
    EntityKind.PET: PetInsert,
    EntityKind.ADOPTION_APPLICATION: AdoptionApplicationInsert,
    EntityKind.APPOINTMENT: AppointmentInsert,
    EntityKind.RESOURCE: ResourceInsert,
    EntityKind.TESTIMONIAL: TestimonialInsert,
    EntityKind.EMERGENCY_CONTACT: EmergencyContactInsert,
    EntityKind.PET_MEDICAL_RECORD: PetMedicalRecordInsert,
}

# Status fields are set by the server on insert but may change afterwards.
UPDATE_ONLY_FIELDS = {
    EntityKind.ADOPTION_APPLICATION: {'status': ApplicationStatus},
    EntityKind.APPOINTMENT: {'status': AppointmentStatus},
}

IMMUTABLE_FIELDS = {'user_id'}

USER_FIELD_CHECKS = {'password': check_password, 'email': check_email}


def _field_name(loc):
    return '.'.join(str(part) for part in loc) or 'body'


def _to_field_errors(exc, prefix=()):
    return [FieldError(_field_name(tuple(prefix) + tuple(err['loc'])), err['msg'])
            for err in exc.errors()]


def _plain(value):
    if isinstance(value, enum.Enum):
        return value.value
    if isinstance(value, GoodWith):
        return value.model_dump(exclude_none=True)
    if isinstance(value, BaseModel):
        return value.model_dump()
    return value


@lru_cache(maxsize=None)
def _field_adapter(kind, name):
    extra = UPDATE_ONLY_FIELDS.get(kind, {})
    if name in extra:
        return TypeAdapter(extra[name])
    info = INSERT_SCHEMAS[kind].model_fields[name]
    return TypeAdapter(info.rebuild_annotation())


def validate_insert(kind, candidate):
    """Validate a create payload; returns ``(record, [])`` or ``(None, errors)``."""
    kind = EntityKind(kind)
    if not isinstance(candidate, Mapping):
        return None, [FieldError('body', 'Input should be an object')]
    try:
        model = INSERT_SCHEMAS[kind].model_validate(dict(candidate))
    except ValidationError as exc:
        return None, _to_field_errors(exc)
    return {name: _plain(value) for name, value in model.model_dump().items()}, []


def validate_update(kind, candidate):
    """Validate a partial update; only the supplied fields are returned."""
    kind = EntityKind(kind)
    if not isinstance(candidate, Mapping):
        return None, [FieldError('body', 'Input should be an object')]
    allowed = set(INSERT_SCHEMAS[kind].model_fields) | set(UPDATE_ONLY_FIELDS.get(kind, {}))
    changes, errors = {}, []
    for name, value in candidate.items():
        if name in IMMUTABLE_FIELDS:
            errors.append(FieldError(name, 'Field cannot be changed'))
            continue
        if name not in allowed:
            errors.append(FieldError(name, 'Extra inputs are not permitted'))
            continue
        if name == 'good_with' and value is None:
            value = {}
        try:
            validated = _field_adapter(kind, name).validate_python(value)
        except ValidationError as exc:
            errors.extend(_to_field_errors(exc, prefix=(name,)))
            continue
        # field validators only run on whole models
        if kind is EntityKind.USER and name in USER_FIELD_CHECKS:
            try:
                validated = USER_FIELD_CHECKS[name](validated)
            except ValueError as exc:
                errors.append(FieldError(name, str(exc)))
                continue
        changes[name] = _plain(validated)
    if errors:
        return None, errors
    return changes, []
