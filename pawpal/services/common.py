# Helpers shared by the service modules
from datetime import datetime, timezone
from pawpal import db
from pawpal.errors import NotFound, ValidationFailed, Forbidden
from pawpal.schemas import validate_insert, validate_update
from pawpal.utils.util import is_owner_or_admin

DATETIME_FIELDS = ('date', 'record_date')


def naive_utc(value):
    if isinstance(value, datetime) and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def _normalize(record):
    for name in DATETIME_FIELDS:
        if name in record:
            record[name] = naive_utc(record[name])
    return record


def checked_insert(kind, candidate, message=None):
    record, errors = validate_insert(kind, candidate)
    if errors:
        raise ValidationFailed(errors, message)
    return _normalize(record)


def checked_update(kind, candidate, message=None):
    changes, errors = validate_update(kind, candidate)
    if errors:
        raise ValidationFailed(errors, message)
    return _normalize(changes)


def get_or_404(model, object_id, message):
    instance = db.session.get(model, object_id)
    if instance is None:
        raise NotFound(message)
    return instance


def ensure_owner_or_admin(context, owner_id):
    if not is_owner_or_admin(context, owner_id):
        raise Forbidden()


def apply_changes(instance, changes):
    for name, value in changes.items():
        setattr(instance, name, value)
    return instance
