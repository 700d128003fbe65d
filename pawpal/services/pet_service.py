# Pet service module for business logic
import logging
import os
import uuid
from flask import current_app
from werkzeug.utils import secure_filename
from pawpal import db
from pawpal.errors import FieldError, NotFound, ValidationFailed
from pawpal.filters import filter_pets
from pawpal.models import Pet, PetMedicalRecord, User
from pawpal.schemas import EntityKind, validate_insert
from pawpal.services.common import (apply_changes, checked_insert, checked_update,
                                    ensure_owner_or_admin, get_or_404, naive_utc)

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {'png', 'jpg', 'jpeg', 'gif', 'webp'}


def allowed_file(filename):
    return '.' in filename and filename.rsplit('.', 1)[1].lower() in ALLOWED_EXTENSIONS


def save_pet_image(image):
    if image is None or image.filename == '' or not allowed_file(image.filename):
        raise ValidationFailed([FieldError('file', 'Only png, jpg, jpeg, gif or webp images are allowed')])
    filename = f"{uuid.uuid4().hex}_{secure_filename(image.filename)}"
    upload_folder = current_app.config['UPLOAD_FOLDER']
    os.makedirs(upload_folder, exist_ok=True)
    image.save(os.path.join(upload_folder, filename))
    logger.info(f"Stored pet image {filename}")
    return f"/uploads/{filename}"


def list_pets(status=None, owner_id=None, pet_filter=None):
    query = Pet.query
    if status:
        query = query.filter_by(status=status)
    if owner_id is not None:
        query = query.filter_by(owner_id=owner_id)
    pets = [p.to_dict() for p in query.order_by(Pet.id.asc()).all()]
    return filter_pets(pets, pet_filter)


def get_pet(pet_id):
    return get_or_404(Pet, pet_id, 'Pet not found').to_dict()


def create_pet(candidate, owner_id=None):
    record = checked_insert(EntityKind.PET, candidate, 'Invalid pet data')
    pet = Pet(owner_id=owner_id, **record)
    db.session.add(pet)
    db.session.commit()
    logger.info(f"Created pet {pet.id} ({pet.species})")
    return pet.to_dict()


def create_listing(candidate, user_id):
    """Create a pet listed by a user, with optional medical records."""
    candidate = dict(candidate or {})
    raw_records = candidate.pop('medical_records', None) or []
    if not isinstance(raw_records, list):
        raise ValidationFailed([FieldError('medical_records', 'Input should be a list')],
                               'Invalid pet listing data')

    pet_record, errors = validate_insert(EntityKind.PET, candidate)
    errors = list(errors)
    medical_records = []
    for index, raw in enumerate(raw_records):
        # pet_id is only known after the insert; 0 stands in for validation
        raw = dict(raw) if isinstance(raw, dict) else raw
        if isinstance(raw, dict):
            raw.update(user_id=user_id, pet_id=0)
        record, record_errors = validate_insert(EntityKind.PET_MEDICAL_RECORD, raw)
        errors.extend(FieldError(f'medical_records.{index}.{e.field}', e.reason) for e in record_errors)
        if record:
            medical_records.append(record)
    if errors:
        raise ValidationFailed(errors, 'Invalid pet listing data')

    pet = Pet(owner_id=user_id, **pet_record)
    db.session.add(pet)
    db.session.flush()
    for record in medical_records:
        record.update(pet_id=pet.id, record_date=naive_utc(record['record_date']))
        db.session.add(PetMedicalRecord(**record))
    db.session.commit()
    logger.info(f"User {user_id} listed pet {pet.id} with {len(medical_records)} medical records")
    return pet.to_dict()


def update_pet(pet_id, candidate, context):
    pet = get_or_404(Pet, pet_id, 'Pet not found')
    ensure_owner_or_admin(context, pet.owner_id)
    changes = checked_update(EntityKind.PET, candidate, 'Invalid pet data')
    apply_changes(pet, changes)
    db.session.commit()
    logger.info(f"User {context.user_id} updated pet {pet_id}: {sorted(changes)}")
    return pet.to_dict()


def delete_pet(pet_id, context):
    pet = get_or_404(Pet, pet_id, 'Pet not found')
    ensure_owner_or_admin(context, pet.owner_id)
    db.session.delete(pet)
    db.session.commit()
    logger.info(f"User {context.user_id} deleted pet {pet_id}")


def favorite_pets(user_id):
    user = get_or_404(User, user_id, 'User not found')
    favorites = set(user.favorites or [])
    return [p.to_dict() for p in Pet.query.order_by(Pet.id.asc()).all() if p.id in favorites]


def set_favorite(user_id, pet_id, favorited=None):
    """Set or, when ``favorited`` is None, toggle a favorite; returns the id list."""
    user = get_or_404(User, user_id, 'User not found')
    if db.session.get(Pet, pet_id) is None:
        raise NotFound('Pet not found')
    favorites = list(user.favorites or [])
    is_favorite = pet_id in favorites
    if favorited is None:
        favorited = not is_favorite
    if favorited and not is_favorite:
        favorites.append(pet_id)
    elif not favorited and is_favorite:
        favorites = [fav for fav in favorites if fav != pet_id]
    # reassign so the JSON column is flagged dirty
    user.favorites = favorites
    db.session.commit()
    logger.info(f"User {user_id} {'favorited' if favorited else 'unfavorited'} pet {pet_id}")
    return list(user.favorites)
