# Adoption application service module
import logging
from flask import current_app
from pawpal import db
from pawpal.errors import Conflict, FieldError, ValidationFailed
from pawpal.models import AdoptionApplication, ApplicationStatus, Pet, PetStatus, User
from pawpal.schemas import EntityKind
from pawpal.services.common import checked_insert, checked_update, get_or_404

logger = logging.getLogger(__name__)


def list_for_user(user_id):
    applications = AdoptionApplication.query.filter_by(user_id=user_id) \
        .order_by(AdoptionApplication.id.asc()).all()
    return [a.to_dict() for a in applications]


def list_for_pet(pet_id):
    get_or_404(Pet, pet_id, 'Pet not found')
    applications = AdoptionApplication.query.filter_by(pet_id=pet_id) \
        .order_by(AdoptionApplication.id.asc()).all()
    return [a.to_dict() for a in applications]


def create_application(candidate, user_id):
    candidate = dict(candidate or {})
    candidate['user_id'] = user_id
    record = checked_insert(EntityKind.ADOPTION_APPLICATION, candidate, 'Invalid application data')
    get_or_404(Pet, record['pet_id'], 'Pet not found')

    if not current_app.config.get('ALLOW_REPEAT_APPLICATIONS', True):
        pending = AdoptionApplication.query.filter_by(
            user_id=user_id, pet_id=record['pet_id'], status=ApplicationStatus.PENDING.value).first()
        if pending:
            raise Conflict('You already have a pending application for this pet')

    application = AdoptionApplication(**record)
    db.session.add(application)
    db.session.commit()
    logger.info(f"User {user_id} applied for pet {application.pet_id} (application {application.id})")
    return application.to_dict()


def update_status(application_id, candidate, acting_user_id):
    """Admin status change; approval records the adoption on user and pet."""
    application = get_or_404(AdoptionApplication, application_id, 'Adoption application not found')
    changes = checked_update(EntityKind.ADOPTION_APPLICATION, candidate, 'Invalid status')
    if set(changes) != {'status'}:
        raise ValidationFailed([FieldError('status', 'Field required')], 'Invalid status')

    application.status = changes['status']
    if application.status == ApplicationStatus.APPROVED.value:
        user = db.session.get(User, application.user_id)
        pet = db.session.get(Pet, application.pet_id)
        if user is not None and application.pet_id not in (user.adoption_history or []):
            user.adoption_history = list(user.adoption_history or []) + [application.pet_id]
        if pet is not None:
            pet.status = PetStatus.ADOPTED.value
    db.session.commit()
    logger.info(f"User {acting_user_id} set application {application_id} to {application.status}")
    return application.to_dict()
