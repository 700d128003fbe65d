# Appointment service module
import logging
from pawpal import db
from pawpal.errors import Forbidden
from pawpal.models import Appointment, Pet, Role
from pawpal.schemas import EntityKind
from pawpal.services.common import (apply_changes, checked_insert, checked_update,
                                    ensure_owner_or_admin, get_or_404)

logger = logging.getLogger(__name__)


def list_for_user(user_id):
    # the creator and the linked participant both see the appointment
    appointments = Appointment.query.filter(
        db.or_(Appointment.user_id == user_id, Appointment.participant_user_id == user_id)
    ).order_by(Appointment.date.asc()).all()
    return [a.to_dict() for a in appointments]


def list_all():
    return [a.to_dict() for a in Appointment.query.order_by(Appointment.date.asc()).all()]


def get_appointment(appointment_id, context):
    appointment = get_or_404(Appointment, appointment_id, 'Appointment not found')
    if context.role != Role.ADMIN and context.user_id not in (appointment.user_id,
                                                              appointment.participant_user_id):
        raise Forbidden()
    return appointment.to_dict()


def create_appointment(candidate, user_id):
    candidate = dict(candidate or {})
    candidate['user_id'] = user_id
    record = checked_insert(EntityKind.APPOINTMENT, candidate, 'Invalid appointment data')
    appointment = Appointment(**record)
    if record['pet_id'] is not None:
        _link_lister(appointment, get_or_404(Pet, record['pet_id'], 'Pet not found'))
    db.session.add(appointment)
    db.session.commit()
    logger.info(f"User {user_id} booked appointment {appointment.id} ({appointment.type})")
    return appointment.to_dict()


def update_appointment(appointment_id, candidate, context):
    appointment = get_or_404(Appointment, appointment_id, 'Appointment not found')
    ensure_owner_or_admin(context, appointment.user_id)
    changes = checked_update(EntityKind.APPOINTMENT, candidate, 'Invalid appointment data')
    pet = None
    if changes.get('pet_id') is not None:
        pet = get_or_404(Pet, changes['pet_id'], 'Pet not found')
    apply_changes(appointment, changes)
    if 'pet_id' in changes:
        _link_lister(appointment, pet)
    db.session.commit()
    logger.info(f"User {context.user_id} updated appointment {appointment_id}: {sorted(changes)}")
    return appointment.to_dict()


def delete_appointment(appointment_id, context):
    appointment = get_or_404(Appointment, appointment_id, 'Appointment not found')
    ensure_owner_or_admin(context, appointment.user_id)
    db.session.delete(appointment)
    db.session.commit()
    logger.info(f"User {context.user_id} deleted appointment {appointment_id}")


def _link_lister(appointment, pet):
    # the participant is always the pet's lister, never chosen by the booker
    if pet is not None and pet.owner_id != appointment.user_id:
        appointment.participant_user_id = pet.owner_id
    else:
        appointment.participant_user_id = None
