# Emergency contacts and pet medical records, both owned by a user
import logging
from pawpal import db
from pawpal.models import EmergencyContact, Pet, PetMedicalRecord
from pawpal.schemas import EntityKind
from pawpal.services.common import (apply_changes, checked_insert, checked_update,
                                    ensure_owner_or_admin, get_or_404)

logger = logging.getLogger(__name__)


def list_contacts(user_id):
    contacts = EmergencyContact.query.filter_by(user_id=user_id) \
        .order_by(EmergencyContact.id.asc()).all()
    return [c.to_dict() for c in contacts]


def get_contact(contact_id, context):
    contact = get_or_404(EmergencyContact, contact_id, 'Emergency contact not found')
    ensure_owner_or_admin(context, contact.user_id)
    return contact.to_dict()


def create_contact(candidate, user_id):
    candidate = dict(candidate or {})
    candidate['user_id'] = user_id
    record = checked_insert(EntityKind.EMERGENCY_CONTACT, candidate, 'Invalid emergency contact data')
    contact = EmergencyContact(**record)
    db.session.add(contact)
    db.session.commit()
    logger.info(f"User {user_id} added emergency contact {contact.id}")
    return contact.to_dict()


def update_contact(contact_id, candidate, context):
    contact = get_or_404(EmergencyContact, contact_id, 'Emergency contact not found')
    ensure_owner_or_admin(context, contact.user_id)
    changes = checked_update(EntityKind.EMERGENCY_CONTACT, candidate, 'Invalid emergency contact data')
    apply_changes(contact, changes)
    db.session.commit()
    return contact.to_dict()


def delete_contact(contact_id, context):
    contact = get_or_404(EmergencyContact, contact_id, 'Emergency contact not found')
    ensure_owner_or_admin(context, contact.user_id)
    db.session.delete(contact)
    db.session.commit()
    logger.info(f"User {context.user_id} deleted emergency contact {contact_id}")


def list_records_for_user(user_id):
    records = PetMedicalRecord.query.filter_by(user_id=user_id) \
        .order_by(PetMedicalRecord.record_date.desc()).all()
    return [r.to_dict() for r in records]


def list_records_for_pet(pet_id):
    get_or_404(Pet, pet_id, 'Pet not found')
    records = PetMedicalRecord.query.filter_by(pet_id=pet_id) \
        .order_by(PetMedicalRecord.record_date.desc()).all()
    return [r.to_dict() for r in records]


def get_record(record_id, context):
    record = get_or_404(PetMedicalRecord, record_id, 'Medical record not found')
    ensure_owner_or_admin(context, record.user_id)
    return record.to_dict()


def create_record(candidate, user_id):
    candidate = dict(candidate or {})
    candidate['user_id'] = user_id
    data = checked_insert(EntityKind.PET_MEDICAL_RECORD, candidate, 'Invalid medical record data')
    get_or_404(Pet, data['pet_id'], 'Pet not found')
    record = PetMedicalRecord(**data)
    db.session.add(record)
    db.session.commit()
    logger.info(f"User {user_id} added {record.record_type} record {record.id} for pet {record.pet_id}")
    return record.to_dict()


def update_record(record_id, candidate, context):
    record = get_or_404(PetMedicalRecord, record_id, 'Medical record not found')
    ensure_owner_or_admin(context, record.user_id)
    changes = checked_update(EntityKind.PET_MEDICAL_RECORD, candidate, 'Invalid medical record data')
    if 'pet_id' in changes:
        get_or_404(Pet, changes['pet_id'], 'Pet not found')
    apply_changes(record, changes)
    db.session.commit()
    return record.to_dict()


def delete_record(record_id, context):
    record = get_or_404(PetMedicalRecord, record_id, 'Medical record not found')
    ensure_owner_or_admin(context, record.user_id)
    pet_id = record.pet_id
    db.session.delete(record)
    db.session.commit()
    logger.info(f"User {context.user_id} deleted medical record {record_id}")
    return pet_id
