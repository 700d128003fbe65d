# User accounts: registration, login, profile and admin listings
import logging
from collections.abc import Mapping
from datetime import datetime, timedelta
from pawpal import db, bcrypt
from pawpal.errors import Conflict, FieldError, InvalidCredentials, ValidationFailed
from pawpal.models import (AdoptionApplication, ApplicationStatus, Appointment, Pet, PetStatus,
                           Role, User)
from pawpal.schemas import EntityKind
from pawpal.services.common import apply_changes, checked_insert, checked_update, get_or_404
from pawpal.utils import issue_token
from pawpal.utils.role_utils import get_user_data_with_permissions

logger = logging.getLogger(__name__)

PROFILE_FIELDS = {'name', 'phone', 'profile_image'}


def _auth_response(user):
    return {
        'access_token': issue_token(user),
        'user': get_user_data_with_permissions(user)
    }


def register_user(candidate):
    """Create a regular user account and return a token for it."""
    if not isinstance(candidate, Mapping):
        raise ValidationFailed([FieldError('body', 'Input should be an object')], 'Invalid registration data')
    candidate = dict(candidate)
    # new accounts are always regular users
    if candidate.get('role', Role.USER.value) != Role.USER.value:
        raise ValidationFailed([FieldError('role', 'New accounts always get the user role')],
                               'Invalid registration data')
    if not candidate.get('name') and isinstance(candidate.get('username'), str):
        candidate['name'] = candidate['username']

    record = checked_insert(EntityKind.USER, candidate, 'Invalid registration data')
    if User.query.filter_by(email=record['email']).first():
        raise Conflict('Email already registered')
    if User.query.filter_by(username=record['username']).first():
        raise Conflict('Username already taken')

    record['password'] = bcrypt.generate_password_hash(record['password']).decode('utf-8')
    record['role'] = Role.USER
    user = User(**record)
    db.session.add(user)
    db.session.commit()
    logger.info(f"Registered user {user.id} ({user.username})")
    return _auth_response(user)


def login(candidate):
    candidate = candidate if isinstance(candidate, Mapping) else {}
    email = candidate.get('email')
    password = candidate.get('password')
    errors = [FieldError(name, 'Field required') for name, value
              in (('email', email), ('password', password)) if not isinstance(value, str) or not value]
    if errors:
        raise ValidationFailed(errors, 'Invalid login data')

    user = User.query.filter_by(email=email.strip().lower()).first()
    if not user or not bcrypt.check_password_hash(user.password, password):
        logger.warning(f"Failed login for {email}")
        raise InvalidCredentials()
    logger.info(f"User {user.id} logged in")
    return _auth_response(user)


def get_user(user_id):
    return get_user_data_with_permissions(get_or_404(User, user_id, 'User not found'))


def update_profile(user_id, candidate):
    """Own-profile update; only name, phone and profile image may change."""
    user = get_or_404(User, user_id, 'User not found')
    if isinstance(candidate, Mapping):
        blocked = sorted(set(candidate) - PROFILE_FIELDS)
        if blocked:
            raise ValidationFailed([FieldError(name, 'Field cannot be changed here') for name in blocked],
                                   'Invalid profile data')
    changes = checked_update(EntityKind.USER, candidate, 'Invalid profile data')
    apply_changes(user, changes)
    db.session.commit()
    logger.info(f"User {user_id} updated profile: {sorted(changes)}")
    return get_user_data_with_permissions(user)


def list_users():
    return [get_user_data_with_permissions(u) for u in User.query.order_by(User.id.asc()).all()]


def stats():
    """Counts for the admin dashboard."""
    week_ago = datetime.utcnow() - timedelta(days=7)
    return {
        'total_users': User.query.count(),
        'total_pets': Pet.query.count(),
        'pets_by_status': {status.value: Pet.query.filter_by(status=status.value).count()
                           for status in PetStatus},
        'applications_by_status': {
            status.value: AdoptionApplication.query.filter_by(status=status.value).count()
            for status in ApplicationStatus
        },
        'total_appointments': Appointment.query.count(),
        'upcoming_appointments': Appointment.query.filter(Appointment.date >= datetime.utcnow()).count(),
        'new_users_this_week': User.query.filter(User.created_at >= week_ago).count(),
        'users_by_role': {role.value: User.query.filter_by(role=role).count() for role in Role}
    }
