# pawpal/utils/role_utils.py
import logging
from pawpal import db
from pawpal.errors import NotFound, ValidationFailed, FieldError
from pawpal.models.user_model import Role, User

logger = logging.getLogger(__name__)

# Interface sections and actions available to each role
ROLE_PERMISSIONS = {
    Role.USER: {
        'interface_sections': [
            'profile', 'pets', 'favorites', 'applications', 'appointments',
            'emergency', 'resources', 'testimonials'
        ],
        'actions': [
            'view_pets', 'list_pet', 'update_own_pet', 'delete_own_pet', 'favorite_pet',
            'apply_for_adoption', 'view_own_applications', 'book_appointment',
            'view_own_appointments', 'manage_own_emergency_contacts',
            'manage_own_medical_records', 'post_testimonial'
        ]
    },
    Role.ADMIN: {
        'interface_sections': [
            'profile', 'pets', 'favorites', 'applications', 'appointments',
            'emergency', 'resources', 'testimonials', 'admin'
        ],
        'actions': [
            'view_pets', 'list_pet', 'create_pet', 'update_any_pet', 'delete_any_pet',
            'favorite_pet', 'apply_for_adoption', 'view_all_applications',
            'update_application_status', 'book_appointment', 'view_all_appointments',
            'update_any_appointment', 'manage_resources', 'post_testimonial',
            'delete_testimonial', 'view_all_users', 'manage_roles', 'view_stats',
            'manage_own_emergency_contacts', 'manage_own_medical_records'
        ]
    }
}

ANONYMOUS_PERMISSIONS = {
    'interface_sections': ['login', 'register', 'pets', 'resources', 'testimonials'],
    'actions': ['view_pets']
}


def get_user_permissions(user):
    """Get user permissions based on their role"""
    if not user or not user.role:
        return ANONYMOUS_PERMISSIONS
    return ROLE_PERMISSIONS.get(user.role, ROLE_PERMISSIONS[Role.USER])


def can_perform_action(user, action):
    """Check if user can perform a specific action"""
    return action in get_user_permissions(user)['actions']


def get_user_data_with_permissions(user):
    """Return user data with their permissions"""
    if not user:
        return None
    data = user.to_dict()
    data['permissions'] = get_user_permissions(user)
    return data


def update_user_role(user_id, new_role, acting_user_id):
    """Change a user's role; callers must already hold the admin role."""
    user = db.session.get(User, user_id)
    if not user:
        raise NotFound('User not found')
    try:
        role = Role(str(new_role).lower())
    except ValueError:
        raise ValidationFailed([FieldError('role', f'Invalid role: {new_role}')])
    user.role = role
    db.session.commit()
    logger.info(f"User {acting_user_id} set role of user {user_id} to {role.value}")
    return get_user_data_with_permissions(user)
