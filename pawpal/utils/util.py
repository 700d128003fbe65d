from functools import wraps
from pawpal.errors import InsufficientRole
from pawpal.models.user_model import Role
from pawpal.utils.auth_middleware import token_required, require_role, current_auth
from pawpal.utils.role_utils import can_perform_action


def role_required(*roles):
    def wrapper(fn):
        @wraps(fn)
        @token_required
        def decorator(*args, **kwargs):
            require_role(current_auth(), *roles)
            return fn(*args, **kwargs)
        return decorator
    return wrapper


def permission_required(action):
    """Allow the request only when the caller's role grants ``action``"""
    def wrapper(fn):
        @wraps(fn)
        @token_required
        def decorator(*args, **kwargs):
            if not can_perform_action(current_auth(), action):
                raise InsufficientRole(f"Not permitted: {action}")
            return fn(*args, **kwargs)
        return decorator
    return wrapper


def is_owner_or_admin(context, owner_id):
    return context.role == Role.ADMIN or (owner_id is not None and owner_id == context.user_id)
