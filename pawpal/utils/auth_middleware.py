import logging
from collections import namedtuple
from functools import wraps
from flask import request, g
from flask_jwt_extended import create_access_token, decode_token
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import PyJWTError
from pawpal.errors import MissingToken, InvalidToken, InsufficientRole
from pawpal.models.user_model import Role

logger = logging.getLogger(__name__)

AuthContext = namedtuple('AuthContext', ['user_id', 'role'])


def issue_token(user):
    """Access token carrying the user id (as subject) and role."""
    return create_access_token(identity=str(user.id), additional_claims={'role': user.role.value})


def extract_bearer_token(auth_header):
    if not auth_header:
        return None
    scheme, _, token = auth_header.strip().partition(' ')
    if scheme.lower() != 'bearer':
        return None
    return token.strip() or None


def authenticate(raw_token):
    """Verify a raw token and return its AuthContext."""
    if not raw_token:
        raise MissingToken()
    try:
        data = decode_token(raw_token)
    except (PyJWTError, JWTExtendedException) as e:
        logger.info(f"Token rejected: {e}")
        raise InvalidToken() from e
    try:
        user_id = int(data['sub'])
        role = Role(data['role'])
    except (KeyError, TypeError, ValueError) as e:
        logger.warning(f"Token with unusable claims: {e}")
        raise InvalidToken() from e
    return AuthContext(user_id=user_id, role=role)


def require_role(context, *roles):
    if context.role not in roles:
        raise InsufficientRole(f"Requires role: {', '.join(r.value for r in roles)}")


def current_auth():
    return getattr(g, 'auth', None)


def token_required(f):
    @wraps(f)
    def decorated(*args, **kwargs):
        token = extract_bearer_token(request.headers.get('Authorization'))
        g.auth = authenticate(token)
        return f(*args, **kwargs)
    return decorated
