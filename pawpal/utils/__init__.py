from .auth_middleware import (AuthContext, authenticate, current_auth, extract_bearer_token,
                              issue_token, require_role, token_required)
from .util import permission_required, role_required
