from functools import wraps

from .exceptions import ForbiddenError
from .tokens import token_from_header, verify_token


def token_required(view_func):
    """Verify the bearer token and attach its claims as ``request.claims``."""
    @wraps(view_func)
    def wrapper(request, *args, **kwargs):
        token = token_from_header(request.headers.get('Authorization'))
        request.claims = verify_token(token)
        return view_func(request, *args, **kwargs)
    return wrapper


def admin_required(view_func):
    """
    Role gate. Always wrapped by ``token_required`` so it never runs
    without verified claims; the role is read from the token on every call.
    """
    @wraps(view_func)
    def check_role(request, *args, **kwargs):
        if not request.claims.is_admin:
            raise ForbiddenError("Admin access required")
        return view_func(request, *args, **kwargs)
    return token_required(check_role)
