"""
Bearer tokens.

A token is the signed, timestamped claims payload produced by Django's
signing framework (keyed by ``SECRET_KEY``). Verification checks the
signature and the fixed lifetime, then rebuilds the claims.
"""
from dataclasses import dataclass
from datetime import timedelta

from django.conf import settings
from django.core import signing

from .exceptions import AuthError
from .models import Role


@dataclass(frozen=True)
class TokenClaims:
    user_id: int
    email: str
    role: Role

    @property
    def is_admin(self):
        return self.role == Role.ADMIN

    def as_payload(self):
        return {'user_id': self.user_id, 'email': self.email, 'role': self.role.value}


def token_max_age():
    return timedelta(days=getattr(settings, 'AUTH_TOKEN_MAX_AGE_DAYS', 7))


def token_salt():
    return getattr(settings, 'AUTH_TOKEN_SALT', 'store.auth.token')


def claims_for(user):
    return TokenClaims(user_id=user.pk, email=user.email, role=user.role)


def issue_token(user):
    return signing.dumps(claims_for(user).as_payload(), salt=token_salt())


def verify_token(token):
    try:
        payload = signing.loads(token, salt=token_salt(), max_age=token_max_age())
    except signing.SignatureExpired:
        raise AuthError("Token has expired")
    except signing.BadSignature:
        raise AuthError("Invalid token")

    try:
        return TokenClaims(
            user_id=int(payload['user_id']),
            email=str(payload['email']),
            role=Role(payload['role']),
        )
    except (KeyError, TypeError, ValueError):
        raise AuthError("Invalid token")


def token_from_header(header):
    """Extract the token from an ``Authorization: Bearer <token>`` value."""
    if not header:
        raise AuthError("Authentication required")
    scheme, _, token = header.partition(' ')
    token = token.strip()
    if scheme.lower() != 'bearer' or not token:
        raise AuthError("Invalid authorization header")
    return token
