# brainsync/auth.py
import jwt
from collections import namedtuple
from datetime import datetime, timedelta, timezone
from functools import wraps

from firebase_admin import auth as firebase_auth
from flask import current_app, g, request

from .errors import AuthError, ValidationGap

ROLES = ('student', 'instructor')

Identity = namedtuple('Identity', ['uid', 'email', 'role'])


def issue_local_token(uid, email, role=None):
    """Locally signed JWT (AUTH_MODE=jwt)"""
    config = current_app.config
    now = datetime.now(timezone.utc)
    payload = {
        'sub': uid,
        'email': email,
        'iat': now,
        'exp': now + timedelta(hours=config['JWT_EXPIRES_HOURS'])
    }
    if role:
        payload['role'] = role
    return jwt.encode(payload, config['JWT_SECRET'], algorithm=config['JWT_ALGORITHM'])


def _verify_local_token(token):
    config = current_app.config
    try:
        payload = jwt.decode(token, config['JWT_SECRET'], algorithms=[config['JWT_ALGORITHM']])
    except jwt.ExpiredSignatureError:
        raise AuthError('Token expired')
    except jwt.InvalidTokenError:
        raise AuthError('Invalid token')
    return Identity(payload.get('sub'), payload.get('email'), payload.get('role'))


def _verify_firebase_token(token):
    from .database import initialize_firebase

    initialize_firebase()
    try:
        claims = firebase_auth.verify_id_token(token)
    except (ValueError, firebase_auth.InvalidIdTokenError, firebase_auth.ExpiredIdTokenError,
            firebase_auth.RevokedIdTokenError, firebase_auth.CertificateFetchError) as e:
        current_app.logger.warning(f"ID token rejected: {e}")
        raise AuthError('Invalid token')
    return Identity(claims.get('uid'), claims.get('email'), claims.get('role'))


def verify_identity_token(token):
    """Verify a bearer token and return its Identity; the role is read from the signed claims"""
    if not token:
        raise AuthError()
    if current_app.config['AUTH_MODE'] == 'jwt':
        return _verify_local_token(token)
    return _verify_firebase_token(token)


def bearer_token():
    auth_header = request.headers.get('Authorization', '')
    if not auth_header.startswith('Bearer '):
        return None
    return auth_header.split(' ', 1)[1].strip() or None


def assign_role(identity, role):
    """Attach ``role`` to the user's token claims.

    A role is set once, at sign-up. In firebase mode the custom claim is
    written and the client must refresh its ID token; in jwt mode a new
    signed token is returned.
    """
    if role not in ROLES:
        raise ValidationGap(f"Unknown role: {role}", fields=['role'])
    if identity.role:
        raise AuthError('Role already assigned', status=403)

    if current_app.config['AUTH_MODE'] == 'jwt':
        return {'uid': identity.uid, 'role': role,
                'token': issue_local_token(identity.uid, identity.email, role)}

    firebase_auth.set_custom_user_claims(identity.uid, {'role': role})
    current_app.logger.info(f"Role '{role}' assigned to {identity.uid}")
    return {'uid': identity.uid, 'role': role, 'refresh_token_required': True}


def _resolve_identity(required):
    token = bearer_token()
    if token:
        g.identity = verify_identity_token(token)
    elif required:
        raise AuthError()
    else:
        g.identity = None
    return g.identity


def token_required(f):
    """A verified identity is required when REQUIRE_AUTH is on"""
    @wraps(f)
    def decorated(*args, **kwargs):
        _resolve_identity(current_app.config['REQUIRE_AUTH'])
        return f(*args, **kwargs)
    return decorated


def instructor_required(f):
    """Instructor role required when REQUIRE_AUTH is on"""
    @wraps(f)
    def decorated(*args, **kwargs):
        required = current_app.config['REQUIRE_AUTH']
        identity = _resolve_identity(required)
        if required and identity.role != 'instructor':
            raise AuthError('Instructor role required', status=403)
        return f(*args, **kwargs)
    return decorated
