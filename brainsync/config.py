# brainsync/config.py

import os


def _env_flag(name, default):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


# Flask
SECRET_KEY = os.environ.get('FLASK_SECRET_KEY', 'supersecret')
MAX_CONTENT_LENGTH = int(os.environ.get('MAX_CONTENT_LENGTH', 500 * 1024 * 1024))  # 500MB
LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

# Firestore
VIDEOS_COLLECTION = os.environ.get('VIDEOS_COLLECTION', 'videos')

# Identity: 'firebase' verifies Firebase ID tokens, 'jwt' verifies locally signed tokens
AUTH_MODE = os.environ.get('AUTH_MODE', 'firebase')
JWT_SECRET = os.environ.get('JWT_SECRET', 'supersecretjwt')
JWT_ALGORITHM = 'HS256'
JWT_EXPIRES_HOURS = int(os.environ.get('JWT_EXPIRES_HOURS', 4))

# Off by default: the service trusts the client for ownership and roles
REQUIRE_AUTH = _env_flag('REQUIRE_AUTH', False)
# Reject creates with missing required fields (400)
STRICT_CREATE = _env_flag('STRICT_CREATE', True)

# S3 compatible object storage (optional)
AWS_ACCESS_KEY = os.environ.get('AWS_ACCESS_KEY', '')
AWS_SECRET_KEY = os.environ.get('AWS_SECRET_KEY', '')
REGION_NAME = os.environ.get('REGION_NAME', '')
BUCKET_NAME = os.environ.get('BUCKET_NAME', '')
S3_ENDPOINT_URL = os.environ.get('S3_ENDPOINT_URL', '')
PRESIGNED_URL_EXPIRES = 604800  # 7 days, SigV4 maximum

ALLOWED_VIDEO_EXTENSIONS = {'.mp4', '.avi', '.mov', '.wmv', '.flv', '.mkv', '.webm', '.m4v', '.mpg', '.mpeg'}

_FIREBASE_KEYS = (
    'type', 'project_id', 'private_key_id', 'private_key', 'client_email', 'client_id',
    'auth_uri', 'token_uri', 'auth_provider_x509_cert_url', 'client_x509_cert_url',
)


def load_firebase_creds():
    """Service account dict from the environment, or None when not provided"""
    if not os.environ.get('project_id') or not os.environ.get('private_key'):
        return None

    creds = {
        "type": os.environ.get("type", "service_account"),
        "auth_uri": os.environ.get("auth_uri", "https://accounts.google.com/o/oauth2/auth"),
        "token_uri": os.environ.get("token_uri", "https://oauth2.googleapis.com/token"),
        "auth_provider_x509_cert_url": os.environ.get(
            "auth_provider_x509_cert_url", "https://www.googleapis.com/oauth2/v1/certs"
        ),
    }
    for key in _FIREBASE_KEYS:
        if key not in creds:
            creds[key] = os.environ.get(key, "")
    creds["private_key"] = creds["private_key"].replace('\\n', '\n')
    return creds


def flask_settings():
    """Settings copied into app.config by the application factory"""
    return {
        'SECRET_KEY': SECRET_KEY,
        'MAX_CONTENT_LENGTH': MAX_CONTENT_LENGTH,
        'VIDEOS_COLLECTION': VIDEOS_COLLECTION,
        'AUTH_MODE': AUTH_MODE,
        'JWT_SECRET': JWT_SECRET,
        'JWT_ALGORITHM': JWT_ALGORITHM,
        'JWT_EXPIRES_HOURS': JWT_EXPIRES_HOURS,
        'REQUIRE_AUTH': REQUIRE_AUTH,
        'STRICT_CREATE': STRICT_CREATE,
        'AWS_ACCESS_KEY': AWS_ACCESS_KEY,
        'AWS_SECRET_KEY': AWS_SECRET_KEY,
        'REGION_NAME': REGION_NAME,
        'BUCKET_NAME': BUCKET_NAME,
        'S3_ENDPOINT_URL': S3_ENDPOINT_URL,
        'PRESIGNED_URL_EXPIRES': PRESIGNED_URL_EXPIRES,
    }
