import os
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt
from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer
from passlib.context import CryptContext

# Password hashing configuration
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

ADMIN_COOKIE_NAME = "admin-token"
PASSWORD_RESET_SALT = "myskin-password-reset"
PASSWORD_RESET_MAX_AGE_SECONDS = 60 * 60


def hash_password(password: str) -> str:
    """Hash a password using bcrypt.

    Args:
        password: Plain text password to hash

    Returns:
        Hashed password string
    """
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """Verify a password against its hash.

    Returns False for accounts without a stored hash instead of raising.
    """
    if not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        # Malformed or unknown hash format
        return False


# JWT configuration
def get_jwt_secret_key() -> str:
    """Get JWT secret key with production validation.

    In production (FLASK_ENV=production), JWT_SECRET_KEY must be set,
    must not be a development default and must be at least 32 characters.

    Raises:
        ValueError: If production deployment uses weak or missing JWT secret
    """
    secret = os.getenv("JWT_SECRET_KEY", "dev-jwt-secret-change-me")
    is_production = os.getenv("FLASK_ENV") == "production"

    if is_production:
        weak_secrets = ["dev-jwt-secret-change-me", "dev-secret-change-me", "secret123"]
        if secret in weak_secrets or len(secret) < 32:
            raise ValueError(
                "Production deployment requires strong JWT_SECRET_KEY (min 32 chars). "
                "Set JWT_SECRET_KEY environment variable."
            )

    return secret


JWT_ALGORITHM = "HS256"
JWT_EXPIRATION_HOURS = 24


def create_access_token(
    data: Dict[str, Any], expires_delta: Optional[timedelta] = None
) -> str:
    """Create a JWT access token.

    Args:
        data: Payload data to encode in the token
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token string
    """
    to_encode = data.copy()

    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(hours=JWT_EXPIRATION_HOURS)

    to_encode.update({"exp": expire})

    return jwt.encode(to_encode, get_jwt_secret_key(), algorithm=JWT_ALGORITHM)


def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    """Decode and validate a JWT access token.

    Returns:
        Decoded payload if valid, None if invalid or expired
    """
    try:
        return jwt.decode(token, get_jwt_secret_key(), algorithms=[JWT_ALGORITHM])
    except jwt.PyJWTError:
        return None


def create_admin_token(admin_id: int, email: str) -> str:
    """Create the token stored in the admin session cookie."""
    return create_access_token({"userId": admin_id, "email": email, "role": "admin"})


def get_admin_from_token(token: Optional[str]) -> Optional[Dict[str, Any]]:
    """Extract admin identity from a token.

    Returns:
        ``{"id", "email", "role"}`` if the token is valid and carries the
        admin role, None otherwise
    """
    if not token:
        return None
    payload = decode_access_token(token)
    if payload is None or payload.get("role") != "admin":
        return None

    admin_id = payload.get("userId")
    email = payload.get("email")
    if admin_id is None or email is None:
        return None

    return {"id": int(admin_id), "email": email, "role": "admin"}


def _reset_serializer(secret_key: str) -> URLSafeTimedSerializer:
    return URLSafeTimedSerializer(secret_key, salt=PASSWORD_RESET_SALT)


def password_fingerprint(password_hash: Optional[str]) -> str:
    """Tail of the stored hash; changes whenever the password does."""
    return (password_hash or "")[-16:]


def generate_password_reset_token(
    secret_key: str, email: str, password_hash: Optional[str] = None
) -> str:
    """Create a signed, time-limited password reset token for a customer.

    The token carries a fingerprint of the current password hash, so it stops
    working once the password has been changed with it.
    """
    return _reset_serializer(secret_key).dumps(
        {"email": email.lower(), "ph": password_fingerprint(password_hash)}
    )


def verify_password_reset_token(
    secret_key: str, token: str, max_age: int = PASSWORD_RESET_MAX_AGE_SECONDS
) -> Optional[Dict[str, str]]:
    """Return ``{"email", "ph"}`` from a reset token, or None if invalid/expired."""
    try:
        data = _reset_serializer(secret_key).loads(token, max_age=max_age)
    except (SignatureExpired, BadSignature):
        return None
    if not isinstance(data, dict) or not isinstance(data.get("email"), str):
        return None
    return {"email": data["email"], "ph": str(data.get("ph") or "")}
