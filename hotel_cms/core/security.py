"""Password hashing and opaque token helpers."""

import hashlib
import secrets

from passlib.context import CryptContext

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=12)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plaintext password against its hash."""
    if not hashed_password:
        return False
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Generate password hash."""
    return pwd_context.hash(password)


def generate_token(nbytes: int = 32) -> str:
    """Random hex token for reset and verification links."""
    return secrets.token_hex(nbytes)


def hash_token(token: str) -> str:
    """sha256 digest used to store tokens at rest."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()
