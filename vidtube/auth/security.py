"""Password hashing, token issuing and refresh-token sealing.

These are plain functions over a user row and explicit secrets; nothing here
reads settings or touches the database.
"""

import base64
import hmac
import os
import time
import uuid
from typing import Any

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from jose import JWTError, jwt
from passlib.context import CryptContext

from vidtube.db.models import User

ALGORITHM = "HS256"
ACCESS = "access"
REFRESH = "refresh"

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=10)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(user: User, password: str | None) -> bool:
    """Check a plaintext password against the user's stored hash."""
    if not password:
        return False
    return pwd_context.verify(password, user.password)


def _issue(claims: dict[str, Any], secret: str, ttl_seconds: int) -> str:
    now = int(time.time())
    payload = {
        **claims,
        "jti": uuid.uuid4().hex,
        "iat": now,
        "exp": now + ttl_seconds,
    }
    return jwt.encode(payload, secret, algorithm=ALGORITHM)


def create_access_token(user: User, secret: str, expiry_minutes: int) -> str:
    """Short-lived token identifying the user on every request."""
    claims = {
        "sub": user.id,
        "type": ACCESS,
        "username": user.username,
        "email": user.email,
        "fullName": user.full_name,
    }
    return _issue(claims, secret, expiry_minutes * 60)


def create_refresh_token(user: User, secret: str, expiry_days: int) -> str:
    """Long-lived token that can only be exchanged for a new token pair."""
    return _issue({"sub": user.id, "type": REFRESH}, secret, expiry_days * 86400)


def decode_token(token: str, secret: str, expected_type: str) -> str | None:
    """Verify a token and return its subject, or None if it is unusable.

    Expired, tampered, wrongly signed and wrong-type tokens all yield None.
    """
    try:
        payload = jwt.decode(token, secret, algorithms=[ALGORITHM])
    except JWTError:
        return None
    if payload.get("type") != expected_type:
        return None
    return payload.get("sub")


def load_encryption_key(enc_key: str | bytes) -> bytes:
    """Decode the refresh-token sealing key; it must be 32 bytes (AES-256).

    Raises:
        ValueError: If the key is not base64 or has the wrong length
    """
    if isinstance(enc_key, str):
        try:
            key = base64.b64decode(enc_key, validate=True)
        except ValueError as e:
            raise ValueError(
                "Encryption key must be base64-encoded. "
                'Generate with: python -c "import secrets, base64; '
                'print(base64.b64encode(secrets.token_bytes(32)).decode())"'
            ) from e
    else:
        key = enc_key

    if len(key) != 32:
        raise ValueError(
            f"Encryption key must be exactly 32 bytes, got {len(key)} bytes"
        )
    return key


def seal_refresh_token(key: bytes, token: str) -> bytes:
    """Encrypt a refresh token for storage: 12-byte nonce + AES-GCM ciphertext."""
    nonce = os.urandom(12)
    return nonce + AESGCM(key).encrypt(nonce, token.encode("utf-8"), None)


def open_refresh_token(key: bytes, blob: bytes) -> str | None:
    """Decrypt a stored refresh token, or None if the blob does not open."""
    if len(blob) < 12:
        return None
    try:
        plaintext = AESGCM(key).decrypt(blob[:12], blob[12:], None)
    except InvalidTag:
        return None
    return plaintext.decode("utf-8")


def matches_stored_refresh_token(key: bytes, user: User, token: str) -> bool:
    """True only if ``token`` is the refresh token currently stored for the user."""
    if not user.refresh_token_enc:
        return False
    stored = open_refresh_token(key, user.refresh_token_enc)
    if stored is None:
        return False
    return hmac.compare_digest(stored.encode("utf-8"), token.encode("utf-8"))
