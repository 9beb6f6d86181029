"""
Fernet encryption helpers for distributing quiz files.

Encrypted quiz files come in two layouts:
- key file based: the raw Fernet token
- password based: b"SALT" + 16-byte salt + Fernet token, where the key is
  derived from the password with PBKDF2
"""

import base64
import os
from typing import Optional

from cryptography.fernet import Fernet
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC


SALT_PREFIX = b"SALT"
SALT_LENGTH = 16
KDF_ITERATIONS = 480000  # OWASP recommendation for 2024


def derive_key_from_password(password: str, salt: bytes) -> bytes:
    """Derive a Fernet key from a password using PBKDF2."""
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=32,
        salt=salt,
        iterations=KDF_ITERATIONS,
    )
    key_material = kdf.derive(password.encode('utf-8'))
    return base64.urlsafe_b64encode(key_material)


def write_new_key(path) -> bytes:
    """
    Generate a Fernet key and write it to a key file.

    Returns:
        The key written, so the caller can encrypt with it straight away
    """
    key = Fernet.generate_key()
    with open(path, 'wb') as f:
        f.write(key)
    return key


def is_password_based(payload: bytes) -> bool:
    return payload.startswith(SALT_PREFIX)


def encrypt_payload(plaintext: bytes, key: Optional[bytes] = None, password: Optional[str] = None) -> bytes:
    """
    Encrypt a quiz payload with either a Fernet key or a password.

    Args:
        plaintext: CSV bytes to encrypt
        key: Base64 Fernet key (key file layout)
        password: Password (salted layout); takes precedence over key

    Returns:
        Encrypted bytes ready to be written to an .enc file
    """
    if password is not None:
        salt = os.urandom(SALT_LENGTH)
        fernet = Fernet(derive_key_from_password(password, salt))
        return SALT_PREFIX + salt + fernet.encrypt(plaintext)

    if key is None:
        raise ValueError("Either a key or a password is required")
    return Fernet(key).encrypt(plaintext)


def decrypt_payload(payload: bytes, secret: str) -> bytes:
    """
    Decrypt an encrypted quiz payload.

    The secret is treated as a password when the payload carries a salt,
    otherwise as a base64 Fernet key.

    Raises:
        cryptography.fernet.InvalidToken: If the secret does not match
        ValueError: If the secret is not a valid Fernet key
    """
    if is_password_based(payload):
        start = len(SALT_PREFIX)
        salt = payload[start:start + SALT_LENGTH]
        token = payload[start + SALT_LENGTH:]
        key = derive_key_from_password(secret, salt)
    else:
        token = payload
        key = secret.strip().encode('utf-8')

    return Fernet(key).decrypt(token)
