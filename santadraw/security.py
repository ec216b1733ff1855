from __future__ import annotations

import base64
import hashlib
import os

from cryptography.fernet import Fernet, InvalidToken
from flask import current_app
from passlib.context import CryptContext


pwd_context = CryptContext(
    schemes=["argon2"],
    deprecated="auto",
)


def hash_passphrase(passphrase: str) -> str:
    return pwd_context.hash(passphrase)


def verify_passphrase(passphrase: str, stored_hash: str) -> bool:
    return pwd_context.verify(passphrase, stored_hash)


# Receiver ids are stored as Fernet tokens; only the giver and the group
# admin see them decrypted.


def _assignment_fernet() -> Fernet:
    """Returns a Fernet instance keyed by ASSIGNMENT_ENC_KEY or derived from SECRET_KEY."""
    explicit = (current_app.config.get("ASSIGNMENT_ENC_KEY") or os.environ.get("ASSIGNMENT_ENC_KEY") or "").strip()
    if explicit:
        # Expect a urlsafe base64-encoded 32-byte key.
        return Fernet(explicit.encode("utf-8"))

    # Fernet wants a urlsafe base64-encoded 32-byte key; derive a stable one.
    secret = (current_app.config.get("SECRET_KEY") or "").encode("utf-8")
    digest = hashlib.sha256(b"santadraw-assignments|" + secret).digest()
    return Fernet(base64.urlsafe_b64encode(digest))


def encrypt_assignment_recipient(receiver_id: int) -> str:
    """Encrypt receiver_id -> ciphertext token (string)."""
    token = _assignment_fernet().encrypt(str(int(receiver_id)).encode("utf-8"))
    return token.decode("utf-8")


def decrypt_assignment_recipient(token: str) -> int:
    """Decrypt ciphertext token -> receiver_id (int). Raises ValueError on failure."""
    try:
        raw = _assignment_fernet().decrypt(token.encode("utf-8"))
        return int(raw.decode("utf-8"))
    except (InvalidToken, ValueError, TypeError) as e:
        raise ValueError("Invalid assignment token") from e
