from __future__ import annotations

import hashlib
import secrets

from personal_hub.config import settings

_ALGORITHM = "pbkdf2_sha256"


def hash_password(password: str, *, iterations: int | None = None) -> str:
    rounds = int(iterations or settings.password_hash_iterations)
    salt = secrets.token_bytes(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, rounds)
    return f"{_ALGORITHM}${rounds}${salt.hex()}${digest.hex()}"


def verify_password(digest: str, password: str) -> bool:
    try:
        algorithm, rounds_raw, salt_hex, expected_hex = digest.split("$")
        rounds = int(rounds_raw)
        salt = bytes.fromhex(salt_hex)
    except ValueError:
        return False
    if algorithm != _ALGORITHM or rounds <= 0:
        return False
    candidate = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, rounds)
    return secrets.compare_digest(candidate.hex(), expected_hex)


def needs_rehash(digest: str) -> bool:
    parts = digest.split("$")
    if len(parts) != 4 or parts[0] != _ALGORITHM:
        return True
    try:
        return int(parts[1]) < settings.password_hash_iterations
    except ValueError:
        return True
