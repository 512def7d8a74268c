# shop_manager/utils/auth.py
from __future__ import annotations

import os
import hmac
import hashlib
from typing import Union

import bcrypt

# ---- PBKDF2 settings (alternate scheme) ----
_PBKDF2_PREFIX = "pbkdf2_sha256$"
_PBKDF2_DEFAULT_ITERS = 200_000
_PBKDF2_SALT_BYTES = 16

# ---- bcrypt defaults / policy ----
_BCRYPT_DEFAULT_ROUNDS = 12          # used when hashing
_BCRYPT_MIN_ACCEPTABLE_ROUNDS = 12   # rehash if lower than this

_BCRYPT_PREFIXES = ("$2a$", "$2b$", "$2y$")


# --------------------------- PBKDF2 helpers ---------------------------

def _hash_pbkdf2(password: str, iterations: int = _PBKDF2_DEFAULT_ITERS) -> str:
    iterations = max(int(iterations), _PBKDF2_DEFAULT_ITERS)
    salt = os.urandom(_PBKDF2_SALT_BYTES)
    dk = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, iterations)
    return f"{_PBKDF2_PREFIX}{iterations}${salt.hex()}${dk.hex()}"


def _split_pbkdf2(encoded: str) -> tuple[int, bytes, bytes]:
    # expected format: pbkdf2_sha256$<iters>$<salt_hex>$<digest_hex>
    rest = encoded[len(_PBKDF2_PREFIX):]
    iters_str, salt_hex, dk_hex = rest.split("$", 2)
    return int(iters_str), bytes.fromhex(salt_hex), bytes.fromhex(dk_hex)


def _verify_pbkdf2(password: str, encoded: str) -> bool:
    try:
        iters, salt, expected = _split_pbkdf2(encoded)
    except ValueError:
        return False
    got = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, iters)
    return hmac.compare_digest(got, expected)


# ---------------------------- bcrypt helpers ----------------------------

def _hash_bcrypt(password: str, rounds: int | None = None) -> str:
    rounds = _BCRYPT_DEFAULT_ROUNDS if rounds is None else int(rounds)
    # Enforce minimum acceptable cost
    rounds = max(rounds, _BCRYPT_MIN_ACCEPTABLE_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds)).decode("utf-8")


def _verify_bcrypt(password: str, encoded: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), encoded.encode("utf-8"))
    except ValueError:
        # malformed salt/hash
        return False


def _parse_bcrypt_cost(hash_str: str) -> int | None:
    """
    Extract the cost from a bcrypt hash: $2b$12$...
    Returns None if not parseable.
    """
    parts = hash_str.split("$")
    # ['', '2b', '12', 'rest...']
    if len(parts) < 4:
        return None
    try:
        return int(parts[2])
    except ValueError:
        return None


def _normalize(stored_hash: Union[str, bytes, None]) -> str:
    if stored_hash is None:
        return ""
    if isinstance(stored_hash, bytes):
        try:
            stored_hash = stored_hash.decode("utf-8")
        except UnicodeDecodeError:
            return ""
    return stored_hash.strip()


# ------------------------------- Public API -------------------------------

def hash_password(password: str, scheme: str = "bcrypt", *, rounds: int | None = None) -> str:
    """
    Hash `password` with a salted scheme.

    - scheme="bcrypt" (default); `rounds` overrides the cost, clamped to the
      policy minimum.
    - scheme="pbkdf2" for PBKDF2-HMAC-SHA256.

    The produced hash is always compatible with verify_password().
    """
    if not isinstance(password, str) or password == "":
        raise ValueError("Password must be a non-empty string")

    scheme = (scheme or "bcrypt").lower().strip()
    if scheme == "pbkdf2":
        return _hash_pbkdf2(password)
    if scheme != "bcrypt":
        raise ValueError(f"Unknown password scheme: {scheme}")
    return _hash_bcrypt(password, rounds=rounds)


def verify_password(password: str, stored_hash: Union[str, bytes, None]) -> bool:
    """
    Verify `password` against `stored_hash`.
    Supports:
      - PBKDF2: 'pbkdf2_sha256$...'
      - bcrypt: $2a$ / $2b$ / $2y$...
    Anything else (including the old unsalted 16-hex-digit hashes) never verifies.
    """
    if password is None:
        return False
    h = _normalize(stored_hash)
    if not h:
        return False

    if h.startswith(_PBKDF2_PREFIX):
        return _verify_pbkdf2(password, h)
    if h.startswith(_BCRYPT_PREFIXES):
        return _verify_bcrypt(password, h)

    # Unknown scheme
    return False


def needs_rehash(stored_hash: Union[str, bytes, None], *, bcrypt_min_rounds: int | None = None) -> bool:
    """
    Policy hook: return True if the given stored hash should be upgraded.

      - PBKDF2 hashes migrate to bcrypt on the next successful login.
      - bcrypt hashes below the minimum cost are rehashed.
      - Unknown/malformed hashes → True.
    """
    min_rounds = _BCRYPT_MIN_ACCEPTABLE_ROUNDS if bcrypt_min_rounds is None else bcrypt_min_rounds
    h = _normalize(stored_hash)
    if not h or h.startswith(_PBKDF2_PREFIX):
        return True
    if h.startswith(_BCRYPT_PREFIXES):
        cost = _parse_bcrypt_cost(h)
        return cost is None or cost < min_rounds
    return True
