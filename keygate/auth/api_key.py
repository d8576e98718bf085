"""API key validation and hashing utilities."""

import hashlib

import bcrypt


def hash_api_key(api_key: str) -> str:
    """
    Hash an API key using bcrypt.

    Bcrypt only accepts 72 bytes of input, so the fixed-length SHA-256
    digest of the key is hashed instead of the key itself.

    Args:
        api_key: Plain text API key to hash

    Returns:
        Bcrypt hash of the API key digest
    """
    salt = bcrypt.gensalt()
    key_bytes = digest_api_key(api_key).encode("utf-8")
    hashed = bcrypt.hashpw(key_bytes, salt)
    return hashed.decode("utf-8")


def verify_api_key(api_key: str, key_hash: str) -> bool:
    """
    Verify an API key against its hash.

    Args:
        api_key: Plain text API key to verify
        key_hash: Bcrypt hash to verify against

    Returns:
        True if the API key matches the hash, False otherwise
    """
    key_bytes = digest_api_key(api_key).encode("utf-8")
    hash_bytes = key_hash.encode("utf-8")
    try:
        return bcrypt.checkpw(key_bytes, hash_bytes)
    except ValueError:
        # Malformed stored hash
        return False


def digest_api_key(api_key: str) -> str:
    """
    Compute the deterministic lookup digest of an API key.

    Bcrypt hashes are salted and cannot be queried, so records are
    indexed by this SHA-256 digest and then confirmed with bcrypt.

    Args:
        api_key: Plain text API key

    Returns:
        Hex-encoded SHA-256 digest (always 64 characters)
    """
    return hashlib.sha256(api_key.encode("utf-8")).hexdigest()
