"""Password hashing utilities.

Learn: Uses bcrypt for secure password hashing. bcrypt automatically
handles salting and is resistant to rainbow table attacks.
The work factor (rounds=12) takes ~100ms per hash on modern hardware.
"""

import bcrypt

from webforum.errors import HashingError

# bcrypt only looks at the first 72 bytes of the password.
MAX_PASSWORD_BYTES = 72


def hash_password(password: str, rounds: int = 12) -> str:
    """Hash a password with bcrypt.

    Learn: bcrypt includes a random salt automatically and produces
    hashes starting with "$2b$". The same password hashes differently
    every time. Passwords are truncated to 72 bytes (bcrypt's limit).
    """
    pw_bytes = password.encode("utf-8")[:MAX_PASSWORD_BYTES]
    try:
        salt = bcrypt.gensalt(rounds=rounds)
        return bcrypt.hashpw(pw_bytes, salt).decode("utf-8")
    except (ValueError, TypeError) as e:
        raise HashingError() from e


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against its hash.

    Returns False on mismatch and on malformed hashes; never raises.
    """
    try:
        pw_bytes = password.encode("utf-8")[:MAX_PASSWORD_BYTES]
        hash_bytes = password_hash.encode("utf-8")
        return bcrypt.checkpw(pw_bytes, hash_bytes)
    except (ValueError, TypeError):
        return False
