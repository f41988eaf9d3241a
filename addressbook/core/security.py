"""Password hashing helpers."""

import bcrypt

# bcrypt only looks at the first 72 bytes; newer releases reject anything longer.
MAX_PASSWORD_BYTES = 72
PASSWORD_TOO_LONG_MESSAGE = f"Password cannot exceed {MAX_PASSWORD_BYTES} bytes"


def password_too_long(password: str) -> bool:
    return len(password.encode("utf-8")) > MAX_PASSWORD_BYTES


def hash_password(password: str) -> str:
    if password_too_long(password):
        raise ValueError(PASSWORD_TOO_LONG_MESSAGE)
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    if password_too_long(password):
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False
