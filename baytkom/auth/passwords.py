from typing import Optional

from fastapi_users.password import PasswordHelper

password_helper = PasswordHelper()


def hash_password(plain: str) -> str:
    return password_helper.hash(plain)


def verify_password(plain: str, hashed: str) -> tuple[bool, Optional[str]]:
    """Returns (ok, upgraded_hash); upgraded_hash is set when the stored hash should be replaced."""
    return password_helper.verify_and_update(plain, hashed)
