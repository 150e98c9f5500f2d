"""Password hashing utilities using bcrypt."""

import asyncio
from concurrent.futures import ThreadPoolExecutor

import bcrypt

from forum.core.config import settings

_executor = ThreadPoolExecutor(max_workers=4)

# bcrypt only looks at the first 72 bytes; longer input is rejected, not cut.
MAX_PASSWORD_BYTES = 72


def fits_bcrypt(password: str) -> bool:
    return len(password.encode()) <= MAX_PASSWORD_BYTES


def _hash_sync(password: str) -> str:
    salt = bcrypt.gensalt(rounds=settings.auth.bcrypt_rounds)
    return bcrypt.hashpw(password.encode(), salt).decode()


DUMMY_HASH = _hash_sync("dummy-password")


async def hash_password(password: str) -> str:
    """Hash a password using bcrypt.

    Raises ``ValueError`` for passwords longer than 72 bytes.
    """
    if not fits_bcrypt(password):
        raise ValueError("Password must be at most 72 bytes")
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(_executor, _hash_sync, password)


async def verify_password(plain: str, hashed: str) -> bool:
    """Verify a password against a bcrypt hash.

    Passwords longer than 72 bytes never match. ``bcrypt.checkpw`` compares
    digests in constant time.
    """
    if not fits_bcrypt(plain):
        return False
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(
        _executor,
        lambda: bcrypt.checkpw(plain.encode(), hashed.encode()),
    )
