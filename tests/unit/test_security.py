"""Tests for password hashing utilities."""

import pytest

from forum.core.security import DUMMY_HASH, hash_password, verify_password


class TestPasswordHashing:
    """Tests for bcrypt password operations."""

    async def test_hash_and_verify(self) -> None:
        hashed = await hash_password("Holliday123!")
        assert await verify_password("Holliday123!", hashed) is True

    async def test_wrong_password_fails(self) -> None:
        hashed = await hash_password("Correct1!")
        assert await verify_password("Wrong1!", hashed) is False

    async def test_hash_is_salted(self) -> None:
        first = await hash_password("Same1234!")
        second = await hash_password("Same1234!")
        assert first != second

    async def test_dummy_hash_exists(self) -> None:
        assert DUMMY_HASH.startswith("$2")

    async def test_dummy_hash_does_not_match_real(self) -> None:
        assert await verify_password("realpassword", DUMMY_HASH) is False

    async def test_input_sharing_first_72_bytes_does_not_verify(self) -> None:
        password = "A1!" + "x" * 69
        hashed = await hash_password(password)
        assert await verify_password(password + "anything", hashed) is False
        assert await verify_password(password, hashed) is True

    async def test_hashing_over_72_bytes_is_rejected(self) -> None:
        with pytest.raises(ValueError, match="at most 72 bytes"):
            await hash_password("A1!" + "x" * 70)
