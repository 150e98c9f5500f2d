"""Create a forum member in the database.

Usage:
    python -m scripts.create_user --username Doc --password Holliday123! \
        --email doc@example.com --display-name "Doc Holliday"
"""

import argparse
import asyncio

from forum.core.database import Base, async_session_factory, engine
from forum.core.exceptions import ConflictError
from forum.core.security import hash_password
from forum.models import chat_message, comment  # noqa: F401
from forum.repositories.user_repo import UserRepository


async def create_user(
    username: str, password: str, email: str, display_name: str
) -> None:
    """Create a member unless the username is already taken."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with async_session_factory() as session:
        repo = UserRepository(session)
        existing = await repo.find_by_username(username)
        if existing:
            print(f"User '{username}' already exists (id={existing.id}).")
            return

        hashed = await hash_password(password)
        try:
            user = await repo.create(
                username=username,
                display_name=display_name,
                email=email.lower(),
                password_hash=hashed,
            )
        except ConflictError as exc:
            print(f"Cannot create '{username}': {exc.message}")
            return
        await session.commit()
        print(f"User created: {username} (id={user.id})")

    await engine.dispose()


def main() -> None:
    parser = argparse.ArgumentParser(description="Create a forum member")
    parser.add_argument("--username", required=True, help="Login name")
    parser.add_argument("--password", required=True, help="Password")
    parser.add_argument("--email", required=True, help="Email address")
    parser.add_argument("--display-name", help="Display name (defaults to username)")
    args = parser.parse_args()

    asyncio.run(
        create_user(
            args.username, args.password, args.email, args.display_name or args.username
        )
    )


if __name__ == "__main__":
    main()
