"""
Script to register a citizen or staff user so they can receive notifications.

Usage:
    python scripts/create_user.py

Environment Variables Used:
    DATABASE_URL or DB_HOST/DB_PORT/DB_NAME/DB_USER/DB_PASSWORD
"""

import asyncio
import sys

from sqlalchemy import select

from csrms.core.config import settings
from csrms.core.database import Database
from csrms.models.user import Citizen, User, UserRole


async def create_user():
    """Create a user interactively."""
    print("=" * 60)
    print("Community Service Request System - User Registration")
    print("=" * 60)
    print()

    user_id = input("Enter user ID: ").strip()
    if not user_id:
        print("Error: User ID is required")
        sys.exit(1)

    email = input("Enter email: ").strip()
    if not email:
        print("Error: Email is required")
        sys.exit(1)

    full_name = input("Enter full name [optional]: ").strip() or None
    role = input(f"Role {UserRole.ALL_ROLES} [default: citizen]: ").strip() or UserRole.CITIZEN
    if role not in UserRole.ALL_ROLES:
        print(f"Error: Role must be one of {', '.join(UserRole.ALL_ROLES)}")
        sys.exit(1)

    print()
    print("Creating user...")

    database = Database.from_settings(settings)
    try:
        async with database.session() as db:
            stmt = select(User).where(User.user_id == user_id)
            result = await db.execute(stmt)
            if result.scalar_one_or_none():
                print(f"Error: User '{user_id}' already exists")
                sys.exit(1)

            db.add(User(user_id=user_id, email=email, full_name=full_name, role=role))
            if role == UserRole.CITIZEN:
                await db.flush()
                db.add(Citizen(user_id=user_id, total_requests_resolved=0))
            await db.commit()

        print()
        print("User created successfully!")
        print(f"User ID: {user_id}")
        print(f"Email: {email}")
        print(f"Role: {role}")
        print()
    except Exception as e:
        print(f"Error creating user: {e}")
        sys.exit(1)
    finally:
        await database.dispose()


if __name__ == "__main__":
    asyncio.run(create_user())
