# scripts/manage_users.py

import argparse
import asyncio
import getpass

from sqlalchemy.future import select

from baytkom.auth.passwords import hash_password
from baytkom.crud import user as user_crud
from baytkom.db import async_session, create_db_and_tables
from baytkom.models.user import User
from baytkom.schemas.user import UserCreate

# 🎯 Demo household
USERS_TO_SEED = [
    {"username": "owner", "password": "owner1234", "role": "admin", "display_name": "Owner"},
    {"username": "mama", "password": "mama1234", "role": "household", "display_name": "Mama",
     "can_approve": True, "can_add_shortages": True, "can_approve_trips": True},
    {"username": "sara", "password": "sara1234", "role": "household", "display_name": "Sara"},
    {"username": "maria", "password": "maria1234", "role": "maid", "display_name": "Maria",
     "can_add_shortages": True},
    {"username": "driver", "password": "driver1234", "role": "driver", "display_name": "Driver"},
]


async def seed_users():
    await create_db_and_tables()
    async with async_session() as session:
        for user_data in USERS_TO_SEED:
            if await user_crud.get_user_by_username(session, user_data["username"]):
                print(f"⚠️  User '{user_data['username']}' already exists. Skipping.")
                continue
            user = await user_crud.create_user(session, UserCreate(**user_data))
            print(f"✅ Created: {user.username} ({user.role})")
        print("✅ Done seeding users.\n")


async def list_users():
    async with async_session() as session:
        users = await user_crud.list_users(session)
        for user in users:
            flags = [f for f in ("can_approve", "can_add_shortages", "can_approve_trips") if getattr(user, f)]
            state = "suspended" if user.is_suspended else "active"
            print(f"{user.username:<16} {user.role:<10} {state:<10} {', '.join(flags)}")


async def reset_password(username: str, password: str):
    async with async_session() as session:
        user = await user_crud.get_user_by_username(session, username)
        if not user:
            print(f"⚠️  No user found with username: {username}")
            return
        user.password = hash_password(password)
        await session.commit()
        print(f"🔑 Password reset for {username}")


async def delete_users(username=None, role=None):
    async with async_session() as session:
        if username:
            user = await user_crud.get_user_by_username(session, username)
            if user:
                await session.delete(user)
                await session.commit()
                print(f"🗑️  Deleted user: {username}")
            else:
                print(f"⚠️  No user found with username: {username}")
        elif role:
            result = await session.execute(select(User).where(User.role == role))
            users = result.scalars().all()
            if users:
                for user in users:
                    await session.delete(user)
                await session.commit()
                print(f"🗑️  Deleted all users with role: {role}")
            else:
                print(f"⚠️  No users found with role: {role}")
        else:
            print("❌ Specify either --username or --role to delete users.")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Manage Baytkom users")
    parser.add_argument("--seed", action="store_true", help="Seed the demo household")
    parser.add_argument("--list", action="store_true", help="List users")
    parser.add_argument("--reset-password", action="store_true", help="Reset a user's password")
    parser.add_argument("--delete", action="store_true", help="Delete users")
    parser.add_argument("--username", type=str, help="Username to act on")
    parser.add_argument("--role", type=str, help="Role of users to delete (admin/household/maid/driver)")

    args = parser.parse_args()

    if args.seed:
        asyncio.run(seed_users())
    elif args.list:
        asyncio.run(list_users())
    elif args.reset_password and args.username:
        asyncio.run(reset_password(args.username, getpass.getpass("New password: ")))
    elif args.delete:
        asyncio.run(delete_users(username=args.username, role=args.role))
    else:
        print("❗ Usage:")
        print("  python -m scripts.manage_users --seed")
        print("  python -m scripts.manage_users --list")
        print("  python -m scripts.manage_users --reset-password --username mama")
        print("  python -m scripts.manage_users --delete --username sara")
        print("  python -m scripts.manage_users --delete --role driver")
