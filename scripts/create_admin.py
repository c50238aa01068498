"""
Create the first superadmin and print an access token for it.

    python scripts/create_admin.py --email admin@example.com --name "System Admin" \
        --password-hash '<hash from your identity provider>'

Passwords are hashed outside this service; the stored value is taken as given.
"""
import argparse
import asyncio
import logging

from sqlalchemy import select

from trafficdesk.core.constants import UserRole
from trafficdesk.core.database import close_db, get_session_factory, init_db
from trafficdesk.core.security import create_access_token
from trafficdesk.models.user import User

logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
logger = logging.getLogger("create_admin")


async def create_admin(name: str, email: str, password_hash: str) -> str:
    await init_db()
    try:
        async with get_session_factory()() as db:
            result = await db.execute(select(User).where(User.email == email.lower()))
            admin = result.scalar_one_or_none()
            if admin:
                logger.info("User %s already exists (%s)", admin.email, admin.role.value)
            else:
                admin = User(
                    name=name,
                    email=email.lower(),
                    password_hash=password_hash,
                    role=UserRole.SUPERADMIN,
                )
                db.add(admin)
                await db.commit()
                logger.info("Superadmin %s created", admin.email)
            return create_access_token(admin)
    finally:
        await close_db()


def main():
    parser = argparse.ArgumentParser(description="Create a superadmin account")
    parser.add_argument("--email", required=True)
    parser.add_argument("--name", default="System Admin")
    parser.add_argument("--password-hash", required=True)
    args = parser.parse_args()

    token = asyncio.run(create_admin(args.name, args.email, args.password_hash))
    print(token)


if __name__ == "__main__":
    main()
