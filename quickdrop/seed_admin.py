"""
Database seeding script for the first admin.

Admins can only be promoted by another admin, so the first one has to be
created out of band. Pass the email the admin signs in with at the
identity provider:

    python -m quickdrop.seed_admin admin@quickdrop.io
"""

import argparse
import asyncio

from quickdrop.app.db.session import AsyncSessionLocal, init_db
from quickdrop.app.db.repository import Repository
from quickdrop.app.models.enums import UserRole
from quickdrop.app.models.user import User
from quickdrop.app.services.audit import AuditAction, log_event

# Register every table before create_all
from quickdrop.app.models.rider import Rider  # noqa: F401
from quickdrop.app.models.parcel import Parcel  # noqa: F401
from quickdrop.app.models.payment import Payment  # noqa: F401
from quickdrop.app.models.earning import Earning  # noqa: F401
from quickdrop.app.models.audit_log import AuditLog  # noqa: F401


async def seed_admin(email: str, name: str = None):
    await init_db()

    async with AsyncSessionLocal() as db:
        repo = Repository(db)
        print("🌱 Starting admin seeding...")

        async with repo.transaction():
            existing = await repo.find_one(User, User.email == email)
            if existing is None:
                user = await repo.insert(User(email=email, name=name, role=UserRole.ADMIN))
                print(f"✅ Created ADMIN user ({email})")
            elif existing.role == UserRole.ADMIN:
                print(f"ℹ️  {email} is already an admin, skipping seeding")
                return
            else:
                await repo.update_where(User, User.id == existing.id, role=UserRole.ADMIN)
                user = existing
                print(f"✅ Promoted {email} from {existing.role.value} to ADMIN")

            await log_event(
                repo,
                AuditAction.ROLE_CHANGED,
                target_id=user.id,
                metadata={"to": UserRole.ADMIN.value, "source": "seed_admin"},
            )


def main():
    parser = argparse.ArgumentParser(description="Create or promote the first QuickDrop admin")
    parser.add_argument("email")
    parser.add_argument("--name", default=None)
    args = parser.parse_args()
    asyncio.run(seed_admin(args.email, args.name))


if __name__ == "__main__":
    main()
