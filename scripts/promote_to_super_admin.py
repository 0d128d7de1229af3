"""
Script to grant a user the global super_admin role
Usage: python scripts/promote_to_super_admin.py <email>
"""
import sys
import asyncio
from sqlalchemy import select
from app.db.session import get_db_session
from app.models import User, RoleAssignment, RoleKey


async def promote_user_to_super_admin(email: str):
    """Grant (or re-activate) a global super_admin assignment"""
    async with get_db_session() as db:
        # Find user by email
        result = await db.execute(
            select(User).where(User.email == email)
        )
        user = result.scalar_one_or_none()

        if not user:
            print(f"❌ User with email '{email}' not found")
            return False

        print(f"\n📧 User: {user.email}")
        print(f"👤 Name: {user.full_name}")

        result = await db.execute(
            select(RoleAssignment).where(
                RoleAssignment.user_id == user.id,
                RoleAssignment.role == RoleKey.SUPER_ADMIN,
                RoleAssignment.tenant_id.is_(None),
                RoleAssignment.journal_id.is_(None),
            )
        )
        assignment = result.scalar_one_or_none()

        if assignment and assignment.is_active:
            print(f"\n✅ User is already a super_admin")
            return True

        if assignment:
            assignment.is_active = True
        else:
            db.add(RoleAssignment(user_id=user.id, role=RoleKey.SUPER_ADMIN, is_active=True))
        await db.commit()

        print(f"\n🎉 SUCCESS! User promoted to super_admin")
        return True


async def list_all_users():
    """List all users with their active roles"""
    async with get_db_session() as db:
        result = await db.execute(select(User).order_by(User.id))
        users = result.scalars().all()

        if not users:
            print("❌ No users found in database")
            return

        print(f"\n📋 Found {len(users)} user(s):\n")
        for user in users:
            roles = await db.execute(
                select(RoleAssignment.role, RoleAssignment.tenant_id, RoleAssignment.journal_id).where(
                    RoleAssignment.user_id == user.id,
                    RoleAssignment.is_active.is_(True),
                )
            )
            print(f"  📧 {user.email}")
            print(f"     Name: {user.full_name}")
            print(f"     ID: {user.id}")
            for role, tenant_id, journal_id in roles.all():
                print(f"     Role: {role.value} (tenant={tenant_id}, journal={journal_id})")
            print()


def main():
    if len(sys.argv) < 2:
        print("Usage: python scripts/promote_to_super_admin.py <email>")
        print("\nOr use: python scripts/promote_to_super_admin.py --list")
        print("\nExample: python scripts/promote_to_super_admin.py admin@example.com")
        sys.exit(1)

    if sys.argv[1] == "--list":
        asyncio.run(list_all_users())
    else:
        email = sys.argv[1]
        success = asyncio.run(promote_user_to_super_admin(email))
        sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
