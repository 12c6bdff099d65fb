"""
👤 USER MANAGEMENT HELPER
Quick script to inspect accounts and grant or revoke the admin role.
Admins can only be created from here; the API never lets a user change their own role.

Usage:
    python manage_users.py --list
    python manage_users.py --promote "jane@example.com"
    python manage_users.py --demote "jane@example.com"
    python manage_users.py --delete "jane@example.com"
"""

import sys

from blogspace.config import get_settings
from blogspace.database import Database
from blogspace.models.user import ROLE_ADMIN, ROLE_AUTHOR
from blogspace.services import users as user_service


def _open_database(database=None):
    if database is None:
        database = Database(get_settings())
        database.migrate_schema()
    return database


def list_users(database=None):
    """List all users"""
    db = _open_database(database).session()

    try:
        users = user_service.list_users(db, limit=10_000)

        if not users:
            print("No users found.")
            return []

        print("\n📋 USERS:\n")
        print(f"{'ID':<6} {'Username':<25} {'Email':<35} {'Role':<10} {'Joined':<20}")
        print("-" * 96)

        for u in users:
            joined = u.created_at.strftime("%Y-%m-%d %H:%M") if u.created_at else "-"
            role = "👑 admin" if u.is_admin else u.role
            print(f"{u.id:<6} {u.username:<25} {u.email:<35} {role:<10} {joined:<20}")

        print()
        return users
    finally:
        db.close()


def set_role(email, role, database=None):
    """Change a user's role"""
    db = _open_database(database).session()

    try:
        user = user_service.get_user_by_email(db, email)

        if not user:
            print(f"❌ User '{email}' not found!")
            return False

        if user.role == role:
            print(f"ℹ️  User '{email}' already has role '{role}'")
            return True

        user_service.update_user(db, user.id, {"role": role}, allowed=("role",))

        print(f"✅ User '{email}' is now '{role}'")
        print("   The new role applies from the user's next login.")
        return True
    finally:
        db.close()


def delete_user(email, database=None):
    """Permanently delete a user and everything they wrote"""
    db = _open_database(database).session()

    try:
        user = user_service.get_user_by_email(db, email)

        if not user:
            print(f"❌ User '{email}' not found!")
            return False

        user_service.delete_user(db, user.id)

        print(f"✅ User '{email}' has been deleted")
        return True
    finally:
        db.close()


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv

    if not argv:
        print(__doc__)
        return 1

    command = argv[0]

    if command == "--list":
        list_users()
        return 0

    if command in ("--promote", "--demote", "--delete"):
        if len(argv) < 2:
            print(f"Usage: python manage_users.py {command} <email>")
            return 1

        email = argv[1]
        if command == "--promote":
            ok = set_role(email, ROLE_ADMIN)
        elif command == "--demote":
            ok = set_role(email, ROLE_AUTHOR)
        else:
            ok = delete_user(email)
        return 0 if ok else 1

    print(f"❌ Unknown command: {command}")
    print(__doc__)
    return 1


if __name__ == "__main__":
    sys.exit(main())
