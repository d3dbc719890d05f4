"""
Job Portal Database Seeder

Creates the first super-admin so that accounts can be provisioned:
- Email and password come from SEED_ADMIN_EMAIL / SEED_ADMIN_PASSWORD
- Skipped when any admin already exists
"""

import os
import sys
sys.path.insert(0, ".")

from app.core.config import get_settings
from app.core.security import PasswordHasher
from app.db.session import Database
from app.services.user_lifecycle import seed_super_admin


def seed_database():
    """Seed the database with the bootstrap super-admin."""
    email = os.environ.get("SEED_ADMIN_EMAIL")
    password = os.environ.get("SEED_ADMIN_PASSWORD")
    if not email or not password:
        print("SEED_ADMIN_EMAIL and SEED_ADMIN_PASSWORD must be set.")
        sys.exit(1)

    settings = get_settings()
    database = Database(settings.DATABASE_URL)
    database.create_all()
    db = database.session()

    try:
        user = seed_super_admin(db, PasswordHasher(settings.BCRYPT_ROUNDS), email, password)
        if user is None:
            print("An admin already exists. Skipping...")
            return
        print("✅ Database seeded successfully!")
        print(f"   - {user.email} (username: {user.username}) [SUPER ADMIN]")
        print("   Password must be changed on first login.")

    except Exception as e:
        db.rollback()
        print(f"❌ Error seeding database: {e}")
        raise
    finally:
        db.close()
        database.dispose()


if __name__ == "__main__":
    seed_database()
