#!/usr/bin/env python3
"""
Admin Provisioning Script

Creates an approved admin account with a hashed password, or promotes an
existing account. Use this instead of the ADMIN_PASSWORD login bypass in
production.

Usage: python scripts/seed_admin.py --email ops@college.edu --name "Placement Cell"
       (password is prompted for)
"""
import argparse
import getpass
import sys
sys.path.insert(0, '.')

from skillgate.core.auth import hash_password
from skillgate.db.mongodb import init_mongo_indexes
from skillgate.services.auth_service import normalize_email
from skillgate.services.mongo_service import UserStore


def seed_admin(email: str, name: str, password: str) -> str:
    """Create or promote the admin. Returns 'created' or 'updated'."""
    users = UserStore()
    email = normalize_email(email)
    existing = users.get_by_email(email)
    fields = {
        "name": name,
        "password": hash_password(password),
        "role": "admin",
        "status": "approved",
    }
    if existing:
        users.update(existing["_id"], fields)
        return "updated"
    users.insert({"email": email, **fields})
    return "created"


def main(argv=None):
    parser = argparse.ArgumentParser(description="Provision a SkillGate admin account")
    parser.add_argument("--email", required=True)
    parser.add_argument("--name", default="System Administrator")
    args = parser.parse_args(argv)

    password = getpass.getpass("Admin password: ")
    if len(password) < 8:
        print("Password must be at least 8 characters")
        return 1
    if password != getpass.getpass("Repeat password: "):
        print("Passwords do not match")
        return 1

    init_mongo_indexes()
    outcome = seed_admin(args.email, args.name, password)
    print(f"✅ Admin {args.email} {outcome}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
