#!/usr/bin/env python3
# scripts/create_admin.py
import argparse
import getpass
import sys
from backoffice.database import SessionLocal, create_tables
from backoffice.crud.user import create_user
from backoffice.models.user import UserRole
from backoffice.schemas.user import UserCreate

def main():
    parser = argparse.ArgumentParser(description="Создать администратора back-office")
    parser.add_argument("--username", default="admin")
    parser.add_argument("--email", required=True)
    parser.add_argument("--full-name", default=None)
    args = parser.parse_args()

    password = getpass.getpass("Password: ")

    create_tables()
    db = SessionLocal()
    try:
        user_in = UserCreate(
            username=args.username,
            email=args.email,
            full_name=args.full_name,
            password=password,
            role=UserRole.ADMIN
        )
        user = create_user(db, user_in)
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)
    finally:
        db.close()

    print(f"Admin created: {user.username}")

if __name__ == "__main__":
    main()
