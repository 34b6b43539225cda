# backend/create_user.py
import argparse

from database import SessionLocal, init_db
from models.users import User
from utils.hashing import get_password_hash, validate_password


def create_user(email, password, role, full_name=None):
    email = email.strip().lower()
    error = validate_password(password)
    if error:
        print(f"Password rejected: {error}")
        return None

    db = SessionLocal()
    try:
        existing_user = db.query(User).filter(User.email == email).first()
        if existing_user:
            print(f"User '{email}' already exists with role '{existing_user.role}'.")
            return existing_user

        user = User(
            email=email,
            password_hash=get_password_hash(password),
            role=role,
            full_name=full_name,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        print(f"Created user: {email} (role: {role})")
        return user
    finally:
        db.close()


if __name__ == '__main__':
    parser = argparse.ArgumentParser(description='Create a dashboard user.')
    parser.add_argument('email', help='Login email')
    parser.add_argument('password', help='Password')
    parser.add_argument('role', choices=['admin', 'staff'], help='User role')
    parser.add_argument('--full-name', default=None, help='Display name')

    args = parser.parse_args()
    init_db()
    create_user(args.email, args.password, args.role, args.full_name)
