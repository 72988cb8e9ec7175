"""Utility script to create the initial administrator in the database."""

from __future__ import annotations

import argparse

from sqlalchemy.exc import SQLAlchemyError

from approvals.application.use_cases.users import create_user
from approvals.domain.entities import UserRole
from approvals.domain.errors import ApprovalsError
from approvals.infrastructure.database import SessionLocal, initialize_database


def parse_args() -> argparse.Namespace:
    """Parse command line arguments for user creation."""

    parser = argparse.ArgumentParser(
        description="Create the initial administrator for the project approvals service.",
    )
    parser.add_argument(
        "--name",
        default="Administrator",
        help="Full name of the user (default: Administrator)",
    )
    parser.add_argument(
        "--email",
        default="admin@example.com",
        help="Email address of the user (default: admin@example.com)",
    )
    parser.add_argument("--phone", default=None, help="Phone number for SMS notifications")
    parser.add_argument(
        "--role",
        choices=[role.value for role in UserRole],
        default=UserRole.ADMIN.value,
        help="Role granted to the user (default: ADMIN)",
    )
    return parser.parse_args()


def main() -> None:
    """Create a user using the provided command line arguments."""

    args = parse_args()
    initialize_database()

    session = SessionLocal()
    try:
        user = create_user(
            session,
            name=args.name,
            email=args.email,
            phone=args.phone,
            role=UserRole(args.role),
        )
    except ApprovalsError as exc:
        session.rollback()
        raise SystemExit(f"Could not create the user: {exc}") from exc
    except SQLAlchemyError as exc:
        session.rollback()
        raise SystemExit(f"Failed to store the user in the database: {exc}") from exc
    else:
        print(
            "User created:\n"
            f"  ID: {user.id}\n"
            f"  Name: {user.name}\n"
            f"  Email: {user.email or '-'}\n"
            f"  Role: {user.role.value}"
        )
    finally:
        session.close()


if __name__ == "__main__":
    main()
