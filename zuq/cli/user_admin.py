"""User administration script for ZUQ.

Commands:
    add       Add a new user
    list      List all users
"""

import argparse
import asyncio
import sys
from getpass import getpass
from typing import Optional

from zuq.database import close_db, init_db
from zuq.models.user import User
from zuq.services.auth import get_password_hash


async def add_user(
    username: str,
    password: str,
    email: str,
    full_name: Optional[str] = None,
    is_admin: bool = False,
) -> None:
    """Add a new user."""
    await init_db()
    try:
        if await User.find_one(User.username == username):
            print(f"Error: User '{username}' already exists.")
            sys.exit(1)

        if await User.find_one(User.email == email):
            print(f"Error: Email '{email}' already in use.")
            sys.exit(1)

        user = User(
            username=username,
            email=email,
            full_name=full_name,
            hashed_password=get_password_hash(password),
            is_superuser=is_admin,
            is_active=True,
        )
        await user.insert()

        role = "admin" if is_admin else "user"
        print(f"User '{username}' created successfully as {role}.")
    finally:
        await close_db()


async def list_users() -> None:
    """List all users."""
    await init_db()
    try:
        users = await User.find_all().sort("+username").to_list()

        if not users:
            print("No users found.")
            return

        print(f"{'Username':<20} {'Email':<30} {'Admin':<6} {'Active':<6} {'Last Login':<20}")
        print("-" * 90)

        for user in users:
            last_login = user.last_login.strftime("%Y-%m-%d %H:%M") if user.last_login else "Never"
            admin = "Yes" if user.is_superuser else "No"
            active = "Yes" if user.is_active else "No"
            print(f"{user.username:<20} {user.email:<30} {admin:<6} {active:<6} {last_login:<20}")
    finally:
        await close_db()


def get_password_interactive(confirm: bool = True) -> str:
    """Get password interactively from user."""
    password = getpass("Password: ")
    if not password:
        print("Error: Password cannot be empty.")
        sys.exit(1)

    if confirm:
        password2 = getpass("Confirm password: ")
        if password != password2:
            print("Error: Passwords do not match.")
            sys.exit(1)

    return password


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="zuq-user",
        description="User administration for ZUQ",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    add_parser = subparsers.add_parser("add", help="Add a new user")
    add_parser.add_argument("username", help="Username for the new user")
    add_parser.add_argument("--email", "-e", required=True, help="Email address")
    add_parser.add_argument("--name", "-n", help="Full name")
    add_parser.add_argument("--admin", "-a", action="store_true", help="Make user an admin")
    add_parser.add_argument("--password", "-p", help="Password (will prompt if not provided)")

    subparsers.add_parser("list", help="List all users")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    try:
        if args.command == "add":
            password = args.password if args.password else get_password_interactive()
            asyncio.run(add_user(args.username, password, args.email, args.name, args.admin))
        elif args.command == "list":
            asyncio.run(list_users())
    except KeyboardInterrupt:
        print("\nAborted.")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
