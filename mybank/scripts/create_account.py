"""
Create an account without the registration page (e.g. a staff account). Run from project root:
  python -m mybank.scripts.create_account USERNAME EMAIL PASSWORD [--role ROLE] [--phone PHONE]
Example:
  python -m mybank.scripts.create_account teller teller@mybank.test a-long-password --role Staff
"""
import argparse
import sys
from decimal import Decimal

from sqlalchemy.orm import Session

from mybank.core.config import get_settings
from mybank.core.database import SessionLocal
from mybank.core.errors import DuplicateEmailError, MyBankError
from mybank.core.security import PASSWORD_MIN_LEN, PasswordHasher
from mybank.models import DEFAULT_ROLE
from mybank.repositories import AccountRepository


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Create a MyBank account (no registration UI).")
    parser.add_argument("username", help="Display name (1-255 chars)")
    parser.add_argument("email", help="Login email (must be unused)")
    parser.add_argument("password", help=f"Password (at least {PASSWORD_MIN_LEN} chars)")
    parser.add_argument("--role", default=DEFAULT_ROLE, help=f"Role claim (default {DEFAULT_ROLE})")
    parser.add_argument("--phone", default=None, help="Optional phone number")
    parser.add_argument("--balance", type=int, default=100_000, help="Opening balance (default 100000)")
    return parser


def create_account(db: Session, args: argparse.Namespace, hasher: PasswordHasher) -> int:
    """Create the account described by args; returns a process exit code."""
    username = args.username.strip()
    if not username or len(username) > 255:
        print("Invalid username length.", file=sys.stderr)
        return 1
    if len(args.password) < PASSWORD_MIN_LEN:
        print(f"Password must be at least {PASSWORD_MIN_LEN} characters.", file=sys.stderr)
        return 1
    if args.balance < 0:
        print("Balance must not be negative.", file=sys.stderr)
        return 1

    repo = AccountRepository(db)
    try:
        account = repo.create(
            username=username,
            email=args.email.strip(),
            password_hash=hasher.hash(args.password),
            balance=Decimal(args.balance),
            phone=args.phone,
            role=args.role,
        )
    except DuplicateEmailError:
        print(f"Email '{args.email}' is already registered.", file=sys.stderr)
        return 1
    except MyBankError as e:
        print(e.message, file=sys.stderr)
        return 1
    print(f"Created account {account.id} '{username}' with role '{account.role}'.")
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    hasher = PasswordHasher(rounds=get_settings().BCRYPT_ROUNDS)
    db = SessionLocal()
    try:
        return create_account(db, args, hasher)
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
