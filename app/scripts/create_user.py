"""
Create a user (e.g. first admin). Run from project root:
  python -m app.scripts.create_user EMAIL PASSWORD FIRST_NAME LAST_NAME PHONE [role]
Example:
  python -m app.scripts.create_user admin@example.com your-secure-password Ada Lovelace 555-0100 Admin
"""
import argparse
import logging
import sys

from app.core.database import SessionLocal
from app.core.security import (
    PASSWORD_MAX_BYTES,
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    hash_password,
    password_fits,
)
from app.models.user import User, UserRole
from app.schemas.auth import normalize_email
from app.services.errors import AccountExistsError
from app.services.user_store import UserStore

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Create an account without going through sign-up.")
    parser.add_argument("email", help="Account email (unique)")
    parser.add_argument("password", help=f"Password ({PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} chars)")
    parser.add_argument("first_name")
    parser.add_argument("last_name")
    parser.add_argument("phone")
    parser.add_argument(
        "role",
        nargs="?",
        default=UserRole.USER.value,
        choices=[r.value for r in UserRole],
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    email = normalize_email(args.email)
    if "@" not in email or len(email) > 255:
        print("Invalid email.", file=sys.stderr)
        return 1
    if not (PASSWORD_MIN_LEN <= len(args.password) <= PASSWORD_MAX_LEN):
        print(f"Password must be {PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} characters.", file=sys.stderr)
        return 1
    if not password_fits(args.password):
        print(f"Password must be at most {PASSWORD_MAX_BYTES} bytes in UTF-8.", file=sys.stderr)
        return 1

    db = SessionLocal()
    try:
        store = UserStore(db)
        if store.get_by_email(email) is not None:
            print(f"User '{email}' already exists.", file=sys.stderr)
            return 1
        user = User(
            first_name=args.first_name,
            last_name=args.last_name,
            email=email,
            phone=args.phone,
            password=hash_password(args.password),
            role=UserRole(args.role),
        )
        store.add(user)
        print(f"Created user '{email}' with role '{args.role}' (id {user.id}).")
        return 0
    except AccountExistsError as e:
        print(e.message, file=sys.stderr)
        return 1
    except Exception as e:
        logger.exception("Could not create user: %s", e)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
