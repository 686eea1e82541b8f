"""
Create a user directly in the store (e.g. the first admin). Run from project root:
  python -m waternet.scripts.create_user NAME EMAIL PASSWORD [role]
Example:
  python -m waternet.scripts.create_user "Network Admin" admin@example.org your-secure-password admin
"""
import argparse
import logging
import sys

from pydantic import ValidationError

from waternet.core.config import get_settings
from waternet.core.database import SessionLocal
from waternet.core.logging import configure_logging
from waternet.schemas.auth import RegisterRequest
from waternet.services.accounts import EmailAlreadyRegisteredError, register_user

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a WaterNet user without going through the API.")
    parser.add_argument("name", help="Display name (1-255 chars)")
    parser.add_argument("email", help="Login email (unique)")
    parser.add_argument("password", help="Password (8-128 chars)")
    parser.add_argument("role", nargs="?", default="user", choices=["user", "admin"])
    args = parser.parse_args(argv)

    configure_logging(get_settings())
    try:
        body = RegisterRequest(
            name=args.name, email=args.email, password=args.password, role=args.role
        )
    except ValidationError as e:
        for error in e.errors():
            print(f"Invalid {'.'.join(str(p) for p in error['loc'])}: {error['msg']}", file=sys.stderr)
        return 1

    db = SessionLocal()
    try:
        user = register_user(db, body)
    except EmailAlreadyRegisteredError:
        print(f"User '{body.email}' already exists.", file=sys.stderr)
        return 1
    finally:
        db.close()
    print(f"Created user '{user.email}' (id={user.id}) with role '{user.role}'.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
