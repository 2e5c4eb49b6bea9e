"""Create the first administrator from the command line.

Usage: python -m scripts.create_admin <email> <name> <password>
"""
from __future__ import annotations

import sys

from dotenv import load_dotenv

load_dotenv()

from fastapi import HTTPException  # noqa: E402

from roadtrack.db import init_engine, session_scope  # noqa: E402
from roadtrack.schemas.user import AdminCreate  # noqa: E402
from roadtrack.services.setup import create_admin  # noqa: E402


def main(argv: list[str]) -> int:
    if len(argv) != 3:
        print(__doc__)
        return 2
    email, name, password = argv

    init_engine()
    try:
        with session_scope() as db:
            user = create_admin(db, AdminCreate(email=email, name=name, password=password))
            user_email, user_id = user.email, user.id
    except HTTPException as exc:
        print(f"Could not create administrator: {exc.detail['error']}", file=sys.stderr)
        return 1

    print("==========================================")
    print("Administrator created")
    print(f"    email: {user_email} (id: {user_id})")
    print("Log in with POST /api/auth/login")
    print("==========================================")
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
