#!/usr/bin/env python3
"""Create a member who can sign in to the gateway.

    python tools/create_member.py alice --role ROLE_EMPLOYEE --role ROLE_ADMIN

The password is read from ``--password`` or prompted for.
"""

from __future__ import annotations

import argparse
import getpass
import sys

from nasa_gateway.database import SessionLocal, init_database
from nasa_gateway.security.policy import ADMIN, EMPLOYEE
from nasa_gateway.services.members import MemberExistsError, create_member


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("user_id", help="login name, at most 50 characters")
    parser.add_argument("--password", help="prompted for when omitted")
    parser.add_argument(
        "--role",
        dest="roles",
        action="append",
        choices=[EMPLOYEE, ADMIN],
        help="repeat for several roles (default: ROLE_EMPLOYEE)",
    )
    parser.add_argument(
        "--inactive", action="store_true", help="create the member disabled"
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    if len(args.user_id) > 50:
        print("❌ user_id must be at most 50 characters", file=sys.stderr)
        return 2
    password = args.password or getpass.getpass(f"Password for {args.user_id}: ")
    roles = args.roles or [EMPLOYEE]

    init_database()
    with SessionLocal() as db:
        try:
            member = create_member(
                db, args.user_id, password, roles, active=not args.inactive
            )
        except MemberExistsError as exc:
            print(f"❌ {exc}", file=sys.stderr)
            return 1
    print(f"✅ Created member {member.user_id} with roles {', '.join(sorted(roles))}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
