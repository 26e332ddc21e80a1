#!/usr/bin/env python3
# scripts/issue_token.py - Mint a bearer token for calling the config API locally
import argparse
import os
import sys
from datetime import timedelta

# Add the project root to Python path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from rental_admin.core.security import create_access_token  # noqa: E402


def main():
    parser = argparse.ArgumentParser(description="Issue a JWT access token for the rental admin API")
    parser.add_argument("user_id", type=int, help="Numeric user id stored in created_by/updated_by")
    parser.add_argument(
        "--role",
        action="append",
        dest="roles",
        default=None,
        help="Role to embed (repeatable). Defaults to admin",
    )
    parser.add_argument("--minutes", type=int, default=60, help="Token lifetime in minutes")
    args = parser.parse_args()

    token = create_access_token(
        args.user_id,
        roles=args.roles or ["admin"],
        expires_delta=timedelta(minutes=args.minutes),
    )
    print(token)


if __name__ == "__main__":
    main()
