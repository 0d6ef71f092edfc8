"""
Mint a bearer token for local testing

Uses JWT_SECRET / JWT_ALGORITHM from the environment (or .env), so the token
is accepted by a server running with the same settings.

Run: python -m scripts.issue_token --role dean --email dean@college.edu
"""
import argparse
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from datetime import timedelta

from procureflow.domain.enums import UserRole
from procureflow.utils.jwt import JWTValidator
from procureflow.utils.time import utc_now, parse_iso, format_iso


def main() -> int:
    parser = argparse.ArgumentParser(description="Issue a development bearer token")
    parser.add_argument("--role", required=True, choices=[r.value for r in UserRole])
    parser.add_argument("--email", required=True)
    parser.add_argument("--user-id", default=None, help="Defaults to the email address")
    parser.add_argument("--name", default=None)
    parser.add_argument("--hours", type=float, default=8, help="Lifetime in hours (default: 8)")
    parser.add_argument("--expires-at", default=None, help="ISO 8601 expiry; overrides --hours")
    args = parser.parse_args()

    if args.expires_at:
        expires_in = parse_iso(args.expires_at) - utc_now()
        if expires_in.total_seconds() <= 0:
            print(f"❌ --expires-at {args.expires_at} is in the past", file=sys.stderr)
            return 1
    else:
        expires_in = timedelta(hours=args.hours)

    token = JWTValidator().issue_token(
        user_id=args.user_id or args.email,
        email=args.email,
        role=UserRole(args.role),
        name=args.name,
        expires_in=expires_in
    )

    print(f"# {args.role} <{args.email}>, expires {format_iso(utc_now() + expires_in)}", file=sys.stderr)
    print(token)
    return 0


if __name__ == "__main__":
    sys.exit(main())
