"""Print a signed access token for a user id to stdout.

Usage:
    python -m backend.issue_token <user_id> [expires_minutes]
"""
import sys

from backend.auth.jwt_handler import create_access_token


def main(argv: list[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    if not 1 <= len(args) <= 2:
        print("Usage: python -m backend.issue_token <user_id> [expires_minutes]", file=sys.stderr)
        return 2

    try:
        user_id = int(args[0])
        expires_minutes = int(args[1]) if len(args) == 2 else None
    except ValueError:
        print("user_id and expires_minutes must be integers", file=sys.stderr)
        return 2

    print(create_access_token(user_id, expires_minutes=expires_minutes))
    return 0


if __name__ == "__main__":
    sys.exit(main())
