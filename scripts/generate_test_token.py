#!/usr/bin/env python3
"""Generate a JWT token pair for manual API testing.

Usage: python scripts/generate_test_token.py <user_id> <email>
"""

from __future__ import annotations

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from assessment_platform.core.auth import issue_token_pair  # noqa: E402


def main(argv: list[str]) -> int:
    if len(argv) != 2:
        print(__doc__.strip().splitlines()[-1], file=sys.stderr)
        return 2

    user_id, email = argv
    tokens = issue_token_pair(user_id, email.strip().lower())
    print(f"Access Token:\n{tokens.access_token}\n")
    print(f"Refresh Token:\n{tokens.refresh_token}")
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
