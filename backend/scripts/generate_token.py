#!/usr/bin/env python3
"""Print an admin bearer token signed with JWT_SECRET (valid for 24h)."""

import sys

from app.core.config import get_settings
from app.services.auth import AuthError, AuthService


def generate_token(subject="admin"):
    try:
        token = AuthService(get_settings()).create_jwt(subject)
    except (AuthError, ValueError) as e:
        print(f"Error generating token: {e}")
        print("Make sure JWT_SECRET and DATABASE_URL are set in your environment")
        return None
    print(f"Bearer {token}")
    return token


if __name__ == "__main__":
    subject = sys.argv[1] if len(sys.argv) > 1 else "admin"
    generate_token(subject)
