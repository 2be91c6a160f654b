#!/usr/bin/env python3
"""
Mint a bearer token for an email address, e.g. for calling
``/api/addressbook/protected-data`` from scripts.

Usage:
    SECRET_KEY=... python create_token.py --email admin@example.com --days 30
"""

import argparse
from datetime import timedelta

from address_book_api.app.core.config import settings
from address_book_api.app.core.security import TokenService


def main():
    ap = argparse.ArgumentParser(description="Create a signed access token.")
    ap.add_argument("--email", required=True, help="Email to embed as the token subject")
    ap.add_argument("--days", type=int, default=0, help="Lifetime in days (default: ACCESS_TOKEN_EXPIRE_MINUTES)")
    args = ap.parse_args()

    service = TokenService(settings.validate())
    expires = timedelta(days=args.days) if args.days else None
    print(service.create_access_token({"sub": args.email, "email": args.email}, expires_delta=expires))


if __name__ == "__main__":
    main()
