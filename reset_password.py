#!/usr/bin/env python3
"""
Reset a user's password in the Address Book SQLite database.

This script DOES NOT read or reveal any existing passwords.  It sets a
new bcrypt hash for the specified user email and clears any pending
reset token.

Usage:
    python reset_password.py --db ./address_book.db --email admin@ex.com --password "NewStrongPass!234"

If --password is omitted, you will be prompted to enter it securely.
"""

import argparse
import getpass
import os
import sys

from address_book_api.app.core.security import hash_password
from address_book_api.app.repositories.credential_repository import CredentialRepository


def main():
    ap = argparse.ArgumentParser(description="Reset an Address Book user password (SQLite).")
    ap.add_argument("--db", required=True, help="Path to SQLite DB file (e.g., ./address_book.db)")
    ap.add_argument("--email", required=True, help="User email to update")
    ap.add_argument("--password", help="New password. If omitted, you'll be prompted securely.")
    args = ap.parse_args()

    db_path = os.path.abspath(args.db)
    if not os.path.exists(db_path):
        print(f"[!] DB not found: {db_path}", file=sys.stderr)
        sys.exit(1)

    new_password = args.password or getpass.getpass("Enter NEW password: ")
    if not new_password:
        print("[!] Empty password is not allowed.", file=sys.stderr)
        sys.exit(1)

    users = CredentialRepository(db_path)
    user = users.get_by_email(args.email)
    if user is None:
        print(f"[!] No user found with email: {args.email}", file=sys.stderr)
        sys.exit(2)

    users.update_password(user.id, hash_password(new_password))
    print(f"[+] Password updated for user: {args.email}")


if __name__ == "__main__":
    main()
